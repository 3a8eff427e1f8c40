"""Shopping cart models."""

from datetime import timedelta
from decimal import Decimal
from typing import Optional

from . import db, utcnow


MIN_QUANTITY = 0.5
# Upper bound in meters for a single cart line.
MAX_QUANTITY = 10000.0


class Cart(db.Model):
    """One cart per user holding at most one line per fabric.

    The ``version`` column drives SQLAlchemy's optimistic concurrency check:
    every mutation touches the cart row, so two requests racing on the same
    cart cannot both commit.
    """

    __tablename__ = "carts"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    version = db.Column(db.Integer, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    items = db.relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.id",
    )

    __mapper_args__ = {"version_id_col": version}

    def find_item(self, fabric_id: int) -> Optional["CartItem"]:
        for item in self.items:
            if item.fabric_id == fabric_id:
                return item
        return None

    def add_item(self, fabric, quantity: float) -> "CartItem":
        """Merge ``quantity`` into the fabric's line, creating it at the current price."""

        item = self.find_item(fabric.id)
        if item is not None:
            item.quantity = item.quantity + quantity
            return item

        item = CartItem(fabric=fabric, quantity=quantity, unit_price=fabric.price)
        self.items.append(item)
        return item

    def remove_item(self, fabric_id: int) -> bool:
        item = self.find_item(fabric_id)
        if item is None:
            return False
        self.items.remove(item)
        return True

    def clear(self) -> None:
        self.items = []

    def touch(self, ttl: timedelta) -> None:
        """Refresh the idle-expiry window; also bumps the version on flush."""

        now = utcnow()
        self.updated_at = now
        self.expires_at = now + ttl

    @property
    def total(self) -> float:
        return round(sum(item.line_total for item in self.items), 2)

    def to_dict(self) -> dict:
        """Serialize the cart with resolved fabric data and the derived total."""

        return {
            "id": self.id,
            "userId": self.user_id,
            "items": [item.to_dict() for item in self.items],
            "itemCount": len(self.items),
            "total": self.total,
            "expiresAt": self.expires_at.isoformat() if self.expires_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


class CartItem(db.Model):
    """A (fabric, quantity in meters, frozen unit price) line."""

    __tablename__ = "cart_items"
    __table_args__ = (
        db.UniqueConstraint("cart_id", "fabric_id", name="uq_cart_items_cart_fabric"),
        db.CheckConstraint("quantity >= 0.5", name="ck_cart_items_min_quantity"),
    )

    id = db.Column(db.Integer, primary_key=True)
    cart_id = db.Column(
        db.Integer, db.ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    fabric_id = db.Column(
        db.Integer, db.ForeignKey("fabrics.id", ondelete="CASCADE"), nullable=False
    )
    quantity = db.Column(db.Float, nullable=False, default=1)
    unit_price = db.Column(db.Numeric(10, 2), nullable=False)

    cart = db.relationship("Cart", back_populates="items")
    fabric = db.relationship(
        "Fabric", backref=db.backref("cart_items", cascade="all, delete-orphan")
    )

    @property
    def unit_price_value(self) -> float:
        return float(self.unit_price) if isinstance(self.unit_price, Decimal) else self.unit_price

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price_value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "fabricId": self.fabric_id,
            "fabric": self.fabric.to_summary() if self.fabric else None,
            "quantity": self.quantity,
            "unitPrice": self.unit_price_value,
            "lineTotal": round(self.line_total, 2),
        }

"""Fabric catalog model."""

from decimal import Decimal

from . import db, utcnow


# Largest value a Numeric(10, 2) price column holds.
MAX_PRICE = Decimal("99999999.99")

FABRIC_TYPES = (
    "Cotton",
    "Silk",
    "Linen",
    "Denim",
    "Wool",
    "Polyester",
    "Net",
    "Velvet",
    "Chiffon",
    "Georgette",
    "Crepe",
    "Satin",
    "Organza",
    "Rayon",
    "Muslin",
    "Other",
)


class ImageSetMixin:
    """Dual image representation shared by fabrics and posts.

    ``images`` keeps the ordered URLs, ``images_meta`` pairs each URL with the
    storage provider identifier needed to delete the blob later.
    """

    def append_images(self, stored_images) -> None:
        if not stored_images:
            return
        urls = list(self.images or [])
        meta = list(self.images_meta or [])
        for image in stored_images:
            urls.append(image.url)
            meta.append({"url": image.url, "publicId": image.public_id})
        self.images = urls
        self.images_meta = meta
        if not self.image_url:
            self.image_url = urls[0]

    def image_public_ids(self) -> list[str]:
        return [entry["publicId"] for entry in self.images_meta or [] if entry.get("publicId")]


class Fabric(ImageSetMixin, db.Model):
    """A fabric sold per meter."""

    __tablename__ = "fabrics"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    fabric_type = db.Column(
        db.Enum(*FABRIC_TYPES, name="fabric_type_enum"), nullable=False, default="Other"
    )
    color = db.Column(db.String(64), nullable=True)
    image_url = db.Column(db.String(512), nullable=False)
    images = db.Column(db.JSON, nullable=False, default=list)
    images_meta = db.Column(db.JSON, nullable=False, default=list)
    in_stock = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self) -> dict:
        """Serialize the fabric to a dictionary."""

        price = float(self.price) if isinstance(self.price, Decimal) else self.price
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": price,
            "fabricType": self.fabric_type,
            "color": self.color,
            "imageUrl": self.image_url,
            "images": self.images or [],
            "imagesMeta": self.images_meta or [],
            "inStock": self.in_stock,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_summary(self) -> dict:
        price = float(self.price) if isinstance(self.price, Decimal) else self.price
        return {
            "id": self.id,
            "name": self.name,
            "price": price,
            "fabricType": self.fabric_type,
            "color": self.color,
            "imageUrl": self.image_url,
            "inStock": self.in_stock,
        }

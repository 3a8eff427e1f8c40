"""Creator post model."""

from decimal import Decimal

from . import db, utcnow
from .fabric import ImageSetMixin


class Post(ImageSetMixin, db.Model):
    """Image-backed content published by a creator."""

    __tablename__ = "posts"

    id = db.Column(db.Integer, primary_key=True)
    creator_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    fabric_id = db.Column(
        db.Integer, db.ForeignKey("fabrics.id", ondelete="SET NULL"), nullable=True
    )
    fabric_type = db.Column(db.String(64), nullable=False, default="Other")
    fabric_link = db.Column(db.String(512), nullable=True)
    image_url = db.Column(db.String(512), nullable=False)
    images = db.Column(db.JSON, nullable=False, default=list)
    images_meta = db.Column(db.JSON, nullable=False, default=list)
    price = db.Column(db.Numeric(10, 2), nullable=True)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    creator = db.relationship("User", backref=db.backref("posts", lazy="dynamic"))
    # Deleting a fabric leaves its posts in place with the reference cleared.
    fabric = db.relationship("Fabric", backref=db.backref("posts"))

    def to_dict(self) -> dict:
        """Serialize the post with its creator and linked fabric summaries."""

        price = float(self.price) if isinstance(self.price, Decimal) else self.price
        creator = self.creator
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "fabricId": self.fabric_id,
            "fabric": self.fabric.to_summary() if self.fabric else None,
            "fabricType": self.fabric_type,
            "fabricLink": self.fabric_link,
            "imageUrl": self.image_url,
            "images": self.images or [],
            "imagesMeta": self.images_meta or [],
            "price": price,
            "isFeatured": self.is_featured,
            "creator": {
                "id": creator.id,
                "name": creator.name,
                "email": creator.email,
                "profilePic": creator.profile_pic,
            }
            if creator
            else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

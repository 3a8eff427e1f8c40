"""Role-specific profile models attached one-to-one to a user."""

from decimal import Decimal
from typing import Optional

from . import db, utcnow


CUSTOMER_TIERS = ("bronze", "silver", "gold", "platinum")
CREATOR_EXPERIENCE = ("beginner", "intermediate", "expert", "professional")
CREATOR_SPECIALIZATIONS = (
    "Traditional Wear",
    "Western Wear",
    "Fusion Wear",
    "Casual Wear",
    "Formal Wear",
    "Kids Wear",
    "Home Decor",
    "Accessories",
    "Embroidery",
    "Tailoring",
    "Pattern Making",
    "Styling",
    "Other",
)
CREATOR_VERIFICATION_STATUSES = ("not_applied", "pending", "approved", "rejected")
ADMIN_PERMISSIONS = (
    "manage_users",
    "view_users",
    "ban_users",
    "verify_creators",
    "manage_posts",
    "feature_posts",
    "moderate_content",
    "manage_fabrics",
    "manage_inventory",
    "manage_settings",
    "view_analytics",
    "manage_admins",
)
ADMIN_ACTION_HISTORY_LIMIT = 100

DEFAULT_PREFERENCES = {
    "newsletter": True,
    "notifications": True,
    "language": "en",
    "timezone": "UTC",
}


class CustomerProfile(db.Model):
    """Shopping profile for customer accounts."""

    __tablename__ = "customer_profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    preferences = db.Column(db.JSON, nullable=False, default=lambda: dict(DEFAULT_PREFERENCES))
    preferred_fabric_types = db.Column(db.JSON, nullable=False, default=list)
    wishlist = db.Column(db.JSON, nullable=False, default=list)
    tier = db.Column(db.String(16), nullable=False, default="bronze")
    total_spent = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    order_count = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    user = db.relationship(
        "User",
        backref=db.backref("customer_profile", uselist=False, cascade="all, delete-orphan"),
    )

    def wishlist_fabric_ids(self) -> list[int]:
        return [entry["fabricId"] for entry in self.wishlist or []]

    def add_to_wishlist(self, fabric_id: int) -> bool:
        """Add a fabric to the wishlist; returns False when already present."""

        if fabric_id in self.wishlist_fabric_ids():
            return False
        # JSON columns only track reassignment.
        self.wishlist = list(self.wishlist or []) + [
            {"fabricId": fabric_id, "addedAt": utcnow().isoformat()}
        ]
        return True

    def remove_from_wishlist(self, fabric_id: int) -> None:
        self.wishlist = [
            entry for entry in self.wishlist or [] if entry["fabricId"] != fabric_id
        ]

    def to_dict(self) -> dict:
        total_spent = (
            float(self.total_spent) if isinstance(self.total_spent, Decimal) else self.total_spent
        )
        return {
            "preferences": self.preferences,
            "preferredFabricTypes": self.preferred_fabric_types,
            "wishlist": self.wishlist,
            "tier": self.tier,
            "totalSpent": total_spent,
            "orderCount": self.order_count,
        }


class CreatorProfile(db.Model):
    """Portfolio profile for creator accounts."""

    __tablename__ = "creator_profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    bio = db.Column(db.String(500), nullable=False, default="")
    specialization = db.Column(db.JSON, nullable=False, default=list)
    experience = db.Column(db.String(16), nullable=False, default="beginner")
    location = db.Column(db.JSON, nullable=False, default=dict)
    social_links = db.Column(db.JSON, nullable=False, default=dict)
    is_verified = db.Column(db.Boolean, nullable=False, default=False)
    verification_status = db.Column(db.String(16), nullable=False, default="not_applied")
    total_posts = db.Column(db.Integer, nullable=False, default=0)
    featured_posts = db.Column(db.Integer, nullable=False, default=0)
    total_views = db.Column(db.Integer, nullable=False, default=0)
    total_likes = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(16), nullable=False, default="active")
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    user = db.relationship(
        "User",
        backref=db.backref("creator_profile", uselist=False, cascade="all, delete-orphan"),
    )

    def record_post_created(self) -> None:
        self.total_posts = (self.total_posts or 0) + 1

    def record_post_deleted(self, was_featured: bool) -> None:
        self.total_posts = max((self.total_posts or 0) - 1, 0)
        if was_featured:
            self.featured_posts = max((self.featured_posts or 0) - 1, 0)

    def record_feature_change(self, featured: bool) -> None:
        delta = 1 if featured else -1
        self.featured_posts = max((self.featured_posts or 0) + delta, 0)

    def to_dict(self) -> dict:
        return {
            "bio": self.bio,
            "specialization": self.specialization,
            "experience": self.experience,
            "location": self.location,
            "socialLinks": self.social_links,
            "isVerified": self.is_verified,
            "verificationStatus": self.verification_status,
            "analytics": {
                "totalPosts": self.total_posts,
                "featuredPosts": self.featured_posts,
                "totalViews": self.total_views,
                "totalLikes": self.total_likes,
            },
            "status": self.status,
        }


class AdminProfile(db.Model):
    """Permissions and moderation history for admin accounts."""

    __tablename__ = "admin_profiles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    admin_role = db.Column(db.String(32), nullable=False, default="super_admin")
    department = db.Column(db.String(32), nullable=False, default="operations")
    permissions = db.Column(db.JSON, nullable=False, default=lambda: list(ADMIN_PERMISSIONS))
    preferences = db.Column(db.JSON, nullable=False, default=dict)
    action_history = db.Column(db.JSON, nullable=False, default=list)
    total_actions = db.Column(db.Integer, nullable=False, default=0)
    last_active_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    user = db.relationship(
        "User",
        backref=db.backref("admin_profile", uselist=False, cascade="all, delete-orphan"),
    )

    def log_action(
        self,
        action: str,
        target_type: str,
        target_id: Optional[int] = None,
        details: Optional[str] = None,
    ) -> None:
        """Append a moderation action, keeping only the most recent entries."""

        now = utcnow()
        entry = {
            "action": action,
            "targetType": target_type,
            "targetId": target_id,
            "details": details,
            "timestamp": now.isoformat(),
        }
        history = list(self.action_history or []) + [entry]
        self.action_history = history[-ADMIN_ACTION_HISTORY_LIMIT:]
        self.total_actions = (self.total_actions or 0) + 1
        self.last_active_at = now

    def to_dict(self) -> dict:
        return {
            "adminRole": self.admin_role,
            "department": self.department,
            "permissions": self.permissions,
            "preferences": self.preferences,
            "totalActions": self.total_actions,
            "lastActiveAt": self.last_active_at.isoformat() if self.last_active_at else None,
        }

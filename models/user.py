"""User model definition."""

import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from . import db, utcnow


ROLES = ("customer", "creator", "admin")
PUBLIC_ROLES = ("customer", "creator")
VERIFICATION_TOKEN_BYTES = 32


def hash_verification_token(token: str) -> str:
    """Return the digest stored in place of a raw verification token."""

    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class User(db.Model):
    """Represents a platform account shared by every role."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.Enum(*ROLES, name="user_role_enum"), nullable=False, default="customer")
    phone = db.Column(db.String(32), nullable=True)
    profile_pic = db.Column(db.String(512), nullable=False, default="")

    email_verified = db.Column(db.Boolean, nullable=False, default=False)
    email_verification_token_hash = db.Column(db.String(64), nullable=True, index=True)
    email_verification_expires = db.Column(db.DateTime, nullable=True)

    is_active = db.Column(
        db.Boolean,
        nullable=False,
        default=True,
        server_default=db.text("true"),
    )
    failed_login_attempts = db.Column(db.Integer, nullable=False, default=0)
    locked_until = db.Column(db.DateTime, nullable=True)
    last_login = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password_hash(self.password_hash, password)

    def issue_verification_token(self, ttl: timedelta) -> str:
        """Generate a new email verification token, replacing any previous one.

        Only the digest is persisted; the returned raw token goes into the
        emailed link and is never stored.
        """

        token = secrets.token_hex(VERIFICATION_TOKEN_BYTES)
        self.email_verification_token_hash = hash_verification_token(token)
        self.email_verification_expires = utcnow() + ttl
        return token

    def mark_email_verified(self) -> None:
        """Consume the verification token and flag the address as verified."""

        self.email_verified = True
        self.email_verification_token_hash = None
        self.email_verification_expires = None

    def is_locked(self, now: Optional[datetime] = None) -> bool:
        """Return True while a lockout window is in effect."""

        now = now or utcnow()
        return self.locked_until is not None and self.locked_until > now

    def clear_expired_lock(self, now: Optional[datetime] = None) -> bool:
        """Reset the failure counter once a previous lockout window has elapsed."""

        now = now or utcnow()
        if self.locked_until is not None and self.locked_until <= now:
            self.locked_until = None
            self.failed_login_attempts = 0
            return True
        return False

    def register_failed_login(
        self, max_attempts: int, lock_duration: timedelta, now: Optional[datetime] = None
    ) -> bool:
        """Count a failed login and lock the account at the threshold.

        Returns True when this failure locked the account.
        """

        now = now or utcnow()
        self.failed_login_attempts = (self.failed_login_attempts or 0) + 1
        if self.failed_login_attempts >= max_attempts:
            self.locked_until = now + lock_duration
            return True
        return False

    def register_successful_login(self, now: Optional[datetime] = None) -> None:
        self.failed_login_attempts = 0
        self.locked_until = None
        self.last_login = now or utcnow()

    def to_dict(self) -> dict:
        """Serialize the public fields of the account."""

        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "phone": self.phone,
            "profilePic": self.profile_pic,
            "emailVerified": self.email_verified,
            "isActive": self.is_active,
            "lastLogin": self.last_login.isoformat() if self.last_login else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"

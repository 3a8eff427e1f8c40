"""Database initialization and model exports."""

from datetime import UTC, datetime

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime, as stored in the database."""

    return datetime.now(UTC).replace(tzinfo=None)


# Import models to register them with SQLAlchemy metadata.
from .user import User  # noqa: E402,F401
from .profiles import AdminProfile, CreatorProfile, CustomerProfile  # noqa: E402,F401
from .fabric import Fabric  # noqa: E402,F401
from .post import Post  # noqa: E402,F401
from .cart import Cart, CartItem  # noqa: E402,F401
from .setting import Setting  # noqa: E402,F401
from .image_cleanup import ImageCleanupTask  # noqa: E402,F401

__all__ = [
    "db",
    "utcnow",
    "User",
    "CustomerProfile",
    "CreatorProfile",
    "AdminProfile",
    "Fabric",
    "Post",
    "Cart",
    "CartItem",
    "Setting",
    "ImageCleanupTask",
]

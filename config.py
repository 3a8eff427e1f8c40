"""Application configuration module."""

import os
from datetime import timedelta
from pathlib import Path


def _env_list(name: str, default: str) -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip().lower() for item in raw.split(",") if item.strip()]


class Config:
    """Base configuration for the Flask application."""

    # Core
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.getenv("JWT_EXPIRES_DAYS", "7")))
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///adaayien.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Public URLs used in verification emails and redirects
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/")
    BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:5000").rstrip("/")

    # CORS
    _raw_origins = os.getenv("ORIGINS", "*")
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]

    # Rate limiting
    RATE_LIMIT = os.getenv("RATE_LIMIT", "60 per minute")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_KEY_PREFIX = os.getenv("RATELIMIT_KEY_PREFIX", "")

    # Mail
    RESEND_API_KEY = os.getenv("RESEND_API_KEY")
    MAIL_PROVIDER = os.getenv("MAIL_PROVIDER") or ("resend" if RESEND_API_KEY else "log")
    MAIL_FROM = os.getenv("MAIL_FROM", "Adaayien <noreply@adaayien.com>")

    # Account security
    EMAIL_VERIFICATION_TTL = timedelta(hours=24)
    MAX_LOGIN_ATTEMPTS = int(os.getenv("MAX_LOGIN_ATTEMPTS", "5"))
    ACCOUNT_LOCK_DURATION = timedelta(
        minutes=int(os.getenv("ACCOUNT_LOCK_MINUTES", "120"))
    )
    DISPOSABLE_EMAIL_DOMAINS = _env_list(
        "DISPOSABLE_EMAIL_DOMAINS",
        "10minutemail.com,tempmail.org,guerrillamail.com,mailinator.com,"
        "yopmail.com,temp-mail.org,throwaway.email,getnada.com",
    )
    MX_LOOKUP_TIMEOUT = float(os.getenv("MX_LOOKUP_TIMEOUT", "5"))

    # Image storage
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", str(Path("workspace") / "uploads"))
    UPLOAD_URL_PREFIX = os.getenv("UPLOAD_URL_PREFIX", "/uploads")
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_NAME")
    CLOUDINARY_API_KEY = os.getenv("CLOUDINARY_API_KEY")
    CLOUDINARY_API_SECRET = os.getenv("CLOUDINARY_API_SECRET")
    CLOUDINARY_FOLDER = os.getenv("CLOUDINARY_FOLDER", "adaayen")
    MAX_FILE_SIZE_MB = int(os.getenv("MAX_FILE_SIZE_MB", "10"))
    MAX_FILES = int(os.getenv("MAX_FILES", "6"))
    ALLOWED_IMAGE_TYPES = _env_list("ALLOWED_IMAGE_TYPES", "jpg,jpeg,png,webp")

    # Cart
    CART_TTL = timedelta(days=int(os.getenv("CART_TTL_DAYS", "30")))
    CART_WRITE_RETRIES = int(os.getenv("CART_WRITE_RETRIES", "3"))

    # Listing pages
    DEFAULT_PAGE_SIZE = 12
    MAX_PAGE_SIZE = 100

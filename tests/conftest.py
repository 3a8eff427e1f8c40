"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from models.accounts import account_for  # noqa: E402
from models.fabric import Fabric  # noqa: E402
from models.user import User  # noqa: E402
from utils.auth import issue_session_token  # noqa: E402

DEFAULT_PASSWORD = "Secret@123"


class _BaseTestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key-with-enough-length-for-hmac"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length-for-hmac"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    RATE_LIMIT = "1000 per minute"
    MAIL_PROVIDER = "log"
    RESEND_API_KEY = None
    STORAGE_BACKEND = "local"
    FRONTEND_URL = "http://frontend.test"
    BACKEND_URL = "http://api.test"


@pytest.fixture(autouse=True)
def _stub_mx_lookup(monkeypatch):
    """Keep registration tests off the network."""

    monkeypatch.setattr(
        "utils.email_validation.lookup_mx_hosts", lambda domain, timeout: ["mx.test"]
    )


@pytest.fixture()
def app(tmp_path) -> Flask:
    """Create a Flask application instance for tests."""

    upload_dir = tmp_path / "uploads"

    class TestConfig(_BaseTestConfig):
        UPLOAD_DIR = str(upload_dir)

    application = create_app(TestConfig)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def outbox(monkeypatch) -> list[dict]:
    """Capture verification emails instead of delivering them."""

    sent: list[dict] = []

    def _record(user, token):
        sent.append({"email": user.email, "token": token})
        return True

    monkeypatch.setattr("routes.auth.send_verification_email", _record)
    return sent


@pytest.fixture()
def make_user(app: Flask):
    """Return a factory persisting a user with its role profile; yields the id."""

    def _make_user(
        email: str,
        role: str = "customer",
        *,
        password: str = DEFAULT_PASSWORD,
        name: str = "Test User",
        verified: bool = True,
    ) -> int:
        with app.app_context():
            user = User(email=email, name=name, role=role, email_verified=verified)
            user.set_password(password)
            db.session.add(user)
            account_for(user).create_profile()
            db.session.commit()
            return user.id

    return _make_user


@pytest.fixture()
def auth_header(app: Flask):
    """Return a factory building an Authorization header for a user id."""

    def _auth_header(user_id: int) -> dict:
        with app.app_context():
            user = db.session.get(User, user_id)
            return {"Authorization": f"Bearer {issue_session_token(user)}"}

    return _auth_header


@pytest.fixture()
def make_fabric(app: Flask):
    """Return a factory persisting a fabric; yields the id."""

    def _make_fabric(
        name: str = "Handloom Cotton",
        price: str = "100.00",
        *,
        fabric_type: str = "Cotton",
        in_stock: bool = True,
        public_id: str | None = None,
    ) -> int:
        with app.app_context():
            url = f"https://img.test/{name.replace(' ', '-').lower()}.png"
            fabric = Fabric(
                name=name,
                price=price,
                fabric_type=fabric_type,
                in_stock=in_stock,
                image_url=url,
                images=[url],
                images_meta=[{"url": url, "publicId": public_id}],
            )
            db.session.add(fabric)
            db.session.commit()
            return fabric.id

    return _make_fabric

"""Tests for the User model helpers."""

from datetime import timedelta

from models import db, utcnow
from models.user import User, hash_verification_token


def test_password_is_hashed(app):
    with app.app_context():
        user = User(email="helper@example.com", name="Helper")
        user.set_password("Secret@123")
        db.session.add(user)
        db.session.commit()

        assert user.password_hash != "Secret@123"
        assert user.check_password("Secret@123")
        assert not user.check_password("secret@123")
        assert user.role == "customer"
        assert user.is_active is True
        assert user.email_verified is False


def test_verification_token_stores_only_digest(app):
    with app.app_context():
        user = User(email="token@example.com", name="Token")
        token = user.issue_verification_token(timedelta(hours=24))

        assert len(token) == 64
        assert user.email_verification_token_hash == hash_verification_token(token)
        assert user.email_verification_token_hash != token
        assert user.email_verification_expires > utcnow()

        replacement = user.issue_verification_token(timedelta(hours=24))
        assert replacement != token
        assert user.email_verification_token_hash == hash_verification_token(replacement)

        user.mark_email_verified()
        assert user.email_verified is True
        assert user.email_verification_token_hash is None
        assert user.email_verification_expires is None


def test_lockout_after_max_attempts(app):
    with app.app_context():
        user = User(email="lock@example.com", name="Lock")
        now = utcnow()

        for _ in range(4):
            assert user.register_failed_login(5, timedelta(hours=2), now) is False
        assert user.is_locked(now) is False

        assert user.register_failed_login(5, timedelta(hours=2), now) is True
        assert user.failed_login_attempts == 5
        assert user.is_locked(now)
        assert user.locked_until == now + timedelta(hours=2)


def test_expired_lock_resets_counter(app):
    with app.app_context():
        user = User(email="unlock@example.com", name="Unlock")
        user.failed_login_attempts = 5
        user.locked_until = utcnow() - timedelta(minutes=1)

        assert user.is_locked() is False
        assert user.clear_expired_lock() is True
        assert user.failed_login_attempts == 0
        assert user.locked_until is None


def test_successful_login_resets_state(app):
    with app.app_context():
        user = User(email="ok@example.com", name="Ok")
        user.failed_login_attempts = 3
        user.register_successful_login()

        assert user.failed_login_attempts == 0
        assert user.locked_until is None
        assert user.last_login is not None


def test_to_dict_hides_secrets(app):
    with app.app_context():
        user = User(email="public@example.com", name="Public")
        user.set_password("Secret@123")
        user.issue_verification_token(timedelta(hours=1))
        db.session.add(user)
        db.session.commit()

        data = user.to_dict()

        assert data["email"] == "public@example.com"
        assert data["emailVerified"] is False
        assert "passwordHash" not in data and "password_hash" not in data
        assert not any("token" in key.lower() for key in data)

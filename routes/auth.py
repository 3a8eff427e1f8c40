"""Authentication blueprint: registration, email verification, login and profile."""

from __future__ import annotations

import json
from http import HTTPStatus
from urllib.parse import urlencode

from flask import Blueprint, current_app, jsonify, redirect, request
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import BadRequest

from models import db, utcnow
from models.accounts import account_for
from models.user import PUBLIC_ROLES, User, hash_verification_token
from utils.auth import current_account, current_user, issue_session_token, login_required
from utils.email_validation import validate_email_domain
from utils.errors import (
    AccountDisabled,
    AccountLocked,
    AlreadyVerified,
    DuplicateAccount,
    EmailNotVerified,
    InvalidCredentials,
    InvalidEmailDomain,
    NotFound,
    ValidationError,
)
from utils.mailer import send_verification_email
from utils.request_validation import (
    EMAIL_RE,
    PHONE_RE,
    normalize_email,
    parse_json_request,
    parse_str,
    password_problems,
)

NAME_MAX_LENGTH = 100
auth_bp = Blueprint("auth", __name__)


def _extract_role(raw_role) -> str:
    """Return a self-service role; anything else becomes ``customer``."""

    role = str(raw_role or "").strip().lower()
    return role if role in PUBLIC_ROLES else "customer"


def _find_user_by_email(email: str) -> User | None:
    return User.query.filter(func.lower(User.email) == email).first()


def _validate_registration(payload: dict) -> tuple[str, str, str, str]:
    errors = {}
    name = parse_str(payload.get("name"))
    email = normalize_email(payload.get("email"))
    password = payload.get("password") or ""
    bio = parse_str(payload.get("bio"))

    if name is None:
        errors["name"] = "Name must be a string"
    elif not name:
        errors["name"] = "Name required"
    elif len(name) > NAME_MAX_LENGTH:
        errors["name"] = f"Name must be at most {NAME_MAX_LENGTH} characters"
    if not EMAIL_RE.match(email):
        errors["email"] = "Valid email required"
    if not isinstance(password, str):
        errors["password"] = "Password must be a string"
    else:
        problems = password_problems(password)
        if problems:
            errors["password"] = "Password must contain " + ", ".join(problems)
    if bio is None:
        errors["bio"] = "Bio must be a string"

    if errors:
        raise ValidationError(errors)
    return name, email, password, bio


def _verification_redirect(**params):
    frontend_url = current_app.config.get("FRONTEND_URL", "").rstrip("/")
    return redirect(f"{frontend_url}/verify-email?{urlencode(params)}", code=HTTPStatus.FOUND)


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Register a customer or creator; the account starts unverified."""

    payload = parse_json_request(request)
    name, email, password, bio = _validate_registration(payload)
    role = _extract_role(payload.get("role"))

    if _find_user_by_email(email) is not None:
        raise DuplicateAccount("Email already in use.")

    valid_domain, reason = validate_email_domain(email)
    if not valid_domain:
        raise InvalidEmailDomain(reason)

    user = User(name=name, email=email, role=role, email_verified=False)
    user.set_password(password)
    token = user.issue_verification_token(current_app.config["EMAIL_VERIFICATION_TTL"])
    db.session.add(user)

    account = account_for(user)
    profile_payload = {"bio": bio} if role == "creator" else {}
    account.create_profile(profile_payload)
    db.session.commit()
    current_app.logger.info("Registered %s account %s", role, user.email)

    email_sent = send_verification_email(user, token)

    return (
        jsonify(
            {
                "message": "Registration successful. Please verify your email.",
                "user": user.to_dict(),
                "emailSent": email_sent,
            }
        ),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/verify-email/", defaults={"token": ""}, methods=["GET"])
@auth_bp.route("/verify-email/<token>", methods=["GET"])
def verify_email(token: str):
    """Consume an emailed verification token and redirect to the frontend."""

    token = token.strip()
    if not token:
        return _verification_redirect(verification="error", message="missing-token")

    try:
        user = User.query.filter(
            User.email_verification_token_hash == hash_verification_token(token),
            User.email_verification_expires > utcnow(),
        ).first()
        if user is None:
            current_app.logger.info("Rejected invalid or expired verification token")
            return _verification_redirect(verification="error", message="invalid-token")

        user.mark_email_verified()
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception("Email verification failed")
        return _verification_redirect(verification="error", message="server-error")

    current_app.logger.info("Verified email for %s", user.email)
    return _verification_redirect(
        verification="success",
        token=issue_session_token(user),
        user=json.dumps(user.to_dict()),
    )


@auth_bp.route("/resend-verification", methods=["POST"])
def resend_verification():
    """Issue a fresh verification token; previous tokens stop working."""

    payload = parse_json_request(request)
    email = normalize_email(payload.get("email"))
    if not email:
        raise ValidationError({"email": "Email required"})

    user = _find_user_by_email(email)
    if user is None:
        raise NotFound("No account found for that email.")
    if user.email_verified:
        raise AlreadyVerified()

    token = user.issue_verification_token(current_app.config["EMAIL_VERIFICATION_TTL"])
    db.session.commit()

    email_sent = send_verification_email(user, token)
    return jsonify({"message": "Verification email processed.", "emailSent": email_sent})


@auth_bp.route("/login", methods=["POST"])
def login():
    """Authenticate a verified user, enforcing the failed-attempt lockout."""

    payload = parse_json_request(request)
    raw_email = payload.get("email")
    password = payload.get("password") or ""
    type_errors = {
        field: f"{field} must be a string"
        for field, value in (("email", raw_email), ("password", password))
        if value is not None and not isinstance(value, str)
    }
    if type_errors:
        raise ValidationError(type_errors)

    email = normalize_email(raw_email)
    if not email or not password:
        raise BadRequest("Email and password are required.")

    user = _find_user_by_email(email)
    if user is None:
        raise InvalidCredentials()
    if not user.is_active:
        raise AccountDisabled()
    if not user.email_verified:
        raise EmailNotVerified(extra={"emailVerified": False})

    now = utcnow()
    if user.is_locked(now):
        raise AccountLocked(extra={"lockedUntil": user.locked_until.isoformat()})
    user.clear_expired_lock(now)

    if not user.check_password(password):
        locked = user.register_failed_login(
            current_app.config["MAX_LOGIN_ATTEMPTS"],
            current_app.config["ACCOUNT_LOCK_DURATION"],
            now,
        )
        db.session.commit()
        if locked:
            current_app.logger.warning(
                "Locked %s after %d failed logins", user.email, user.failed_login_attempts
            )
        raise InvalidCredentials()

    user.register_successful_login(now)
    account = account_for(user)
    db.session.commit()

    return jsonify(
        {
            "message": "Login successful",
            "token": issue_session_token(user),
            "user": user.to_dict(),
            "roleData": account.profile_data(),
        }
    )


@auth_bp.route("/profile", methods=["GET"])
@login_required()
def get_profile():
    """Return the caller's account and role profile."""

    return jsonify({"user": current_user().to_dict(), "roleData": current_account().profile_data()})


@auth_bp.route("/profile", methods=["PUT"])
@login_required()
def update_profile():
    """Update name, phone, picture and role-specific profile fields."""

    payload = parse_json_request(request)
    user = current_user()
    errors = {}

    if "name" in payload:
        name = parse_str(payload.get("name"))
        if not name or len(name) > NAME_MAX_LENGTH:
            errors["name"] = f"Name must be 1-{NAME_MAX_LENGTH} characters"
        else:
            user.name = name
    if "phone" in payload:
        phone = parse_str(payload.get("phone"))
        if phone is None or (phone and not PHONE_RE.match(phone)):
            errors["phone"] = "Please provide a valid phone number"
        else:
            user.phone = phone or None
    if "profilePic" in payload:
        profile_pic = parse_str(payload.get("profilePic"))
        if profile_pic is None:
            errors["profilePic"] = "profilePic must be a URL string"
        else:
            user.profile_pic = profile_pic

    errors.update(current_account().update_profile(payload))
    if errors:
        db.session.rollback()
        raise ValidationError(errors)

    db.session.commit()
    return jsonify(
        {
            "message": "Profile updated",
            "user": user.to_dict(),
            "roleData": current_account().profile_data(),
        }
    )

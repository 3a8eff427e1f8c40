"""Bearer-token authentication and role checks."""

from __future__ import annotations

from functools import wraps

from flask import g
from flask_jwt_extended import create_access_token, get_jwt_identity, verify_jwt_in_request

from models import db
from models.accounts import RoleAccount, account_for
from models.user import User
from utils.errors import Forbidden, Unauthenticated


def issue_session_token(user: User) -> str:
    """Return a signed session token carrying the user id and role."""

    return create_access_token(identity=str(user.id), additional_claims={"role": user.role})


def _load_user(identity) -> User | None:
    try:
        user_id = int(identity)
    except (TypeError, ValueError):
        return None
    return db.session.get(User, user_id)


def login_required(*roles: str):
    """Require a valid bearer token and, optionally, one of ``roles``.

    On success ``g.current_user`` holds the user and ``g.account`` the role
    account resolved for it.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            user = _load_user(get_jwt_identity())
            if user is None:
                raise Unauthenticated("Not authorized, user not found.")
            if not user.is_active:
                raise Unauthenticated("Not authorized, account is deactivated.")

            if roles and user.role not in roles:
                required = roles[0] if len(roles) == 1 else list(roles)
                raise Forbidden(extra={"userRole": user.role, "requiredRole": required})

            g.current_user = user
            g.account = account_for(user)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_user() -> User:
    return g.current_user


def current_account() -> RoleAccount:
    return g.account

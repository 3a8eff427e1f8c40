"""Role accounts: per-role access to the companion profile record.

Each role owns exactly one profile model. Request handlers resolve the
account once (see ``utils.auth``) and then work through it instead of
branching on ``user.role``.
"""

from __future__ import annotations

import re
from typing import ClassVar

from . import db
from .fabric import FABRIC_TYPES
from .profiles import (
    CREATOR_EXPERIENCE,
    CREATOR_SPECIALIZATIONS,
    DEFAULT_PREFERENCES,
    AdminProfile,
    CreatorProfile,
    CustomerProfile,
)
from .user import User


BIO_MAX_LENGTH = 500
SOCIAL_LINK_KEYS = ("instagram", "youtube", "pinterest", "website", "facebook", "other")
LOCATION_KEYS = ("city", "state", "country")
_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


def _merge_preferences(current: dict | None, updates, errors: dict) -> dict | None:
    if not isinstance(updates, dict):
        errors["preferences"] = "preferences must be an object"
        return None
    merged = dict(DEFAULT_PREFERENCES)
    merged.update(current or {})
    for key, value in updates.items():
        if key not in DEFAULT_PREFERENCES:
            errors[f"preferences.{key}"] = "unknown preference"
            continue
        expected = type(DEFAULT_PREFERENCES[key])
        if not isinstance(value, expected):
            errors[f"preferences.{key}"] = f"must be {expected.__name__}"
            continue
        merged[key] = value
    return merged


class RoleAccount:
    """Base behaviour shared by every role."""

    role: ClassVar[str]
    profile_model: ClassVar[type]
    profile_attr: ClassVar[str]
    # Whether this role may remove posts owned by other users.
    can_moderate_posts: ClassVar[bool] = False

    def __init__(self, user: User):
        self.user = user

    @property
    def profile(self):
        return getattr(self.user, self.profile_attr)

    def create_profile(self, payload: dict | None = None):
        """Create the companion profile in the current session."""

        profile = self.profile_model()
        profile.user = self.user
        self.initialize_profile(profile, payload or {})
        db.session.add(profile)
        return profile

    def ensure_profile(self):
        return self.profile or self.create_profile()

    def initialize_profile(self, profile, payload: dict) -> None:
        """Hook for role-specific registration data."""

    def update_profile(self, payload: dict) -> dict:
        """Apply role-specific profile updates; returns field errors."""

        return {}

    def profile_data(self) -> dict | None:
        profile = self.profile
        return profile.to_dict() if profile is not None else None


class CustomerAccount(RoleAccount):
    role = "customer"
    profile_model = CustomerProfile
    profile_attr = "customer_profile"

    def update_profile(self, payload: dict) -> dict:
        errors: dict = {}
        profile = self.ensure_profile()
        if "preferences" in payload:
            merged = _merge_preferences(profile.preferences, payload["preferences"], errors)
            if merged is not None:
                profile.preferences = merged
        if "preferredFabricTypes" in payload:
            types = payload["preferredFabricTypes"]
            if not isinstance(types, list) or any(t not in FABRIC_TYPES for t in types):
                errors["preferredFabricTypes"] = "must be a list of known fabric types"
            else:
                profile.preferred_fabric_types = list(dict.fromkeys(types))
        return errors


class CreatorAccount(RoleAccount):
    role = "creator"
    profile_model = CreatorProfile
    profile_attr = "creator_profile"

    def initialize_profile(self, profile, payload: dict) -> None:
        bio = (payload.get("bio") or "").strip()
        profile.bio = bio[:BIO_MAX_LENGTH]

    def update_profile(self, payload: dict) -> dict:
        errors: dict = {}
        profile = self.ensure_profile()

        if "bio" in payload:
            bio = payload.get("bio") or ""
            if not isinstance(bio, str) or len(bio) > BIO_MAX_LENGTH:
                errors["bio"] = f"bio must be a string of at most {BIO_MAX_LENGTH} characters"
            else:
                profile.bio = bio.strip()

        if "specialization" in payload:
            values = payload["specialization"]
            if not isinstance(values, list) or any(
                v not in CREATOR_SPECIALIZATIONS for v in values
            ):
                errors["specialization"] = "must be a list of known specializations"
            else:
                profile.specialization = list(dict.fromkeys(values))

        if "experience" in payload:
            if payload["experience"] not in CREATOR_EXPERIENCE:
                errors["experience"] = "experience must be one of " + ", ".join(
                    CREATOR_EXPERIENCE
                )
            else:
                profile.experience = payload["experience"]

        if "location" in payload:
            location = payload["location"]
            if not isinstance(location, dict):
                errors["location"] = "location must be an object"
            else:
                profile.location = {
                    key: str(location[key]).strip()
                    for key in LOCATION_KEYS
                    if location.get(key)
                }

        if "socialLinks" in payload:
            links = payload["socialLinks"]
            if not isinstance(links, dict):
                errors["socialLinks"] = "socialLinks must be an object"
            else:
                cleaned = {}
                for key in SOCIAL_LINK_KEYS:
                    value = links.get(key)
                    if not value:
                        continue
                    if not isinstance(value, str) or not _URL_RE.match(value):
                        errors[f"socialLinks.{key}"] = "must be an http(s) URL"
                        continue
                    cleaned[key] = value.strip()
                profile.social_links = cleaned

        return errors


class AdminAccount(RoleAccount):
    role = "admin"
    profile_model = AdminProfile
    profile_attr = "admin_profile"
    can_moderate_posts = True

    def update_profile(self, payload: dict) -> dict:
        errors: dict = {}
        profile = self.ensure_profile()
        if "preferences" in payload:
            if not isinstance(payload["preferences"], dict):
                errors["preferences"] = "preferences must be an object"
            else:
                merged = dict(profile.preferences or {})
                merged.update(payload["preferences"])
                profile.preferences = merged
        return errors

    def log_action(self, action: str, target_type: str, target_id=None, details=None) -> None:
        self.ensure_profile().log_action(action, target_type, target_id, details)


ACCOUNT_TYPES: dict[str, type[RoleAccount]] = {
    account.role: account for account in (CustomerAccount, CreatorAccount, AdminAccount)
}


def account_for(user: User) -> RoleAccount:
    """Return the role account wrapping ``user``."""

    try:
        account_cls = ACCOUNT_TYPES[user.role]
    except KeyError:
        raise ValueError(f"Unknown role: {user.role!r}") from None
    return account_cls(user)

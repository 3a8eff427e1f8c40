"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Iterable

from flask import Request
from werkzeug.exceptions import BadRequest


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_RE = re.compile(r"^\+?[\d\s\-()]+$")
PASSWORD_MIN_LENGTH = 8
_PASSWORD_RULES = (
    (re.compile(r"[A-Z]"), "one uppercase letter"),
    (re.compile(r"[a-z]"), "one lowercase letter"),
    (re.compile(r"\d"), "one digit"),
    (re.compile(r"[^A-Za-z0-9]"), "one symbol"),
)


def parse_json_request(
    req: Request,
    *,
    required_keys: Iterable[str] | None = None,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise BadRequest("Request content type must be application/json.")

    data = req.get_json(silent=False)
    if data is None:
        raise BadRequest("Request JSON body is required.")

    if not isinstance(data, dict):
        raise BadRequest("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise BadRequest("Request JSON body must not be empty.")

    if required_keys:
        missing = [key for key in required_keys if not data.get(key)]
        if missing:
            raise BadRequest(
                "Missing required fields: {}.".format(
                    ", ".join(sorted(missing))
                )
            )

    return data


def parse_payload(req: Request, *, allow_empty: bool = False) -> dict:
    """Return request data from a JSON body or a (multipart) form."""

    if req.is_json:
        return parse_json_request(req, allow_empty=allow_empty)
    if req.mimetype in ("multipart/form-data", "application/x-www-form-urlencoded"):
        data = req.form.to_dict()
        if not data and not req.files and not allow_empty:
            raise BadRequest("Request body must not be empty.")
        return data
    raise BadRequest("Request content type must be application/json or multipart/form-data.")


def normalize_email(raw_email) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""

    if not isinstance(raw_email, str):
        return ""
    return raw_email.strip().lower()


def parse_str(value, default: str = "") -> str | None:
    """Return ``value`` stripped, ``default`` when absent, or None when it is not a string."""

    if value is None:
        return default
    if not isinstance(value, str):
        return None
    return value.strip()


def password_problems(password: str) -> list[str]:
    """Return the unmet password policy rules."""

    problems = []
    if len(password) < PASSWORD_MIN_LENGTH:
        problems.append(f"at least {PASSWORD_MIN_LENGTH} characters")
    for pattern, label in _PASSWORD_RULES:
        if not pattern.search(password):
            problems.append(label)
    return problems


def parse_bool(value):
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in {"1", "true", "yes", "y", "on"}:
        return True
    if lowered in {"0", "false", "no", "n", "off"}:
        return False
    return None


def parse_id(value) -> int | None:
    """Parse a positive integer identifier, returning None when invalid."""

    if isinstance(value, bool):
        return None
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


def parse_decimal(value) -> Decimal | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def parse_float(value) -> float | None:
    parsed = parse_decimal(value)
    if parsed is None:
        return None
    result = float(parsed)
    # Finite decimals such as 1e400 still overflow a float.
    return result if math.isfinite(result) else None


def parse_page_args(args, default_limit: int, max_limit: int) -> tuple[int, int]:
    """Return (page, limit) from query args, clamped to sane bounds."""

    page = parse_id(args.get("page")) or 1
    limit = parse_id(args.get("limit")) or default_limit
    return page, min(limit, max_limit)

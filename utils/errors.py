"""HTTP errors raised by the API, rendered as JSON by the app error handler."""

from __future__ import annotations

from werkzeug.exceptions import HTTPException


class ApiError(HTTPException):
    """Base for API errors carrying a machine-readable ``kind``."""

    code = 400
    kind = "BadRequest"
    description = "The request could not be processed."

    def __init__(self, description: str | None = None, *, extra: dict | None = None):
        super().__init__(description)
        self.extra = extra or {}


class ValidationError(ApiError):
    code = 422
    kind = "ValidationError"
    description = "Request validation failed."

    def __init__(self, errors: dict, description: str | None = None):
        super().__init__(description, extra={"errors": errors})
        self.errors = errors


class DuplicateAccount(ApiError):
    kind = "DuplicateAccount"
    description = "An account with that email already exists."


class InvalidEmailDomain(ApiError):
    kind = "InvalidEmailDomain"
    description = "Email domain cannot receive mail."


class AlreadyVerified(ApiError):
    kind = "AlreadyVerified"
    description = "Email address is already verified."


class OutOfStock(ApiError):
    kind = "OutOfStock"
    description = "This fabric is currently out of stock."


class InsufficientQuantity(ApiError):
    kind = "InsufficientQuantity"
    description = "Minimum quantity is 0.5 meters."


class MissingImage(ApiError):
    kind = "MissingImage"
    description = "At least one image is required."


class InvalidCredentials(ApiError):
    code = 401
    kind = "InvalidCredentials"
    description = "Invalid email or password."


class Unauthenticated(ApiError):
    code = 401
    kind = "Unauthenticated"
    description = "Authentication required."


class AccountLocked(ApiError):
    code = 403
    kind = "AccountLocked"
    description = "Account temporarily locked due to too many failed login attempts."


class EmailNotVerified(ApiError):
    code = 403
    kind = "EmailNotVerified"
    description = "Please verify your email before logging in."


class AccountDisabled(ApiError):
    code = 403
    kind = "AccountDisabled"
    description = "This account has been deactivated."


class Forbidden(ApiError):
    code = 403
    kind = "Forbidden"
    description = "Access denied: insufficient permissions."


class NotFound(ApiError):
    code = 404
    kind = "NotFound"
    description = "Resource not found."


class CartConflict(ApiError):
    code = 409
    kind = "CartConflict"
    description = "The cart was modified concurrently; please retry."

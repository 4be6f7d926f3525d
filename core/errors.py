"""
core/errors.py -- Error taxonomy shared by the auth and favorites layers.

Every failure a caller can observe is one of the classes below. Each carries
the HTTP status and machine-readable code it maps to, so api/main.py needs a
single exception handler instead of one per route.

Only InternalError populates `detail` (the underlying error text). It is
returned to the caller for operability, so it must never hold SQL, stack
traces, or secrets -- store errors are reduced to the driver message in
core/db.py before they get here.

Layer rule: no imports from api/, auth/, or favorites/.
"""

from __future__ import annotations


class DishDelightError(Exception):
    """Base class for errors that map to a client-visible response."""

    status_code: int = 500
    code: str = "internal_error"

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class BadRequest(DishDelightError):
    """Missing or invalid input. Raised before any store call."""

    status_code = 400
    code = "bad_request"


class Unauthenticated(DishDelightError):
    """No bearer token was presented."""

    status_code = 401
    code = "unauthorized"


class Forbidden(DishDelightError):
    """A token was presented but is invalid, expired, or carries no identity."""

    status_code = 403
    code = "forbidden"


class InvalidCredentials(DishDelightError):
    """Login mismatch. Never says whether the email or the password was wrong."""

    status_code = 401
    code = "bad_credentials"


class Conflict(DishDelightError):
    status_code = 409
    code = "conflict"


class NotFound(DishDelightError):
    status_code = 404
    code = "not_found"


class InternalError(DishDelightError):
    status_code = 500
    code = "internal_error"

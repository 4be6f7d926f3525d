"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and the
account flow do the work; these only own the domain shape.

Layer rule: no imports from api/ or favorites/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """A registered account.

    email is unique across all users and compared exactly as stored (no case
    folding). password_hash is the bcrypt hash -- the plaintext is never
    stored, and this dataclass is never serialized directly to a response.

    id is None before the record is written to the database.
    """

    username: str
    email: str
    password_hash: str
    id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class AuthContext:
    """Request-scoped binding of a verified user id.

    Produced by auth.dependencies.authenticate_request() and consumed by the
    favorites handlers. Frozen: handlers read it, nobody rewrites it.
    """

    user_id: int


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful login: the signed token and who it belongs to."""

    token: str
    username: str
    expires_in: int  # seconds

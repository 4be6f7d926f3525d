"""
auth/tokens.py -- Signed, time-bound identity tokens.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry the user id (as `user_id` and as
       the string `sub`), the issue time and an expiry exactly TOKEN_TTL after
       issuance. Nothing is persisted: a token is valid until it expires, and
       there is no revocation list.

  Secret: the signing key is injected at construction. The application builds
       one TokenService in its lifespan from Settings.secret_key, so issuance
       and verification always share the same key. The key is never logged.

  Clock: expiry is checked against the injected clock rather than jose's
       internal wall clock, so tests can move time forward without sleeping.
       jose still verifies the signature and structure; only the `exp`
       comparison happens here.

  Failures: decode() raises InvalidTokenError for a bad signature, corrupted
       encoding or a malformed claim set, and ExpiredTokenError once `exp` has
       passed. verify() returns whatever identity the payload carries --
       deciding whether that identity is usable is the caller's job (see
       auth/dependencies.py).

Layer rule: no imports from api/ or favorites/. Import from core/ is allowed.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from core.config import Settings

_ALGORITHM = "HS256"

TOKEN_TTL = timedelta(hours=5)


class TokenError(Exception):
    """Base class for token verification failures."""


class InvalidTokenError(TokenError):
    """Bad signature, corrupted encoding, or structural mismatch."""


class ExpiredTokenError(TokenError):
    """The token's expiry timestamp has passed."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Issues and verifies identity tokens with one symmetric key.

    Usage:
        tokens = TokenService.from_settings(get_settings())
        token = tokens.issue(42)
        user_id = tokens.verify(token)   # 42, or raises TokenError
    """

    def __init__(
        self,
        secret_key: str,
        ttl: timedelta = TOKEN_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if not secret_key:
            raise ValueError("TokenService requires a non-empty signing key.")
        self._secret_key = secret_key
        self._ttl = ttl
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenService:
        return cls(settings.secret_key)

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def __repr__(self) -> str:
        # Keep the key out of logs and tracebacks.
        return f"TokenService(ttl={self._ttl!r})"

    def issue(self, user_id: int) -> str:
        """Return a signed token for user_id that expires TOKEN_TTL from now."""
        issued_at = self._clock()
        payload = {
            "sub": str(user_id),
            "user_id": user_id,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def decode(self, token: str) -> dict[str, Any]:
        """Verify signature and expiry and return the payload.

        Raises InvalidTokenError or ExpiredTokenError. Never returns a
        payload that failed either check.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[_ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        exp = payload.get("exp")
        if isinstance(exp, bool) or not isinstance(exp, (int, float)):
            raise InvalidTokenError("Token has no valid expiration claim.")
        if self._clock().timestamp() >= exp:
            raise ExpiredTokenError("Token has expired.")
        return payload

    def verify(self, token: str) -> Any:
        """Return the identity carried by a valid token (may be None if absent)."""
        return self.decode(token).get("user_id")

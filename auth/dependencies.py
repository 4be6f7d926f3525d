"""
auth/dependencies.py -- Access control for protected routes.

authenticate_request() is the whole decision, written as a plain function of
the Authorization header value and a token verifier. It has exactly three
outcomes:

  1. No token presented (header missing, or no "Bearer <token>" segment)
     -> Unauthenticated (401). The token service is not called.
  2. Token presented but verification fails, or succeeds yet yields no usable
     identity (None, empty, non-integer, non-positive) -> Forbidden (403).
  3. Token verifies to a user id -> AuthContext(user_id).

require_auth() is the FastAPI Depends() adapter: it reads the header and the
process-wide TokenService from app.state and returns the AuthContext to the
route. Nothing is written back onto the request object.

No database access happens here. A token for a user id that no longer exists
still authenticates; ownership scoping in the favorites store keeps such a
caller from reaching anyone else's rows.

Layer rule: no imports from api/ or favorites/.
  This module may import from fastapi (for Request) because it is part of
  the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from fastapi import Request

from auth.models import AuthContext
from auth.tokens import TokenError
from core.errors import Forbidden, Unauthenticated

logger = logging.getLogger("dishdelight.auth")

UNAUTHENTICATED_MESSAGE = "Unauthorized"
FORBIDDEN_MESSAGE = "Forbidden - Invalid token"


class TokenVerifier(Protocol):
    def verify(self, token: str) -> Any: ...


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an "Authorization: Bearer <token>" value, else None.

    Everything after the scheme is the token, so "Bearer a b" yields "a b",
    which then fails verification instead of counting as no token.
    """
    if not authorization:
        return None
    parts = authorization.split(None, 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    return parts[1].strip()


def _usable_identity(user_id: Any) -> bool:
    # bool is an int subclass; a payload of `true` is not a user id.
    return isinstance(user_id, int) and not isinstance(user_id, bool) and user_id > 0


def authenticate_request(authorization: str | None, tokens: TokenVerifier) -> AuthContext:
    """Resolve the Authorization header into an AuthContext or raise.

    Raises Unauthenticated when no bearer token is present and Forbidden when
    the token does not verify to a usable user id.
    """
    token = extract_bearer_token(authorization)
    if token is None:
        raise Unauthenticated(UNAUTHENTICATED_MESSAGE)

    try:
        user_id = tokens.verify(token)
    except TokenError as exc:
        logger.info("Token verification failed: %s", exc)
        raise Forbidden(FORBIDDEN_MESSAGE) from exc

    if not _usable_identity(user_id):
        logger.warning("Token verified but carried no usable identity")
        raise Forbidden(FORBIDDEN_MESSAGE)
    return AuthContext(user_id=user_id)


def require_auth(request: Request) -> AuthContext:
    """Require a valid bearer token. Raises Unauthenticated (401) or Forbidden (403).

    Use as a FastAPI dependency:
        @router.get("/favorites")
        def route(ctx: AuthContext = Depends(require_auth)): ...
    """
    return authenticate_request(
        request.headers.get("Authorization"),
        request.app.state.token_service,
    )

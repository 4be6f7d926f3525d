"""
auth/accounts.py -- Registration and login.

Both flows reject missing fields with BadRequest before touching the store,
and both keep CPU-bound bcrypt work outside any store call: the hash is
computed before insert_user() borrows a connection, and verification runs
after find_user_by_email() has returned its connection to the pool.

Login never reveals whether an email is registered:
  - Unknown email: bcrypt runs against a dummy hash (same cost as a real
    check), then InvalidCredentials.
  - Wrong password: bcrypt runs against the real hash, then the identical
    InvalidCredentials with the identical message.

Layer rule: no imports from api/ or favorites/.
"""

from __future__ import annotations

import logging

from auth.models import LoginResult, User
from auth.passwords import (
    MAX_PASSWORD_BYTES,
    PASSWORD_POLICY_MESSAGE,
    exceeds_bcrypt_limit,
    hash_password,
    is_password_valid,
    verify_against_dummy,
    verify_password,
)
from auth.store import UserStore
from auth.tokens import TokenService
from core.db import StoreError, UniqueViolation
from core.errors import BadRequest, Conflict, InternalError, InvalidCredentials

logger = logging.getLogger("dishdelight.auth")

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


def register_user(store: UserStore, username: str | None, email: str | None, password: str | None) -> User:
    """Create an account and return the stored user.

    Raises BadRequest for missing fields or a password that fails the policy,
    Conflict when the email is already registered, and InternalError for any
    other store or hashing failure.
    """
    if not username or not email or not password:
        raise BadRequest("Username, email, and password are required")
    if not is_password_valid(password):
        raise BadRequest(PASSWORD_POLICY_MESSAGE)
    if exceeds_bcrypt_limit(password):
        raise BadRequest(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long.")

    try:
        password_hash = hash_password(password)
    except ValueError as exc:
        raise InternalError("Error registering user", detail=str(exc)) from exc

    try:
        user = store.insert_user(username, email, password_hash)
    except UniqueViolation as exc:
        raise Conflict("Email already registered") from exc
    except StoreError as exc:
        raise InternalError("Error registering user", detail=str(exc)) from exc

    logger.info("Registered user id=%s", user.id)
    return user


def login_user(store: UserStore, tokens: TokenService, email: str | None, password: str | None) -> LoginResult:
    """Verify credentials and issue a token.

    Raises BadRequest for missing fields, InvalidCredentials for an unknown
    email or a wrong password (indistinguishably), and InternalError when the
    store fails or the stored hash is malformed.
    """
    if not email or not password:
        raise BadRequest("Email and password are required")

    try:
        user = store.find_user_by_email(email)
    except StoreError as exc:
        raise InternalError("Error logging in", detail=str(exc)) from exc

    if user is None:
        # Equalize timing -- do NOT return before running bcrypt.
        verify_against_dummy(password)
        raise InvalidCredentials(INVALID_CREDENTIALS_MESSAGE)

    try:
        matched = verify_password(password, user.password_hash)
    except ValueError as exc:
        logger.error("Stored password hash for user id=%s is malformed", user.id)
        raise InternalError("Error logging in", detail="Stored credential is malformed.") from exc
    if not matched:
        raise InvalidCredentials(INVALID_CREDENTIALS_MESSAGE)

    token = tokens.issue(user.id)
    logger.info("User id=%s logged in", user.id)
    return LoginResult(token=token, username=user.username, expires_in=tokens.ttl_seconds)

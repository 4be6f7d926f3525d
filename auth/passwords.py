"""
auth/passwords.py -- Credential hashing and the password composition policy.

Hashing: bcrypt used directly (no passlib wrapper). The cost factor comes from
Settings.bcrypt_rounds; at the default of 10 a single verification takes tens
of milliseconds, which is the point -- offline brute force becomes expensive.
bcrypt.checkpw compares digests in constant time, so a mismatch does not leak
where it occurred.

bcrypt only looks at the first 72 bytes of its input. bcrypt 5.x raises
ValueError past that limit instead of truncating, so the limit is checked
here explicitly and behaves the same on every bcrypt release.

Policy: at least 6 characters with one lowercase letter, one uppercase letter,
one digit and one symbol from ALLOWED_SYMBOLS; nothing outside those classes.
The password is checked exactly as given -- no trimming, no Unicode folding.

Layer rule: no imports from api/ or favorites/. Import from core/ is allowed.
"""

from __future__ import annotations

import re

import bcrypt

from core.config import get_settings

_settings = get_settings()

MAX_PASSWORD_BYTES = 72
MIN_PASSWORD_LENGTH = 6
ALLOWED_SYMBOLS = "@$!%*?&#^()-_=+<>"

PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 6 characters long and include a combination of "
    "lowercase, uppercase, number, and special character."
)

_SYMBOL_CLASS = re.escape(ALLOWED_SYMBOLS)
_PASSWORD_RE = re.compile(
    rf"(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9])(?=.*[{_SYMBOL_CLASS}])"
    rf"[A-Za-z0-9{_SYMBOL_CLASS}]{{{MIN_PASSWORD_LENGTH},}}",
    re.DOTALL,
)


def is_password_valid(plain: str) -> bool:
    """Return True if the password satisfies the composition policy."""
    return _PASSWORD_RE.fullmatch(plain) is not None


def exceeds_bcrypt_limit(plain: str) -> bool:
    return len(plain.encode("utf-8")) > MAX_PASSWORD_BYTES


# ---------------------------------------------------------------------------
# Hashing
# ---------------------------------------------------------------------------


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    Raises ValueError if the password is longer than 72 bytes. Registration
    rejects such passwords before calling this.
    """
    if exceeds_bcrypt_limit(plain):
        raise ValueError(f"Password exceeds the {MAX_PASSWORD_BYTES}-byte bcrypt limit.")
    salt = bcrypt.gensalt(rounds=_settings.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash.

    A wrong password returns False. A malformed stored hash is a data
    integrity problem, not a login failure: bcrypt's ValueError propagates.
    Candidates over 72 bytes cannot match any hash produced by hash_password()
    and return False without running bcrypt on them.
    """
    if exceeds_bcrypt_limit(plain):
        bcrypt.checkpw(b"", _DUMMY_HASH.encode("utf-8"))
        return False
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


# Timing equalization dummy hash.
# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones. Login runs verify_against_dummy() when the
# email is unknown so response time does not reveal whether an account exists.
_DUMMY_HASH: str = hash_password("DishDelight-timing-dummy1!")


def verify_against_dummy(plain: str) -> None:
    """Spend one bcrypt verification without a real stored hash."""
    verify_password(plain, _DUMMY_HASH)

"""
auth/store.py -- SQLAlchemy Core persistence layer for user accounts.

Pattern: Repository + Data Mapper (same as favorites/store.py).
UserStore is the repository; _row_to_user is the mapper.
Flow and route code never touches SQL directly.

Security:
  All queries use bound parameters. No f-strings in SQL.

  UNIQUE(email) is enforced by the database, not by a look-before-insert
  check, so two concurrent registrations for one email cannot both succeed.
  The losing insert surfaces as core.db.UniqueViolation.

Connections:
  The Engine (pool) is injected and shared with FavoriteStore. Each method
  borrows one connection for one statement and returns it before exiting.

Layer rule: no imports from api/ or favorites/.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, MetaData, String, Table, Text
from sqlalchemy.engine import Engine

from auth.models import User
from core.db import translate_store_errors

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(255), nullable=False),
    Column("email", String(255), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User entities.

    Usage:
        store = UserStore(engine)
        user = store.insert_user("alice", "a@x.com", hash_password("Abcdef1!"))
        same = store.find_user_by_email("a@x.com")
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        with translate_store_errors("create_users_table"):
            _metadata.create_all(self.engine)

    def insert_user(self, username: str, email: str, password_hash: str) -> User:
        """Insert a new user and return it with its assigned id.

        Raises UniqueViolation if the email is already registered and
        StoreError on any other store failure.
        """
        created_at = _now_iso()
        with translate_store_errors("insert_user"), self.engine.connect() as conn:
            result = conn.execute(
                _users.insert().values(
                    username=username,
                    email=email,
                    password_hash=password_hash,
                    created_at=created_at,
                )
            )
            conn.commit()
            user_id = result.inserted_primary_key[0]
        return User(
            id=user_id,
            username=username,
            email=email,
            password_hash=password_hash,
            created_at=created_at,
        )

    def find_user_by_email(self, email: str) -> User | None:
        """Look up a user by exact email (case-sensitive). Returns None if not found."""
        with translate_store_errors("find_user_by_email"), self.engine.connect() as conn:
            row = conn.execute(_users.select().where(_users.c.email == email)).fetchone()
        return _row_to_user(row) if row is not None else None


# ---------------------------------------------------------------------------
# Row mapper (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        created_at=row.created_at,
    )

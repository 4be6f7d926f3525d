"""
core/db.py -- Relational store plumbing shared by every repository.

One Engine per process is the connection pool. Stores receive it at
construction (auth/store.py, favorites/store.py) instead of reaching for a
module-level global, so tests can hand them an in-memory engine.

Every store method acquires a connection with `with engine.connect()` and
releases it before returning. No method holds a connection while hashing
or signing, and no operation spans more than one statement per transaction.

Error translation:
  SQLAlchemy raises IntegrityError for constraint failures on every backend,
  but only the driver-level code says *which* constraint kind failed.
  PostgreSQL reports SQLSTATE 23505 (unique_violation); SQLite (Python 3.11+)
  reports SQLITE_CONSTRAINT_UNIQUE / SQLITE_CONSTRAINT_PRIMARYKEY. Older
  SQLite drivers expose no code, so the message prefix is the fallback.

  str(SQLAlchemyError) embeds the SQL statement and bound parameters. Only
  str(exc.orig) -- the driver message -- is carried forward.

Layer rule: core/ is the kernel. No imports from api/, auth/, or favorites/.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from core.config import Settings

logger = logging.getLogger("dishdelight.db")

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'dishdelight.db'}"

_UNIQUE_VIOLATION_CODES = frozenset(
    {
        "23505",  # PostgreSQL unique_violation
        "SQLITE_CONSTRAINT_UNIQUE",
        "SQLITE_CONSTRAINT_PRIMARYKEY",
    }
)


class StoreError(Exception):
    """A store operation failed. The message is the driver message only."""


class UniqueViolation(StoreError):
    """An insert would duplicate a value constrained to be unique."""


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


def database_url(settings: Settings) -> str | URL:
    """Resolve the store URL: explicit DATABASE_URL, then DB_* fields, then SQLite."""
    if settings.database_url:
        return settings.database_url
    if settings.db_name:
        return URL.create(
            "postgresql+psycopg",
            username=settings.db_user or None,
            password=settings.db_password or None,
            host=settings.db_host,
            port=settings.db_port,
            database=settings.db_name,
        )
    return _DEFAULT_DB_URL


def create_db_engine(db_url: str | URL = _DEFAULT_DB_URL) -> Engine:
    """Create the process-wide Engine (connection pool) for the given URL."""
    is_sqlite = str(db_url).startswith("sqlite")
    if is_sqlite:
        engine = create_engine(db_url, connect_args={"check_same_thread": False})
        event.listen(engine, "connect", _set_wal_mode)
    else:
        engine = create_engine(db_url, pool_pre_ping=True)
    return engine


def ping(engine: Engine) -> bool:
    """Return True if the store answers a trivial query."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database ping failed")
        return False
    return True


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------


def _driver_code(exc: SQLAlchemyError) -> str | None:
    orig = getattr(exc, "orig", None)
    for attr in ("pgcode", "sqlstate", "sqlite_errorname"):
        value = getattr(orig, attr, None)
        if value:
            return str(value)
    return None


def _driver_message(exc: SQLAlchemyError) -> str:
    orig = getattr(exc, "orig", None)
    return str(orig) if orig is not None else exc.__class__.__name__


def is_unique_violation(exc: IntegrityError) -> bool:
    """Return True if the IntegrityError is a uniqueness violation."""
    code = _driver_code(exc)
    if code is not None:
        return code in _UNIQUE_VIOLATION_CODES
    return _driver_message(exc).startswith("UNIQUE constraint failed")


@contextmanager
def translate_store_errors(operation: str) -> Iterator[None]:
    """Re-raise SQLAlchemy failures inside the block as StoreError / UniqueViolation.

    Usage:
        with translate_store_errors("insert_user"), self.engine.connect() as conn:
            ...
    """
    try:
        yield
    except IntegrityError as exc:
        message = _driver_message(exc)
        if is_unique_violation(exc):
            raise UniqueViolation(message) from exc
        logger.error("Store operation %s failed: %s", operation, message)
        raise StoreError(message) from exc
    except SQLAlchemyError as exc:
        message = _driver_message(exc)
        logger.error("Store operation %s failed: %s", operation, message)
        raise StoreError(message) from exc

#!/usr/bin/env python3
"""
DishDelight -- accounts and favorite meals API.

Usage:
  python main.py serve
  python main.py serve --host 0.0.0.0 --port 8000
  python main.py serve --reload
  python main.py init-db

Environment variables (or .env):
  SECRET_KEY    Token signing key, at least 32 characters. Required unless DEBUG=true.
  DATABASE_URL  SQLAlchemy URL. Alternatively DB_USER, DB_PASSWORD, DB_HOST,
                DB_PORT and DB_NAME select a PostgreSQL database. Defaults to
                a local SQLite file.
"""

import argparse
import sys

import uvicorn

from auth.store import UserStore
from core.config import get_settings
from core.db import StoreError, create_db_engine, database_url
from favorites.store import FavoriteStore


def _init_db() -> int:
    """Create the users and favorite_meals tables if they do not exist."""
    engine = create_db_engine(database_url(get_settings()))
    try:
        UserStore(engine)
        FavoriteStore(engine)
    except StoreError as e:
        print(f"  [!] Could not initialize the database: {e}")
        return 1
    finally:
        engine.dispose()
    print(f"  Database ready ({engine.url.render_as_string(hide_password=True)})")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="DishDelight -- accounts and favorite meals API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API under uvicorn")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development)")

    sub.add_parser("init-db", help="Create database tables and exit")

    args = parser.parse_args()

    if args.command == "init-db":
        return _init_db()

    uvicorn.run("api.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


if __name__ == "__main__":
    sys.exit(main())

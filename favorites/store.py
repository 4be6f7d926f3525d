"""
favorites/store.py -- SQLAlchemy-backed persistence for favorite meals.

Uses SQLAlchemy Core (not ORM) so the FavoriteMeal dataclass in
favorites/models.py remains the authoritative domain representation.

Pattern: Repository + Data Mapper. FavoriteStore is the repository, and
_row_to_favorite is the mapper. Every query filters on user_id, so a caller
can only ever see or delete rows belonging to the user id it passes in --
the service layer passes the id from the verified AuthContext.

Security: all queries use bound parameters. No f-strings in SQL.

Usage:
    store = FavoriteStore(engine)
    store.insert_favorite(FavoriteMeal(user_id=1, meal_id=52772, meal_name="Teriyaki", image_url="..."))
    meals = store.list_favorites(1)
    removed = store.delete_favorite(1, 52772)   # rows affected
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Column, Integer, MetaData, String, Table, Text, UniqueConstraint
from sqlalchemy.engine import Engine

from core.db import translate_store_errors
from favorites.models import FavoriteMeal

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_favorite_meals = Table(
    "favorite_meals",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False, index=True),
    Column("meal_id", BigInteger, nullable=False),
    Column("meal_name", String(255), nullable=False),
    Column("image_url", Text, nullable=False),
    Column("added_at", String(32), nullable=False),
    UniqueConstraint("user_id", "meal_id", name="uq_user_meal"),
)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class FavoriteStore:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        with translate_store_errors("create_favorites_table"):
            _metadata.create_all(self.engine)

    def insert_favorite(self, favorite: FavoriteMeal) -> FavoriteMeal:
        """Insert a favorite and return it with id and added_at filled in.

        Raises UniqueViolation if the user already saved this meal.
        """
        added_at = _now_iso()
        with translate_store_errors("insert_favorite"), self.engine.connect() as conn:
            result = conn.execute(
                _favorite_meals.insert().values(
                    user_id=favorite.user_id,
                    meal_id=favorite.meal_id,
                    meal_name=favorite.meal_name,
                    image_url=favorite.image_url,
                    added_at=added_at,
                )
            )
            conn.commit()
            favorite_id = result.inserted_primary_key[0]
        return FavoriteMeal(
            id=favorite_id,
            user_id=favorite.user_id,
            meal_id=favorite.meal_id,
            meal_name=favorite.meal_name,
            image_url=favorite.image_url,
            added_at=added_at,
        )

    def list_favorites(self, user_id: int) -> list[FavoriteMeal]:
        """Return every favorite for user_id in the order they were added."""
        with translate_store_errors("list_favorites"), self.engine.connect() as conn:
            rows = conn.execute(
                _favorite_meals.select()
                .where(_favorite_meals.c.user_id == user_id)
                .order_by(_favorite_meals.c.id)
            ).fetchall()
        return [_row_to_favorite(r) for r in rows]

    def delete_favorite(self, user_id: int, meal_id: int) -> int:
        """Delete the user's favorite for meal_id. Returns the number of rows removed."""
        with translate_store_errors("delete_favorite"), self.engine.connect() as conn:
            result = conn.execute(
                _favorite_meals.delete().where(
                    (_favorite_meals.c.user_id == user_id) & (_favorite_meals.c.meal_id == meal_id)
                )
            )
            conn.commit()
        return result.rowcount


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_favorite(row) -> FavoriteMeal:
    return FavoriteMeal(
        id=row.id,
        user_id=row.user_id,
        meal_id=row.meal_id,
        meal_name=row.meal_name,
        image_url=row.image_url,
        added_at=row.added_at,
    )

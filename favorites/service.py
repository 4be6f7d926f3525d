"""
favorites/service.py -- Ownership-scoped favorite meal operations.

Every operation takes the AuthContext produced by auth.dependencies and uses
its user_id as the only owner filter. Nothing here accepts a user id from the
request body or path, so one user cannot read or delete another user's rows.

Validation happens before any store call. Store failures become Conflict
(uniqueness) or InternalError (everything else).
"""

import logging

from auth.models import AuthContext
from core.db import StoreError, UniqueViolation
from core.errors import BadRequest, Conflict, InternalError, NotFound
from favorites.models import MAX_MEAL_ID, FavoriteMeal
from favorites.store import FavoriteStore

logger = logging.getLogger("dishdelight.favorites")


def _is_missing(value) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _is_valid_meal_id(meal_id) -> bool:
    # bool is an int subclass; `true` is not a meal id.
    if not isinstance(meal_id, int) or isinstance(meal_id, bool):
        return False
    return 0 < meal_id <= MAX_MEAL_ID


def add_favorite(store: FavoriteStore, ctx: AuthContext, meal_id, meal_name, image_url) -> FavoriteMeal:
    if _is_missing(meal_id) or _is_missing(meal_name) or _is_missing(image_url):
        raise BadRequest("Meal ID, name, and image URL are required")
    if not _is_valid_meal_id(meal_id):
        raise BadRequest(f"Meal ID must be an integer between 1 and {MAX_MEAL_ID}")

    favorite = FavoriteMeal(user_id=ctx.user_id, meal_id=meal_id, meal_name=meal_name, image_url=image_url)
    try:
        saved = store.insert_favorite(favorite)
    except UniqueViolation as exc:
        raise Conflict("Meal already added to favorites") from exc
    except StoreError as exc:
        raise InternalError("Error adding favorite meal", detail=str(exc)) from exc

    logger.info("User id=%s added meal %s to favorites", ctx.user_id, meal_id)
    return saved


def list_favorites(store: FavoriteStore, ctx: AuthContext) -> list[FavoriteMeal]:
    try:
        return store.list_favorites(ctx.user_id)
    except StoreError as exc:
        raise InternalError("Error retrieving favorite meals", detail=str(exc)) from exc


def delete_favorite(store: FavoriteStore, ctx: AuthContext, meal_id: int) -> None:
    """Remove one of the caller's favorites. Raises NotFound if it was never saved."""
    if not _is_valid_meal_id(meal_id):
        raise BadRequest(f"Meal ID must be an integer between 1 and {MAX_MEAL_ID}")
    try:
        removed = store.delete_favorite(ctx.user_id, meal_id)
    except StoreError as exc:
        raise InternalError("Error deleting favorite meal", detail=str(exc)) from exc
    if removed == 0:
        raise NotFound("Favorite meal not found")
    logger.info("User id=%s removed meal %s from favorites", ctx.user_id, meal_id)

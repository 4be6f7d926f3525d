"""Unit tests for favorites/store.py and favorites/service.py.

Covers:
- add / list / delete scoped to the AuthContext's user id
- duplicate (user, meal) -> Conflict; same meal for two users is fine
- delete of a never-added meal -> NotFound, including another user's meal
- missing fields rejected before the store is touched
- store failures surface as InternalError
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from auth.models import AuthContext
from core.db import StoreError
from core.errors import BadRequest, Conflict, InternalError, NotFound
from favorites import service
from favorites.models import MAX_MEAL_ID, FavoriteMeal
from favorites.store import FavoriteStore

ALICE = AuthContext(user_id=1)
BOB = AuthContext(user_id=2)

# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class TestFavoriteStore:
    def test_insert_fills_id_and_timestamp(self, favorite_store: FavoriteStore) -> None:
        saved = favorite_store.insert_favorite(
            FavoriteMeal(user_id=1, meal_id=52772, meal_name="Teriyaki Chicken", image_url="http://x/t.jpg")
        )
        assert saved.id is not None
        assert saved.added_at

    def test_list_returns_in_insertion_order(self, favorite_store: FavoriteStore) -> None:
        for meal_id, name in [(3, "Soup"), (1, "Pizza"), (2, "Pasta")]:
            favorite_store.insert_favorite(FavoriteMeal(user_id=1, meal_id=meal_id, meal_name=name, image_url="u"))
        assert [f.meal_name for f in favorite_store.list_favorites(1)] == ["Soup", "Pizza", "Pasta"]

    def test_delete_returns_rows_affected(self, favorite_store: FavoriteStore) -> None:
        favorite_store.insert_favorite(FavoriteMeal(user_id=1, meal_id=1, meal_name="Pizza", image_url="u"))
        assert favorite_store.delete_favorite(1, 1) == 1
        assert favorite_store.delete_favorite(1, 1) == 0


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class TestAddFavorite:
    def test_add_then_list(self, favorite_store: FavoriteStore) -> None:
        service.add_favorite(favorite_store, ALICE, 1, "Pizza", "http://x/p.jpg")
        favorites = service.list_favorites(favorite_store, ALICE)
        assert len(favorites) == 1
        assert favorites[0].meal_id == 1
        assert favorites[0].meal_name == "Pizza"
        assert favorites[0].image_url == "http://x/p.jpg"
        assert favorites[0].user_id == ALICE.user_id

    def test_duplicate_is_conflict(self, favorite_store: FavoriteStore) -> None:
        service.add_favorite(favorite_store, ALICE, 1, "Pizza", "http://x/p.jpg")
        with pytest.raises(Conflict) as exc_info:
            service.add_favorite(favorite_store, ALICE, 1, "Pizza again", "http://x/p2.jpg")
        assert exc_info.value.message == "Meal already added to favorites"
        assert len(service.list_favorites(favorite_store, ALICE)) == 1

    def test_same_meal_for_different_users(self, favorite_store: FavoriteStore) -> None:
        service.add_favorite(favorite_store, ALICE, 1, "Pizza", "http://x/p.jpg")
        service.add_favorite(favorite_store, BOB, 1, "Pizza", "http://x/p.jpg")
        assert len(service.list_favorites(favorite_store, ALICE)) == 1
        assert len(service.list_favorites(favorite_store, BOB)) == 1

    @pytest.mark.parametrize(
        "meal_id,meal_name,image_url",
        [
            (None, "Pizza", "http://x/p.jpg"),
            (1, None, "http://x/p.jpg"),
            (1, "Pizza", None),
            (1, "", "http://x/p.jpg"),
            (1, "Pizza", "   "),
        ],
    )
    def test_missing_fields_rejected_before_store(self, meal_id, meal_name, image_url) -> None:
        store = MagicMock()
        with pytest.raises(BadRequest):
            service.add_favorite(store, ALICE, meal_id, meal_name, image_url)
        store.insert_favorite.assert_not_called()

    def test_store_failure_is_internal_error(self) -> None:
        store = MagicMock()
        store.insert_favorite.side_effect = StoreError("database is locked")
        with pytest.raises(InternalError) as exc_info:
            service.add_favorite(store, ALICE, 1, "Pizza", "http://x/p.jpg")
        assert exc_info.value.detail == "database is locked"


class TestListFavorites:
    def test_empty_list(self, favorite_store: FavoriteStore) -> None:
        assert service.list_favorites(favorite_store, ALICE) == []

    def test_only_own_rows(self, favorite_store: FavoriteStore) -> None:
        service.add_favorite(favorite_store, ALICE, 1, "Pizza", "u")
        service.add_favorite(favorite_store, BOB, 2, "Pasta", "u")
        assert [f.meal_id for f in service.list_favorites(favorite_store, ALICE)] == [1]

    def test_no_implicit_limit(self, favorite_store: FavoriteStore) -> None:
        for meal_id in range(1, 151):
            favorite_store.insert_favorite(FavoriteMeal(user_id=1, meal_id=meal_id, meal_name="m", image_url="u"))
        assert len(service.list_favorites(favorite_store, ALICE)) == 150

    def test_store_failure_is_internal_error(self) -> None:
        store = MagicMock()
        store.list_favorites.side_effect = StoreError("no such table: favorite_meals")
        with pytest.raises(InternalError):
            service.list_favorites(store, ALICE)


class TestDeleteFavorite:
    def test_delete_existing(self, favorite_store: FavoriteStore) -> None:
        service.add_favorite(favorite_store, ALICE, 1, "Pizza", "u")
        service.delete_favorite(favorite_store, ALICE, 1)
        assert service.list_favorites(favorite_store, ALICE) == []

    def test_delete_never_added_is_not_found(self, favorite_store: FavoriteStore) -> None:
        with pytest.raises(NotFound) as exc_info:
            service.delete_favorite(favorite_store, ALICE, 999)
        assert exc_info.value.status_code == 404

    def test_cannot_delete_another_users_favorite(self, favorite_store: FavoriteStore) -> None:
        service.add_favorite(favorite_store, BOB, 5, "Curry", "u")
        with pytest.raises(NotFound):
            service.delete_favorite(favorite_store, ALICE, 5)
        assert len(service.list_favorites(favorite_store, BOB)) == 1

    def test_store_failure_is_internal_error(self) -> None:
        store = MagicMock()
        store.delete_favorite.side_effect = StoreError("disk I/O error")
        with pytest.raises(InternalError):
            service.delete_favorite(store, ALICE, 1)


class TestMealIdBounds:
    @pytest.mark.parametrize("meal_id", [0, -1, True, 2**63, "52772"])
    def test_add_rejects_invalid_meal_id_before_store(self, meal_id) -> None:
        store = MagicMock()
        with pytest.raises(BadRequest):
            service.add_favorite(store, ALICE, meal_id, "Pizza", "http://x/p.jpg")
        store.insert_favorite.assert_not_called()

    def test_largest_meal_id_is_stored(self, favorite_store: FavoriteStore) -> None:
        service.add_favorite(favorite_store, ALICE, MAX_MEAL_ID, "Pizza", "u")
        assert [f.meal_id for f in service.list_favorites(favorite_store, ALICE)] == [MAX_MEAL_ID]

    @pytest.mark.parametrize("meal_id", [0, False, 2**70])
    def test_delete_rejects_invalid_meal_id_before_store(self, meal_id) -> None:
        store = MagicMock()
        with pytest.raises(BadRequest):
            service.delete_favorite(store, ALICE, meal_id)
        store.delete_favorite.assert_not_called()

"""
api/routes/v1/favorites.py -- Favorite meal routes.

Routes:
  POST   /favorites            -- save a meal for the caller
  GET    /favorites            -- list the caller's saved meals
  DELETE /favorites/{meal_id}  -- remove one of the caller's saved meals

Every route requires a bearer token. The router-level dependency rejects
unauthenticated (401) and bad-token (403) requests before any handler runs;
handlers that need the identity declare require_auth again and FastAPI
reuses the cached result.
"""

from fastapi import APIRouter, Depends, Path, Request

from api.models import FavoriteCreate, FavoriteResponse, MessageResponse
from auth.dependencies import require_auth
from auth.models import AuthContext
from favorites import service
from favorites.models import MAX_MEAL_ID
from favorites.store import FavoriteStore

router = APIRouter(dependencies=[Depends(require_auth)])


@router.post("/favorites", response_model=MessageResponse, status_code=201)
def add_favorite(
    request: Request,
    body: FavoriteCreate,
    ctx: AuthContext = Depends(require_auth),
) -> MessageResponse:
    store: FavoriteStore = request.app.state.favorite_store
    service.add_favorite(store, ctx, body.meal_id, body.meal_name, body.image_url)
    return MessageResponse(message="Favorite meal added successfully")


@router.get("/favorites", response_model=list[FavoriteResponse])
def list_favorites(request: Request, ctx: AuthContext = Depends(require_auth)) -> list[FavoriteResponse]:
    """Return all of the caller's saved meals. No pagination."""
    store: FavoriteStore = request.app.state.favorite_store
    return [FavoriteResponse.from_favorite(f) for f in service.list_favorites(store, ctx)]


@router.delete("/favorites/{meal_id}", response_model=MessageResponse)
def delete_favorite(
    request: Request,
    meal_id: int = Path(gt=0, le=MAX_MEAL_ID),
    ctx: AuthContext = Depends(require_auth),
) -> MessageResponse:
    store: FavoriteStore = request.app.state.favorite_store
    service.delete_favorite(store, ctx, meal_id)
    return MessageResponse(message="Favorite meal deleted successfully")

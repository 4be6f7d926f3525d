"""
API request and response models for DishDelight REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
favorites/models.py, which own the internal domain representation. Route
handlers map between the two.

Request fields are Optional on purpose: a missing field must reach the
account/favorites layer and come back as a 400 with that layer's message,
rather than being defaulted here.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from auth.models import User
from favorites.models import MAX_MEAL_ID, FavoriteMeal

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class RegisterRequest(BaseModel):
    """Request body for POST /api/v1/auth/register.

    No whitespace stripping: the password is checked exactly as given.
    """

    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    """Request body for POST /api/v1/auth/login."""

    email: Optional[str] = None
    password: Optional[str] = None


class FavoriteCreate(BaseModel):
    """Request body for POST /api/v1/favorites.

    meal_id accepts the catalogue's numeric-string ids ("52772") as well as
    plain integers; Pydantic coerces both to int. Booleans, zero, negatives
    and values past the 64-bit column range are rejected with a 400.
    """

    meal_id: Optional[Annotated[int, Field(gt=0, le=MAX_MEAL_ID)]] = None
    meal_name: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("meal_id", mode="before")
    @classmethod
    def reject_bool_meal_id(cls, value):
        if isinstance(value, bool):
            raise ValueError("meal_id must be a number, not a boolean")
        return value


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Public fields of a user. The password hash is never part of a response."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str
    email: str
    created_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            created_at=user.created_at or "",
        )


class RegisterResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    user: UserResponse


class LoginResponse(BaseModel):
    """Response body for a successful login. `user` is the username."""

    model_config = ConfigDict(frozen=True)

    message: str
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: str


class FavoriteResponse(BaseModel):
    """One saved meal as returned by GET /api/v1/favorites."""

    model_config = ConfigDict(frozen=True)

    meal_id: int
    meal_name: str
    image_url: str
    added_at: str

    @classmethod
    def from_favorite(cls, favorite: FavoriteMeal) -> "FavoriteResponse":
        return cls(
            meal_id=favorite.meal_id,
            meal_name=favorite.meal_name,
            image_url=favorite.image_url,
            added_at=favorite.added_at,
        )


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class ErrorDetail(BaseModel):
    """Error body returned on every 4xx/5xx response.

    `error` carries the underlying error text for internal errors only.
    """

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    error: Optional[str] = None


class HealthResponse(BaseModel):
    """Response for GET /api/v1/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]

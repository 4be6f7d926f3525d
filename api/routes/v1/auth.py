"""
api/routes/v1/auth.py -- Registration and login endpoints.

Routes:
  POST /api/v1/auth/register  -- create an account; 201 with public user fields
  POST /api/v1/auth/login     -- verify credentials; 200 with a bearer token

Both routes are public. The work is in auth/accounts.py; these handlers only
map between the HTTP models and the account flow. They are plain `def`
handlers so FastAPI runs them in its thread pool -- bcrypt is CPU-bound and
must not block the event loop.

Security:
  POST /login is rate-limited per client IP (Settings.login_rate_limit).
  Cache-Control: no-store on login responses so tokens are never cached.
  Unknown email and wrong password return the same 401 body.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.limiter import limiter, login_rate_limit
from api.models import LoginRequest, LoginResponse, RegisterRequest, RegisterResponse, UserResponse
from auth.accounts import login_user, register_user
from auth.store import UserStore
from auth.tokens import TokenService

router = APIRouter()


@router.post("/auth/register", response_model=RegisterResponse, status_code=201)
def register(request: Request, body: RegisterRequest) -> RegisterResponse:
    """Register a new user. The response never includes the password or its hash."""
    user_store: UserStore = request.app.state.user_store
    user = register_user(user_store, body.username, body.email, body.password)
    return RegisterResponse(message="User registered successfully", user=UserResponse.from_user(user))


@router.post("/auth/login", response_model=LoginResponse)
@limiter.limit(login_rate_limit)  # under @router: the registered endpoint is the limited wrapper
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with email and password and return a signed bearer token."""
    user_store: UserStore = request.app.state.user_store
    token_service: TokenService = request.app.state.token_service
    result = login_user(user_store, token_service, body.email, body.password)

    resp = JSONResponse(
        status_code=200,
        content=LoginResponse(
            message="Login successful",
            token=result.token,
            token_type="bearer",  # noqa: S106 # nosec B106 -- OAuth token type, not a password
            expires_in=result.expires_in,
            user=result.username,
        ).model_dump(),
    )
    resp.headers["Cache-Control"] = "no-store"
    return resp

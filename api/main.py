"""
api/main.py -- FastAPI application entry point for DishDelight.

Run with:  python main.py serve
           uvicorn api.main:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware     -- adds CORS headers for allowed browser origins
  2. SlowAPIMiddleware  -- enforces per-route rate limits from api.limiter
  3. log_requests       -- one access-log line per request

Lifespan builds the process-wide resources once -- the Engine (connection
pool), the two stores that share it, and the TokenService bound to the
signing key -- and puts them on app.state. Shutdown disposes the pool.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.limiter import limiter
from api.models import ErrorDetail, HealthResponse, MessageResponse
from api.routes.v1.auth import router as auth_router
from api.routes.v1.favorites import router as favorites_router
from auth.store import UserStore
from auth.tokens import TokenService
from core.config import get_settings
from core.db import create_db_engine, database_url, ping
from core.errors import DishDelightError
from favorites.store import FavoriteStore

_VERSION = "1.0.0"

_settings = get_settings()

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("dishdelight.api")


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create shared resources on startup and release them on shutdown.

    Startup order matters: the engine first, then the stores that take it.
    The TokenService has no dependencies and holds the only copy of the
    signing key outside Settings.
    """
    logger.info("DishDelight API starting up")
    app.state.engine = create_db_engine(database_url(_settings))
    app.state.user_store = UserStore(app.state.engine)
    app.state.favorite_store = FavoriteStore(app.state.engine)
    logger.info("Database initialized (%s)", app.state.engine.url.get_backend_name())
    app.state.token_service = TokenService.from_settings(_settings)

    yield

    app.state.engine.dispose()
    logger.info("DishDelight API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="DishDelight API",
    description="Accounts and favorite meals for the DishDelight recipe browser.",
    version=_VERSION,
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware stack
# ---------------------------------------------------------------------------

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)

app.add_middleware(SlowAPIMiddleware)

# SlowAPI looks for app.state.limiter by convention.
app.state.limiter = limiter


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


# ---------------------------------------------------------------------------
# Router registration
# ---------------------------------------------------------------------------

app.include_router(auth_router, prefix="/api/v1", tags=["Auth"])
app.include_router(favorites_router, prefix="/api/v1", tags=["Favorites"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# Every error body has the same shape: {"code", "message"} plus "error" for
# internal errors. Clients can always read `message` without checking the
# status code first.
# ---------------------------------------------------------------------------


def _error_response(status_code: int, code: str, message: str, error: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorDetail(code=code, message=message, error=error).model_dump(exclude_none=True),
    )


@app.exception_handler(DishDelightError)
async def app_error_handler(request: Request, exc: DishDelightError) -> JSONResponse:
    """Map the core.errors taxonomy onto its HTTP status and error body."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.detail)
    return _error_response(exc.status_code, exc.code, exc.message, exc.detail)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Return 429 when a rate limit is exceeded, with Retry-After in seconds."""
    retry_after = exc.limit.limit.get_expiry()
    response = _error_response(429, "rate_limited", "Too many requests.")
    response.headers["Retry-After"] = str(retry_after)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON, wrong field types or bad path ids are a 400, like missing fields."""
    locations = [".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in exc.errors()]
    fields = ", ".join(loc for loc in locations if loc)
    message = "Request validation failed."
    if fields:
        message = f"Request validation failed: {fields}."
    return _error_response(400, "bad_request", message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return the common error body for framework-raised HTTP errors (404 route, 405 method)."""
    return _error_response(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception is written to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(500, "internal_error", "An unexpected error occurred.")


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@app.get("/", response_model=MessageResponse, tags=["Health"])
async def root() -> MessageResponse:
    return MessageResponse(message="Welcome to DishDelight!")


@app.get("/api/v1/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return API liveness, version, and database reachability."""
    db_ok = ping(request.app.state.engine)
    return HealthResponse(
        status="healthy" if db_ok else "degraded",
        version=_VERSION,
        components={"app": "ok", "database": "ok" if db_ok else "error"},
    )

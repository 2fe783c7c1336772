"""
api/main.py -- FastAPI application entry point for the account service.

Run with:      uvicorn asgi:app --reload
               python main.py --port 3000

Middleware stack (outermost to innermost):
  1. log_requests    -- one log line per request with latency
  2. CORSMiddleware  -- adds CORS headers for the configured origins

Lifespan builds the three long-lived objects from Settings and stores them on
app.state:
  user_store   -- UserStore bound to DATABASE_URL
  tokens       -- TokenService bound to JWT_SECRET
  auth_service -- AuthService(user_store, tokens), used by every route
Shutdown closes the store.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ErrorResponse, HealthResponse
from api.routes.auth import router as auth_router
from api.routes.users import router as users_router
from auth.errors import AuthError
from auth.service import AuthService
from auth.store import UserStore
from auth.tokens import TokenService
from core.config import get_settings

API_VERSION = "1.0.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

# Configured before Settings loads so its startup warnings use this format.
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("accounts.api")

_settings = get_settings()
if _settings.debug:
    logging.getLogger().setLevel(logging.DEBUG)

# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the store, token service and auth flows; close the store on shutdown."""
    logger.info("Account API starting up")
    settings = get_settings()
    app.state.user_store = UserStore(db_url=settings.database_url)
    app.state.tokens = TokenService(settings.jwt_secret, settings.token_expire_seconds)
    app.state.auth_service = AuthService(app.state.user_store, app.state.tokens)
    logger.info("Auth initialized (insecure_secret=%s)", settings.using_insecure_secret)
    if settings.using_insecure_secret:
        logger.warning("Tokens are signed with the built-in default key; set JWT_SECRET")

    yield

    app.state.user_store.close()
    logger.info("Account API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="Account API",
    description="User registration, login and listing with bearer tokens.",
    version=API_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


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

app.include_router(auth_router, prefix="/api", tags=["Auth"])
app.include_router(users_router, prefix="/api", tags=["Users"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same {error, message?, statusCode?} envelope so
# clients can parse errors without inspecting the status code first.
# ---------------------------------------------------------------------------


def _error_response(status_code: int, error: str, message: str | None = None, **extra) -> JSONResponse:
    body = ErrorResponse(error=error, message=message, **extra)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


def _format_validation_error(err: dict) -> str:
    """Render one pydantic error as "<field>: <message>"."""
    loc = [str(part) for part in err.get("loc", ()) if part != "body"]
    field = ".".join(loc) or "body"
    if err.get("type") == "missing":
        return f"{field}: O campo '{field}' é obrigatório"
    if err.get("type") == "string_type":
        return f"{field}: O campo '{field}' deve ser uma string"
    return f"{field}: {err.get('msg', 'inválido')}"


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 with one "<field>: <message>" entry per failing field, comma-joined."""
    message = ", ".join(_format_validation_error(err) for err in exc.errors())
    return _error_response(400, "Bad Request", message, statusCode=400)


@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError) -> JSONResponse:
    """Render Conflict / Unauthorized / InternalError raised by the auth flows.

    InternalError carries no message, so nothing internal reaches the client.
    """
    return _error_response(exc.status_code, exc.error, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Return the envelope for routing-level errors (404, 405)."""
    phrase = HTTPStatus(exc.status_code).phrase
    message = exc.detail if isinstance(exc.detail, str) and exc.detail != phrase else None
    return _error_response(exc.status_code, phrase, message, statusCode=exc.status_code)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unexpected server errors.

    The raw exception goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error_response(500, "Internal Server Error")


# ---------------------------------------------------------------------------
# Health endpoint
#
# Defined directly in main.py (not in a router) so it is always reachable
# regardless of router registration state. No authentication.
# ---------------------------------------------------------------------------


@app.get("/api/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Return API liveness, version and database reachability."""
    try:
        database = "ok" if request.app.state.user_store.ping() else "error"
    except SQLAlchemyError:
        logger.exception("Health check could not reach the database")
        database = "error"
    return HealthResponse(version=API_VERSION, components={"app": "ok", "database": database})

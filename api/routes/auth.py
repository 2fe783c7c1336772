"""
api/routes/auth.py -- Registration, login and session verification endpoints.

Routes:
  POST /api/auth/register  -- create an account; 201 {token, user}
  POST /api/auth/login     -- exchange credentials for a token; 200 {token, user}
  GET  /api/auth/me        -- user behind the bearer token; 200 {user}

Errors are raised as auth.errors.AuthError subclasses by AuthService and the
get_current_user dependency; api/main.py renders them. Handlers are plain
`def` functions so the blocking store and bcrypt calls run in the thread pool.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from api.models import AuthResponse, ErrorResponse, LoginRequest, UserCreate, UserOut, UserResponse
from auth.dependencies import get_auth_service, get_current_user
from auth.models import User
from auth.service import AuthService

# Auth policy:
# - POST /api/auth/register: public
# - POST /api/auth/login:    public
# - GET  /api/auth/me:       requires bearer token (get_current_user)
router = APIRouter()

_ERRORS = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.post(
    "/auth/register",
    response_model=AuthResponse,
    status_code=201,
    responses={code: _ERRORS[code] for code in (400, 409, 500)},
)
def register(body: UserCreate, auth: AuthService = Depends(get_auth_service)) -> AuthResponse:
    """Create an account and return a token for it.

    A second registration with the same email is rejected with 409 before
    anything is written.
    """
    result = auth.register(body.name, body.email, body.password)
    return AuthResponse(token=result.token, user=UserOut.from_user(result.user))


@router.post(
    "/auth/login",
    response_model=AuthResponse,
    responses={code: _ERRORS[code] for code in (400, 401, 500)},
)
def login(body: LoginRequest, response: Response, auth: AuthService = Depends(get_auth_service)) -> AuthResponse:
    """Authenticate with email and password.

    Returns the same generic 401 for an unknown email and a wrong password.
    """
    result = auth.login(body.email, body.password)
    response.headers["Cache-Control"] = "no-store"
    return AuthResponse(token=result.token, user=UserOut.from_user(result.user))


@router.get(
    "/auth/me",
    response_model=UserResponse,
    responses={code: _ERRORS[code] for code in (401, 500)},
)
def me(current_user: User = Depends(get_current_user)) -> UserResponse:
    """Return the user the bearer token was issued for."""
    return UserResponse(user=UserOut.from_user(current_user))

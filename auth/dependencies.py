"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

Credentials arrive only as an Authorization: Bearer <token> header.
get_current_user() hands the token (or None) to AuthService.current_user(),
which raises InvalidToken / Unauthorized on failure; api/main.py turns those
into 401 responses.

Layer rule: auth/dependencies.py may import from fastapi (for Request) because
this module is part of the FastAPI dependency injection system. No imports
from api/.
"""

from __future__ import annotations

from fastapi import Request

from auth.models import User
from auth.service import AuthService


def get_auth_service(request: Request) -> AuthService:
    """Return the AuthService the lifespan attached to app.state."""
    return request.app.state.auth_service


def bearer_token(request: Request) -> str | None:
    """Extract the token from an Authorization: Bearer header.

    The scheme is matched case-insensitively. Returns None when the header is
    missing, uses another scheme, or carries an empty token.
    """
    auth_header = request.headers.get("Authorization", "")
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


def get_current_user(request: Request) -> User:
    """Require a valid bearer token. Raises a 401-mapped AuthError otherwise.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(user: User = Depends(get_current_user)): ...
    """
    return get_auth_service(request).current_user(bearer_token(request))

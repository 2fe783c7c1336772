"""
api/routes/users.py -- User creation and listing endpoints.

Routes:
  POST /api/users  -- create a user; 201 {user}
  GET  /api/users  -- list every user; 200 {users: [{id, name, email, createdAt}]}

Both require a bearer token. There are no roles: any authenticated user may
create and list users. The listing has no pagination or filtering; it returns
the store's full snapshot. Password hashes are never serialized.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.models import ErrorResponse, UserCreate, UserListItem, UserListResponse, UserOut, UserResponse
from auth.dependencies import get_auth_service, get_current_user
from auth.models import User
from auth.service import AuthService

router = APIRouter()


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=201,
    responses={code: {"model": ErrorResponse} for code in (400, 401, 409, 500)},
)
def create_user(
    body: UserCreate,
    current_user: User = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
) -> UserResponse:
    """Create a user with the same contract as registration, without issuing a token."""
    user = auth.create_user(body.name, body.email, body.password)
    return UserResponse(user=UserOut.from_user(user))


@router.get(
    "/users",
    response_model=UserListResponse,
    responses={code: {"model": ErrorResponse} for code in (401, 500)},
)
def list_users(
    current_user: User = Depends(get_current_user),
    auth: AuthService = Depends(get_auth_service),
) -> UserListResponse:
    """List all user accounts."""
    return UserListResponse(users=[UserListItem.from_user(u) for u in auth.list_users()])

"""
API request and response models for the account service REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two
with the from_user() factory methods below.

Validation messages are the client-facing strings; api/main.py joins them as
"<field>: <message>" in the 400 response.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from auth.models import User

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 6


def _check_email(value: str) -> str:
    # Any non-blank string is accepted; the address is only a lookup key.
    value = value.strip()
    if not value:
        raise PydanticCustomError("email_required", "O campo 'email' é obrigatório")
    return value


def _check_password(value: str) -> str:
    if len(value) < PASSWORD_MIN_LENGTH:
        raise PydanticCustomError(
            "password_too_short",
            "A senha deve ter no mínimo {min_length} caracteres",
            {"min_length": PASSWORD_MIN_LENGTH},
        )
    return value


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class UserCreate(BaseModel):
    """Request body for POST /api/auth/register and POST /api/users.

    Both entry points share this contract: name, email and password are all
    required, and the password is always persisted (hashed).
    """

    name: str = Field(description="Nome completo do usuário")
    email: str = Field(description="Email do usuário")
    password: str = Field(description="Senha do usuário")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < NAME_MIN_LENGTH:
            raise PydanticCustomError(
                "name_too_short",
                "O nome deve ter no mínimo {min_length} caracteres",
                {"min_length": NAME_MIN_LENGTH},
            )
        if len(value) > NAME_MAX_LENGTH:
            raise PydanticCustomError(
                "name_too_long",
                "O nome deve ter no máximo {max_length} caracteres",
                {"max_length": NAME_MAX_LENGTH},
            )
        return value

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return _check_password(value)


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login.

    The email is trimmed the same way registration trims it, so a padded
    address still finds its account. A blank email matches nothing and gets
    the generic 401.
    """

    email: str = Field(description="Email do usuário")
    password: str = Field(description="Senha do usuário")

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return value.strip()

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return _check_password(value)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserOut(BaseModel):
    """Public view of a user. Never carries the password hash."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(id=user.id, name=user.name or "", email=user.email)


class UserListItem(UserOut):
    """One row of GET /api/users. Serialized with the createdAt key."""

    created_at: str = Field(serialization_alias="createdAt")

    @classmethod
    def from_user(cls, user: User) -> "UserListItem":
        return cls(id=user.id, name=user.name or "", email=user.email, created_at=user.created_at or "")


class AuthResponse(BaseModel):
    """Response for register (201) and login (200)."""

    model_config = ConfigDict(frozen=True)

    token: str
    user: UserOut


class UserResponse(BaseModel):
    """Response for GET /api/auth/me and POST /api/users."""

    model_config = ConfigDict(frozen=True)

    user: UserOut


class UserListResponse(BaseModel):
    """Response for GET /api/users."""

    model_config = ConfigDict(frozen=True)

    users: list[UserListItem]


class ErrorResponse(BaseModel):
    """Error envelope returned on every 4xx/5xx response.

    Dump with exclude_none=True so absent optional keys are omitted.
    """

    model_config = ConfigDict(frozen=True)

    error: str
    message: Optional[str] = None
    statusCode: Optional[int] = None  # noqa: N815 -- wire name


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]

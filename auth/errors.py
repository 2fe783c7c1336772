"""
auth/errors.py -- Error taxonomy for the auth flows.

Every failure a flow can report is an AuthError subclass. Each class carries
the HTTP status and the short error label the API returns, so api/main.py
needs a single exception handler for the whole family. The messages are the
client-facing strings; they never include internal detail.

Input validation errors are not here: request bodies are validated by pydantic
before a flow runs, and FastAPI raises RequestValidationError (400).
"""

from __future__ import annotations


class AuthError(Exception):
    """Base class for flow failures that map onto an HTTP error response."""

    status_code: int = 500
    error: str = "Internal Server Error"
    default_message: str | None = None

    def __init__(self, message: str | None = None) -> None:
        self.message = message if message is not None else self.default_message
        super().__init__(self.message or self.error)


class Conflict(AuthError):
    status_code = 409
    error = "Conflict"


class EmailAlreadyRegistered(Conflict):
    default_message = "Email já cadastrado"


class Unauthorized(AuthError):
    status_code = 401
    error = "Unauthorized"


class InvalidCredentials(Unauthorized):
    # Same text for unknown email and wrong password.
    default_message = "Email ou senha inválidos"


class InvalidToken(Unauthorized):
    # Missing, malformed, forged and expired tokens all look the same.
    default_message = "Token inválido ou expirado"


class InternalError(AuthError):
    """Unexpected store or runtime failure. The message is withheld from clients."""

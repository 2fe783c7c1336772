"""
auth/service.py -- Register / login / me / user management flows.

No HTTP here. Each method composes UserStore and TokenService calls into one
outcome, and either returns a result or raises an auth.errors.AuthError that
the API layer turns into a response. Both collaborators are injected at
construction, so the flows run against any store/secret pair (tests build
their own).

Request bodies are validated before a flow is called, so no flow ever touches
the store with unvalidated input.

Store failures: every store call runs inside _store_guard(). A
SQLAlchemyError is logged with its traceback and re-raised as InternalError,
whose client-facing message is empty. Nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError

from auth.errors import InternalError, InvalidCredentials, Unauthorized
from auth.models import User
from auth.store import UserStore
from auth.tokens import TokenService, authenticate_user, hash_password

logger = logging.getLogger("accounts.auth")


@dataclass(frozen=True)
class AuthResult:
    """A freshly issued token together with the user it was issued for."""

    token: str
    user: User


@contextmanager
def _store_guard(action: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Store failure while %s", action)
        raise InternalError() from exc


class AuthService:
    """Auth and user-listing flows over an injected store and token service."""

    def __init__(self, store: UserStore, tokens: TokenService) -> None:
        self.store = store
        self.tokens = tokens

    def register(self, name: str, email: str, password: str) -> AuthResult:
        """Create an account and sign a token for it.

        Raises EmailAlreadyRegistered (409) if the email is taken.
        """
        user = self.create_user(name, email, password)
        return AuthResult(token=self.tokens.issue(user.id, user.email), user=user)

    def login(self, email: str, password: str) -> AuthResult:
        """Exchange valid credentials for a token.

        Unknown email and wrong password raise the same InvalidCredentials,
        so the response does not reveal whether the email is registered.
        """
        with _store_guard("logging in"):
            user = authenticate_user(self.store, email, password)
        if user is None:
            logger.info("Failed login attempt")
            raise InvalidCredentials()
        logger.info("User logged in id=%s", user.id)
        return AuthResult(token=self.tokens.issue(user.id, user.email), user=user)

    def current_user(self, token: str | None) -> User:
        """Resolve a bearer token to its user.

        Raises InvalidToken if the token does not verify, and Unauthorized if
        it verifies but its user no longer exists.
        """
        claims = self.tokens.verify(token)
        with _store_guard("loading the token subject"):
            user = self.store.get_by_id(claims.id)
        if user is None:
            raise Unauthorized("Usuário não encontrado")
        return user

    def create_user(self, name: str, email: str, password: str) -> User:
        """Persist a new account with a hashed password."""
        hashed = hash_password(password)
        with _store_guard("creating a user"):
            user = self.store.create_user(name, email, hashed)
        logger.info("User created id=%s", user.id)
        return user

    def list_users(self) -> list[User]:
        with _store_guard("listing users"):
            return self.store.list_users()

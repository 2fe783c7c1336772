"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and flows do the
work; api/models.py maps these onto the HTTP contract.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class User:
    """One registered account.

    id and created_at are assigned by UserStore.create_user() and never change.
    hashed_password is a bcrypt hash; the plaintext is never stored.
    name is nullable in storage, but every creation path requires it.
    """

    email: str
    name: str | None = None
    id: str | None = None
    hashed_password: str | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Subject identity carried inside a verified bearer token."""

    id: str
    email: str

"""
auth/tokens.py -- JWT token service and password hashing.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry the subject's id and email plus
       iat/exp claims; exp defaults to seven days after issuance. There is no
       revocation list: a token stays valid until it expires. verify() raises
       InvalidToken on any failure (missing, malformed, forged, expired) and
       never says which one it was.

  Secret: TokenService receives its signing key at construction. The app
       lifespan builds it from core.config.get_settings(); tests build their
       own. Nothing in this module reads configuration at import time.

  Passwords: bcrypt over a SHA-256 pre-hash, with a per-hash random salt.
       checkpw() compares in constant time. The _DUMMY_HASH constant enables
       timing equalization in authenticate_user() so response time does not
       reveal whether an email is registered.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import base64
import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING

import bcrypt
from jose import JWTError, jwt

from auth.errors import InvalidToken
from auth.models import TokenClaims
from core.config import TOKEN_LIFETIME_SECONDS

if TYPE_CHECKING:
    from auth.models import User
    from auth.store import UserStore

logger = logging.getLogger("accounts.auth")

_ALGORITHM = "HS256"

# ---------------------------------------------------------------------------
# Password hashing (bcrypt -- direct usage, no passlib wrapper)
# ---------------------------------------------------------------------------


def _prehash(plain: str) -> bytes:
    # bcrypt reads at most 72 bytes; a base64 SHA-256 digest is 44.
    return base64.b64encode(hashlib.sha256(plain.encode("utf-8")).digest())


def hash_password(plain: str) -> str:
    """Return a salted bcrypt hash of the given plaintext password.

    The password is SHA-256 digested first, so every byte of a long password
    counts and bcrypt never sees more than 72 bytes.
    """
    return bcrypt.hashpw(_prehash(plain), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext password matches the bcrypt hash."""
    try:
        return bcrypt.checkpw(_prehash(plain), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash.
        return False


# Computed once at module load so the first login attempt is not measurably
# slower than subsequent ones.
_DUMMY_HASH: str = hash_password("accounts_timing_dummy")


def authenticate_user(store: UserStore, email: str, password: str) -> User | None:
    """Check an email/password pair with timing equalization.

    Always runs bcrypt whether or not the user exists:
    - Unknown email: bcrypt runs against _DUMMY_HASH (same cost as real check)
    - Wrong password: bcrypt runs against the real hash (same cost)

    Returns the User on success, None on any failure.
    """
    user = store.get_by_email(email)
    if user is None or user.hashed_password is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


# ---------------------------------------------------------------------------
# JWT encode / decode
# ---------------------------------------------------------------------------


class TokenService:
    """Signs and verifies bearer tokens for one signing key.

    Usage:
        tokens = TokenService(settings.jwt_secret, settings.token_expire_seconds)
        token = tokens.issue(user.id, user.email)
        claims = tokens.verify(token)   # TokenClaims(id=..., email=...)
    """

    def __init__(self, secret_key: str, expire_seconds: int = TOKEN_LIFETIME_SECONDS) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds

    def issue(self, subject_id: str, subject_email: str) -> str:
        """Encode a signed JWT for the subject, expiring expire_seconds from now."""
        now = datetime.now(timezone.utc)
        payload = {
            "id": subject_id,
            "email": subject_email,
            "iat": now,
            "exp": now + timedelta(seconds=self.expire_seconds),
        }
        return jwt.encode(payload, self._secret_key, algorithm=_ALGORITHM)

    def verify(self, token: str | None) -> TokenClaims:
        """Decode and verify a JWT, returning its subject claims.

        Raises InvalidToken for every kind of failure.
        """
        if not token:
            raise InvalidToken()
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[_ALGORITHM])
        except JWTError as exc:
            raise InvalidToken() from exc
        subject_id = payload.get("id")
        subject_email = payload.get("email")
        if not isinstance(subject_id, str) or not isinstance(subject_email, str) or "exp" not in payload:
            raise InvalidToken()
        return TokenClaims(id=subject_id, email=subject_email)

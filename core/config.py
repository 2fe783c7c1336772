"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for the account service happen here. No module
should call os.getenv() or os.environ.get() directly -- import get_settings()
instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. jwt_secret -> JWT_SECRET). Type coercion and validation are built in.

  @model_validator(mode="after"): Runs the JWT_SECRET policy once all fields
      are resolved from the environment.

Secret policy:
  An unset JWT_SECRET falls back to INSECURE_DEFAULT_SECRET, which is public
  (it is written right here). Startup logs a WARNING every time that happens.
  An explicitly configured secret shorter than 32 characters is rejected.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("accounts.config")

# Publicly known signing key. Tokens signed with it can be forged by anyone.
INSECURE_DEFAULT_SECRET = "sua_chave_secreta_aqui_mude_em_producao"

TOKEN_LIFETIME_SECONDS = 7 * 24 * 60 * 60

_DEFAULT_DB_URL = f"sqlite:///{Path(__file__).resolve().parent.parent / 'auth' / 'accounts.db'}"


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Core
    # ------------------------------------------------------------------

    debug: bool = False
    database_url: str = _DEFAULT_DB_URL
    cors_origins: list[str] = ["*"]

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    # Empty string is the sentinel for "not configured".
    jwt_secret: str = ""
    token_expire_seconds: int = TOKEN_LIFETIME_SECONDS

    @property
    def using_insecure_secret(self) -> bool:
        """True when jwt_secret is the built-in fallback key."""
        return self.jwt_secret == INSECURE_DEFAULT_SECRET

    @model_validator(mode="after")
    def validate_jwt_secret(self) -> "Settings":
        """Apply the JWT_SECRET fallback and length policy.

        Missing secret: use INSECURE_DEFAULT_SECRET and warn loudly. Tokens
            stay valid across restarts, but anyone who reads this file can
            mint them.

        Configured secret: must be at least 32 characters.
        """
        if not self.jwt_secret:
            self.jwt_secret = INSECURE_DEFAULT_SECRET
            logger.warning(
                "WARNING: JWT_SECRET is not set. Falling back to the built-in insecure default key. "
                "Any client can forge tokens. Set JWT_SECRET before deploying."
            )
        elif len(self.jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters.")
        if self.token_expire_seconds <= 0:
            raise ValueError("TOKEN_EXPIRE_SECONDS must be positive.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()

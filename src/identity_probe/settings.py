"""
identity_probe.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the store and the probe harness.
- Carry the user and password policy the identity layer enforces.
- Offer a cached settings instance for composition roots.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Single settings object handed to the identity scope.
    Defaults mirror a stock identity configuration with unique emails required.
    """

    model_config = SettingsConfigDict(env_prefix="IDP_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "identity-probe"
    log_level: str = "INFO"

    # Persistence: each scope gets its own disposable SQLite file under this directory.
    data_dir: Path = Path(".")
    connect_timeout: float = 5.0

    # User options
    require_unique_email: bool = True
    allowed_user_name_characters: str = (
        "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-._@+"
    )

    # Password options
    password_required_length: int = Field(default=6, ge=1)
    password_required_unique_chars: int = Field(default=1, ge=1)
    password_require_digit: bool = True
    password_require_lowercase: bool = True
    password_require_uppercase: bool = True
    password_require_non_alphanumeric: bool = True

    # bcrypt work factor; tests lower it to keep the suite fast.
    password_hash_rounds: int = Field(default=12, ge=4, le=31)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for every scope.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Policy fields are flat on purpose so they can be overridden one by one via env vars
# (e.g. IDP_PASSWORD_REQUIRED_LENGTH=12).

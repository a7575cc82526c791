"""
taskgate.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Hide secrets from repr/logging (the token signing secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Env-driven configuration (prefix `TASKGATE_`), defaults safe for local dev.
    """

    model_config = SettingsConfigDict(env_prefix="TASKGATE_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "taskgate"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 5000

    # Token issuance
    jwt_alg: str = "HS256"
    jwt_secret: str = Field(default="dev-secret-change-me", repr=False)
    token_ttl_minutes: int = Field(default=10, ge=1)

    # Password hashing cost
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./taskgate.db"

    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()

"""Environment-driven configuration for the task timer service.

Every tunable lives on ``AppSettings`` so the rest of the code can simply do
``from ..core.config import settings``. Values come from the process
environment first, then from ``.env``/``.env.local`` files, then from the
defaults below, which are good enough to boot a development instance.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Task Timer"
    HOST: str = "0.0.0.0"
    PORT: int = 8089
    LOG_LEVEL: str = "INFO"

    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parent.parent.parent / "data")
    # Server-local zone used to decide which calendar day a timestamp falls on.
    TZ: str = "America/Chicago"

    DB_URL: str = Field(default="", validation_alias=AliasChoices("DATABASE_URL", "DB_URL"))
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 5
    DB_POOL_TIMEOUT: int = 10
    DB_POOL_RECYCLE: int = 1800

    JWT_SECRET: str = "change-me"
    JWT_SESSION_TTL_DAYS: int = 7
    BCRYPT_ROUNDS: int = 10
    PASSWORD_MIN_LENGTH: int = 6

    SESSION_COOKIE_NAME: str = "auth_token"
    SESSION_COOKIE_SECURE: bool = False

    ALLOWED_ORIGINS: list[str] = Field(default_factory=list)

    @property
    def session_max_age(self) -> int:
        return self.JWT_SESSION_TTL_DAYS * 24 * 60 * 60

    @property
    def database_url(self) -> str:
        return self.DB_URL or f"sqlite:///{self.DATA_DIR / 'tasktimer.db'}"

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, value: Any) -> list[str]:
        if value in (None, "", []):
            return []
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, Iterable):
            return [str(item).strip() for item in value if str(item).strip()]
        raise TypeError("ALLOWED_ORIGINS must be a comma separated string or list")

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def check_bcrypt_rounds(cls, value: int) -> int:
        if not 4 <= value <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return value


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    settings = AppSettings()
    if not settings.DB_URL:
        settings.DATA_DIR.mkdir(parents=True, exist_ok=True)
    return settings


settings = get_settings()

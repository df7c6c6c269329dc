# core/config.py
"""Runtime configuration via pydantic-settings (.env + environment variables)."""
import logging
from typing import List, Literal, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """All settings, resolved as .env file < environment variables < constructor kwargs.

    Each field reads the upper-cased variable of the same name, e.g. DATABASE_URL.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    # -- Storage --
    database_url: str = "sqlite:///bookframe.db"

    # -- Search fallback --
    search_cooldown_seconds: int = 60
    cooldown_backend: Literal["memory", "database"] = "memory"
    search_default_limit: int = 10

    # -- Providers --
    google_books_url: str = "https://www.googleapis.com/books/v1/volumes"
    google_books_api_key: Optional[str] = None
    open_library_url: str = "https://openlibrary.org"
    provider_timeout: float = 10.0

    # -- API --
    log_level: str = "INFO"
    cors_origins: str = "*"  # comma-separated

    @field_validator('cooldown_backend', mode='before')
    @classmethod
    def lower_backend(cls, value):
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_level(cls, value):
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator('google_books_api_key', mode='before')
    @classmethod
    def blank_key_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the API and CLI entry points"""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)

"""
Application configuration with environment-driven settings.
"""

from enum import Enum
from functools import lru_cache
import os
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StoreBackend(str, Enum):
    """Supported document store backends."""

    FIRESTORE = "firestore"
    SQL = "sql"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "contactforms"
    app_env: Literal["dev", "qa", "uat", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = Field(default=5000, ge=1, le=65535)

    # CORS
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins",
    )

    # Document store
    store_backend: StoreBackend = Field(
        default=StoreBackend.FIRESTORE,
        description="Backend used to persist contact documents",
    )
    contacts_collection: str = Field(
        default="contactForms",
        min_length=1,
        description="Collection holding contact form submissions",
    )

    # Firebase service account
    firebase_project_id: str = Field(default="", description="Firebase project ID")
    firebase_client_email: str = Field(
        default="",
        description="Service account client email",
    )
    firebase_private_key: str = Field(
        default="",
        description="Service account private key (PEM, literal \\n allowed)",
    )

    # SQL backend
    database_url: str = Field(
        default="sqlite+aiosqlite:///./contacts.db",
        description="SQLAlchemy async URL used when store_backend=sql",
    )

    @field_validator("firebase_private_key", mode="before")
    @classmethod
    def normalize_private_key(cls, v: str | None) -> str:
        """Turn escaped newlines from env files into real newlines."""
        if not v:
            return ""
        return v.replace("\\n", "\n")

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def _get_settings_cached() -> Settings:
    return Settings()


def get_settings() -> Settings:
    # Under pytest env vars are monkeypatched per test; never serve a frozen instance.
    if os.environ.get("PYTEST_CURRENT_TEST"):
        return Settings()
    return _get_settings_cached()

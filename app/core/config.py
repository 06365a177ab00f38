# /app/core/config.py

"""
Application configuration.

All values are environment-driven (case-insensitive) and may also be placed in
a local `.env` file. The settings object is created once and shared through
`get_settings()`.
"""

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PROJECT_NAME: str = "AcademyOS Backend API"
    ENVIRONMENT: str = "development"

    # --- Database ---
    DATABASE_URL: str = "sqlite:///./academyos.db"

    # --- Auth ---
    SECRET_KEY: str = Field("dev-insecure-change-me", description="Key used to sign access tokens.")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    # --- System settings store (flat key-value JSON file) ---
    SETTINGS_FILE: str = "app/data/system_settings.json"

    # Comma separated list; "*" allows every origin.
    CORS_ORIGINS: str = "*"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

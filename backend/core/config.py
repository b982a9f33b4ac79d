"""
Configuration management for the maintenance backend.

Values are read from environment variables (or a local ``.env`` file) so
that secrets and database credentials never live in the code base.
"""

from typing import List

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

DEFAULT_JWT_SECRET = "dev-secret-change-in-production"


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False
    )

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./gearguard.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # Query logging
    LOG_SQL_QUERIES: bool = False
    SLOW_QUERY_THRESHOLD_SECONDS: float = 1.0

    # JWT Authentication - MUST be overridden in production
    JWT_SECRET_KEY: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 30
    JWT_ISSUER: str = "gearguard-api"

    # Environment Settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # API
    API_PREFIX: str = "/api"
    CORS_ORIGINS: str = "http://localhost:3000"

    @field_validator("LOG_LEVEL", mode="after")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def validate_production_secret(self):
        """Refuse to run production with the development JWT secret."""
        if self.is_production and self.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
            raise ValueError(
                "JWT_SECRET_KEY must be set to a secure value in production"
            )
        return self

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.lower() == "development"

    @property
    def cors_origin_list(self) -> List[str]:
        """Parse CORS origins from a comma separated string."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Returns:
        Settings instance with environment variables loaded
    """
    return Settings()


settings = get_settings()

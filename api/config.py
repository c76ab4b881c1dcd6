"""
Configuration management for LAKECAST API.
Loads environment variables and provides typed configuration.
"""
from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    # ========================================================================
    # API Configuration
    # ========================================================================
    api_title: str = "LAKECAST API"
    api_version: str = "1.0.0"
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    # ========================================================================
    # CORS Configuration
    # ========================================================================
    cors_origins: str = "http://localhost:5173,http://localhost:3000"
    cors_credentials: bool = True

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ========================================================================
    # Application Configuration
    # ========================================================================
    environment: str = "development"
    log_level: str = "info"

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment.lower() == "production"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Service settings
    """
    return Settings()


# Convenience exports
settings = get_settings()

if settings.is_production and "localhost" in settings.cors_origins.lower():
    raise ValueError(
        "CORS_ORIGINS must not include localhost in production!"
    )

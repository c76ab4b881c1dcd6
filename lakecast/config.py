"""
LAKECAST Configuration Module.

Centralized configuration for the GLOFS frame client, loaded from
environment variables (and a local .env file when present).

Usage:
    from lakecast.config import get_settings

    print(get_settings().glofs_api)
"""

import logging
from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment."""

    # ========================================================================
    # GLOFS frame server
    # ========================================================================
    # Origin of the frame server, e.g. "http://glofs.example.org:2153"
    glofs_api: str = ""
    # Seconds; None leaves the transport default in place
    glofs_timeout: Optional[float] = None

    # ========================================================================
    # Logging
    # ========================================================================
    flow_debug: bool = False
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("glofs_api")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        if value.endswith("/"):
            return value[:-1]
        return value

    def configure_logging(self):
        """Configure logging based on settings."""
        level = getattr(logging, self.log_level.upper(), logging.INFO)
        logging.basicConfig(level=level, format=self.log_format)
        if self.flow_debug:
            logging.getLogger("lakecast.glofs").setLevel(logging.DEBUG)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Client settings
    """
    return Settings()

"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

from .constants import THRESHOLDS


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Site under audit
    SITE_URL: str = "https://julyu.com"
    USER_AGENT: str = "JulyuSEOAuditor/1.0"

    # Timeouts (seconds)
    PAGE_TIMEOUT: float = THRESHOLDS["fetch_timeout_ms"] / 1000
    RESOURCE_TIMEOUT: float = THRESHOLDS["resource_timeout_ms"] / 1000

    # Logging
    LOG_LEVEL: str = "INFO"

    # Admin API access (open when no token is configured)
    ADMIN_API_TOKEN: Optional[str] = None
    AUTH_ENABLED: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
        case_sensitive = False

    @property
    def base_url(self) -> str:
        """Site origin without a trailing slash."""
        return self.SITE_URL.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()

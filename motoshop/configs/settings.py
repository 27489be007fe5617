"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from motoshop.configs.base import AppSettings, BaseSettings
from motoshop.configs.database import DatabaseSettings
from motoshop.configs.job_lifecycle import JobLifecycleSettings
from motoshop.configs.s3_photos import S3PhotosSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    app: AppSettings = Field(default_factory=AppSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    s3_photos: S3PhotosSettings = Field(default_factory=S3PhotosSettings)
    job_lifecycle: JobLifecycleSettings = Field(default_factory=JobLifecycleSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from motoshop.configs import get_settings
        settings = get_settings()
    """
    return Settings()

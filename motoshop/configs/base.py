"""
Base and application-level configuration.

BaseSettings carries the .env handling every config module shares.
AppSettings holds what the API process itself needs: its name, log
level, CORS origins and bind address. Environment variables use the
MOTOSHOP_ prefix (MOTOSHOP_LOG_LEVEL, MOTOSHOP_CORS_ORIGINS, ...).

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Shared .env loading for every motoshop settings class."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class AppSettings(BaseSettings):
    """API process settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="MOTOSHOP_",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="Motorcycle Shop API", description="Title shown in the OpenAPI docs")
    environment: str = Field(
        default="development",
        description="Deployment environment (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    cors_origins: str = Field(
        default="*",
        description="Comma separated origins allowed to call the API from a browser",
    )
    api_host: str = Field(default="0.0.0.0", description="uvicorn bind host")
    api_port: int = Field(default=8000, description="uvicorn bind port")

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

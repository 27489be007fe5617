"""
S3 job photo bucket configuration.

Settings for job photo storage and public URL construction.

Dependencies: pydantic_settings
System role: Photo storage bucket configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class S3PhotosSettings(BaseSettings):
    """Settings for S3 job photo bucket operations."""

    model_config = SettingsConfigDict(
        env_prefix="S3_PHOTOS_",
        case_sensitive=False,
        extra="ignore",
    )

    bucket: str = Field(
        default="motoshop-dev-job-photos",
        description="S3 bucket for job photo storage",
    )
    region: str = Field(
        default="ap-northeast-2",
        description="AWS region for S3 bucket",
    )
    public_base_url: str | None = Field(
        default=None,
        description="Public URL prefix for stored photos (CDN); defaults to the bucket URL",
    )

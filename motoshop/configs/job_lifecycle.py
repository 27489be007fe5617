"""
Job lifecycle configuration.

Photo evidence minimums and optimistic-update failure policy.

Dependencies: pydantic_settings
System role: Tunables for the transition policy and synchronizer
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class JobLifecycleSettings(BaseSettings):
    """Settings for job status transitions and persistence."""

    model_config = SettingsConfigDict(
        env_prefix="JOB_LIFECYCLE_",
        case_sensitive=False,
        extra="ignore",
    )

    min_start_photos: int = Field(
        default=3,
        ge=0,
        description="Start photos required before a job can go in-progress",
    )
    min_completion_photos: int = Field(
        default=3,
        ge=0,
        description="Completion photos required before a job can be completed",
    )
    rollback_on_remote_failure: bool = Field(
        default=False,
        description="Revert the local cache to the last confirmed copy when a remote write fails",
    )

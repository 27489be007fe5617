"""
Application services.

Exports:
  - JobSynchronizer: Local-first optimistic job persistence
  - JobService: Job use cases for an explicit caller
  - ShopService: Shop registration and membership
  - QuickNoteService: Canned job notes
  - LocalJobCache, SyncState: Local job cache
"""

from motoshop.application.services.job_service import JobListing, JobService
from motoshop.application.services.job_sync import (
    CostResult,
    DeletionResult,
    JobSynchronizer,
    PhotoResult,
    RetryReport,
    TransitionResult,
)
from motoshop.application.services.local_cache import CacheEntry, LocalJobCache, SyncState
from motoshop.application.services.quick_note_service import QuickNoteService
from motoshop.application.services.shop_service import ShopService

__all__ = [
    "CacheEntry",
    "CostResult",
    "DeletionResult",
    "JobListing",
    "JobService",
    "JobSynchronizer",
    "LocalJobCache",
    "PhotoResult",
    "QuickNoteService",
    "RetryReport",
    "ShopService",
    "SyncState",
    "TransitionResult",
]

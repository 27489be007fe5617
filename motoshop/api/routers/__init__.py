"""API routers."""

from .health import router as health_router
from .jobs import router as jobs_router
from .quick_notes import router as quick_notes_router
from .shops import router as shops_router
from .tracking import router as tracking_router

__all__ = [
    "health_router",
    "jobs_router",
    "quick_notes_router",
    "shops_router",
    "tracking_router",
]

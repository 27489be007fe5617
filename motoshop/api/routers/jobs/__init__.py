"""
Jobs router package.

Exports the router for job management endpoints.
"""

from .jobs_router import router

__all__ = ["router"]

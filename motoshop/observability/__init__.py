"""
Observability module.

Provides logging configuration, correlation ID tracking and
request logging middleware.
"""

from motoshop.observability.correlation import get_correlation_id, set_correlation_id
from motoshop.observability.logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "get_correlation_id",
    "set_correlation_id",
]

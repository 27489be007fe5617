"""
Logging utilities for safe structured logging.

Context values are flattened to short strings before they reach the
LogRecord: enums by value, times as ISO strings, short lists of names
(changed job fields, photo kinds) joined, anything bulky summarized.
Keys that clash with LogRecord attributes are prefixed with "ctx_".

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import enum
import logging
from datetime import datetime
from typing import Any

from motoshop.core.exceptions import MotoShopException

_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}
_MAX_JOINED_ITEMS = 10
_MAX_ITEM_LENGTH = 64
_ERROR_DETAIL_KEYS = ("operation", "collection", "error_code", "field")


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Safely convert any value to a string for logging.

    Photo references can be long URLs, so only short string lists are
    joined and long strings are truncated.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, enum.Enum):
            val_str = str(value.value)
        elif isinstance(value, datetime):
            val_str = value.isoformat()
        elif isinstance(value, str):
            val_str = value
        elif isinstance(value, (list, tuple, set, frozenset)):
            val_str = _summarize_sequence(value)
        elif isinstance(value, dict):
            val_str = f"dict({len(value)} keys)"
        else:
            val_str = str(value)

        if len(val_str) > max_length:
            return val_str[:max_length] + f"... (truncated, {len(val_str)} total)"
        return val_str
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"


def _summarize_sequence(value) -> str:
    items = list(value)
    if len(items) <= _MAX_JOINED_ITEMS and all(
        isinstance(item, (str, enum.Enum)) and len(safe_log_value(item)) <= _MAX_ITEM_LENGTH
        for item in items
    ):
        return ",".join(safe_log_value(item) for item in items)
    return f"{type(value).__name__}({len(items)} items)"


def _safe_context(context: dict[str, Any]) -> dict[str, str]:
    return {
        (f"ctx_{key}" if key in _RESERVED_ATTRS else key): safe_log_value(val)
        for key, val in context.items()
    }


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """
    Log a message with structured context, safely converting all values.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Context dict with arbitrary key-value pairs
    """
    logger.log(level, message, extra=_safe_context(context))


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    **context,
) -> None:
    """
    Log an exception with its traceback and context.

    Application exceptions also contribute the failing operation,
    collection and error code from their details.
    """
    safe_context = _safe_context(context)
    safe_context["error_type"] = type(exc).__name__
    if isinstance(exc, MotoShopException):
        safe_context["error_msg"] = exc.message
        for key in _ERROR_DETAIL_KEYS:
            if key in exc.details:
                safe_context[f"error_{key}"] = safe_log_value(exc.details[key])
    else:
        safe_context["error_msg"] = str(exc)
    logger.error(message, exc_info=exc, extra=safe_context)

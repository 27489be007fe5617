"""
Domain error handling for API endpoints.

Provides a decorator that turns application exceptions into
HTTPExceptions with a uniform error body across routers.

Dependencies: fastapi, motoshop.core.exceptions
System role: Exception to HTTP status mapping
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from motoshop.core.exceptions import (
    DeletionNotConfirmed,
    FinalCostRequired,
    InvalidTransition,
    MotoShopException,
    NotFound,
    PermissionDenied,
    PreconditionError,
    RemoteFailure,
    ValidationError,
)

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

FINAL_COST_REQUIRED_ACTION = "final_cost_required"


def error_body(exc: MotoShopException, action: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"error": exc.message, "details": exc.details}
    if action:
        body["action"] = action
    return body


def to_http_exception(exc: MotoShopException) -> HTTPException:
    """Map an application exception to its HTTP status and error body."""
    if isinstance(exc, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error_body(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_body(exc))
    if isinstance(exc, FinalCostRequired):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=error_body(exc, action=FINAL_COST_REQUIRED_ACTION),
        )
    if isinstance(exc, (PreconditionError, InvalidTransition, DeletionNotConfirmed)):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error_body(exc))
    if isinstance(exc, PermissionDenied):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error_body(exc))
    if isinstance(exc, RemoteFailure):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=error_body(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=error_body(exc))


def handle_domain_errors(func: F) -> F:
    """
    Decorator to transform application errors into HTTPExceptions.

    This centralizes:
    - Logging of errors with their details
    - Mapping the exception hierarchy to HTTP status codes
    - Uniform error bodies ({error, details, action})
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except MotoShopException as e:
            http_exc = to_http_exception(e)
            if http_exc.status_code >= 500:
                logger.error(
                    "Request failed",
                    extra={"error_type": type(e).__name__, "error": e.message, "details": e.details},
                )
            else:
                logger.warning(
                    "Request rejected",
                    extra={"error_type": type(e).__name__, "error": e.message, "status_code": http_exc.status_code},
                )
            raise http_exc

        except Exception as e:
            logger.exception(
                "Unexpected failure in request",
                extra={"error": str(e)}
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail={"error": "An internal error occurred"},
            )

    return wrapper  # type: ignore

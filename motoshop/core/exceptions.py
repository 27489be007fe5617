"""
Exception hierarchy for the motorcycle shop application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging, and
all messages are safe to show to the person at the counter.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class MotoShopException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(MotoShopException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class PhotoIndexOutOfRange(ValidationError):
    """Raised when a photo index does not address an existing photo."""

    def __init__(self, kind: str, index: int, size: int) -> None:
        super().__init__(
            f"No {kind} photo at position {index}",
            field="index",
            details={"kind": kind, "index": index, "size": size},
        )


class TransitionInFlight(ValidationError):
    """Raised when a status change for the job is already being written."""

    def __init__(self, job_id: str) -> None:
        super().__init__(
            f"A status change for job {job_id} is already in progress",
            details={"job_id": job_id},
        )


class PreconditionError(MotoShopException):
    """Raised when the evidence a transition depends on is missing."""


class PhotoRequirementNotMet(PreconditionError):
    """Raised when a photo set holds fewer photos than a transition needs."""

    def __init__(self, kind: str, required: int, actual: int) -> None:
        """
        Initialize photo requirement error.

        Args:
            kind: Photo set name ("start" or "completion")
            required: Minimum number of photos
            actual: Number of photos currently uploaded
        """
        self.kind = kind
        self.required = required
        self.actual = actual
        super().__init__(
            f"Upload at least {required} {kind} photos first ({actual} uploaded)",
            {"kind": kind, "required": required, "actual": actual},
        )


class FinalCostRequired(PreconditionError):
    """Raised when a job would be completed without a numeric final cost."""

    def __init__(self, job_id: str, reason: str = "missing") -> None:
        self.job_id = job_id
        super().__init__(
            "Final cost required",
            {"job_id": job_id, "reason": reason, "action": "final_cost_required"},
        )


class PhotoRemovalNotAllowed(PreconditionError):
    """Raised when removing a photo would alter a closed job's record."""

    def __init__(self, kind: str, status: str) -> None:
        super().__init__(
            f"{kind.capitalize()} photos cannot be removed from a {status} job",
            {"kind": kind, "status": status},
        )


class InvalidTransition(MotoShopException):
    """Raised when a status change is not part of the job state machine."""

    def __init__(self, from_status: str, to_status: str) -> None:
        """
        Initialize invalid transition error.

        Args:
            from_status: Current job status
            to_status: Requested job status
        """
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid transition: {from_status} -> {to_status}",
            {"from": from_status, "to": to_status},
        )


class RemoteFailure(MotoShopException):
    """Raised when a data gateway or storage call fails."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize remote failure.

        Args:
            message: Error message
            operation: Operation that failed (insert, update, delete, upload, ...)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class NotFound(MotoShopException):
    """Raised when a record cannot be found."""

    def __init__(
        self,
        collection: str,
        record_id: str,
        message: str | None = None,
    ) -> None:
        self.collection = collection
        self.record_id = record_id
        super().__init__(
            message or f"{collection} record not found: {record_id}",
            {"collection": collection, "id": record_id},
        )


class JobNotFoundError(NotFound):
    """Raised when a job id is unknown."""

    def __init__(self, job_id: str) -> None:
        super().__init__("jobs", job_id, f"Job not found: {job_id}")


class ShopNotFoundError(NotFound):
    """Raised when a shop id is unknown."""

    def __init__(self, shop_id: str) -> None:
        super().__init__("shops", shop_id, f"Shop not found: {shop_id}")


class PermissionDenied(MotoShopException):
    """Raised when the caller may not see or change a record."""


class DeletionNotConfirmed(MotoShopException):
    """Raised when a job deletion is attempted without both confirmations."""

    def __init__(self, job_id: str, confirmations: int, required: int) -> None:
        super().__init__(
            f"Deleting job {job_id} needs {required} confirmations ({confirmations} given)",
            {"job_id": job_id, "confirmations": confirmations, "required": required},
        )

"""
Job validation utilities.

Request checks not covered by Pydantic models.

Dependencies: motoshop.models.job, motoshop.core.exceptions
System role: Job request validation
"""

from motoshop.core.exceptions import ValidationError
from motoshop.models.job import AddNoteRequest, CreateJobRequest, UpdateCostsRequest

MAX_PHOTO_BYTES = 10 * 1024 * 1024


def validate_job_creation(request: CreateJobRequest) -> None:
    """
    Validate job intake request.

    Raises:
        ValidationError: If business validation fails
    """
    if request.description is not None and not request.description.strip():
        raise ValidationError("Description cannot be whitespace-only", field="description")

    motorcycle = request.motorcycle
    if not any([motorcycle.make, motorcycle.model, motorcycle.plate, motorcycle.vin]):
        raise ValidationError(
            "Motorcycle needs at least a make, model, plate or VIN",
            field="motorcycle",
        )


def validate_note(request: AddNoteRequest) -> None:
    """
    Validate note request.

    Raises:
        ValidationError: Neither or both of text and quick_note_id given,
            or whitespace-only text
    """
    if (request.text is None) == (request.quick_note_id is None):
        raise ValidationError(
            "Provide either note text or a quick note id",
            field="text",
            details={"quick_note_id": request.quick_note_id},
        )
    if request.text is not None and not request.text.strip():
        raise ValidationError("Note cannot be empty or whitespace-only", field="text")


def validate_cost_update(request: UpdateCostsRequest) -> None:
    """
    Validate cost update request.

    Raises:
        ValidationError: If neither cost is provided
    """
    if request.initial_cost is None and request.final_cost is None:
        raise ValidationError("At least one cost must be provided")


def validate_photo_upload(content: bytes) -> None:
    """
    Validate uploaded photo size.

    Raises:
        ValidationError: Empty or oversized file
    """
    if not content:
        raise ValidationError("Photo file is empty", field="file")
    if len(content) > MAX_PHOTO_BYTES:
        raise ValidationError(
            "Photo file is too large",
            field="file",
            details={"max_bytes": MAX_PHOTO_BYTES, "size": len(content)},
        )

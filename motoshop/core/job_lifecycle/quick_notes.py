"""
Quick note categories.

Quick notes are canned progress texts grouped by the stage of work they
describe. Picking one appends its text to a job's notes log.

Dependencies: motoshop.core.exceptions
System role: Closed category list for canned job notes
"""

import enum

from motoshop.core.exceptions import ValidationError


class QuickNoteCategory(str, enum.Enum):
    """Stages of work a quick note can describe."""

    SERVICE_STARTED = "Service Started"
    PARTS_ORDERED = "Parts Ordered"
    WAITING_FOR_CUSTOMER = "Waiting for Customer"
    QUALITY_CHECK = "Quality Check"
    SERVICE_COMPLETED = "Service Completed"
    CUSTOMER_PICKUP = "Customer Pickup"
    GENERAL = "General"


def parse_category(value: str | None) -> QuickNoteCategory:
    """
    Raises:
        ValidationError: Unknown category
    """
    if value is None:
        return QuickNoteCategory.GENERAL
    try:
        return QuickNoteCategory(value)
    except ValueError:
        raise ValidationError(
            f"Unknown quick note category: {value}",
            field="category",
            details={"allowed": [c.value for c in QuickNoteCategory]},
        )

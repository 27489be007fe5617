"""
Quick note schemas.

Request/response schemas for canned job notes.

Dependencies: pydantic
System role: Quick note API contracts
"""

from datetime import datetime

from pydantic import BaseModel, Field

from motoshop.core.job_lifecycle import QuickNoteCategory


class CreateQuickNoteRequest(BaseModel):
    """Request schema for adding a quick note."""

    note_text: str = Field(..., min_length=1, max_length=2000)
    category: QuickNoteCategory = QuickNoteCategory.GENERAL
    is_default: bool = Field(False, description="Offer to every shop (administrators only)")


class QuickNoteResponse(BaseModel):
    """Response schema for a quick note."""

    id: str
    note_text: str
    category: QuickNoteCategory
    is_default: bool
    shop_id: str | None = None
    created_at: datetime | None = None


class QuickNoteListResponse(BaseModel):
    """Response schema for listing quick notes."""

    quick_notes: list[QuickNoteResponse]
    total: int

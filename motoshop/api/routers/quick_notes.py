"""
Quick note API endpoints.

Routes:
- GET /quick-notes - List default and shop quick notes
- POST /quick-notes - Add a quick note
- DELETE /quick-notes/{id} - Remove a quick note

Dependencies: motoshop.application.services, motoshop.models
System role: Canned job note HTTP API
"""

from fastapi import APIRouter, Depends, Response

from motoshop.api.deps.dependencies import get_current_caller, get_quick_note_service
from motoshop.api.routers.router_utils.error_handling import handle_domain_errors
from motoshop.application.services import QuickNoteService
from motoshop.core.access import Caller
from motoshop.models.quick_note import (
    CreateQuickNoteRequest,
    QuickNoteListResponse,
    QuickNoteResponse,
)

router = APIRouter(prefix="/quick-notes", tags=["quick-notes"])


@router.get("", response_model=QuickNoteListResponse)
@handle_domain_errors
async def list_quick_notes(
    category: str | None = None,
    caller: Caller = Depends(get_current_caller),
    quick_note_service: QuickNoteService = Depends(get_quick_note_service),
) -> QuickNoteListResponse:
    """
    List the quick notes the caller can pick from.

    Raises:
        HTTPException(400): Unknown category
    """
    notes = await quick_note_service.list_quick_notes(caller, category=category)
    return QuickNoteListResponse(
        quick_notes=[QuickNoteResponse(**note) for note in notes],
        total=len(notes),
    )


@router.post("", response_model=QuickNoteResponse, status_code=201)
@handle_domain_errors
async def add_quick_note(
    request: CreateQuickNoteRequest,
    caller: Caller = Depends(get_current_caller),
    quick_note_service: QuickNoteService = Depends(get_quick_note_service),
) -> QuickNoteResponse:
    """
    Add a quick note for the caller's shop.

    Raises:
        HTTPException(400): Blank text
        HTTPException(403): No approved membership, or default note from a non-admin
    """
    note = await quick_note_service.add_quick_note(
        caller,
        request.note_text,
        category=request.category.value,
        default=request.is_default,
    )
    return QuickNoteResponse(**note)


@router.delete("/{quick_note_id}", status_code=204)
@handle_domain_errors
async def delete_quick_note(
    quick_note_id: str,
    caller: Caller = Depends(get_current_caller),
    quick_note_service: QuickNoteService = Depends(get_quick_note_service),
) -> Response:
    """
    Remove a quick note.

    Raises:
        HTTPException(403): Caller is neither the author nor an admin
        HTTPException(404): Unknown note
    """
    await quick_note_service.delete_quick_note(caller, quick_note_id)
    return Response(status_code=204)

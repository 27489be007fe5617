"""
Quick note service orchestrator.

Lists, adds and removes the canned progress notes mechanics pick from,
and resolves a picked note to the text appended to a job. A caller sees
their shop's notes plus the default notes every shop shares.

Dependencies: motoshop.boundary.gateway, motoshop.core
System role: Quick note use case orchestration
"""

import logging

from motoshop.boundary.gateway.protocol import DataGateway, Record
from motoshop.core.access import Caller, Role, can_see_all_jobs
from motoshop.core.exceptions import NotFound, PermissionDenied, ValidationError
from motoshop.core.job_lifecycle import parse_category

logger = logging.getLogger(__name__)

COLLECTION = "quick_notes"


def _shop_of(caller: Caller) -> str | None:
    if caller.shop_id and caller.membership_approved:
        return caller.shop_id
    return None


class QuickNoteService:
    """Quick note service orchestrator."""

    def __init__(self, gateway: DataGateway) -> None:
        """
        Initialize quick note service.

        Args:
            gateway: Data gateway holding the quick_notes collection
        """
        self._gateway = gateway

    def _is_visible(self, caller: Caller, note: Record) -> bool:
        if note["is_default"] or can_see_all_jobs(caller):
            return True
        shop_id = _shop_of(caller)
        return shop_id is not None and note["shop_id"] == shop_id

    async def list_quick_notes(
        self,
        caller: Caller,
        category: str | None = None,
    ) -> list[Record]:
        """
        List the default notes and the caller's shop notes.

        Returns:
            list[Record]: Notes sorted by category, then text

        Raises:
            ValidationError: Unknown category
        """
        filters: Record = {}
        if category is not None:
            filters["category"] = parse_category(category).value

        notes = await self._gateway.select(COLLECTION, filters={**filters, "is_default": True})
        shop_id = _shop_of(caller)
        if shop_id is not None:
            notes += await self._gateway.select(
                COLLECTION,
                filters={**filters, "shop_id": shop_id, "is_default": False},
            )
        return sorted(notes, key=lambda note: (note["category"], note["note_text"]))

    async def add_quick_note(
        self,
        caller: Caller,
        text: str,
        category: str | None = None,
        default: bool = False,
    ) -> Record:
        """
        Add a quick note for the caller's shop, or a default note.

        Raises:
            ValidationError: Blank text or unknown category
            PermissionDenied: Default note from a non-admin, or shop note
                without an approved membership
        """
        text = (text or "").strip()
        if not text:
            raise ValidationError("Quick note text is required", field="text")
        note_category = parse_category(category)

        if default:
            if caller.role is not Role.ADMIN:
                raise PermissionDenied(
                    "Only administrators may add default quick notes",
                    {"user_id": caller.id},
                )
            shop_id = None
        else:
            shop_id = _shop_of(caller)
            if shop_id is None:
                raise PermissionDenied(
                    "An approved shop membership is required to add quick notes",
                    {"user_id": caller.id},
                )

        note = await self._gateway.insert(
            COLLECTION,
            {
                "shop_id": shop_id,
                "user_id": caller.id,
                "note_text": text,
                "category": note_category.value,
                "is_default": default,
            },
        )
        logger.info(
            "Quick note added",
            extra={"quick_note_id": note["id"], "shop_id": shop_id, "category": note_category.value},
        )
        return note

    async def get_quick_note(self, caller: Caller, quick_note_id: str) -> Record:
        """
        Raises:
            NotFound: Unknown id, or a note of another shop
        """
        note = await self._gateway.get(COLLECTION, quick_note_id)
        if note is None or not self._is_visible(caller, note):
            raise NotFound(COLLECTION, quick_note_id, f"Quick note not found: {quick_note_id}")
        return note

    async def resolve_text(self, caller: Caller, quick_note_id: str) -> str:
        """Return the text a picked quick note appends to a job."""
        note = await self.get_quick_note(caller, quick_note_id)
        return note["note_text"]

    async def delete_quick_note(self, caller: Caller, quick_note_id: str) -> None:
        """
        Remove a quick note.

        Authors remove their own shop notes; administrators remove any.

        Raises:
            NotFound: Unknown or invisible note
            PermissionDenied: Caller is neither the author nor an admin
        """
        note = await self.get_quick_note(caller, quick_note_id)
        if caller.role is not Role.ADMIN and (note["is_default"] or note["user_id"] != caller.id):
            raise PermissionDenied(
                f"Not allowed to delete quick note {quick_note_id}",
                {"user_id": caller.id, "quick_note_id": quick_note_id},
            )
        await self._gateway.delete(COLLECTION, quick_note_id)
        logger.info("Quick note deleted", extra={"quick_note_id": quick_note_id})


"""
Test suite for QuickNoteService.

Runs against the in-memory SQLite gateway.

System role: Verification of quick note use cases
"""

import pytest

from motoshop.application.services import QuickNoteService
from motoshop.core.access import Caller, Role
from motoshop.core.exceptions import NotFound, PermissionDenied, ValidationError


@pytest.fixture
def quick_notes(gateway) -> QuickNoteService:
    return QuickNoteService(gateway)


@pytest.fixture
async def other_shop(gateway) -> dict:
    return await gateway.insert(
        "shops",
        {"id": "SHOP-OTHER", "name": "Daegu Cycles", "owner_id": "user-other"},
    )


class TestAddQuickNote:
    async def test_note_should_belong_to_caller_shop(self, quick_notes, shop, mechanic) -> None:
        # Act
        note = await quick_notes.add_quick_note(mechanic, "  Chain and sprockets ordered ", "Parts Ordered")

        # Assert
        assert note["shop_id"] == shop["id"]
        assert note["user_id"] == mechanic.id
        assert note["note_text"] == "Chain and sprockets ordered"
        assert note["category"] == "Parts Ordered"
        assert note["is_default"] is False

    async def test_category_should_default_to_general(self, quick_notes, shop, mechanic) -> None:
        note = await quick_notes.add_quick_note(mechanic, "Washed and polished")

        assert note["category"] == "General"

    async def test_blank_text_should_be_rejected(self, quick_notes, shop, mechanic) -> None:
        with pytest.raises(ValidationError):
            await quick_notes.add_quick_note(mechanic, "   ")

    async def test_unknown_category_should_be_rejected(self, quick_notes, shop, mechanic) -> None:
        with pytest.raises(ValidationError):
            await quick_notes.add_quick_note(mechanic, "Lunch", "Lunch Break")

    async def test_unapproved_member_should_be_denied(self, quick_notes, shop) -> None:
        pending = Caller(id="user-new", role=Role.MECHANIC, shop_id=shop["id"], membership_approved=False)

        with pytest.raises(PermissionDenied):
            await quick_notes.add_quick_note(pending, "Started")

    async def test_only_admin_adds_default_notes(self, quick_notes, shop, mechanic, admin) -> None:
        with pytest.raises(PermissionDenied):
            await quick_notes.add_quick_note(mechanic, "Test ride done", default=True)

        note = await quick_notes.add_quick_note(admin, "Test ride done", "Quality Check", default=True)

        assert note["is_default"] is True
        assert note["shop_id"] is None


class TestListQuickNotes:
    async def test_list_should_merge_default_and_own_shop_notes(
        self, quick_notes, shop, other_shop, mechanic, outsider, admin
    ) -> None:
        # Arrange
        await quick_notes.add_quick_note(admin, "Test ride done", "Quality Check", default=True)
        await quick_notes.add_quick_note(mechanic, "Bike ready for pickup", "Customer Pickup")
        await quick_notes.add_quick_note(outsider, "Fork seals ordered", "Parts Ordered")

        # Act
        notes = await quick_notes.list_quick_notes(mechanic)

        # Assert
        assert [(n["category"], n["note_text"]) for n in notes] == [
            ("Customer Pickup", "Bike ready for pickup"),
            ("Quality Check", "Test ride done"),
        ]

    async def test_list_should_filter_by_category(self, quick_notes, shop, mechanic, admin) -> None:
        await quick_notes.add_quick_note(admin, "Test ride done", "Quality Check", default=True)
        await quick_notes.add_quick_note(mechanic, "Bike ready for pickup", "Customer Pickup")

        notes = await quick_notes.list_quick_notes(mechanic, category="Quality Check")

        assert [n["note_text"] for n in notes] == ["Test ride done"]

    async def test_caller_without_shop_sees_only_defaults(self, quick_notes, shop, mechanic, admin) -> None:
        await quick_notes.add_quick_note(admin, "Test ride done", default=True)
        await quick_notes.add_quick_note(mechanic, "Bike ready for pickup")
        loner = Caller(id="user-loner", role=Role.MECHANIC)

        notes = await quick_notes.list_quick_notes(loner)

        assert [n["note_text"] for n in notes] == ["Test ride done"]


class TestResolveAndDelete:
    async def test_resolve_text(self, quick_notes, shop, mechanic) -> None:
        note = await quick_notes.add_quick_note(mechanic, "Waiting on parts")

        assert await quick_notes.resolve_text(mechanic, note["id"]) == "Waiting on parts"

    async def test_other_shop_note_should_be_not_found(self, quick_notes, shop, other_shop, mechanic, outsider) -> None:
        note = await quick_notes.add_quick_note(outsider, "Fork seals ordered")

        with pytest.raises(NotFound):
            await quick_notes.resolve_text(mechanic, note["id"])

    async def test_malformed_id_should_be_not_found(self, quick_notes, shop, mechanic) -> None:
        with pytest.raises(NotFound):
            await quick_notes.resolve_text(mechanic, "not-a-uuid")

    async def test_author_deletes_own_note(self, quick_notes, gateway, shop, mechanic) -> None:
        note = await quick_notes.add_quick_note(mechanic, "Waiting on parts")

        await quick_notes.delete_quick_note(mechanic, note["id"])

        assert await gateway.get("quick_notes", note["id"]) is None

    async def test_colleague_cannot_delete_note(self, quick_notes, shop, mechanic, shop_admin) -> None:
        note = await quick_notes.add_quick_note(shop_admin, "Waiting on parts")

        with pytest.raises(PermissionDenied):
            await quick_notes.delete_quick_note(mechanic, note["id"])

    async def test_mechanic_cannot_delete_default_note(self, quick_notes, shop, mechanic, admin) -> None:
        note = await quick_notes.add_quick_note(admin, "Test ride done", default=True)

        with pytest.raises(PermissionDenied):
            await quick_notes.delete_quick_note(mechanic, note["id"])

        await quick_notes.delete_quick_note(admin, note["id"])

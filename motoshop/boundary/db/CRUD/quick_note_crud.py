"""
Quick note CRUD operations.

Dependencies: sqlalchemy, motoshop.boundary.db.models
System role: Quick note persistence operations
"""

from motoshop.boundary.db.CRUD.base_crud import UUIDKeyedCRUD
from motoshop.boundary.db.models.quick_note_model import QuickNoteModel


class QuickNoteCRUD(UUIDKeyedCRUD[QuickNoteModel]):
    """CRUD operations for QuickNoteModel."""

    def __init__(self) -> None:
        """Initialize QuickNoteCRUD with QuickNoteModel."""
        super().__init__(QuickNoteModel)


quick_note_crud = QuickNoteCRUD()

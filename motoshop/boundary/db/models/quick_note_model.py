"""
Quick note ORM model.

Canned note texts mechanics pick from when logging job progress.
Shop notes belong to one shop; default notes (is_default) have no shop
and are offered to everyone.

Dependencies: sqlalchemy, motoshop.boundary.db.base
System role: Quick note persistence
"""

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from motoshop.boundary.db.base import Base, TimestampMixin, UUIDMixin


class QuickNoteModel(Base, UUIDMixin, TimestampMixin):
    """
    Quick note ORM model.

    Attributes:
        id: UUID primary key
        shop_id: Owning shop, None for default notes
        user_id: Identity id of the author
        note_text: Text appended to a job when the note is picked
        category: Progress category the note is grouped under
        is_default: Offered to every shop
    """

    __tablename__ = "quick_notes"

    shop_id: Mapped[str | None] = mapped_column(
        String(32),
        ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    user_id: Mapped[str] = mapped_column(String(64), nullable=False)

    note_text: Mapped[str] = mapped_column(Text, nullable=False)

    category: Mapped[str] = mapped_column(String(64), nullable=False)

    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)

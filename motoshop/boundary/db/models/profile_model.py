"""
Profile ORM model.

One row per identity; holds the global role used for job visibility.

Dependencies: sqlalchemy, motoshop.boundary.db.base
System role: User profile persistence
"""

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from motoshop.boundary.db.base import Base, TimestampMixin
from motoshop.core.access.caller import Role


class ProfileModel(Base, TimestampMixin):
    """
    Profile ORM model.

    Attributes:
        id: Identity id issued by the auth provider
        email: Login email
        display_name: Name shown in the dashboard
        role: Global role (admin, support, mechanic)
    """

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, values_callable=lambda e: [m.value for m in e], length=16),
        nullable=False,
        default=Role.MECHANIC,
    )

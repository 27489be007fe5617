"""
Shop ORM model.

Dependencies: sqlalchemy, motoshop.boundary.db.base
System role: Registered repair shops
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motoshop.boundary.db.base import Base, TimestampMixin


class ShopModel(Base, TimestampMixin):
    """
    Shop ORM model.

    Attributes:
        id: Human-friendly shop id (SHOP-...)
        name: Shop name
        owner_id: Identity id of the registering user
        email: Contact email
        phone: Contact phone
        address: Street address
        memberships: Users attached to this shop
    """

    __tablename__ = "shops"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    phone: Mapped[str | None] = mapped_column(String(64), nullable=True)

    address: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    memberships = relationship(
        "ShopMembershipModel",
        back_populates="shop",
        cascade="all, delete-orphan",
    )

"""
Shop membership ORM model.

Associates a user with a shop and a role. The approved flag gates
whether the user's shop-scoped job queries return anything.

Dependencies: sqlalchemy, motoshop.boundary.db.base
System role: Shop membership persistence
"""

from sqlalchemy import Boolean, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motoshop.boundary.db.base import Base, TimestampMixin, UUIDMixin
from motoshop.core.access.caller import Role


class ShopMembershipModel(Base, UUIDMixin, TimestampMixin):
    """
    Shop membership ORM model.

    Attributes:
        id: UUID primary key
        user_id: Identity id of the member
        shop_id: Shop the user belongs to
        role: Role within the shop
        approved: Whether a shop admin approved the membership

    Constraints:
        (user_id, shop_id) unique
    """

    __tablename__ = "shop_memberships"
    __table_args__ = (
        UniqueConstraint("user_id", "shop_id", name="uq_shop_memberships_user_shop"),
    )

    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    shop_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("shops.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    role: Mapped[Role] = mapped_column(
        Enum(Role, native_enum=False, values_callable=lambda e: [m.value for m in e], length=16),
        nullable=False,
        default=Role.MECHANIC,
    )

    approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    shop = relationship("ShopModel", back_populates="memberships")

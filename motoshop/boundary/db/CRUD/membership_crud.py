"""
Shop membership CRUD operations.

Dependencies: sqlalchemy, motoshop.boundary.db.models
System role: Membership persistence operations
"""

from motoshop.boundary.db.CRUD.base_crud import UUIDKeyedCRUD
from motoshop.boundary.db.models.membership_model import ShopMembershipModel


class ShopMembershipCRUD(UUIDKeyedCRUD[ShopMembershipModel]):
    """CRUD operations for ShopMembershipModel."""

    def __init__(self) -> None:
        """Initialize ShopMembershipCRUD with ShopMembershipModel."""
        super().__init__(ShopMembershipModel)


membership_crud = ShopMembershipCRUD()

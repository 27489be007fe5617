"""
Shop CRUD operations.

Dependencies: sqlalchemy, motoshop.boundary.db.models
System role: Shop persistence operations
"""

from motoshop.boundary.db.CRUD.base_crud import BaseCRUD
from motoshop.boundary.db.models.shop_model import ShopModel


class ShopCRUD(BaseCRUD[ShopModel]):
    """CRUD operations for ShopModel."""

    def __init__(self) -> None:
        """Initialize ShopCRUD with ShopModel."""
        super().__init__(ShopModel)


shop_crud = ShopCRUD()

"""
Profile CRUD operations.

Dependencies: sqlalchemy, motoshop.boundary.db.models
System role: Profile persistence operations
"""

from motoshop.boundary.db.CRUD.base_crud import BaseCRUD
from motoshop.boundary.db.models.profile_model import ProfileModel


class ProfileCRUD(BaseCRUD[ProfileModel]):
    """CRUD operations for ProfileModel."""

    def __init__(self) -> None:
        """Initialize ProfileCRUD with ProfileModel."""
        super().__init__(ProfileModel)


profile_crud = ProfileCRUD()

"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from motoshop.boundary.db.CRUD import job_crud

    job = await job_crud.get_by_id(db, "JOB-LXQ2K9ZAB3C")
"""

from motoshop.boundary.db.CRUD.base_crud import BaseCRUD, UUIDKeyedCRUD
from motoshop.boundary.db.CRUD.job_crud import JobCRUD, job_crud
from motoshop.boundary.db.CRUD.membership_crud import ShopMembershipCRUD, membership_crud
from motoshop.boundary.db.CRUD.profile_crud import ProfileCRUD, profile_crud
from motoshop.boundary.db.CRUD.quick_note_crud import QuickNoteCRUD, quick_note_crud
from motoshop.boundary.db.CRUD.shop_crud import ShopCRUD, shop_crud

__all__ = [
    "BaseCRUD",
    "UUIDKeyedCRUD",
    "JobCRUD",
    "job_crud",
    "ProfileCRUD",
    "profile_crud",
    "QuickNoteCRUD",
    "quick_note_crud",
    "ShopCRUD",
    "shop_crud",
    "ShopMembershipCRUD",
    "membership_crud",
]

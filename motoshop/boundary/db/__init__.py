"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(): Async connection management
  - JobModel, ProfileModel, ShopModel, ShopMembershipModel: Domain entities
  - job_crud, profile_crud, shop_crud, membership_crud: CRUD operation singletons

Dependencies: sqlalchemy, motoshop.configs
System role: Database adapter backing the data access gateway
"""

from motoshop.boundary.db.base import Base, TimestampMixin, UUIDMixin
from motoshop.boundary.db.connection import get_async_engine, get_async_session_factory
from motoshop.boundary.db.models import (
    JobModel,
    ProfileModel,
    ShopMembershipModel,
    ShopModel,
)
from motoshop.boundary.db.CRUD import (
    BaseCRUD,
    JobCRUD,
    ProfileCRUD,
    ShopCRUD,
    ShopMembershipCRUD,
    job_crud,
    membership_crud,
    profile_crud,
    shop_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "JobModel",
    "ProfileModel",
    "ShopModel",
    "ShopMembershipModel",
    # CRUD classes
    "BaseCRUD",
    "JobCRUD",
    "ProfileCRUD",
    "ShopCRUD",
    "ShopMembershipCRUD",
    # CRUD singletons
    "job_crud",
    "profile_crud",
    "shop_crud",
    "membership_crud",
]

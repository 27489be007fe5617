"""
Database models package.

Exports:
  - JobModel: Service job rows
  - ProfileModel: User profiles with global role
  - ShopModel: Registered shops
  - ShopMembershipModel: User-to-shop association with role and approval
  - QuickNoteModel: Canned job notes, per shop or default

Dependencies: sqlalchemy, motoshop.boundary.db.base
System role: Database model definitions for domain entities
"""

from motoshop.boundary.db.models.job_model import JobModel
from motoshop.boundary.db.models.membership_model import ShopMembershipModel
from motoshop.boundary.db.models.profile_model import ProfileModel
from motoshop.boundary.db.models.quick_note_model import QuickNoteModel
from motoshop.boundary.db.models.shop_model import ShopModel

__all__ = [
    "JobModel",
    "ProfileModel",
    "QuickNoteModel",
    "ShopModel",
    "ShopMembershipModel",
]

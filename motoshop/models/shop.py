"""
Shop domain schemas.

Request/response schemas for shop registration and membership.

Dependencies: pydantic
System role: Shop API contracts
"""

from datetime import datetime

from pydantic import BaseModel, Field

from motoshop.core.access.caller import Role


class CreateShopRequest(BaseModel):
    """Request schema for registering a shop."""

    name: str = Field(..., min_length=1, max_length=255, description="Shop name")
    email: str | None = Field(None, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    phone: str | None = Field(None, max_length=64)
    address: str | None = Field(None, max_length=1024)


class ShopResponse(BaseModel):
    """Response schema for shop operations."""

    id: str
    name: str
    owner_id: str
    email: str | None
    phone: str | None
    address: str | None
    created_at: datetime | None = None


class InviteMemberRequest(BaseModel):
    """Request schema for adding a user to a shop."""

    user_id: str = Field(..., min_length=1, max_length=64)
    role: Role = Role.MECHANIC


class MembershipResponse(BaseModel):
    """Response schema for a shop membership."""

    id: str
    user_id: str
    shop_id: str
    role: Role
    approved: bool

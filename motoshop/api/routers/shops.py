"""
Shop API endpoints.

Routes:
- POST /shops - Register shop (caller becomes its admin)
- POST /shops/{id}/members - Invite member
- POST /shops/{id}/members/{user_id}/approve - Approve member

Dependencies: motoshop.application.services, motoshop.models
System role: Shop and membership HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from motoshop.api.deps.dependencies import get_current_caller, get_shop_service
from motoshop.api.routers.router_utils.error_handling import handle_domain_errors
from motoshop.application.services import ShopService
from motoshop.core.access import Caller
from motoshop.models.shop import (
    CreateShopRequest,
    InviteMemberRequest,
    MembershipResponse,
    ShopResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shops", tags=["shops"])


@router.post("", response_model=ShopResponse, status_code=201)
@handle_domain_errors
async def register_shop(
    request: CreateShopRequest,
    caller: Caller = Depends(get_current_caller),
    shop_service: ShopService = Depends(get_shop_service),
) -> ShopResponse:
    """
    Register a shop owned by the caller.

    Raises:
        HTTPException(400): Blank name
        HTTPException(502): Gateway write failed
    """
    shop = await shop_service.register_shop(
        caller,
        name=request.name,
        email=request.email,
        phone=request.phone,
        address=request.address,
    )
    return ShopResponse(**shop)


@router.post("/{shop_id}/members", response_model=MembershipResponse, status_code=201)
@handle_domain_errors
async def invite_member(
    shop_id: str,
    request: InviteMemberRequest,
    caller: Caller = Depends(get_current_caller),
    shop_service: ShopService = Depends(get_shop_service),
) -> MembershipResponse:
    """
    Add a user to the shop; the membership starts unapproved.

    Raises:
        HTTPException(403): Caller does not manage the shop
        HTTPException(404): Unknown shop or user
        HTTPException(400): Already a member
    """
    membership = await shop_service.invite_member(caller, shop_id, request.user_id, request.role)
    return MembershipResponse(**membership)


@router.post("/{shop_id}/members/{user_id}/approve", response_model=MembershipResponse)
@handle_domain_errors
async def approve_member(
    shop_id: str,
    user_id: str,
    caller: Caller = Depends(get_current_caller),
    shop_service: ShopService = Depends(get_shop_service),
) -> MembershipResponse:
    """
    Approve a pending membership.

    Raises:
        HTTPException(403): Caller does not manage the shop
        HTTPException(404): User is not a member
    """
    membership = await shop_service.approve_member(caller, shop_id, user_id)
    return MembershipResponse(**membership)

"""
Shop service orchestrator.

Coordinates shop registration and the membership invite/approve flow
that gates shop-scoped job visibility.

Dependencies: motoshop.boundary.gateway, motoshop.core.access
System role: Shop and membership use case orchestration
"""

import logging

from motoshop.boundary.gateway.protocol import DataGateway, Record
from motoshop.core.access import Caller, Role, ensure_can_manage_shop
from motoshop.core.exceptions import NotFound, ShopNotFoundError, ValidationError
from motoshop.core.job_lifecycle.identifiers import generate_shop_id

logger = logging.getLogger(__name__)


class ShopService:
    """Shop service orchestrator."""

    def __init__(self, gateway: DataGateway) -> None:
        """
        Initialize shop service.

        Args:
            gateway: Data gateway for shops, profiles and memberships
        """
        self._gateway = gateway

    async def register_shop(
        self,
        caller: Caller,
        name: str,
        email: str | None = None,
        phone: str | None = None,
        address: str | None = None,
    ) -> Record:
        """
        Register a shop owned by the caller.

        The owner becomes an approved admin member of the new shop.

        Returns:
            Record: Stored shop record

        Raises:
            ValidationError: Blank shop name
        """
        if not name or not name.strip():
            raise ValidationError("Shop name is required", field="name")

        shop = await self._gateway.insert(
            "shops",
            {
                "id": generate_shop_id(),
                "name": name.strip(),
                "owner_id": caller.id,
                "email": email,
                "phone": phone,
                "address": address,
            },
        )
        await self._gateway.insert(
            "shop_memberships",
            {"user_id": caller.id, "shop_id": shop["id"], "role": Role.ADMIN, "approved": True},
        )
        logger.info("Shop registered", extra={"shop_id": shop["id"], "owner_id": caller.id})
        return shop

    async def _membership(self, user_id: str, shop_id: str) -> Record | None:
        rows = await self._gateway.select(
            "shop_memberships",
            filters={"user_id": user_id, "shop_id": shop_id},
            limit=1,
        )
        return rows[0] if rows else None

    async def invite_member(
        self,
        caller: Caller,
        shop_id: str,
        user_id: str,
        role: Role | str = Role.MECHANIC,
    ) -> Record:
        """
        Add a user to a shop as an unapproved member.

        Raises:
            PermissionDenied: Caller does not manage shop_id
            ShopNotFoundError: Unknown shop
            NotFound: Unknown user profile
            ValidationError: User is already a member, or unknown role
        """
        ensure_can_manage_shop(caller, shop_id)
        try:
            role = Role(role)
        except ValueError:
            raise ValidationError(f"Unknown role: {role}", field="role")

        if await self._gateway.get("shops", shop_id) is None:
            raise ShopNotFoundError(shop_id)
        if await self._gateway.get("profiles", user_id) is None:
            raise NotFound("profiles", user_id, f"User {user_id} not found")
        if await self._membership(user_id, shop_id) is not None:
            raise ValidationError(
                "User is already a member of this shop",
                field="user_id",
                details={"shop_id": shop_id, "user_id": user_id},
            )

        membership = await self._gateway.insert(
            "shop_memberships",
            {"user_id": user_id, "shop_id": shop_id, "role": role, "approved": False},
        )
        logger.info(
            "Shop member invited",
            extra={"shop_id": shop_id, "user_id": user_id, "role": role.value},
        )
        return membership

    async def approve_member(self, caller: Caller, shop_id: str, user_id: str) -> Record:
        """
        Approve a pending membership.

        Raises:
            PermissionDenied: Caller does not manage shop_id
            NotFound: User has no membership in shop_id
        """
        ensure_can_manage_shop(caller, shop_id)
        membership = await self._membership(user_id, shop_id)
        if membership is None:
            raise NotFound("shop_memberships", user_id, f"User {user_id} is not a member of {shop_id}")
        if membership["approved"]:
            return membership

        await self._gateway.update("shop_memberships", membership["id"], {"approved": True})
        logger.info("Shop member approved", extra={"shop_id": shop_id, "user_id": user_id})
        return {**membership, "approved": True}

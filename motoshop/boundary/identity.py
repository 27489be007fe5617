"""
Caller identity resolution.

Authentication happens upstream; requests arrive with the identity id
(and optionally the login email) already established. This module turns
that identity into a Caller by reading the profile and shop membership
records through the gateway.

Dependencies: motoshop.boundary.gateway, motoshop.core.access
System role: Identity collaborator for the application layer
"""

import logging

from motoshop.boundary.gateway.protocol import DataGateway, Record
from motoshop.core.access.caller import Caller, Role

logger = logging.getLogger(__name__)


def _pick_membership(memberships: list[Record]) -> Record | None:
    # Approved membership wins; otherwise the oldest pending one
    for membership in memberships:
        if membership.get("approved"):
            return membership
    return memberships[0] if memberships else None


class IdentityResolver:
    """Builds Caller contexts from profile and membership records."""

    def __init__(self, gateway: DataGateway) -> None:
        self._gateway = gateway

    async def current_caller(self, user_id: str | None, email: str | None = None) -> Caller | None:
        """
        Resolve the caller for an authenticated identity.

        A profile is created with the mechanic role the first time an
        identity with an email is seen.

        Args:
            user_id: Identity id from the auth layer, None when anonymous
            email: Login email, used when the profile has to be created

        Returns:
            Caller | None: Caller context, None for anonymous requests or
                unknown identities without an email
        """
        if not user_id:
            return None

        profile = await self._gateway.get("profiles", user_id)
        if profile is None:
            if not email:
                logger.warning("Unknown identity without email", extra={"user_id": user_id})
                return None
            profile = await self._gateway.insert(
                "profiles",
                {"id": user_id, "email": email, "role": Role.MECHANIC},
            )
            logger.info("Profile created", extra={"user_id": user_id})

        memberships = await self._gateway.select(
            "shop_memberships",
            filters={"user_id": user_id},
            order_by="created_at",
        )
        membership = _pick_membership(memberships)

        return Caller(
            id=user_id,
            email=profile.get("email") or email,
            role=Role(profile.get("role") or Role.MECHANIC),
            shop_id=membership["shop_id"] if membership else None,
            membership_approved=bool(membership and membership.get("approved")),
            shop_role=Role(membership["role"]) if membership else None,
        )

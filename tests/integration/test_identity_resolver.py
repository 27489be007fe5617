"""
Test suite for IdentityResolver.

System role: Verification of caller resolution from profile records
"""

import pytest

from motoshop.boundary.identity import IdentityResolver
from motoshop.core.access import Role


@pytest.fixture
def resolver(gateway) -> IdentityResolver:
    return IdentityResolver(gateway)


class TestIdentityResolver:
    async def test_anonymous_request_should_resolve_to_none(self, resolver) -> None:
        assert await resolver.current_caller(None) is None

    async def test_unknown_identity_without_email_should_resolve_to_none(self, resolver) -> None:
        assert await resolver.current_caller("user-ghost") is None

    async def test_first_login_should_create_mechanic_profile(self, resolver, gateway) -> None:
        # Act
        caller = await resolver.current_caller("user-new", email="new@example.com")

        # Assert
        assert caller.role is Role.MECHANIC
        assert caller.shop_id is None
        assert caller.membership_approved is False
        profile = await gateway.get("profiles", "user-new")
        assert profile["email"] == "new@example.com"

    async def test_approved_membership_should_be_preferred(self, resolver, gateway) -> None:
        # Arrange
        await gateway.insert("profiles", {"id": "user-1", "email": "one@example.com", "role": Role.MECHANIC})
        await gateway.insert(
            "shop_memberships",
            {"user_id": "user-1", "shop_id": "SHOP-PENDING", "role": Role.MECHANIC, "approved": False},
        )
        await gateway.insert(
            "shop_memberships",
            {"user_id": "user-1", "shop_id": "SHOP-REAL", "role": Role.ADMIN, "approved": True},
        )

        # Act
        caller = await resolver.current_caller("user-1")

        # Assert
        assert caller.email == "one@example.com"
        assert caller.shop_id == "SHOP-REAL"
        assert caller.membership_approved is True
        assert caller.shop_role is Role.ADMIN

    async def test_pending_membership_should_not_be_approved(self, resolver, gateway) -> None:
        await gateway.insert("profiles", {"id": "user-2", "email": "two@example.com", "role": Role.SUPPORT})
        await gateway.insert(
            "shop_memberships",
            {"user_id": "user-2", "shop_id": "SHOP-1", "role": Role.MECHANIC},
        )

        caller = await resolver.current_caller("user-2")

        assert caller.role is Role.SUPPORT
        assert caller.shop_id == "SHOP-1"
        assert caller.membership_approved is False

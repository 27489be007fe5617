"""
Explicit caller context.

Every service operation receives the caller it acts for instead of
looking up a global session, so rules can be tested without a login.

Dependencies: dataclasses
System role: Identity passed through the application layer
"""

import enum
from dataclasses import dataclass


class Role(str, enum.Enum):
    """Roles a user can hold globally or within a shop."""

    ADMIN = "admin"
    SUPPORT = "support"
    MECHANIC = "mechanic"


@dataclass(frozen=True)
class Caller:
    """
    The authenticated user an operation runs on behalf of.

    Attributes:
        id: Identity id
        email: Login email, used as the note author
        role: Global role from the user's profile
        shop_id: Shop of the user's membership, if any
        membership_approved: Whether that membership has been approved
        shop_role: Role held within that shop
    """

    id: str
    email: str | None = None
    role: Role = Role.MECHANIC
    shop_id: str | None = None
    membership_approved: bool = False
    shop_role: Role | None = None

    @property
    def author(self) -> str:
        return self.email or self.id

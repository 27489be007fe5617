"""
Role-based job visibility.

Admins and support staff see every job. Everyone else sees only the
jobs of their shop, and only once their membership is approved; a user
without a shop sees nothing.

Dependencies: motoshop.core.access.caller
System role: Shop-scoped filtering for job queries
"""

from typing import Iterable

from motoshop.core.access.caller import Caller, Role
from motoshop.core.exceptions import PermissionDenied
from motoshop.core.job_lifecycle.records import JobRecord

_GLOBAL_ROLES = frozenset({Role.ADMIN, Role.SUPPORT})


def can_see_all_jobs(caller: Caller) -> bool:
    return caller.role in _GLOBAL_ROLES


def visibility_filters(caller: Caller) -> dict[str, str] | None:
    """
    Gateway filters limiting a jobs query to what caller may see.

    Returns:
        dict | None: Equality filters to apply, None for no restriction

    Raises:
        PermissionDenied: Caller has no approved shop membership
    """
    if can_see_all_jobs(caller):
        return None
    if not caller.shop_id or not caller.membership_approved:
        raise PermissionDenied(
            "Jobs are only visible to approved shop members",
            {"user_id": caller.id, "shop_id": caller.shop_id},
        )
    return {"shop_id": caller.shop_id}


def filter_visible(caller: Caller, jobs: Iterable[JobRecord]) -> list[JobRecord]:
    """Return the subset of jobs the caller may see."""
    if can_see_all_jobs(caller):
        return list(jobs)
    if not caller.shop_id or not caller.membership_approved:
        return []
    return [job for job in jobs if job.shop_id == caller.shop_id]


def ensure_can_view(caller: Caller, job: JobRecord) -> None:
    """
    Raises:
        PermissionDenied: Job belongs to another shop or caller is unapproved
    """
    if not filter_visible(caller, [job]):
        raise PermissionDenied(
            f"Not allowed to access job {job.id}",
            {"user_id": caller.id, "job_id": job.id},
        )


def ensure_can_manage_shop(caller: Caller, shop_id: str) -> None:
    """
    Only global admins and approved shop admins manage shop members.

    Raises:
        PermissionDenied: Caller is not an admin of shop_id
    """
    if caller.role is Role.ADMIN:
        return
    if (
        caller.shop_id == shop_id
        and caller.membership_approved
        and caller.shop_role is Role.ADMIN
    ):
        return
    raise PermissionDenied(
        f"Not allowed to manage shop {shop_id}",
        {"user_id": caller.id, "shop_id": shop_id},
    )

"""
Access control.

Exports: Caller, Role, visibility helpers
"""

from motoshop.core.access.caller import Caller, Role
from motoshop.core.access.job_visibility import (
    can_see_all_jobs,
    ensure_can_manage_shop,
    ensure_can_view,
    filter_visible,
    visibility_filters,
)

__all__ = [
    "Caller",
    "Role",
    "can_see_all_jobs",
    "ensure_can_manage_shop",
    "ensure_can_view",
    "filter_visible",
    "visibility_filters",
]

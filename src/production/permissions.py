"""
src/production/permissions.py - project membership and role-based access control (RBAC)

Membership decides whether a user may talk to the assistant about a project at
all. Roles decide which mutating actions the production handlers will perform.

Usage:
    from production.permissions import require_permission
    require_permission(ws, ctx, "create_scene")
"""


from typing import Dict, Set

from config import Role
from context import selectors
from context.loader import Workspace
from orchestrator.models import ToolContext


_EDITORS: Set[str] = {Role.OWNER.value, Role.PRODUCER.value}
_SCHEDULERS: Set[str] = _EDITORS | {Role.CREW.value}

ACTION_MATRIX: Dict[str, Set[str]] = {
    "create_scene": _EDITORS,
    "update_scene": _SCHEDULERS,
    "delete_scene": _EDITORS,
    "create_cast_member": _EDITORS,
    "update_cast_member": _EDITORS,
    "delete_cast_member": _EDITORS,
    "create_crew_member": _EDITORS,
    "update_crew_member": _EDITORS,
    "delete_crew_member": _EDITORS,
    "create_location": _SCHEDULERS,
    "update_location": _SCHEDULERS,
    "delete_location": _EDITORS,
    "create_element": _SCHEDULERS,
    "delete_element": _SCHEDULERS,
    "create_shooting_day": _EDITORS,
    "update_shooting_day": _SCHEDULERS,
    "delete_shooting_day": _EDITORS,
    "assign_scene_to_day": _SCHEDULERS,
    "add_cast_to_scene": _SCHEDULERS,
}


def is_member(ws: Workspace, project_id: str, user_id: str) -> bool:

    return selectors.get_member(ws, project_id, user_id) is not None

def has_permission(user_role: str, action: str) -> bool:
    """Return True if the given role is allowed to perform `action`."""

    allowed = ACTION_MATRIX.get(action, set())

    return user_role in allowed

def require_permission(ws: Workspace, ctx: ToolContext, action: str) -> None:

    member = selectors.get_member(ws, ctx.project_id, ctx.user_id)

    if member is None:
        raise PermissionError("You are not a member of this project.")
    if not has_permission(member.get("role", ""), action):
        raise PermissionError(f"Your role '{member.get('role')}' cannot {action.replace('_', ' ')}.")

"""
src/orchestrator/verifier.py

Independent post-execution check. Tools do not vouch for themselves: after an
approved action runs, the affected record is read back from the workspace and
compared with what the action asked for.

Verification is advisory. It never retries or rolls back; discrepancies are
only reported in the execution summary.
"""


import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from context import selectors
from context.loader import Workspace
from orchestrator.models import ToolContext, ToolResult, Verification
from orchestrator.registry import lookup
from production.session import require_workspace


logger = logging.getLogger(__name__)

Check = Callable[[Workspace, Dict[str, Any], Dict[str, Any], ToolContext], Verification]

# tool -> (workspace collection, label, argument naming the target record)
_CREATES = {
    "create_scene": ("scenes", "Scene"),
    "create_cast_member": ("cast", "Cast member"),
    "create_crew_member": ("crew", "Crew member"),
    "create_location": ("locations", "Location"),
    "create_element": ("elements", "Element"),
    "create_shooting_day": ("shooting_days", "Shooting day"),
}
_UPDATES = {
    "update_scene": ("scenes", "Scene", "scene_id"),
    "update_cast_member": ("cast", "Cast member", "cast_member_id"),
    "update_crew_member": ("crew", "Crew member", "crew_member_id"),
    "update_location": ("locations", "Location", "location_id"),
    "update_shooting_day": ("shooting_days", "Shooting day", "shooting_day_id"),
}
_DELETES = {
    "delete_scene": ("scenes", "Scene"),
    "delete_cast_member": ("cast", "Cast member"),
    "delete_crew_member": ("crew", "Crew member"),
    "delete_location": ("locations", "Location"),
    "delete_element": ("elements", "Element"),
    "delete_shooting_day": ("shooting_days", "Shooting day"),
}
# Arguments that are instructions rather than stored fields
_NOT_STORED = {"scenes", "position"}


def _same(expected: Any, actual: Any) -> bool:

    if isinstance(expected, str) and isinstance(actual, str):
        return expected.strip() == actual.strip()

    return expected == actual

def _field_discrepancies(record: Dict[str, Any], args: Dict[str, Any], skip: str = "") -> List[str]:

    issues = []

    for key, expected in args.items():
        if key == skip or key in _NOT_STORED:
            continue
        if not _same(expected, record.get(key)):
            issues.append(f'{key}: expected "{expected}", found "{record.get(key)}"')

    return issues

def _verdict(issues: List[str], expected: str, ok_text: str) -> Verification:

    return Verification(
        verified=not issues,
        discrepancies=issues,
        expected=expected,
        actual=ok_text if not issues else "; ".join(issues),
    )


# -------- Checks ------------------------------------------------------------------
def _check_created(collection: str, label: str) -> Check:

    def check(ws, args, data, ctx):
        record = selectors.get_by_id(getattr(ws, collection), data.get("id", ""), ctx.project_id)
        if record is None:
            return _verdict([f"{label} {data.get('id')} not found after creation"], f"{label} created", "")
        return _verdict(_field_discrepancies(record, args), f"{label} created", f"{label} {record['id']} matches")

    return check

def _check_updated(collection: str, label: str, ref: str) -> Check:

    def check(ws, args, data, ctx):
        record = selectors.get_by_id(getattr(ws, collection), data.get("id", ""), ctx.project_id)
        if record is None:
            return _verdict([f"{label} {args.get(ref)} not found after update"], f"{label} updated", "")
        return _verdict(_field_discrepancies(record, args, skip=ref), "Fields match", "All fields match")

    return check

def _check_deleted(collection: str, label: str) -> Check:

    def check(ws, args, data, ctx):
        record_id = data.get("id", "")
        still_there = selectors.get_by_id(getattr(ws, collection), record_id, ctx.project_id) is not None
        issues = [f"{label} {record_id} still exists"] if still_there else []
        return _verdict(issues, f"{label} {record_id} deleted", f"{label} {record_id} is gone")

    return check

def _check_assigned(ws, args, data, ctx):

    issues = []
    scene = selectors.get_by_id(ws.scenes, data.get("scene_id", ""), ctx.project_id)
    day = selectors.get_by_id(ws.shooting_days, data.get("shooting_day_id", ""), ctx.project_id)

    if day is None or data.get("scene_id") not in day.get("scene_ids", []):
        issues.append(f"scene {data.get('scene_id')} is not on shooting day {data.get('shooting_day_id')}")
    if scene is None:
        issues.append(f"scene {data.get('scene_id')} not found")
    elif scene.get("status") != "SCHEDULED":
        issues.append(f'status: expected "SCHEDULED", found "{scene.get("status")}"')

    return _verdict(issues, "Scene scheduled on the day", "Scene is on the day")

def _check_linked(ws, args, data, ctx):

    scene = selectors.get_by_id(ws.scenes, data.get("scene_id", ""), ctx.project_id)
    linked = scene.get("cast_ids", []) if scene else []
    issues = [] if data.get("cast_member_id") in linked else [
        f"cast member {data.get('cast_member_id')} is not linked to scene {data.get('scene_id')}"
    ]

    return _verdict(issues, "Cast member linked", "Cast member is linked")


VERIFIERS: Dict[str, Check] = {
    **{name: _check_created(*spec) for name, spec in _CREATES.items()},
    **{name: _check_updated(*spec) for name, spec in _UPDATES.items()},
    **{name: _check_deleted(*spec) for name, spec in _DELETES.items()},
    "assign_scene_to_day": _check_assigned,
    "add_cast_to_scene": _check_linked,
}


def verify_tool(name: str, args: Dict[str, Any], result: ToolResult, ctx: ToolContext) -> Optional[Verification]:
    """
    Re-read the record an action touched and report whether it looks as intended.
    Returns None for read tools and unknown tools (nothing to verify).
    """

    tool = lookup(name)
    check = VERIFIERS.get(name)

    if tool is None or tool.is_read or check is None:
        return None

    if not result.success:
        return Verification(
            verified=False,
            discrepancies=[result.error or "Unknown error"],
            expected=f"{name} to succeed",
            actual="Execution failed",
        )

    data = result.data if isinstance(result.data, dict) else {}

    try:
        # Compare against the values the handler received, not the model's raw text
        expected = tool.args_model.model_validate(args or {}).model_dump(exclude_unset=True)
    except ValidationError:
        expected = dict(args or {})

    try:
        return check(require_workspace(), expected, data, ctx)
    except Exception as e:
        logger.warning("Verification of %s raised: %s", name, e)
        return Verification(
            verified=False,
            discrepancies=["Verification raised an exception"],
            expected="Verification to succeed",
            actual=str(e),
        )

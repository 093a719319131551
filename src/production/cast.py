"""
src/production/cast.py - cast member tools

Cast members are characters with the actor playing them. `cast_member_id` may
be an id or a character name (fuzzy-matched).
"""


from __future__ import annotations
from typing import Any, Dict, List

from context import selectors
from orchestrator.models import ToolContext
from production import records
from production.permissions import require_permission
from production.session import require_workspace


def _member(ctx: ToolContext, cast_member_id: str) -> Dict[str, Any]:

    return records.require_record(
        require_workspace().cast, cast_member_id, ctx, label="Cast member", fuzzy_field="character_name"
    )


def list_cast(ctx: ToolContext) -> List[Dict[str, Any]]:

    cast = selectors.for_project(require_workspace().cast, ctx.project_id)

    return sorted(cast, key=lambda c: (c.get("cast_number") is None, c.get("cast_number") or 0, c["character_name"]))

def create_cast_member(ctx: ToolContext, *, character_name: str, **fields: Any) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "create_cast_member")
    fields = records.drop_nulls(fields, ("work_status",))

    character_name = character_name.strip()

    if not character_name:
        raise ValueError("Character name is required.")

    return records.insert_record(
        ws.cast,
        "ca",
        ctx,
        {"character_name": character_name, "work_status": "ON_HOLD", **fields},
    )

def update_cast_member(ctx: ToolContext, *, cast_member_id: str, **updates: Any) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "update_cast_member")
    updates = records.drop_nulls(updates, ("character_name", "work_status"))

    return records.apply_updates(_member(ctx, cast_member_id), updates)

def delete_cast_member(ctx: ToolContext, *, cast_member_id: str) -> Dict[str, Any]:
    """Delete a cast member and unlink them from every scene."""

    ws = require_workspace()
    require_permission(ws, ctx, "delete_cast_member")
    member = _member(ctx, cast_member_id)

    for scene in selectors.for_project(ws.scenes, ctx.project_id):
        if member["id"] in scene.get("cast_ids", []):
            scene["cast_ids"].remove(member["id"])

    return records.remove_record(ws.cast, member)

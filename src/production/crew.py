"""
src/production/crew.py - crew member tools
"""


from __future__ import annotations
from typing import Any, Dict, List

from context import selectors
from orchestrator.models import ToolContext
from production import records
from production.permissions import require_permission
from production.session import require_workspace


def _member(ctx: ToolContext, crew_member_id: str) -> Dict[str, Any]:

    return records.require_record(
        require_workspace().crew, crew_member_id, ctx, label="Crew member", fuzzy_field="name"
    )


def list_crew(ctx: ToolContext) -> List[Dict[str, Any]]:

    crew = selectors.for_project(require_workspace().crew, ctx.project_id)

    return sorted(crew, key=lambda c: (c.get("department") or "", not c.get("is_head", False), c["name"]))

def create_crew_member(ctx: ToolContext, *, name: str, role: str, department: str, **fields: Any) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "create_crew_member")
    fields = records.drop_nulls(fields, ("is_head",))

    if not name.strip() or not role.strip():
        raise ValueError("Crew members need a name and a role.")

    return records.insert_record(
        ws.crew,
        "cr",
        ctx,
        {"name": name.strip(), "role": role.strip(), "department": department, "is_head": False, **fields},
    )

def update_crew_member(ctx: ToolContext, *, crew_member_id: str, **updates: Any) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "update_crew_member")
    updates = records.drop_nulls(updates, ("name", "role", "department", "is_head"))

    return records.apply_updates(_member(ctx, crew_member_id), updates)

def delete_crew_member(ctx: ToolContext, *, crew_member_id: str) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "delete_crew_member")

    return records.remove_record(ws.crew, _member(ctx, crew_member_id))

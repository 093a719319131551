"""
src/production/locations.py - filming location tools

Deleting a location clears `location_id` on the scenes that pointed at it.
"""


from __future__ import annotations
from typing import Any, Dict, List

from context import selectors
from orchestrator.models import ToolContext
from production import records
from production.permissions import require_permission
from production.session import require_workspace


def _location(ctx: ToolContext, location_id: str) -> Dict[str, Any]:

    return records.require_record(
        require_workspace().locations, location_id, ctx, label="Location", fuzzy_field="name"
    )


def list_locations(ctx: ToolContext) -> List[Dict[str, Any]]:

    return selectors.for_project(require_workspace().locations, ctx.project_id)

def create_location(ctx: ToolContext, *, name: str, **fields: Any) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "create_location")
    fields = records.drop_nulls(fields, ("permit_status",))

    if not name.strip():
        raise ValueError("Location name is required.")

    return records.insert_record(
        ws.locations,
        "lo",
        ctx,
        {"name": name.strip(), "permit_status": "NOT_STARTED", **fields},
    )

def update_location(ctx: ToolContext, *, location_id: str, **updates: Any) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "update_location")
    updates = records.drop_nulls(updates, ("name", "permit_status"))

    return records.apply_updates(_location(ctx, location_id), updates)

def delete_location(ctx: ToolContext, *, location_id: str) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "delete_location")
    location = _location(ctx, location_id)

    for scene in selectors.for_project(ws.scenes, ctx.project_id):
        if scene.get("location_id") == location["id"]:
            scene["location_id"] = None

    return records.remove_record(ws.locations, location)

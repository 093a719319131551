"""
src/production/scenes.py - scene tools

This module provides:
- list_scenes(): scenes of the project in script order
- create_scene(scene_number, ...): add a scene (scene numbers are unique per project)
- update_scene(scene_id, ...): change only the supplied fields
- delete_scene(scene_id): remove a scene and take it off any shooting day
- assign_scene_to_day(scene_id, shooting_day_id, position=None): schedule a scene
- add_cast_to_scene(scene_id, cast_member_id): link a cast member to a scene

`scene_id` may be a scene id ("sc3"), a scene number ("12A") or a set name,
which is fuzzy-matched like everywhere else in the production tools.
"""


from __future__ import annotations
from typing import Any, Dict, List, Optional

from context import selectors
from orchestrator.models import ToolContext
from production import records
from production.permissions import require_permission
from production.session import require_workspace


def _scene(ctx: ToolContext, scene_id: str) -> Dict[str, Any]:

    ws = require_workspace()

    return records.require_record(
        ws.scenes, scene_id, ctx, label="Scene", exact_fields=("scene_number",), fuzzy_field="set_name"
    )

def _check_location(ctx: ToolContext, location_id: Optional[str]) -> None:

    if location_id and selectors.get_by_id(require_workspace().locations, location_id, ctx.project_id) is None:
        raise ValueError(f"Location '{location_id}' not found.")

def _check_unique_number(ctx: ToolContext, scene_number: str, exclude_id: Optional[str] = None) -> None:

    for s in selectors.for_project(require_workspace().scenes, ctx.project_id):
        if s["scene_number"].lower() == scene_number.lower() and s["id"] != exclude_id:
            raise ValueError(f"Scene {scene_number} already exists ({s['id']}).")


# --- Public API ----------------------------------------------------------------
def list_scenes(ctx: ToolContext) -> List[Dict[str, Any]]:

    ws = require_workspace()
    scenes = selectors.for_project(ws.scenes, ctx.project_id)

    return sorted(scenes, key=lambda s: s.get("sort_order", 0))

def create_scene(ctx: ToolContext, *, scene_number: str, **fields: Any) -> Dict[str, Any]:
    """
    Create a scene. Unset optional fields are simply absent from the record,
    status starts at NOT_SCHEDULED and the scene is appended to script order.
    """

    ws = require_workspace()
    require_permission(ws, ctx, "create_scene")

    scene_number = scene_number.strip()

    if not scene_number:
        raise ValueError("Scene number is required.")

    _check_unique_number(ctx, scene_number)
    _check_location(ctx, fields.get("location_id"))

    existing = selectors.for_project(ws.scenes, ctx.project_id)
    sort_order = max((s.get("sort_order", 0) for s in existing), default=0) + 1
    fields = {k: records.strip_text(v) for k, v in fields.items()}

    return records.insert_record(
        ws.scenes,
        "sc",
        ctx,
        {
            "scene_number": scene_number,
            "status": "NOT_SCHEDULED",
            "sort_order": sort_order,
            "cast_ids": [],
            **fields,
        },
    )

def update_scene(ctx: ToolContext, *, scene_id: str, **updates: Any) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "update_scene")
    updates = records.drop_nulls(updates, ("scene_number", "status"))
    scene = _scene(ctx, scene_id)

    if "scene_number" in updates:
        _check_unique_number(ctx, updates["scene_number"], exclude_id=scene["id"])
    _check_location(ctx, updates.get("location_id"))

    return records.apply_updates(scene, updates)

def delete_scene(ctx: ToolContext, *, scene_id: str) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "delete_scene")
    scene = _scene(ctx, scene_id)

    for day in selectors.for_project(ws.shooting_days, ctx.project_id):
        if scene["id"] in day.get("scene_ids", []):
            day["scene_ids"].remove(scene["id"])

    return records.remove_record(ws.scenes, scene)

def assign_scene_to_day(
        ctx: ToolContext,
        *,
        scene_id: str,
        shooting_day_id: str,
        position: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Put a scene on a shooting day at `position` (0-based, default: last).

    A scene is shot on one day only, so it is taken off any other day first.
    """

    ws = require_workspace()
    require_permission(ws, ctx, "assign_scene_to_day")
    scene = _scene(ctx, scene_id)
    day = selectors.get_by_id(ws.shooting_days, shooting_day_id, ctx.project_id)

    if day is None:
        raise ValueError(f"Shooting day '{shooting_day_id}' not found.")

    for other in selectors.for_project(ws.shooting_days, ctx.project_id):
        if scene["id"] in other.get("scene_ids", []):
            other["scene_ids"].remove(scene["id"])

    order = day.setdefault("scene_ids", [])
    index = len(order) if position is None else max(0, min(int(position), len(order)))
    order.insert(index, scene["id"])
    scene["status"] = "SCHEDULED"

    return {"assigned": True, "scene_id": scene["id"], "shooting_day_id": day["id"], "position": index}

def add_cast_to_scene(ctx: ToolContext, *, scene_id: str, cast_member_id: str) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "add_cast_to_scene")
    scene = _scene(ctx, scene_id)
    member = records.require_record(
        ws.cast, cast_member_id, ctx, label="Cast member", fuzzy_field="character_name"
    )

    linked = scene.setdefault("cast_ids", [])

    if member["id"] not in linked:
        linked.append(member["id"])

    return {"linked": True, "scene_id": scene["id"], "cast_member_id": member["id"]}

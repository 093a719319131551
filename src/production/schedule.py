"""
src/production/schedule.py - shooting day tools

Shooting days keep an ordered `scene_ids` list. Creating a day may schedule
scenes right away, taking them off any other day; deleting a day sends its
scenes back to NOT_SCHEDULED.
"""


from __future__ import annotations
from datetime import date
from typing import Any, Dict, List, Optional

from context import selectors
from orchestrator.models import ToolContext
from production import records
from production.permissions import require_permission
from production.session import require_workspace


def _ensure_date(value: str) -> str:

    try:
        return date.fromisoformat(value.strip()).isoformat()
    except ValueError:
        raise ValueError(f"Invalid date '{value}'. Use YYYY-MM-DD.")

def _day(ctx: ToolContext, shooting_day_id: str) -> Dict[str, Any]:

    day = selectors.get_by_id(require_workspace().shooting_days, shooting_day_id, ctx.project_id)

    if day is None:
        raise ValueError(f"Shooting day '{shooting_day_id}' not found.")

    return day


def list_shooting_days(ctx: ToolContext) -> List[Dict[str, Any]]:

    days = selectors.for_project(require_workspace().shooting_days, ctx.project_id)

    return sorted(days, key=lambda d: (d["date"], d["day_number"]))

def create_shooting_day(
        ctx: ToolContext,
        *,
        date: str,
        day_number: int,
        scenes: Optional[List[str]] = None,
        **fields: Any,
) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "create_shooting_day")
    fields = records.drop_nulls(fields, ("status",))
    day_date = _ensure_date(date)

    for d in selectors.for_project(ws.shooting_days, ctx.project_id):
        if d["day_number"] == day_number:
            raise ValueError(f"Day {day_number} already exists ({d['id']}).")

    scene_ids: List[str] = []

    for query in scenes or []:
        scene = records.require_record(
            ws.scenes, query, ctx, label="Scene", exact_fields=("scene_number",), fuzzy_field="set_name"
        )
        if scene["id"] not in scene_ids:
            scene_ids.append(scene["id"])

    # A scene is shot on one day only
    for other in selectors.for_project(ws.shooting_days, ctx.project_id):
        other["scene_ids"] = [sid for sid in other.get("scene_ids", []) if sid not in scene_ids]

    day = records.insert_record(
        ws.shooting_days,
        "sd",
        ctx,
        {"date": day_date, "day_number": day_number, "status": "TENTATIVE", "scene_ids": scene_ids, **fields},
    )

    for scene in selectors.for_project(ws.scenes, ctx.project_id):
        if scene["id"] in scene_ids:
            scene["status"] = "SCHEDULED"

    return day

def update_shooting_day(ctx: ToolContext, *, shooting_day_id: str, **updates: Any) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "update_shooting_day")
    updates = records.drop_nulls(updates, ("date", "day_number", "status"))

    if "date" in updates:
        updates["date"] = _ensure_date(updates["date"])

    return records.apply_updates(_day(ctx, shooting_day_id), updates)

def delete_shooting_day(ctx: ToolContext, *, shooting_day_id: str) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "delete_shooting_day")
    day = _day(ctx, shooting_day_id)

    for scene in selectors.for_project(ws.scenes, ctx.project_id):
        if scene["id"] in day.get("scene_ids", []):
            scene["status"] = "NOT_SCHEDULED"

    return records.remove_record(ws.shooting_days, day)

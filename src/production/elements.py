"""
src/production/elements.py - breakdown element tools (props, wardrobe, vehicles, ...)
"""


from __future__ import annotations
from typing import Any, Dict, List

from context import selectors
from orchestrator.models import ToolContext
from production import records
from production.permissions import require_permission
from production.session import require_workspace


def list_elements(ctx: ToolContext) -> List[Dict[str, Any]]:

    elements = selectors.for_project(require_workspace().elements, ctx.project_id)

    return sorted(elements, key=lambda e: (e["category"], e["name"]))

def create_element(ctx: ToolContext, *, category: str, name: str, **fields: Any) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "create_element")

    if not name.strip():
        raise ValueError("Element name is required.")

    return records.insert_record(ws.elements, "el", ctx, {"category": category, "name": name.strip(), **fields})

def delete_element(ctx: ToolContext, *, element_id: str) -> Dict[str, Any]:

    ws = require_workspace()
    require_permission(ws, ctx, "delete_element")
    element = records.require_record(ws.elements, element_id, ctx, label="Element", fuzzy_field="name")

    return records.remove_record(ws.elements, element)

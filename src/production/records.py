"""
src/production/records.py

Shared create/update/delete helpers for the production handlers. All of them
operate on lists held by the in-memory Workspace and return plain dicts.
"""


from typing import Any, Dict, Iterable, List, Optional

from context import selectors
from orchestrator.models import ToolContext


def require_record(
        records: List[Dict[str, Any]],
        query_or_id: str,
        ctx: ToolContext,
        *,
        label: str,
        exact_fields: Iterable[str] = (),
        fuzzy_field: Optional[str] = None,
) -> Dict[str, Any]:

    rec = selectors.resolve_record(
        records,
        query_or_id,
        project_id=ctx.project_id,
        exact_fields=exact_fields,
        fuzzy_field=fuzzy_field,
    )

    if rec is None:
        raise ValueError(f"{label} '{query_or_id}' not found.")

    return rec

def insert_record(records: List[Dict[str, Any]], prefix: str, ctx: ToolContext, fields: Dict[str, Any]) -> Dict[str, Any]:

    rec = {"id": selectors.next_id(records, prefix), "project_id": ctx.project_id}
    rec.update(fields)
    records.append(rec)

    return rec

def apply_updates(rec: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:

    if not updates:
        raise ValueError("No fields to update.")

    rec.update(updates)

    return rec

def remove_record(records: List[Dict[str, Any]], rec: Dict[str, Any]) -> Dict[str, Any]:

    records[:] = [r for r in records if r is not rec]

    return {"deleted": True, "id": rec["id"]}

def strip_text(value: Optional[str]) -> Optional[str]:

    return value.strip() if isinstance(value, str) else value

def drop_nulls(fields: Dict[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    """Remove explicit nulls for `keys`, fields every stored record must keep."""

    keys = set(keys)

    return {k: v for k, v in fields.items() if not (k in keys and v is None)}

"""
src/context/selectors.py
"""


from typing import Any, Dict, Iterable, List, Optional
from rapidfuzz import fuzz, process, utils

from config import FUZZY_SCORE_CUTOFF
from .loader import Workspace


def for_project(records: Iterable[Dict], project_id: str, limit: Optional[int] = None) -> List[Dict]:
    """Records belonging to `project_id`, in stored order, optionally capped."""

    out = [r for r in records if r.get("project_id") == project_id]

    return out[:limit] if limit is not None else out

def get_project(ws: Workspace, project_id: str) -> Optional[Dict]:

    return next((p for p in ws.projects if p["id"] == project_id), None)

def get_member(ws: Workspace, project_id: str, user_id: str) -> Optional[Dict]:

    return next(
        (m for m in ws.members if m["project_id"] == project_id and m["user_id"] == user_id),
        None,
    )

def get_by_id(records: Iterable[Dict], record_id: str, project_id: Optional[str] = None) -> Optional[Dict]:

    return next(
        (r for r in records if r["id"] == record_id and (project_id is None or r.get("project_id") == project_id)),
        None,
    )

def resolve_record(
        records: Iterable[Dict],
        query_or_id: str,
        *,
        project_id: str,
        exact_fields: Iterable[str] = (),
        fuzzy_field: Optional[str] = None,
) -> Optional[Dict]:
    """
    Resolve a record by id, then by exact match on `exact_fields`, then by fuzzy
    match on `fuzzy_field` (WRatio >= FUZZY_SCORE_CUTOFF). Scoped to one project.
    """

    pool = for_project(records, project_id)
    query = str(query_or_id).strip()

    if not pool or not query:
        return None

    rec = get_by_id(pool, query)

    if rec is not None:
        return rec

    for field in exact_fields:
        rec = next((r for r in pool if str(r.get(field, "")).lower() == query.lower()), None)
        if rec is not None:
            return rec

    if fuzzy_field is None:
        return None

    names = [str(r.get(fuzzy_field) or "") for r in pool]
    match = process.extractOne(
        query, names, scorer=fuzz.WRatio, processor=utils.default_process, score_cutoff=FUZZY_SCORE_CUTOFF
    )

    if not match:
        return None

    _name, _score, idx = match

    return pool[idx]

def next_id(records: Iterable[Dict], prefix: str) -> str:
    """
    Generate a simple unique ID like "sc4" from the largest numeric tail of
    existing ids with the same prefix.
    """

    best = 0

    for r in records:
        rid = str(r.get("id", ""))
        if not rid.startswith(prefix):
            continue
        tail = rid[len(prefix):]
        if tail.isdigit():
            best = max(best, int(tail))

    return f"{prefix}{best+1}"

def count_by(records: Iterable[Dict], key: str) -> Dict[Any, int]:

    counts: Dict[Any, int] = {}

    for r in records:
        counts[r.get(key)] = counts.get(r.get(key), 0) + 1

    return counts

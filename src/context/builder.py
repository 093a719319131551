"""
src/context/builder.py

Compact, line-oriented snapshot of a project used to ground the model.

Every entity family is fetched with a hard cap and rendered as its own
section. A section whose query fails is left out; the snapshot as a whole
never fails the turn.
"""


import logging
from typing import Callable, Dict, List

from config import CONTEXT_FETCH_LIMITS, CONTEXT_LIST_LIMITS
from . import selectors
from .loader import Workspace


logger = logging.getLogger(__name__)

Section = Callable[[Workspace, str], List[str]]


def _rows(ws: Workspace, family: str, project_id: str) -> List[Dict]:

    return selectors.for_project(getattr(ws, family), project_id, limit=CONTEXT_FETCH_LIMITS[family])

def _listed(rows: List[Dict], family: str) -> List[Dict]:

    return rows[:CONTEXT_LIST_LIMITS.get(family, len(rows))]

def _more(rows: List[Dict], family: str) -> List[str]:

    hidden = len(rows) - len(_listed(rows, family))

    return [f"  ... +{hidden} more"] if hidden > 0 else []


# -------- Sections ----------------------------------------------------------------
def _overview(ws: Workspace, project_id: str) -> List[str]:

    project = selectors.get_project(ws, project_id) or {}
    counts = ", ".join(
        f"{len(_rows(ws, family, project_id))} {label}"
        for family, label in (
            ("scenes", "scenes"),
            ("shooting_days", "shoot days"),
            ("locations", "locations"),
            ("cast", "cast"),
            ("crew", "crew"),
            ("elements", "elements"),
        )
    )

    return [
        f"Project: {project.get('name', 'Unknown')} | Status: {project.get('status', 'Unknown')}",
        f"Dates: {str(project.get('start_date') or 'N/A')[:10]} to {str(project.get('end_date') or 'N/A')[:10]}",
        f"Counts: {counts}",
    ]

def _scenes(ws: Workspace, project_id: str) -> List[str]:

    rows = sorted(_rows(ws, "scenes", project_id), key=lambda s: s.get("sort_order", 0))

    if not rows:
        return []

    lines = ["Scenes (id | number | set | INT/EXT | time | pages | status):"]

    for s in _listed(rows, "scenes"):
        lines.append(
            f"  {s['id']} | {s['scene_number']} | {s.get('set_name') or '-'} | "
            f"{s.get('int_ext') or '-'}/{s.get('day_night') or '-'} | {s.get('page_count') or 1}pg | {s.get('status')}"
        )

    return lines + _more(rows, "scenes")

def _cast(ws: Workspace, project_id: str) -> List[str]:

    rows = _rows(ws, "cast", project_id)

    if not rows:
        return []

    return ["Cast (id | character | actor | status):"] + [
        f"  {c['id']} | {c['character_name']} | {c.get('actor_name') or '-'} | {c.get('work_status')}" for c in rows
    ]

def _locations(ws: Workspace, project_id: str) -> List[str]:

    rows = _rows(ws, "locations", project_id)

    if not rows:
        return []

    return ["Locations (id | name | type | permit):"] + [
        f"  {l['id']} | {l['name']} | {l.get('location_type') or '-'} | {l.get('permit_status')}" for l in rows
    ]

def _shooting_days(ws: Workspace, project_id: str) -> List[str]:

    rows = sorted(_rows(ws, "shooting_days", project_id), key=lambda d: d["date"])

    if not rows:
        return []

    return ["Shooting Days (id | day# | date | call | wrap | status | scenes):"] + [
        f"  {d['id']} | Day {d['day_number']} | {str(d['date'])[:10]} | {d.get('general_call') or '-'} | "
        f"{d.get('estimated_wrap') or '-'} | {d.get('status')} | {','.join(d.get('scene_ids', [])) or '-'}"
        for d in rows
    ]

def _crew(ws: Workspace, project_id: str) -> List[str]:

    rows = _rows(ws, "crew", project_id)

    if not rows:
        return []

    return ["Crew (id | name | role | dept):"] + [
        f"  {c['id']} | {c['name']} | {c['role']} | {c['department']}" for c in _listed(rows, "crew")
    ] + _more(rows, "crew")

def _elements(ws: Workspace, project_id: str) -> List[str]:

    counts = selectors.count_by(_rows(ws, "elements", project_id), "category")

    if not counts:
        return []

    return ["Elements by category:"] + [f"  {cat}: {n}" for cat, n in sorted(counts.items())]


SECTIONS: List[Section] = [_overview, _scenes, _cast, _locations, _shooting_days, _crew, _elements]


def build_project_context(ws: Workspace, project_id: str) -> str:

    lines: List[str] = []

    for section in SECTIONS:
        try:
            lines.extend(section(ws, project_id))
        except Exception as e:
            logger.warning("Context section %s omitted for project %s: %s", section.__name__, project_id, e)

    return "\n".join(lines)

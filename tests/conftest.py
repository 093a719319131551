from __future__ import annotations

import copy
import sys
from pathlib import Path

import pytest

# Allow tests to import project modules when pytest runs from the repo root.
SRC_DIR = Path(__file__).resolve().parents[1] / "src"
SRC_STR = str(SRC_DIR)
if SRC_STR not in sys.path:
    sys.path.insert(0, SRC_STR)

from context.loader import Workspace  # noqa: E402
from orchestrator.models import ToolContext  # noqa: E402
from orchestrator.router import Router  # noqa: E402
from orchestrator.store import ConversationStore  # noqa: E402
from production import session  # noqa: E402

from helpers import FakeLLM, SpyExecutor  # noqa: E402


SEED = {
    "projects": [
        {"id": "p1", "name": "Night Shift", "status": "PRE_PRODUCTION", "start_date": "2026-11-02", "end_date": "2026-11-20"},
        {"id": "p2", "name": "Other Film", "status": "DEVELOPMENT"},
    ],
    "members": [
        {"project_id": "p1", "user_id": "u1", "role": "owner"},
        {"project_id": "p1", "user_id": "u2", "role": "crew"},
        {"project_id": "p1", "user_id": "u3", "role": "viewer"},
        {"project_id": "p2", "user_id": "u9", "role": "owner"},
    ],
    "scenes": [
        {"id": "sc1", "project_id": "p1", "scene_number": "1", "int_ext": "INT", "day_night": "NIGHT",
         "set_name": "DINER", "page_count": 2.5, "status": "SCHEDULED", "sort_order": 1, "cast_ids": ["ca1"]},
        {"id": "sc2", "project_id": "p1", "scene_number": "2", "int_ext": "EXT", "day_night": "NIGHT",
         "set_name": "PARKING LOT", "page_count": 1, "status": "NOT_SCHEDULED", "sort_order": 2, "cast_ids": []},
        {"id": "sc3", "project_id": "p1", "scene_number": "3", "int_ext": "INT", "day_night": "DAY",
         "set_name": "APARTMENT", "page_count": 3, "status": "NOT_SCHEDULED", "sort_order": 3, "cast_ids": []},
        {"id": "sc9", "project_id": "p2", "scene_number": "1", "int_ext": "EXT", "day_night": "DAY",
         "set_name": "BEACH", "status": "NOT_SCHEDULED", "sort_order": 1, "cast_ids": []},
    ],
    "cast": [
        {"id": "ca1", "project_id": "p1", "character_name": "MAYA", "actor_name": "Jo Park", "cast_number": 1, "work_status": "CONFIRMED"},
        {"id": "ca2", "project_id": "p1", "character_name": "LEO", "actor_name": None, "cast_number": 2, "work_status": "ON_HOLD"},
    ],
    "crew": [
        {"id": "cr1", "project_id": "p1", "name": "Sam Reyes", "role": "Director of Photography", "department": "CAMERA", "is_head": True},
    ],
    "locations": [
        {"id": "lo1", "project_id": "p1", "name": "Rosie's Diner", "location_type": "PRACTICAL", "permit_status": "APPLIED"},
    ],
    "elements": [
        {"id": "el1", "project_id": "p1", "category": "PROP", "name": "Coffee pot"},
        {"id": "el2", "project_id": "p1", "category": "WARDROBE", "name": "Waitress uniform"},
        {"id": "el3", "project_id": "p1", "category": "PROP", "name": "Car keys"},
    ],
    "shooting_days": [
        {"id": "sd1", "project_id": "p1", "day_number": 1, "date": "2026-11-02", "general_call": "18:00",
         "estimated_wrap": "06:00", "status": "SCHEDULED", "scene_ids": ["sc1"]},
    ],
}


@pytest.fixture
def ws():
    workspace = Workspace(copy.deepcopy(SEED))
    session.attach_workspace(workspace)
    yield workspace
    session.attach_workspace(None)


@pytest.fixture
def ctx() -> ToolContext:
    return ToolContext(project_id="p1", user_id="u1")


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def store() -> ConversationStore:
    return ConversationStore()


@pytest.fixture
def spy() -> SpyExecutor:
    return SpyExecutor()


@pytest.fixture
def router(ws, llm, store, spy) -> Router:
    return Router(llm=llm, store=store, execute=spy)

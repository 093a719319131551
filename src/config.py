"""
src/config.py
"""


import os
from enum import Enum
from pathlib import Path
from typing import Dict


class Role(str, Enum):

    OWNER = "owner"
    PRODUCER = "producer"
    CREW = "crew"
    VIEWER = "viewer"

class ToolTier(str, Enum):

    READ = "read"
    MUTATE = "mutate"


def _env_int(name: str, default: int) -> int:

    raw = os.getenv(name)

    if raw is None or not raw.strip():
        return default

    return int(raw)


# Completion service
OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL") or None
OPENAI_TIMEOUT_SECONDS: int = _env_int("OPENAI_TIMEOUT_SECONDS", 120)

TOOL_TURN_TEMPERATURE: float = 0.3
TOOL_TURN_MAX_TOKENS: int = 2000
SUMMARY_TEMPERATURE: float = 0.2
SUMMARY_MAX_TOKENS: int = 500

# Agent loop
MAX_TOOL_ITERATIONS: int = _env_int("ASSISTANT_MAX_TOOL_ITERATIONS", 6)
CHAT_HISTORY_LIMIT: int = _env_int("ASSISTANT_HISTORY_LIMIT", 30)
CONFIRMATION_LOOKBACK: int = _env_int("ASSISTANT_CONFIRMATION_LOOKBACK", 10)
MAX_MESSAGE_CHARS: int = _env_int("ASSISTANT_MAX_MESSAGE_CHARS", 4000)
TOOL_RESULT_MAX_CHARS: int = _env_int("ASSISTANT_TOOL_RESULT_CHARS", 3000)

# Project context snapshot: rows fetched per entity, and rows actually listed
CONTEXT_FETCH_LIMITS: Dict[str, int] = {
    "scenes": 200,
    "locations": 80,
    "shooting_days": 120,
    "cast": 120,
    "crew": 160,
    "elements": 400,
}
CONTEXT_LIST_LIMITS: Dict[str, int] = {
    "scenes": 60,
    "crew": 40,
}

WORKSPACE_PATH = Path(
    os.getenv(
        "ASSISTANT_WORKSPACE_PATH",
        str(Path(__file__).resolve().parents[1] / "data" / "workspace.json"),
    )
)

# Fuzzy record resolution (rapidfuzz WRatio, 0-100)
FUZZY_SCORE_CUTOFF: int = 80
# EOF

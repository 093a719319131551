"""
src/context/loader.py
"""


import json
from pathlib import Path
from typing import Any, Dict

from config import WORKSPACE_PATH


class Workspace:

    def __init__(self, data: Dict[str, Any]):

        self.projects = data.get("projects", [])
        self.members = data.get("members", [])
        self.scenes = data.get("scenes", [])
        self.cast = data.get("cast", [])
        self.crew = data.get("crew", [])
        self.locations = data.get("locations", [])
        self.elements = data.get("elements", [])
        self.shooting_days = data.get("shooting_days", [])


def load_workspace(path: Path = WORKSPACE_PATH) -> Workspace:

    if not path.exists():
        raise FileNotFoundError(f"Workspace file not found: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    # Sanity checks
    required = ["projects", "members", "scenes"]

    for key in required:
        if key not in data:
            raise ValueError(f"workspace.json missing '{key}'")

    return Workspace(data)

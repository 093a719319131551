"""
src/production/session.py

Process-wide handle to the in-memory Workspace shared by the production handlers,
the context builder and the verifier. workspace.json remains the seed; writes
stay in memory for the lifetime of the process.
"""


from typing import Optional

from context.loader import Workspace


_WS: Optional[Workspace] = None


def attach_workspace(ws: Optional[Workspace]) -> None:

    global _WS
    _WS = ws

def require_workspace() -> Workspace:

    if _WS is None:
        raise RuntimeError("Workspace not attached. Call session.attach_workspace(ws) first.")

    return _WS

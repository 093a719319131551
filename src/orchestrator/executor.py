"""
src/orchestrator/executor.py

Action executor: validate arguments against a tool's schema and dispatch to its
production handler. Failures come back as ToolResult(success=False); they never
raise, so a batch of approved actions keeps going after one of them fails.
"""


import copy
import logging
from typing import Any, Dict

from pydantic import ValidationError

from orchestrator.models import ToolContext, ToolResult
from orchestrator.registry import lookup


logger = logging.getLogger(__name__)


def _format_validation_error(err: ValidationError) -> str:

    parts = []

    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ())) or "arguments"
        parts.append(f"{loc}: {e.get('msg')}")

    return "Invalid arguments: " + "; ".join(parts)

def execute_tool(name: str, args: Dict[str, Any], ctx: ToolContext) -> ToolResult:
    """Map a tool name to its production handler and execute it."""

    tool = lookup(name)

    if tool is None:
        return ToolResult(success=False, error=f"Unknown tool: {name}")

    try:
        params = tool.args_model.model_validate(args or {})
    except ValidationError as e:
        logger.warning("Rejected %s arguments: %s", name, e.error_count())
        return ToolResult(success=False, error=_format_validation_error(e))

    try:
        data = tool.handler(ctx, **params.model_dump(exclude_unset=True))
    except Exception as e:
        logger.warning("Tool %s failed for project %s: %s", name, ctx.project_id, e)
        return ToolResult(success=False, error=str(e) or type(e).__name__)

    # Snapshot: handlers hand back live workspace records
    return ToolResult(success=True, data=copy.deepcopy(data))

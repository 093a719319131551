"""
Shared test doubles: a scripted completion service and a recording executor.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from orchestrator.executor import execute_tool
from orchestrator.models import ModelTurn, ToolCall, ToolContext, ToolResult


def call(tool: str, call_id: str = "call_1", /, **args: Any) -> ToolCall:
    """A tool call as the model would emit it (arguments as JSON text)."""
    return ToolCall(id=call_id, name=tool, arguments=json.dumps(args))


def calls(*tool_calls: ToolCall, content: Optional[str] = None) -> ModelTurn:
    return ModelTurn(content=content, tool_calls=list(tool_calls))


def text(content: Optional[str]) -> ModelTurn:
    return ModelTurn(content=content)


class FakeLLM:
    """Completion service that replays scripted turns and records what it was sent."""

    def __init__(self, turns: Optional[List[ModelTurn]] = None, summary: str = "All done."):
        self.turns: List[ModelTurn] = list(turns or [])
        self.summary = summary
        self.summary_error: Optional[Exception] = None
        self.turn_requests: List[List[Dict[str, Any]]] = []
        self.tool_catalogs: List[List[Dict[str, Any]]] = []
        self.text_requests: List[List[Dict[str, Any]]] = []

    def script(self, *turns: ModelTurn) -> "FakeLLM":
        self.turns.extend(turns)
        return self

    def complete_turn(self, messages, tools) -> ModelTurn:
        self.turn_requests.append(list(messages))
        self.tool_catalogs.append(tools)
        if not self.turns:
            raise AssertionError("model called more times than scripted")
        return self.turns.pop(0)

    def complete_text(self, messages) -> str:
        self.text_requests.append(list(messages))
        if self.summary_error is not None:
            raise self.summary_error
        return self.summary


class SpyExecutor:
    """Runs the real executor but records every dispatched tool name, in order."""

    def __init__(self):
        self.calls: List[str] = []

    def __call__(self, name: str, args: Dict[str, Any], ctx: ToolContext) -> ToolResult:
        self.calls.append(name)
        return execute_tool(name, args, ctx)

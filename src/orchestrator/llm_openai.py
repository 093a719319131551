"""
src/orchestrator/llm_openai.py

OpenAI client wrapper for function calling.
- call_model(): one chat-completions request, with or without tools
- extract_tool_calls(): normalise tool calls from a response choice
- CompletionClient: the completion service used by the router
"""


import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional
from openai import OpenAI

import config
from orchestrator.models import ModelTurn, ToolCall


logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_client() -> OpenAI:
    """Created on first use so importing this module never needs credentials."""

    return OpenAI(base_url=config.OPENAI_BASE_URL, timeout=config.OPENAI_TIMEOUT_SECONDS)

def call_model(
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        *,
        model: Optional[str] = None,
        temperature: float = config.TOOL_TURN_TEMPERATURE,
        max_tokens: int = config.TOOL_TURN_MAX_TOKENS,
):
    """
    Low-level call to OpenAI Chat Completions with optional tool specs.
    Returns the raw response object.
    """

    kwargs: Dict[str, Any] = {}

    if tools:
        kwargs["tools"] = tools
        kwargs["tool_choice"] = "auto"

    return get_client().chat.completions.create(
        model=model or config.OPENAI_MODEL,
        messages=messages,
        temperature=temperature,
        max_tokens=max_tokens,
        **kwargs,
    )

def extract_tool_calls(choice) -> List[ToolCall]:
    """
    Normalize tool calls from the OpenAI response choice. Arguments stay as the
    raw JSON string; they are decoded when planned or executed.
    """

    out = []
    tcs = getattr(choice.message, "tool_calls", None)

    if not tcs:
        return out

    for tc in tcs:
        if tc.type == "function" and tc.function:
            out.append(ToolCall(id=tc.id, name=tc.function.name, arguments=tc.function.arguments or "{}"))

    return out


class CompletionClient:
    """Completion service: one tool-enabled turn, or one plain text completion."""

    def __init__(self, model: Optional[str] = None):

        self.model = model or config.OPENAI_MODEL

    def complete_turn(self, messages: List[Dict[str, Any]], tools: List[Dict[str, Any]]) -> ModelTurn:

        resp = call_model(messages, tools, model=self.model)

        if not resp.choices:
            logger.warning("Completion returned no choices")
            return ModelTurn()

        choice = resp.choices[0]

        return ModelTurn(content=choice.message.content, tool_calls=extract_tool_calls(choice))

    def complete_text(self, messages: List[Dict[str, Any]]) -> str:

        resp = call_model(
            messages,
            None,
            model=self.model,
            temperature=config.SUMMARY_TEMPERATURE,
            max_tokens=config.SUMMARY_MAX_TOKENS,
        )
        content = resp.choices[0].message.content if resp.choices else None

        if not content:
            raise RuntimeError(f"No content in completion response (choices: {len(resp.choices or [])})")

        return content

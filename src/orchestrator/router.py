"""
src/orchestrator/router.py

Router: runs the function-calling loop, applies the read/mutate tier policy,
parks mutating calls behind a confirmation and, once the user approves, executes,
verifies and summarises them.

A request is one sequential unit of work. Approved actions run strictly in the
order they were planned because later actions may depend on records created by
earlier ones.
"""


import json
import logging
import time
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import config
from config import ToolTier
from context.builder import build_project_context
from orchestrator import ledger, prompts
from orchestrator.errors import ConfirmationNotFound, Forbidden, InvalidInput, SummarizationFailed, Unauthorized
from orchestrator.executor import execute_tool
from orchestrator.llm_openai import CompletionClient
from orchestrator.models import (
    AgentResponse,
    ExecutionResultItem,
    Message,
    MessageMetadata,
    MetadataType,
    ModelTurn,
    ProcessingLogEntry,
    ToolContext,
    ToolResult,
)
from orchestrator.registry import tier_of, to_openai_tools
from orchestrator.store import ConversationStore
from orchestrator.verifier import verify_tool
from production.permissions import is_member
from production.session import require_workspace


logger = logging.getLogger(__name__)

Executor = Callable[[str, Dict[str, Any], ToolContext], ToolResult]


# -------- Tool loop ---------------------------------------------------------------
class LoopState(str, Enum):

    AWAITING_MODEL = "awaiting_model"
    ANSWERED = "answered"
    PENDING_CONFIRMATION = "pending_confirmation"
    LIMIT_EXCEEDED = "limit_exceeded"


def _tool_result_content(result: ToolResult, limit: int) -> str:

    if not result.success:
        return f"Error: {result.error}"

    return json.dumps(result.data, separators=(",", ":"), default=str)[:limit]


class ToolLoop:
    """
    Bounded model/tool cycle for one user message.

    Each step calls the model once. A turn without tool calls ends in ANSWERED.
    A turn whose calls are all read-tier is executed, its results appended, and
    the loop stays in AWAITING_MODEL. A turn with even one mutating call ends in
    PENDING_CONFIRMATION as a whole batch. Reaching `max_iterations` without a
    terminal turn ends in LIMIT_EXCEEDED before the next model call.
    """

    def __init__(
            self,
            llm,
            messages: List[Dict[str, Any]],
            ctx: ToolContext,
            *,
            max_iterations: int = config.MAX_TOOL_ITERATIONS,
            tools: Optional[List[Dict[str, Any]]] = None,
            execute: Executor = execute_tool,
    ):

        self.llm = llm
        self.messages = messages
        self.ctx = ctx
        self.max_iterations = max_iterations
        self.tools = tools if tools is not None else to_openai_tools()
        self.execute = execute
        self.state = LoopState.AWAITING_MODEL
        self.iterations = 0
        self.turn: Optional[ModelTurn] = None

    def step(self) -> LoopState:

        if self.state is not LoopState.AWAITING_MODEL:
            raise RuntimeError(f"Tool loop already finished ({self.state.value})")

        if self.iterations >= self.max_iterations:
            logger.info("Tool loop hit the %d iteration cap", self.max_iterations)
            self.state = LoopState.LIMIT_EXCEEDED
            return self.state

        self.iterations += 1
        self.turn = self.llm.complete_turn(self.messages, self.tools)
        calls = self.turn.tool_calls

        if not calls:
            self.state = LoopState.ANSWERED
            return self.state

        if not all(tier_of(tc.name) is ToolTier.READ for tc in calls):
            logger.info("Iteration %d: %d call(s) need confirmation", self.iterations, len(calls))
            self.state = LoopState.PENDING_CONFIRMATION
            return self.state

        logger.info("Iteration %d: auto-running %s", self.iterations, ", ".join(tc.name for tc in calls))
        self.messages.append({
            "role": "assistant",
            "content": self.turn.content or "",
            "tool_calls": [tc.to_openai() for tc in calls],
        })

        for tc in calls:
            result = self.execute(tc.name, tc.parsed_arguments(), self.ctx)
            self.messages.append({
                "role": "tool",
                "tool_call_id": tc.id,
                "content": _tool_result_content(result, config.TOOL_RESULT_MAX_CHARS),
            })

        return self.state

    def run(self) -> LoopState:

        while self.state is LoopState.AWAITING_MODEL:
            self.step()

        return self.state


# -------- Router --------------------------------------------------------------------
def _summary_lines(results: List[ExecutionResultItem]) -> List[str]:

    lines = []

    for r in results:
        status = "OK" if r.result.success else "FAILED"
        if r.verification is None:
            verify_status = "no verification"
        elif r.verification.verified:
            verify_status = "verified"
        else:
            verify_status = "issues: " + ", ".join(r.verification.discrepancies)
        lines.append(f"- {r.tool_name}({json.dumps(r.args, default=str)[:100]}): {status} [{verify_status}]")

    return lines


class Router:

    def __init__(
            self,
            llm=None,
            store: Optional[ConversationStore] = None,
            *,
            execute: Executor = execute_tool,
            max_iterations: int = config.MAX_TOOL_ITERATIONS,
    ):

        self.llm = llm or CompletionClient()
        self.store = store or ConversationStore()
        self.execute = execute
        self.max_iterations = max_iterations

    # --- public API ---------------------------------------------------------------
    def handle_message(self, project_id: str, user_id: Optional[str], text: str) -> AgentResponse:
        """
        Answer a user message. Returns either a final assistant message, or a
        message with status "pending_confirmation" carrying the confirmation id
        the caller must later pass to resolve_confirmation().
        """

        return self._timed("handle_message", project_id, user_id, lambda: self._handle_message(project_id, user_id, text))

    def resolve_confirmation(
            self,
            project_id: str,
            user_id: Optional[str],
            confirmation_id: str,
            approved: Any,
    ) -> AgentResponse:
        """
        Approve or decline a pending confirmation. Anything but `approved is True`
        declines without touching project data.
        """

        return self._timed(
            "resolve_confirmation",
            project_id,
            user_id,
            lambda: self._resolve_confirmation(project_id, user_id, confirmation_id, approved),
        )

    # --- handle_message -------------------------------------------------------------
    def _handle_message(self, project_id: str, user_id: Optional[str], text: str) -> AgentResponse:

        ctx = self._authorize(project_id, user_id)
        text = (text or "").strip()

        if not text:
            raise InvalidInput("message is required")
        if len(text) > config.MAX_MESSAGE_CHARS:
            raise InvalidInput(f"Message too long (max {config.MAX_MESSAGE_CHARS} chars)")

        self.store.append(project_id, ctx.user_id, "user", text)

        messages: List[Dict[str, Any]] = [
            {"role": "system", "content": prompts.AGENT_SYSTEM_PROMPT},
            {"role": "system", "content": prompts.CONTEXT_HEADER + build_project_context(require_workspace(), project_id)},
        ]
        for entry in self.store.history(project_id, ctx.user_id, config.CHAT_HISTORY_LIMIT):
            if entry.role in ("user", "assistant"):
                messages.append({"role": entry.role, "content": entry.content})

        loop = ToolLoop(self.llm, messages, ctx, max_iterations=self.max_iterations, execute=self.execute)
        state = loop.run()

        if state is LoopState.ANSWERED:
            content = (loop.turn.content or "").strip() or prompts.EMPTY_RESPONSE
            return AgentResponse(message=self._reply(ctx, content))

        if state is LoopState.PENDING_CONFIRMATION:
            confirmation = ledger.open_confirmation(loop.turn.tool_calls)
            content = (loop.turn.content or "").strip() or prompts.confirmation_request(len(confirmation.actions))
            saved = self._reply(ctx, content, ledger.encode(confirmation))
            logger.info("Confirmation %s opened with %d action(s)", confirmation.confirmation_id, len(confirmation.actions))
            return AgentResponse(
                message=saved,
                status="pending_confirmation",
                confirmation_id=confirmation.confirmation_id,
            )

        return AgentResponse(message=self._reply(ctx, prompts.ITERATION_LIMIT))

    # --- resolve_confirmation ---------------------------------------------------------
    def _resolve_confirmation(
            self,
            project_id: str,
            user_id: Optional[str],
            confirmation_id: str,
            approved: Any,
    ) -> AgentResponse:

        ctx = self._authorize(project_id, user_id)
        recent = self.store.recent(project_id, ctx.user_id, config.CONFIRMATION_LOOKBACK)
        pending = ledger.find_pending(recent, confirmation_id)

        if pending is None:
            raise ConfirmationNotFound("Confirmation not found")

        if approved is not True:
            logger.info("Confirmation %s declined", confirmation_id)
            meta = MessageMetadata(type=MetadataType.CONFIRMATION_DECLINED, confirmation_id=confirmation_id)
            return AgentResponse(message=self._reply(ctx, prompts.DECLINED, meta))

        # Resolves the confirmation before any action runs
        self.store.append(
            project_id,
            ctx.user_id,
            "user",
            prompts.approved(len(pending.actions)),
            MessageMetadata(type=MetadataType.CONFIRMATION_APPROVED, confirmation_id=confirmation_id),
        )
        results: List[ExecutionResultItem] = []

        for action in pending.actions:
            result = self.execute(action.tool_name, action.args, ctx)
            results.append(ExecutionResultItem(
                tool_name=action.tool_name,
                args=action.args,
                result=result,
                verification=verify_tool(action.tool_name, action.args, result, ctx),
            ))

        failed = sum(1 for r in results if not r.result.success)
        logger.info("Confirmation %s executed: %d ok, %d failed", confirmation_id, len(results) - failed, failed)

        summary = self._summarize(results)
        meta = MessageMetadata(type=MetadataType.EXECUTION_RESULT, confirmation_id=confirmation_id, results=results)

        return AgentResponse(message=self._reply(ctx, summary, meta))

    def _summarize(self, results: List[ExecutionResultItem]) -> str:

        try:
            return self.llm.complete_text([
                {"role": "system", "content": prompts.SUMMARY_SYSTEM_PROMPT},
                {"role": "user", "content": "Tool execution results:\n" + "\n".join(_summary_lines(results))},
            ])
        except Exception as e:
            # The actions above are already committed; nothing compensates them.
            logger.exception("Summary failed after %d executed action(s)", len(results))
            raise SummarizationFailed("Failed to summarize executed actions") from e

    # --- helpers ------------------------------------------------------------------
    def _authorize(self, project_id: str, user_id: Optional[str]) -> ToolContext:

        if not user_id:
            raise Unauthorized("Unauthorized")
        if not project_id:
            raise InvalidInput("projectId is required")
        if not is_member(require_workspace(), project_id, user_id):
            raise Forbidden("Project access denied")

        return ToolContext(project_id=project_id, user_id=user_id)

    def _reply(self, ctx: ToolContext, content: str, metadata: Optional[MessageMetadata] = None) -> Message:

        return self.store.append(ctx.project_id, ctx.user_id, "assistant", content, metadata)

    def _timed(self, operation: str, project_id: str, user_id: Optional[str], fn: Callable[[], AgentResponse]) -> AgentResponse:

        started = time.monotonic()
        error: Optional[BaseException] = None

        try:
            return fn()
        except Exception as e:
            error = e
            raise
        finally:
            entry = ProcessingLogEntry(
                project_id=project_id or None,
                user_id=user_id or None,
                operation=operation,
                processing_ms=int((time.monotonic() - started) * 1000),
                success=error is None,
                error=str(error) if error is not None else None,
            )
            try:
                self.store.log_processing(entry)
            except Exception:
                logger.exception("Could not record processing log for %s", operation)

"""
Tests for the router: the bounded tool loop, the confirmation gate and
confirmation resolution, end to end against the in-memory workspace.
"""

import pytest

from config import ToolTier
from orchestrator import ledger, prompts
from orchestrator.errors import ConfirmationNotFound, Forbidden, InvalidInput, SummarizationFailed, Unauthorized
from orchestrator.models import MetadataType, ModelTurn, ToolContext, ToolResult
from orchestrator.router import LoopState, Router, ToolLoop

from helpers import FakeLLM, call, calls, text


def _pending(router, llm, *tool_calls, content=None):
    llm.script(calls(*tool_calls, content=content))
    return router.handle_message("p1", "u1", "please do it")


def _scene_ids(ws):
    return [s["id"] for s in ws.scenes if s["project_id"] == "p1"]


class TestHandleMessage:

    def test_mutating_call_needs_confirmation(self, router, llm, spy, store):
        llm.script(calls(call("create_scene", scene_number="12", int_ext="INT", set_name="KITCHEN", day_night="DAY")))

        resp = router.handle_message("p1", "u1", "add a new scene 12, INT KITCHEN DAY")

        assert resp.status == "pending_confirmation"
        assert resp.confirmation_id
        meta = resp.message.metadata
        assert meta.type is MetadataType.CONFIRMATION_REQUEST
        assert meta.confirmation_id == resp.confirmation_id
        assert [a.description for a in meta.actions] == ["Create scene 12 - INT. KITCHEN - DAY"]
        assert resp.message.content == "I'd like to perform 1 action(s). Please review and approve."
        assert spy.calls == []

    def test_read_calls_run_automatically(self, router, llm, spy, store):
        llm.script(calls(call("list_scenes")), text("Two scenes are INT."))

        resp = router.handle_message("p1", "u1", "how many scenes are INT?")

        assert resp.status is None
        assert resp.confirmation_id is None
        assert resp.message.content == "Two scenes are INT."
        assert spy.calls == ["list_scenes"]

        second = llm.turn_requests[1]
        assert second[-2]["role"] == "assistant"
        assert second[-2]["tool_calls"][0]["function"]["name"] == "list_scenes"
        assert second[-1]["role"] == "tool"
        assert second[-1]["tool_call_id"] == "call_1"
        assert '"id":"sc1"' in second[-1]["content"]

        stored = store.history("p1", "u1", 30)
        assert [m.role for m in stored] == ["user", "assistant"]
        assert all(m.metadata is None for m in stored)

    def test_iteration_cap(self, router, llm, spy):
        llm.script(*[calls(call("list_cast", f"c{i}")) for i in range(6)])

        resp = router.handle_message("p1", "u1", "keep looking")

        assert resp.message.content == prompts.ITERATION_LIMIT
        assert resp.status is None
        assert len(llm.turn_requests) == 6
        assert len(spy.calls) == 6

    def test_mixed_batch_escalates_whole_batch(self, router, llm, spy):
        resp = _pending(router, llm, call("list_scenes", "c1"), call("delete_scene", "c2", scene_id="sc3"))

        assert resp.status == "pending_confirmation"
        assert [a.tier for a in resp.message.metadata.actions] == [ToolTier.READ, ToolTier.MUTATE]
        assert spy.calls == []

    def test_unknown_tool_escalates(self, router, llm, spy):
        resp = _pending(router, llm, call("drop_database"))

        assert resp.status == "pending_confirmation"
        assert resp.message.metadata.actions[0].tier is ToolTier.MUTATE
        assert spy.calls == []

    def test_model_text_is_used_for_confirmation(self, router, llm):
        resp = _pending(router, llm, call("create_element", category="PROP", name="Lamp"), content="Shall I add the lamp?")

        assert resp.message.content == "Shall I add the lamp?"

    @pytest.mark.parametrize("turn", [text("   "), text(None), ModelTurn()])
    def test_empty_answer(self, router, llm, turn):
        llm.script(turn)

        resp = router.handle_message("p1", "u1", "hello")

        assert resp.message.content == prompts.EMPTY_RESPONSE

    def test_prompt_layout(self, router, llm):
        llm.script(text("Hi."), text("Still here."))

        router.handle_message("p1", "u1", "hello")
        router.handle_message("p1", "u1", "  again  ")

        first, second = llm.turn_requests
        assert first[0] == {"role": "system", "content": prompts.AGENT_SYSTEM_PROMPT}
        assert first[1]["content"].startswith("Current project context:\nProject: Night Shift")
        assert [m["role"] for m in second] == ["system", "system", "user", "assistant", "user"]
        assert second[-1]["content"] == "again"
        assert len(llm.tool_catalogs[0]) == 25


class TestInputChecks:

    def test_message_length_boundary(self, router, llm):
        llm.script(text("ok"))

        assert router.handle_message("p1", "u1", "x" * 4000).message.content == "ok"
        with pytest.raises(InvalidInput):
            router.handle_message("p1", "u1", "x" * 4001)

    def test_blank_message(self, router, store):
        with pytest.raises(InvalidInput):
            router.handle_message("p1", "u1", "  \n ")

        assert store.history("p1", "u1", 30) == []

    def test_missing_user(self, router):
        with pytest.raises(Unauthorized) as exc:
            router.handle_message("p1", None, "hello")

        assert exc.value.status_code == 401

    def test_missing_project(self, router):
        with pytest.raises(InvalidInput, match="projectId is required"):
            router.handle_message("", "u1", "hello")

    def test_non_member(self, router, llm):
        with pytest.raises(Forbidden) as exc:
            router.handle_message("p2", "u1", "hello")

        assert exc.value.status_code == 403
        assert llm.turn_requests == []


class TestResolveConfirmation:

    def test_approve_runs_actions_in_order(self, router, llm, spy, ws):
        resp = _pending(
            router,
            llm,
            call("create_scene", "c1", scene_number="12", int_ext="INT", set_name="KITCHEN", day_night="DAY"),
            call("assign_scene_to_day", "c2", scene_id="12", shooting_day_id="sd1"),
        )

        done = router.resolve_confirmation("p1", "u1", resp.confirmation_id, True)

        assert spy.calls == ["create_scene", "assign_scene_to_day"]
        assert next(d for d in ws.shooting_days if d["id"] == "sd1")["scene_ids"] == ["sc1", "sc10"]
        assert done.message.content == "All done."
        meta = done.message.metadata
        assert meta.type is MetadataType.EXECUTION_RESULT
        assert [r.verification.verified for r in meta.results] == [True, True]

    def test_partial_failure_is_summarised(self, router, llm, ws):
        resp = _pending(
            router,
            llm,
            call("create_scene", "c1", scene_number="12"),
            call("update_scene", "c2", scene_id="sc99", synopsis="x"),
        )

        done = router.resolve_confirmation("p1", "u1", resp.confirmation_id, True)

        results = done.message.metadata.results
        assert [r.result.success for r in results] == [True, False]
        summary_input = llm.text_requests[0][1]["content"]
        assert summary_input.startswith("Tool execution results:\n")
        assert ": OK [verified]" in summary_input
        assert "update_scene(" in summary_input
        assert ": FAILED [issues: Scene 'sc99' not found.]" in summary_input

    def test_coerced_arguments_verify_cleanly(self, router, llm):
        resp = _pending(router, llm, call("create_scene", scene_number="12", page_count="1.5"))

        done = router.resolve_confirmation("p1", "u1", resp.confirmation_id, True)

        verification = done.message.metadata.results[0].verification
        assert verification.verified is True
        assert "[verified]" in llm.text_requests[0][1]["content"]

    def test_tools_with_a_name_argument(self, router, llm, ws):
        resp = _pending(router, llm, call("create_location", "c1", name="Warehouse"))

        router.resolve_confirmation("p1", "u1", resp.confirmation_id, True)

        assert [l["name"] for l in ws.locations] == ["Rosie's Diner", "Warehouse"]

    def test_unknown_tool_fails_on_approval(self, router, llm):
        resp = _pending(router, llm, call("drop_database"))

        done = router.resolve_confirmation("p1", "u1", resp.confirmation_id, True)

        item = done.message.metadata.results[0]
        assert item.result.error == "Unknown tool: drop_database"
        assert item.verification is None
        assert "[no verification]" in llm.text_requests[0][1]["content"]

    @pytest.mark.parametrize("approved", [False, "true", 1, None])
    def test_anything_but_true_declines(self, router, llm, spy, ws, approved):
        resp = _pending(router, llm, call("create_scene", scene_number="12"))

        done = router.resolve_confirmation("p1", "u1", resp.confirmation_id, approved)

        assert done.message.content == prompts.DECLINED
        assert done.message.metadata.type is MetadataType.CONFIRMATION_DECLINED
        assert spy.calls == []
        assert _scene_ids(ws) == ["sc1", "sc2", "sc3"]

    def test_declined_confirmation_is_closed(self, router, llm):
        resp = _pending(router, llm, call("create_scene", scene_number="12"))
        router.resolve_confirmation("p1", "u1", resp.confirmation_id, False)

        with pytest.raises(ConfirmationNotFound):
            router.resolve_confirmation("p1", "u1", resp.confirmation_id, True)

    def test_second_approval_does_not_rerun(self, router, llm, spy):
        resp = _pending(router, llm, call("create_scene", scene_number="12"))
        router.resolve_confirmation("p1", "u1", resp.confirmation_id, True)

        with pytest.raises(ConfirmationNotFound) as exc:
            router.resolve_confirmation("p1", "u1", resp.confirmation_id, True)

        assert exc.value.status_code == 404
        assert spy.calls == ["create_scene"]

    def test_unknown_confirmation(self, router):
        with pytest.raises(ConfirmationNotFound):
            router.resolve_confirmation("p1", "u1", "not-a-confirmation", True)

    def test_confirmations_are_per_user(self, router, llm, ws):
        resp = _pending(router, llm, call("update_scene", scene_id="sc2", synopsis="x"))

        with pytest.raises(ConfirmationNotFound):
            router.resolve_confirmation("p1", "u2", resp.confirmation_id, True)

    def test_summary_failure_after_commit(self, router, llm, spy, store, ws):
        resp = _pending(
            router,
            llm,
            call("update_scene", "c1", scene_id="sc2", synopsis="Maya waits."),
            call("add_cast_to_scene", "c2", scene_id="sc2", cast_member_id="ca2"),
        )
        llm.summary_error = RuntimeError("completion service down")

        with pytest.raises(SummarizationFailed) as exc:
            router.resolve_confirmation("p1", "u1", resp.confirmation_id, True)

        assert exc.value.status_code == 500
        assert spy.calls == ["update_scene", "add_cast_to_scene"]
        recent = store.recent("p1", "u1", 10)
        assert all(m.metadata is None or m.metadata.type is not MetadataType.EXECUTION_RESULT for m in recent)
        assert ledger.find_pending(recent, resp.confirmation_id) is None

        with pytest.raises(ConfirmationNotFound):
            router.resolve_confirmation("p1", "u1", resp.confirmation_id, True)

        assert spy.calls == ["update_scene", "add_cast_to_scene"]

    def test_approval_is_recorded_before_execution(self, router, llm, store):
        resp = _pending(router, llm, call("create_scene", scene_number="12"))

        router.resolve_confirmation("p1", "u1", resp.confirmation_id, True)

        history = store.history("p1", "u1", 10)
        assert [m.metadata.type for m in history if m.metadata] == [
            MetadataType.CONFIRMATION_REQUEST,
            MetadataType.CONFIRMATION_APPROVED,
            MetadataType.EXECUTION_RESULT,
        ]
        approval = history[-2]
        assert approval.role == "user"
        assert approval.content == "Approved 1 action(s)."

    def test_newer_request_supersedes_older(self, router, llm, spy):
        older = _pending(router, llm, call("create_scene", scene_number="12"))
        newer = _pending(router, llm, call("create_scene", scene_number="13"))

        with pytest.raises(ConfirmationNotFound):
            router.resolve_confirmation("p1", "u1", older.confirmation_id, True)

        router.resolve_confirmation("p1", "u1", newer.confirmation_id, True)
        assert spy.calls == ["create_scene"]


class TestToolResultsInPrompt:

    def _router(self, llm, store, result):
        return Router(llm=llm, store=store, execute=lambda name, args, ctx: result)

    def test_large_results_are_truncated(self, ws, llm, store):
        router = self._router(llm, store, ToolResult(success=True, data="x" * 5000))
        llm.script(calls(call("list_elements")), text("Lots."))

        router.handle_message("p1", "u1", "list elements")

        assert len(llm.turn_requests[1][-1]["content"]) == 3000

    def test_failures_are_reported_to_the_model(self, ws, llm, store):
        router = self._router(llm, store, ToolResult(success=False, error="boom"))
        llm.script(calls(call("list_elements")), text("Sorry."))

        router.handle_message("p1", "u1", "list elements")

        assert llm.turn_requests[1][-1]["content"] == "Error: boom"


class TestProcessingLog:

    def test_success_is_logged(self, router, llm, store):
        llm.script(text("Hi."))

        router.handle_message("p1", "u1", "hello")

        entry = store.processing_log[-1]
        assert entry.operation == "handle_message"
        assert entry.success is True
        assert entry.error is None
        assert entry.processing_ms >= 0

    def test_failure_is_logged(self, router, store):
        with pytest.raises(Forbidden):
            router.handle_message("p2", "u1", "hello")

        entry = store.processing_log[-1]
        assert entry.success is False
        assert entry.error == "Project access denied"

    def test_resolution_is_logged(self, router, store):
        with pytest.raises(ConfirmationNotFound):
            router.resolve_confirmation("p1", "u1", "missing", True)

        assert store.processing_log[-1].operation == "resolve_confirmation"


class TestToolLoop:

    def test_zero_iterations(self, ws, ctx):
        llm = FakeLLM()
        loop = ToolLoop(llm, [], ctx, max_iterations=0)

        assert loop.run() is LoopState.LIMIT_EXCEEDED
        assert llm.turn_requests == []

    def test_step_after_finish(self, ws, ctx):
        loop = ToolLoop(FakeLLM([text("done")]), [], ctx)

        assert loop.step() is LoopState.ANSWERED
        with pytest.raises(RuntimeError):
            loop.step()

    def test_read_turn_keeps_loop_open(self, ws):
        viewer = ToolContext(project_id="p1", user_id="u3")
        loop = ToolLoop(FakeLLM([calls(call("list_crew"))]), [], viewer)

        assert loop.step() is LoopState.AWAITING_MODEL
        assert loop.iterations == 1
        assert '"name":"Sam Reyes"' in loop.messages[-1]["content"]

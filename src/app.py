"""
src/app.py
"""


import logging
from typing import List, Optional, Tuple
import gradio as gr

from context.loader import load_workspace
from orchestrator.errors import AgentError
from orchestrator.models import AgentResponse, Message
from orchestrator.router import Router
from production import session


APP_TITLE = "Production Assistant (Local Demo)"
APP_DESC = (
    "Ask about the project or tell the assistant what to change, e.g. "
    "'add a new scene 12, INT KITCHEN DAY' or 'how many scenes are INT?'. "
    "Changes are listed for approval before anything is written."
)


def _render(messages: List[Message]) -> str:

    lines = []

    for m in messages:
        who = "You" if m.role == "user" else "Assistant"
        lines.append(f"**{who}:** {m.content}")

    return "\n\n".join(lines) or "_No messages yet._"

def _render_plan(resp: AgentResponse) -> str:

    meta = resp.message.metadata

    if resp.status != "pending_confirmation" or meta is None:
        return ""

    items = "\n".join(f"{i}. {a.description}" for i, a in enumerate(meta.actions, start=1))

    return f"### Pending approval\n{items}"

def app(router: Optional[Router] = None):

    ws = load_workspace()
    session.attach_workspace(ws)
    router = router or Router()

    memberships = [(f"{m['project_id']} / {m['user_id']} ({m['role']})", f"{m['project_id']}|{m['user_id']}") for m in ws.members]

    def transcript(member: str) -> str:

        project_id, user_id = member.split("|", 1)

        return _render(router.store.history(project_id, user_id, 50))

    def send(text: str, member: str) -> Tuple[str, str, str, Optional[str]]:

        project_id, user_id = member.split("|", 1)

        try:
            resp = router.handle_message(project_id, user_id, text)
        except AgentError as e:
            raise gr.Error(f"{e.code}: {e}")

        return transcript(member), "", _render_plan(resp), resp.confirmation_id

    def decide(member: str, confirmation_id: Optional[str], approved: bool) -> Tuple[str, str, Optional[str]]:

        if not confirmation_id:
            raise gr.Error("Nothing is waiting for approval.")

        project_id, user_id = member.split("|", 1)

        try:
            router.resolve_confirmation(project_id, user_id, confirmation_id, approved)
        except AgentError as e:
            raise gr.Error(f"{e.code}: {e}")

        return transcript(member), "", None

    with gr.Blocks(title=APP_TITLE) as demo:
        gr.Markdown(f"# {APP_TITLE}")
        gr.Markdown(APP_DESC)

        member_dd = gr.Dropdown(
            label="Project / user",
            choices=memberships,
            value=memberships[0][1] if memberships else None,
        )
        chat = gr.Markdown(_render([]))
        cmd = gr.Textbox(label="Message", placeholder="e.g., add a new scene 12, INT KITCHEN DAY", lines=2)
        run = gr.Button("Send", variant="primary")
        plan = gr.Markdown()

        with gr.Row():
            approve = gr.Button("Approve", variant="primary")
            decline = gr.Button("Decline")

        pending = gr.State(None)

        # Wire buttons
        run.click(fn=send, inputs=[cmd, member_dd], outputs=[chat, cmd, plan, pending])
        approve.click(
            fn=lambda member, cid: decide(member, cid, True),
            inputs=[member_dd, pending],
            outputs=[chat, plan, pending],
        )
        decline.click(
            fn=lambda member, cid: decide(member, cid, False),
            inputs=[member_dd, pending],
            outputs=[chat, plan, pending],
        )
        member_dd.change(fn=transcript, inputs=[member_dd], outputs=[chat])

    return demo


if __name__ == "__main__":

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app().launch()

# EOF

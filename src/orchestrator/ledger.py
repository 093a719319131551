"""
src/orchestrator/ledger.py

Confirmation ledger: planned actions waiting for a user decision.

There is no "current confirmation" pointer. A confirmation lives as metadata
on the assistant message that asked for approval; finding the open one is a
newest-first scan over a small window of the append-only history. A later
approval, decline or execution-result message for the same id closes it, and a
newer confirmation request supersedes it.
"""


import uuid
from typing import Iterable, List, Optional

from orchestrator.models import (
    Confirmation,
    Message,
    MessageMetadata,
    MetadataType,
    PlannedAction,
    ToolCall,
)
from orchestrator.registry import describe_action, tier_of


_RESOLVING = {
    MetadataType.CONFIRMATION_APPROVED,
    MetadataType.CONFIRMATION_DECLINED,
    MetadataType.EXECUTION_RESULT,
}


def plan_actions(tool_calls: Iterable[ToolCall]) -> List[PlannedAction]:
    """One PlannedAction per call, in the order the model issued them."""

    actions = []

    for tc in tool_calls:
        args = tc.parsed_arguments()
        actions.append(PlannedAction(
            tool_name=tc.name,
            args=args,
            tier=tier_of(tc.name),
            description=describe_action(tc.name, args),
        ))

    return actions

def open_confirmation(tool_calls: List[ToolCall]) -> Confirmation:

    return Confirmation(
        confirmation_id=str(uuid.uuid4()),
        actions=plan_actions(tool_calls),
        tool_calls_raw=list(tool_calls),
    )

def encode(confirmation: Confirmation) -> MessageMetadata:

    return MessageMetadata(
        type=MetadataType.CONFIRMATION_REQUEST,
        confirmation_id=confirmation.confirmation_id,
        actions=confirmation.actions,
        tool_calls_raw=confirmation.tool_calls_raw,
    )

def decode(metadata: MessageMetadata) -> Confirmation:

    return Confirmation(
        confirmation_id=metadata.confirmation_id or "",
        actions=metadata.actions,
        tool_calls_raw=metadata.tool_calls_raw,
    )

def find_pending(recent_newest_first: Iterable[Message], confirmation_id: str) -> Optional[Confirmation]:
    """
    Return the unresolved confirmation `confirmation_id` from a newest-first
    window of messages, or None if it is absent, already resolved, or
    superseded by a newer confirmation request.
    """

    if not confirmation_id:
        return None

    for msg in recent_newest_first:
        meta = msg.metadata
        if meta is None:
            continue
        if meta.type in _RESOLVING and meta.confirmation_id == confirmation_id:
            return None
        if meta.type is MetadataType.CONFIRMATION_REQUEST:
            # Only the newest request is open
            return decode(meta) if meta.confirmation_id == confirmation_id else None

    return None

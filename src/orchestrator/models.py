"""
src/orchestrator/models.py

Pydantic models for tool calls, confirmations, execution results and stored messages.
"""


import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

from config import ToolTier


class ToolContext(BaseModel):

    project_id: str
    user_id: str


class ToolCall(BaseModel):
    """One function call requested by the model; `arguments` is the raw JSON text."""

    id: str
    name: str
    arguments: str = "{}"

    def parsed_arguments(self) -> Dict[str, Any]:
        """Decode `arguments`, falling back to {} when the model sent bad JSON."""

        try:
            args = json.loads(self.arguments or "{}")
        except (TypeError, ValueError):
            return {}

        return args if isinstance(args, dict) else {}

    def to_openai(self) -> Dict[str, Any]:

        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": self.arguments},
        }


class ToolResult(BaseModel):

    success: bool
    data: Any = None
    error: Optional[str] = None


class Verification(BaseModel):

    verified: bool
    discrepancies: List[str] = Field(default_factory=list)
    expected: str = ""
    actual: str = ""


class PlannedAction(BaseModel):

    tool_name: str
    args: Dict[str, Any] = Field(default_factory=dict)
    tier: ToolTier
    description: str


class ExecutionResultItem(BaseModel):

    tool_name: str
    args: Dict[str, Any] = Field(default_factory=dict)
    result: ToolResult
    verification: Optional[Verification] = None


class MetadataType(str, Enum):

    CONFIRMATION_REQUEST = "tool_confirmation_request"
    CONFIRMATION_APPROVED = "confirmation_approved"
    CONFIRMATION_DECLINED = "confirmation_declined"
    EXECUTION_RESULT = "tool_execution_result"


class MessageMetadata(BaseModel):

    type: MetadataType
    confirmation_id: Optional[str] = None
    actions: List[PlannedAction] = Field(default_factory=list)
    tool_calls_raw: List[ToolCall] = Field(default_factory=list)
    results: List[ExecutionResultItem] = Field(default_factory=list)


class Confirmation(BaseModel):

    confirmation_id: str
    actions: List[PlannedAction]
    tool_calls_raw: List[ToolCall] = Field(default_factory=list)


class Message(BaseModel):

    model_config = ConfigDict(frozen=True)

    id: str
    project_id: str
    user_id: str
    role: Literal["user", "assistant", "tool"]
    content: str
    metadata: Optional[MessageMetadata] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ModelTurn(BaseModel):
    """Normalised completion: either text, or one or more tool calls (possibly with text)."""

    content: Optional[str] = None
    tool_calls: List[ToolCall] = Field(default_factory=list)


class AgentResponse(BaseModel):

    message: Message
    status: Optional[Literal["pending_confirmation"]] = None
    confirmation_id: Optional[str] = None


class ProcessingLogEntry(BaseModel):

    project_id: Optional[str]
    user_id: Optional[str]
    operation: str
    processing_ms: int
    success: bool
    error: Optional[str] = None
    logged_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

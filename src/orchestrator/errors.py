"""
src/orchestrator/errors.py

Request-level failures of the assistant, each mapped to an HTTP-style status.

Per-action tool failures are not exceptions here: they come back as
ToolResult(success=False) and are reported inside the execution results.
"""


class AgentError(Exception):

    status_code: int = 500
    code: str = "server_error"


class Unauthorized(AgentError):

    status_code = 401
    code = "unauthorized"


class Forbidden(AgentError, PermissionError):

    status_code = 403
    code = "forbidden"


class InvalidInput(AgentError, ValueError):

    status_code = 400
    code = "invalid_input"


class ConfirmationNotFound(AgentError, LookupError):

    status_code = 404
    code = "confirmation_not_found"


class SummarizationFailed(AgentError):
    """The summary call failed after approved actions were already committed."""

    status_code = 500
    code = "summarization_failed"

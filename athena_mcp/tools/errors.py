"""
athena_mcp/tools/errors.py
==========================

Exception taxonomy for every failure a tool can report.

Each class carries a short ``kind`` tag.  The dispatch layer catches these
once, at the tool boundary, and uses ``kind`` to keep the failure categories
distinguishable in the final message (a timeout never reads like a failed
query, and vice versa).
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from botocore.exceptions import BotoCoreError, ClientError


class AthenaToolError(Exception):
    """Base class for all errors surfaced to the MCP host."""

    kind = "ToolError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ArgumentError(AthenaToolError):
    """A required argument is missing or has an invalid value."""

    kind = "ArgumentError"


class ExternalCallError(AthenaToolError):
    """An AWS call failed at the transport or service level.

    Attributes
    ----------
    operation:
        The AWS API operation that failed (e.g. ``"StartQueryExecution"``).
    code:
        The AWS error code when the service returned one
        (e.g. ``"InvalidRequestException"``), otherwise ``None``.
    """

    kind = "ExternalCallError"

    def __init__(self, operation: str, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.operation = operation
        self.code = code


class QueryTimeoutError(AthenaToolError):
    """The query was still QUEUED/RUNNING after the last poll attempt."""

    kind = "Timeout"

    def __init__(self, execution_id: str, attempts: int, last_state: str):
        super().__init__(
            f"Query execution timeout: {execution_id} still {last_state} "
            f"after {attempts} status checks"
        )
        self.execution_id = execution_id
        self.attempts = attempts
        self.last_state = last_state


class QueryExecutionFailed(AthenaToolError):
    """Athena reported a FAILED or CANCELLED terminal state."""

    kind = "ExecutionFailed"

    def __init__(self, execution_id: str, state: str, reason: Optional[str] = None):
        message = f"Query failed with status: {state}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.execution_id = execution_id
        self.state = state
        self.reason = reason

    @property
    def detail(self) -> str:
        return self.reason or self.state


class UnknownOperationError(AthenaToolError):
    kind = "UnknownOperation"

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


@contextmanager
def aws_call(operation: str) -> Iterator[None]:
    """Translate botocore failures raised inside the block into ``ExternalCallError``."""
    try:
        yield
    except ClientError as e:
        error = e.response.get("Error", {})
        raise ExternalCallError(
            operation,
            f"{operation} failed: {error.get('Message') or e}",
            code=error.get("Code"),
        ) from e
    except BotoCoreError as e:
        raise ExternalCallError(operation, f"{operation} failed: {e}") from e

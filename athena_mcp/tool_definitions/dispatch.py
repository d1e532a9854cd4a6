"""
athena_mcp/tool_definitions/dispatch.py
=======================================

The single boundary between the MCP tool layer and the tool handlers.

How a call flows
----------------
1. FastMCP receives ``tools/call`` and runs the matching ``@mcp.tool()``
   wrapper (``query_tools.query_athena`` etc.).
2. The wrapper calls ``invoke(name, args)``.
3. ``dispatch_tool`` looks the name up in ``HANDLERS`` (filled by the
   ``@tool_handler`` decorator), runs the handler with the shared
   ``Toolkit`` and returns a ``ToolOutcome``.  It never raises.
4. ``invoke`` returns the outcome text on success (FastMCP wraps it as one
   text content block) or raises ``ToolError`` with the uniform error text.

Every failure is caught exactly once, here.  Handlers just raise the
``AthenaToolError`` subclass that describes what went wrong.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from fastmcp.exceptions import ToolError

from ..config import Config
from ..tools.error_handler import ErrorHandler
from ..tools.errors import (
    ArgumentError,
    AthenaToolError,
    QueryExecutionFailed,
    UnknownOperationError,
)
from ..tools.toolkit import Toolkit

logger = logging.getLogger(__name__)

Handler = Callable[[Toolkit, Mapping[str, Any]], Awaitable[str]]

# Tool catalog, in the order the server advertises it.
TOOL_NAMES = (
    "query_athena",
    "list_athena_databases",
    "list_athena_tables",
    "describe_athena_table",
    "list_s3_buckets",
    "list_s3_objects",
    "get_aws_config",
)

HANDLERS: Dict[str, Handler] = {}


def tool_handler(name: str) -> Callable[[Handler], Handler]:
    """Register the decorated coroutine as the handler for tool ``name``."""

    def decorator(fn: Handler) -> Handler:
        if name in HANDLERS:
            raise ValueError(f"Duplicate handler for tool: {name}")
        HANDLERS[name] = fn
        return fn

    return decorator


# ── Toolkit singleton (lazy init) ─────────────────────────────────────────────
_toolkit: Optional[Toolkit] = None


def get_toolkit() -> Toolkit:
    """Return the shared Toolkit instance, creating it on first call."""
    global _toolkit
    if _toolkit is None:
        _toolkit = Toolkit(Config.from_env())
    return _toolkit


def set_toolkit(toolkit: Optional[Toolkit]) -> None:
    """Install ``toolkit`` as the shared instance (``None`` resets it)."""
    global _toolkit
    _toolkit = toolkit


# ── Argument helpers ──────────────────────────────────────────────────────────

def require_str(args: Mapping[str, Any], key: str) -> str:
    value = args.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ArgumentError(f"'{key}' is required")
    return value


def optional_str(args: Mapping[str, Any], key: str) -> Optional[str]:
    value = args.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ArgumentError(f"'{key}' must be a string, got {type(value).__name__}")
    return value


def positive_int(args: Mapping[str, Any], key: str, default: int) -> int:
    value = args.get(key)
    if value is None:
        return default
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or not math.isfinite(value)
        or value != int(value)
        or value < 1
    ):
        raise ArgumentError(f"'{key}' must be a positive integer, got {value!r}")
    return int(value)


# ── Outcome ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ToolOutcome:
    """Result of one dispatch: the response text, plus the error on failure."""

    text: str
    error: Optional[AthenaToolError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[str]:
        return None if self.error is None else self.error.kind

    def as_envelope(self) -> Dict[str, Any]:
        """MCP ``CallToolResult``-shaped dict with exactly one text block."""
        return {
            "content": [{"type": "text", "text": self.text}],
            "isError": not self.ok,
        }


async def dispatch_tool(
    name: str,
    args: Optional[Mapping[str, Any]] = None,
    toolkit: Optional[Toolkit] = None,
) -> ToolOutcome:
    """Run the handler registered for ``name`` and capture its outcome."""
    args = args or {}
    handler = HANDLERS.get(name)
    if handler is None:
        error: AthenaToolError = UnknownOperationError(name)
        logger.warning("Rejected call to unknown tool: %s", name)
        return ToolOutcome(text=ErrorHandler.format_error_response(error), error=error)

    toolkit = toolkit or get_toolkit()
    logger.info("Executing tool: %s | args: %s", name, sorted(args.keys()))
    try:
        text = await handler(toolkit, args)
    except AthenaToolError as e:
        logger.warning("Tool %s failed (%s): %s", name, e.kind, e.message)
        error = e
    except Exception as e:
        logger.exception("Unexpected error in tool '%s'", name)
        error = AthenaToolError(str(e) or type(e).__name__)
    else:
        return ToolOutcome(text=text)

    query = args.get("query") if isinstance(error, QueryExecutionFailed) else None
    return ToolOutcome(
        text=toolkit.error_handler.format_error_response(error, query=query),
        error=error,
    )


async def invoke(name: str, args: Optional[Mapping[str, Any]] = None) -> str:
    """Dispatch ``name`` for an MCP tool wrapper.

    ``None`` argument values (parameters the caller left out) are dropped so
    handlers apply their own defaults.

    Raises
    ------
    ToolError
        Carrying the uniform error text when the tool failed.
    """
    cleaned = {k: v for k, v in (args or {}).items() if v is not None}
    outcome = await dispatch_tool(name, cleaned)
    if not outcome.ok:
        raise ToolError(outcome.text)
    return outcome.text

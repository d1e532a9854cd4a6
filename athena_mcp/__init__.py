"""
athena_mcp
==========

MCP server exposing AWS Athena queries, Glue catalog discovery and S3
browsing as tools for an AI agent.

The FastMCP server instance is re-exported so hosts can import it directly::

    from athena_mcp import mcp

Run it over stdio with ``python -m athena_mcp`` (or the ``athena-mcp``
console script).
"""

from .config import Config  # noqa: F401
from .tool_definitions import dispatch_tool, mcp  # noqa: F401

__all__ = ["mcp", "dispatch_tool", "Config"]

"""
athena_mcp/tool_definitions/registry.py
=======================================

Single ``FastMCP`` server instance shared across all tool definition modules.

Each domain module imports ``mcp`` from here and decorates its MCP-facing
functions with ``@mcp.tool()``.  FastMCP builds each tool's JSON Schema from
the function signature (``pydantic.Field`` descriptions included) and its
docstring, and wraps the returned string in one text content block.

The imports at the bottom run every ``@mcp.tool()`` and ``@tool_handler``
decorator, so importing this module is enough to get a fully populated server
and dispatch table.
"""

from fastmcp import FastMCP

SERVER_NAME = "aws-athena-mcp"

# The central MCP server.  All @mcp.tool() decorators register on this object.
mcp = FastMCP(SERVER_NAME)

# ── Import all tool modules to trigger registration ──────────────────────────
from . import query_tools      # noqa: E402, F401
from . import discovery_tools  # noqa: E402, F401
from . import storage_tools    # noqa: E402, F401
from . import config_tools     # noqa: E402, F401

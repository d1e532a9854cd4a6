"""
athena_mcp/tool_definitions
===========================

Every **MCP tool** the LLM can invoke.

How tools work
--------------
1. ``registry.py`` creates the single ``FastMCP`` server instance (``mcp``).
2. Each domain module defines a handler (``@tool_handler("name")``) holding
   the logic, and an ``@mcp.tool()`` wrapper that describes the parameters
   and forwards to ``dispatch.invoke``.
3. ``dispatch.py`` maps tool names to handlers and turns every failure into
   one uniform error.

Tool categories
---------------
- ``query_tools.py``     : ``query_athena``
- ``discovery_tools.py``: databases, tables, table schema
- ``storage_tools.py``   : S3 buckets and objects
- ``config_tools.py``    : active configuration
"""

from .registry import mcp  # noqa: F401
from .dispatch import HANDLERS, TOOL_NAMES, ToolOutcome, dispatch_tool, get_toolkit, invoke  # noqa: F401

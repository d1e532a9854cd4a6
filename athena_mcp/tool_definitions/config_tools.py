"""
athena_mcp/tool_definitions/config_tools.py
===========================================

``get_aws_config``: lets the LLM see which region, catalog, database and
workgroup its queries will use by default.  Secrets are never included; only
a ``hasCredentials`` flag says whether explicit keys were configured.
"""

from typing import Any, Mapping

from .dispatch import invoke, tool_handler
from .registry import mcp
from ..tools.formatters import to_json_text
from ..tools.toolkit import Toolkit


@tool_handler("get_aws_config")
async def handle_get_aws_config(toolkit: Toolkit, args: Mapping[str, Any]) -> str:
    return to_json_text(toolkit.config.public_summary())


@mcp.tool()
async def get_aws_config() -> str:
    """Get current AWS configuration and Athena settings."""
    return await invoke("get_aws_config")

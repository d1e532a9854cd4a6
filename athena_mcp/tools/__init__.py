"""
athena_mcp/tools
================

Infrastructure clients and shared utilities.  Nothing in this package is
visible to the LLM directly; these are the building blocks that the MCP tool
handlers in ``tool_definitions/`` use.

Modules
-------
- ``athena_client.py``  : Athena query and catalog calls (boto3).
- ``s3_client.py``      : S3 bucket/object listing (boto3).
- ``query_runner.py``   : Submit → poll → fetch lifecycle for one query.
- ``errors.py``         : Exception taxonomy shared by every tool.
- ``error_handler.py``  : Uniform, actionable error messages.
- ``toolkit.py``        : Dependency container wiring the clients together.
- ``formatters.py``     : Shared output formatting helpers.
"""

from .toolkit import Toolkit  # noqa: F401
from .formatters import format_name_list, to_json_text  # noqa: F401

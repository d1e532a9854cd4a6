"""
athena_mcp/tool_definitions/query_tools.py
==========================================

``query_athena``: run ad-hoc SQL against data in S3 through Athena.

The LLM writes the SQL; this tool only submits it, waits for Athena to finish
and hands back the first page of the ``ResultSet`` as JSON.  There is no local
SQL validation: a malformed query comes back as an ``ExecutionFailed`` error
carrying Athena's own reason (e.g. ``SYNTAX_ERROR: line 1:8 ...``).
"""

import logging
from typing import Any, Mapping, Optional

from pydantic import Field

from .dispatch import invoke, optional_str, require_str, tool_handler
from .registry import mcp
from ..tools.formatters import to_json_text
from ..tools.query_runner import QueryRequest
from ..tools.toolkit import Toolkit

logger = logging.getLogger(__name__)


@tool_handler("query_athena")
async def handle_query_athena(toolkit: Toolkit, args: Mapping[str, Any]) -> str:
    request = QueryRequest(
        query=require_str(args, "query"),
        database=optional_str(args, "database"),
        workgroup=optional_str(args, "workgroup"),
        output_location=optional_str(args, "output_location"),
    )
    result_set = await toolkit.queries.execute(request)
    return to_json_text(result_set)


@mcp.tool()
async def query_athena(
    query: str = Field(..., description="The SQL query to execute"),
    database: Optional[str] = Field(
        None, description="The Athena database name (defaults to the configured database)"
    ),
    workgroup: Optional[str] = Field(
        None, description="The Athena workgroup (defaults to the configured workgroup)"
    ),
    output_location: Optional[str] = Field(
        None, description="S3 location for query results (required if not set in workgroup)"
    ),
) -> str:
    """Execute an SQL query on S3 data using AWS Athena.

    Waits up to about a minute for the query to finish and returns the first
    page of results as JSON (``ResultSetMetadata`` with column info, and
    ``Rows``; the first row holds the column headers).

    Use ``list_athena_tables`` / ``describe_athena_table`` first when you are
    not sure about table or column names.
    """
    return await invoke(
        "query_athena",
        {
            "query": query,
            "database": database,
            "workgroup": workgroup,
            "output_location": output_location,
        },
    )

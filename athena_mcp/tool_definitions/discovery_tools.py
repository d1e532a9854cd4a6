"""
athena_mcp/tool_definitions/discovery_tools.py
==============================================

Catalog discovery tools: databases, tables and table schemas.

These form a discovery hierarchy inside the configured data catalog::

    list_athena_databases
        └── list_athena_tables(database)
                └── describe_athena_table(table, database)

Each tool is one catalog call with no polling; the payload is reshaped only
as far as the output format requires.
"""

import logging
from typing import Any, Mapping, Optional

from pydantic import Field

from .dispatch import invoke, optional_str, require_str, tool_handler
from .registry import mcp
from ..tools.errors import ArgumentError
from ..tools.formatters import format_name_list, to_json_text
from ..tools.toolkit import Toolkit

logger = logging.getLogger(__name__)


@tool_handler("list_athena_databases")
async def handle_list_databases(toolkit: Toolkit, args: Mapping[str, Any]) -> str:
    return to_json_text(toolkit.athena.list_databases())


@tool_handler("list_athena_tables")
async def handle_list_tables(toolkit: Toolkit, args: Mapping[str, Any]) -> str:
    database = optional_str(args, "database") or toolkit.config.default_database
    if not database:
        raise ArgumentError("Database name is required but not provided or configured")

    names = toolkit.athena.list_table_names(database)
    logger.debug("Database %s has %d tables", database, len(names))
    return format_name_list(f'Tables in database "{database}":', names, empty="(no tables)")


@tool_handler("describe_athena_table")
async def handle_describe_table(toolkit: Toolkit, args: Mapping[str, Any]) -> str:
    table = require_str(args, "table")
    database = optional_str(args, "database") or toolkit.config.default_database
    return to_json_text(toolkit.athena.get_table_metadata(database, table))


@mcp.tool()
async def list_athena_databases() -> str:
    """List available Athena databases in the configured data catalog.

    Returns
    -------
    str
        JSON list of database entries (``Name``, optional ``Description``
        and ``Parameters``).
    """
    return await invoke("list_athena_databases")


@mcp.tool()
async def list_athena_tables(
    database: Optional[str] = Field(
        None, description="The database name (defaults to the configured database)"
    ),
) -> str:
    """List tables in an Athena database.

    Returns
    -------
    str
        A heading line followed by one ``- table_name`` line per table.
    """
    return await invoke("list_athena_tables", {"database": database})


@mcp.tool()
async def describe_athena_table(
    table: str = Field(..., description="The table name"),
    database: Optional[str] = Field(
        None, description="The database name (defaults to the configured database)"
    ),
) -> str:
    """Describe the schema of an Athena table.

    Returns the table metadata as JSON: ``Columns`` and ``PartitionKeys``
    (name, type, comment), ``TableType``, ``CreateTime`` and storage
    ``Parameters`` such as the S3 location and file format.
    """
    return await invoke("describe_athena_table", {"table": table, "database": database})

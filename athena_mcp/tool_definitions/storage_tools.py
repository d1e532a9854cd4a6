"""
athena_mcp/tool_definitions/storage_tools.py
============================================

S3 browsing tools, used by the LLM to find where table data and query
results live before writing SQL or choosing an ``output_location``.
"""

import logging
from typing import Any, Mapping, Optional

from pydantic import Field

from .dispatch import invoke, optional_str, positive_int, require_str, tool_handler
from .registry import mcp
from ..tools.formatters import to_json_text
from ..tools.s3_client import DEFAULT_MAX_KEYS
from ..tools.toolkit import Toolkit

logger = logging.getLogger(__name__)


@tool_handler("list_s3_buckets")
async def handle_list_buckets(toolkit: Toolkit, args: Mapping[str, Any]) -> str:
    return to_json_text(toolkit.s3.list_buckets())


@tool_handler("list_s3_objects")
async def handle_list_objects(toolkit: Toolkit, args: Mapping[str, Any]) -> str:
    bucket = require_str(args, "bucket")
    prefix = optional_str(args, "prefix")
    max_keys = positive_int(args, "max_keys", DEFAULT_MAX_KEYS)
    return to_json_text(toolkit.s3.list_objects(bucket, prefix=prefix, max_keys=max_keys))


@mcp.tool()
async def list_s3_buckets() -> str:
    """List available S3 buckets.

    Returns a JSON list of buckets with ``Name`` and ``CreationDate``.
    """
    return await invoke("list_s3_buckets")


@mcp.tool()
async def list_s3_objects(
    bucket: str = Field(..., description="The S3 bucket name"),
    prefix: Optional[str] = Field(None, description="Optional prefix to filter objects"),
    max_keys: Optional[float] = Field(
        None, description="Maximum number of objects to return (default: 100)"
    ),
) -> str:
    """List objects in an S3 bucket.

    Returns a JSON list of objects (``Key``, ``Size``, ``LastModified``,
    ``StorageClass``), never more than ``max_keys`` entries.
    """
    return await invoke(
        "list_s3_objects",
        {"bucket": bucket, "prefix": prefix, "max_keys": max_keys},
    )

"""
athena_mcp/tools/formatters.py
==============================

Shared output formatting helpers.

Every tool answers with exactly one text block, so all of them funnel their
payload through one of these two functions to keep the output consistent:

- ``to_json_text``      : pretty-printed JSON for structured AWS payloads.
- ``format_name_list``  : a short heading plus a ``- name`` bullet per item.
"""

import datetime
import json
from typing import Any, Iterable


def _json_default(value: Any) -> Any:
    # boto3 returns datetimes for LastModified / CreateTime / CreationDate.
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    return str(value)


def to_json_text(payload: Any) -> str:
    """Serialise ``payload`` as 2-space indented JSON.

    >>> print(to_json_text({"Name": "logs"}))
    {
      "Name": "logs"
    }
    """
    return json.dumps(payload, indent=2, default=_json_default)


def format_name_list(heading: str, names: Iterable[str], empty: str = "(none)") -> str:
    """Render ``heading`` followed by one ``- name`` line per entry.

    When ``names`` is empty the ``empty`` placeholder is printed instead, so
    the LLM never receives a bare heading.
    """
    lines = [f"- {name}" for name in names]
    if not lines:
        lines = [empty]
    return f"{heading}\n" + "\n".join(lines)

"""
athena_mcp/tools/error_handler.py
=================================

Actionable, uniform error messages for Athena and S3 failures.

Design Strategy
---------------
Raw AWS errors (``InvalidRequestException: line 1:8: mismatched input ...``)
tell the LLM *what* broke but not *what to try next*.  ``ErrorHandler`` keeps
the original text intact and appends a short list of suggestions chosen by
**pattern matching** against the AWS error code and message.

The rendered message always has the same shape::

    <Kind>: <original message>

    Suggestions:
    1. ...
    2. ...

so the MCP host sees one uniform error format regardless of which tool or
which lifecycle step failed.
"""

import re
from typing import Dict, List, Optional, Tuple

from .errors import AthenaToolError, ExternalCallError, QueryExecutionFailed


class ErrorHandler:
    """Maps tool errors to suggestions and renders the uniform error text.

    Attributes
    ----------
    AWS_ERRORS:
        Map of regex pattern → ``{type, suggestions}``.  Patterns are matched
        case-insensitively against ``"<code> <message>"``.
    KIND_SUGGESTIONS:
        Fallback suggestions per error ``kind`` when no pattern matches.
    """

    AWS_ERRORS: Dict[str, dict] = {
        r"accessdenied|not authorized": {
            "type": "AccessDenied",
            "suggestions": [
                "Check that the IAM identity has athena:*, glue:Get* and s3 permissions",
                "Verify the workgroup allows this identity to run queries",
            ],
        },
        r"expiredtoken|token.*expired|invalidclienttokenid|unrecognizedclient": {
            "type": "InvalidCredentials",
            "suggestions": [
                "Refresh AWS_SESSION_TOKEN or re-run your SSO login",
                "Verify AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY in .env",
            ],
        },
        r"unable to locate credentials|nocredentials": {
            "type": "MissingCredentials",
            "suggestions": [
                "Set AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY, or configure an AWS profile",
            ],
        },
        r"output location|outputlocation": {
            "type": "MissingOutputLocation",
            "suggestions": [
                "Pass output_location (e.g. s3://my-bucket/athena-results/)",
                "Or set ATHENA_OUTPUT_LOCATION, or configure a result location on the workgroup",
            ],
        },
        r"workgroup.*(not found|is not found|does not exist)": {
            "type": "WorkgroupNotFound",
            "suggestions": [
                "Check ATHENA_WORKGROUP or the workgroup argument",
            ],
        },
        r"schema_not_found|database.*(not found|does not exist)": {
            "type": "DatabaseNotFound",
            "suggestions": [
                "Call list_athena_databases to see available databases",
                "Check ATHENA_DATABASE or the database argument",
            ],
        },
        r"table_not_found|entitynotfound|table.*(not found|does not exist)": {
            "type": "TableNotFound",
            "suggestions": [
                "Call list_athena_tables to see the tables in this database",
                "Check the spelling of the table name",
            ],
        },
        r"syntax_error|mismatched input|line \d+:\d+": {
            "type": "SQLSyntaxError",
            "suggestions": [
                "Check for missing commas or quotes",
                "Call describe_athena_table to confirm column names",
                "Athena uses Trino/Presto SQL; quote identifiers with double quotes",
            ],
        },
        r"nosuchbucket": {
            "type": "BucketNotFound",
            "suggestions": [
                "Call list_s3_buckets to see accessible buckets",
                "Pass the bucket name without the s3:// prefix",
            ],
        },
        r"throttl|toomanyrequests|slowdown": {
            "type": "Throttled",
            "suggestions": [
                "Wait a few seconds and call the tool again",
            ],
        },
    }

    KIND_SUGGESTIONS: Dict[str, List[str]] = {
        "Timeout": [
            "Add a LIMIT or a partition filter to reduce scanned data",
            "Raise ATHENA_MAX_POLL_ATTEMPTS for long-running queries",
        ],
        "ArgumentError": [
            "Check the tool's required arguments",
        ],
        "UnknownOperation": [
            "Use one of the tools listed by the server",
        ],
    }

    @staticmethod
    def classify(error: AthenaToolError) -> Tuple[str, List[str]]:
        """Return ``(error_type, suggestions)`` for ``error``.

        Parameters
        ----------
        error:
            Any ``AthenaToolError``.  Service errors are matched against
            ``AWS_ERRORS``; everything else falls back to ``KIND_SUGGESTIONS``.
        """
        haystack = error.message
        if isinstance(error, ExternalCallError) and error.code:
            haystack = f"{error.code} {haystack}"
        if isinstance(error, QueryExecutionFailed):
            haystack = f"{error.state} {error.reason or ''}"

        if isinstance(error, (ExternalCallError, QueryExecutionFailed)):
            for pattern, info in ErrorHandler.AWS_ERRORS.items():
                if re.search(pattern, haystack, flags=re.IGNORECASE):
                    return info["type"], info["suggestions"]

        return error.kind, ErrorHandler.KIND_SUGGESTIONS.get(error.kind, [])

    @staticmethod
    def format_error_response(error: AthenaToolError, query: Optional[str] = None) -> str:
        """Render the uniform error text for ``error``.

        The first line is always ``"<kind>: <original message>"``; the
        original message is never rewritten.

        Parameters
        ----------
        error:
            The error to render.
        query:
            Optional SQL text that caused the error, echoed for context.
        """
        _, suggestions = ErrorHandler.classify(error)
        response = f"{error.kind}: {error.message}"

        if query:
            response += f"\n\nQuery:\n{query}"

        if suggestions:
            response += "\n\nSuggestions:\n"
            response += "\n".join(f"{i}. {s}" for i, s in enumerate(suggestions, 1))
        return response

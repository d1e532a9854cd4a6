"""
athena_mcp/tools/athena_client.py
=================================

Thin adapter over the boto3 ``athena`` client.

Connection Strategy
-------------------
The boto3 client is created **lazily** on first use, from the shared
``boto3.Session`` owned by the ``Toolkit``.  A server with missing or expired
credentials can still start and list its tools; the credential problem is
reported on the first tool call instead.

Every method is a single blocking AWS call (or one paginated listing) and
translates botocore failures into ``ExternalCallError``.  Nothing here polls,
sleeps or retries; the query lifecycle lives in ``query_runner.py``.

Parameters are always passed as structured API arguments.  Query text is
sent verbatim as ``QueryString`` with no quoting or escaping of any kind.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import boto3
from botocore.config import Config as BotoConfig

from ..config import Config
from .errors import ExternalCallError, aws_call

logger = logging.getLogger(__name__)

# One attempt per call: failures are reported, never retried.
CLIENT_CONFIG = BotoConfig(retries={"max_attempts": 1, "mode": "standard"})


class QueryState(str, enum.Enum):
    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self not in (QueryState.QUEUED, QueryState.RUNNING)


@dataclass(frozen=True)
class QueryStatus:
    """State of one query execution as reported by ``GetQueryExecution``."""

    state: QueryState
    reason: Optional[str] = None

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> "QueryStatus":
        status = response["QueryExecution"]["Status"]
        raw_state = status.get("State")
        try:
            state = QueryState(raw_state)
        except ValueError:
            raise ExternalCallError(
                "GetQueryExecution", f"Unexpected query state from Athena: {raw_state!r}"
            ) from None
        reason = status.get("StateChangeReason") or status.get("AthenaError", {}).get("ErrorMessage")
        return cls(state=state, reason=reason)


class AthenaClient:
    """Athena query and catalog calls bound to one ``Config``.

    Parameters
    ----------
    config:
        Resolved server configuration (catalog name, region, ...).
    session:
        Optional ``boto3.Session``.  Built from ``config.session_kwargs()``
        when omitted.
    """

    def __init__(self, config: Config, session: Optional[boto3.Session] = None):
        self.config = config
        self._session = session
        self._client = None

    @property
    def client(self):
        if self._client is None:
            if self._session is None:
                self._session = boto3.Session(**self.config.session_kwargs())
            logger.info("Creating Athena client for region: %s", self.config.aws_region)
            self._client = self._session.client("athena", config=CLIENT_CONFIG)
        return self._client

    # ── Query lifecycle calls ─────────────────────────────────────────────────

    def start_query(
        self,
        query: str,
        database: str,
        workgroup: str,
        output_location: Optional[str] = None,
    ) -> str:
        """Submit ``query`` and return its ``QueryExecutionId``."""
        params: Dict[str, Any] = {
            "QueryString": query,
            "QueryExecutionContext": {"Database": database},
            "WorkGroup": workgroup,
        }
        if output_location:
            params["ResultConfiguration"] = {"OutputLocation": output_location}

        logger.debug("Submitting query to %s/%s: %.200s", workgroup, database, query)
        with aws_call("StartQueryExecution"):
            response = self.client.start_query_execution(**params)
        return response["QueryExecutionId"]

    def get_query_status(self, execution_id: str) -> QueryStatus:
        with aws_call("GetQueryExecution"):
            response = self.client.get_query_execution(QueryExecutionId=execution_id)
        return QueryStatus.from_response(response)

    def get_query_results(self, execution_id: str) -> Dict[str, Any]:
        """Return the first page of results (the ``ResultSet`` dict) verbatim."""
        with aws_call("GetQueryResults"):
            response = self.client.get_query_results(QueryExecutionId=execution_id)
        return response["ResultSet"]

    # ── Catalog calls ─────────────────────────────────────────────────────────

    def list_databases(self) -> List[Dict[str, Any]]:
        """Return ``DatabaseList`` entries for the default catalog."""
        databases: List[Dict[str, Any]] = []
        with aws_call("ListDatabases"):
            paginator = self.client.get_paginator("list_databases")
            for page in paginator.paginate(CatalogName=self.config.default_catalog):
                databases.extend(page.get("DatabaseList", []))
        return databases

    def list_table_names(self, database: str) -> List[str]:
        names: List[str] = []
        with aws_call("ListTableMetadata"):
            paginator = self.client.get_paginator("list_table_metadata")
            for page in paginator.paginate(
                CatalogName=self.config.default_catalog, DatabaseName=database
            ):
                names.extend(t["Name"] for t in page.get("TableMetadataList", []))
        return names

    def get_table_metadata(self, database: str, table: str) -> Dict[str, Any]:
        with aws_call("GetTableMetadata"):
            response = self.client.get_table_metadata(
                CatalogName=self.config.default_catalog,
                DatabaseName=database,
                TableName=table,
            )
        return response["TableMetadata"]

"""
athena_mcp/tools/query_runner.py
================================

Drives one Athena query from submission to a terminal outcome.

Lifecycle
---------
Athena executes queries asynchronously, so a single ``query_athena`` tool
call is really three kinds of AWS call::

    StartQueryExecution            → QueryExecutionId
        ↓
    GetQueryExecution  (× N)       → QUEUED / RUNNING / SUCCEEDED / FAILED / CANCELLED
        ↓ SUCCEEDED
    GetQueryResults                → ResultSet (first page only)

The poll loop waits ``poll_interval`` seconds before every status check and
gives up after ``max_attempts`` checks (60 × 1 s by default).  The wait is an
``await asyncio.sleep`` and each blocking boto3 call is offloaded with
``asyncio.to_thread``, so the event loop stays free while Athena works.

Outcomes are all-or-nothing: the caller gets the ``ResultSet`` exactly as
Athena returned it, or one of ``QueryTimeoutError``, ``QueryExecutionFailed``
or ``ExternalCallError``.  No call is ever retried.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from ..config import Config
from .athena_client import AthenaClient, QueryState, QueryStatus
from .errors import ArgumentError, QueryExecutionFailed, QueryTimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryRequest:
    """One query to run.  Unset fields fall back to the ``Config`` defaults."""

    query: str
    database: Optional[str] = None
    workgroup: Optional[str] = None
    output_location: Optional[str] = None

    def resolve(self, config: Config) -> "QueryRequest":
        return QueryRequest(
            query=self.query,
            database=self.database or config.default_database,
            workgroup=self.workgroup or config.default_workgroup,
            output_location=self.output_location or config.default_output_location,
        )


class QueryRunner:
    """Submit → poll → fetch for a single query.

    Parameters
    ----------
    athena:
        Client adapter providing ``start_query``, ``get_query_status`` and
        ``get_query_results``.
    config:
        Supplies request defaults and the poll bounds.
    sleep:
        Coroutine used for the wait between polls.  Tests pass a no-op.
    """

    def __init__(
        self,
        athena: AthenaClient,
        config: Config,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.athena = athena
        self.config = config
        self.poll_interval = config.poll_interval
        self.max_attempts = config.max_poll_attempts
        self._sleep = sleep

    async def execute(self, request: QueryRequest) -> Dict[str, Any]:
        """Run ``request`` to completion and return its ``ResultSet``.

        Raises
        ------
        ArgumentError
            If the query text is empty.
        ExternalCallError
            If submission, any status check, or the result fetch fails.
        QueryTimeoutError
            If the query is still QUEUED/RUNNING after ``max_attempts`` checks.
        QueryExecutionFailed
            If Athena reports FAILED or CANCELLED.
        """
        if not isinstance(request.query, str) or not request.query.strip():
            raise ArgumentError("Query text is required")

        resolved = request.resolve(self.config)
        execution_id = await asyncio.to_thread(
            self.athena.start_query,
            resolved.query,
            database=resolved.database,
            workgroup=resolved.workgroup,
            output_location=resolved.output_location,
        )
        logger.info(
            "Started query %s (workgroup=%s, database=%s)",
            execution_id,
            resolved.workgroup,
            resolved.database,
        )

        status = await self.wait_for_completion(execution_id)

        if status.state is QueryState.SUCCEEDED:
            result_set = await asyncio.to_thread(self.athena.get_query_results, execution_id)
            logger.info(
                "Query %s succeeded with %d rows",
                execution_id,
                len(result_set.get("Rows", [])),
            )
            return result_set

        logger.warning("Query %s ended %s: %s", execution_id, status.state.value, status.reason)
        raise QueryExecutionFailed(execution_id, status.state.value, status.reason)

    async def wait_for_completion(self, execution_id: str) -> QueryStatus:
        """Poll until a terminal status; at most ``max_attempts`` status checks."""
        state = QueryState.RUNNING
        for attempt in range(1, self.max_attempts + 1):
            await self._sleep(self.poll_interval)
            status = await asyncio.to_thread(self.athena.get_query_status, execution_id)
            state = status.state
            logger.debug("Query %s poll %d/%d: %s", execution_id, attempt, self.max_attempts, state.value)
            if state.is_terminal:
                return status

        logger.warning("Query %s timed out after %d status checks", execution_id, self.max_attempts)
        raise QueryTimeoutError(execution_id, self.max_attempts, state.value)

import asyncio
import threading
import unittest
from unittest.mock import AsyncMock, MagicMock

from athena_mcp.config import Config
from athena_mcp.tools.athena_client import QueryState, QueryStatus
from athena_mcp.tools.errors import (
    ArgumentError,
    ExternalCallError,
    QueryExecutionFailed,
    QueryTimeoutError,
)
from athena_mcp.tools.query_runner import QueryRequest, QueryRunner


def status(state, reason=None):
    return QueryStatus(QueryState(state), reason)


RESULT_SET = {
    "Rows": [{"Data": [{"VarCharValue": "_col0"}]}, {"Data": [{"VarCharValue": "1"}]}],
    "ResultSetMetadata": {"ColumnInfo": [{"Name": "_col0", "Type": "integer"}]},
}


class TestQueryRunner(unittest.TestCase):

    def setUp(self):
        self.config = Config(default_output_location="s3://athena-results/")
        self.athena = MagicMock()
        self.athena.start_query.return_value = "abc"
        self.athena.get_query_results.return_value = RESULT_SET
        self.sleep = AsyncMock()
        self.runner = QueryRunner(self.athena, self.config, sleep=self.sleep)

    def run_async(self, coro):
        return asyncio.run(coro)

    # --- Success path ---

    def test_select_one_returns_result_after_three_polls(self):
        self.athena.get_query_status.side_effect = [
            status("QUEUED"),
            status("RUNNING"),
            status("SUCCEEDED"),
        ]
        result = self.run_async(self.runner.execute(QueryRequest(query="SELECT 1")))

        self.assertEqual(result, RESULT_SET)
        self.assertEqual(self.athena.get_query_status.call_count, 3)
        self.athena.get_query_status.assert_called_with("abc")
        self.athena.get_query_results.assert_called_once_with("abc")
        self.assertEqual(self.sleep.await_count, 3)
        self.sleep.assert_awaited_with(1.0)

    def test_aws_calls_run_off_the_event_loop_thread(self):
        loop_thread = threading.get_ident()
        call_threads = []

        def record(result):
            def side_effect(*args, **kwargs):
                call_threads.append(threading.get_ident())
                return result
            return side_effect

        self.athena.start_query.side_effect = record("abc")
        self.athena.get_query_status.side_effect = record(status("SUCCEEDED"))
        self.athena.get_query_results.side_effect = record(RESULT_SET)

        result = self.run_async(self.runner.execute(QueryRequest(query="SELECT 1")))

        self.assertEqual(result, RESULT_SET)
        self.assertEqual(len(call_threads), 3)
        self.assertNotIn(loop_thread, call_threads)

    def test_submit_uses_config_defaults(self):
        self.athena.get_query_status.return_value = status("SUCCEEDED")
        self.run_async(self.runner.execute(QueryRequest(query="SELECT 1")))
        self.athena.start_query.assert_called_once_with(
            "SELECT 1",
            database="default",
            workgroup="TFP-Primary",
            output_location="s3://athena-results/",
        )

    def test_submit_uses_request_overrides(self):
        self.athena.get_query_status.return_value = status("SUCCEEDED")
        request = QueryRequest(
            query="SELECT 1",
            database="sales",
            workgroup="adhoc",
            output_location="s3://other/",
        )
        self.run_async(self.runner.execute(request))
        self.athena.start_query.assert_called_once_with(
            "SELECT 1", database="sales", workgroup="adhoc", output_location="s3://other/"
        )

    def test_output_location_omitted_when_not_configured(self):
        runner = QueryRunner(self.athena, Config(), sleep=self.sleep)
        self.athena.get_query_status.return_value = status("SUCCEEDED")
        self.run_async(runner.execute(QueryRequest(query="SELECT 1")))
        self.assertIsNone(self.athena.start_query.call_args.kwargs["output_location"])

    def test_query_text_passed_verbatim(self):
        query = 'SELECT "col" FROM t\nWHERE name = \'O\'\'Brien\' -- "quoted"\t;'
        self.athena.get_query_status.return_value = status("SUCCEEDED")
        self.run_async(self.runner.execute(QueryRequest(query=query)))
        self.assertEqual(self.athena.start_query.call_args.args[0], query)

    # --- Terminal failures ---

    def test_failed_status_raises_execution_failed_without_fetch(self):
        self.athena.get_query_status.return_value = status("FAILED", "SYNTAX_ERROR")
        with self.assertRaises(QueryExecutionFailed) as cm:
            self.run_async(self.runner.execute(QueryRequest(query="SELECT bad")))

        self.assertEqual(cm.exception.state, "FAILED")
        self.assertEqual(cm.exception.detail, "SYNTAX_ERROR")
        self.assertIn("SYNTAX_ERROR", str(cm.exception))
        self.athena.get_query_results.assert_not_called()
        self.assertEqual(self.athena.get_query_status.call_count, 1)

    def test_cancelled_status_raises_execution_failed(self):
        self.athena.get_query_status.side_effect = [status("RUNNING"), status("CANCELLED")]
        with self.assertRaises(QueryExecutionFailed) as cm:
            self.run_async(self.runner.execute(QueryRequest(query="SELECT 1")))
        self.assertEqual(cm.exception.state, "CANCELLED")
        self.assertEqual(cm.exception.detail, "CANCELLED")
        self.athena.get_query_results.assert_not_called()

    # --- Timeout ---

    def test_timeout_after_sixty_polls(self):
        self.athena.get_query_status.return_value = status("RUNNING")
        with self.assertRaises(QueryTimeoutError) as cm:
            self.run_async(self.runner.execute(QueryRequest(query="SELECT 1")))

        self.assertNotIsInstance(cm.exception, QueryExecutionFailed)
        self.assertEqual(cm.exception.kind, "Timeout")
        self.assertEqual(cm.exception.attempts, 60)
        self.assertEqual(self.athena.get_query_status.call_count, 60)
        self.athena.get_query_results.assert_not_called()

    def test_timeout_respects_configured_attempts(self):
        runner = QueryRunner(
            self.athena, Config(max_poll_attempts=5, poll_interval=0.25), sleep=self.sleep
        )
        self.athena.get_query_status.return_value = status("QUEUED")
        with self.assertRaises(QueryTimeoutError) as cm:
            self.run_async(runner.execute(QueryRequest(query="SELECT 1")))
        self.assertEqual(cm.exception.last_state, "QUEUED")
        self.assertEqual(self.athena.get_query_status.call_count, 5)
        self.sleep.assert_awaited_with(0.25)

    def test_success_on_last_allowed_poll(self):
        self.athena.get_query_status.side_effect = [status("RUNNING")] * 59 + [status("SUCCEEDED")]
        result = self.run_async(self.runner.execute(QueryRequest(query="SELECT 1")))
        self.assertEqual(result, RESULT_SET)
        self.assertEqual(self.athena.get_query_status.call_count, 60)

    # --- External call failures ---

    def test_submit_failure_is_fatal(self):
        self.athena.start_query.side_effect = ExternalCallError(
            "StartQueryExecution", "StartQueryExecution failed: denied", code="AccessDeniedException"
        )
        with self.assertRaises(ExternalCallError):
            self.run_async(self.runner.execute(QueryRequest(query="SELECT 1")))
        self.athena.get_query_status.assert_not_called()
        self.sleep.assert_not_awaited()

    def test_poll_failure_is_not_retried(self):
        self.athena.get_query_status.side_effect = [
            status("RUNNING"),
            ExternalCallError("GetQueryExecution", "GetQueryExecution failed: throttled"),
        ]
        with self.assertRaises(ExternalCallError):
            self.run_async(self.runner.execute(QueryRequest(query="SELECT 1")))
        self.assertEqual(self.athena.get_query_status.call_count, 2)
        self.athena.get_query_results.assert_not_called()

    def test_result_fetch_failure_is_fatal(self):
        self.athena.get_query_status.return_value = status("SUCCEEDED")
        self.athena.get_query_results.side_effect = ExternalCallError(
            "GetQueryResults", "GetQueryResults failed: gone"
        )
        with self.assertRaises(ExternalCallError):
            self.run_async(self.runner.execute(QueryRequest(query="SELECT 1")))

    # --- Arguments ---

    def test_empty_query_is_rejected_before_submit(self):
        for query in ("", "   "):
            with self.assertRaises(ArgumentError):
                self.run_async(self.runner.execute(QueryRequest(query=query)))
        self.athena.start_query.assert_not_called()


class TestQueryStatus(unittest.TestCase):

    def test_terminal_states(self):
        self.assertFalse(QueryState.QUEUED.is_terminal)
        self.assertFalse(QueryState.RUNNING.is_terminal)
        self.assertTrue(QueryState.SUCCEEDED.is_terminal)
        self.assertTrue(QueryState.FAILED.is_terminal)
        self.assertTrue(QueryState.CANCELLED.is_terminal)

    def test_reason_falls_back_to_athena_error(self):
        parsed = QueryStatus.from_response({
            "QueryExecution": {
                "Status": {"State": "FAILED", "AthenaError": {"ErrorMessage": "TABLE_NOT_FOUND"}}
            }
        })
        self.assertEqual(parsed, QueryStatus(QueryState.FAILED, "TABLE_NOT_FOUND"))

    def test_unknown_state_is_external_error(self):
        with self.assertRaises(ExternalCallError):
            QueryStatus.from_response({"QueryExecution": {"Status": {"State": "PAUSED"}}})


if __name__ == '__main__':
    unittest.main()

"""
athena_mcp/tools/toolkit.py
===========================

Dependency container for all infrastructure clients.

Tool handlers (in ``tool_definitions/``) need the configuration, the Athena
and S3 adapters, the query runner and the error handler.  ``Toolkit`` builds
**one instance of each** around a single shared ``boto3.Session`` and hands
the whole container to every handler.  Tests substitute a ``MagicMock``
toolkit, or a real one built from a hand-made ``Config``.
"""

import logging
from typing import Optional

import boto3

from ..config import Config
from .athena_client import AthenaClient
from .error_handler import ErrorHandler
from .query_runner import QueryRunner
from .s3_client import S3Client

logger = logging.getLogger(__name__)


class Toolkit:
    """Wires all infrastructure clients together into one injectable container.

    Parameters
    ----------
    config:
        A fully populated ``Config`` instance.
    session:
        Optional ``boto3.Session``; built from ``config.session_kwargs()``
        when omitted.

    Attributes
    ----------
    config:
        Application configuration (shared across all clients).
    athena:
        Lazy-connected Athena adapter.
    s3:
        Lazy-connected S3 adapter.
    queries:
        Query lifecycle runner on top of ``athena``.
    error_handler:
        Stateless error classification and formatting utility.
    """

    def __init__(self, config: Config, session: Optional[boto3.Session] = None):
        self.config = config
        self.session = session or boto3.Session(**config.session_kwargs())
        self.athena = AthenaClient(config, session=self.session)
        self.s3 = S3Client(config, session=self.session)
        self.queries = QueryRunner(self.athena, config)
        self.error_handler = ErrorHandler()
        logger.debug(
            "Toolkit initialised for region %s, workgroup %s",
            config.aws_region,
            config.default_workgroup,
        )

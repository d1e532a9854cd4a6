"""
athena_mcp/config.py
====================

Process-wide configuration for the Athena MCP server.

The configuration is read **once** at startup (``Config.from_env()``) and is
immutable afterwards.  Every tool receives it through the ``Toolkit`` rather
than re-reading ``os.environ``, so a test can build a ``Config`` by hand and
get exactly the behaviour it asks for.

Environment Variables
---------------------
- ``AWS_ACCESS_KEY_ID`` / ``AWS_SECRET_ACCESS_KEY`` / ``AWS_SESSION_TOKEN``
  are optional explicit credentials.  When unset, boto3's normal credential
  chain (profiles, SSO, instance roles) is used.
- ``AWS_REGION`` → ``AWS_DEFAULT_REGION`` → ``"us-east-1"``.
- ``ATHENA_CATALOG`` (``"AwsDataCatalog"``), ``ATHENA_DATABASE``
  (``"default"``), ``ATHENA_WORKGROUP`` (``"TFP-Primary"``),
  ``ATHENA_OUTPUT_LOCATION`` (optional ``s3://`` URI).
- ``ATHENA_POLL_INTERVAL`` (seconds, ``1``) and ``ATHENA_MAX_POLL_ATTEMPTS``
  (``60``). Together they bound how long ``query_athena`` waits.
- ``ATHENA_MCP_LOG_LEVEL`` (``"INFO"``).
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_REGION = "us-east-1"
DEFAULT_CATALOG = "AwsDataCatalog"
DEFAULT_DATABASE = "default"
DEFAULT_WORKGROUP = "TFP-Primary"
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_MAX_POLL_ATTEMPTS = 60
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _get(environ: Mapping[str, str], key: str) -> Optional[str]:
    # Empty strings behave like unset variables.
    value = environ.get(key)
    return value or None


@dataclass(frozen=True)
class Config:
    """Resolved connection and Athena defaults for the server."""

    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None
    aws_region: str = DEFAULT_REGION

    default_catalog: str = DEFAULT_CATALOG
    default_database: str = DEFAULT_DATABASE
    default_workgroup: str = DEFAULT_WORKGROUP
    default_output_location: Optional[str] = None

    poll_interval: float = DEFAULT_POLL_INTERVAL
    max_poll_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build a ``Config`` from ``environ`` (defaults to ``os.environ``).

        Raises
        ------
        ValueError
            If ``ATHENA_POLL_INTERVAL`` or ``ATHENA_MAX_POLL_ATTEMPTS`` is not
            a positive number, or ``ATHENA_MCP_LOG_LEVEL`` is not a standard
            logging level name.
        """
        env = os.environ if environ is None else environ

        poll_interval = float(_get(env, "ATHENA_POLL_INTERVAL") or DEFAULT_POLL_INTERVAL)
        max_attempts = int(_get(env, "ATHENA_MAX_POLL_ATTEMPTS") or DEFAULT_MAX_POLL_ATTEMPTS)
        if poll_interval < 0:
            raise ValueError(f"ATHENA_POLL_INTERVAL must be >= 0, got {poll_interval}")
        if max_attempts < 1:
            raise ValueError(f"ATHENA_MAX_POLL_ATTEMPTS must be >= 1, got {max_attempts}")
        log_level = (_get(env, "ATHENA_MCP_LOG_LEVEL") or "INFO").upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(
                f"ATHENA_MCP_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}"
            )

        return cls(
            aws_access_key_id=_get(env, "AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=_get(env, "AWS_SECRET_ACCESS_KEY"),
            aws_session_token=_get(env, "AWS_SESSION_TOKEN"),
            aws_region=(
                _get(env, "AWS_REGION") or _get(env, "AWS_DEFAULT_REGION") or DEFAULT_REGION
            ),
            default_catalog=_get(env, "ATHENA_CATALOG") or DEFAULT_CATALOG,
            default_database=_get(env, "ATHENA_DATABASE") or DEFAULT_DATABASE,
            default_workgroup=_get(env, "ATHENA_WORKGROUP") or DEFAULT_WORKGROUP,
            default_output_location=_get(env, "ATHENA_OUTPUT_LOCATION"),
            poll_interval=poll_interval,
            max_poll_attempts=max_attempts,
            log_level=log_level,
        )

    @property
    def has_credentials(self) -> bool:
        return bool(self.aws_access_key_id and self.aws_secret_access_key)

    def aws_env(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Return an environment mapping for AWS CLI subprocesses.

        The ambient environment (``base``, default ``os.environ``) is copied
        and the configured credentials and region are overlaid on top.
        Credentials that are not configured are left exactly as they were in
        the ambient environment; they are never removed.
        """
        env = dict(os.environ if base is None else base)
        if self.aws_access_key_id:
            env["AWS_ACCESS_KEY_ID"] = self.aws_access_key_id
        if self.aws_secret_access_key:
            env["AWS_SECRET_ACCESS_KEY"] = self.aws_secret_access_key
        if self.aws_session_token:
            env["AWS_SESSION_TOKEN"] = self.aws_session_token
        if self.aws_region:
            env["AWS_REGION"] = self.aws_region
            env["AWS_DEFAULT_REGION"] = self.aws_region
        return env

    def session_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``boto3.Session`` with the same overlay rule."""
        kwargs: Dict[str, Any] = {"region_name": self.aws_region}
        if self.aws_access_key_id:
            kwargs["aws_access_key_id"] = self.aws_access_key_id
        if self.aws_secret_access_key:
            kwargs["aws_secret_access_key"] = self.aws_secret_access_key
        if self.aws_session_token:
            kwargs["aws_session_token"] = self.aws_session_token
        return kwargs

    def public_summary(self) -> Dict[str, Any]:
        """Non-secret view of the configuration, safe to show to the LLM."""
        return {
            "region": self.aws_region,
            "defaultCatalog": self.default_catalog,
            "defaultDatabase": self.default_database,
            "defaultWorkgroup": self.default_workgroup,
            "defaultOutputLocation": self.default_output_location,
            "hasCredentials": self.has_credentials,
        }

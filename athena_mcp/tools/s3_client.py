"""
athena_mcp/tools/s3_client.py
=============================

Bucket and object listing on top of the boto3 ``s3`` client.

Like ``AthenaClient``, the underlying client is created lazily from the
shared session and every failure is reported as ``ExternalCallError``.
"""

import logging
from typing import Any, Dict, List, Optional

import boto3

from ..config import Config
from .athena_client import CLIENT_CONFIG
from .errors import aws_call

logger = logging.getLogger(__name__)

DEFAULT_MAX_KEYS = 100


class S3Client:
    """Read-only S3 browsing used by the storage tools."""

    def __init__(self, config: Config, session: Optional[boto3.Session] = None):
        self.config = config
        self._session = session
        self._client = None

    @property
    def client(self):
        if self._client is None:
            if self._session is None:
                self._session = boto3.Session(**self.config.session_kwargs())
            logger.info("Creating S3 client for region: %s", self.config.aws_region)
            self._client = self._session.client("s3", config=CLIENT_CONFIG)
        return self._client

    def list_buckets(self) -> List[Dict[str, Any]]:
        with aws_call("ListBuckets"):
            response = self.client.list_buckets()
        return response.get("Buckets", [])

    def list_objects(
        self,
        bucket: str,
        prefix: Optional[str] = None,
        max_keys: int = DEFAULT_MAX_KEYS,
    ) -> List[Dict[str, Any]]:
        """List up to ``max_keys`` objects under ``prefix`` in ``bucket``.

        Parameters
        ----------
        bucket:
            Bucket name (no ``s3://`` scheme).
        prefix:
            Optional key prefix filter.
        max_keys:
            Upper bound on the number of returned entries.

        Returns
        -------
        List[Dict[str, Any]]
            ``Contents`` entries as returned by ``ListObjectsV2``; an empty
            list when nothing matches.
        """
        params: Dict[str, Any] = {
            "Bucket": bucket,
            "PaginationConfig": {"MaxItems": max_keys},
        }
        if prefix:
            params["Prefix"] = prefix

        objects: List[Dict[str, Any]] = []
        with aws_call("ListObjectsV2"):
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(**params):
                objects.extend(page.get("Contents", []))
        logger.debug("Listed %d objects in s3://%s/%s", len(objects), bucket, prefix or "")
        return objects[:max_keys]

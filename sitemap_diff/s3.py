"""Single-attempt S3 access for sitemap documents.

Credentials come from the ambient AWS configuration (environment variables,
shared credentials file, instance role); boto3 resolves them. Every method
reports failure through its return value and logs the error.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .logger import DiagnosticLogger, default_logger

_S3_ERRORS = (BotoCoreError, ClientError)


def _default_client_factory(region: Optional[str]):
    if region:
        return boto3.client("s3", region_name=region)
    return boto3.client("s3")


class S3Storage:
    """Reads and probes objects in S3 buckets.

    Parameters
    ----------
    client_factory
        Callable taking an optional region name and returning an S3 client.
        Defaults to ``boto3.client("s3", ...)``; tests pass a fake.
    logger
        Diagnostic logger for error reporting.
    """

    def __init__(
        self,
        *,
        client_factory: Optional[Callable[[Optional[str]], object]] = None,
        logger: Optional[DiagnosticLogger] = None,
    ):
        self._client_factory = client_factory or _default_client_factory
        self.logger = logger or default_logger

    def _client(self, region: Optional[str]):
        return self._client_factory(region)

    def get_text(self, bucket: str, key: str, region: Optional[str] = None) -> Optional[str]:
        """Return the object body decoded as UTF-8, or None on any failure."""
        try:
            response = self._client(region).get_object(Bucket=bucket, Key=key)
            body = response["Body"].read()
        except _S3_ERRORS as e:
            self.logger.error(f"S3 GetObject error for s3://{bucket}/{key}: {e}")
            return None

        try:
            text = body.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            self.logger.error(f"s3://{bucket}/{key} is not valid UTF-8: {e}")
            return None
        return text

    def object_exists(self, bucket: str, key: str, region: Optional[str] = None) -> bool:
        """Check a single key with HeadObject; errors count as missing."""
        try:
            self._client(region).head_object(Bucket=bucket, Key=key)
        except _S3_ERRORS as e:
            self.logger.debug(f"S3 HeadObject for s3://{bucket}/{key} failed: {e}")
            return False
        return True

    def objects_exist(
        self, bucket: str, keys: Iterable[str], region: Optional[str] = None
    ) -> Dict[str, bool]:
        """Check many keys against one listing of the bucket.

        Returns a mapping of each requested key to whether it was listed.
        A listing error marks every key as missing.
        """
        keys = list(keys)
        try:
            paginator = self._client(region).get_paginator("list_objects_v2")
            listed = set()
            for page in paginator.paginate(Bucket=bucket):
                for item in page.get("Contents", []):
                    listed.add(item["Key"])
        except _S3_ERRORS as e:
            self.logger.error(f"S3 ListObjectsV2 error for bucket {bucket}: {e}")
            return {key: False for key in keys}
        return {key: key in listed for key in keys}

"""Remote object storage for backed-up files.

This module provides:
- Abstract interface for object storage
- S3ObjectStore for AWS S3
- create_object_store: Builds a store from optional explicit credentials
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

import boto3
from botocore.exceptions import BotoCoreError, ClientError

if TYPE_CHECKING:
    from typing import Any

    from sandman.core.config import AwsConfig

DEFAULT_REGION = "us-east-1"


class StorageError(Exception):
    """Raised when the remote store rejects or fails a request."""


class ObjectStore(ABC):
    """Abstract interface for remote object storage."""

    @property
    @abstractmethod
    def location(self) -> str:
        """Return a human-readable description of the store."""

    @abstractmethod
    def put(self, bucket: str, key: str, data: bytes) -> None:
        """Store an object.

        Args:
            bucket: Destination bucket.
            key: Object key.
            data: Object body.

        Raises:
            StorageError: If the store did not accept the object.
        """


class S3ObjectStore(ObjectStore):
    """AWS S3 object storage."""

    def __init__(
        self,
        access_key: str | None = None,
        secret_key: str | None = None,
        region: str = DEFAULT_REGION,
    ) -> None:
        """Initialize the S3 client.

        When no keys are given, boto3's default credential chain is used
        (environment, shared credentials file, instance profile...).

        Args:
            access_key: AWS access key ID.
            secret_key: AWS secret access key.
            region: AWS region (default: us-east-1).
        """
        self._region = region
        self._client: Any = boto3.client(
            "s3",
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )

    @property
    def location(self) -> str:
        """Return the S3 region."""
        return f"S3 ({self._region})"

    def put(self, bucket: str, key: str, data: bytes) -> None:
        """Store an object with PutObject."""
        try:
            self._client.put_object(Bucket=bucket, Key=key, Body=data)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"s3://{bucket}/{key}: {e}") from e


def create_object_store(aws: AwsConfig | None = None) -> ObjectStore:
    """Factory function to create the remote store.

    Args:
        aws: Explicit credentials, or None for default resolution.

    Returns:
        Configured ObjectStore instance.
    """
    if aws is None:
        return S3ObjectStore()
    return S3ObjectStore(
        access_key=aws.aws_access_key_id,
        secret_key=aws.aws_secret_access_key,
        region=aws.aws_default_region or DEFAULT_REGION,
    )

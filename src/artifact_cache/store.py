"""
Object Store - S3 access for the cached artifact.

head() returns the object's version identifier; get() streams the object
to a local file.
"""

from pathlib import Path
from typing import Any, Optional, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from control_plane.errors import GatewayDeployError, ObjectNotFoundError


_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound", "NoSuchBucket"}


class ObjectStore(Protocol):
    """Versioned bucket/key object storage."""

    def head(self, bucket: str, key: str) -> str: ...

    def get(self, bucket: str, key: str, target: Path) -> None: ...


def _is_not_found(exc: ClientError) -> bool:
    error = (exc.response or {}).get("Error", {})
    status = (exc.response or {}).get("ResponseMetadata", {}).get("HTTPStatusCode", 0)
    return error.get("Code", "") in _NOT_FOUND_CODES or status == 404


class S3ObjectStore:
    """ObjectStore backed by boto3's S3 client."""

    def __init__(self, client: Any = None, region: Optional[str] = None):
        if client is None:
            import boto3
            client = boto3.client("s3", region_name=region)
        self.client = client

    def head(self, bucket: str, key: str) -> str:
        """
        Current version of s3://bucket/key.

        Uses VersionId on versioned buckets and falls back to the ETag.

        Raises:
            ObjectNotFoundError: If the object does not exist
            GatewayDeployError: For any other head_object failure, or when no version token is returned
        """
        try:
            head = self.client.head_object(Bucket=bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            if isinstance(e, ClientError) and _is_not_found(e):
                raise ObjectNotFoundError(bucket, key) from e
            raise GatewayDeployError(
                code="OBJECT_HEAD_FAILED",
                message=f"head_object failed for s3://{bucket}/{key}: {e}",
                details={"bucket": bucket, "key": key},
            ) from e

        version = head.get("VersionId")
        if not version or version == "null":
            version = head.get("ETag", "")
        if not version:
            raise GatewayDeployError(
                code="OBJECT_VERSION_MISSING",
                message=f"head_object returned neither VersionId nor ETag for s3://{bucket}/{key}",
                details={"bucket": bucket, "key": key},
            )
        return version

    def get(self, bucket: str, key: str, target: Path) -> None:
        """
        Download s3://bucket/key to target.

        Raises:
            ObjectNotFoundError: If the object disappeared since head()
            GatewayDeployError: For any other get failure
        """
        try:
            self.client.download_file(bucket, key, str(target))
        except (ClientError, BotoCoreError) as e:
            if isinstance(e, ClientError) and _is_not_found(e):
                raise ObjectNotFoundError(bucket, key) from e
            raise GatewayDeployError(
                code="OBJECT_GET_FAILED",
                message=f"get_object failed for s3://{bucket}/{key}: {e}",
                details={"bucket": bucket, "key": key},
            ) from e

"""
Deployment errors.

Every failure surfaced to a caller is a GatewayDeployError subclass carrying
a stable code and a message naming the external call that failed.
"""

from typing import Any, Optional


class GatewayDeployError(Exception):
    """Base exception for gateway deployments."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.details = details
        super().__init__(message)


class ResolutionError(GatewayDeployError):
    """Raised when an API name cannot be resolved to exactly one API."""

    def __init__(self, api_name: str, message: str, api_ids: Optional[list[str]] = None):
        details: dict[str, Any] = {"api_name": api_name}
        if api_ids:
            details["api_ids"] = api_ids
        super().__init__(code="RESOLUTION_FAILED", message=message, details=details)


class ApplyError(GatewayDeployError):
    """Raised when the API definition could not be applied."""

    def __init__(self, api_id: str, message: str):
        super().__init__(
            code="APPLY_FAILED",
            message=message,
            details={"api_id": api_id},
        )


class StageError(GatewayDeployError):
    """Raised when a stage cannot be created or deleted."""

    def __init__(self, api_id: str, env_name: str, message: str):
        super().__init__(
            code="STAGE_FAILED",
            message=message,
            details={"api_id": api_id, "env_name": env_name},
        )


class ObjectNotFoundError(GatewayDeployError):
    """Raised when the remote artifact does not exist."""

    def __init__(self, bucket: str, key: str):
        super().__init__(
            code="OBJECT_NOT_FOUND",
            message=f"s3://{bucket}/{key} not found",
            details={"bucket": bucket, "key": key},
        )


class ArtifactIOError(GatewayDeployError, OSError):
    """Raised when the cached artifact cannot be written locally."""

    def __init__(self, path: str, message: str):
        super().__init__(
            code="LOCAL_IO_FAILED",
            message=message,
            details={"path": path},
        )

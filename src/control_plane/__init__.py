"""
Control Plane - API Gateway reconciliation

Handles API lifecycle management:
- Get-or-create of a named API
- Applying a swagger definition to it
- Create/replace and delete of environment stages

Invariant: API Gateway is the source of truth; nothing is cached locally.
"""

from .config import DeploySettings, DEFAULT_API_DESCRIPTION, ENVIRONMENT_VARIABLE_KEY
from .errors import (
    GatewayDeployError,
    ResolutionError,
    ApplyError,
    StageError,
    ObjectNotFoundError,
    ArtifactIOError,
)
from .registry import ApiResource, find_api, get_or_create_api
from .gateway import ApiControlPlane, ApiGatewayControlPlane, Stage, StageDeletion
from .applier import ApplyResult, ArtifactApplier, ImporterProcessApplier, PutRestApiApplier
from .manager import ApiReconciler, build_endpoint_url

__all__ = [
    "DeploySettings",
    "DEFAULT_API_DESCRIPTION",
    "ENVIRONMENT_VARIABLE_KEY",
    "GatewayDeployError",
    "ResolutionError",
    "ApplyError",
    "StageError",
    "ObjectNotFoundError",
    "ArtifactIOError",
    "ApiResource",
    "find_api",
    "get_or_create_api",
    "ApiControlPlane",
    "ApiGatewayControlPlane",
    "Stage",
    "StageDeletion",
    "ApplyResult",
    "ArtifactApplier",
    "ImporterProcessApplier",
    "PutRestApiApplier",
    "ApiReconciler",
    "build_endpoint_url",
]

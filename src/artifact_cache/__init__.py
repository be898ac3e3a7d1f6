"""
Artifact Cache - Local copy of the aws-apigateway-importer jar

Re-downloads only when the S3 version changes or the local file is gone.
"""

from .freshness import (
    RemoteObject,
    LocalTarget,
    ArtifactFreshness,
    VersionPointer,
    FileVersionPointer,
    check_artifact_freshness,
)
from .store import ObjectStore, S3ObjectStore
from .cache import ArtifactCache, CachedArtifact

__all__ = [
    "RemoteObject",
    "LocalTarget",
    "ArtifactFreshness",
    "VersionPointer",
    "FileVersionPointer",
    "check_artifact_freshness",
    "ObjectStore",
    "S3ObjectStore",
    "ArtifactCache",
    "CachedArtifact",
]

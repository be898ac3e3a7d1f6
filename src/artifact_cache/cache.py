"""
Artifact Cache - Keeps the local importer jar in sync with S3.

Flow:
1. Read the synced version (missing/unreadable pointer = never synced)
2. Head the remote object for its current version
3. If versions differ or the file is missing -> download, then record version
4. Otherwise nothing is fetched

Invariant: the version pointer is only written after the download is in
place, so it never claims a version the local file does not hold.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from control_plane.errors import ArtifactIOError

from .freshness import (
    ArtifactFreshness,
    FileVersionPointer,
    LocalTarget,
    RemoteObject,
    VersionPointer,
    check_artifact_freshness,
)
from .store import ObjectStore

PARTIAL_SUFFIX = ".part"


@dataclass
class CachedArtifact:
    """The locally materialized artifact."""
    local_path: Path
    synced_version: str
    downloaded: bool = False


class ArtifactCache:
    """
    Maintains a single local copy of a versioned remote artifact.

    Not safe for concurrent use on the same LocalTarget.
    """

    def __init__(self, store: ObjectStore, pointer: Optional[VersionPointer] = None):
        self.store = store
        self.pointer = pointer or FileVersionPointer()

    def check(self, remote: RemoteObject, target: LocalTarget) -> ArtifactFreshness:
        """Compare the local copy against the remote's current version."""
        remote_version = self.store.head(remote.bucket, remote.key)
        return check_artifact_freshness(target, remote_version, self.pointer)

    def ensure_current(
        self,
        remote: RemoteObject,
        target: LocalTarget,
        force_refresh: bool = False
    ) -> CachedArtifact:
        """
        Make target hold the remote's current version.

        Args:
            remote: Bucket/key of the artifact
            target: Local path and version file
            force_refresh: Download even if the local copy is current

        Returns:
            CachedArtifact describing the local copy

        Raises:
            ObjectNotFoundError: If the remote object does not exist
            ArtifactIOError: If the local write fails
        """
        freshness = self.check(remote, target)
        remote_version = freshness.remote_version or ""

        if freshness.is_current and not force_refresh:
            print(f"[ArtifactCache] {target.path.name} is current ({remote_version})")
            return CachedArtifact(local_path=target.path, synced_version=remote_version)

        print(f"[ArtifactCache] {target.path.name}: {freshness}")
        print(f"  Downloading {remote} with S3 version {remote_version}...")
        self._download(remote, target)
        self.pointer.write(target, remote_version)

        return CachedArtifact(
            local_path=target.path,
            synced_version=remote_version,
            downloaded=True
        )

    def _download(self, remote: RemoteObject, target: LocalTarget) -> None:
        """Fetch into <path>.part and move it over the target."""
        partial = target.path.with_name(target.path.name + PARTIAL_SUFFIX)
        try:
            target.path.parent.mkdir(parents=True, exist_ok=True)
            self.store.get(remote.bucket, remote.key, partial)
            with open(partial, "rb") as f:
                os.fsync(f.fileno())
            os.replace(partial, target.path)
        except OSError as e:
            partial.unlink(missing_ok=True)
            raise ArtifactIOError(str(target.path), f"Cannot write {target.path}: {e}") from e
        except BaseException:
            partial.unlink(missing_ok=True)
            raise

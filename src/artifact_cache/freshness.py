"""
Freshness Checker - Determines if the cached artifact is current.

Reads the synced S3 version from the pointer file next to the artifact and
compares it against the remote version.
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from control_plane.config import VERSION_FILE_SUFFIX
from control_plane.errors import ArtifactIOError


@dataclass(frozen=True)
class RemoteObject:
    """Bucket/key address of the remote artifact."""
    bucket: str
    key: str

    def __str__(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


@dataclass(frozen=True)
class LocalTarget:
    """Local artifact path and the file recording its synced version."""
    path: Path
    version_path: Path

    @classmethod
    def beside(cls, path: Path) -> "LocalTarget":
        """Target whose version file sits next to path, e.g. tool.jar -> tool.s3version."""
        path = Path(path)
        return cls(path=path, version_path=path.with_suffix(VERSION_FILE_SUFFIX))


@dataclass
class ArtifactFreshness:
    """Result of a freshness check for the cached artifact."""
    exists: bool
    is_current: bool
    synced_version: Optional[str] = None
    remote_version: Optional[str] = None

    def __str__(self) -> str:
        if not self.exists:
            return f"NOT FOUND (remote: {self.remote_version})"
        status = "CURRENT" if self.is_current else "STALE"
        return f"{status} (local: {self.synced_version}, remote: {self.remote_version})"


class VersionPointer(Protocol):
    """Persists the version identifier of the cached artifact."""

    def read(self, target: LocalTarget) -> Optional[str]: ...

    def write(self, target: LocalTarget, version_id: str) -> None: ...


class FileVersionPointer:
    """Stores the version as the sole content of target.version_path."""

    def read(self, target: LocalTarget) -> Optional[str]:
        """
        Read the synced version.

        Returns:
            The stored version, or None if the file is missing or unreadable
        """
        try:
            with open(target.version_path, "r", encoding="utf-8") as f:
                version = f.read()
        except (OSError, UnicodeDecodeError):
            return None
        return version or None

    def write(self, target: LocalTarget, version_id: str) -> None:
        """Atomically replace the version file; durable on return."""
        directory = target.version_path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=target.version_path.name)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(version_id)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, target.version_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise ArtifactIOError(
                str(target.version_path),
                f"Cannot write version file {target.version_path}: {e}"
            ) from e


def check_artifact_freshness(
    target: LocalTarget,
    remote_version: str,
    pointer: VersionPointer
) -> ArtifactFreshness:
    """
    Compare the local artifact with the remote version.

    The artifact is current only if its file exists and the pointer holds
    exactly remote_version. Contents are not hashed.
    """
    synced_version = pointer.read(target)
    exists = target.path.exists()

    return ArtifactFreshness(
        exists=exists,
        is_current=exists and synced_version == remote_version,
        synced_version=synced_version,
        remote_version=remote_version
    )

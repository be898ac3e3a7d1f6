"""
Shared fixtures: in-memory control plane, applier and object store.
"""

import itertools
from pathlib import Path
from typing import Optional

import pytest

from artifact_cache import LocalTarget, RemoteObject
from control_plane import (
    ApiResource,
    ApplyResult,
    ObjectNotFoundError,
    Stage,
    StageDeletion,
    StageError,
)


class FakeControlPlane:
    """In-memory ApiControlPlane recording every call."""

    def __init__(self):
        self.apis: list[ApiResource] = []
        self.stages: dict[tuple[str, str], Stage] = {}
        self.calls: list[tuple] = []
        self._ids = (f"api{n:04d}" for n in itertools.count(1))
        self.fail_stage_create = False
        self.fail_stage_delete = False

    def add_api(self, name: str, api_id: Optional[str] = None) -> ApiResource:
        api = ApiResource(name=name, id=api_id or next(self._ids), description="seeded")
        self.apis.append(api)
        return api

    def list_apis_by_name(self, name):
        self.calls.append(("list_apis_by_name", name))
        return [api for api in self.apis if api.name == name]

    def create_api(self, name, description):
        self.calls.append(("create_api", name, description))
        api = ApiResource(name=name, id=next(self._ids), description=description)
        self.apis.append(api)
        return api

    def create_or_replace_stage(self, api_id, env_name, description, variables):
        self.calls.append(("create_or_replace_stage", api_id, env_name))
        if self.fail_stage_create:
            raise StageError(api_id, env_name, "create_deployment failed: boom")
        stage = Stage(api_id=api_id, env_name=env_name, description=description, variables=dict(variables))
        self.stages[(api_id, env_name)] = stage
        return stage

    def delete_stage(self, api_id, env_name):
        self.calls.append(("delete_stage", api_id, env_name))
        if self.fail_stage_delete:
            raise StageError(api_id, env_name, "delete_stage failed: AccessDenied")
        if self.stages.pop((api_id, env_name), None) is None:
            return StageDeletion.NOT_FOUND
        return StageDeletion.DELETED

    def count(self, method: str) -> int:
        return sum(1 for call in self.calls if call[0] == method)


class FakeApplier:
    """ArtifactApplier that records applications and can be told to fail."""

    def __init__(self, success: bool = True):
        self.success = success
        self.applied: list[tuple] = []

    def apply(self, api_id, region, definition_source):
        self.applied.append((api_id, region, definition_source))
        if self.success:
            return ApplyResult(True)
        return ApplyResult(False, "importer exited with 1")


class FakeObjectStore:
    """Versioned object store keeping object bytes in memory."""

    def __init__(self):
        self.objects: dict[tuple[str, str], tuple[str, bytes]] = {}
        self.heads = 0
        self.downloads = 0
        self.fail_write: Optional[OSError] = None

    def put(self, bucket: str, key: str, version: str, data: bytes) -> None:
        self.objects[(bucket, key)] = (version, data)

    def head(self, bucket, key):
        self.heads += 1
        if (bucket, key) not in self.objects:
            raise ObjectNotFoundError(bucket, key)
        return self.objects[(bucket, key)][0]

    def get(self, bucket, key, target: Path):
        self.downloads += 1
        if self.fail_write is not None:
            Path(target).write_bytes(b"partial")
            raise self.fail_write
        Path(target).write_bytes(self.objects[(bucket, key)][1])


@pytest.fixture
def control_plane():
    return FakeControlPlane()


@pytest.fixture
def applier():
    return FakeApplier()


@pytest.fixture
def object_store():
    store = FakeObjectStore()
    store.put("tools-bucket", "importer.jar", "v1", b"jar-v1")
    return store


@pytest.fixture
def remote():
    return RemoteObject(bucket="tools-bucket", key="importer.jar")


@pytest.fixture
def target(tmp_path):
    return LocalTarget.beside(tmp_path / "importer.jar")

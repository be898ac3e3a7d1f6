"""
Tests for the S3 object store adapter.
"""

from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError, EndpointConnectionError, NoCredentialsError
from botocore.stub import Stubber

from artifact_cache import ArtifactCache, S3ObjectStore
from control_plane import GatewayDeployError, ObjectNotFoundError


@pytest.fixture
def client():
    return boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )


class TestHead:

    def test_returns_version_id(self, client):
        with Stubber(client) as stub:
            stub.add_response(
                "head_object",
                {"VersionId": "v2", "ETag": '"etag"'},
                {"Bucket": "tools-bucket", "Key": "importer.jar"},
            )
            assert S3ObjectStore(client).head("tools-bucket", "importer.jar") == "v2"

    def test_unversioned_bucket_falls_back_to_etag(self, client):
        with Stubber(client) as stub:
            stub.add_response(
                "head_object",
                {"ETag": '"abc123"'},
                {"Bucket": "tools-bucket", "Key": "importer.jar"},
            )
            assert S3ObjectStore(client).head("tools-bucket", "importer.jar") == '"abc123"'

    def test_missing_object(self, client):
        with Stubber(client) as stub:
            stub.add_client_error("head_object", service_error_code="404", http_status_code=404)
            with pytest.raises(ObjectNotFoundError):
                S3ObjectStore(client).head("tools-bucket", "importer.jar")

    def test_other_errors(self, client):
        with Stubber(client) as stub:
            stub.add_client_error("head_object", service_error_code="403", http_status_code=403)
            with pytest.raises(GatewayDeployError) as exc_info:
                S3ObjectStore(client).head("tools-bucket", "importer.jar")

        assert not isinstance(exc_info.value, ObjectNotFoundError)
        assert exc_info.value.code == "OBJECT_HEAD_FAILED"

    def test_unreachable_endpoint(self):
        client = MagicMock()
        client.head_object.side_effect = EndpointConnectionError(endpoint_url="https://s3.amazonaws.com")

        with pytest.raises(GatewayDeployError) as exc_info:
            S3ObjectStore(client).head("tools-bucket", "importer.jar")

        assert exc_info.value.code == "OBJECT_HEAD_FAILED"
        assert "Could not connect" in exc_info.value.message

    @pytest.mark.parametrize("response", [{}, {"VersionId": "null"}])
    def test_no_version_token(self, client, response):
        with Stubber(client) as stub:
            stub.add_response("head_object", response, {"Bucket": "tools-bucket", "Key": "importer.jar"})
            with pytest.raises(GatewayDeployError) as exc_info:
                S3ObjectStore(client).head("tools-bucket", "importer.jar")

        assert exc_info.value.code == "OBJECT_VERSION_MISSING"


class TestGet:

    def test_downloads_to_target(self, tmp_path):
        client = MagicMock()

        S3ObjectStore(client).get("tools-bucket", "importer.jar", tmp_path / "importer.jar.part")

        client.download_file.assert_called_once_with(
            "tools-bucket", "importer.jar", str(tmp_path / "importer.jar.part")
        )

    def test_missing_object(self, tmp_path):
        client = MagicMock()
        client.download_file.side_effect = ClientError(
            {"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject"
        )

        with pytest.raises(ObjectNotFoundError):
            S3ObjectStore(client).get("tools-bucket", "importer.jar", tmp_path / "x")

    def test_missing_credentials(self, tmp_path):
        client = MagicMock()
        client.download_file.side_effect = NoCredentialsError()

        with pytest.raises(GatewayDeployError) as exc_info:
            S3ObjectStore(client).get("tools-bucket", "importer.jar", tmp_path / "x")

        assert exc_info.value.code == "OBJECT_GET_FAILED"


def test_cache_surfaces_unreachable_store(remote, target):
    client = MagicMock()
    client.head_object.side_effect = EndpointConnectionError(endpoint_url="https://s3.amazonaws.com")

    with pytest.raises(GatewayDeployError):
        ArtifactCache(S3ObjectStore(client)).ensure_current(remote, target)

    assert not target.path.exists()
    assert not target.version_path.exists()

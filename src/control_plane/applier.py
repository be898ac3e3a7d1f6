"""
Definition Appliers - Materialize a swagger document into API routes.

Two interchangeable variants:
- ImporterProcessApplier: runs the aws-apigateway-importer jar
- PutRestApiApplier: calls API Gateway's put_rest_api directly

The reconciler only sees ApplyResult (success + message).
"""

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Protocol, Union

from botocore.exceptions import BotoCoreError, ClientError


DefinitionSource = Union[str, Path]


@dataclass
class ApplyResult:
    """Result of applying a definition to an API."""
    success: bool
    message: str = ""

    def __str__(self) -> str:
        status = "OK" if self.success else "FAILED"
        return f"{status}: {self.message}" if self.message else status


class ArtifactApplier(Protocol):
    """Applies a definition document to an existing API."""

    def apply(self, api_id: str, region: str, definition_source: DefinitionSource) -> ApplyResult: ...


class ImporterProcessApplier:
    """Invokes the importer jar: java -jar <jar> --update <api_id> --region <region> <file>."""

    def __init__(self, jar_path: Path, java_bin: str = "java", timeout: Optional[float] = None):
        self.jar_path = Path(jar_path)
        self.java_bin = java_bin
        self.timeout = timeout

    def build_command(self, api_id: str, region: str, definition_source: DefinitionSource) -> list[str]:
        return [
            self.java_bin, "-jar", str(self.jar_path),
            "--update", api_id,
            "--region", region,
            str(definition_source),
        ]

    def apply(self, api_id: str, region: str, definition_source: DefinitionSource) -> ApplyResult:
        cmd = self.build_command(api_id, region, definition_source)
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            return ApplyResult(False, f"Importer timed out after {self.timeout}s")
        except FileNotFoundError:
            return ApplyResult(False, f"{self.java_bin} not found in PATH")
        except OSError as e:
            return ApplyResult(False, f"Cannot run {self.java_bin}: {e}")

        if result.returncode != 0:
            output = (result.stderr or result.stdout or "").strip()
            return ApplyResult(False, f"Importer exited with {result.returncode}: {output}")
        return ApplyResult(True, result.stdout.strip())


class PutRestApiApplier:
    """Overwrites the API's routes from the swagger document via put_rest_api."""

    def __init__(self, client: Any = None, fail_on_warnings: bool = True):
        self.client = client
        self.fail_on_warnings = fail_on_warnings

    def _client_for(self, region: str) -> Any:
        if self.client is None:
            import boto3
            return boto3.client("apigateway", region_name=region)
        return self.client

    def apply(self, api_id: str, region: str, definition_source: DefinitionSource) -> ApplyResult:
        try:
            body = Path(definition_source).read_bytes()
        except OSError as e:
            return ApplyResult(False, f"Cannot read definition {definition_source}: {e}")

        try:
            response = self._client_for(region).put_rest_api(
                restApiId=api_id,
                mode="overwrite",
                failOnWarnings=self.fail_on_warnings,
                body=body,
            )
        except (ClientError, BotoCoreError) as e:
            return ApplyResult(False, f"put_rest_api failed: {e}")

        warnings = response.get("warnings") or []
        return ApplyResult(True, "; ".join(warnings))

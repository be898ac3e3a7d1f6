"""
API Gateway - Control plane adapter.

Wraps the boto3 "apigateway" client behind the small surface the
reconciler needs. The client is injected so tests can stub it.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Protocol

from botocore.exceptions import BotoCoreError, ClientError

from .config import REST_API_PAGE_SIZE
from .errors import ResolutionError, StageError
from .registry import ApiResource


class StageDeletion(Enum):
    """Outcome of a stage delete."""
    DELETED = "deleted"
    NOT_FOUND = "not_found"


@dataclass
class Stage:
    """One environment's published deployment of an API."""
    api_id: str
    env_name: str
    description: str
    variables: dict[str, str] = field(default_factory=dict)
    deployment_id: Optional[str] = None


class ApiControlPlane(Protocol):
    """Operations the reconciler needs from the control plane."""

    def list_apis_by_name(self, name: str) -> list[ApiResource]: ...

    def create_api(self, name: str, description: str) -> ApiResource: ...

    def create_or_replace_stage(
        self,
        api_id: str,
        env_name: str,
        description: str,
        variables: dict[str, str],
    ) -> Stage: ...

    def delete_stage(self, api_id: str, env_name: str) -> StageDeletion: ...


def _error_code(exc: ClientError) -> str:
    return (exc.response or {}).get("Error", {}).get("Code", "")


class ApiGatewayControlPlane:
    """ApiControlPlane backed by AWS API Gateway (REST APIs)."""

    def __init__(self, client: Any = None, region: Optional[str] = None):
        if client is None:
            import boto3
            client = boto3.client("apigateway", region_name=region)
        self.client = client

    def list_apis_by_name(self, name: str) -> list[ApiResource]:
        paginator = self.client.get_paginator("get_rest_apis")
        matches: list[ApiResource] = []
        try:
            for page in paginator.paginate(PaginationConfig={"PageSize": REST_API_PAGE_SIZE}):
                for item in page.get("items", []):
                    if item.get("name") == name:
                        matches.append(ApiResource(
                            name=item["name"],
                            id=item["id"],
                            description=item.get("description"),
                        ))
        except (ClientError, BotoCoreError) as e:
            raise ResolutionError(name, f"get_rest_apis failed: {e}") from e
        return matches

    def create_api(self, name: str, description: str) -> ApiResource:
        try:
            response = self.client.create_rest_api(name=name, description=description)
        except (ClientError, BotoCoreError) as e:
            raise ResolutionError(name, f"create_rest_api failed for {name!r}: {e}") from e
        return ApiResource(
            name=response.get("name", name),
            id=response["id"],
            description=response.get("description", description),
        )

    def create_or_replace_stage(
        self,
        api_id: str,
        env_name: str,
        description: str,
        variables: dict[str, str],
    ) -> Stage:
        # create_deployment with a stageName creates the stage or repoints it
        try:
            response = self.client.create_deployment(
                restApiId=api_id,
                stageName=env_name,
                cacheClusterEnabled=False,
                description=description,
                variables=variables,
            )
        except (ClientError, BotoCoreError) as e:
            raise StageError(api_id, env_name, f"create_deployment failed for stage {env_name!r}: {e}") from e
        return Stage(
            api_id=api_id,
            env_name=env_name,
            description=description,
            variables=dict(variables),
            deployment_id=response.get("id"),
        )

    def delete_stage(self, api_id: str, env_name: str) -> StageDeletion:
        try:
            self.client.delete_stage(restApiId=api_id, stageName=env_name)
        except (ClientError, BotoCoreError) as e:
            if isinstance(e, ClientError) and _error_code(e) == "NotFoundException":
                return StageDeletion.NOT_FOUND
            raise StageError(api_id, env_name, f"delete_stage failed for stage {env_name!r}: {e}") from e
        return StageDeletion.DELETED

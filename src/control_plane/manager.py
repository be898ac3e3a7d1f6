"""
Control Plane Manager - Orchestrates an API's environments.

Responsibilities:
1. Resolve the API by name (create it on first deployment)
2. Apply the swagger definition to the API
3. Publish (create or replace) the stage for an environment
4. Tear down an environment's stage

Invariant: the control plane is the source of truth; API ids are never
cached between calls.
"""

from typing import Optional

from .applier import ArtifactApplier, DefinitionSource
from .config import (
    DEFAULT_API_DESCRIPTION,
    DEFAULT_PROVIDER_DOMAIN,
    ENDPOINT_URL_TEMPLATE,
    ENVIRONMENT_VARIABLE_KEY,
    STAGE_DESCRIPTION_TEMPLATE,
)
from .errors import ApplyError
from .gateway import ApiControlPlane, StageDeletion
from .registry import ApiResource, find_api, get_or_create_api


def build_endpoint_url(
    api_id: str,
    region: str,
    env_name: str,
    domain: str = DEFAULT_PROVIDER_DOMAIN
) -> str:
    """Invoke URL of a stage."""
    return ENDPOINT_URL_TEMPLATE.format(
        api_id=api_id,
        region=region,
        domain=domain,
        env_name=env_name
    )


def _require(value: Optional[str], name: str) -> str:
    if not value:
        raise ValueError(f"{name} must be a non-empty string")
    return value


class ApiReconciler:
    """
    Manages the stages (environments) of one API Gateway REST API.

    Not safe for concurrent use on the same API name: resolve-then-create
    is not atomic.
    """

    def __init__(
        self,
        control_plane: ApiControlPlane,
        applier: ArtifactApplier,
        default_region: Optional[str] = None,
        provider_domain: str = DEFAULT_PROVIDER_DOMAIN
    ):
        self.control_plane = control_plane
        self.applier = applier
        self.default_region = default_region
        self.provider_domain = provider_domain

    def resolve(self, api_name: str) -> Optional[ApiResource]:
        """Return the API named api_name, or None."""
        return find_api(self.control_plane, _require(api_name, "api_name"))

    def setup(
        self,
        api_name: str,
        env_name: str,
        definition_source: DefinitionSource,
        description: str = DEFAULT_API_DESCRIPTION,
        variables: Optional[dict[str, str]] = None,
        region: Optional[str] = None
    ) -> str:
        """
        Deploy definition_source to the env_name stage of api_name.

        Flow:
        1. Resolve the API, creating it if it does not exist
        2. Apply the definition (no stage is touched if this fails)
        3. Create or replace the stage, with variables['environment'] = env_name
        4. Return the stage's invoke URL

        Args:
            api_name: Name of the API
            env_name: Environment, used as the stage name
            definition_source: Swagger document handed to the applier
            description: API description, only used when creating the API
            variables: Stage variables (not modified)
            region: AWS region (default: the reconciler's default region)

        Returns:
            https://{api_id}.execute-api.{region}.{domain}/{env_name}/

        Raises:
            ResolutionError: If the API name is ambiguous or lookup fails
            ApplyError: If the definition could not be applied
            StageError: If the stage could not be deployed
        """
        _require(api_name, "api_name")
        _require(env_name, "env_name")
        region = _require(region or self.default_region, "region")

        api = get_or_create_api(self.control_plane, api_name, description)

        result = self.applier.apply(api.id, region, definition_source)
        if not result.success:
            raise ApplyError(api.id, f"Applying {definition_source} to API {api.id} failed: {result.message}")

        stage_variables = dict(variables or {})
        stage_variables[ENVIRONMENT_VARIABLE_KEY] = env_name

        stage = self.control_plane.create_or_replace_stage(
            api.id,
            env_name,
            STAGE_DESCRIPTION_TEMPLATE.format(env_name=env_name),
            stage_variables
        )
        print(f"[ControlPlane] Deployed stage {stage.env_name} of {api_name} ({api.id})")

        return build_endpoint_url(api.id, region, env_name, self.provider_domain)

    def shutdown(self, api_name: str, env_name: str) -> None:
        """
        Delete the env_name stage of api_name. The API itself is kept.

        A missing API or a missing stage is not an error.

        Raises:
            ResolutionError: If the API name is ambiguous or lookup fails
            StageError: If the delete fails for any other reason
        """
        _require(env_name, "env_name")
        api = self.resolve(api_name)
        if api is None:
            print(f"[ControlPlane] API {api_name} does not exist. Nothing to delete.")
            return

        outcome = self.control_plane.delete_stage(api.id, env_name)
        if outcome is StageDeletion.NOT_FOUND:
            print(f"[ControlPlane] API Gateway stage {env_name} does not exist. Nothing to delete.")
        else:
            print(f"[ControlPlane] Deleted API Gateway stage {env_name}")

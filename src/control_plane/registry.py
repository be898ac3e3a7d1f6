"""
API Registry - Maps API names to API Gateway resources.

Provides:
- ApiResource record
- Lookup by name (no local cache: the control plane is the source of truth)
- Get-or-create by name
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .errors import ResolutionError

if TYPE_CHECKING:
    from .gateway import ApiControlPlane


@dataclass(frozen=True)
class ApiResource:
    """A REST API as known to the control plane."""
    name: str
    id: str
    description: Optional[str] = None


def find_api(control_plane: "ApiControlPlane", api_name: str) -> Optional[ApiResource]:
    """
    Look up an API by name.

    Args:
        control_plane: Control plane to query
        api_name: Exact API name

    Returns:
        The matching ApiResource, or None if no API has that name

    Raises:
        ResolutionError: If several APIs share the name
    """
    matches = control_plane.list_apis_by_name(api_name)

    if not matches:
        return None
    if len(matches) > 1:
        ids = [api.id for api in matches]
        raise ResolutionError(
            api_name,
            f"Ambiguous API name {api_name!r}: {len(matches)} APIs match ({', '.join(ids)})",
            api_ids=ids,
        )
    return matches[0]


def get_or_create_api(
    control_plane: "ApiControlPlane",
    api_name: str,
    description: str,
) -> ApiResource:
    """
    Resolve an API by name, creating it when absent.

    Not atomic: two concurrent callers may both miss the lookup and create
    two APIs with the same name. Callers serialize per API name.
    """
    api = find_api(control_plane, api_name)
    if api is not None:
        return api

    print(f"[ControlPlane] Creating API with name {api_name}")
    return control_plane.create_api(api_name, description)

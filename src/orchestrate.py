"""
Unified Orchestrator - Entry point for API Gateway deployments.

Combines the Artifact Cache (importer jar) and the Control Plane (API,
stages).

Usage:
    from orchestrate import setup_environment, shutdown_environment

    # Deploy swagger.yaml to the "staging" stage of OrdersApi
    result = setup_environment("OrdersApi", "staging", "swagger.yaml")
    print(result.endpoint_url)

    # Extra stage variables, explicit region
    result = setup_environment(
        "OrdersApi",
        "prod",
        "swagger.yaml",
        variables={"lambdaAlias": "prod"},
        region="eu-west-1"
    )

    # Skip the importer jar and call put_rest_api directly
    result = setup_environment("OrdersApi", "dev", "swagger.yaml", direct=True)

    # Remove the stage (the API itself is kept)
    shutdown_environment("OrdersApi", "staging")
"""

import argparse
import sys
from dataclasses import dataclass
from typing import Optional

from botocore.exceptions import BotoCoreError

from artifact_cache import ArtifactCache, CachedArtifact, LocalTarget, ObjectStore, RemoteObject, S3ObjectStore
from control_plane import (
    ApiGatewayControlPlane,
    ApiReconciler,
    DEFAULT_API_DESCRIPTION,
    DeploySettings,
    GatewayDeployError,
    ImporterProcessApplier,
    PutRestApiApplier,
)


@dataclass
class SetupResult:
    """Result of deploying an environment."""
    api_name: str
    env_name: str
    region: str
    endpoint_url: str
    importer: Optional[CachedArtifact] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "api_name": self.api_name,
            "env_name": self.env_name,
            "region": self.region,
            "endpoint_url": self.endpoint_url,
            "importer": {
                "path": str(self.importer.local_path),
                "version": self.importer.synced_version,
                "downloaded": self.importer.downloaded,
            } if self.importer else None,
        }


def ensure_importer(
    settings: Optional[DeploySettings] = None,
    bucket: Optional[str] = None,
    key: Optional[str] = None,
    force_refresh: bool = False,
    store: Optional[ObjectStore] = None
) -> CachedArtifact:
    """
    Make sure the importer jar in the cache directory matches S3.

    Args:
        settings: Deployment settings (default: from environment)
        bucket: S3 bucket holding the jar (default: IMPORTER_BUCKET)
        key: S3 key of the jar (default: IMPORTER_KEY)
        force_refresh: Download even if the local jar is current
        store: Object store to use (default: boto3 S3)

    Returns:
        CachedArtifact for the local jar
    """
    settings = settings or DeploySettings.from_env()
    bucket = bucket or settings.importer_bucket
    key = key or settings.importer_key
    if not bucket or not key:
        raise ValueError("Importer bucket and key are required (IMPORTER_BUCKET / IMPORTER_KEY)")

    cache = ArtifactCache(store or S3ObjectStore(region=settings.region))
    return cache.ensure_current(
        RemoteObject(bucket=bucket, key=key),
        LocalTarget.beside(settings.importer_jar_path),
        force_refresh=force_refresh
    )


def build_reconciler(
    settings: DeploySettings,
    region: Optional[str] = None,
    direct: bool = False
) -> ApiReconciler:
    """Wire an ApiReconciler with boto3-backed collaborators."""
    region = region or settings.region
    control_plane = ApiGatewayControlPlane(region=region)
    if direct:
        applier = PutRestApiApplier(control_plane.client)
    else:
        applier = ImporterProcessApplier(settings.importer_jar_path, java_bin=settings.java_bin)

    return ApiReconciler(
        control_plane,
        applier,
        default_region=region,
        provider_domain=settings.provider_domain
    )


def setup_environment(
    api_name: str,
    env_name: str,
    swagger_file: str,
    description: str = DEFAULT_API_DESCRIPTION,
    variables: Optional[dict[str, str]] = None,
    region: Optional[str] = None,
    direct: bool = False,
    settings: Optional[DeploySettings] = None,
    reconciler: Optional[ApiReconciler] = None,
    store: Optional[ObjectStore] = None
) -> SetupResult:
    """
    Full pipeline: Artifact Cache -> Control Plane.

    1. Unless direct, ensure the importer jar is current (when a bucket is configured)
    2. Resolve/create the API, apply swagger_file, publish the stage

    Returns:
        SetupResult with the stage's endpoint URL
    """
    settings = settings or DeploySettings.from_env()
    region = region or settings.region

    importer = None
    if not direct and settings.importer_bucket and settings.importer_key:
        print("[Orchestrate] Artifact Cache: Ensuring importer is current...")
        importer = ensure_importer(settings, store=store)

    print(f"[Orchestrate] Control Plane: Deploying {api_name} to {env_name}...")
    reconciler = reconciler or build_reconciler(settings, region=region, direct=direct)
    endpoint_url = reconciler.setup(
        api_name,
        env_name,
        swagger_file,
        description=description,
        variables=variables,
        region=region
    )

    return SetupResult(
        api_name=api_name,
        env_name=env_name,
        region=region or reconciler.default_region or "",
        endpoint_url=endpoint_url,
        importer=importer
    )


def shutdown_environment(
    api_name: str,
    env_name: str,
    settings: Optional[DeploySettings] = None,
    reconciler: Optional[ApiReconciler] = None
) -> None:
    """Delete the stage for env_name. The API itself is left in place."""
    settings = settings or DeploySettings.from_env()
    # shutdown never applies a definition
    reconciler = reconciler or build_reconciler(settings, direct=True)
    print(f"[Orchestrate] Control Plane: Shutting down {env_name} of {api_name}...")
    reconciler.shutdown(api_name, env_name)


def parse_variables(pairs: Optional[list[str]]) -> dict[str, str]:
    """Parse KEY=VALUE pairs from the command line."""
    variables: dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Invalid stage variable {pair!r}, expected KEY=VALUE")
        variables[key] = value
    return variables


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gateway-deploy",
        description="Deploy swagger definitions to API Gateway stages"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    setup = sub.add_parser("setup", help="Create or update an environment")
    setup.add_argument("api_name", help="Name of the API")
    setup.add_argument("env_name", help="Environment (stage) name")
    setup.add_argument("swagger_file", help="Swagger definition to import")
    setup.add_argument("--description", default=DEFAULT_API_DESCRIPTION, help="API description")
    setup.add_argument("--var", action="append", metavar="KEY=VALUE", help="Stage variable (repeatable)")
    setup.add_argument("--region", help="AWS region (default: AWS_REGION)")
    setup.add_argument("--direct", action="store_true", help="Use put_rest_api instead of the importer jar")

    shutdown = sub.add_parser("shutdown", help="Delete an environment's stage")
    shutdown.add_argument("api_name", help="Name of the API")
    shutdown.add_argument("env_name", help="Environment (stage) name")

    download = sub.add_parser("download-importer", help="Sync the importer jar from S3")
    download.add_argument("--bucket", help="S3 bucket (default: IMPORTER_BUCKET)")
    download.add_argument("--key", help="S3 key (default: IMPORTER_KEY)")
    download.add_argument("--force", action="store_true", help="Download even if current")

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "setup":
            try:
                variables = parse_variables(args.var)
            except argparse.ArgumentTypeError as e:
                parser.error(str(e))
            result = setup_environment(
                api_name=args.api_name,
                env_name=args.env_name,
                swagger_file=args.swagger_file,
                description=args.description,
                variables=variables,
                region=args.region,
                direct=args.direct
            )
            print("\n--- RESULT ---")
            print(f"Endpoint: {result.endpoint_url}")
        elif args.command == "shutdown":
            shutdown_environment(args.api_name, args.env_name)
        else:
            artifact = ensure_importer(bucket=args.bucket, key=args.key, force_refresh=args.force)
            print(f"Importer: {artifact.local_path} ({artifact.synced_version})")
    except (GatewayDeployError, BotoCoreError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


# CLI entry point
if __name__ == "__main__":
    sys.exit(main())

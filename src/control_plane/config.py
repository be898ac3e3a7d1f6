"""
Configuration for the Control Plane.

Defines:
- Stage defaults (description template, reserved variable key)
- Importer jar location and S3 source
- DeploySettings loaded from the environment (.env supported)
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


# Default API description used when the caller provides none
DEFAULT_API_DESCRIPTION = "Deployed with gateway-deploy"

# Stage variable that always carries the environment name
ENVIRONMENT_VARIABLE_KEY = "environment"

STAGE_DESCRIPTION_TEMPLATE = "Deployment of service to {env_name}"

DEFAULT_PROVIDER_DOMAIN = "amazonaws.com"

ENDPOINT_URL_TEMPLATE = "https://{api_id}.execute-api.{region}.{domain}/{env_name}/"

# get_rest_apis page size (API Gateway maximum is 500)
REST_API_PAGE_SIZE = 500

DEFAULT_IMPORTER_JAR_NAME = "aws-apigateway-importer-1.0.3-SNAPSHOT-jar-with-dependencies.jar"

# Suffix of the file holding the S3 version of the cached jar
VERSION_FILE_SUFFIX = ".s3version"


@dataclass(frozen=True)
class DeploySettings:
    """Runtime settings, usually read from environment variables."""
    region: Optional[str] = None
    provider_domain: str = DEFAULT_PROVIDER_DOMAIN
    importer_bucket: Optional[str] = None
    importer_key: Optional[str] = None
    cache_dir: Path = Path(tempfile.gettempdir())
    importer_jar_name: str = DEFAULT_IMPORTER_JAR_NAME
    java_bin: str = "java"

    @property
    def importer_jar_path(self) -> Path:
        return self.cache_dir / self.importer_jar_name

    @classmethod
    def from_env(cls) -> "DeploySettings":
        """
        Build settings from environment variables.

        Unset variables fall back to the module defaults.
        """
        cache_dir = os.getenv("IMPORTER_CACHE_DIR")
        return cls(
            region=os.getenv("AWS_REGION") or None,
            provider_domain=os.getenv("GATEWAY_PROVIDER_DOMAIN") or DEFAULT_PROVIDER_DOMAIN,
            importer_bucket=os.getenv("IMPORTER_BUCKET") or None,
            importer_key=os.getenv("IMPORTER_KEY") or None,
            cache_dir=Path(cache_dir) if cache_dir else Path(tempfile.gettempdir()),
            importer_jar_name=os.getenv("IMPORTER_JAR_NAME") or DEFAULT_IMPORTER_JAR_NAME,
            java_bin=os.getenv("JAVA_BIN") or "java",
        )

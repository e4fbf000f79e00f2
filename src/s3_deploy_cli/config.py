# src/s3_deploy_cli/config.py
"""
Central configuration for s3-deploy.
Environment variables, defaults, and the serverless.yml loader live here.

Precedence, lowest to highest:
  1. Environment / .env constants below
  2. serverless.yml (service, provider.stage/region, custom.*)
  3. Explicit overrides (CLI flags)
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from s3_deploy_cli.core.models import SyncMode

load_dotenv()


# ---------------------------------------------------------------------------
# Target bucket & build output
# ---------------------------------------------------------------------------
S3_DEPLOY_BUCKET: str | None = os.getenv("S3_DEPLOY_BUCKET")
S3_DEPLOY_DIST_FOLDER: str = os.getenv("S3_DEPLOY_DIST_FOLDER", "build")
S3_DEPLOY_SYNC_MODE: str = os.getenv("S3_DEPLOY_SYNC_MODE", SyncMode.SYNC.value)

# ---------------------------------------------------------------------------
# Stack resolution
# ---------------------------------------------------------------------------
S3_DEPLOY_SERVICE: str | None = os.getenv("S3_DEPLOY_SERVICE")
S3_DEPLOY_STAGE: str = os.getenv("S3_DEPLOY_STAGE", "dev")
AWS_REGION: str = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "us-east-1"
AWS_PROFILE: str | None = os.getenv("AWS_PROFILE")
S3_DEPLOY_OUTPUT_KEY: str = os.getenv("S3_DEPLOY_OUTPUT_KEY", "WebsiteDistribution")

# ---------------------------------------------------------------------------
# External tool
# ---------------------------------------------------------------------------
AWS_CLI_BINARY: str = os.getenv("AWS_CLI_BINARY", "aws")

# Paths passed to create-invalidation. "/*" flushes every cached object.
INVALIDATION_PATHS: list[str] = os.getenv("INVALIDATION_PATHS", "/*").split(",")

DEFAULT_CONFIG_FILE = "serverless.yml"


class ConfigError(ValueError):
    """Raised when required deployment settings are missing or invalid."""


@dataclass(frozen=True)
class DeployConfig:
    """Settings for a single deploy operation. Immutable once loaded."""

    bucket_name: str
    dist_folder: str = "build"
    service: Optional[str] = None
    stage: str = "dev"
    region: str = "us-east-1"
    profile: Optional[str] = None
    stack_name: Optional[str] = None
    output_key: str = "WebsiteDistribution"
    domain_scheme: str = ""
    sync_mode: SyncMode = SyncMode.SYNC
    delete_removed: bool = False

    @classmethod
    def load(
        cls,
        config_path: Path | str | None = None,
        **overrides: Any,
    ) -> "DeployConfig":
        """
        Builds a DeployConfig from env constants, an optional serverless.yml
        and keyword overrides. None-valued overrides are ignored.

        Raises:
            ConfigError: if no bucket name is available from any source.
        """
        values: dict[str, Any] = {
            "bucket_name": S3_DEPLOY_BUCKET,
            "dist_folder": S3_DEPLOY_DIST_FOLDER,
            "service": S3_DEPLOY_SERVICE,
            "stage": S3_DEPLOY_STAGE,
            "region": AWS_REGION,
            "profile": AWS_PROFILE,
            "output_key": S3_DEPLOY_OUTPUT_KEY,
            "sync_mode": S3_DEPLOY_SYNC_MODE,
        }

        path = Path(config_path) if config_path else Path(DEFAULT_CONFIG_FILE)
        if path.is_file():
            values.update(read_serverless_config(path))
        elif config_path:
            raise ConfigError(f"Config file not found: {config_path}")

        values.update({k: v for k, v in overrides.items() if v is not None})

        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ConfigError(f"Unknown config option(s): {', '.join(sorted(unknown))}")

        if not values.get("bucket_name"):
            raise ConfigError(
                "No S3 bucket configured. Set custom.s3Bucket in serverless.yml, "
                "S3_DEPLOY_BUCKET in the environment, or pass --bucket."
            )

        try:
            values["sync_mode"] = SyncMode(values.get("sync_mode") or SyncMode.SYNC)
        except ValueError as e:
            raise ConfigError(f"Invalid sync mode: {values.get('sync_mode')!r}") from e

        if not values.get("dist_folder"):
            values["dist_folder"] = "build"

        return cls(**values)


def read_serverless_config(path: Path | str) -> dict[str, Any]:
    """
    Extracts deploy settings from a serverless.yml.

    Reads `service`, `provider.stage`, `provider.region`, and from `custom`:
    s3Bucket, distFolder, domainOutputKey, domainScheme, syncMode, deleteRemoved.
    Only keys present in the file are returned. deleteRemoved is coerced to
    a bool; every other value must be a string.

    Raises:
        ConfigError: on unparsable YAML or wrongly typed values.
    """
    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Could not parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    provider = _section(data, "provider", path)
    custom = _section(data, "custom", path)
    service = data.get("service")
    if isinstance(service, dict):
        # Older framework versions allow `service: {name: ...}`
        service = service.get("name")

    mapping = {
        "service": service,
        "stage": provider.get("stage"),
        "region": provider.get("region"),
        "profile": provider.get("profile"),
        "bucket_name": custom.get("s3Bucket"),
        "dist_folder": custom.get("distFolder"),
        "output_key": custom.get("domainOutputKey"),
        "domain_scheme": custom.get("domainScheme"),
        "sync_mode": custom.get("syncMode"),
        "delete_removed": custom.get("deleteRemoved"),
    }
    # Framework variables such as ${opt:stage} are resolved by the framework, not here
    values = {
        k: v for k, v in mapping.items()
        if v is not None and not (isinstance(v, str) and "${" in v)
    }

    for key, value in values.items():
        if key != "delete_removed" and not isinstance(value, str):
            raise ConfigError(f"{path}: {key} must be a string, got {type(value).__name__}")
    if "delete_removed" in values:
        values["delete_removed"] = _as_bool(values["delete_removed"], path)
    return values


def _section(data: dict, name: str, path: Path | str) -> dict:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: {name} must be a mapping")
    return section


def _as_bool(value: Any, path: Path | str) -> bool:
    # Quoted YAML booleans arrive as strings; "false" must not enable --delete
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("true", "yes", "on", "1"):
        return True
    if text in ("false", "no", "off", "0"):
        return False
    raise ConfigError(f"{path}: deleteRemoved must be true or false, got {value!r}")

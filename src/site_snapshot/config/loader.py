"""Configuration loading from snapshot.toml with environment overrides."""

import os
import tomllib
from pathlib import Path

from site_snapshot.config.models import SnapshotSettings

# Environment variables that override the [snapshot] table
ENV_OVERRIDES = {
    "SNAPSHOT_DATABASE_URL": "database_url",
    "SNAPSHOT_ENVIRONMENT": "environment",
    "SNAPSHOT_BLOB_ROOT": "blob_root",
    "SNAPSHOT_STAGING_DIR": "staging_dir",
}


def load_settings(config_path: Path | None = None) -> SnapshotSettings:
    """Load snapshot configuration from TOML file.

    Environment variables listed in ``ENV_OVERRIDES`` take precedence over
    values from the file.

    Args:
        config_path: Path to snapshot.toml (default: ./snapshot.toml)

    Returns:
        SnapshotSettings

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config format is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / "snapshot.toml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"Snapshot config not found: {config_path}\n"
            f"Copy snapshot.toml.example to snapshot.toml and set database_url."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    values = dict(data.get("snapshot", {}))
    for env_name, field in ENV_OVERRIDES.items():
        env_value = os.environ.get(env_name)
        if env_value:
            values[field] = env_value

    try:
        return SnapshotSettings(**values)
    except ValueError as e:
        raise ValueError(f"Invalid snapshot config {config_path}: {e}") from e

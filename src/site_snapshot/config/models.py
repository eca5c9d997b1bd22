"""Pydantic models for snapshot configuration."""

from pydantic import BaseModel, Field

from site_snapshot import __version__


class SnapshotSettings(BaseModel):
    """Complete snapshot configuration from snapshot.toml."""

    database_url: str
    blob_root: str = "storage/app/public"
    staging_dir: str = "storage/temp"
    retention_days: int = Field(default=7, ge=0)
    environment: str = "local"
    database_name: str = ""  # Derived from database_url when empty
    engine_version: str = __version__

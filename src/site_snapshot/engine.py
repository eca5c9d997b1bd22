"""Engine facade: the operations the surrounding application calls.

Bundles a relational adapter, a blob store and settings so HTTP handlers,
queued jobs and the CLI share one entry point.

Usage:
    from site_snapshot.config import load_settings
    from site_snapshot.engine import SnapshotEngine

    engine = SnapshotEngine.from_settings(load_settings())
    path = engine.export()
    report = engine.validate(path)
    stats = engine.import_archive(path, environment="staging")
    engine.close()
"""

from pathlib import Path

from site_snapshot.adapters.base import BlobStore, DatabaseClient
from site_snapshot.adapters.filesystem import LocalBlobStore
from site_snapshot.adapters.sql import SqlAlchemyAdapter, database_name_from_url
from site_snapshot.archive.models import (
    ExportFile,
    ExportMetadata,
    ImportStatistics,
    ValidationReport,
)
from site_snapshot.config.models import SnapshotSettings
from site_snapshot.exporter import export_site
from site_snapshot.importer import import_site
from site_snapshot.integrity import verify_integrity
from site_snapshot.registry import DEFAULT_SCHEMA, SchemaOrder
from site_snapshot.sweeper import list_exports, sweep_exports
from site_snapshot.validator import archive_metadata, validate_archive


class SnapshotEngine:
    """Export/import engine bound to one database and one blob store.

    Args:
        adapter: Relational store implementing ``DatabaseClient``.
        blobs: Blob store implementing ``BlobStore``.
        settings: Staging directory, retention and metadata settings.
        schema: Table order; defaults to the built-in registry.
    """

    def __init__(
        self,
        adapter: DatabaseClient,
        blobs: BlobStore,
        settings: SnapshotSettings,
        schema: SchemaOrder | None = None,
    ) -> None:
        self.adapter = adapter
        self.blobs = blobs
        self.settings = settings
        self.schema = schema or DEFAULT_SCHEMA

    @classmethod
    def from_settings(cls, settings: SnapshotSettings) -> "SnapshotEngine":
        """Build an engine on ``SqlAlchemyAdapter`` and ``LocalBlobStore``."""
        return cls(
            SqlAlchemyAdapter(settings.database_url),
            LocalBlobStore(settings.blob_root),
            settings,
        )

    @property
    def staging_dir(self) -> Path:
        return Path(self.settings.staging_dir)

    def ordered_tables(self) -> list[str]:
        return self.schema.names()

    def export(self) -> Path:
        database_name = self.settings.database_name or database_name_from_url(
            self.settings.database_url
        )
        return export_site(
            self.adapter,
            self.blobs,
            self.staging_dir,
            engine_version=self.settings.engine_version,
            database_name=database_name,
            schema=self.schema,
        )

    def validate(self, path: str | Path) -> ValidationReport:
        return validate_archive(path)

    def metadata_of(self, path: str | Path) -> ExportMetadata | None:
        return archive_metadata(path)

    def import_archive(self, path: str | Path, environment: str | None = None) -> ImportStatistics:
        """Import *path*; *environment* defaults to the configured one."""
        return import_site(
            path,
            self.adapter,
            self.blobs,
            environment or self.settings.environment,
            schema=self.schema,
        )

    def sweep(self, retention_days: int | None = None) -> int:
        if retention_days is None:
            retention_days = self.settings.retention_days
        return sweep_exports(self.staging_dir, retention_days)

    def list_exports(self) -> list[ExportFile]:
        return list_exports(self.staging_dir)

    def verify_integrity(self) -> dict[str, list[str]]:
        return verify_integrity(self.adapter, self.schema)

    def close(self) -> None:
        self.adapter.close()

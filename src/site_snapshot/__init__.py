"""site-snapshot: full-site export/import engine.

Captures every registered table plus the uploaded-file tree into one ZIP
archive, and restores it transactionally into another environment.

Usage:
    from site_snapshot import SnapshotEngine, load_settings
    from site_snapshot import ordered_tables, export_site, import_site
    from site_snapshot import validate_archive, archive_metadata, sweep_exports
"""

__version__ = "0.1.0"

# Registry
from site_snapshot.registry import (
    DEFAULT_SCHEMA,
    IDENTITY_TABLE,
    ForeignKey,
    SchemaOrder,
    TableDef,
    ordered_tables,
)

# Errors
from site_snapshot.errors import (
    ArchiveNotFoundError,
    CorruptArchiveError,
    InvalidPayloadError,
    SnapshotError,
    StorageFailureError,
)

# Archive
from site_snapshot.archive import (
    Archive,
    ExportFile,
    ExportMetadata,
    ImportStatistics,
    ValidationReport,
)

# Adapters
from site_snapshot.adapters import (
    BlobStore,
    DatabaseClient,
    LocalBlobStore,
    SqlAlchemyAdapter,
)

# Operations
from site_snapshot.exporter import export_site
from site_snapshot.importer import PRODUCTION, import_site
from site_snapshot.integrity import verify_integrity
from site_snapshot.sweeper import list_exports, sweep_exports
from site_snapshot.validator import archive_metadata, validate_archive

# Config and facade
from site_snapshot.config import SnapshotSettings, load_settings
from site_snapshot.engine import SnapshotEngine

__all__ = [
    # Registry
    "ordered_tables",
    "DEFAULT_SCHEMA",
    "IDENTITY_TABLE",
    "SchemaOrder",
    "TableDef",
    "ForeignKey",
    # Errors
    "SnapshotError",
    "ArchiveNotFoundError",
    "CorruptArchiveError",
    "InvalidPayloadError",
    "StorageFailureError",
    # Archive
    "Archive",
    "ExportMetadata",
    "ImportStatistics",
    "ValidationReport",
    "ExportFile",
    # Adapters
    "DatabaseClient",
    "BlobStore",
    "SqlAlchemyAdapter",
    "LocalBlobStore",
    # Operations
    "export_site",
    "import_site",
    "PRODUCTION",
    "validate_archive",
    "archive_metadata",
    "sweep_exports",
    "list_exports",
    "verify_integrity",
    # Config and facade
    "SnapshotSettings",
    "load_settings",
    "SnapshotEngine",
]

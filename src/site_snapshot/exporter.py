"""Exporter: capture every registered table and the blob tree into one archive.

Usage:
    from site_snapshot.exporter import export_site

    path = export_site(
        adapter,
        blobs,
        staging_dir="storage/temp",
        engine_version="0.1.0",
        database_name="site",
    )
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from site_snapshot.adapters.base import BlobStore, DatabaseClient
from site_snapshot.archive.codec import Archive
from site_snapshot.archive.models import ExportMetadata
from site_snapshot.registry import DEFAULT_SCHEMA, SchemaOrder

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "website-export-"
EXPORT_SUFFIX = ".zip"


def export_filename(moment: datetime, sequence: int = 0) -> str:
    """Archive file name for an export started at *moment*.

    A non-zero *sequence* tells apart exports started in the same second.
    """
    suffix = f"-{sequence}" if sequence else ""
    return f"{EXPORT_PREFIX}{moment.strftime('%Y-%m-%d_%H-%M-%S')}{suffix}{EXPORT_SUFFIX}"


def _create_archive(staging_dir: Path, started: datetime) -> Archive:
    sequence = 0
    while True:
        try:
            return Archive.create(staging_dir / export_filename(started, sequence))
        except FileExistsError:
            sequence += 1


def export_site(
    adapter: DatabaseClient,
    blobs: BlobStore,
    staging_dir: str | Path,
    *,
    engine_version: str,
    database_name: str,
    schema: SchemaOrder | None = None,
    now: datetime | None = None,
) -> Path:
    """Export all registered tables and all blobs to a new archive.

    Iterates ``schema.tables`` in order (referenced tables first).  Every
    table that exists in the database is written, even when empty, so the
    archive records that the table was considered.  Tables missing from the
    database are skipped and left out of ``tables_exported``.

    No partial-success state is hidden: any I/O or database error propagates
    and the half-written archive stays on disk for the caller to remove.

    Args:
        adapter: Relational store implementing ``DatabaseClient``.
        blobs: Blob store implementing ``BlobStore``.
        staging_dir: Directory receiving the archive (created if missing).
        engine_version: Version string recorded in the metadata.
        database_name: Source database identifier recorded in the metadata.
        schema: Table order; defaults to the built-in registry.
        now: Export start time; defaults to the current UTC time.

    Returns:
        Path of the created archive.
    """
    schema = schema or DEFAULT_SCHEMA
    started = now or datetime.now(timezone.utc)
    archive = _create_archive(Path(staging_dir), started)
    path = archive.path

    tables_written: list[str] = []
    files_count = 0

    with archive:
        for table_def in schema.tables:
            if not adapter.has_table(table_def.name):
                logger.warning(f"Table '{table_def.name}' does not exist, not exported")
                continue
            rows = adapter.select_all(table_def.name, order_by=table_def.pk)
            archive.write_table(table_def.name, rows)
            tables_written.append(table_def.name)
            logger.debug(f"Exported {len(rows)} rows from {table_def.name}")

        for relative_path in blobs.iter_paths():
            archive.write_file(relative_path, blobs.read(relative_path))
            files_count += 1

        archive.write_metadata(
            ExportMetadata(
                export_date=started.isoformat(),
                engine_version=engine_version,
                database_name=database_name,
                tables_exported=tables_written,
                files_count=files_count,
            )
        )

    logger.info(
        f"Export written to {path}: {len(tables_written)} tables, {files_count} files"
    )
    return path

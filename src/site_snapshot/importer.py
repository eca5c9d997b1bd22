"""Importer: transactional truncate-and-reload from an export archive.

The relational part runs in one transaction: tables are emptied in reverse
dependency order, reloaded in forward order with their original primary
keys, and each table's id sequence is reset past the restored ids.  Any
failure rolls the whole transaction back.

Files are not transactional.  The archive's file tree is staged next to the
live blob root *before* the transaction starts and swapped into place only
after commit, so a failed import never touches the live tree.

Usage:
    from site_snapshot.importer import import_site

    stats = import_site(
        "storage/temp/website-export-2026-01-15_10-00-00.zip",
        adapter,
        blobs,
        environment="staging",
    )
    print(stats.tables, stats.rows, stats.files)
"""

import logging
from pathlib import Path

from site_snapshot.adapters.base import BlobStaging, BlobStore, DatabaseClient
from site_snapshot.archive.codec import Archive
from site_snapshot.archive.models import ImportStatistics
from site_snapshot.errors import CorruptArchiveError, SnapshotError
from site_snapshot.registry import DEFAULT_SCHEMA, IDENTITY_TABLE, SchemaOrder
from site_snapshot.validator import structure_errors

logger = logging.getLogger(__name__)

PRODUCTION = "production"


def import_site(
    path: str | Path,
    adapter: DatabaseClient,
    blobs: BlobStore,
    environment: str,
    *,
    schema: SchemaOrder | None = None,
) -> ImportStatistics:
    """Replace the relational state and the blob tree with an archive's content.

    When ``environment == "production"`` the identity table (``users``) is
    neither emptied nor reloaded, so a restore cannot delete live operator
    accounts.

    Tables absent from the archive are skipped (partial archives are
    accepted).  Tables in the archive that the schema does not know are
    ignored with a warning.

    Args:
        path: Archive to import.
        adapter: Relational store implementing ``DatabaseClient``.
        blobs: Blob store implementing ``BlobStore``.
        environment: Name of the target environment.
        schema: Table order; defaults to the built-in registry.

    Returns:
        ``ImportStatistics`` with tables restored, rows restored, files restored.

    Raises:
        ArchiveNotFoundError: If *path* does not exist.
        CorruptArchiveError: If *path* is not a readable export archive.
        InvalidPayloadError: If a table snapshot is malformed.  Nothing is
            changed.
        StorageFailureError: If the database rejects a write.  Nothing is
            changed.  Also raised when a sequence reset deferred past the
            commit (MySQL) fails; rows and files are then both replaced.
    """
    schema = schema or DEFAULT_SCHEMA
    production = environment == PRODUCTION

    try:
        with Archive.open(path) as archive:
            errors = structure_errors(archive)
            if errors:
                raise CorruptArchiveError(str(path), "; ".join(errors))
            _warn_unknown_tables(archive, schema)

            staging = blobs.stage()
            try:
                files = _stage_files(archive, staging)
                stats = _restore_tables(archive, adapter, schema, production)
            except BaseException:
                staging.discard()
                raise
    except SnapshotError as e:
        logger.error(f"Import of {path} failed: {e}")
        raise

    # Relational data is committed; a failure here leaves the old file tree.
    staging.commit()
    stats.files = files

    try:
        adapter.reset_deferred_sequences()
    except SnapshotError as e:
        logger.error(f"Import of {path} committed, but a sequence reset failed: {e}")
        raise

    logger.info(
        f"Imported {path}: {stats.tables} tables, {stats.rows} rows, {stats.files} files"
    )
    return stats


def _warn_unknown_tables(archive: Archive, schema: SchemaOrder) -> None:
    known = set(schema.names())
    for table in archive.table_names():
        if table not in known:
            logger.warning(f"Archive table '{table}' is not in the schema order, ignored")


def _stage_files(archive: Archive, staging: BlobStaging) -> int:
    count = 0
    for relative_path, data in archive.iter_files():
        staging.write(relative_path, data)
        count += 1
    return count


def _restore_tables(
    archive: Archive,
    adapter: DatabaseClient,
    schema: SchemaOrder,
    production: bool,
) -> ImportStatistics:
    """Truncate and reload every table inside one transaction."""
    stats = ImportStatistics()
    present = {name for name in schema.names() if adapter.has_table(name)}

    with adapter.transaction() as tx:
        # Dependents first, so no row is deleted while still referenced
        for table in schema.reversed_names():
            if table not in present:
                continue
            if production and table == IDENTITY_TABLE:
                logger.info(f"Keeping '{IDENTITY_TABLE}' in production")
                continue
            tx.truncate(table)

        for table_def in schema.tables:
            table = table_def.name
            rows = archive.read_table(table)
            if rows is None:
                logger.debug(f"Table '{table}' not in archive, skipped")
                continue
            if production and table == IDENTITY_TABLE:
                continue
            if table not in present:
                logger.warning(f"Table '{table}' does not exist in the database, skipped")
                continue

            stats.rows += tx.insert_rows(table, rows) if rows else 0
            if table_def.pk:
                tx.reset_sequence(table, table_def.pk)
            stats.tables += 1

    return stats

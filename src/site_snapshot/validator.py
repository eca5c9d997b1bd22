"""Structural validation of a candidate archive before import.

Table contents are not inspected here -- a malformed table is a fatal
import error, not a validation error.

Usage:
    from site_snapshot.validator import validate_archive, archive_metadata

    report = validate_archive("storage/temp/website-export-2026-01-15_10-00-00.zip")
    if not report.valid:
        for error in report.errors:
            ...
"""

import logging
from pathlib import Path

from site_snapshot.archive.codec import Archive
from site_snapshot.archive.models import ExportMetadata, ValidationReport
from site_snapshot.errors import SnapshotError

logger = logging.getLogger(__name__)

MISSING_FILE = "File does not exist"
MISSING_METADATA = "Invalid export file: missing metadata"
MISSING_DATABASE_FILES = "Invalid export file: missing database files"


def structure_errors(archive: Archive) -> list[str]:
    """Return every structural problem of an opened archive."""
    errors: list[str] = []
    if not archive.has_metadata():
        errors.append(MISSING_METADATA)
    if not archive.has_table_snapshots():
        errors.append(MISSING_DATABASE_FILES)
    return errors


def validate_archive(path: str | Path) -> ValidationReport:
    """Validate an export archive before import.

    Checks, in order: the file exists, it opens as an archive, then its
    structure (metadata record and table snapshots present).  Each check
    stops the sequence on failure; structural errors accumulate.

    This function never raises for a bad archive -- problems are reported
    in ``errors``.

    Returns:
        ``ValidationReport`` with ``valid``, ``errors`` and the parsed
        ``metadata`` (``None`` unless the archive is valid).
    """
    report = ValidationReport()
    path = Path(path)

    if not path.exists():
        report.errors.append(MISSING_FILE)
        return report

    try:
        archive = Archive.open(path)
    except SnapshotError as e:
        report.errors.append(f"Cannot open archive: {e}")
        return report

    with archive:
        report.errors.extend(structure_errors(archive))
        if report.errors:
            return report
        try:
            report.metadata = archive.read_metadata()
        except SnapshotError as e:
            report.errors.append(str(e))
            return report

    report.valid = True
    return report


def archive_metadata(path: str | Path) -> ExportMetadata | None:
    """Return an archive's metadata for preview, ``None`` on any failure."""
    try:
        with Archive.open(path) as archive:
            return archive.read_metadata()
    except (SnapshotError, OSError) as e:
        logger.debug(f"No metadata for {path}: {e}")
        return None

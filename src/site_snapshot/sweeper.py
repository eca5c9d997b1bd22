"""Retention sweeper for staged export archives."""

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

from site_snapshot.archive.models import ExportFile
from site_snapshot.exporter import EXPORT_PREFIX, EXPORT_SUFFIX

logger = logging.getLogger(__name__)


def _export_archives(staging_dir: Path) -> list[Path]:
    return [
        p for p in staging_dir.rglob(f"*{EXPORT_SUFFIX}")
        if p.is_file() and EXPORT_PREFIX in p.name
    ]


def sweep_exports(
    staging_dir: str | Path,
    retention_days: int = 7,
    *,
    now: datetime | None = None,
) -> int:
    """Delete staged archives last modified before ``now - retention_days``.

    A missing staging directory is not an error.

    Returns:
        Number of archives deleted.
    """
    staging_dir = Path(staging_dir)
    if not staging_dir.is_dir():
        return 0

    now = now or datetime.now(timezone.utc)
    cutoff = (now - timedelta(days=retention_days)).timestamp()

    deleted = 0
    for archive in _export_archives(staging_dir):
        if archive.stat().st_mtime < cutoff:
            archive.unlink()
            deleted += 1
            logger.debug(f"Deleted expired export {archive}")

    if deleted:
        logger.info(f"Swept {deleted} exports older than {retention_days} days")
    return deleted


def list_exports(staging_dir: str | Path) -> list[ExportFile]:
    """List staged archives with size and modification time, newest first."""
    staging_dir = Path(staging_dir)
    if not staging_dir.is_dir():
        return []

    result: list[ExportFile] = []
    for archive in _export_archives(staging_dir):
        stat = archive.stat()
        result.append(
            ExportFile(
                path=str(archive),
                size=stat.st_size,
                modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            )
        )
    result.sort(key=lambda f: f.modified, reverse=True)
    return result

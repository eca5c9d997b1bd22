"""Archive container format and its models.

Usage:
    from site_snapshot.archive import Archive, ExportMetadata, ImportStatistics
"""

from site_snapshot.archive.codec import Archive, normalize_relative_path
from site_snapshot.archive.models import (
    ExportFile,
    ExportMetadata,
    ImportStatistics,
    ValidationReport,
)

__all__ = [
    "Archive",
    "normalize_relative_path",
    "ExportMetadata",
    "ImportStatistics",
    "ValidationReport",
    "ExportFile",
]

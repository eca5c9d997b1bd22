"""Exception taxonomy for export/import.

``ArchiveNotFoundError`` and ``CorruptArchiveError`` are raised before any
mutation.  ``InvalidPayloadError`` and ``StorageFailureError`` abort the
import transaction and name the offending table.

A table missing from an archive is not an error: the importer logs and
skips it.
"""


class SnapshotError(Exception):
    """Base class for all snapshot engine errors."""

    pass


class ArchiveNotFoundError(SnapshotError, FileNotFoundError):
    """Raised when the archive path does not exist."""

    def __init__(self, path: str) -> None:
        self.path = str(path)
        super().__init__(f"Archive not found: {self.path}")


class CorruptArchiveError(SnapshotError):
    """Raised when the path exists but is not a readable export archive."""

    def __init__(self, path: str, reason: str = "") -> None:
        self.path = str(path)
        self.reason = reason
        message = f"Corrupt archive: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class InvalidPayloadError(SnapshotError):
    """Raised when a table snapshot is not a JSON array of row objects."""

    def __init__(self, table: str, reason: str = "") -> None:
        self.table = table
        message = f"Invalid JSON data for table: {table}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class StorageFailureError(SnapshotError):
    """Raised when the relational store rejects a write during import."""

    def __init__(self, table: str, reason: str = "") -> None:
        self.table = table
        message = f"Storage failure on table: {table}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)

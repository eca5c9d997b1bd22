"""Archive codec: the on-disk ZIP layout shared by exporter and importer.

Layout::

    export-metadata.json     ExportMetadata as a JSON object
    database/<table>.json    JSON array of row objects, one per table
    files/<relative/path>    raw bytes, mirrors the blob store tree

Usage:
    from site_snapshot.archive.codec import Archive

    with Archive.create("website-export.zip") as archive:
        archive.write_table("technologies", [{"id": 1, "name": "Python"}])
        archive.write_file("uploads/images/a.jpg", b"...")
        archive.write_metadata(metadata)

    with Archive.open("website-export.zip") as archive:
        rows = archive.read_table("technologies")   # None when not present
        for relative_path, data in archive.iter_files():
            ...
"""

import json
import zipfile
import zlib
from collections.abc import Iterator
from pathlib import Path, PurePosixPath
from typing import Any

from pydantic import ValidationError

from site_snapshot.archive.models import ExportMetadata
from site_snapshot.errors import (
    ArchiveNotFoundError,
    CorruptArchiveError,
    InvalidPayloadError,
)

METADATA_NAME = "export-metadata.json"
DATABASE_PREFIX = "database/"
FILES_PREFIX = "files/"


def normalize_relative_path(path: str) -> str:
    """Normalize a blob path to forward slashes, rejecting escapes.

    Raises:
        ValueError: If the path is empty, absolute, or contains ``..``.
    """
    candidate = PurePosixPath(str(path).replace("\\", "/"))
    if candidate.is_absolute():
        raise ValueError(f"Absolute path not allowed: {path}")
    parts = [p for p in candidate.parts if p not in ("", ".")]
    if not parts:
        raise ValueError("Empty relative path")
    if ".." in parts:
        raise ValueError(f"Path escapes the file tree: {path}")
    return "/".join(parts)


class Archive:
    """One export archive, opened for writing or for reading.

    Do not construct directly -- use ``Archive.create()`` or ``Archive.open()``.
    """

    def __init__(self, path: Path, zip_file: zipfile.ZipFile) -> None:
        self.path = path
        self._zip = zip_file

    @classmethod
    def create(cls, path: str | Path) -> "Archive":
        """Create a new, empty archive at *path*.

        Raises:
            FileExistsError: If a file already exists at *path*.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        return cls(path, zipfile.ZipFile(path, "x", compression=zipfile.ZIP_DEFLATED))

    @classmethod
    def open(cls, path: str | Path) -> "Archive":
        """Open an existing archive read-only.

        Raises:
            ArchiveNotFoundError: If *path* does not exist.
            CorruptArchiveError: If *path* exists but is not a ZIP container.
        """
        path = Path(path)
        if not path.exists():
            raise ArchiveNotFoundError(str(path))
        try:
            zip_file = zipfile.ZipFile(path, "r")
        except (zipfile.BadZipFile, OSError) as e:
            raise CorruptArchiveError(str(path), str(e)) from e
        return cls(path, zip_file)

    def close(self) -> None:
        self._zip.close()

    def __enter__(self) -> "Archive":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def write_metadata(self, metadata: ExportMetadata) -> None:
        payload = json.dumps(metadata.model_dump(), indent=2, ensure_ascii=False)
        self._zip.writestr(METADATA_NAME, payload.encode("utf-8"))

    def has_metadata(self) -> bool:
        return METADATA_NAME in self._zip.namelist()

    def read_metadata(self) -> ExportMetadata | None:
        """Read the metadata record, ``None`` when the archive has none.

        Raises:
            CorruptArchiveError: If the record exists but cannot be parsed.
        """
        if not self.has_metadata():
            return None
        try:
            data = json.loads(self._read(METADATA_NAME).decode("utf-8"))
            return ExportMetadata.model_validate(data)
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            raise CorruptArchiveError(str(self.path), f"unreadable metadata: {e}") from e

    # ------------------------------------------------------------------
    # Table snapshots
    # ------------------------------------------------------------------

    @staticmethod
    def table_entry(table: str) -> str:
        return f"{DATABASE_PREFIX}{table}.json"

    def write_table(self, table: str, rows: list[dict[str, Any]]) -> None:
        """Write a table snapshot. Empty tables are written as ``[]``."""
        payload = json.dumps(rows, indent=2, ensure_ascii=False, default=str)
        self._zip.writestr(self.table_entry(table), payload.encode("utf-8"))

    def read_table(self, table: str) -> list[dict[str, Any]] | None:
        """Read a table snapshot, ``None`` when the table is not present.

        Raises:
            InvalidPayloadError: If the snapshot is not a JSON array of objects.
        """
        entry = self.table_entry(table)
        if entry not in self._zip.namelist():
            return None
        try:
            rows = json.loads(self._read(entry).decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise InvalidPayloadError(table, str(e)) from e
        if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
            raise InvalidPayloadError(table, "expected an array of row objects")
        return rows

    def table_names(self) -> list[str]:
        """Names of all table snapshots present, in archive order."""
        names: list[str] = []
        for name in self._zip.namelist():
            if name.startswith(DATABASE_PREFIX) and name.endswith(".json"):
                table = name[len(DATABASE_PREFIX):-len(".json")]
                if table and "/" not in table:
                    names.append(table)
        return names

    def has_table_snapshots(self) -> bool:
        return any(n.startswith(DATABASE_PREFIX) for n in self._zip.namelist())

    # ------------------------------------------------------------------
    # File tree
    # ------------------------------------------------------------------

    def write_file(self, relative_path: str, data: bytes) -> None:
        """Store a blob under ``files/`` at its relative path."""
        self._zip.writestr(FILES_PREFIX + normalize_relative_path(relative_path), data)

    def iter_files(self) -> Iterator[tuple[str, bytes]]:
        """Lazily yield ``(relative_path, bytes)`` for every stored blob.

        Raises:
            CorruptArchiveError: If an entry escapes the file tree or fails
                its CRC check.
        """
        for info in self._zip.infolist():
            if not info.filename.startswith(FILES_PREFIX) or info.is_dir():
                continue
            raw_path = info.filename[len(FILES_PREFIX):]
            if not raw_path:
                continue
            try:
                relative_path = normalize_relative_path(raw_path)
            except ValueError as e:
                raise CorruptArchiveError(str(self.path), str(e)) from e
            yield relative_path, self._read(info.filename)

    def _read(self, name: str) -> bytes:
        try:
            return self._zip.read(name)
        except (zipfile.BadZipFile, zlib.error, EOFError, OSError) as e:
            raise CorruptArchiveError(str(self.path), f"{name}: {e}") from e

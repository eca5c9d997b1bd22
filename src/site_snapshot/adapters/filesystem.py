"""Local filesystem blob store.

``LocalBlobStore`` maps relative blob paths onto a directory tree (the
site's public uploads directory).  Replacement trees are built in a hidden
sibling directory and renamed into place, so the live tree is only touched
once the new one is complete.

Usage:
    from site_snapshot.adapters.filesystem import LocalBlobStore

    blobs = LocalBlobStore("storage/app/public")
    for path in blobs.iter_paths():
        data = blobs.read(path)

    staging = blobs.stage()
    staging.write("uploads/images/a.jpg", data)
    staging.commit()
"""

import logging
import shutil
import uuid
from collections.abc import Iterator
from pathlib import Path

from site_snapshot.archive.codec import normalize_relative_path

logger = logging.getLogger(__name__)


def _resolve(root: Path, relative_path: str) -> Path:
    return root.joinpath(*normalize_relative_path(relative_path).split("/"))


class LocalBlobStaging:
    """Replacement tree staged next to the live blob root."""

    def __init__(self, root: Path) -> None:
        self._root = root
        self._token = uuid.uuid4().hex[:12]
        self.path = root.parent / f".{root.name}.staging-{self._token}"
        self.path.mkdir(parents=True)
        self.files_written = 0

    def write(self, relative_path: str, data: bytes) -> None:
        target = _resolve(self.path, relative_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
        self.files_written += 1

    def commit(self) -> None:
        """Replace the live tree with the staged one.

        The old tree is moved aside first and restored if the swap fails.
        """
        previous: Path | None = None
        if self._root.exists():
            previous = self._root.parent / f".{self._root.name}.old-{self._token}"
            self._root.rename(previous)
        try:
            self.path.rename(self._root)
        except OSError:
            if previous is not None:
                previous.rename(self._root)
            raise
        if previous is not None:
            shutil.rmtree(previous)
        logger.debug(f"Swapped {self.files_written} staged files into {self._root}")

    def discard(self) -> None:
        if self.path.exists():
            shutil.rmtree(self.path)


class LocalBlobStore:
    """``BlobStore`` backed by a local directory.

    Args:
        root: Directory holding the blob tree.  Created on first write.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def iter_paths(self) -> Iterator[str]:
        if not self.root.exists():
            return
        for path in sorted(self.root.rglob("*")):
            if path.is_file():
                yield path.relative_to(self.root).as_posix()

    def read(self, relative_path: str) -> bytes:
        return _resolve(self.root, relative_path).read_bytes()

    def write(self, relative_path: str, data: bytes) -> None:
        target = _resolve(self.root, relative_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def delete(self, relative_path: str) -> None:
        _resolve(self.root, relative_path).unlink(missing_ok=True)

    def clear(self) -> None:
        if self.root.exists():
            shutil.rmtree(self.root)
        self.root.mkdir(parents=True)

    def stage(self) -> LocalBlobStaging:
        self.root.parent.mkdir(parents=True, exist_ok=True)
        return LocalBlobStaging(self.root)

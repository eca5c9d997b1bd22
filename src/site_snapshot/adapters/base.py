"""Collaborator protocols consumed by the snapshot engine.

Defines the ``DatabaseClient`` and ``BlobStore`` Protocols that concrete
adapters implement.  All methods are synchronous and blocking -- the engine
runs single-threaded and exposes no suspension points.

Usage:
    from site_snapshot.adapters.base import DatabaseClient, BlobStore

    def copy_rows(client: DatabaseClient) -> None:
        rows = client.select_all("technologies", order_by="id")
        with client.transaction() as tx:
            tx.truncate("technologies")
            tx.insert_rows("technologies", rows)
            tx.reset_sequence("technologies", "id")
"""

from collections.abc import Iterator
from contextlib import AbstractContextManager
from typing import Any, Protocol


class TableWriter(Protocol):
    """Write operations available inside one import transaction."""

    def truncate(self, table: str) -> None:
        """Remove every row of *table* without leaving the transaction."""
        ...

    def insert_rows(self, table: str, rows: list[dict[str, Any]]) -> int:
        """Bulk-insert rows with their original primary keys.

        Returns:
            Number of rows inserted.
        """
        ...

    def reset_sequence(self, table: str, pk: str) -> None:
        """Set the id generator of *table* to one past ``MAX(pk)``.

        When the table is empty the generator goes back to its initial value.
        Tables without a generator are left alone.
        """
        ...


class DatabaseClient(Protocol):
    """Relational store interface.

    Example:
        rows = client.select_all("technologies", order_by="id")
        with client.transaction() as tx:
            tx.truncate("technologies")
    """

    def has_table(self, table: str) -> bool:
        """Return whether *table* exists in the database."""
        ...

    def has_column(self, table: str, column: str) -> bool:
        """Return whether *table* exists and has *column*."""
        ...

    def select_all(self, table: str, order_by: str | None = None) -> list[dict[str, Any]]:
        """Return every row of *table* as ordered column/value dicts.

        Values are cast to JSON scalars (dates as ISO-8601 strings).
        """
        ...

    def transaction(self) -> AbstractContextManager[TableWriter]:
        """Open one all-or-nothing transaction.

        Commits when the block exits normally, rolls back on any exception.
        """
        ...

    def reset_deferred_sequences(self) -> None:
        """Apply sequence resets that had to wait for the commit.

        Called once after the import transaction committed.  A no-op for
        stores that reset sequences inside the transaction.
        """
        ...

    def count_orphans(self, table: str, field: str, ref_table: str, ref_column: str) -> int:
        """Count rows of *table* whose non-null *field* has no match in *ref_table*."""
        ...

    def close(self) -> None:
        ...


class BlobStaging(Protocol):
    """A side directory holding a replacement file tree."""

    def write(self, relative_path: str, data: bytes) -> None:
        ...

    def commit(self) -> None:
        """Swap the staged tree into place, replacing the current tree."""
        ...

    def discard(self) -> None:
        """Drop the staged tree, leaving the current tree untouched."""
        ...


class BlobStore(Protocol):
    """Hierarchical blob store addressed by relative path."""

    def iter_paths(self) -> Iterator[str]:
        """Yield every blob's relative path, recursively, in sorted order."""
        ...

    def read(self, relative_path: str) -> bytes:
        ...

    def write(self, relative_path: str, data: bytes) -> None:
        ...

    def delete(self, relative_path: str) -> None:
        ...

    def clear(self) -> None:
        """Delete the entire tree."""
        ...

    def stage(self) -> BlobStaging:
        """Start building a replacement tree next to the current one."""
        ...

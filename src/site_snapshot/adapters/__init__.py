"""Collaborator adapters package.

Provides the ``DatabaseClient`` and ``BlobStore`` Protocols and their
concrete implementations: ``SqlAlchemyAdapter`` for the relational store and
``LocalBlobStore`` for the file tree.

Usage:
    from site_snapshot.adapters import SqlAlchemyAdapter, LocalBlobStore
"""

from site_snapshot.adapters.base import BlobStaging, BlobStore, DatabaseClient, TableWriter
from site_snapshot.adapters.filesystem import LocalBlobStaging, LocalBlobStore
from site_snapshot.adapters.sql import SqlAlchemyAdapter, SqlAlchemyTableWriter

__all__ = [
    "DatabaseClient",
    "TableWriter",
    "BlobStore",
    "BlobStaging",
    "SqlAlchemyAdapter",
    "SqlAlchemyTableWriter",
    "LocalBlobStore",
    "LocalBlobStaging",
]

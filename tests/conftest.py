"""Shared fixtures: a small SQLite site and an in-memory recording database."""

import copy
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import create_engine, event, text

from site_snapshot.adapters.filesystem import LocalBlobStore
from site_snapshot.adapters.sql import SqlAlchemyAdapter
from site_snapshot.errors import StorageFailureError
from site_snapshot.registry import ForeignKey, SchemaOrder, TableDef

SITE_DDL = [
    """CREATE TABLE users (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        email VARCHAR(255) NOT NULL UNIQUE,
        name VARCHAR(255)
    )""",
    """CREATE TABLE pictures (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        filename VARCHAR(255) NOT NULL,
        created_at DATETIME
    )""",
    """CREATE TABLE technologies (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name VARCHAR(255) NOT NULL,
        featured BOOLEAN NOT NULL DEFAULT 0,
        icon_picture_id INTEGER REFERENCES pictures (id)
    )""",
    """CREATE TABLE creations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name VARCHAR(255) NOT NULL,
        cover_image_id INTEGER REFERENCES pictures (id)
    )""",
    """CREATE TABLE creation_technology (
        creation_id INTEGER NOT NULL REFERENCES creations (id),
        technology_id INTEGER NOT NULL REFERENCES technologies (id)
    )""",
]


def site_schema() -> SchemaOrder:
    """A 5-table schema matching SITE_DDL."""
    return SchemaOrder(
        tables=[
            TableDef(name="users"),
            TableDef(name="pictures"),
            TableDef(
                name="technologies",
                references=[ForeignKey(table="pictures", field="icon_picture_id")],
            ),
            TableDef(
                name="creations",
                references=[ForeignKey(table="pictures", field="cover_image_id")],
            ),
            TableDef(
                name="creation_technology",
                pk=None,
                references=[
                    ForeignKey(table="creations", field="creation_id"),
                    ForeignKey(table="technologies", field="technology_id"),
                ],
            ),
        ]
    )


def make_site_database(path: Path, foreign_keys: bool = True) -> SqlAlchemyAdapter:
    """Create a SQLite database with the site schema at *path*."""
    engine = create_engine(f"sqlite:///{path}")

    if foreign_keys:
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys = ON")
            cursor.close()

    with engine.begin() as conn:
        for ddl in SITE_DDL:
            conn.execute(text(ddl))
    return SqlAlchemyAdapter(engine=engine)


def fetch_rows(adapter: SqlAlchemyAdapter, table: str) -> list[dict[str, Any]]:
    order = "" if table == "creation_technology" else " ORDER BY id"
    with adapter.engine.connect() as conn:
        result = conn.execute(text(f"SELECT * FROM {table}{order}"))
        return [dict(row._mapping) for row in result]


def insert_row(adapter: SqlAlchemyAdapter, table: str, row: dict[str, Any]) -> int | None:
    """Insert one row outside the engine and return its id."""
    columns = ", ".join(row)
    placeholders = ", ".join(f":{c}" for c in row)
    with adapter.engine.begin() as conn:
        result = conn.execute(
            text(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})"), row
        )
        return result.lastrowid


class RecordingDatabase:
    """In-memory ``DatabaseClient`` that records every write.

    ``tables`` maps table name to rows.  ``operations`` records
    ``(op, table)`` tuples in call order.  A failing transaction restores
    the rows as they were before it began.
    """

    def __init__(
        self,
        tables: dict[str, list[dict]] | None = None,
        fail_on_insert: str | None = None,
        columns: dict[str, set[str]] | None = None,
    ):
        self.tables = tables if tables is not None else {}
        self.operations: list[tuple[str, str]] = []
        self.fail_on_insert = fail_on_insert
        self.columns = columns or {}
        self.closed = False

    def has_table(self, table: str) -> bool:
        return table in self.tables

    def has_column(self, table: str, column: str) -> bool:
        if table not in self.tables:
            return False
        return table not in self.columns or column in self.columns[table]

    def select_all(self, table: str, order_by: str | None = None) -> list[dict]:
        self.operations.append(("select", table))
        return copy.deepcopy(self.tables[table])

    @contextmanager
    def transaction(self):
        before = copy.deepcopy(self.tables)
        try:
            yield self
        except BaseException:
            self.tables = before
            self.operations.append(("rollback", ""))
            raise
        self.operations.append(("commit", ""))

    def reset_deferred_sequences(self) -> None:
        self.operations.append(("deferred_resets", ""))

    def truncate(self, table: str) -> None:
        self.operations.append(("truncate", table))
        self.tables[table] = []

    def insert_rows(self, table: str, rows: list[dict]) -> int:
        self.operations.append(("insert", table))
        if table == self.fail_on_insert:
            raise StorageFailureError(table, "constraint violation")
        self.tables[table].extend(copy.deepcopy(rows))
        return len(rows)

    def reset_sequence(self, table: str, pk: str) -> None:
        self.operations.append(("reset", table))

    def count_orphans(self, table: str, field: str, ref_table: str, ref_column: str) -> int:
        ids = {r.get(ref_column) for r in self.tables.get(ref_table, [])}
        return sum(
            1 for r in self.tables.get(table, [])
            if r.get(field) is not None and r.get(field) not in ids
        )

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def schema() -> SchemaOrder:
    return site_schema()


@pytest.fixture
def source_db(tmp_path) -> SqlAlchemyAdapter:
    adapter = make_site_database(tmp_path / "source.sqlite")
    yield adapter
    adapter.close()


@pytest.fixture
def target_db(tmp_path) -> SqlAlchemyAdapter:
    adapter = make_site_database(tmp_path / "target.sqlite")
    yield adapter
    adapter.close()


@pytest.fixture
def source_blobs(tmp_path) -> LocalBlobStore:
    return LocalBlobStore(tmp_path / "source-public")


@pytest.fixture
def target_blobs(tmp_path) -> LocalBlobStore:
    return LocalBlobStore(tmp_path / "target-public")


@pytest.fixture
def staging_dir(tmp_path) -> Path:
    return tmp_path / "temp"

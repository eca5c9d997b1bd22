"""Tests for the Schema Order Registry.

Verifies the built-in table order is a topological order of its declared
foreign keys, and that ``SchemaOrder`` rejects orders that are not.
"""

import pytest
from pydantic import ValidationError

from site_snapshot.registry import (
    DEFAULT_SCHEMA,
    IDENTITY_TABLE,
    ForeignKey,
    SchemaOrder,
    TableDef,
    get_table,
    ordered_tables,
    table_defs,
)


class TestOrderedTables:
    """Test the default registry contents."""

    def test_contains_core_tables(self):
        tables = ordered_tables()
        for name in ("users", "technologies", "creations", "pictures", "creation_technology"):
            assert name in tables

    def test_identity_table_registered(self):
        assert IDENTITY_TABLE == "users"
        assert IDENTITY_TABLE in ordered_tables()

    def test_users_before_pivot_tables(self):
        tables = ordered_tables()
        assert tables.index("users") < tables.index("creation_technology")

    def test_pictures_before_technologies(self):
        """technologies.icon_picture_id references pictures."""
        tables = ordered_tables()
        assert tables.index("pictures") < tables.index("technologies")

    def test_deterministic(self):
        assert ordered_tables() == ordered_tables()

    def test_returns_copy(self):
        tables = ordered_tables()
        tables.clear()
        assert ordered_tables()

    def test_no_duplicates(self):
        tables = ordered_tables()
        assert len(tables) == len(set(tables))

    def test_every_reference_precedes_referencing_table(self):
        """For every FK A.col -> B.id, B precedes A (and is truncated after A)."""
        tables = ordered_tables()
        reversed_tables = DEFAULT_SCHEMA.reversed_names()
        for table_def in table_defs():
            for ref in table_def.references:
                if ref.table == table_def.name:
                    continue
                assert tables.index(ref.table) < tables.index(table_def.name)
                assert reversed_tables.index(ref.table) > reversed_tables.index(table_def.name)

    def test_pivot_tables_have_no_pk(self):
        assert get_table("creation_technology").pk is None
        assert get_table("content_gallery_pictures").pk is None
        assert get_table("technologies").pk == "id"

    def test_get_unknown_table(self):
        assert get_table("migrations") is None


class TestSchemaOrderValidation:
    """Test SchemaOrder rejects invalid orders."""

    def test_accepts_valid_order(self):
        schema = SchemaOrder(
            tables=[
                TableDef(name="authors"),
                TableDef(name="books", references=[ForeignKey(table="authors", field="author_id")]),
            ]
        )
        assert schema.names() == ["authors", "books"]
        assert schema.reversed_names() == ["books", "authors"]

    def test_rejects_reference_after_dependent(self):
        with pytest.raises(ValidationError, match="must come before"):
            SchemaOrder(
                tables=[
                    TableDef(name="books", references=[ForeignKey(table="authors", field="author_id")]),
                    TableDef(name="authors"),
                ]
            )

    def test_rejects_unknown_reference(self):
        with pytest.raises(ValidationError, match="unknown table"):
            SchemaOrder(
                tables=[
                    TableDef(name="books", references=[ForeignKey(table="authors", field="author_id")]),
                ]
            )

    def test_rejects_duplicate_table(self):
        with pytest.raises(ValidationError, match="declared twice"):
            SchemaOrder(tables=[TableDef(name="authors"), TableDef(name="authors")])

    def test_allows_self_reference(self):
        schema = SchemaOrder(
            tables=[
                TableDef(name="categories", references=[ForeignKey(table="categories", field="parent_id")]),
            ]
        )
        assert schema.get("categories").references[0].field == "parent_id"

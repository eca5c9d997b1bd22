"""Foreign-key integrity report for a restored database.

Counts orphan rows for every foreign key declared in the schema order.
Read-only; callers run it after an import when they want a report.
"""

import logging

from site_snapshot.adapters.base import DatabaseClient
from site_snapshot.registry import DEFAULT_SCHEMA, SchemaOrder

logger = logging.getLogger(__name__)


def verify_integrity(
    adapter: DatabaseClient,
    schema: SchemaOrder | None = None,
) -> dict[str, list[str]]:
    """Return integrity issues per table, empty when every reference resolves.

    References whose table or column is missing from the database are not
    checked, so a schema that drifted from the registry still gets a report.

    Example:
        >>> verify_integrity(adapter)
        {'features': ['Found 2 orphan records referencing creations (creation_id)']}
    """
    schema = schema or DEFAULT_SCHEMA
    issues: dict[str, list[str]] = {}

    for table_def in schema.tables:
        if not table_def.references or not adapter.has_table(table_def.name):
            continue
        for ref in table_def.references:
            if not adapter.has_column(table_def.name, ref.field) or not adapter.has_column(
                ref.table, ref.column
            ):
                logger.debug(
                    f"Skipping {table_def.name}.{ref.field} -> {ref.table}.{ref.column}: "
                    f"column not in database"
                )
                continue
            orphans = adapter.count_orphans(table_def.name, ref.field, ref.table, ref.column)
            if orphans > 0:
                issues.setdefault(table_def.name, []).append(
                    f"Found {orphans} orphan records referencing {ref.table} ({ref.field})"
                )

    if issues:
        logger.warning(f"Integrity issues in {len(issues)} tables")
    return issues

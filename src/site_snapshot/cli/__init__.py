"""CLI for site export, import and archive maintenance.

Usage:
    site-snapshot tables
    site-snapshot export
    site-snapshot validate storage/temp/website-export-2026-01-15_10-00-00.zip
    site-snapshot info storage/temp/website-export-2026-01-15_10-00-00.zip
    site-snapshot import storage/temp/website-export-2026-01-15_10-00-00.zip --yes
    site-snapshot import backup.zip --environment production --yes
    site-snapshot sweep --days 7
    site-snapshot list
    site-snapshot verify

Commands:
    tables    - Show the table order used for export and import
    export    - Export database and files to a new archive
    validate  - Check an archive's structure before import
    info      - Show an archive's metadata
    import    - Replace database and files with an archive's content
    sweep     - Delete staged archives past the retention window
    list      - List staged archives
    verify    - Report foreign-key integrity issues
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from site_snapshot.archive.models import ExportMetadata
from site_snapshot.config.loader import load_settings
from site_snapshot.engine import SnapshotEngine
from site_snapshot.errors import SnapshotError
from site_snapshot.registry import DEFAULT_SCHEMA, IDENTITY_TABLE
from site_snapshot.validator import archive_metadata, validate_archive

console = Console()


def _open_engine(args: argparse.Namespace) -> SnapshotEngine:
    config_path = Path(args.config) if args.config else None
    return SnapshotEngine.from_settings(load_settings(config_path))


# ============================================================================
# Command implementations
# ============================================================================


def cmd_tables(args: argparse.Namespace) -> int:
    """Show the registry order. No config or database needed."""
    table = Table(title="Table Order", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Table")
    table.add_column("Primary key")
    table.add_column("References")

    for i, table_def in enumerate(DEFAULT_SCHEMA.tables, 1):
        refs = ", ".join(f"{r.field} -> {r.table}" for r in table_def.references)
        name = table_def.name
        if name == IDENTITY_TABLE:
            name = f"[bold]{name}[/bold] [dim](kept in production)[/dim]"
        table.add_row(str(i), name, table_def.pk or "[dim]-[/dim]", refs)

    console.print(table)
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    """Export the site to a new archive in the staging directory."""
    engine = _open_engine(args)
    try:
        console.print("Exporting database and files...", style="dim")
        path = engine.export()
    finally:
        engine.close()

    console.print(f"[bold green]v[/bold green] Export written: [cyan]{path}[/cyan]")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate an archive. Reads only the archive file."""
    report = validate_archive(args.path)

    console.print(f"Validating: {args.path}")
    if report.valid:
        console.print("[bold green]v[/bold green] Archive is valid")
        if report.metadata:
            _print_metadata(report.metadata)
        return 0

    console.print(f"[bold red]x[/bold red] INVALID - Found {len(report.errors)} errors:")
    for error in report.errors:
        console.print(f"   - {error}")
    return 1


def cmd_info(args: argparse.Namespace) -> int:
    """Show archive metadata without importing."""
    metadata = archive_metadata(args.path)
    if metadata is None:
        console.print(f"[red]No readable metadata in {args.path}[/red]")
        return 1
    _print_metadata(metadata)
    return 0


def _print_metadata(metadata: ExportMetadata) -> None:
    table = Table(title="Export Metadata", show_header=False)
    table.add_column("Key", style="dim")
    table.add_column("Value")
    table.add_row("Export date", metadata.export_date)
    table.add_row("Engine version", metadata.engine_version)
    table.add_row("Database", metadata.database_name)
    table.add_row("Tables", str(len(metadata.tables_exported)))
    table.add_row("Files", str(metadata.files_count))
    console.print(table)


def cmd_import(args: argparse.Namespace) -> int:
    """Import an archive, replacing database content and files."""
    engine = _open_engine(args)
    environment = args.environment or engine.settings.environment

    try:
        if not args.yes:
            console.print(f"[yellow]This will replace all site data with:[/yellow] {args.path}")
            console.print(f"   Environment: {environment}")
            response = input("Continue? [y/N] ")
            if response.lower() not in ["y", "yes"]:
                console.print("Cancelled.")
                return 0

        stats = engine.import_archive(args.path, environment=environment)
    finally:
        engine.close()

    console.print(
        f"[bold green]v[/bold green] Imported {stats.tables} tables, "
        f"{stats.rows} rows, {stats.files} files"
    )
    return 0


def cmd_sweep(args: argparse.Namespace) -> int:
    """Delete staged archives older than the retention window."""
    engine = _open_engine(args)
    try:
        deleted = engine.sweep(args.days)
    finally:
        engine.close()
    console.print(f"Deleted {deleted} old exports")
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List staged archives, newest first."""
    engine = _open_engine(args)
    try:
        exports = engine.list_exports()
    finally:
        engine.close()

    if not exports:
        console.print("[dim]No exports staged.[/dim]")
        return 0

    table = Table(title="Staged Exports", show_header=True, header_style="bold")
    table.add_column("Path")
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    for export in exports:
        table.add_row(export.path, f"{export.size:,}", export.modified.isoformat(timespec="seconds"))
    console.print(table)
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    """Report orphan rows for every declared foreign key."""
    engine = _open_engine(args)
    try:
        issues = engine.verify_integrity()
    finally:
        engine.close()

    if not issues:
        console.print("[bold green]v[/bold green] No integrity issues")
        return 0

    for table_name, messages in issues.items():
        console.print(f"[bold]{table_name}[/bold]")
        for message in messages:
            console.print(f"   - {message}")
    return 1


# ============================================================================
# Main entry point
# ============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="site-snapshot",
        description="Full-site export and import",
    )
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to snapshot.toml (default: ./snapshot.toml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    p_tables = subparsers.add_parser("tables", help="Show the export/import table order")
    p_tables.set_defaults(func=cmd_tables)

    p_export = subparsers.add_parser("export", help="Export database and files")
    p_export.set_defaults(func=cmd_export)

    p_validate = subparsers.add_parser("validate", help="Validate an archive")
    p_validate.add_argument("path", help="Path to export archive")
    p_validate.set_defaults(func=cmd_validate)

    p_info = subparsers.add_parser("info", help="Show archive metadata")
    p_info.add_argument("path", help="Path to export archive")
    p_info.set_defaults(func=cmd_info)

    p_import = subparsers.add_parser("import", help="Import an archive")
    p_import.add_argument("path", help="Path to export archive")
    p_import.add_argument(
        "--environment",
        "-e",
        default=None,
        help="Target environment (default: from config). "
        "'production' keeps the users table",
    )
    p_import.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Skip confirmation prompt",
    )
    p_import.set_defaults(func=cmd_import)

    p_sweep = subparsers.add_parser("sweep", help="Delete old staged archives")
    p_sweep.add_argument(
        "--days",
        type=int,
        default=None,
        help="Retention window in days (default: from config)",
    )
    p_sweep.set_defaults(func=cmd_sweep)

    p_list = subparsers.add_parser("list", help="List staged archives")
    p_list.set_defaults(func=cmd_list)

    p_verify = subparsers.add_parser("verify", help="Check foreign-key integrity")
    p_verify.set_defaults(func=cmd_verify)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except (SnapshotError, SQLAlchemyError, FileNotFoundError, ValueError) as e:
        console.print(f"[bold red]x[/bold red] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

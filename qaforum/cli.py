#!/usr/bin/env python3
"""
Database maintenance command line.

Usage:
    qaforum-db sync                     # Create missing tables and columns
    qaforum-db inspect                  # Show live columns and row counts
    qaforum-db clear --yes              # Drop every table, view and sequence
    qaforum-db --config my.yaml sync    # Use a specific configuration file
"""

import argparse
import sys
from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich import box

from .db.config import load_config
from .db.core import ConfigurationError, DuckDBConnectionManager, SchemaSyncError
from .db.migrations import SchemaManager

EXIT_OK = 0
EXIT_SCHEMA_ERROR = 1
EXIT_CONFIG_ERROR = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='qaforum-db', description="Q&A forum database maintenance")
    parser.add_argument('--config', help="YAML configuration file")
    parser.add_argument('--database', help="Database path (overrides configuration)")

    subparsers = parser.add_subparsers(dest='command', required=True)
    subparsers.add_parser('sync', help="Synchronize the schema with the declared tables")
    subparsers.add_parser('inspect', help="Show live table structure and row counts")
    clear_parser = subparsers.add_parser('clear', help="Drop all database objects")
    clear_parser.add_argument('--yes', action='store_true', help="Confirm the destructive operation")
    return parser


def _print_sync_results(console: Console, results) -> None:
    table = Table(title="Schema synchronization", box=box.SIMPLE)
    table.add_column("Table", style="cyan")
    table.add_column("Action")
    table.add_column("Added columns")
    table.add_column("Time", justify="right")

    for result in results:
        if result.created:
            action = "[green]created[/green]"
        elif result.added_columns:
            action = "[yellow]altered[/yellow]"
        else:
            action = "up to date"
        table.add_row(result.table_name, action, ", ".join(result.added_columns) or "-",
                      f"{result.duration * 1000:.1f} ms")
    console.print(table)


def _print_reports(console: Console, reports) -> None:
    for report in reports:
        if not report.exists:
            console.print(f"[red]{report.table_name}: missing[/red]")
            continue
        table = Table(title=f"{report.table_name} ({report.row_count} rows)", box=box.SIMPLE)
        table.add_column("Column", style="cyan")
        table.add_column("Type")
        for column in report.columns:
            length = f"({column.max_length})" if column.max_length else ""
            table.add_row(column.name, f"{column.data_type}{length}")
        console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    console = Console()

    try:
        config = load_config(args.config)
        if args.database:
            config['database']['path'] = args.database

        with DuckDBConnectionManager(config) as manager:
            connection = manager.get_connection()
            schema_manager = SchemaManager(probe_timeout=config['connection']['probe_timeout'])

            if args.command == 'sync':
                _print_sync_results(console, schema_manager.synchronize(connection))
            elif args.command == 'inspect':
                _print_reports(console, schema_manager.inspect_tables(connection))
            elif args.command == 'clear':
                if not args.yes:
                    console.print("[red]Refusing to clear the database without --yes[/red]")
                    return EXIT_CONFIG_ERROR
                dropped = manager.clear_database()
                console.print(f"Dropped {len(dropped)} objects")

    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        return EXIT_CONFIG_ERROR
    except SchemaSyncError as e:
        console.print(f"[red]Schema synchronization failed:[/red] {e}")
        return EXIT_SCHEMA_ERROR

    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())

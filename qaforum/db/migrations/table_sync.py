"""
Additive table synchronization.

Brings one live table in line with its TableDefinition:

1. table missing -> its sequences and one CREATE TABLE with every declared
   column and constraint, in a single transaction
2. table present -> one ALTER TABLE ... ADD COLUMN per declared column the
   catalog does not list (names compared upper-cased)

Columns that exist only in the live table are left alone, and constraints are
only ever applied by the CREATE path. A failing statement stops the table at
that point; ALTERs that already ran stay applied.
"""

from dataclasses import dataclass
from typing import List, Tuple
import logging
import time

import duckdb

from .table_definition import TableDefinition
from ..core.exceptions import SchemaSyncError
from ..config.logging_config import DatabaseLoggerAdapter

logger = DatabaseLoggerAdapter(logging.getLogger('db.table_sync'))

TABLE_EXISTS_SQL = """
    SELECT COUNT(*) FROM information_schema.tables
    WHERE upper(table_name) = upper(?)
      AND table_schema = current_schema()
      AND table_catalog = current_database()
"""

EXISTING_COLUMNS_SQL = """
    SELECT column_name FROM information_schema.columns
    WHERE upper(table_name) = upper(?)
      AND table_schema = current_schema()
      AND table_catalog = current_database()
    ORDER BY ordinal_position
"""


@dataclass(frozen=True)
class TableSyncResult:
    """Outcome of synchronizing one table."""

    table_name: str
    created: bool
    added_columns: Tuple[str, ...] = ()
    duration: float = 0.0

    @property
    def changed(self) -> bool:
        return self.created or bool(self.added_columns)


def build_create_table_sql(table: TableDefinition) -> str:
    """Assemble the CREATE TABLE statement: columns in declared order, then constraints."""
    parts = [f"{name} {definition}" for name, definition in table.columns.items()]
    parts.extend(table.constraints)
    return f"CREATE TABLE {table.name} ({', '.join(parts)})"


def build_add_column_sql(table_name: str, column_name: str, definition: str) -> str:
    return f"ALTER TABLE {table_name} ADD COLUMN {column_name} {definition}"


def table_exists(connection: duckdb.DuckDBPyConnection, table_name: str) -> bool:
    """Check the catalog for a table with this name in the active schema, ignoring case."""
    row = connection.execute(TABLE_EXISTS_SQL, [table_name]).fetchone()
    return bool(row and row[0] > 0)


def get_existing_columns(connection: duckdb.DuckDBPyConnection, table_name: str) -> List[str]:
    """Live column names of a table, upper-cased, in ordinal order."""
    rows = connection.execute(EXISTING_COLUMNS_SQL, [table_name]).fetchall()
    return [row[0].upper() for row in rows]


def _ensure_sequences(connection: duckdb.DuckDBPyConnection, table: TableDefinition) -> None:
    for sequence in table.sequences:
        _execute_ddl(connection, table.name, f"CREATE SEQUENCE IF NOT EXISTS {sequence}")


def _execute_ddl(connection: duckdb.DuckDBPyConnection, table_name: str, sql: str) -> None:
    logger.query(sql)
    try:
        connection.execute(sql)
    except duckdb.Error as e:
        raise SchemaSyncError(table_name, f"statement failed: {sql}: {e}") from e


def _create_table(connection: duckdb.DuckDBPyConnection, table: TableDefinition) -> None:
    """Create the sequences and the table in one transaction so a failed CREATE leaves nothing behind."""
    connection.execute("BEGIN TRANSACTION")
    try:
        _ensure_sequences(connection, table)
        _execute_ddl(connection, table.name, build_create_table_sql(table))
        connection.execute("COMMIT")
    except Exception:
        connection.execute("ROLLBACK")
        raise


def sync_table(connection: duckdb.DuckDBPyConnection, table: TableDefinition) -> TableSyncResult:
    """
    Create the table or add its missing columns.

    Declared sequences are created alongside the table, or before the first
    ALTER when columns are missing.

    Args:
        connection: Live connection whose active schema is synchronized
        table: Declared table shape

    Returns:
        What was done to the table

    Raises:
        SchemaSyncError: On the first catalog query or DDL statement that fails
    """
    start_time = time.time()

    try:
        exists = table_exists(connection, table.name)
        existing = set(get_existing_columns(connection, table.name)) if exists else set()
    except duckdb.Error as e:
        raise SchemaSyncError(table.name, f"catalog query failed: {e}") from e

    if not exists:
        _create_table(connection, table)
        logger.schema_change(table.name, 'created', f"{len(table.columns)} columns")
        return TableSyncResult(table.name, created=True, duration=time.time() - start_time)

    missing = [(name, definition) for name, definition in table.columns.items()
               if name.upper() not in existing]
    if missing:
        _ensure_sequences(connection, table)
    else:
        logger.debug(f"Table {table.name} is up to date")

    added = []
    for column_name, definition in missing:
        _execute_ddl(connection, table.name, build_add_column_sql(table.name, column_name, definition))
        logger.schema_change(table.name, 'column added', column_name)
        added.append(column_name)

    return TableSyncResult(table.name, created=False, added_columns=tuple(added),
                           duration=time.time() - start_time)

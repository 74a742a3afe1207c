"""
Startup schema synchronization.

The SchemaManager holds the ordered registry of table definitions and brings
the store in line with all of them once, before any repository runs a query.
"""

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple
import logging
import time

import duckdb

from .table_definition import TableDefinition
from .table_sync import sync_table, table_exists, TableSyncResult
from .tables import DEFAULT_TABLES
from ..core.connection import probe_connection
from ..core.exceptions import ConfigurationError, SchemaSyncError
from ..config.logging_config import DatabaseLoggerAdapter

COLUMN_DETAILS_SQL = """
    SELECT column_name, data_type, character_maximum_length
    FROM information_schema.columns
    WHERE upper(table_name) = upper(?)
      AND table_schema = current_schema()
      AND table_catalog = current_database()
    ORDER BY ordinal_position
"""


@dataclass(frozen=True)
class ColumnInfo:
    name: str
    data_type: str
    max_length: Optional[int] = None

    def __str__(self) -> str:
        length = f"({self.max_length})" if self.max_length else ""
        return f"{self.name} - {self.data_type}{length}"


@dataclass(frozen=True)
class TableReport:
    """Live structure and size of one registered table."""

    table_name: str
    exists: bool
    columns: Tuple[ColumnInfo, ...] = field(default=())
    row_count: int = 0


class SchemaManager:
    """
    Ordered registry of table definitions.

    Registration order is dependency order: a table must be registered after
    every table its foreign keys reference, since constraints are only applied
    on CREATE and the referenced table has to exist by then.
    """

    def __init__(self, tables: Optional[Iterable[TableDefinition]] = None, probe_timeout: float = 5.0):
        """
        Args:
            tables: Definitions in dependency order (defaults to DEFAULT_TABLES)
            probe_timeout: Bound in seconds for the connection liveness probe
        """
        self.tables: List[TableDefinition] = list(DEFAULT_TABLES if tables is None else tables)
        self.probe_timeout = probe_timeout
        self.logger = DatabaseLoggerAdapter(logging.getLogger('db.schemamanager'))

    def register(self, table: TableDefinition) -> None:
        """Append a definition; it will be synchronized after all earlier ones."""
        self.tables.append(table)

    def synchronize(self, connection: duckdb.DuckDBPyConnection) -> List[TableSyncResult]:
        """
        Synchronize every registered table, in registration order.

        Args:
            connection: Shared live connection

        Returns:
            One result per table

        Raises:
            ConfigurationError: If the connection fails the liveness probe; no DDL is run
            SchemaSyncError: From the first table that fails; later tables are not touched
        """
        if not probe_connection(connection, self.probe_timeout):
            raise ConfigurationError("Connection is missing, closed or not responding")

        start_time = time.time()
        results = []
        for table in self.tables:
            self.logger.debug(f"Synchronizing table: {table.name}")
            try:
                results.append(sync_table(connection, table))
            except SchemaSyncError:
                self.logger.error(f"Schema synchronization stopped at table {table.name}")
                raise

        changed = sum(1 for result in results if result.changed)
        self.logger.info(
            f"Schema synchronized: {len(results)} tables, {changed} changed "
            f"in {time.time() - start_time:.3f}s"
        )
        return results

    def inspect_tables(self, connection: duckdb.DuckDBPyConnection) -> List[TableReport]:
        """
        Report the live columns and row count of every registered table.

        Tables that do not exist yet are reported with ``exists=False``.
        """
        reports = []
        for table in self.tables:
            try:
                if not table_exists(connection, table.name):
                    reports.append(TableReport(table.name, exists=False))
                    continue

                rows = connection.execute(COLUMN_DETAILS_SQL, [table.name]).fetchall()
                columns = tuple(ColumnInfo(name, data_type, max_length) for name, data_type, max_length in rows)
                count_row = connection.execute(f"SELECT COUNT(*) FROM {table.name}").fetchone()
            except duckdb.Error as e:
                raise SchemaSyncError(table.name, f"inspection failed: {e}") from e

            reports.append(TableReport(table.name, exists=True, columns=columns,
                                       row_count=count_row[0] if count_row else 0))
        return reports

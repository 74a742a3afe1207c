"""
Base repository implementation for database operations.

This module provides the generic base class every entity repository builds on.
It owns no knowledge of any row shape: callers pass the SQL, the parameters
(or a function producing them) and a mapper that turns one row into an
object. Every primitive funnels through ``_wrap`` so a driver failure always
surfaces as a single DataAccessError.
"""

from contextlib import contextmanager
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, Sequence, TypeVar, Union
import logging
import time

import duckdb

from .exceptions import DataAccessError
from ..config.db_config import DB_CONFIG
from ..config.logging_config import DatabaseLoggerAdapter

# Type variable for entity classes
T = TypeVar('T')
R = TypeVar('R')

Row = Dict[str, Any]
RowMapper = Callable[[Row], R]
Params = Union[Sequence[Any], Callable[[], Sequence[Any]], None]

# Errors raised by the store driver; anything else is a programming error and propagates as is
STORE_ERRORS = (duckdb.Error,)


def _database_name(connection: Any) -> str:
    try:
        row = connection.execute("SELECT current_database()").fetchone()
        return row[0] if row else 'db'
    except duckdb.Error:
        return 'db'


class BaseRepository(Generic[T]):
    """
    Generic repository providing parameterized query and execute primitives.

    The connection is borrowed: it is shared with every other repository and
    owned by DuckDBConnectionManager, so nothing here ever closes it.

    CRUD methods raise NotImplementedError unless a concrete repository
    overrides them, so calling an operation a repository does not support is
    loud instead of a silent no-op.
    """

    def __init__(self, connection: duckdb.DuckDBPyConnection, config: Optional[Dict[str, Any]] = None):
        """
        Initialize repository with the shared connection.

        Args:
            connection: Open DuckDB connection owned by the caller
            config: Configuration dictionary; only its 'query' section is used
        """
        self.connection = connection
        self.config = config or DB_CONFIG
        query_config = self.config.get('query', {})
        self.slow_query_threshold = query_config.get(
            'slow_query_threshold', DB_CONFIG['query']['slow_query_threshold'])
        self.fetch_batch_size = query_config.get(
            'fetch_batch_size', DB_CONFIG['query']['fetch_batch_size'])
        self.logger = DatabaseLoggerAdapter(
            logging.getLogger(f'db.{self.__class__.__name__.lower()}'),
            {'repository': self.__class__.__name__, 'db_path': _database_name(connection)}
        )

        # Performance tracking
        self.operation_stats = {
            'queries_executed': 0,
            'total_query_time': 0.0,
            'slow_queries': 0,
            'failed_queries': 0
        }

    # ------------------------------------------------------------------
    # CRUD contract
    # ------------------------------------------------------------------

    def create(self, entity: T) -> T:
        raise NotImplementedError(f"{self.__class__.__name__} does not implement create")

    def get_by_id(self, entity_id: int) -> Optional[T]:
        raise NotImplementedError(f"{self.__class__.__name__} does not implement get_by_id")

    def get_all(self) -> List[T]:
        raise NotImplementedError(f"{self.__class__.__name__} does not implement get_all")

    def build(self, row: Row) -> T:
        """Map one result row to an entity. Used as the row mapper by subclasses."""
        raise NotImplementedError(f"{self.__class__.__name__} does not implement build")

    def update(self, entity: T) -> Optional[T]:
        raise NotImplementedError(f"{self.__class__.__name__} does not implement update")

    def delete(self, entity_id: int) -> None:
        raise NotImplementedError(f"{self.__class__.__name__} does not implement delete")

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def query_for_object(self, sql: str, params: Params, mapper: RowMapper) -> Optional[R]:
        """
        Execute a query expected to return at most one row.

        Returns:
            The first row mapped through ``mapper``, or None when no row matched
        """
        def operation():
            with self._cursor(sql, params) as cursor:
                for row in self._iter_rows(cursor):
                    return mapper(row)
            return None

        return self._wrap('query_for_object', sql, operation)

    def query_for_list(self, sql: str, params: Params, mapper: RowMapper) -> List[R]:
        """
        Execute a query and map every row, in the order the engine returned them.

        Returns:
            List of mapped objects, empty when nothing matched
        """
        def operation():
            with self._cursor(sql, params) as cursor:
                return [mapper(row) for row in self._iter_rows(cursor)]

        return self._wrap('query_for_list', sql, operation)

    def query_for_boolean(self, sql: str, params: Params = None) -> bool:
        """
        Execute a query and report whether its first row has a truthy first column.

        ``SELECT COUNT(*) ...`` therefore answers "does anything match".
        """
        def operation():
            with self._cursor(sql, params) as cursor:
                row = cursor.fetchone()
                return bool(row and row[0])

        return self._wrap('query_for_boolean', sql, operation)

    def execute_update(self, sql: str, params: Params = None) -> int:
        """
        Execute an INSERT, UPDATE or DELETE statement.

        Returns:
            Number of affected rows
        """
        def operation():
            with self._cursor(sql, params) as cursor:
                # DuckDB reports the change count as a one-row result; DB-API drivers use rowcount
                if cursor.description:
                    row = cursor.fetchone()
                    return int(row[0]) if row and row[0] is not None else 0
                return max(int(getattr(cursor, 'rowcount', 0) or 0), 0)

        return self._wrap('execute_update', sql, operation)

    def execute_insert(self, sql: str, params: Params = None, key_column: Optional[str] = None) -> int:
        """
        Execute an INSERT and return the identity value the store generated.

        Args:
            sql: INSERT statement without a RETURNING clause
            params: Positional parameters or a function producing them
            key_column: Identity column to read back; without it no key is requested

        Returns:
            The generated key, or -1 if the statement produced none
        """
        statement = f"{sql} RETURNING {key_column}" if key_column else sql

        def operation():
            with self._cursor(statement, params) as cursor:
                if not key_column:
                    return -1
                row = cursor.fetchone()
                if row is None or row[0] is None:
                    return -1
                return int(row[0])

        return self._wrap('execute_insert', statement, operation)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """
        Run the enclosed statements as one transaction on the shared connection.

        Commits when the block exits normally, rolls back and re-raises otherwise.
        """
        start_time = time.time()
        self._wrap('begin', 'BEGIN TRANSACTION', lambda: self.connection.execute("BEGIN TRANSACTION"))
        try:
            yield
        except BaseException as e:
            try:
                self.connection.execute("ROLLBACK")
            except STORE_ERRORS as rollback_error:
                self.logger.error(f"Rollback failed: {rollback_error}")
            self.logger.transaction(self.__class__.__name__, False, time.time() - start_time, str(e))
            raise
        self._wrap('commit', 'COMMIT', lambda: self.connection.execute("COMMIT"))
        self.logger.transaction(self.__class__.__name__, True, time.time() - start_time)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _wrap(self, operation_name: str, sql: str, operation: Callable[[], R]) -> R:
        """Run ``operation``, translating any driver error into DataAccessError."""
        start_time = time.time()
        try:
            result = operation()
        except STORE_ERRORS as e:
            self.operation_stats['failed_queries'] += 1
            self.logger.error(f"{operation_name} failed: {e}")
            raise DataAccessError(f"Data access error in {self.__class__.__name__}.{operation_name}", e) from e

        duration = time.time() - start_time
        self._track_operation(operation_name, sql, duration)
        return result

    @contextmanager
    def _cursor(self, sql: str, params: Params) -> Iterator[Any]:
        """
        Execute ``sql`` and yield the result handle for the duration of the block.

        DuckDB returns the connection itself from execute(); other DB-API drivers
        return a fresh cursor, which is closed on every exit path. The borrowed
        connection is never closed.
        """
        bound = self._bind(params)
        cursor = self.connection.execute(sql, bound) if bound else self.connection.execute(sql)
        try:
            yield cursor
        finally:
            if cursor is not self.connection:
                cursor.close()

    @staticmethod
    def _bind(params: Params) -> Optional[List[Any]]:
        if params is None:
            return None
        if callable(params):
            params = params()
        return list(params) if params else None

    def _iter_rows(self, cursor: Any) -> Iterator[Row]:
        """Lazily yield result rows as dicts keyed by column name. Single pass."""
        columns = [column[0] for column in cursor.description or ()]
        while True:
            batch = cursor.fetchmany(self.fetch_batch_size)
            if not batch:
                return
            for values in batch:
                yield dict(zip(columns, values))

    def _track_operation(self, operation: str, sql: str, duration: float) -> None:
        """Track repository operation performance."""
        self.operation_stats['queries_executed'] += 1
        self.operation_stats['total_query_time'] += duration

        if duration > self.slow_query_threshold:
            self.operation_stats['slow_queries'] += 1
            self.logger.warning(f"Slow {operation}: {duration:.3f}s > {self.slow_query_threshold}s")

        self.logger.query(sql, duration=duration)
        self.logger.performance(f'{operation}_duration', duration, 's')

    def get_performance_stats(self) -> Dict[str, Any]:
        """Get performance statistics for this repository."""
        stats = self.operation_stats.copy()

        if stats['queries_executed'] > 0:
            stats['avg_query_time'] = stats['total_query_time'] / stats['queries_executed']
        else:
            stats['avg_query_time'] = 0.0

        stats['repository_class'] = self.__class__.__name__
        return stats

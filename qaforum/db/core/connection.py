"""
DuckDB connection provider.

The application works over exactly one long-lived connection. This module owns
that handle: it opens it lazily, hands the same object to the schema manager
and every repository, and is the only place that closes it. Nothing here is
thread-safe; callers serialize access to the shared connection.
"""

import threading
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

import duckdb

from .exceptions import ConfigurationError
from ..config.db_config import get_db_config, validate_config
from ..config.logging_config import setup_db_logging, DatabaseLoggerAdapter


def probe_connection(connection: Optional[duckdb.DuckDBPyConnection], timeout: float = 5.0) -> bool:
    """
    Check that a connection is open and answers a trivial query in time.

    A timer interrupts the running probe once ``timeout`` seconds pass, which
    makes the query fail and the probe report the connection as unusable.

    Args:
        connection: Connection to check (None is reported as unusable)
        timeout: Upper bound for the probe in seconds

    Returns:
        True if ``SELECT 1`` returned 1 within the timeout
    """
    if connection is None:
        return False

    timer = threading.Timer(timeout, connection.interrupt)
    timer.start()
    try:
        result = connection.execute("SELECT 1").fetchone()
        return result is not None and result[0] == 1
    except duckdb.Error:
        return False
    finally:
        timer.cancel()


class DuckDBConnectionManager:
    """
    Process-wide owner of the single DuckDB connection.

    Usage:
        with DuckDBConnectionManager(config) as manager:
            conn = manager.get_connection()
            SchemaManager().synchronize(conn)
            questions = QuestionRepository(conn)
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize connection manager with configuration.

        Args:
            config: Configuration dictionary (see db_config.load_config)
        """
        self.config = config or get_db_config()
        validate_config(self.config)

        db_config = self.config['database']
        self.db_path = db_config['path']
        self.read_only = bool(db_config.get('read_only', False))
        self.probe_timeout = float(self.config['connection']['probe_timeout'])

        self.logger = DatabaseLoggerAdapter(
            setup_db_logging(self.config),
            {'component': 'connection_manager', 'db_path': self.db_path}
        )

        self._conn: Optional[duckdb.DuckDBPyConnection] = None

    def _open(self) -> duckdb.DuckDBPyConnection:
        if self.db_path != ':memory:':
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self.logger.info(f"Connecting to database: {self.db_path}")
        try:
            conn = duckdb.connect(database=self.db_path, read_only=self.read_only)
        except duckdb.Error as e:
            raise ConfigurationError(f"Unable to open database {self.db_path}: {e}") from e
        self.logger.info("Connected to database")
        return conn

    def get_connection(self) -> duckdb.DuckDBPyConnection:
        """
        Return the shared connection, opening it first if needed.

        A connection that was closed behind the manager's back is replaced
        with a fresh one.
        """
        if self._conn is None or not probe_connection(self._conn, self.probe_timeout):
            if self._conn is not None:
                self.logger.warning("Shared connection is no longer usable, reconnecting")
            self._conn = self._open()
        return self._conn

    def is_valid(self) -> bool:
        """Probe the current connection without opening a new one."""
        return probe_connection(self._conn, self.probe_timeout)

    def clear_database(self) -> List[str]:
        """
        Drop every view, table and sequence in the active schema.

        Tables referenced by foreign keys cannot be dropped before the tables
        that reference them, so drops are retried in passes until nothing is
        left or a pass makes no progress.

        Returns:
            Names of the dropped objects in drop order
        """
        conn = self.get_connection()
        start_time = time.time()
        dropped = []

        views = conn.execute(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = current_schema() AND table_catalog = current_database() "
            "AND table_type = 'VIEW'"
        ).fetchall()
        for (name,) in views:
            conn.execute(f'DROP VIEW IF EXISTS "{name}"')
            dropped.append(name)

        remaining = [row[0] for row in conn.execute(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = current_schema() AND table_catalog = current_database() "
            "AND table_type = 'BASE TABLE'"
        ).fetchall()]
        while remaining:
            failed = []
            last_error = None
            for name in remaining:
                try:
                    conn.execute(f'DROP TABLE IF EXISTS "{name}"')
                    dropped.append(name)
                except duckdb.Error as e:
                    failed.append(name)
                    last_error = e
            if len(failed) == len(remaining):
                raise ConfigurationError(f"Unable to drop tables {failed}: {last_error}")
            remaining = failed

        sequences = conn.execute(
            "SELECT sequence_name FROM duckdb_sequences() "
            "WHERE schema_name = current_schema() AND database_name = current_database()"
        ).fetchall()
        for (name,) in sequences:
            conn.execute(f'DROP SEQUENCE IF EXISTS "{name}"')
            dropped.append(name)

        duration = time.time() - start_time
        self.logger.warning(f"Database cleared: dropped {len(dropped)} objects in {duration:.3f}s")
        return dropped

    def close(self) -> None:
        """Close the shared connection."""
        if self._conn is not None:
            try:
                self._conn.close()
            finally:
                self._conn = None
            self.logger.info("Connection closed")

    def reset(self) -> None:
        """Forget the current handle so the next get_connection() opens a new one."""
        self._conn = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

"""
Tests for startup schema synchronization
"""

import duckdb
import pytest

from qaforum.db.core import ConfigurationError, SchemaSyncError, probe_connection
from qaforum.db.migrations import (
    DEFAULT_TABLES, INVITES_TABLE, USERS_TABLE, SchemaManager, TableDefinition, table_exists
)


class TestSynchronize:
    """Test synchronizing the registered tables"""

    def test_default_registry_creates_every_table(self, connection):
        """Test that every declared table is created in order"""
        results = SchemaManager().synchronize(connection)

        assert [r.table_name for r in results] == [t.name for t in DEFAULT_TABLES]
        assert all(r.created for r in results)
        for table in DEFAULT_TABLES:
            assert table_exists(connection, table.name)

    def test_second_synchronize_changes_nothing(self, connection):
        """Test that startup synchronization is idempotent"""
        manager = SchemaManager()
        manager.synchronize(connection)

        results = manager.synchronize(connection)
        assert not any(r.changed for r in results)

    def test_dependency_order_succeeds(self, connection):
        """Test that a referenced table registered first lets the referencing table be created"""
        results = SchemaManager([USERS_TABLE, INVITES_TABLE]).synchronize(connection)

        assert [r.created for r in results] == [True, True]

    def test_reversed_order_fails_on_first_table(self, connection):
        """Test that a foreign key to a table that does not exist yet stops synchronization"""
        with pytest.raises(SchemaSyncError) as exc_info:
            SchemaManager([INVITES_TABLE, USERS_TABLE]).synchronize(connection)

        assert exc_info.value.table_name == "Invites"
        # Later tables are not touched
        assert not table_exists(connection, "Invites")
        assert not table_exists(connection, "Users")
        # The failed CREATE takes its sequence with it
        assert connection.execute("SELECT COUNT(*) FROM duckdb_sequences()").fetchone()[0] == 0

    def test_register_appends_after_defaults(self, connection):
        """Test registering an extra table"""
        manager = SchemaManager()
        manager.register(TableDefinition(name="AuditLog", columns={"entry": "TEXT"}))

        results = manager.synchronize(connection)

        assert results[-1].table_name == "AuditLog"
        assert table_exists(connection, "AuditLog")

    def test_closed_connection_is_rejected_before_any_ddl(self):
        """Test that an unusable connection fails the liveness probe"""
        conn = duckdb.connect(':memory:')
        conn.close()

        with pytest.raises(ConfigurationError):
            SchemaManager().synchronize(conn)

    def test_missing_connection_is_rejected(self):
        with pytest.raises(ConfigurationError):
            SchemaManager().synchronize(None)


class TestProbeConnection:
    """Test the connection liveness probe"""

    def test_open_connection_passes(self, connection):
        assert probe_connection(connection, timeout=1.0)

    def test_closed_connection_fails(self):
        conn = duckdb.connect(':memory:')
        conn.close()
        assert not probe_connection(conn, timeout=1.0)

    def test_none_fails(self):
        assert not probe_connection(None)


class TestInspectTables:
    """Test live schema reports"""

    def test_missing_tables_are_reported(self, connection):
        reports = SchemaManager().inspect_tables(connection)

        assert len(reports) == len(DEFAULT_TABLES)
        assert not any(report.exists for report in reports)

    def test_reports_columns_and_row_counts(self, synced_connection):
        """Test that a synced table reports its live columns and size"""
        synced_connection.execute("INSERT INTO Users (userName, password) VALUES ('alice', 'x')")

        reports = {r.table_name: r for r in SchemaManager().inspect_tables(synced_connection)}
        users = reports["Users"]

        assert users.exists
        assert users.row_count == 1
        assert [c.name.upper() for c in users.columns] == list(USERS_TABLE.column_names_upper())
        assert reports["Questions"].row_count == 0

"""
Schema management.

This module keeps the live store in step with the declared tables:
- Table definitions (name, ordered columns, inline constraints)
- Additive synchronizer that creates tables or adds missing columns
- Schema manager that runs the synchronizer over all tables at startup
"""

from .table_definition import TableDefinition
from .table_sync import (
    TableSyncResult, sync_table, table_exists, get_existing_columns,
    build_create_table_sql, build_add_column_sql
)
from .schema_manager import SchemaManager, TableReport, ColumnInfo
from .tables import (
    DEFAULT_TABLES, USERS_TABLE, MESSAGES_TABLE, INVITES_TABLE,
    QUESTIONS_TABLE, ANSWERS_TABLE
)

__all__ = [
    'TableDefinition',
    'TableSyncResult', 'sync_table', 'table_exists', 'get_existing_columns',
    'build_create_table_sql', 'build_add_column_sql',
    'SchemaManager', 'TableReport', 'ColumnInfo',
    'DEFAULT_TABLES', 'USERS_TABLE', 'MESSAGES_TABLE', 'INVITES_TABLE',
    'QUESTIONS_TABLE', 'ANSWERS_TABLE',
]

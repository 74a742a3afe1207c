"""
Database layer for the Q&A forum.

This module keeps schema management and data access apart from the
application using the Repository pattern.

Key components:
- One shared DuckDB connection with a liveness probe
- Table definitions and additive schema synchronization at startup
- Generic repository primitives with a single data-access error type
- Pydantic models for entities
- Centralized logging configuration
"""

from .core import (
    QAForumDBError, ConfigurationError, SchemaSyncError, DataAccessError,
    DuckDBConnectionManager, probe_connection, BaseRepository
)
from .config import load_config, get_db_config, setup_db_logging, DatabaseLoggerAdapter

from . import models
from .models import *

from . import repositories
from .repositories import *

from .migrations import SchemaManager, TableDefinition, TableSyncResult, sync_table, DEFAULT_TABLES

__version__ = "1.0.0"
__all__ = [
    # Core components
    "QAForumDBError",
    "ConfigurationError",
    "SchemaSyncError",
    "DataAccessError",
    "DuckDBConnectionManager",
    "probe_connection",
    "BaseRepository",

    # Configuration
    "load_config",
    "get_db_config",
    "setup_db_logging",
    "DatabaseLoggerAdapter",

    # Schema management
    "SchemaManager",
    "TableDefinition",
    "TableSyncResult",
    "sync_table",
    "DEFAULT_TABLES",
] + models.__all__ + repositories.__all__

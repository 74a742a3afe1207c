"""
Core database components.

This module contains the fundamental building blocks for database operations:
- Error hierarchy shared by the whole layer
- The single shared connection and its liveness probe
- Generic base repository with uniform error translation
"""

from .exceptions import QAForumDBError, ConfigurationError, SchemaSyncError, DataAccessError
from .connection import DuckDBConnectionManager, probe_connection
from .base_repository import BaseRepository

__all__ = [
    "QAForumDBError",
    "ConfigurationError",
    "SchemaSyncError",
    "DataAccessError",
    "DuckDBConnectionManager",
    "probe_connection",
    "BaseRepository",
]

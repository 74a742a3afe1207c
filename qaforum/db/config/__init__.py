"""
Database configuration management.

This module handles database-specific configuration:
- Database location and connection probe settings
- Query tuning parameters
- Logging configuration integration
"""

from .db_config import get_db_config, load_config, validate_config, DB_CONFIG, DB_PATH_ENV
from .logging_config import setup_db_logging, DatabaseLoggerAdapter

__all__ = [
    'get_db_config',
    'load_config',
    'validate_config',
    'DB_CONFIG',
    'DB_PATH_ENV',
    'setup_db_logging',
    'DatabaseLoggerAdapter'
]

"""
Database configuration settings.

Defaults live in DB_CONFIG. A YAML file can override any of them and the
database path can also be set through the QAFORUM_DB_PATH environment
variable, which wins over both.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from ..core.exceptions import ConfigurationError

DB_PATH_ENV = 'QAFORUM_DB_PATH'

DB_CONFIG = {
    'database': {
        'path': 'data/qaforum.duckdb',      # ':memory:' for a throwaway store
        'read_only': False,
    },
    'connection': {
        'probe_timeout': 5.0,               # Liveness probe bound in seconds
    },
    'query': {
        'slow_query_threshold': 1.0,        # Log queries slower than this (seconds)
        'fetch_batch_size': 500,            # Rows pulled per fetchmany() call
    },
    'logging': {
        'level': 'INFO',
        'file': None,                       # Optional log file path
    },
}


def get_db_config() -> Dict[str, Any]:
    """Get a private copy of the default configuration."""
    return copy.deepcopy(DB_CONFIG)


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Build the effective configuration.

    Args:
        config_path: Optional YAML file whose sections override the defaults

    Returns:
        Validated configuration dictionary

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    config = get_db_config()

    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ConfigurationError(f"Config file not found: {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        _deep_merge(config, loaded)

    env_path = os.environ.get(DB_PATH_ENV)
    if env_path:
        config['database']['path'] = env_path

    validate_config(config)
    return config


def validate_config(config: Dict[str, Any]) -> None:
    """Validate configuration parameters, raising ConfigurationError on the first problem."""
    db_path = config.get('database', {}).get('path')
    if not isinstance(db_path, str) or not db_path.strip():
        raise ConfigurationError("database.path must be a non-empty string")

    probe_timeout = config.get('connection', {}).get('probe_timeout', 0)
    if not isinstance(probe_timeout, (int, float)) or probe_timeout <= 0:
        raise ConfigurationError("connection.probe_timeout must be positive")

    query_config = config.get('query', {})
    if query_config.get('slow_query_threshold', 0) <= 0:
        raise ConfigurationError("query.slow_query_threshold must be positive")
    batch_size = query_config.get('fetch_batch_size', 0)
    if not isinstance(batch_size, int) or batch_size <= 0:
        raise ConfigurationError("query.fetch_batch_size must be a positive integer")

    level = str(config.get('logging', {}).get('level', 'INFO')).upper()
    if level not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
        raise ConfigurationError(f"Unknown logging level: {level}")

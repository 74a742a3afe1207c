"""
Database logging configuration.

This module sets up database-specific logging whose level comes from the
application configuration while keeping detailed query and schema tracking
available at DEBUG.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence


class SafeFormatter(logging.Formatter):
    """Formatter that provides a default for the database context field."""

    def format(self, record):
        if not hasattr(record, 'database_context'):
            record.database_context = 'db'
        return super().format(record)


def setup_db_logging(config: Dict[str, Any]) -> logging.Logger:
    """
    Setup database logging based on configuration.

    Args:
        config: Configuration dictionary with an optional 'logging' section

    Returns:
        Configured 'db' logger
    """
    logging_config = config.get('logging', {})
    log_level = str(logging_config.get('level', 'INFO')).upper()

    logger = logging.getLogger('db')
    logger.setLevel(getattr(logging, log_level))

    # Remove any existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(SafeFormatter(
        '%(asctime)s - [%(database_context)s] - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    ))
    logger.addHandler(console_handler)

    log_file = logging_config.get('file')
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(SafeFormatter(
            '%(asctime)s.%(msecs)03d - %(name)s - [%(database_context)s] - '
            '%(levelname)s - %(funcName)s:%(lineno)d - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    logger.propagate = False
    return logger


def log_query(logger: logging.Logger, query: str, params: Optional[Sequence[Any]] = None,
              duration: Optional[float] = None) -> None:
    """Log a statement with its parameters and timing at DEBUG level."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    message = f"Query: {' '.join(query.split())}"
    if params:
        message += f" | Params: {tuple(params)}"
    if duration is not None:
        message += f" | Duration: {duration:.3f}s"
    logger.debug(message)


def log_transaction(logger: logging.Logger, operation: str, success: bool,
                    duration: Optional[float] = None, error: Optional[str] = None) -> None:
    """
    Log database transaction outcome.

    Args:
        logger: Database logger instance
        operation: Transaction operation description
        success: Whether transaction succeeded
        duration: Transaction duration in seconds
        error: Error message if transaction failed
    """
    if success:
        message = f"Transaction '{operation}' committed"
        if duration is not None:
            message += f" in {duration:.3f}s"
        logger.debug(message)
    else:
        message = f"Transaction '{operation}' rolled back"
        if error:
            message += f": {error}"
        logger.warning(message)


def log_schema_change(logger: logging.Logger, table_name: str, action: str,
                      detail: Optional[str] = None) -> None:
    """Log a DDL change applied to a table ('created', 'column added')."""
    message = f"Table {table_name}: {action}"
    if detail:
        message += f" ({detail})"
    logger.info(message)


def log_performance_metric(logger: logging.Logger, metric_name: str,
                           value: float, unit: str = '') -> None:
    """Log a performance metric at DEBUG level."""
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Performance metric - {metric_name}: {value:.6f}{unit}")


class DatabaseLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that adds database-specific context to log messages.

    The context is the stem of the database path (``data/qaforum.duckdb`` ->
    ``qaforum``) so log lines from several stores can be told apart.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(self, msg, kwargs):
        db_path = self.extra.get('db_path')
        if not db_path:
            db_name = 'db'
        elif db_path == ':memory:':
            db_name = 'memory'
        else:
            db_name = Path(db_path).stem

        kwargs.setdefault('extra', {})
        kwargs['extra']['database_context'] = db_name
        return msg, kwargs

    def query(self, query: str, params: Optional[Sequence[Any]] = None,
              duration: Optional[float] = None) -> None:
        log_query(self.logger, query, params, duration)

    def transaction(self, operation: str, success: bool, duration: Optional[float] = None,
                    error: Optional[str] = None) -> None:
        log_transaction(self.logger, operation, success, duration, error)

    def schema_change(self, table_name: str, action: str, detail: Optional[str] = None) -> None:
        log_schema_change(self.logger, table_name, action, detail)

    def performance(self, metric_name: str, value: float, unit: str = '') -> None:
        log_performance_metric(self.logger, metric_name, value, unit)

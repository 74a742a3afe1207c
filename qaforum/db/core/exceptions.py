"""
Exception hierarchy for the database layer.

Every failure raised by this package derives from QAForumDBError so the
application entry point can tell database problems apart from its own bugs.
"""

from typing import Optional


class QAForumDBError(Exception):
    """Base class for all database layer errors."""


class ConfigurationError(QAForumDBError):
    """Invalid configuration or an unusable connection at startup."""


class SchemaSyncError(QAForumDBError):
    """A CREATE, ALTER or catalog query failed while synchronizing a table."""

    def __init__(self, table_name: str, message: str):
        super().__init__(f"{table_name}: {message}")
        self.table_name = table_name


class DataAccessError(QAForumDBError):
    """
    Wraps any driver error raised while a repository primitive runs.

    Callers above the repository layer only ever see this one error type for
    store failures; the driver exception is kept in ``cause`` and is
    also chained as ``__cause__``.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.args[0]}: {self.cause}"
        return self.args[0]

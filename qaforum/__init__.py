"""
Q&A forum storage backend.

This package provides the persistence layer of the forum application:

Components:
- db.migrations: Declared table shapes and additive schema synchronization
- db.core: Shared connection, generic repository and error types
- db.repositories: Entity repositories (users, invites, messages, questions)
- validators / security: Entity validation rules and password hashing
- cli: Database maintenance command line
"""

__version__ = "1.0.0"

"""
Shared fixtures for database tests.

Every test gets its own in-memory DuckDB store, so nothing leaks between tests.
"""

import functools

import duckdb
import pytest

from qaforum.db.migrations import SchemaManager
from qaforum.db.models import Answer, Message, Question, User
from qaforum.db.repositories import AnswerRepository, MessageRepository, QuestionRepository, UserRepository
from qaforum.security import hash_password

# Low work factor keeps user creation fast in tests
fast_hash = functools.partial(hash_password, iterations=1000)


@pytest.fixture
def connection():
    """Fresh in-memory connection, closed after the test."""
    conn = duckdb.connect(':memory:')
    yield conn
    conn.close()


@pytest.fixture
def synced_connection(connection):
    """Connection whose store holds every declared table."""
    SchemaManager().synchronize(connection)
    return connection


@pytest.fixture
def user_repository(synced_connection):
    return UserRepository(synced_connection, hasher=fast_hash)


@pytest.fixture
def message_repository(synced_connection):
    return MessageRepository(synced_connection)


@pytest.fixture
def question_repository(synced_connection):
    return QuestionRepository(synced_connection)


@pytest.fixture
def answer_repository(synced_connection):
    return AnswerRepository(synced_connection)


@pytest.fixture
def author(user_repository):
    """A stored user to own messages and questions."""
    return user_repository.create(User(user_name="alice", password="secret-pass", email="alice@example.com"))


def make_question(user_id, title="How do joins work?", content="Explain how a SQL join combines rows."):
    return Question(title=title, message=Message(user_id=user_id, content=content))


def make_answer(user_id, question_id=None, parent_answer_id=None, content="Use an inner join for that.", pinned=False):
    return Answer(message=Message(user_id=user_id, content=content), question_id=question_id,
                  parent_answer_id=parent_answer_id, is_pinned=pinned)


def count_rows(connection, table_name):
    return connection.execute(f"SELECT COUNT(*) FROM {table_name}").fetchone()[0]

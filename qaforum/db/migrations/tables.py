"""
Table declarations for the Q&A forum store.

DEFAULT_TABLES lists them in dependency order: a table always comes after every
table its foreign keys reference, because constraints are only applied when a
table is first created.

Identity columns draw from sequences since DuckDB has no AUTO_INCREMENT.
"""

from .table_definition import TableDefinition


def _identity(sequence: str) -> str:
    return f"INTEGER PRIMARY KEY DEFAULT nextval('{sequence}')"


USERS_TABLE = TableDefinition(
    name="Users",
    columns={
        "userID": _identity("seq_users_id"),
        "userName": "VARCHAR(255) NOT NULL UNIQUE",
        "firstName": "VARCHAR(255)",
        "lastName": "VARCHAR(255)",
        "password": "VARCHAR(255) NOT NULL",
        "email": "VARCHAR(255)",
        "roles": "INTEGER NOT NULL DEFAULT 0",
    },
    sequences=("seq_users_id",),
)

MESSAGES_TABLE = TableDefinition(
    name="Messages",
    columns={
        "messageID": _identity("seq_messages_id"),
        "userID": "INTEGER NOT NULL",
        "content": "TEXT NOT NULL",
        "createdAt": "TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP",
    },
    constraints=(
        "FOREIGN KEY (userID) REFERENCES Users (userID)",
    ),
    sequences=("seq_messages_id",),
)

INVITES_TABLE = TableDefinition(
    name="Invites",
    columns={
        "inviteID": _identity("seq_invites_id"),
        "code": "VARCHAR(50) NOT NULL UNIQUE",
        "userID": "INTEGER",
        "roles": "INTEGER NOT NULL DEFAULT 0",
        "createdAt": "BIGINT NOT NULL",
    },
    constraints=(
        "FOREIGN KEY (userID) REFERENCES Users (userID)",
    ),
    sequences=("seq_invites_id",),
)

QUESTIONS_TABLE = TableDefinition(
    name="Questions",
    columns={
        "questionID": _identity("seq_questions_id"),
        "messageID": "INTEGER UNIQUE NOT NULL",
        "title": "VARCHAR(255) NOT NULL",
    },
    constraints=(
        "FOREIGN KEY (messageID) REFERENCES Messages (messageID)",
    ),
    sequences=("seq_questions_id",),
)

ANSWERS_TABLE = TableDefinition(
    name="Answers",
    columns={
        "answerID": _identity("seq_answers_id"),
        "messageID": "INTEGER UNIQUE NOT NULL",
        "questionID": "INTEGER",            # set for top-level answers
        "parentAnswerID": "INTEGER",        # set for threaded replies
        "isPinned": "BOOLEAN NOT NULL DEFAULT FALSE",
    },
    constraints=(
        "FOREIGN KEY (messageID) REFERENCES Messages (messageID)",
        "FOREIGN KEY (questionID) REFERENCES Questions (questionID)",
    ),
    sequences=("seq_answers_id",),
)

DEFAULT_TABLES = (
    USERS_TABLE,
    MESSAGES_TABLE,
    INVITES_TABLE,
    QUESTIONS_TABLE,
    ANSWERS_TABLE,
)

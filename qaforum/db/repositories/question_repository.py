"""
Question repository implementation.

A question spans two tables: the Questions row (title) and the Message row
holding its body. Reads always join both tables and rebuild the pair from a
single row. Writes go through the nested MessageRepository for the body and
run inside one transaction, so a failed question insert never leaves an
orphaned message behind.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

import duckdb

from ..core.base_repository import BaseRepository, Row
from ..models.message import Message, Question
from .answer_repository import AnswerRepository
from .message_repository import MessageRepository
from ...validators import validate_message, validate_question

# search(items, keyword, text_of) -> matching items, best match first
SearchFunction = Callable[[Sequence[Question], str, Callable[[Question], str]], List[Question]]


class QuestionRepository(BaseRepository[Question]):
    """
    Repository for questions and their owned body messages.

    Deleting a question removes the Questions row and its answers; the body
    message is left in place.
    """

    BASE_JOIN_SQL = (
        "SELECT q.questionID, q.title, "
        "m.messageID AS msg_id, m.userID AS msg_userID, "
        "m.content AS msg_content, m.createdAt AS msg_createdAt "
        "FROM Questions q "
        "JOIN Messages m ON q.messageID = m.messageID"
    )
    INSERT_SQL = "INSERT INTO Questions (messageID, title) VALUES (?, ?)"
    UPDATE_SQL = "UPDATE Questions SET title = ? WHERE questionID = ?"

    def __init__(self, connection: duckdb.DuckDBPyConnection, config: Optional[Dict[str, Any]] = None):
        super().__init__(connection, config)
        self.messages = MessageRepository(connection, config)
        self.answers = AnswerRepository(connection, config)

    def create(self, question: Question) -> Question:
        """
        Create the body message, then the question row that references it.

        Raises:
            ValueError: If the question or its message is invalid; nothing is written
            DataAccessError: If either insert fails; both are rolled back
        """
        validate_question(question)
        message = question.message
        if message is None:
            raise ValueError("Question must have a Message")
        validate_message(message)

        previous_message_id = message.id
        try:
            with self.transaction():
                self.messages.create(message)
                generated_id = self.execute_insert(
                    self.INSERT_SQL,
                    (message.id, question.title),
                    key_column='questionID'
                )
        except Exception:
            # The message insert was rolled back too, so its id is no longer valid
            message.id = previous_message_id
            raise
        if generated_id > 0:
            question.id = generated_id
        return question

    def get_by_id(self, question_id: int) -> Optional[Question]:
        return self.query_for_object(
            f"{self.BASE_JOIN_SQL} WHERE q.questionID = ?",
            (question_id,),
            self.build
        )

    def get_all(self) -> List[Question]:
        return self.query_for_list(f"{self.BASE_JOIN_SQL} ORDER BY q.questionID", None, self.build)

    def build(self, row: Row) -> Question:
        message = Message(
            id=row['msg_id'],
            user_id=row['msg_userID'],
            content=row['msg_content'],
            created_at=row['msg_createdAt'],
        )
        return Question(id=row['questionID'], title=row['title'], message=message)

    def update(self, question: Question) -> Optional[Question]:
        """
        Update the body content, then the title.

        Returns:
            The question if its Questions row was updated, otherwise None
        """
        validate_question(question)
        if question.message is None:
            raise ValueError("Question must have a Message")

        with self.transaction():
            self.messages.update(question.message)
            rows = self.execute_update(self.UPDATE_SQL, (question.title, question.id))
        return question if rows > 0 else None

    def delete(self, question_id: int) -> None:
        """Delete the question and every answer thread under it. The body message is kept."""
        # Separate statements: DuckDB rejects deleting a referenced key in the
        # transaction that deleted its referencing rows
        self.answers.delete_for_question(question_id)
        self.execute_update("DELETE FROM Questions WHERE questionID = ?", (question_id,))

    def get_questions_by_user(self, user_id: int) -> List[Question]:
        return self.query_for_list(
            f"{self.BASE_JOIN_SQL} WHERE m.userID = ? ORDER BY q.questionID",
            (user_id,),
            self.build
        )

    def get_unanswered_questions(self) -> List[Question]:
        """Questions that no answer references."""
        return self.query_for_list(
            f"{self.BASE_JOIN_SQL} "
            "WHERE NOT EXISTS (SELECT 1 FROM Answers a WHERE a.questionID = q.questionID) "
            "ORDER BY q.questionID",
            None,
            self.build
        )

    def get_questions_without_pinned_answer(self) -> List[Question]:
        return self.query_for_list(
            f"{self.BASE_JOIN_SQL} "
            "WHERE NOT EXISTS (SELECT 1 FROM Answers a WHERE a.questionID = q.questionID AND a.isPinned) "
            "ORDER BY q.questionID",
            None,
            self.build
        )

    def has_pinned_answer(self, question_id: int) -> bool:
        return self.query_for_boolean(
            "SELECT COUNT(*) FROM Answers WHERE questionID = ? AND isPinned = TRUE",
            (question_id,)
        )

    def update_question_title(self, question_id: int, new_title: str) -> Optional[Question]:
        existing = self.get_by_id(question_id)
        if existing is None:
            return None
        existing.title = new_title
        return self.update(existing)

    def update_question_content(self, question_id: int, new_content: str) -> Optional[Question]:
        existing = self.get_by_id(question_id)
        if existing is None:
            return None
        existing.message.content = new_content
        return self.update(existing)

    def search_questions(self, keyword: str, search: SearchFunction) -> List[Question]:
        """Match ``keyword`` against title and body with an external search function."""
        return search(self.get_all(), keyword, lambda q: f"{q.title} {q.content}")

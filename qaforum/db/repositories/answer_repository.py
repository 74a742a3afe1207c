"""
Answer repository implementation.

Answers are composite like questions: the Answers row carries the question or
parent answer it replies to plus the pinned flag, and the body lives in a
Message row written through a nested MessageRepository.

Deleting an answer removes its whole reply thread. The store cannot cascade
deletes, so the thread is collected with a recursive query over
``parentAnswerID``.
"""

from typing import Any, Callable, Dict, List, Optional, Sequence

import duckdb

from ..core.base_repository import BaseRepository, Row
from ..models.message import Answer, Message
from .message_repository import MessageRepository
from ...validators import validate_answer

# search(items, keyword, text_of) -> matching items, best match first
SearchFunction = Callable[[Sequence[Answer], str, Callable[[Answer], str]], List[Answer]]


class AnswerRepository(BaseRepository[Answer]):
    """Repository for answers and their owned body messages."""

    BASE_JOIN_SQL = (
        "SELECT a.answerID, a.questionID, a.parentAnswerID, a.isPinned, "
        "m.messageID AS msg_id, m.userID AS msg_userID, "
        "m.content AS msg_content, m.createdAt AS msg_createdAt "
        "FROM Answers a "
        "JOIN Messages m ON a.messageID = m.messageID"
    )
    INSERT_SQL = "INSERT INTO Answers (messageID, questionID, parentAnswerID, isPinned) VALUES (?, ?, ?, ?)"
    UPDATE_SQL = "UPDATE Answers SET parentAnswerID = ?, isPinned = ? WHERE answerID = ?"

    # Deletes every answer matched by {seed} together with all replies below it
    DELETE_THREADS_SQL = (
        "DELETE FROM Answers WHERE answerID IN ("
        "WITH RECURSIVE thread(answerID) AS ("
        "SELECT answerID FROM Answers WHERE {seed} "
        "UNION "
        "SELECT a.answerID FROM Answers a JOIN thread t ON a.parentAnswerID = t.answerID"
        ") SELECT answerID FROM thread)"
    )

    def __init__(self, connection: duckdb.DuckDBPyConnection, config: Optional[Dict[str, Any]] = None):
        super().__init__(connection, config)
        self.messages = MessageRepository(connection, config)

    def create(self, answer: Answer) -> Answer:
        """
        Create the body message, then the answer row that references it.

        Raises:
            ValueError: If the answer or its message is invalid; nothing is written
            DataAccessError: If either insert fails; both are rolled back
        """
        validate_answer(answer)
        message = answer.message

        previous_message_id = message.id
        try:
            with self.transaction():
                self.messages.create(message)
                generated_id = self.execute_insert(
                    self.INSERT_SQL,
                    (message.id, answer.question_id, answer.parent_answer_id, answer.is_pinned),
                    key_column='answerID'
                )
        except Exception:
            message.id = previous_message_id
            raise
        if generated_id > 0:
            answer.id = generated_id
        return answer

    def get_by_id(self, answer_id: int) -> Optional[Answer]:
        return self.query_for_object(f"{self.BASE_JOIN_SQL} WHERE a.answerID = ?", (answer_id,), self.build)

    def get_all(self) -> List[Answer]:
        return self.query_for_list(f"{self.BASE_JOIN_SQL} ORDER BY a.answerID", None, self.build)

    def build(self, row: Row) -> Answer:
        message = Message(
            id=row['msg_id'],
            user_id=row['msg_userID'],
            content=row['msg_content'],
            created_at=row['msg_createdAt'],
        )
        return Answer(
            id=row['answerID'],
            message=message,
            question_id=row['questionID'],
            parent_answer_id=row['parentAnswerID'],
            is_pinned=bool(row['isPinned']),
        )

    def update(self, answer: Answer) -> Optional[Answer]:
        """
        Update the body content, the parent answer and the pinned flag.

        ``question_id`` is fixed when the answer is created.

        Returns:
            The answer if its Answers row was updated, otherwise None
        """
        validate_answer(answer)

        with self.transaction():
            self.messages.update(answer.message)
            rows = self.execute_update(self.UPDATE_SQL, (answer.parent_answer_id, answer.is_pinned, answer.id))
        return answer if rows > 0 else None

    def delete(self, answer_id: int) -> None:
        """Delete an answer and every reply below it. Body messages are kept."""
        self.execute_update(self.DELETE_THREADS_SQL.format(seed="answerID = ?"), (answer_id,))

    def delete_for_question(self, question_id: int) -> int:
        """Delete every answer to a question, replies included. Returns the number of rows removed."""
        return self.execute_update(self.DELETE_THREADS_SQL.format(seed="questionID = ?"), (question_id,))

    def delete_for_user(self, user_id: int) -> int:
        """Delete the user's answers and every answer to the user's questions, replies included."""
        seed = (
            "messageID IN (SELECT messageID FROM Messages WHERE userID = ?) "
            "OR questionID IN (SELECT q.questionID FROM Questions q "
            "JOIN Messages m ON q.messageID = m.messageID WHERE m.userID = ?)"
        )
        return self.execute_update(self.DELETE_THREADS_SQL.format(seed=seed), (user_id, user_id))

    def get_answers_by_user(self, user_id: int) -> List[Answer]:
        return self.query_for_list(
            f"{self.BASE_JOIN_SQL} WHERE m.userID = ? ORDER BY a.answerID",
            (user_id,),
            self.build
        )

    def get_replies_to_question(self, question_id: int) -> List[Answer]:
        return self.query_for_list(
            f"{self.BASE_JOIN_SQL} WHERE a.questionID = ? ORDER BY a.answerID",
            (question_id,),
            self.build
        )

    def get_replies_to_answer(self, answer_id: int) -> List[Answer]:
        return self.query_for_list(
            f"{self.BASE_JOIN_SQL} WHERE a.parentAnswerID = ? ORDER BY a.answerID",
            (answer_id,),
            self.build
        )

    def toggle_pin(self, answer_id: int) -> Optional[Answer]:
        existing = self.get_by_id(answer_id)
        if existing is None:
            return None
        existing.is_pinned = not existing.is_pinned
        return self.update(existing)

    def update_answer_content(self, answer_id: int, new_content: str) -> Optional[Answer]:
        existing = self.get_by_id(answer_id)
        if existing is None:
            return None
        existing.message.content = new_content
        return self.update(existing)

    def search_answers(self, keyword: str, search: SearchFunction) -> List[Answer]:
        """Match ``keyword`` against answer bodies with an external search function."""
        return search(self.get_all(), keyword, lambda a: a.content)

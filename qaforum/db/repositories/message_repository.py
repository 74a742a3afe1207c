"""
Message repository implementation.

Messages hold the body text of questions and answers. Composite repositories
create and update them through this class.
"""

from typing import List, Optional

from ..core.base_repository import BaseRepository, Row
from ..models.message import Message
from ...validators import validate_message, validate_message_content


class MessageRepository(BaseRepository[Message]):
    """Repository for the Messages table."""

    INSERT_SQL = "INSERT INTO Messages (userID, content, createdAt) VALUES (?, ?, ?)"

    def create(self, message: Message) -> Message:
        """Insert a message and assign its generated id."""
        validate_message(message)

        generated_id = self.execute_insert(
            self.INSERT_SQL,
            (message.user_id, message.content, message.created_at),
            key_column='messageID'
        )
        if generated_id > 0:
            message.id = generated_id
        return message

    def get_by_id(self, message_id: int) -> Optional[Message]:
        return self.query_for_object(
            "SELECT * FROM Messages WHERE messageID = ?",
            (message_id,),
            self.build
        )

    def get_all(self) -> List[Message]:
        return self.query_for_list("SELECT * FROM Messages", None, self.build)

    def build(self, row: Row) -> Message:
        return Message(
            id=row['messageID'],
            user_id=row['userID'],
            content=row['content'],
            created_at=row['createdAt'],
        )

    def update(self, message: Message) -> Optional[Message]:
        """Update the content only. Returns None if no row has this id."""
        validate_message_content(message.content)

        rows = self.execute_update(
            "UPDATE Messages SET content = ? WHERE messageID = ?",
            (message.content, message.id)
        )
        return message if rows > 0 else None

    def delete(self, message_id: int) -> None:
        self.execute_update("DELETE FROM Messages WHERE messageID = ?", (message_id,))

    def get_by_user(self, user_id: int) -> List[Message]:
        return self.query_for_list(
            "SELECT * FROM Messages WHERE userID = ? ORDER BY createdAt, messageID",
            (user_id,),
            self.build
        )

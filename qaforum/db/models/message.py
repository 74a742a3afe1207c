"""
Message, question and answer data models.

Questions and answers are composite entities: their body text lives in a Message
row and their own row only carries a reference to that message.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import BaseEntity


class Message(BaseEntity):
    """Body text posted by a user."""

    user_id: int = Field(..., description="Author's userID")
    content: str = Field(..., description="Message body")
    created_at: datetime = Field(default_factory=datetime.now, description="Posting time")


class Question(BaseEntity):
    """Titled question whose body is an owned Message."""

    title: str = Field(..., description="Question title")
    message: Optional[Message] = Field(None, description="Owned body message")

    @property
    def user_id(self) -> Optional[int]:
        return self.message.user_id if self.message else None

    @property
    def content(self) -> Optional[str]:
        return self.message.content if self.message else None


class Answer(BaseEntity):
    """
    Reply whose body is an owned Message.

    A top-level answer sets ``question_id``; a threaded reply sets
    ``parent_answer_id`` instead.
    """

    message: Optional[Message] = Field(None, description="Owned body message")
    question_id: Optional[int] = Field(None, description="Answered question, for top-level answers")
    parent_answer_id: Optional[int] = Field(None, description="Answer replied to, for threaded replies")
    is_pinned: bool = Field(default=False, description="Pinned by the question's author")

    @property
    def user_id(self) -> Optional[int]:
        return self.message.user_id if self.message else None

    @property
    def content(self) -> Optional[str]:
        return self.message.content if self.message else None

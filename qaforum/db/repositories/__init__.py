"""
Repository implementations for data access.

This module contains repository classes that encapsulate all database operations:
- User repository for accounts and logins
- Invite repository for single-use registration codes
- Message repository for body text
- Question repository composing questions from Questions and Messages rows
- Answer repository composing answers from Answers and Messages rows
"""

from .user_repository import UserRepository
from .invite_repository import InviteRepository
from .message_repository import MessageRepository
from .question_repository import QuestionRepository
from .answer_repository import AnswerRepository

__all__ = [
    'UserRepository',
    'InviteRepository',
    'MessageRepository',
    'QuestionRepository',
    'AnswerRepository',
]

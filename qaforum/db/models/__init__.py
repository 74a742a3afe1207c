"""
Database models using Pydantic for validation and type safety.

This module contains data models for all database entities:
- User accounts and role bits
- Invites
- Messages and the questions and answers composed from them
"""

from .base import BaseEntity
from .user import User, Role
from .invite import Invite, INVITE_TTL_SECONDS
from .message import Message, Question, Answer

__all__ = [
    'BaseEntity',
    'User', 'Role',
    'Invite', 'INVITE_TTL_SECONDS',
    'Message', 'Question', 'Answer',
]

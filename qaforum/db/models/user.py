"""
User data models.

This module defines the forum user and the role bit-field stored in
``Users.roles``.
"""

from enum import IntFlag
from typing import Optional

from pydantic import Field, field_validator

from .base import BaseEntity


class Role(IntFlag):
    """Role bits combined into a user's or invite's ``roles`` value."""
    USER = 1
    ADMIN = 1 << 1
    INSTRUCTOR = 1 << 2
    STUDENT = 1 << 3
    REVIEWER = 1 << 4
    STAFF = 1 << 5


class User(BaseEntity):
    """Forum account. ``password`` holds the hashed password once stored."""

    user_name: str = Field(..., description="Unique login name")
    first_name: Optional[str] = Field(None, description="Given name")
    last_name: Optional[str] = Field(None, description="Family name")
    password: str = Field(..., description="Password hash (plain text only before create)")
    email: Optional[str] = Field(None, description="Contact address")
    roles: int = Field(default=0, ge=0, description="Bit-field of Role values")

    @field_validator('first_name', 'last_name', 'email')
    @classmethod
    def blank_to_none(cls, v):
        """Store blank optional strings as NULL."""
        if v is not None and len(v.strip()) == 0:
            return None
        return v

    def has_role(self, role: Role) -> bool:
        return bool(self.roles & role)

    def with_role(self, role: Role) -> "User":
        self.roles = int(self.roles | role)
        return self

    def without_role(self, role: Role) -> "User":
        self.roles = int(self.roles & ~role)
        return self

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

"""
Invite data model.
"""

import time
from typing import Optional

from pydantic import Field

from .base import BaseEntity

# Invites older than this many seconds can no longer be redeemed
INVITE_TTL_SECONDS = 86400


class Invite(BaseEntity):
    """One-time registration code granting ``roles`` to whoever redeems it."""

    code: str = Field(..., min_length=1, max_length=50, description="Invite code")
    user_id: Optional[int] = Field(None, description="User who issued or redeemed the invite")
    roles: int = Field(default=0, ge=0, description="Role bits granted on redemption")
    created_at: int = Field(default_factory=lambda: int(time.time()), description="Epoch seconds")

    def is_expired(self, now: Optional[int] = None) -> bool:
        now = int(time.time()) if now is None else now
        return now - self.created_at >= INVITE_TTL_SECONDS

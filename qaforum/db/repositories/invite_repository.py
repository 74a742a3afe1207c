"""
Invite repository implementation.

Invites are single-use: find_invite hands back a still-valid invite and
deletes it in the same call.
"""

import time
from typing import List, Optional

from ..core.base_repository import BaseRepository, Row
from ..models.invite import Invite, INVITE_TTL_SECONDS


class InviteRepository(BaseRepository[Invite]):
    """Repository for the Invites table."""

    def create(self, invite: Invite) -> Invite:
        generated_id = self.execute_insert(
            "INSERT INTO Invites (code, userID, roles, createdAt) VALUES (?, ?, ?, ?)",
            (invite.code, invite.user_id, int(invite.roles), invite.created_at),
            key_column='inviteID'
        )
        if generated_id > 0:
            invite.id = generated_id
        return invite

    def get_by_id(self, invite_id: int) -> Optional[Invite]:
        return self.query_for_object("SELECT * FROM Invites WHERE inviteID = ?", (invite_id,), self.build)

    def get_all(self) -> List[Invite]:
        return self.query_for_list("SELECT * FROM Invites ORDER BY inviteID", None, self.build)

    def build(self, row: Row) -> Invite:
        return Invite(
            id=row['inviteID'],
            code=row['code'],
            user_id=row['userID'],
            roles=row['roles'],
            created_at=row['createdAt'],
        )

    def update(self, invite: Invite) -> Optional[Invite]:
        rows = self.execute_update(
            "UPDATE Invites SET userID = ?, roles = ?, createdAt = ? WHERE inviteID = ?",
            (invite.user_id, int(invite.roles), invite.created_at, invite.id)
        )
        return invite if rows > 0 else None

    def delete(self, invite_id: int) -> None:
        self.execute_update("DELETE FROM Invites WHERE inviteID = ?", (invite_id,))

    def count_used_by_user(self, user_id: int) -> int:
        return self.query_for_object(
            "SELECT COUNT(*) AS used FROM Invites WHERE userID = ?",
            (user_id,),
            lambda row: int(row['used'])
        )

    def find_invite(self, code: str, now: Optional[int] = None) -> Optional[Invite]:
        """
        Redeem an invite code.

        Returns:
            The invite if the code exists and is younger than 24 hours, after
            deleting it; None otherwise
        """
        now = int(time.time()) if now is None else now
        invite = self.query_for_object(
            "SELECT * FROM Invites WHERE code = ? AND CAST(? AS BIGINT) - createdAt < ?",
            (code, now, INVITE_TTL_SECONDS),
            self.build
        )
        if invite is not None:
            self.delete(invite.id)
        return invite

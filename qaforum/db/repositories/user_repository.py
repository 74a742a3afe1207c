"""
User repository implementation.

Passwords are hashed on the way in; the hashing and verification functions are
injectable so callers can swap the scheme.
"""

from typing import Any, Callable, Dict, List, Optional

import duckdb

from ..core.base_repository import BaseRepository, Row
from ..models.user import User, Role
from .answer_repository import AnswerRepository
from ...security import hash_password, verify_password
from ...validators import validate_user


class UserRepository(BaseRepository[User]):
    """Repository for the Users table."""

    INSERT_SQL = (
        "INSERT INTO Users (userName, firstName, lastName, password, email, roles) "
        "VALUES (?, ?, ?, ?, ?, ?)"
    )

    def __init__(self, connection: duckdb.DuckDBPyConnection,
                 hasher: Callable[[str], str] = hash_password,
                 verifier: Callable[[str, str], bool] = verify_password,
                 config: Optional[Dict[str, Any]] = None):
        super().__init__(connection, config)
        self.answers = AnswerRepository(connection, config)
        self.hasher = hasher
        self.verifier = verifier

    def create(self, user: User) -> User:
        """Hash the password, insert the user and assign the generated id."""
        validate_user(user)
        user.password = self.hasher(user.password)

        generated_id = self.execute_insert(
            self.INSERT_SQL,
            (user.user_name, user.first_name, user.last_name, user.password, user.email, int(user.roles)),
            key_column='userID'
        )
        if generated_id > 0:
            user.id = generated_id
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self.query_for_object("SELECT * FROM Users WHERE userID = ?", (user_id,), self.build)

    def get_all(self) -> List[User]:
        return self.query_for_list("SELECT * FROM Users ORDER BY userID", None, self.build)

    def build(self, row: Row) -> User:
        return User(
            id=row['userID'],
            user_name=row['userName'],
            first_name=row['firstName'],
            last_name=row['lastName'],
            password=row['password'],
            email=row['email'],
            roles=row['roles'],
        )

    def update(self, user: User) -> Optional[User]:
        """
        Update profile fields and roles.

        The username and password are not changed here; use update_password
        for the latter.
        """
        rows = self.execute_update(
            "UPDATE Users SET firstName = ?, lastName = ?, email = ?, roles = ? WHERE userID = ?",
            (user.first_name, user.last_name, user.email, int(user.roles), user.id)
        )
        return user if rows > 0 else None

    def delete(self, user_id: int) -> None:
        """
        Delete a user together with everything that references them.

        Order: answer threads touching the user's posts, the user's questions,
        their messages, their invites, then the account. Each statement
        commits on its own, as in QuestionRepository.delete.
        """
        self.answers.delete_for_user(user_id)
        self.execute_update(
            "DELETE FROM Questions WHERE messageID IN (SELECT messageID FROM Messages WHERE userID = ?)",
            (user_id,)
        )
        self.execute_update("DELETE FROM Messages WHERE userID = ?", (user_id,))
        self.execute_update("DELETE FROM Invites WHERE userID = ?", (user_id,))
        self.execute_update("DELETE FROM Users WHERE userID = ?", (user_id,))

    def get_by_username(self, user_name: str) -> Optional[User]:
        return self.query_for_object("SELECT * FROM Users WHERE userName = ?", (user_name,), self.build)

    def user_exists(self, user_name: str) -> bool:
        return self.query_for_boolean("SELECT COUNT(*) FROM Users WHERE userName = ?", (user_name,))

    def validate_login(self, user_name: str, plain_password: str) -> bool:
        stored = self.query_for_object(
            "SELECT password FROM Users WHERE userName = ?",
            (user_name,),
            lambda row: row['password']
        )
        if stored is None:
            return False
        return self.verifier(plain_password, stored)

    def update_password(self, user: User) -> Optional[User]:
        """Hash ``user.password`` and store it."""
        if not user.password:
            raise ValueError("Password cannot be empty.")
        user.password = self.hasher(user.password)
        rows = self.execute_update(
            "UPDATE Users SET password = ? WHERE userID = ?",
            (user.password, user.id)
        )
        return user if rows > 0 else None

    def get_users_with_role(self, role: Role) -> List[User]:
        return self.query_for_list(
            "SELECT * FROM Users WHERE (roles & ?) <> 0 ORDER BY userID",
            (int(role),),
            self.build
        )

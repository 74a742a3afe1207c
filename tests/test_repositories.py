"""
Tests for the user, invite and message repositories
"""

from datetime import datetime

import pytest

from qaforum.db.core import DataAccessError
from qaforum.db.models import INVITE_TTL_SECONDS, Invite, Message, Role, User
from qaforum.db.repositories import InviteRepository
from qaforum.security import verify_password

from conftest import count_rows, make_answer, make_question


@pytest.fixture
def invite_repository(synced_connection):
    return InviteRepository(synced_connection)


class TestUserRepository:
    """Test user persistence and logins"""

    def test_create_hashes_password(self, user_repository, author):
        assert author.id > 0
        assert author.password != "secret-pass"
        assert verify_password("secret-pass", author.password)

    def test_round_trip(self, user_repository):
        created = user_repository.create(User(
            user_name="carol", first_name="Carol", last_name=" ", password="pw-123456",
            email="carol@example.com", roles=Role.USER | Role.STUDENT
        ))

        loaded = user_repository.get_by_id(created.id)

        assert loaded.user_name == "carol"
        assert loaded.first_name == "Carol"
        assert loaded.last_name is None
        assert loaded.has_role(Role.STUDENT)
        assert not loaded.has_role(Role.ADMIN)

    def test_validate_login(self, user_repository, author):
        assert user_repository.validate_login("alice", "secret-pass")
        assert not user_repository.validate_login("alice", "wrong-pass")
        assert not user_repository.validate_login("nobody", "secret-pass")

    def test_duplicate_username_is_a_data_access_error(self, user_repository, author):
        with pytest.raises(DataAccessError):
            user_repository.create(User(user_name="alice", password="another-pass"))

    def test_invalid_username_is_rejected(self, user_repository):
        with pytest.raises(ValueError):
            user_repository.create(User(user_name="ab", password="pw-123456"))
        assert user_repository.get_all() == []

    def test_update_profile_and_roles(self, user_repository, author):
        author.first_name = "Alice"
        author.email = "a@example.org"
        author.with_role(Role.ADMIN)

        assert user_repository.update(author) is author

        loaded = user_repository.get_by_id(author.id)
        assert loaded.first_name == "Alice"
        assert loaded.email == "a@example.org"
        assert loaded.has_role(Role.ADMIN)

    def test_update_unknown_user_returns_none(self, user_repository):
        ghost = User(id=999, user_name="ghost", password="x")
        assert user_repository.update(ghost) is None

    def test_update_password(self, user_repository, author):
        author.password = "new-secret"
        user_repository.update_password(author)

        assert user_repository.validate_login("alice", "new-secret")
        assert not user_repository.validate_login("alice", "secret-pass")

    def test_lookup_helpers(self, user_repository, author):
        assert user_repository.user_exists("alice")
        assert not user_repository.user_exists("nobody")
        assert user_repository.get_by_username("alice").id == author.id
        assert user_repository.get_by_username("nobody") is None

    def test_get_users_with_role(self, user_repository, author):
        admin = user_repository.create(User(user_name="admin", password="pw-123456", roles=Role.ADMIN))

        assert [u.id for u in user_repository.get_users_with_role(Role.ADMIN)] == [admin.id]
        assert user_repository.get_users_with_role(Role.STAFF) == []

    def test_delete(self, user_repository, author):
        user_repository.delete(author.id)
        assert user_repository.get_by_id(author.id) is None

    def test_delete_removes_dependent_rows(self, user_repository, question_repository, answer_repository,
                                           invite_repository, author, synced_connection):
        """Test that deleting a user with posts and invites removes them and keeps other users' data"""
        bob = user_repository.create(User(user_name="bobby", password="pw-123456"))
        own_question = question_repository.create(make_question(author.id))
        other_question = question_repository.create(make_question(bob.id, title="Bob asks here"))
        bob_answer = answer_repository.create(make_answer(bob.id, question_id=own_question.id))
        answer_repository.create(make_answer(author.id, parent_answer_id=bob_answer.id))
        own_answer = answer_repository.create(make_answer(author.id, question_id=other_question.id))
        answer_repository.create(make_answer(bob.id, parent_answer_id=own_answer.id))
        kept_answer = answer_repository.create(make_answer(bob.id, question_id=other_question.id))
        invite_repository.create(Invite(code="ALICE", user_id=author.id, created_at=1_700_000_000))
        kept_invite = invite_repository.create(Invite(code="BOB", user_id=bob.id, created_at=1_700_000_000))

        user_repository.delete(author.id)

        assert user_repository.get_by_id(author.id) is None
        assert [q.id for q in question_repository.get_all()] == [other_question.id]
        assert [a.id for a in answer_repository.get_all()] == [kept_answer.id]
        assert [i.id for i in invite_repository.get_all()] == [kept_invite.id]
        assert count_rows(synced_connection, "Messages") == 4
        assert user_repository.get_by_id(bob.id) is not None


class TestInviteRepository:
    """Test single-use invites"""

    NOW = 1_700_000_000

    def test_create_and_get(self, invite_repository):
        invite = invite_repository.create(Invite(code="WELCOME", roles=Role.STUDENT, created_at=self.NOW))

        loaded = invite_repository.get_by_id(invite.id)

        assert loaded.code == "WELCOME"
        assert loaded.roles == Role.STUDENT
        assert loaded.user_id is None
        assert [i.id for i in invite_repository.get_all()] == [invite.id]

    def test_find_invite_consumes_code(self, invite_repository):
        invite_repository.create(Invite(code="WELCOME", created_at=self.NOW))

        found = invite_repository.find_invite("WELCOME", now=self.NOW + 60)

        assert found is not None
        assert found.code == "WELCOME"
        assert invite_repository.find_invite("WELCOME", now=self.NOW + 60) is None
        assert invite_repository.get_all() == []

    def test_expired_invite_is_not_returned(self, invite_repository):
        invite_repository.create(Invite(code="OLD", created_at=self.NOW))

        assert invite_repository.find_invite("OLD", now=self.NOW + INVITE_TTL_SECONDS) is None
        # Expired invites are left in place
        assert len(invite_repository.get_all()) == 1

    def test_unknown_code(self, invite_repository):
        assert invite_repository.find_invite("NOPE", now=self.NOW) is None

    def test_update_and_count_used(self, invite_repository, author):
        invite = invite_repository.create(Invite(code="TEAM", created_at=self.NOW))
        assert invite_repository.count_used_by_user(author.id) == 0

        invite.user_id = author.id
        invite.roles = int(Role.STAFF)
        assert invite_repository.update(invite) is invite

        assert invite_repository.count_used_by_user(author.id) == 1
        assert invite_repository.get_by_id(invite.id).roles == Role.STAFF

    def test_is_expired(self):
        invite = Invite(code="X", created_at=self.NOW)
        assert not invite.is_expired(now=self.NOW + INVITE_TTL_SECONDS - 1)
        assert invite.is_expired(now=self.NOW + INVITE_TTL_SECONDS)


class TestMessageRepository:
    """Test message persistence"""

    def test_create_and_get(self, message_repository, author):
        posted = datetime(2024, 5, 1, 12, 30)
        message = message_repository.create(Message(user_id=author.id, content="First message body", created_at=posted))

        loaded = message_repository.get_by_id(message.id)

        assert loaded.content == "First message body"
        assert loaded.user_id == author.id
        assert loaded.created_at == posted

    def test_get_by_user_orders_by_time(self, message_repository, author):
        later = message_repository.create(Message(user_id=author.id, content="Posted second",
                                                  created_at=datetime(2024, 5, 2)))
        earlier = message_repository.create(Message(user_id=author.id, content="Posted first",
                                                    created_at=datetime(2024, 5, 1)))

        assert [m.id for m in message_repository.get_by_user(author.id)] == [earlier.id, later.id]

    def test_update_content(self, message_repository, author):
        message = message_repository.create(Message(user_id=author.id, content="Original text"))
        message.content = "Edited message text"

        assert message_repository.update(message) is message
        assert message_repository.get_by_id(message.id).content == "Edited message text"

    def test_invalid_message_is_rejected(self, message_repository):
        with pytest.raises(ValueError):
            message_repository.create(Message(user_id=0, content="Long enough content"))
        assert message_repository.get_all() == []

    def test_unknown_author_violates_foreign_key(self, message_repository):
        with pytest.raises(DataAccessError):
            message_repository.create(Message(user_id=999, content="Orphan message text"))

    def test_delete(self, message_repository, author):
        message = message_repository.create(Message(user_id=author.id, content="Short lived message"))
        message_repository.delete(message.id)
        assert message_repository.get_by_id(message.id) is None

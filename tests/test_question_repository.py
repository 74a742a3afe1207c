"""
Tests for the composite question repository
"""

import pytest

from qaforum.db.core import DataAccessError
from qaforum.db.models import Message, Question, User
from qaforum.db.repositories import QuestionRepository

from conftest import count_rows, make_answer, make_question


def add_answer(connection, message_repository, question, user_id, pinned=False):
    """Insert an answer row pointing at ``question``."""
    message = message_repository.create(Message(user_id=user_id, content="Use an inner join for that."))
    connection.execute(
        "INSERT INTO Answers (messageID, questionID, isPinned) VALUES (?, ?, ?)",
        [message.id, question.id, pinned]
    )


class TestCreate:
    """Test creating questions with their body message"""

    def test_create_assigns_both_ids(self, question_repository, author, synced_connection):
        question = question_repository.create(make_question(author.id))

        assert question.id > 0
        assert question.message.id > 0
        assert count_rows(synced_connection, "Questions") == 1
        assert count_rows(synced_connection, "Messages") == 1

    def test_round_trip_rebuilds_question_and_message(self, question_repository, author):
        created = question_repository.create(make_question(author.id))

        loaded = question_repository.get_by_id(created.id)

        assert loaded.id == created.id
        assert loaded.title == "How do joins work?"
        assert loaded.message.id == created.message.id
        assert loaded.user_id == author.id
        assert loaded.content == "Explain how a SQL join combines rows."

    def test_missing_message_is_rejected_without_writes(self, question_repository, synced_connection):
        """Test that a question without a body message fails before any statement"""
        with pytest.raises(ValueError):
            question_repository.create(Question(title="A valid title"))

        assert count_rows(synced_connection, "Messages") == 0
        assert count_rows(synced_connection, "Questions") == 0

    def test_invalid_title_is_rejected(self, question_repository, author, synced_connection):
        with pytest.raises(ValueError):
            question_repository.create(make_question(author.id, title="Hi"))
        assert count_rows(synced_connection, "Messages") == 0

    def test_invalid_content_is_rejected(self, question_repository, author, synced_connection):
        with pytest.raises(ValueError):
            question_repository.create(make_question(author.id, content="short"))
        assert count_rows(synced_connection, "Messages") == 0

    def test_failed_question_insert_leaves_no_orphan_message(self, question_repository, author,
                                                             synced_connection, monkeypatch):
        """Test that the body message insert is rolled back with the question insert"""
        monkeypatch.setattr(QuestionRepository, 'INSERT_SQL',
                            "INSERT INTO Questions (messageID, noSuchColumn) VALUES (?, ?)")
        question = make_question(author.id)

        with pytest.raises(DataAccessError):
            question_repository.create(question)

        assert count_rows(synced_connection, "Messages") == 0
        assert count_rows(synced_connection, "Questions") == 0
        assert question.id == 0
        assert question.message.id == 0

    def test_repository_usable_after_rollback(self, question_repository, author, monkeypatch):
        with monkeypatch.context() as patch:
            patch.setattr(QuestionRepository, 'INSERT_SQL', "INSERT INTO Nowhere VALUES (?, ?)")
            with pytest.raises(DataAccessError):
                question_repository.create(make_question(author.id))

        assert question_repository.create(make_question(author.id)).id > 0


class TestRead:
    """Test reading questions"""

    def test_get_by_id_missing_returns_none(self, question_repository):
        assert question_repository.get_by_id(12345) is None

    def test_get_all_on_empty_table(self, question_repository):
        assert question_repository.get_all() == []

    def test_get_all_returns_every_question_in_id_order(self, question_repository, author):
        first = question_repository.create(make_question(author.id, title="First question"))
        second = question_repository.create(make_question(author.id, title="Second question"))

        assert [q.id for q in question_repository.get_all()] == [first.id, second.id]

    def test_get_questions_by_user(self, question_repository, user_repository, author):
        other = user_repository.create(User(user_name="bobby", password="pw-123456"))
        mine = question_repository.create(make_question(author.id))
        question_repository.create(make_question(other.id, title="Another question"))

        assert [q.id for q in question_repository.get_questions_by_user(author.id)] == [mine.id]


class TestUpdateAndDelete:
    """Test updating and deleting questions"""

    def test_update_changes_title_and_content(self, question_repository, author):
        question = question_repository.create(make_question(author.id))
        question.title = "How do outer joins work?"
        question.message.content = "Explain how a LEFT JOIN keeps unmatched rows."

        assert question_repository.update(question) is question

        loaded = question_repository.get_by_id(question.id)
        assert loaded.title == "How do outer joins work?"
        assert loaded.content == "Explain how a LEFT JOIN keeps unmatched rows."

    def test_update_unknown_question_returns_none(self, question_repository, author):
        question = make_question(author.id)
        question.id = 999
        question.message.id = 999

        assert question_repository.update(question) is None

    def test_update_helpers(self, question_repository, author):
        question = question_repository.create(make_question(author.id))

        question_repository.update_question_title(question.id, "Renamed question")
        question_repository.update_question_content(question.id, "Completely new body text.")

        loaded = question_repository.get_by_id(question.id)
        assert loaded.title == "Renamed question"
        assert loaded.content == "Completely new body text."
        assert question_repository.update_question_title(999, "Renamed question") is None

    def test_delete_keeps_body_message(self, question_repository, author, synced_connection):
        question = question_repository.create(make_question(author.id))

        question_repository.delete(question.id)

        assert question_repository.get_by_id(question.id) is None
        assert count_rows(synced_connection, "Messages") == 1

    def test_delete_removes_answers_and_replies(self, question_repository, answer_repository, author,
                                                synced_connection):
        """Test that deleting an answered question takes its answer threads with it"""
        question = question_repository.create(make_question(author.id))
        kept = question_repository.create(make_question(author.id, title="Still answered"))
        top = answer_repository.create(make_answer(author.id, question_id=question.id))
        answer_repository.create(make_answer(author.id, parent_answer_id=top.id))
        survivor = answer_repository.create(make_answer(author.id, question_id=kept.id))

        question_repository.delete(question.id)

        assert question_repository.get_by_id(question.id) is None
        assert [a.id for a in answer_repository.get_all()] == [survivor.id]
        assert count_rows(synced_connection, "Messages") == 5


class TestAnswerQueries:
    """Test queries that look at answers"""

    def test_unanswered_and_pinned(self, question_repository, message_repository, author, synced_connection):
        unanswered = question_repository.create(make_question(author.id, title="Nobody answered"))
        answered = question_repository.create(make_question(author.id, title="Answered, not pinned"))
        pinned = question_repository.create(make_question(author.id, title="Answered and pinned"))
        add_answer(synced_connection, message_repository, answered, author.id)
        add_answer(synced_connection, message_repository, pinned, author.id, pinned=True)

        assert [q.id for q in question_repository.get_unanswered_questions()] == [unanswered.id]
        assert [q.id for q in question_repository.get_questions_without_pinned_answer()] == [
            unanswered.id, answered.id
        ]
        assert question_repository.has_pinned_answer(pinned.id)
        assert not question_repository.has_pinned_answer(answered.id)


class TestSearch:
    """Test delegating search to an external function"""

    def test_search_questions(self, question_repository, author):
        question_repository.create(make_question(author.id, title="Joins in SQL"))
        question_repository.create(make_question(author.id, title="Python generators",
                                                 content="When should I use yield?"))

        def substring_search(items, keyword, text_of):
            return [item for item in items if keyword.lower() in text_of(item).lower()]

        results = question_repository.search_questions("yield", substring_search)

        assert [q.title for q in results] == ["Python generators"]

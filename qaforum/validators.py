"""Entity validation rules.

Each validator raises ValueError with a user-facing message on the first
problem it finds. Repositories call these before issuing any statement.
"""

import re
from typing import Optional

MIN_TITLE_LENGTH = 5
MAX_TITLE_LENGTH = 100
MIN_CONTENT_LENGTH = 10
MAX_CONTENT_LENGTH = 2000
MIN_USERNAME_LENGTH = 4
MAX_USERNAME_LENGTH = 16

_USERNAME_RE = re.compile(r'^[A-Za-z][A-Za-z0-9._-]*$')
_EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')


def _validate_length(value: Optional[str], minimum: int, maximum: int, message: str) -> None:
    if value is None or len(value) < minimum or len(value) > maximum:
        raise ValueError(message)


def validate_message_content(content: Optional[str]) -> None:
    if content is None or not content.strip():
        raise ValueError("Message content cannot be empty.")
    _validate_length(content, MIN_CONTENT_LENGTH, MAX_CONTENT_LENGTH,
                     f"Message content must be between {MIN_CONTENT_LENGTH} and "
                     f"{MAX_CONTENT_LENGTH} characters.")


def validate_message(message) -> None:
    if message is None:
        raise ValueError("Message cannot be null.")
    if message.user_id <= 0:
        raise ValueError("A valid userID is required for a message.")
    validate_message_content(message.content)


def validate_question(question) -> None:
    """Validate a question's own fields. The owned message is checked by the repository."""
    if question is None:
        raise ValueError("Question cannot be null.")
    if question.title is None or not question.title.strip():
        raise ValueError("Question title cannot be empty.")
    _validate_length(question.title, MIN_TITLE_LENGTH, MAX_TITLE_LENGTH,
                     f"Question title must be between {MIN_TITLE_LENGTH} and "
                     f"{MAX_TITLE_LENGTH} characters.")


def validate_username(user_name: Optional[str]) -> None:
    if user_name is None or not user_name.strip():
        raise ValueError("Username cannot be empty.")
    _validate_length(user_name, MIN_USERNAME_LENGTH, MAX_USERNAME_LENGTH,
                     f"Username must be between {MIN_USERNAME_LENGTH} and "
                     f"{MAX_USERNAME_LENGTH} characters.")
    if not _USERNAME_RE.match(user_name):
        raise ValueError("Username must start with a letter and contain only letters, "
                         "digits, '.', '_' or '-'.")


def validate_email(email: Optional[str]) -> None:
    if email is not None and not _EMAIL_RE.match(email):
        raise ValueError("Email address is not valid.")


def validate_user(user) -> None:
    if user is None:
        raise ValueError("User cannot be null.")
    validate_username(user.user_name)
    validate_email(user.email)
    if not user.password:
        raise ValueError("Password cannot be empty.")


def validate_answer(answer) -> None:
    """Validate an answer and its body. It must reference a question or a parent answer, not both."""
    if answer is None:
        raise ValueError("Answer cannot be null.")
    if answer.message is None:
        raise ValueError("Answer must have a Message")
    if answer.user_id is None or answer.user_id <= 0:
        raise ValueError("A valid userID is required for an answer.")
    if answer.content is None or not answer.content.strip():
        raise ValueError("Answer content cannot be empty.")

    has_question = answer.question_id is not None
    has_parent = answer.parent_answer_id is not None
    if has_question and has_parent:
        raise ValueError("An answer must reference either a question OR another answer, not both.")
    if not has_question and not has_parent:
        raise ValueError("An answer must reference either a question OR another answer.")

    _validate_length(answer.content, MIN_CONTENT_LENGTH, MAX_CONTENT_LENGTH,
                     f"Answer content must be between {MIN_CONTENT_LENGTH} and "
                     f"{MAX_CONTENT_LENGTH} characters.")

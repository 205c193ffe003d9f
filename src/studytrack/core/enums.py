"""Closed vocabularies used across the data model."""

from enum import Enum
from typing import TypeVar

from studytrack.core.errors import InvalidArgumentError

E = TypeVar("E", bound=Enum)


class ResourceType(str, Enum):
    """Kinds of resource a bookmark or note can point at."""

    ARTICLE = "article"
    TOPIC = "topic"
    QUESTION = "question"


class Difficulty(str, Enum):
    """Difficulty tag shared by topics, questions and quizzes."""

    BASIC = "basic"
    ADVANCED = "advanced"
    DEEP = "deep"


class ActivityType(str, Enum):
    """Activity tags written by the server itself.

    The activity log accepts any tag; these are the ones the API emits.
    """

    QUIZ_COMPLETED = "quiz_completed"
    BOOKMARK_ADDED = "bookmark_added"
    BOOKMARK_REMOVED = "bookmark_removed"
    NOTE_ADDED = "note_added"
    NOTE_UPDATED = "note_updated"
    NOTE_DELETED = "note_deleted"
    STUDY_PROGRESS = "study_progress"


def coerce_enum(enum_cls: type[E], value: E | str) -> E:
    """Convert a raw value to a member of enum_cls.

    Raises:
        InvalidArgumentError: value is not a member
    """
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise InvalidArgumentError(
            f"Invalid {enum_cls.__name__} '{value}' (expected one of: {allowed})"
        ) from None

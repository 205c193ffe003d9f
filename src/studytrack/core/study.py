"""Study-tracking use cases that span several tables.

Each use case performs its primary write in one transaction, then appends
an activity-log entry in a separate, best-effort transaction. A failed
activity write is logged and never undoes or fails the primary write.
"""

from __future__ import annotations

import sqlite3
from typing import Any

import structlog

from studytrack.core.enums import ActivityType, Difficulty, ResourceType, coerce_enum
from studytrack.core.errors import StudyTrackError
from studytrack.db.activity_repository import ActivityRecord, log_activity
from studytrack.db.bookmarks_repository import (
    BookmarkRecord,
    create_bookmark,
    is_bookmarked,
    remove_bookmark,
)
from studytrack.db.database import Database
from studytrack.db.notes_repository import NoteRecord, create_note, delete_note, update_note
from studytrack.db.progress_repository import ProgressRecord, upsert_topic_progress
from studytrack.db.quiz_repository import QuizAttemptRecord, create_quiz_attempt
from studytrack.db.users_repository import accumulate_study_minutes

logger = structlog.get_logger(__name__)


def log_activity_best_effort(
    db: Database,
    user_id: str,
    activity_type: ActivityType,
    resource_type: str | None = None,
    resource_id: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> ActivityRecord | None:
    """Append an activity entry in its own transaction.

    Returns:
        The new entry, or None if the write failed (the failure is logged)
    """
    try:
        with db.transaction() as conn:
            return log_activity(
                conn, user_id, activity_type, resource_type, resource_id, metadata
            )
    except (sqlite3.Error, StudyTrackError) as e:
        logger.warning(
            "activity.log_failed",
            user_id=user_id,
            activity_type=activity_type.value,
            resource_type=resource_type,
            resource_id=resource_id,
            error=str(e),
        )
        return None


# =============================================================================
# PROGRESS
# =============================================================================


def record_study_session(
    db: Database,
    user_id: str,
    topic_id: str,
    completion_percentage: float,
    time_spent_minutes: int,
) -> ProgressRecord:
    """Record time spent on a topic.

    The topic progress row and the user's total study minutes are updated
    in one transaction: both apply or neither does.

    Raises:
        InvalidArgumentError: Percentage outside [0, 100] or negative minutes
        NotFoundError: User or topic does not exist
    """
    with db.transaction() as conn:
        progress = upsert_topic_progress(
            conn, user_id, topic_id, completion_percentage, time_spent_minutes
        )
        accumulate_study_minutes(conn, user_id, time_spent_minutes)

    logger.info(
        "study.session_recorded",
        user_id=user_id,
        topic_id=topic_id,
        minutes=time_spent_minutes,
        completion_percentage=progress.completion_percentage,
    )

    log_activity_best_effort(
        db,
        user_id,
        ActivityType.STUDY_PROGRESS,
        ResourceType.TOPIC.value,
        topic_id,
        {
            "time_spent": time_spent_minutes,
            "completion_percentage": completion_percentage,
        },
    )
    return progress


# =============================================================================
# QUIZZES
# =============================================================================


def submit_quiz_attempt(
    db: Database,
    user_id: str,
    question_ids: list[str],
    answers: list[int | None],
    score: int,
    total_questions: int,
    difficulty: Difficulty | str,
    subjects: list[str],
) -> QuizAttemptRecord:
    """Store a finished quiz and log it to the activity feed."""
    with db.transaction() as conn:
        attempt = create_quiz_attempt(
            conn,
            user_id=user_id,
            question_ids=question_ids,
            answers=answers,
            score=score,
            total_questions=total_questions,
            difficulty=difficulty,
            subjects=subjects,
        )

    log_activity_best_effort(
        db,
        user_id,
        ActivityType.QUIZ_COMPLETED,
        "quiz",
        attempt.id,
        {
            "score": attempt.score,
            "total_questions": attempt.total_questions,
            "difficulty": attempt.difficulty,
        },
    )
    return attempt


# =============================================================================
# BOOKMARKS
# =============================================================================


def add_bookmark(
    db: Database,
    user_id: str,
    resource_type: ResourceType | str,
    resource_id: str,
) -> BookmarkRecord:
    """Bookmark a resource; re-adding an existing bookmark returns it unchanged."""
    kind = coerce_enum(ResourceType, resource_type)

    with db.transaction() as conn:
        existed = is_bookmarked(conn, user_id, kind, resource_id)
        bookmark = create_bookmark(conn, user_id, kind, resource_id)

    if not existed:
        log_activity_best_effort(
            db, user_id, ActivityType.BOOKMARK_ADDED, kind.value, resource_id
        )
    return bookmark


def drop_bookmark(
    db: Database,
    user_id: str,
    resource_type: ResourceType | str,
    resource_id: str,
) -> bool:
    """Remove a bookmark if present.

    Returns:
        True if a bookmark was removed
    """
    kind = coerce_enum(ResourceType, resource_type)

    with db.transaction() as conn:
        removed = remove_bookmark(conn, user_id, kind, resource_id)

    if removed:
        log_activity_best_effort(
            db, user_id, ActivityType.BOOKMARK_REMOVED, kind.value, resource_id
        )
    return removed


# =============================================================================
# NOTES
# =============================================================================


def add_note(
    db: Database,
    user_id: str,
    resource_type: ResourceType | str,
    resource_id: str,
    content: str,
    title: str | None = None,
) -> NoteRecord:
    with db.transaction() as conn:
        note = create_note(conn, user_id, resource_type, resource_id, content, title)

    log_activity_best_effort(
        db, user_id, ActivityType.NOTE_ADDED, note.resource_type, note.resource_id
    )
    return note


def edit_note(
    db: Database,
    user_id: str,
    note_id: str,
    content: str,
    title: str | None = None,
) -> NoteRecord:
    with db.transaction() as conn:
        note = update_note(conn, note_id, user_id, content, title)

    log_activity_best_effort(
        db, user_id, ActivityType.NOTE_UPDATED, note.resource_type, note.resource_id
    )
    return note


def remove_note(db: Database, user_id: str, note_id: str) -> None:
    with db.transaction() as conn:
        note = delete_note(conn, note_id, user_id)

    log_activity_best_effort(
        db, user_id, ActivityType.NOTE_DELETED, note.resource_type, note.resource_id
    )

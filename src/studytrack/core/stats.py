"""Progress statistics for the dashboard and profile views."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from studytrack.core.errors import NotFoundError
from studytrack.db.activity_repository import get_activity_since
from studytrack.db.bookmarks_repository import count_user_bookmarks
from studytrack.db.database import Database
from studytrack.db.notes_repository import count_user_notes
from studytrack.db.progress_repository import SubjectCompletion, get_subject_completion
from studytrack.db.quiz_repository import get_quiz_summary
from studytrack.db.users_repository import get_user

# Days covered by the activity histogram
ACTIVITY_WINDOW_DAYS = 7


@dataclass
class ProgressStats:
    """Aggregated view of a user's study record."""

    total_attempts: int
    total_questions: int
    correct_answers: int
    average_score: int
    best_score: int
    study_streak: int
    total_study_minutes: int
    bookmark_count: int
    note_count: int
    subjects: list[SubjectCompletion] = field(default_factory=list)
    weekly_activity: list[int] = field(default_factory=list)


def _percent(ratio: float) -> int:
    """Ratio as a whole percentage, halves rounded up."""
    return math.floor(ratio * 100 + 0.5)


def get_progress_stats(
    db: Database, user_id: str, now: datetime | None = None
) -> ProgressStats:
    """Compute quiz, study-time and activity statistics for a user.

    ``average_score`` is correct answers over all questions answered, not
    a mean of per-attempt scores. ``weekly_activity`` holds one count per
    day for the last seven days, oldest first, today last.

    Raises:
        NotFoundError: User does not exist
    """
    now = now or datetime.now(timezone.utc)
    since = now - timedelta(days=ACTIVITY_WINDOW_DAYS)

    with db.connect() as conn:
        user = get_user(conn, user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        quiz = get_quiz_summary(conn, user_id)
        bookmark_count = count_user_bookmarks(conn, user_id)
        note_count = count_user_notes(conn, user_id)
        subjects = get_subject_completion(conn, user_id)
        recent = get_activity_since(conn, user_id, since.isoformat())

    weekly = [0] * ACTIVITY_WINDOW_DAYS
    for entry in recent:
        age = now - datetime.fromisoformat(entry.created_at)
        days_ago = math.floor(age.total_seconds() / 86400)
        if 0 <= days_ago < ACTIVITY_WINDOW_DAYS:
            weekly[ACTIVITY_WINDOW_DAYS - 1 - days_ago] += 1

    average = quiz.correct_answers / quiz.total_questions if quiz.total_questions else 0.0

    return ProgressStats(
        total_attempts=quiz.total_attempts,
        total_questions=quiz.total_questions,
        correct_answers=quiz.correct_answers,
        average_score=_percent(average),
        best_score=_percent(quiz.best_ratio),
        study_streak=user.streak_days,
        total_study_minutes=user.total_study_minutes,
        bookmark_count=bookmark_count,
        note_count=note_count,
        subjects=subjects,
        weekly_activity=weekly,
    )

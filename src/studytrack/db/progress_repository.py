"""Repository functions for per-topic study progress.

One row per (user_id, topic_id). An update replaces the completion
percentage and adds to the accumulated time; both happen in a single
INSERT ... ON CONFLICT statement so concurrent updates never lose time.
"""

from __future__ import annotations

import math
import sqlite3
from dataclasses import dataclass

import structlog

from studytrack.core.errors import InvalidArgumentError, NotFoundError
from studytrack.db.database import new_id, utc_now
from studytrack.db.users_repository import require_user

logger = structlog.get_logger(__name__)


@dataclass
class ProgressRecord:
    """User progress record from database."""

    id: str
    user_id: str
    topic_id: str
    completion_percentage: float
    total_time_spent: int
    last_studied_at: str | None
    created_at: str
    updated_at: str


@dataclass
class SubjectCompletion:
    """Average completion of one subject's topics for a user."""

    subject_id: str
    subject_name: str
    topic_count: int
    completion_percentage: float


def get_user_progress(conn: sqlite3.Connection, user_id: str) -> list[ProgressRecord]:
    """Get all progress rows of a user, most recently studied first."""
    rows = conn.execute(
        """
        SELECT * FROM user_progress
        WHERE user_id = ?
        ORDER BY last_studied_at DESC, rowid DESC
        """,
        (user_id,),
    ).fetchall()
    return [_row_to_record(row) for row in rows]


def get_topic_progress(
    conn: sqlite3.Connection, user_id: str, topic_id: str
) -> ProgressRecord | None:
    row = conn.execute(
        "SELECT * FROM user_progress WHERE user_id = ? AND topic_id = ?",
        (user_id, topic_id),
    ).fetchone()
    if row is None:
        return None
    return _row_to_record(row)


def upsert_topic_progress(
    conn: sqlite3.Connection,
    user_id: str,
    topic_id: str,
    completion_percentage: float,
    time_spent_minutes: int,
) -> ProgressRecord:
    """Record a study session on a topic.

    Creates the (user, topic) row on first use. Afterwards the completion
    percentage is overwritten (last write wins) and the time spent is added
    to the running total.

    Args:
        conn: Open connection (inside a write transaction)
        user_id: Owner of the progress row
        topic_id: Topic studied
        completion_percentage: New completion, 0-100
        time_spent_minutes: Minutes to add, >= 0

    Returns:
        The resulting progress row

    Raises:
        InvalidArgumentError: Percentage outside [0, 100] or negative minutes
        NotFoundError: User or topic does not exist
    """
    if not (
        math.isfinite(completion_percentage) and 0 <= completion_percentage <= 100
    ):
        raise InvalidArgumentError("completion_percentage must be between 0 and 100")
    if time_spent_minutes < 0:
        raise InvalidArgumentError("time_spent_minutes must be >= 0")

    require_user(conn, user_id)
    row = conn.execute("SELECT 1 FROM topics WHERE id = ?", (topic_id,)).fetchone()
    if row is None:
        raise NotFoundError("Topic", topic_id)

    now = utc_now()
    conn.execute(
        """
        INSERT INTO user_progress (
            id, user_id, topic_id, completion_percentage, total_time_spent,
            last_studied_at, created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(user_id, topic_id) DO UPDATE SET
            completion_percentage = excluded.completion_percentage,
            total_time_spent = user_progress.total_time_spent + excluded.total_time_spent,
            last_studied_at = excluded.last_studied_at,
            updated_at = excluded.updated_at
        """,
        (
            new_id(),
            user_id,
            topic_id,
            float(completion_percentage),
            time_spent_minutes,
            now,
            now,
            now,
        ),
    )

    row = conn.execute(
        "SELECT * FROM user_progress WHERE user_id = ? AND topic_id = ?",
        (user_id, topic_id),
    ).fetchone()
    record = _row_to_record(row)

    logger.debug(
        "progress.upserted",
        user_id=user_id,
        topic_id=topic_id,
        completion_percentage=record.completion_percentage,
        total_time_spent=record.total_time_spent,
    )
    return record


def get_subject_completion(
    conn: sqlite3.Connection, user_id: str
) -> list[SubjectCompletion]:
    """Average completion per subject over all of its topics.

    Topics the user never studied count as 0%. Subjects without topics
    report 0%.
    """
    rows = conn.execute(
        """
        SELECT
            s.id AS subject_id,
            s.name AS subject_name,
            COUNT(t.id) AS topic_count,
            COALESCE(SUM(p.completion_percentage), 0) AS completion_sum
        FROM subjects s
        LEFT JOIN topics t ON t.subject_id = s.id
        LEFT JOIN user_progress p ON p.topic_id = t.id AND p.user_id = ?
        GROUP BY s.id
        ORDER BY s.order_index, s.created_at
        """,
        (user_id,),
    ).fetchall()

    return [
        SubjectCompletion(
            subject_id=row["subject_id"],
            subject_name=row["subject_name"],
            topic_count=row["topic_count"],
            completion_percentage=(
                round(row["completion_sum"] / row["topic_count"], 1)
                if row["topic_count"]
                else 0.0
            ),
        )
        for row in rows
    ]


def _row_to_record(row: sqlite3.Row) -> ProgressRecord:
    return ProgressRecord(
        id=row["id"],
        user_id=row["user_id"],
        topic_id=row["topic_id"],
        completion_percentage=row["completion_percentage"],
        total_time_spent=row["total_time_spent"],
        last_studied_at=row["last_studied_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )

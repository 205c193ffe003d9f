"""Repository functions for quiz attempts.

Attempts are immutable: there is no update or delete.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

import structlog

from studytrack.core.enums import Difficulty, coerce_enum
from studytrack.core.errors import InvalidArgumentError, ValidationError
from studytrack.db.database import dump_json, load_json, new_id, utc_now
from studytrack.db.users_repository import require_user

logger = structlog.get_logger(__name__)


@dataclass
class QuizAttemptRecord:
    """Quiz attempt record from database."""

    id: str
    user_id: str
    question_ids: list[str]
    answers: list[int | None]
    score: int
    total_questions: int
    difficulty: str
    subjects: list[str]
    completed_at: str


@dataclass
class QuizSummary:
    """Totals over every attempt of a user."""

    total_attempts: int
    total_questions: int
    correct_answers: int
    best_ratio: float


def create_quiz_attempt(
    conn: sqlite3.Connection,
    user_id: str,
    question_ids: list[str],
    answers: list[int | None],
    score: int,
    total_questions: int,
    difficulty: Difficulty | str,
    subjects: list[str],
) -> QuizAttemptRecord:
    """Store a completed quiz run.

    ``answers[i]`` is the option chosen for ``question_ids[i]`` (None when
    skipped), so both lists must have the same length.

    Raises:
        ValidationError: question_ids and answers differ in length
        InvalidArgumentError: score outside [0, total_questions]
        NotFoundError: User does not exist
    """
    if len(question_ids) != len(answers):
        raise ValidationError(
            f"question_ids has {len(question_ids)} entries but answers has {len(answers)}"
        )
    if total_questions < 0:
        raise InvalidArgumentError("total_questions must be >= 0")
    if not 0 <= score <= total_questions:
        raise InvalidArgumentError(
            f"score {score} must be between 0 and total_questions ({total_questions})"
        )
    level = coerce_enum(Difficulty, difficulty).value
    require_user(conn, user_id)

    record = QuizAttemptRecord(
        id=new_id(),
        user_id=user_id,
        question_ids=list(question_ids),
        answers=list(answers),
        score=score,
        total_questions=total_questions,
        difficulty=level,
        subjects=list(subjects),
        completed_at=utc_now(),
    )
    conn.execute(
        """
        INSERT INTO quiz_attempts (
            id, user_id, question_ids, answers, score, total_questions,
            difficulty, subjects, completed_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            record.id,
            record.user_id,
            dump_json(record.question_ids),
            dump_json(record.answers),
            record.score,
            record.total_questions,
            record.difficulty,
            dump_json(record.subjects),
            record.completed_at,
        ),
    )

    logger.debug(
        "quiz.attempt_created",
        attempt_id=record.id,
        user_id=user_id,
        score=score,
        total_questions=total_questions,
    )
    return record


def get_user_quiz_attempts(
    conn: sqlite3.Connection, user_id: str, limit: int = 20
) -> list[QuizAttemptRecord]:
    """Get a user's attempts, most recent first."""
    if limit < 0:
        raise InvalidArgumentError("limit must be >= 0")

    rows = conn.execute(
        """
        SELECT * FROM quiz_attempts
        WHERE user_id = ?
        ORDER BY completed_at DESC, rowid DESC
        LIMIT ?
        """,
        (user_id, limit),
    ).fetchall()
    return [_row_to_record(row) for row in rows]


def get_quiz_summary(conn: sqlite3.Connection, user_id: str) -> QuizSummary:
    row = conn.execute(
        """
        SELECT
            COUNT(*) AS total_attempts,
            COALESCE(SUM(total_questions), 0) AS total_questions,
            COALESCE(SUM(score), 0) AS correct_answers,
            COALESCE(
                MAX(CASE WHEN total_questions > 0
                    THEN CAST(score AS REAL) / total_questions END),
                0
            ) AS best_ratio
        FROM quiz_attempts
        WHERE user_id = ?
        """,
        (user_id,),
    ).fetchone()
    return QuizSummary(
        total_attempts=row["total_attempts"],
        total_questions=row["total_questions"],
        correct_answers=row["correct_answers"],
        best_ratio=row["best_ratio"],
    )


def _row_to_record(row: sqlite3.Row) -> QuizAttemptRecord:
    return QuizAttemptRecord(
        id=row["id"],
        user_id=row["user_id"],
        question_ids=load_json(row["question_ids"]),
        answers=load_json(row["answers"]),
        score=row["score"],
        total_questions=row["total_questions"],
        difficulty=row["difficulty"],
        subjects=load_json(row["subjects"]),
        completed_at=row["completed_at"],
    )

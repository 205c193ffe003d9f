"""Repository functions for practice questions."""

from __future__ import annotations

import random
import sqlite3
from dataclasses import dataclass

import structlog

from studytrack.core.enums import Difficulty, coerce_enum
from studytrack.core.errors import InvalidArgumentError, NotFoundError
from studytrack.db.database import dump_json, load_json, new_id, utc_now

logger = structlog.get_logger(__name__)


@dataclass
class QuestionRecord:
    """Question record from database."""

    id: str
    topic_id: str
    question: str
    options: list[str]
    correct_option_index: int
    explanation: str
    difficulty: str
    is_from_current_affairs: bool
    created_at: str


def get_question(conn: sqlite3.Connection, question_id: str) -> QuestionRecord | None:
    row = conn.execute("SELECT * FROM questions WHERE id = ?", (question_id,)).fetchone()
    if row is None:
        return None
    return row_to_question(row)


def get_questions_by_topic(
    conn: sqlite3.Connection,
    topic_id: str,
    difficulty: Difficulty | str | None = None,
) -> list[QuestionRecord]:
    """Get the questions of a topic, optionally filtered by difficulty."""
    sql = "SELECT * FROM questions WHERE topic_id = ?"
    params: list[str] = [topic_id]
    if difficulty is not None:
        sql += " AND difficulty = ?"
        params.append(coerce_enum(Difficulty, difficulty).value)
    sql += " ORDER BY created_at"

    rows = conn.execute(sql, params).fetchall()
    return [row_to_question(row) for row in rows]


def get_random_questions(
    conn: sqlite3.Connection,
    topic_ids: list[str],
    difficulty: Difficulty | str,
    limit: int,
    rng: random.Random | None = None,
) -> list[QuestionRecord]:
    """Sample up to ``limit`` distinct questions from the matching pool.

    The pool is every question whose topic is in topic_ids and whose
    difficulty matches. Sampling is uniform and without replacement; a
    smaller pool is returned whole (shuffled), an empty one as [].

    Args:
        conn: Open connection
        topic_ids: Topics to draw from
        difficulty: Required difficulty
        limit: Maximum number of questions
        rng: Random source (tests pass a seeded one)

    Raises:
        InvalidArgumentError: Negative limit
    """
    if limit < 0:
        raise InvalidArgumentError("limit must be >= 0")

    level = coerce_enum(Difficulty, difficulty).value
    topic_ids = list(dict.fromkeys(topic_ids))
    if not topic_ids or limit == 0:
        return []

    placeholders = ", ".join("?" for _ in topic_ids)
    rows = conn.execute(
        f"""
        SELECT * FROM questions
        WHERE topic_id IN ({placeholders}) AND difficulty = ?
        ORDER BY id
        """,
        [*topic_ids, level],
    ).fetchall()

    rng = rng or random.Random()
    picked = rng.sample(rows, min(limit, len(rows)))

    logger.debug(
        "questions.sampled",
        pool=len(rows),
        picked=len(picked),
        difficulty=level,
    )
    return [row_to_question(row) for row in picked]


def create_question(
    conn: sqlite3.Connection,
    topic_id: str,
    question: str,
    options: list[str],
    correct_option_index: int,
    explanation: str,
    difficulty: Difficulty | str = Difficulty.BASIC,
    is_from_current_affairs: bool = False,
) -> QuestionRecord:
    """Insert a new question and return it.

    Raises:
        NotFoundError: Topic does not exist
        InvalidArgumentError: Fewer than two options or answer index out of range
    """
    if len(options) < 2:
        raise InvalidArgumentError("A question needs at least two options")
    if not 0 <= correct_option_index < len(options):
        raise InvalidArgumentError(
            f"correct_option_index {correct_option_index} out of range for "
            f"{len(options)} options"
        )
    row = conn.execute("SELECT 1 FROM topics WHERE id = ?", (topic_id,)).fetchone()
    if row is None:
        raise NotFoundError("Topic", topic_id)

    record = QuestionRecord(
        id=new_id(),
        topic_id=topic_id,
        question=question,
        options=list(options),
        correct_option_index=correct_option_index,
        explanation=explanation,
        difficulty=coerce_enum(Difficulty, difficulty).value,
        is_from_current_affairs=is_from_current_affairs,
        created_at=utc_now(),
    )
    conn.execute(
        """
        INSERT INTO questions (
            id, topic_id, question, options, correct_option_index,
            explanation, difficulty, is_from_current_affairs, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            record.id,
            record.topic_id,
            record.question,
            dump_json(record.options),
            record.correct_option_index,
            record.explanation,
            record.difficulty,
            int(record.is_from_current_affairs),
            record.created_at,
        ),
    )

    logger.debug("questions.created", question_id=record.id, topic_id=topic_id)
    return record


def row_to_question(row: sqlite3.Row) -> QuestionRecord:
    return QuestionRecord(
        id=row["id"],
        topic_id=row["topic_id"],
        question=row["question"],
        options=load_json(row["options"]),
        correct_option_index=row["correct_option_index"],
        explanation=row["explanation"],
        difficulty=row["difficulty"],
        is_from_current_affairs=bool(row["is_from_current_affairs"]),
        created_at=row["created_at"],
    )

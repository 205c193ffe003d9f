"""Repository functions for the syllabus: subjects and topics.

Topics belong to one subject and may hang under a parent topic of the same
subject. Parent links are checked on every write so the hierarchy stays a
forest.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

import structlog

from studytrack.core.enums import Difficulty, coerce_enum
from studytrack.core.errors import InvalidArgumentError, NotFoundError
from studytrack.db.database import new_id, utc_now

logger = structlog.get_logger(__name__)


@dataclass
class SubjectRecord:
    """Subject record from database."""

    id: str
    name: str
    description: str | None
    icon: str
    color: str
    order_index: int
    created_at: str


@dataclass
class TopicRecord:
    """Topic record from database."""

    id: str
    subject_id: str
    parent_topic_id: str | None
    title: str
    description: str | None
    content: str | None
    order_index: int
    estimated_read_time: int | None
    difficulty: str
    created_at: str


# =============================================================================
# SUBJECTS
# =============================================================================


def get_subjects(conn: sqlite3.Connection) -> list[SubjectRecord]:
    """Get all subjects in display order."""
    rows = conn.execute(
        "SELECT * FROM subjects ORDER BY order_index, created_at"
    ).fetchall()
    return [_row_to_subject(row) for row in rows]


def get_subject(conn: sqlite3.Connection, subject_id: str) -> SubjectRecord | None:
    row = conn.execute("SELECT * FROM subjects WHERE id = ?", (subject_id,)).fetchone()
    if row is None:
        return None
    return _row_to_subject(row)


def create_subject(
    conn: sqlite3.Connection,
    name: str,
    icon: str,
    color: str,
    order_index: int,
    description: str | None = None,
) -> SubjectRecord:
    """Insert a new subject and return it."""
    record = SubjectRecord(
        id=new_id(),
        name=name,
        description=description,
        icon=icon,
        color=color,
        order_index=order_index,
        created_at=utc_now(),
    )
    conn.execute(
        """
        INSERT INTO subjects (id, name, description, icon, color, order_index, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            record.id,
            record.name,
            record.description,
            record.icon,
            record.color,
            record.order_index,
            record.created_at,
        ),
    )

    logger.debug("subjects.created", subject_id=record.id, name=name)
    return record


# =============================================================================
# TOPICS
# =============================================================================


def get_topics_by_subject(
    conn: sqlite3.Connection, subject_id: str
) -> list[TopicRecord]:
    """Get all topics of a subject in display order."""
    rows = conn.execute(
        "SELECT * FROM topics WHERE subject_id = ? ORDER BY order_index, created_at",
        (subject_id,),
    ).fetchall()
    return [row_to_topic(row) for row in rows]


def get_topic(conn: sqlite3.Connection, topic_id: str) -> TopicRecord | None:
    row = conn.execute("SELECT * FROM topics WHERE id = ?", (topic_id,)).fetchone()
    if row is None:
        return None
    return row_to_topic(row)


def create_topic(
    conn: sqlite3.Connection,
    subject_id: str,
    title: str,
    order_index: int,
    parent_topic_id: str | None = None,
    description: str | None = None,
    content: str | None = None,
    estimated_read_time: int | None = None,
    difficulty: Difficulty | str = Difficulty.BASIC,
) -> TopicRecord:
    """Insert a new topic and return it.

    Raises:
        NotFoundError: Subject or parent topic does not exist
        InvalidArgumentError: Parent belongs to another subject
    """
    if get_subject(conn, subject_id) is None:
        raise NotFoundError("Subject", subject_id)
    if parent_topic_id is not None:
        _check_parent(conn, subject_id, parent_topic_id)

    record = TopicRecord(
        id=new_id(),
        subject_id=subject_id,
        parent_topic_id=parent_topic_id,
        title=title,
        description=description,
        content=content,
        order_index=order_index,
        estimated_read_time=estimated_read_time,
        difficulty=coerce_enum(Difficulty, difficulty).value,
        created_at=utc_now(),
    )
    conn.execute(
        """
        INSERT INTO topics (
            id, subject_id, parent_topic_id, title, description, content,
            order_index, estimated_read_time, difficulty, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            record.id,
            record.subject_id,
            record.parent_topic_id,
            record.title,
            record.description,
            record.content,
            record.order_index,
            record.estimated_read_time,
            record.difficulty,
            record.created_at,
        ),
    )

    logger.debug("topics.created", topic_id=record.id, subject_id=subject_id)
    return record


def set_topic_parent(
    conn: sqlite3.Connection, topic_id: str, parent_topic_id: str | None
) -> TopicRecord:
    """Move a topic under another parent, or to the top level with None.

    Raises:
        NotFoundError: Topic or parent does not exist
        InvalidArgumentError: Move would create a cycle or cross subjects
    """
    topic = get_topic(conn, topic_id)
    if topic is None:
        raise NotFoundError("Topic", topic_id)

    if parent_topic_id is not None:
        if parent_topic_id == topic_id:
            raise InvalidArgumentError("A topic cannot be its own parent")
        _check_parent(conn, topic.subject_id, parent_topic_id)
        if _is_ancestor(conn, ancestor_id=topic_id, topic_id=parent_topic_id):
            raise InvalidArgumentError(
                f"Topic '{parent_topic_id}' is a descendant of '{topic_id}'"
            )

    conn.execute(
        "UPDATE topics SET parent_topic_id = ? WHERE id = ?",
        (parent_topic_id, topic_id),
    )

    logger.debug("topics.reparented", topic_id=topic_id, parent_topic_id=parent_topic_id)

    topic.parent_topic_id = parent_topic_id
    return topic


def _check_parent(conn: sqlite3.Connection, subject_id: str, parent_topic_id: str) -> None:
    parent = get_topic(conn, parent_topic_id)
    if parent is None:
        raise NotFoundError("Topic", parent_topic_id)
    if parent.subject_id != subject_id:
        raise InvalidArgumentError(
            f"Parent topic '{parent_topic_id}' belongs to another subject"
        )


def _is_ancestor(conn: sqlite3.Connection, ancestor_id: str, topic_id: str) -> bool:
    """True if ancestor_id appears in the parent chain starting at topic_id."""
    # UNION (not UNION ALL) terminates even on a pre-existing cycle
    row = conn.execute(
        """
        WITH RECURSIVE chain(id, parent_topic_id) AS (
            SELECT id, parent_topic_id FROM topics WHERE id = ?
            UNION
            SELECT t.id, t.parent_topic_id
            FROM topics t JOIN chain c ON t.id = c.parent_topic_id
        )
        SELECT 1 FROM chain WHERE id = ?
        """,
        (topic_id, ancestor_id),
    ).fetchone()
    return row is not None


def _row_to_subject(row: sqlite3.Row) -> SubjectRecord:
    return SubjectRecord(
        id=row["id"],
        name=row["name"],
        description=row["description"],
        icon=row["icon"],
        color=row["color"],
        order_index=row["order_index"],
        created_at=row["created_at"],
    )


def row_to_topic(row: sqlite3.Row) -> TopicRecord:
    return TopicRecord(
        id=row["id"],
        subject_id=row["subject_id"],
        parent_topic_id=row["parent_topic_id"],
        title=row["title"],
        description=row["description"],
        content=row["content"],
        order_index=row["order_index"],
        estimated_read_time=row["estimated_read_time"],
        difficulty=row["difficulty"],
        created_at=row["created_at"],
    )

"""Repository functions for user notes.

Notes are owned by their user: every read and write is scoped by user_id,
so a note id alone never reaches another user's data.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

import structlog

from studytrack.core.enums import ResourceType, coerce_enum
from studytrack.core.errors import NotFoundError
from studytrack.db.database import new_id, utc_now
from studytrack.db.users_repository import require_user

logger = structlog.get_logger(__name__)


@dataclass
class NoteRecord:
    """Note record from database."""

    id: str
    user_id: str
    resource_type: str
    resource_id: str
    title: str | None
    content: str
    created_at: str
    updated_at: str


def get_user_notes(conn: sqlite3.Connection, user_id: str) -> list[NoteRecord]:
    """Get all notes of a user, most recently updated first."""
    rows = conn.execute(
        "SELECT * FROM notes WHERE user_id = ? ORDER BY updated_at DESC, rowid DESC",
        (user_id,),
    ).fetchall()
    return [_row_to_record(row) for row in rows]


def get_notes_by_resource(
    conn: sqlite3.Connection,
    user_id: str,
    resource_type: ResourceType | str,
    resource_id: str,
) -> list[NoteRecord]:
    """Get a user's notes on one resource, most recently updated first."""
    kind = coerce_enum(ResourceType, resource_type).value
    rows = conn.execute(
        """
        SELECT * FROM notes
        WHERE user_id = ? AND resource_type = ? AND resource_id = ?
        ORDER BY updated_at DESC, rowid DESC
        """,
        (user_id, kind, resource_id),
    ).fetchall()
    return [_row_to_record(row) for row in rows]


def get_note(conn: sqlite3.Connection, note_id: str, user_id: str) -> NoteRecord | None:
    row = conn.execute(
        "SELECT * FROM notes WHERE id = ? AND user_id = ?", (note_id, user_id)
    ).fetchone()
    if row is None:
        return None
    return _row_to_record(row)


def create_note(
    conn: sqlite3.Connection,
    user_id: str,
    resource_type: ResourceType | str,
    resource_id: str,
    content: str,
    title: str | None = None,
) -> NoteRecord:
    """Insert a new note and return it.

    Raises:
        NotFoundError: User does not exist
        InvalidArgumentError: Unknown resource type
    """
    kind = coerce_enum(ResourceType, resource_type).value
    require_user(conn, user_id)

    now = utc_now()
    record = NoteRecord(
        id=new_id(),
        user_id=user_id,
        resource_type=kind,
        resource_id=resource_id,
        title=title,
        content=content,
        created_at=now,
        updated_at=now,
    )
    conn.execute(
        """
        INSERT INTO notes (
            id, user_id, resource_type, resource_id, title, content, created_at, updated_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            record.id,
            record.user_id,
            record.resource_type,
            record.resource_id,
            record.title,
            record.content,
            record.created_at,
            record.updated_at,
        ),
    )

    logger.debug("notes.created", note_id=record.id, user_id=user_id)
    return record


def update_note(
    conn: sqlite3.Connection,
    note_id: str,
    user_id: str,
    content: str,
    title: str | None = None,
) -> NoteRecord:
    """Replace a note's content, and its title when one is given.

    Raises:
        NotFoundError: No such note for this user
    """
    cursor = conn.execute(
        """
        UPDATE notes
        SET content = ?, title = COALESCE(?, title), updated_at = ?
        WHERE id = ? AND user_id = ?
        """,
        (content, title, utc_now(), note_id, user_id),
    )
    if cursor.rowcount == 0:
        raise NotFoundError("Note", note_id)

    logger.debug("notes.updated", note_id=note_id, user_id=user_id)

    row = conn.execute("SELECT * FROM notes WHERE id = ?", (note_id,)).fetchone()
    return _row_to_record(row)


def delete_note(conn: sqlite3.Connection, note_id: str, user_id: str) -> NoteRecord:
    """Delete a note and return what was deleted.

    Raises:
        NotFoundError: No such note for this user
    """
    note = get_note(conn, note_id, user_id)
    if note is None:
        raise NotFoundError("Note", note_id)

    conn.execute("DELETE FROM notes WHERE id = ? AND user_id = ?", (note_id, user_id))

    logger.debug("notes.deleted", note_id=note_id, user_id=user_id)
    return note


def count_user_notes(conn: sqlite3.Connection, user_id: str) -> int:
    row = conn.execute(
        "SELECT COUNT(*) AS n FROM notes WHERE user_id = ?", (user_id,)
    ).fetchone()
    return row["n"]


def _row_to_record(row: sqlite3.Row) -> NoteRecord:
    return NoteRecord(
        id=row["id"],
        user_id=row["user_id"],
        resource_type=row["resource_type"],
        resource_id=row["resource_id"],
        title=row["title"],
        content=row["content"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )

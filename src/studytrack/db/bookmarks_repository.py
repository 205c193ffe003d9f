"""Repository functions for user bookmarks.

A bookmark is keyed by (user_id, resource_type, resource_id). The key is
backed by a unique index and creation is an upsert, so a resource is
bookmarked at most once per user.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass

import structlog

from studytrack.core.enums import ResourceType, coerce_enum
from studytrack.db.database import new_id, utc_now
from studytrack.db.users_repository import require_user

logger = structlog.get_logger(__name__)


@dataclass
class BookmarkRecord:
    """Bookmark record from database."""

    id: str
    user_id: str
    resource_type: str
    resource_id: str
    created_at: str


def get_user_bookmarks(conn: sqlite3.Connection, user_id: str) -> list[BookmarkRecord]:
    """Get a user's bookmarks, most recent first."""
    rows = conn.execute(
        "SELECT * FROM bookmarks WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
        (user_id,),
    ).fetchall()
    return [_row_to_record(row) for row in rows]


def create_bookmark(
    conn: sqlite3.Connection,
    user_id: str,
    resource_type: ResourceType | str,
    resource_id: str,
) -> BookmarkRecord:
    """Bookmark a resource, returning the existing bookmark if already there.

    Raises:
        NotFoundError: User does not exist
        InvalidArgumentError: Unknown resource type
    """
    kind = coerce_enum(ResourceType, resource_type).value
    require_user(conn, user_id)

    cursor = conn.execute(
        """
        INSERT INTO bookmarks (id, user_id, resource_type, resource_id, created_at)
        VALUES (?, ?, ?, ?, ?)
        ON CONFLICT(user_id, resource_type, resource_id) DO NOTHING
        """,
        (new_id(), user_id, kind, resource_id, utc_now()),
    )

    logger.debug(
        "bookmarks.created",
        user_id=user_id,
        resource_type=kind,
        resource_id=resource_id,
        existed=cursor.rowcount == 0,
    )

    row = conn.execute(
        """
        SELECT * FROM bookmarks
        WHERE user_id = ? AND resource_type = ? AND resource_id = ?
        """,
        (user_id, kind, resource_id),
    ).fetchone()
    return _row_to_record(row)


def remove_bookmark(
    conn: sqlite3.Connection,
    user_id: str,
    resource_type: ResourceType | str,
    resource_id: str,
) -> bool:
    """Remove a bookmark. Removing a missing bookmark is a no-op.

    Returns:
        True if a bookmark was deleted, False if there was none
    """
    kind = coerce_enum(ResourceType, resource_type).value
    cursor = conn.execute(
        """
        DELETE FROM bookmarks
        WHERE user_id = ? AND resource_type = ? AND resource_id = ?
        """,
        (user_id, kind, resource_id),
    )

    deleted = cursor.rowcount > 0
    if deleted:
        logger.debug(
            "bookmarks.removed",
            user_id=user_id,
            resource_type=kind,
            resource_id=resource_id,
        )
    return deleted


def is_bookmarked(
    conn: sqlite3.Connection,
    user_id: str,
    resource_type: ResourceType | str,
    resource_id: str,
) -> bool:
    kind = coerce_enum(ResourceType, resource_type).value
    return _get_bookmark(conn, user_id, kind, resource_id) is not None


def count_user_bookmarks(conn: sqlite3.Connection, user_id: str) -> int:
    row = conn.execute(
        "SELECT COUNT(*) AS n FROM bookmarks WHERE user_id = ?", (user_id,)
    ).fetchone()
    return row["n"]


def _get_bookmark(
    conn: sqlite3.Connection, user_id: str, kind: str, resource_id: str
) -> BookmarkRecord | None:
    row = conn.execute(
        """
        SELECT * FROM bookmarks
        WHERE user_id = ? AND resource_type = ? AND resource_id = ?
        """,
        (user_id, kind, resource_id),
    ).fetchone()
    if row is None:
        return None
    return _row_to_record(row)


def _row_to_record(row: sqlite3.Row) -> BookmarkRecord:
    return BookmarkRecord(
        id=row["id"],
        user_id=row["user_id"],
        resource_type=row["resource_type"],
        resource_id=row["resource_id"],
        created_at=row["created_at"],
    )

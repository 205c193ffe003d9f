"""Repository functions for the append-only user activity log."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any

import structlog

from studytrack.core.enums import ActivityType
from studytrack.core.errors import InvalidArgumentError
from studytrack.db.database import dump_json, load_json, new_id, utc_now
from studytrack.db.users_repository import require_user

logger = structlog.get_logger(__name__)


@dataclass
class ActivityRecord:
    """User activity record from database."""

    id: str
    user_id: str
    activity_type: str
    resource_type: str | None
    resource_id: str | None
    metadata: dict[str, Any] | None
    created_at: str


def log_activity(
    conn: sqlite3.Connection,
    user_id: str,
    activity_type: ActivityType | str,
    resource_type: str | None = None,
    resource_id: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> ActivityRecord:
    """Append an entry to the user's activity log.

    Raises:
        NotFoundError: User does not exist
    """
    require_user(conn, user_id)

    record = ActivityRecord(
        id=new_id(),
        user_id=user_id,
        activity_type=(
            activity_type.value
            if isinstance(activity_type, ActivityType)
            else activity_type
        ),
        resource_type=resource_type,
        resource_id=resource_id,
        metadata=metadata,
        created_at=utc_now(),
    )
    conn.execute(
        """
        INSERT INTO user_activity (
            id, user_id, activity_type, resource_type, resource_id, metadata, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        (
            record.id,
            record.user_id,
            record.activity_type,
            record.resource_type,
            record.resource_id,
            dump_json(record.metadata),
            record.created_at,
        ),
    )

    logger.debug(
        "activity.logged",
        user_id=user_id,
        activity_type=record.activity_type,
        resource_type=resource_type,
        resource_id=resource_id,
    )
    return record


def get_user_activity(
    conn: sqlite3.Connection, user_id: str, limit: int = 20
) -> list[ActivityRecord]:
    """Get a user's most recent activity entries, newest first."""
    if limit < 0:
        raise InvalidArgumentError("limit must be >= 0")

    rows = conn.execute(
        """
        SELECT * FROM user_activity
        WHERE user_id = ?
        ORDER BY created_at DESC, rowid DESC
        LIMIT ?
        """,
        (user_id, limit),
    ).fetchall()
    return [_row_to_record(row) for row in rows]


def get_activity_since(
    conn: sqlite3.Connection, user_id: str, since: str
) -> list[ActivityRecord]:
    """Get a user's activity entries created at or after ``since``."""
    rows = conn.execute(
        """
        SELECT * FROM user_activity
        WHERE user_id = ? AND created_at >= ?
        ORDER BY created_at, rowid
        """,
        (user_id, since),
    ).fetchall()
    return [_row_to_record(row) for row in rows]


def _row_to_record(row: sqlite3.Row) -> ActivityRecord:
    return ActivityRecord(
        id=row["id"],
        user_id=row["user_id"],
        activity_type=row["activity_type"],
        resource_type=row["resource_type"],
        resource_id=row["resource_id"],
        metadata=load_json(row["metadata"]),
        created_at=row["created_at"],
    )

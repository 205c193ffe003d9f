"""Repository functions for the users table.

Users are created on first authentication and never deleted. The study
minutes counter only grows, through ``accumulate_study_minutes``.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any

import structlog

from studytrack.core.errors import InvalidArgumentError, NotFoundError
from studytrack.db.database import new_id, utc_now

logger = structlog.get_logger(__name__)

# Columns a profile edit may touch
PROFILE_FIELDS = (
    "email",
    "first_name",
    "last_name",
    "profile_image_url",
    "streak_days",
)


@dataclass
class UserRecord:
    """User record from database."""

    id: str
    email: str | None
    first_name: str | None
    last_name: str | None
    profile_image_url: str | None
    streak_days: int
    total_study_minutes: int
    created_at: str
    updated_at: str


def get_user(conn: sqlite3.Connection, user_id: str) -> UserRecord | None:
    """Get user by ID.

    Returns:
        UserRecord if found, None otherwise
    """
    row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    if row is None:
        return None
    return _row_to_record(row)


def user_exists(conn: sqlite3.Connection, user_id: str) -> bool:
    row = conn.execute("SELECT 1 FROM users WHERE id = ?", (user_id,)).fetchone()
    return row is not None


def require_user(conn: sqlite3.Connection, user_id: str) -> None:
    """Raise NotFoundError unless the user exists."""
    if not user_exists(conn, user_id):
        raise NotFoundError("User", user_id)


def upsert_user(
    conn: sqlite3.Connection,
    user_id: str | None = None,
    **fields: Any,
) -> UserRecord:
    """Insert a user or update the given profile fields of an existing one.

    The id comes from the identity provider; a fresh one is generated when
    omitted. Fields passed as None are left untouched.

    Args:
        conn: Open connection (inside a write transaction)
        user_id: Identity-provider user id
        **fields: Any of PROFILE_FIELDS

    Raises:
        InvalidArgumentError: Unknown field, negative streak or email taken
    """
    unknown = set(fields) - set(PROFILE_FIELDS)
    if unknown:
        raise InvalidArgumentError(f"Unknown user fields: {sorted(unknown)}")

    values = {k: v for k, v in fields.items() if v is not None}
    if values.get("streak_days", 0) < 0:
        raise InvalidArgumentError("streak_days must be >= 0")

    user_id = user_id or new_id()
    now = utc_now()

    columns = ["id", *values.keys(), "created_at", "updated_at"]
    params = [user_id, *values.values(), now, now]
    updates = [f"{col} = excluded.{col}" for col in values]
    updates.append("updated_at = excluded.updated_at")

    try:
        conn.execute(
            f"""
            INSERT INTO users ({", ".join(columns)})
            VALUES ({", ".join("?" for _ in columns)})
            ON CONFLICT(id) DO UPDATE SET {", ".join(updates)}
            """,
            params,
        )
    except sqlite3.IntegrityError as e:
        raise InvalidArgumentError(f"Email '{values.get('email')}' is already in use") from e

    logger.debug("users.upserted", user_id=user_id, fields=sorted(values))

    row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
    return _row_to_record(row)


def accumulate_study_minutes(
    conn: sqlite3.Connection, user_id: str, minutes: int
) -> None:
    """Add minutes to the user's running study total.

    The increment is evaluated by SQLite in one statement, so concurrent
    calls never lose updates.

    Raises:
        NotFoundError: User does not exist
        InvalidArgumentError: minutes is negative
    """
    if minutes < 0:
        require_user(conn, user_id)
        raise InvalidArgumentError("minutes must be >= 0")

    cursor = conn.execute(
        """
        UPDATE users
        SET total_study_minutes = total_study_minutes + ?, updated_at = ?
        WHERE id = ?
        """,
        (minutes, utc_now(), user_id),
    )
    if cursor.rowcount == 0:
        raise NotFoundError("User", user_id)

    logger.debug("users.minutes_accumulated", user_id=user_id, minutes=minutes)


def _row_to_record(row: sqlite3.Row) -> UserRecord:
    """Convert database row to UserRecord."""
    return UserRecord(
        id=row["id"],
        email=row["email"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        profile_image_url=row["profile_image_url"],
        streak_days=row["streak_days"],
        total_study_minutes=row["total_study_minutes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )

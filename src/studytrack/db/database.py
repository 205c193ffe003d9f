"""SQLite store handle and schema management.

A single ``Database`` object is created at process start (API lifespan or CLI
command) and handed to every repository call. Repository functions take an
open connection, so callers can group several of them in one transaction.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator

import structlog

logger = structlog.get_logger(__name__)

# Default database location
DEFAULT_DB_PATH = Path("db/studytrack.db")


def new_id() -> str:
    """Generate an opaque entity id."""
    return str(uuid.uuid4())


def utc_now() -> str:
    """Current UTC time as ISO 8601 text (sorts lexicographically)."""
    return datetime.now(timezone.utc).isoformat()


def to_utc_text(value: datetime | str) -> str:
    """Normalize a timestamp to UTC ISO 8601 text.

    Naive values are taken to be UTC already.
    """
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def dump_json(value: Any) -> str | None:
    """Serialize a JSON column value."""
    if value is None:
        return None
    return json.dumps(value)


def load_json(value: str | None) -> Any:
    """Deserialize a JSON column value."""
    if value is None:
        return None
    return json.loads(value)


def _casefold(value: str | None) -> str | None:
    if value is None:
        return None
    return str(value).casefold()


class Database:
    """Handle on one SQLite database file."""

    def __init__(self, path: Path | None = None, timeout: float = 30.0):
        self.path = Path(path) if path is not None else DEFAULT_DB_PATH
        self.timeout = timeout

    def _open(self) -> sqlite3.Connection:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Autocommit at the driver level; transactions are opened explicitly.
        conn = sqlite3.connect(
            self.path,
            timeout=self.timeout,
            isolation_level=None,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        # SQLite's lower()/LIKE only fold ASCII
        conn.create_function("casefold", 1, _casefold, deterministic=True)
        return conn

    @contextmanager
    def connect(self) -> Generator[sqlite3.Connection, None, None]:
        """Open a connection inside a deferred transaction.

        Use for reads. Commits on success, rolls back on any exception.

        Example:
            with db.connect() as conn:
                rows = conn.execute("SELECT * FROM subjects").fetchall()
        """
        with self._transaction("BEGIN") as conn:
            yield conn

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Open a connection inside an immediate (write-locked) transaction.

        Use for every write so the lock is taken up front and concurrent
        writers wait on the busy timeout instead of failing mid-transaction.
        """
        with self._transaction("BEGIN IMMEDIATE") as conn:
            yield conn

    @contextmanager
    def _transaction(self, begin: str) -> Generator[sqlite3.Connection, None, None]:
        conn = self._open()
        try:
            conn.execute(begin)
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def init_schema(self) -> None:
        """Create all tables and indexes if they don't exist."""
        conn = self._open()
        try:
            conn.execute("PRAGMA journal_mode = WAL")
            conn.executescript(SCHEMA)
        finally:
            conn.close()

        logger.info("database.initialized", path=str(self.path))


SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT UNIQUE,
    first_name TEXT,
    last_name TEXT,
    profile_image_url TEXT,
    streak_days INTEGER NOT NULL DEFAULT 0 CHECK(streak_days >= 0),
    total_study_minutes INTEGER NOT NULL DEFAULT 0 CHECK(total_study_minutes >= 0),
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS subjects (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT,
    icon TEXT NOT NULL,
    color TEXT NOT NULL,
    order_index INTEGER NOT NULL,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS topics (
    id TEXT PRIMARY KEY,
    subject_id TEXT NOT NULL REFERENCES subjects(id),
    parent_topic_id TEXT REFERENCES topics(id),
    title TEXT NOT NULL,
    description TEXT,
    content TEXT,
    order_index INTEGER NOT NULL,
    estimated_read_time INTEGER,
    difficulty TEXT NOT NULL DEFAULT 'basic' CHECK(difficulty IN ('basic', 'advanced', 'deep')),
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS articles (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    content TEXT NOT NULL,
    summary TEXT NOT NULL,
    image_url TEXT,
    source TEXT,
    published_at TEXT NOT NULL,
    read_time INTEGER NOT NULL,
    is_featured INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS article_topics (
    id TEXT PRIMARY KEY,
    article_id TEXT NOT NULL REFERENCES articles(id),
    topic_id TEXT NOT NULL REFERENCES topics(id),
    UNIQUE(article_id, topic_id)
);

CREATE TABLE IF NOT EXISTS questions (
    id TEXT PRIMARY KEY,
    topic_id TEXT NOT NULL REFERENCES topics(id),
    question TEXT NOT NULL,
    options TEXT NOT NULL,
    correct_option_index INTEGER NOT NULL CHECK(correct_option_index >= 0),
    explanation TEXT NOT NULL,
    difficulty TEXT NOT NULL DEFAULT 'basic' CHECK(difficulty IN ('basic', 'advanced', 'deep')),
    is_from_current_affairs INTEGER NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL
);

-- resource_id is a convention-resolved reference, not a foreign key
CREATE TABLE IF NOT EXISTS bookmarks (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id),
    resource_type TEXT NOT NULL CHECK(resource_type IN ('article', 'topic', 'question')),
    resource_id TEXT NOT NULL,
    created_at TEXT NOT NULL,
    UNIQUE(user_id, resource_type, resource_id)
);

CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id),
    resource_type TEXT NOT NULL CHECK(resource_type IN ('article', 'topic', 'question')),
    resource_id TEXT NOT NULL,
    title TEXT,
    content TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS user_progress (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id),
    topic_id TEXT NOT NULL REFERENCES topics(id),
    completion_percentage REAL NOT NULL DEFAULT 0
        CHECK(completion_percentage >= 0 AND completion_percentage <= 100),
    total_time_spent INTEGER NOT NULL DEFAULT 0 CHECK(total_time_spent >= 0),
    last_studied_at TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    UNIQUE(user_id, topic_id)
);

CREATE TABLE IF NOT EXISTS quiz_attempts (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id),
    question_ids TEXT NOT NULL,
    answers TEXT NOT NULL,
    score INTEGER NOT NULL,
    total_questions INTEGER NOT NULL,
    difficulty TEXT NOT NULL,
    subjects TEXT NOT NULL,
    completed_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS user_activity (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL REFERENCES users(id),
    activity_type TEXT NOT NULL,
    resource_type TEXT,
    resource_id TEXT,
    metadata TEXT,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_topics_subject ON topics(subject_id, order_index);
CREATE INDEX IF NOT EXISTS idx_topics_parent ON topics(parent_topic_id);
CREATE INDEX IF NOT EXISTS idx_articles_published ON articles(published_at);
CREATE INDEX IF NOT EXISTS idx_article_topics_topic ON article_topics(topic_id);
CREATE INDEX IF NOT EXISTS idx_questions_topic ON questions(topic_id, difficulty);
CREATE INDEX IF NOT EXISTS idx_notes_resource ON notes(user_id, resource_type, resource_id);
CREATE INDEX IF NOT EXISTS idx_quiz_attempts_user ON quiz_attempts(user_id, completed_at);
CREATE INDEX IF NOT EXISTS idx_user_activity_user ON user_activity(user_id, created_at);
"""

"""Repository functions for current-affairs articles.

Articles link to syllabus topics through the article_topics join table.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime

import structlog

from studytrack.core.errors import InvalidArgumentError, NotFoundError
from studytrack.db.database import new_id, to_utc_text, utc_now

logger = structlog.get_logger(__name__)


@dataclass
class ArticleRecord:
    """Article record from database."""

    id: str
    title: str
    content: str
    summary: str
    image_url: str | None
    source: str | None
    published_at: str
    read_time: int
    is_featured: bool
    created_at: str


def get_articles(
    conn: sqlite3.Connection, limit: int = 20, offset: int = 0
) -> list[ArticleRecord]:
    """Get a page of articles, newest first.

    Raises:
        InvalidArgumentError: Negative limit or offset
    """
    if limit < 0 or offset < 0:
        raise InvalidArgumentError("limit and offset must be >= 0")

    rows = conn.execute(
        "SELECT * FROM articles ORDER BY published_at DESC, created_at DESC LIMIT ? OFFSET ?",
        (limit, offset),
    ).fetchall()
    return [row_to_article(row) for row in rows]


def get_featured_articles(conn: sqlite3.Connection, limit: int = 5) -> list[ArticleRecord]:
    """Get the most recent featured articles."""
    rows = conn.execute(
        """
        SELECT * FROM articles
        WHERE is_featured = 1
        ORDER BY published_at DESC, created_at DESC
        LIMIT ?
        """,
        (limit,),
    ).fetchall()
    return [row_to_article(row) for row in rows]


def get_article(conn: sqlite3.Connection, article_id: str) -> ArticleRecord | None:
    row = conn.execute("SELECT * FROM articles WHERE id = ?", (article_id,)).fetchone()
    if row is None:
        return None
    return row_to_article(row)


def get_articles_by_topic(conn: sqlite3.Connection, topic_id: str) -> list[ArticleRecord]:
    """Get articles linked to a topic, newest first."""
    rows = conn.execute(
        """
        SELECT a.* FROM articles a
        JOIN article_topics link ON link.article_id = a.id
        WHERE link.topic_id = ?
        ORDER BY a.published_at DESC, a.created_at DESC
        """,
        (topic_id,),
    ).fetchall()
    return [row_to_article(row) for row in rows]


def get_article_topic_ids(conn: sqlite3.Connection, article_id: str) -> list[str]:
    rows = conn.execute(
        "SELECT topic_id FROM article_topics WHERE article_id = ? ORDER BY topic_id",
        (article_id,),
    ).fetchall()
    return [row["topic_id"] for row in rows]


def create_article(
    conn: sqlite3.Connection,
    title: str,
    content: str,
    summary: str,
    published_at: datetime | str,
    read_time: int,
    image_url: str | None = None,
    source: str | None = None,
    is_featured: bool = False,
    topic_ids: list[str] | None = None,
) -> ArticleRecord:
    """Insert an article and link it to the given topics.

    Raises:
        NotFoundError: One of topic_ids does not exist
    """
    topic_ids = list(dict.fromkeys(topic_ids or []))
    for topic_id in topic_ids:
        row = conn.execute("SELECT 1 FROM topics WHERE id = ?", (topic_id,)).fetchone()
        if row is None:
            raise NotFoundError("Topic", topic_id)

    record = ArticleRecord(
        id=new_id(),
        title=title,
        content=content,
        summary=summary,
        image_url=image_url,
        source=source,
        published_at=to_utc_text(published_at),
        read_time=read_time,
        is_featured=is_featured,
        created_at=utc_now(),
    )
    conn.execute(
        """
        INSERT INTO articles (
            id, title, content, summary, image_url, source,
            published_at, read_time, is_featured, created_at
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        (
            record.id,
            record.title,
            record.content,
            record.summary,
            record.image_url,
            record.source,
            record.published_at,
            record.read_time,
            int(record.is_featured),
            record.created_at,
        ),
    )
    conn.executemany(
        "INSERT INTO article_topics (id, article_id, topic_id) VALUES (?, ?, ?)",
        [(new_id(), record.id, topic_id) for topic_id in topic_ids],
    )

    logger.debug("articles.created", article_id=record.id, topics=len(topic_ids))
    return record


def row_to_article(row: sqlite3.Row) -> ArticleRecord:
    return ArticleRecord(
        id=row["id"],
        title=row["title"],
        content=row["content"],
        summary=row["summary"],
        image_url=row["image_url"],
        source=row["source"],
        published_at=row["published_at"],
        read_time=row["read_time"],
        is_featured=bool(row["is_featured"]),
        created_at=row["created_at"],
    )

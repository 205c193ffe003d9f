"""Free-text search across articles, topics and questions."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field

import structlog

from studytrack.core.errors import InvalidArgumentError
from studytrack.db.articles_repository import ArticleRecord, row_to_article
from studytrack.db.questions_repository import QuestionRecord, row_to_question
from studytrack.db.syllabus_repository import TopicRecord, row_to_topic

logger = structlog.get_logger(__name__)

DEFAULT_SEARCH_LIMIT = 10


@dataclass
class SearchResults:
    """Matches grouped by entity kind."""

    articles: list[ArticleRecord] = field(default_factory=list)
    topics: list[TopicRecord] = field(default_factory=list)
    questions: list[QuestionRecord] = field(default_factory=list)


def search_content(
    conn: sqlite3.Connection,
    query: str,
    user_id: str,
    limit: int = DEFAULT_SEARCH_LIMIT,
) -> SearchResults:
    """Case-insensitive substring search.

    Matches Article title/summary, Topic title/description and Question
    text, returning at most ``limit`` rows of each kind. ``user_id`` is
    accepted for later personalization and does not filter anything yet.

    Raises:
        InvalidArgumentError: Empty query
    """
    if not query:
        raise InvalidArgumentError("Search query is required")

    needle = query.casefold()

    articles = conn.execute(
        """
        SELECT * FROM articles
        WHERE instr(casefold(title), ?) > 0 OR instr(casefold(summary), ?) > 0
        ORDER BY published_at DESC
        LIMIT ?
        """,
        (needle, needle, limit),
    ).fetchall()

    topics = conn.execute(
        """
        SELECT * FROM topics
        WHERE instr(casefold(title), ?) > 0
           OR instr(casefold(COALESCE(description, '')), ?) > 0
        ORDER BY order_index, title
        LIMIT ?
        """,
        (needle, needle, limit),
    ).fetchall()

    questions = conn.execute(
        """
        SELECT * FROM questions
        WHERE instr(casefold(question), ?) > 0
        ORDER BY created_at
        LIMIT ?
        """,
        (needle, limit),
    ).fetchall()

    logger.debug(
        "search.executed",
        user_id=user_id,
        articles=len(articles),
        topics=len(topics),
        questions=len(questions),
    )

    return SearchResults(
        articles=[row_to_article(row) for row in articles],
        topics=[row_to_topic(row) for row in topics],
        questions=[row_to_question(row) for row in questions],
    )

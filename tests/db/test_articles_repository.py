"""Tests for the articles repository."""

from datetime import datetime, timedelta, timezone

import pytest

from studytrack.core.errors import InvalidArgumentError, NotFoundError
from studytrack.db.articles_repository import (
    create_article,
    get_article,
    get_article_topic_ids,
    get_articles,
    get_articles_by_topic,
    get_featured_articles,
)

BASE = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _add(conn, title, days=0, featured=False, topic_ids=None):
    return create_article(
        conn,
        title=title,
        content=f"{title} body",
        summary=f"{title} summary",
        published_at=BASE + timedelta(days=days),
        read_time=3,
        is_featured=featured,
        topic_ids=topic_ids,
    )


class TestGetArticles:
    """Tests for paging and ordering."""

    def test_newest_first(self, db):
        with db.transaction() as conn:
            _add(conn, "old", days=0)
            _add(conn, "new", days=2)
            _add(conn, "mid", days=1)

        with db.connect() as conn:
            titles = [a.title for a in get_articles(conn)]
        assert titles == ["new", "mid", "old"]

    def test_limit_and_offset(self, db):
        with db.transaction() as conn:
            for i in range(5):
                _add(conn, f"a{i}", days=i)

        with db.connect() as conn:
            page = get_articles(conn, limit=2, offset=1)
        assert [a.title for a in page] == ["a3", "a2"]

    def test_negative_paging_rejected(self, db):
        with db.connect() as conn:
            with pytest.raises(InvalidArgumentError):
                get_articles(conn, limit=-1)
            with pytest.raises(InvalidArgumentError):
                get_articles(conn, offset=-1)

    def test_published_at_stored_as_utc(self, db):
        """Offsets are normalized so text ordering matches time ordering."""
        local = datetime(2024, 6, 1, 12, 0, tzinfo=timezone(timedelta(hours=5, minutes=30)))
        with db.transaction() as conn:
            article = create_article(
                conn, title="t", content="c", summary="s", published_at=local, read_time=1
            )
        assert article.published_at.startswith("2024-06-01T06:30:00")
        assert article.published_at.endswith("+00:00")


class TestFeaturedArticles:
    """Tests for get_featured_articles."""

    def test_only_featured_at_most_limit(self, db):
        with db.transaction() as conn:
            _add(conn, "plain")
            for i in range(7):
                _add(conn, f"f{i}", days=i, featured=True)

        with db.connect() as conn:
            featured = get_featured_articles(conn)
        assert len(featured) == 5
        assert all(a.is_featured for a in featured)
        assert featured[0].title == "f6"


class TestArticleTopics:
    """Tests for topic links."""

    def test_articles_by_topic(self, db, topic_id):
        with db.transaction() as conn:
            linked = _add(conn, "linked", topic_ids=[topic_id, topic_id])
            _add(conn, "unlinked")

        with db.connect() as conn:
            assert [a.id for a in get_articles_by_topic(conn, topic_id)] == [linked.id]
            assert get_article_topic_ids(conn, linked.id) == [topic_id]

    def test_unknown_topic_rejected(self, db):
        with pytest.raises(NotFoundError):
            with db.transaction() as conn:
                _add(conn, "bad", topic_ids=["missing"])

        with db.connect() as conn:
            assert get_articles(conn) == []

    def test_get_missing_article(self, db):
        with db.connect() as conn:
            assert get_article(conn, "missing") is None

"""Tests for progress statistics."""

from datetime import datetime, timedelta, timezone

import pytest

from studytrack.core.errors import NotFoundError
from studytrack.core.stats import get_progress_stats
from studytrack.core.study import add_bookmark, add_note, record_study_session, submit_quiz_attempt
from studytrack.db.users_repository import upsert_user


class TestProgressStats:
    """Tests for get_progress_stats."""

    def test_empty_user(self, db, user_id):
        stats = get_progress_stats(db, user_id)

        assert stats.total_attempts == 0
        assert stats.average_score == 0
        assert stats.best_score == 0
        assert stats.total_study_minutes == 0
        assert stats.weekly_activity == [0] * 7

    def test_aggregates(self, db, user_id, subject_id, topic_id):
        with db.transaction() as conn:
            upsert_user(conn, user_id, streak_days=4)
        submit_quiz_attempt(db, user_id, ["a", "b", "c"], [0, 0, 0], 2, 3, "basic", [])
        submit_quiz_attempt(db, user_id, ["d", "e", "f"], [0, 0, 0], 1, 3, "basic", [])
        record_study_session(db, user_id, topic_id, 60, 30)
        add_bookmark(db, user_id, "topic", topic_id)
        add_note(db, user_id, "topic", topic_id, "note")

        stats = get_progress_stats(db, user_id)

        assert stats.total_attempts == 2
        assert stats.total_questions == 6
        assert stats.correct_answers == 3
        assert stats.average_score == 50
        assert stats.best_score == 67
        assert stats.study_streak == 4
        assert stats.total_study_minutes == 30
        assert stats.bookmark_count == 1
        assert stats.note_count == 1
        assert [s.completion_percentage for s in stats.subjects] == [60.0]
        assert stats.weekly_activity[-1] == 5
        assert sum(stats.weekly_activity) == 5

    def test_weekly_activity_buckets_by_age(self, db, user_id):
        """Entries land in the bucket for their age in days, today last."""
        add_note(db, user_id, "topic", "t1", "note")

        later = datetime.now(timezone.utc) + timedelta(days=2, hours=1)
        stats = get_progress_stats(db, user_id, now=later)
        assert stats.weekly_activity == [0, 0, 0, 0, 1, 0, 0]

        much_later = datetime.now(timezone.utc) + timedelta(days=8)
        assert get_progress_stats(db, user_id, now=much_later).weekly_activity == [0] * 7

    def test_unknown_user(self, db):
        with pytest.raises(NotFoundError):
            get_progress_stats(db, "ghost")

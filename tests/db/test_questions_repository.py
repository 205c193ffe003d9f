"""Tests for the questions repository."""

import random

import pytest

from studytrack.core.enums import Difficulty
from studytrack.core.errors import InvalidArgumentError, NotFoundError
from studytrack.db.questions_repository import (
    create_question,
    get_question,
    get_questions_by_topic,
    get_random_questions,
)
from studytrack.db.syllabus_repository import create_topic


def _add(conn, topic_id, text, difficulty="basic"):
    return create_question(
        conn,
        topic_id=topic_id,
        question=text,
        options=["a", "b", "c", "d"],
        correct_option_index=1,
        explanation="because",
        difficulty=difficulty,
    )


@pytest.fixture
def pool(db, subject_id, topic_id):
    """Three basic and two advanced questions on t1, two basic on t2."""
    with db.transaction() as conn:
        other = create_topic(conn, subject_id=subject_id, title="t2", order_index=1)
        for i in range(3):
            _add(conn, topic_id, f"basic {i}")
        for i in range(2):
            _add(conn, topic_id, f"advanced {i}", difficulty="advanced")
        for i in range(2):
            _add(conn, other.id, f"other {i}")
    return topic_id, other.id


class TestCreateQuestion:
    """Tests for create_question."""

    def test_round_trips_options(self, db, topic_id):
        with db.transaction() as conn:
            created = _add(conn, topic_id, "What?")
        with db.connect() as conn:
            fetched = get_question(conn, created.id)
        assert fetched.options == ["a", "b", "c", "d"]
        assert fetched.correct_option_index == 1
        assert fetched.is_from_current_affairs is False

    def test_answer_index_out_of_range(self, db, topic_id):
        with pytest.raises(InvalidArgumentError):
            with db.transaction() as conn:
                create_question(
                    conn, topic_id=topic_id, question="q", options=["a", "b"],
                    correct_option_index=2, explanation="",
                )

    def test_too_few_options(self, db, topic_id):
        with pytest.raises(InvalidArgumentError):
            with db.transaction() as conn:
                create_question(
                    conn, topic_id=topic_id, question="q", options=["a"],
                    correct_option_index=0, explanation="",
                )

    def test_unknown_topic(self, db):
        with pytest.raises(NotFoundError):
            with db.transaction() as conn:
                _add(conn, "missing", "q")


class TestQuestionsByTopic:
    """Tests for get_questions_by_topic."""

    def test_filter_by_difficulty(self, db, pool):
        t1, _ = pool
        with db.connect() as conn:
            assert len(get_questions_by_topic(conn, t1)) == 5
            advanced = get_questions_by_topic(conn, t1, Difficulty.ADVANCED)
        assert len(advanced) == 2
        assert {q.difficulty for q in advanced} == {"advanced"}


class TestRandomQuestions:
    """Tests for get_random_questions."""

    def test_smaller_pool_returned_whole(self, db, pool):
        """Asking for 10 from a pool of 3 returns exactly those 3."""
        t1, _ = pool
        with db.connect() as conn:
            picked = get_random_questions(conn, [t1], "basic", 10)
        assert len(picked) == 3
        assert all(q.difficulty == "basic" for q in picked)
        assert all(q.topic_id == t1 for q in picked)

    def test_no_duplicates_and_bounded(self, db, pool):
        t1, t2 = pool
        for seed in range(20):
            with db.connect() as conn:
                picked = get_random_questions(conn, [t1, t2], "basic", 3, rng=random.Random(seed))
            ids = [q.id for q in picked]
            assert len(ids) == 3
            assert len(set(ids)) == 3
            assert all(q.difficulty == "basic" for q in picked)
            assert all(q.topic_id in (t1, t2) for q in picked)

    def test_sampling_varies(self, db, pool):
        """Different seeds reach different subsets of the pool."""
        t1, t2 = pool
        seen = set()
        for seed in range(30):
            with db.connect() as conn:
                picked = get_random_questions(conn, [t1, t2], "basic", 2, rng=random.Random(seed))
            seen.update(q.id for q in picked)
        assert len(seen) == 5

    def test_empty_results(self, db, pool):
        t1, _ = pool
        with db.connect() as conn:
            assert get_random_questions(conn, [t1], "deep", 5) == []
            assert get_random_questions(conn, [], "basic", 5) == []
            assert get_random_questions(conn, [t1], "basic", 0) == []

    def test_negative_limit(self, db, pool):
        t1, _ = pool
        with db.connect() as conn:
            with pytest.raises(InvalidArgumentError):
                get_random_questions(conn, [t1], "basic", -1)

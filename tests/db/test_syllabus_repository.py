"""Tests for subjects and the topic tree."""

import pytest

from studytrack.core.errors import InvalidArgumentError, NotFoundError
from studytrack.db.syllabus_repository import (
    create_subject,
    create_topic,
    get_subjects,
    get_topic,
    get_topics_by_subject,
    set_topic_parent,
)


class TestSubjects:
    """Tests for subject listing."""

    def test_subjects_in_display_order(self, db):
        with db.transaction() as conn:
            create_subject(conn, name="Economy", icon="chart", color="green", order_index=2)
            create_subject(conn, name="Polity", icon="landmark", color="indigo", order_index=1)

        with db.connect() as conn:
            names = [s.name for s in get_subjects(conn)]
        assert names == ["Polity", "Economy"]


class TestCreateTopic:
    """Tests for create_topic."""

    def test_topics_in_display_order(self, db, subject_id):
        with db.transaction() as conn:
            create_topic(conn, subject_id=subject_id, title="Second", order_index=2)
            create_topic(conn, subject_id=subject_id, title="First", order_index=1)

        with db.connect() as conn:
            titles = [t.title for t in get_topics_by_subject(conn, subject_id)]
        assert titles == ["First", "Second"]

    def test_unknown_subject(self, db):
        with pytest.raises(NotFoundError):
            with db.transaction() as conn:
                create_topic(conn, subject_id="nope", title="X", order_index=0)

    def test_parent_from_other_subject(self, db, topic_id):
        """A child must live in its parent's subject."""
        with db.transaction() as conn:
            other = create_subject(conn, name="Economy", icon="chart", color="green", order_index=1)

        with pytest.raises(InvalidArgumentError):
            with db.transaction() as conn:
                create_topic(
                    conn, subject_id=other.id, title="X", order_index=0, parent_topic_id=topic_id
                )

    def test_invalid_difficulty(self, db, subject_id):
        with pytest.raises(InvalidArgumentError):
            with db.transaction() as conn:
                create_topic(conn, subject_id=subject_id, title="X", order_index=0, difficulty="expert")


class TestSetTopicParent:
    """Tests for moving topics within the tree."""

    @pytest.fixture
    def chain(self, db, subject_id):
        """Three topics nested a > b > c."""
        with db.transaction() as conn:
            a = create_topic(conn, subject_id=subject_id, title="a", order_index=0)
            b = create_topic(conn, subject_id=subject_id, title="b", order_index=1, parent_topic_id=a.id)
            c = create_topic(conn, subject_id=subject_id, title="c", order_index=2, parent_topic_id=b.id)
        return a.id, b.id, c.id

    def test_move_to_top_level(self, db, chain):
        _, b, c = chain
        with db.transaction() as conn:
            moved = set_topic_parent(conn, c, None)
        assert moved.parent_topic_id is None

        with db.connect() as conn:
            assert get_topic(conn, c).parent_topic_id is None

    def test_reparent(self, db, chain):
        a, _, c = chain
        with db.transaction() as conn:
            set_topic_parent(conn, c, a)
        with db.connect() as conn:
            assert get_topic(conn, c).parent_topic_id == a

    def test_self_parent_rejected(self, db, chain):
        a, _, _ = chain
        with pytest.raises(InvalidArgumentError):
            with db.transaction() as conn:
                set_topic_parent(conn, a, a)

    def test_descendant_parent_rejected(self, db, chain):
        """Moving a topic under its own grandchild would form a cycle."""
        a, _, c = chain
        with pytest.raises(InvalidArgumentError):
            with db.transaction() as conn:
                set_topic_parent(conn, a, c)

        with db.connect() as conn:
            assert get_topic(conn, a).parent_topic_id is None

    def test_unknown_topic(self, db, chain):
        with pytest.raises(NotFoundError):
            with db.transaction() as conn:
                set_topic_parent(conn, "missing", None)

    def test_unknown_parent(self, db, chain):
        a, _, _ = chain
        with pytest.raises(NotFoundError):
            with db.transaction() as conn:
                set_topic_parent(conn, a, "missing")

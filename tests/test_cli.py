"""Tests for the studytrack CLI."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from studytrack.cli.commands import app
from studytrack.config.app_config import load_app_config
from studytrack.db.database import Database
from studytrack.db.questions_repository import get_questions_by_topic
from studytrack.db.syllabus_repository import get_subjects, get_topics_by_subject
from studytrack.db.articles_repository import get_article_topic_ids, get_featured_articles
from studytrack.db.users_repository import get_user
from studytrack.web.auth import decode_access_token

runner = CliRunner()

SAMPLE = Path("data/seed/sample_syllabus.yaml")


class TestInitDb:
    """Tests for `studytrack init-db`."""

    def test_creates_database(self, tmp_path):
        db_path = tmp_path / "cli.db"
        result = runner.invoke(app, ["init-db", "--db", str(db_path)])
        assert result.exit_code == 0
        assert db_path.exists()


class TestSeed:
    """Tests for `studytrack seed`."""

    def test_seed_sample(self, tmp_path):
        db_path = tmp_path / "cli.db"
        result = runner.invoke(app, ["seed", str(SAMPLE), "--db", str(db_path)])
        assert result.exit_code == 0, result.output

        db = Database(db_path)
        with db.connect() as conn:
            subjects = get_subjects(conn)
            assert [s.name for s in subjects] == ["Indian Polity", "Economy"]

            polity_topics = get_topics_by_subject(conn, subjects[0].id)
            assert len(polity_topics) == 3
            rights = next(t for t in polity_topics if t.title == "Fundamental Rights")
            equality = next(t for t in polity_topics if t.title == "Right to Equality")
            assert equality.parent_topic_id == rights.id
            assert len(get_questions_by_topic(conn, rights.id)) == 2

            [featured] = get_featured_articles(conn)
            [monetary] = get_topics_by_subject(conn, subjects[1].id)
            assert get_article_topic_ids(conn, featured.id) == [monetary.id]

    def test_bad_file_writes_nothing(self, tmp_path):
        """A broken entry aborts the whole seed."""
        seed_file = tmp_path / "bad.yaml"
        seed_file.write_text(
            "subjects:\n"
            "  - name: Ok\n"
            "    topics:\n"
            "      - title: T\n"
            "        questions:\n"
            "          - question: Q\n"
            "            options: [only-one]\n"
            "            correct_option_index: 0\n",
            encoding="utf-8",
        )
        db_path = tmp_path / "cli.db"

        result = runner.invoke(app, ["seed", str(seed_file), "--db", str(db_path)])
        assert result.exit_code == 1

        with Database(db_path).connect() as conn:
            assert get_subjects(conn) == []

    @pytest.mark.parametrize(
        "tail",
        [
            "articles:\n"
            "  - title: A\n"
            "    content: C\n"
            "    summary: S\n"
            "    published_at: not-a-date\n",
            "    topics:\n"
            "      - title: T\n"
            "        questions:\n"
            "          - question: Q\n"
            "            options: 5\n"
            "            correct_option_index: 0\n",
        ],
    )
    def test_malformed_values_write_nothing(self, tmp_path, tail):
        """Bad dates and non-list options abort cleanly."""
        seed_file = tmp_path / "bad.yaml"
        seed_file.write_text("subjects:\n  - name: Ok\n" + tail, encoding="utf-8")
        db_path = tmp_path / "cli.db"

        result = runner.invoke(app, ["seed", str(seed_file), "--db", str(db_path)])
        assert result.exit_code == 1
        assert "Seed failed" in result.output

        with Database(db_path).connect() as conn:
            assert get_subjects(conn) == []

    def test_missing_file(self, tmp_path):
        result = runner.invoke(app, ["seed", str(tmp_path / "nope.yaml"), "--db", str(tmp_path / "x.db")])
        assert result.exit_code == 1


class TestIssueToken:
    """Tests for `studytrack issue-token`."""

    def test_registers_user_and_prints_token(self, tmp_path):
        db_path = tmp_path / "cli.db"
        result = runner.invoke(
            app, ["issue-token", "u42", "--email", "u42@example.com", "--db", str(db_path)]
        )
        assert result.exit_code == 0, result.output

        token = result.output.strip().splitlines()[-1]
        assert decode_access_token(token, load_app_config().auth) == "u42"

        with Database(db_path).connect() as conn:
            assert get_user(conn, "u42").email == "u42@example.com"

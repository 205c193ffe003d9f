"""Shared pytest fixtures.

Every fixture works on a database under ``tmp_path``; nothing touches ./db.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from studytrack.config.app_config import AppConfig, DatabaseConfig
from studytrack.db.database import Database
from studytrack.db.syllabus_repository import create_subject, create_topic
from studytrack.db.users_repository import upsert_user
from studytrack.web.api import create_app
from studytrack.web.auth import create_access_token


@pytest.fixture
def db(tmp_path) -> Database:
    """Empty database with the schema applied."""
    database = Database(tmp_path / "studytrack.db")
    database.init_schema()
    return database


@pytest.fixture
def user_id(db) -> str:
    """A registered user."""
    with db.transaction() as conn:
        upsert_user(conn, "u1", email="u1@example.com", first_name="Asha")
    return "u1"


@pytest.fixture
def subject_id(db) -> str:
    with db.transaction() as conn:
        subject = create_subject(conn, name="Polity", icon="landmark", color="indigo", order_index=0)
    return subject.id


@pytest.fixture
def topic_id(db, subject_id) -> str:
    with db.transaction() as conn:
        topic = create_topic(conn, subject_id=subject_id, title="Fundamental Rights", order_index=0)
    return topic.id


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    """Config pointing the API at a temp database."""
    return AppConfig(database=DatabaseConfig(path=tmp_path / "api.db"))


@pytest.fixture
def client(app_config):
    """Test client with the app lifespan running."""
    app = create_app(app_config)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def api_db(client) -> Database:
    """The database handle the running app uses."""
    return client.app.state.db


@pytest.fixture
def auth_headers(client, api_db, app_config) -> dict[str, str]:
    """Bearer headers for a registered user ``u1``."""
    with api_db.transaction() as conn:
        upsert_user(conn, "u1", email="u1@example.com")
    token = create_access_token("u1", app_config.auth)
    return {"Authorization": f"Bearer {token}"}

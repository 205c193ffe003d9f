"""Tests for subject, topic, article and question endpoints."""

import pytest


@pytest.fixture
def subject(client, auth_headers):
    response = client.post(
        "/api/subjects",
        json={"name": "Polity", "icon": "landmark", "color": "indigo", "order_index": 0},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def topic(client, auth_headers, subject):
    response = client.post(
        "/api/topics",
        json={"subject_id": subject["id"], "title": "Fundamental Rights", "order_index": 0},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


class TestSubjects:
    """Tests for /api/subjects."""

    def test_list_is_public(self, client, subject):
        response = client.get("/api/subjects")
        assert response.status_code == 200
        assert [s["name"] for s in response.json()] == ["Polity"]

    def test_create_requires_auth(self, client):
        response = client.post(
            "/api/subjects",
            json={"name": "X", "icon": "i", "color": "c", "order_index": 0},
        )
        assert response.status_code == 401

    def test_create_validates_body(self, client, auth_headers):
        response = client.post("/api/subjects", json={"name": "X"}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"

    def test_subject_topics(self, client, subject, topic):
        response = client.get(f"/api/subjects/{subject['id']}/topics")
        assert response.status_code == 200
        assert [t["id"] for t in response.json()] == [topic["id"]]


class TestTopics:
    """Tests for /api/topics."""

    def test_get_topic(self, client, topic):
        response = client.get(f"/api/topics/{topic['id']}")
        assert response.status_code == 200
        assert response.json()["difficulty"] == "basic"

    def test_missing_topic(self, client):
        response = client.get("/api/topics/missing")
        assert response.status_code == 404
        assert response.json() == {"kind": "not_found", "message": "Topic 'missing' not found"}

    def test_create_in_unknown_subject(self, client, auth_headers):
        response = client.post(
            "/api/topics",
            json={"subject_id": "missing", "title": "X", "order_index": 0},
            headers=auth_headers,
        )
        assert response.status_code == 404

    def test_reparent_rejects_cycle(self, client, auth_headers, subject, topic):
        child = client.post(
            "/api/topics",
            json={
                "subject_id": subject["id"],
                "title": "Article 21",
                "order_index": 1,
                "parent_topic_id": topic["id"],
            },
            headers=auth_headers,
        ).json()

        response = client.patch(
            f"/api/topics/{topic['id']}/parent",
            json={"parent_topic_id": child["id"]},
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "invalid_argument"

        response = client.patch(
            f"/api/topics/{child['id']}/parent",
            json={"parent_topic_id": None},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["parent_topic_id"] is None


class TestArticles:
    """Tests for /api/articles."""

    def _create(self, client, auth_headers, title, day, featured=False, topic_ids=()):
        response = client.post(
            "/api/articles",
            json={
                "title": title,
                "content": "body",
                "summary": "summary",
                "published_at": f"2024-06-{day:02d}T08:00:00Z",
                "read_time": 3,
                "is_featured": featured,
                "topic_ids": list(topic_ids),
            },
            headers=auth_headers,
        )
        assert response.status_code == 201
        return response.json()

    def test_list_newest_first_with_paging(self, client, auth_headers):
        for day in (1, 3, 2):
            self._create(client, auth_headers, f"day {day}", day)

        titles = [a["title"] for a in client.get("/api/articles").json()]
        assert titles == ["day 3", "day 2", "day 1"]

        page = client.get("/api/articles", params={"limit": 1, "offset": 1}).json()
        assert [a["title"] for a in page] == ["day 2"]

    def test_negative_offset(self, client):
        response = client.get("/api/articles", params={"offset": -1})
        assert response.status_code == 400

    def test_featured_route_not_shadowed(self, client, auth_headers):
        self._create(client, auth_headers, "star", 1, featured=True)
        self._create(client, auth_headers, "plain", 2)

        response = client.get("/api/articles/featured")
        assert response.status_code == 200
        assert [a["title"] for a in response.json()] == ["star"]

    def test_detail_and_topic_link(self, client, auth_headers, topic):
        article = self._create(client, auth_headers, "linked", 1, topic_ids=[topic["id"]])
        assert article["topic_ids"] == [topic["id"]]

        detail = client.get(f"/api/articles/{article['id']}").json()
        assert detail["topic_ids"] == [topic["id"]]
        assert detail["published_at"].startswith("2024-06-01T08:00:00")

        by_topic = client.get(f"/api/topics/{topic['id']}/articles").json()
        assert [a["id"] for a in by_topic] == [article["id"]]

    def test_missing_article(self, client):
        assert client.get("/api/articles/missing").status_code == 404


class TestQuestions:
    """Tests for /api/questions."""

    def _create(self, client, auth_headers, topic_id, difficulty="basic"):
        response = client.post(
            "/api/questions",
            json={
                "topic_id": topic_id,
                "question": "Which Article abolishes untouchability?",
                "options": ["14", "17", "21"],
                "correct_option_index": 1,
                "explanation": "Article 17",
                "difficulty": difficulty,
            },
            headers=auth_headers,
        )
        assert response.status_code == 201
        return response.json()

    def test_random_draw(self, client, auth_headers, topic):
        for _ in range(3):
            self._create(client, auth_headers, topic["id"])
        self._create(client, auth_headers, topic["id"], difficulty="deep")

        response = client.post(
            "/api/questions/random",
            json={"topic_ids": [topic["id"]], "difficulty": "basic", "limit": 10},
        )
        assert response.status_code == 200
        drawn = response.json()
        assert len(drawn) == 3
        assert len({q["id"] for q in drawn}) == 3
        assert all(q["difficulty"] == "basic" for q in drawn)

    def test_random_rejects_unknown_difficulty(self, client, topic):
        response = client.post(
            "/api/questions/random",
            json={"topic_ids": [topic["id"]], "difficulty": "expert", "limit": 3},
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "validation_error"

    def test_answer_index_must_point_into_options(self, client, auth_headers, topic):
        response = client.post(
            "/api/questions",
            json={
                "topic_id": topic["id"],
                "question": "q",
                "options": ["a", "b"],
                "correct_option_index": 5,
                "explanation": "",
            },
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_get_and_filter_by_topic(self, client, auth_headers, topic):
        created = self._create(client, auth_headers, topic["id"], difficulty="advanced")

        assert client.get(f"/api/questions/{created['id']}").json()["options"] == ["14", "17", "21"]
        assert client.get("/api/questions/missing").status_code == 404

        listed = client.get(
            f"/api/topics/{topic['id']}/questions", params={"difficulty": "advanced"}
        ).json()
        assert [q["id"] for q in listed] == [created["id"]]
        assert client.get(
            f"/api/topics/{topic['id']}/questions", params={"difficulty": "basic"}
        ).json() == []

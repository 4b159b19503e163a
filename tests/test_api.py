"""
Tests for the HTTP query surface.
"""

import pytest

from quizbot import messages
from quizbot.config import settings
from quizbot.main import resolve_static_file
from quizbot.schemas.quiz import QuestionCreate
from quizbot.services.quiz_store import quiz_store


@pytest.fixture
def quiz_id(db):
    return quiz_store.create_quiz(db, "Planets", "42", [
        QuestionCreate(text="Largest planet?", options=["Mars", "Jupiter"], correct_option=1),
    ])


class TestQuizEndpoints:
    """Tests for /api/quizzes."""

    def test_health(self, client):
        resp = client.get("/health")

        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"

    def test_list(self, client, quiz_id):
        resp = client.get("/api/quizzes")

        assert resp.status_code == 200
        quizzes = resp.json()["quizzes"]
        assert [q["id"] for q in quizzes] == [quiz_id]
        assert quizzes[0]["title"] == "Planets"
        assert quizzes[0]["created_by"] == "42"

    def test_list_empty(self, client):
        resp = client.get("/api/quizzes")

        assert resp.json() == {"quizzes": []}

    def test_detail(self, client, quiz_id):
        resp = client.get(f"/api/quizzes/{quiz_id}")

        assert resp.status_code == 200
        data = resp.json()
        assert data["quiz"]["id"] == quiz_id
        assert data["questions"][0]["options"] == ["Mars", "Jupiter"]
        assert data["questions"][0]["correct_option"] == 1

    def test_detail_not_found(self, client):
        resp = client.get("/api/quizzes/9999")

        assert resp.status_code == 404
        assert resp.json() == {"error": messages.QUIZ_NOT_FOUND}

    def test_detail_non_numeric_id(self, client):
        resp = client.get("/api/quizzes/abc")

        assert resp.status_code == 422
        assert resp.json() == {"error": messages.INVALID_REQUEST}

    def test_list_failure(self, client, monkeypatch):
        def boom(db):
            raise RuntimeError("connection lost")

        monkeypatch.setattr(quiz_store, "list_quizzes", boom)

        resp = client.get("/api/quizzes")

        assert resp.status_code == 500
        assert resp.json() == {"error": messages.QUIZZES_LOAD_FAILED}

    def test_unknown_api_path(self, client):
        resp = client.get("/api/unknown")

        assert resp.status_code == 404
        assert "error" in resp.json()


class TestWebAppFiles:
    """Tests for serving the built front-end."""

    @pytest.fixture
    def dist(self, tmp_path, monkeypatch):
        (tmp_path / "index.html").write_text("<html>quiz app</html>")
        (tmp_path / "assets").mkdir()
        (tmp_path / "assets" / "app.js").write_text("console.log('quiz')")
        monkeypatch.setattr(settings, "WEB_APP_DIST_DIR", str(tmp_path))
        return tmp_path

    def test_root_serves_index(self, client, dist):
        resp = client.get("/")

        assert resp.status_code == 200
        assert "quiz app" in resp.text

    def test_asset(self, client, dist):
        resp = client.get("/assets/app.js")

        assert resp.status_code == 200
        assert "console.log" in resp.text

    def test_client_route_falls_back_to_index(self, client, dist):
        resp = client.get("/quiz/3")

        assert "quiz app" in resp.text

    def test_not_built(self, client, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, "WEB_APP_DIST_DIR", str(tmp_path / "missing"))

        assert client.get("/").status_code == 404

    def test_path_escaping_dist_is_not_served(self, dist):
        (dist.parent / "secret.txt").write_text("secret")

        assert resolve_static_file(dist, "../secret.txt") == dist.resolve() / "index.html"

"""
答题 API 测试（FastAPI TestClient）
"""
import pytest
from fastapi.testclient import TestClient

from brainbolt.application import create_app
from brainbolt.core.config import QuizConfig


@pytest.fixture
def client(clock, rng):
    app = create_app(QuizConfig(store_backend="memory"), rng=rng, clock=clock)
    return TestClient(app)


def correct_answer_for(client, question_id: str) -> str:
    return client.app.state.quiz_service.catalog.question_by_id(question_id).correct_answer


class TestQuizEndpoints:
    """答题接口"""

    def test_next_without_user_mints_session(self, client):
        resp = client.get("/v1/quiz/next")

        assert resp.status_code == 200
        data = resp.json()
        assert data["session_id"]
        assert data["difficulty"] == 5
        assert len(data["choices"]) == 4
        assert data["state_version"] == 0

    def test_answer_flow(self, client):
        nq = client.get("/v1/quiz/next", params={"user_id": "alice"}).json()

        resp = client.post("/v1/quiz/answer", json={
            "user_id": "alice",
            "question_id": nq["question_id"],
            "selected_answer": correct_answer_for(client, nq["question_id"]),
            "state_version": nq["state_version"],
        })

        assert resp.status_code == 200
        data = resp.json()
        assert data["correct"] is True
        assert data["score_delta"] == 82
        assert data["total_score"] == 82
        assert data["new_streak"] == 1
        assert data["new_difficulty"] == 5
        assert data["state_version"] == 1
        assert data["leaderboard_rank_score"] == 1
        assert data["leaderboard_rank_streak"] == 1

    def test_duplicate_key_conflict(self, client):
        nq = client.get("/v1/quiz/next", params={"user_id": "alice"}).json()
        body = {
            "user_id": "alice",
            "question_id": nq["question_id"],
            "selected_answer": "x",
            "state_version": 0,
            "idempotency_key": "abc",
        }

        assert client.post("/v1/quiz/answer", json=body).status_code == 200
        resp = client.post("/v1/quiz/answer", json={**body, "state_version": 1})

        assert resp.status_code == 409
        assert client.get("/v1/quiz/next", params={"user_id": "alice"}).json()["state_version"] == 1

    def test_stale_version_conflict(self, client):
        nq = client.get("/v1/quiz/next", params={"user_id": "alice"}).json()
        body = {
            "user_id": "alice",
            "question_id": nq["question_id"],
            "selected_answer": "x",
            "state_version": 0,
        }
        client.post("/v1/quiz/answer", json=body)

        resp = client.post("/v1/quiz/answer", json=body)

        assert resp.status_code == 409
        assert resp.json()["detail"]["state_version"] == 1

    def test_unknown_question(self, client):
        resp = client.post("/v1/quiz/answer", json={
            "user_id": "alice",
            "question_id": "nope",
            "selected_answer": "1",
            "state_version": 0,
        })

        assert resp.status_code == 404

    def test_missing_fields(self, client):
        resp = client.post("/v1/quiz/answer", json={"user_id": "alice"})

        assert resp.status_code == 422

    def test_empty_user_id_rejected(self, client):
        nq = client.get("/v1/quiz/next").json()
        resp = client.post("/v1/quiz/answer", json={
            "user_id": "",
            "question_id": nq["question_id"],
            "selected_answer": "1",
            "state_version": 0,
        })

        assert resp.status_code == 400

    def test_metrics_requires_user(self, client):
        assert client.get("/v1/quiz/metrics").status_code == 400

    def test_metrics(self, client):
        nq = client.get("/v1/quiz/next", params={"user_id": "alice"}).json()
        client.post("/v1/quiz/answer", json={
            "user_id": "alice",
            "question_id": nq["question_id"],
            "selected_answer": correct_answer_for(client, nq["question_id"]),
            "state_version": 0,
        })

        data = client.get("/v1/quiz/metrics", params={"user_id": "alice"}).json()

        assert data["accuracy"] == 1.0
        assert data["difficulty_histogram"] == {"5": 1}
        assert data["recent_performance"] == 100.0


class TestLeaderboardEndpoints:
    """排行榜接口"""

    def test_score_and_streak_boards(self, client):
        for user in ("alice", "bob"):
            client.get("/v1/quiz/next", params={"user_id": user})
        nq = client.get("/v1/quiz/next", params={"user_id": "bob"}).json()
        client.post("/v1/quiz/answer", json={
            "user_id": "bob",
            "question_id": nq["question_id"],
            "selected_answer": correct_answer_for(client, nq["question_id"]),
            "state_version": 0,
        })

        score_board = client.get("/v1/leaderboard/score").json()
        streak_board = client.get("/v1/leaderboard/streak").json()

        assert [e["user_id"] for e in score_board] == ["bob", "alice"]
        assert [e["user_id"] for e in streak_board] == ["bob", "alice"]
        assert score_board[0]["total_score"] == 82

    def test_limit_validation(self, client):
        assert client.get("/v1/leaderboard/score", params={"limit": 0}).status_code == 422
        assert client.get("/v1/leaderboard/score", params={"limit": 1}).status_code == 200


class TestHealth:
    def test_health(self, client):
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["questions"] == 30


class TestAppFactory:
    """应用工厂"""

    def test_explicit_config_ignores_environment(self, monkeypatch, tmp_path, clock, rng):
        db_file = tmp_path / "data" / "quiz.db"
        monkeypatch.setenv("QUIZ_STORE_BACKEND", "sql")
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")

        app = create_app(QuizConfig(store_backend="memory"), rng=rng, clock=clock)

        assert TestClient(app).get("/health").json()["store_backend"] == "memory"
        assert not db_file.exists()

    def test_cors_only_for_allowed_origins(self, monkeypatch, clock, rng):
        monkeypatch.setenv("ALLOWED_ORIGINS", "http://localhost:3000")
        client = TestClient(create_app(QuizConfig(), rng=rng, clock=clock))

        allowed = client.get("/health", headers={"Origin": "http://localhost:3000"})
        other = client.get("/health", headers={"Origin": "http://evil.example"})

        assert allowed.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert "access-control-allow-origin" not in other.headers

    def test_no_cors_without_configuration(self, monkeypatch, clock, rng):
        monkeypatch.delenv("ALLOWED_ORIGINS", raising=False)
        client = TestClient(create_app(QuizConfig(), rng=rng, clock=clock))

        resp = client.get("/health", headers={"Origin": "http://localhost:3000"})

        assert "access-control-allow-origin" not in resp.headers

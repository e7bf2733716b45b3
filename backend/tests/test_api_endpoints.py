"""
API端点测试

使用预先写入示例数据的内存存储创建应用，验证各端点的响应格式与状态码。
"""
import asyncio

import pytest
from fastapi.testclient import TestClient

from tutorx.core.config import Settings
from tutorx.main import create_app
from tutorx.storage.memory import MemoryStorage
from tutorx.storage.sql import SQLStorage
from tutorx.storage.seed import SAMPLE_USER_ID, seed_sample_data


@pytest.fixture
def storage() -> MemoryStorage:
    storage = MemoryStorage()
    asyncio.run(seed_sample_data(storage))
    return storage


@pytest.fixture
def client(storage) -> TestClient:
    """创建测试客户端"""
    app = create_app(Settings(SEED_SAMPLE_DATA=False), storage=storage)
    return TestClient(app)


class TestUsers:
    def test_get_user(self, client):
        response = client.get(f"/api/users/{SAMPLE_USER_ID}")
        assert response.status_code == 200
        body = response.json()
        assert body["code"] == 200
        assert body["message"] == "success"
        assert body["data"]["username"] == "ahmad"
        assert body["data"]["level"] == 12

    def test_get_missing_user(self, client):
        response = client.get("/api/users/nobody")
        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"

    def test_update_user_merges(self, client):
        response = client.put(f"/api/users/{SAMPLE_USER_ID}", json={"streak": 8})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["streak"] == 8
        assert data["points"] == 1250

    def test_update_missing_user(self, client):
        assert client.put("/api/users/nobody", json={"streak": 1}).status_code == 404

    def test_update_rejects_negative_points(self, client):
        assert client.put(f"/api/users/{SAMPLE_USER_ID}", json={"points": -5}).status_code == 422


class TestCatalog:
    def test_topics_in_display_order(self, client):
        response = client.get("/api/topics")
        assert response.status_code == 200
        ids = [t["id"] for t in response.json()["data"]]
        assert ids == ["functions", "quadratic", "logarithmic", "coordinate"]

    def test_topic_detail_and_missing(self, client):
        assert client.get("/api/topics/quadratic").json()["data"]["lessons_count"] == 6
        response = client.get("/api/topics/astronomy")
        assert response.status_code == 404
        assert response.json()["detail"] == "Topic not found"

    def test_lessons_of_topic(self, client):
        lessons = client.get("/api/topics/quadratic/lessons").json()["data"]
        assert [lesson["order"] for lesson in lessons] == [1, 2, 3, 4, 5, 6]
        assert client.get("/api/lessons/quadratic-1").json()["data"]["topic_id"] == "quadratic"
        assert client.get("/api/lessons/missing").status_code == 404

    def test_quizzes(self, client):
        topic_quizzes = client.get("/api/topics/quadratic/quizzes").json()["data"]
        assert {q["id"] for q in topic_quizzes} == {"quadratic-quiz-1", "quadratic-solving-quiz"}
        lesson_quizzes = client.get("/api/lessons/functions-1/quizzes").json()["data"]
        assert [q["id"] for q in lesson_quizzes] == ["functions-quiz-1"]
        quiz = client.get("/api/quizzes/quadratic-quiz-1").json()["data"]
        assert len(quiz["questions"]) == 5
        assert client.get("/api/quizzes/missing").status_code == 404

    def test_achievements(self, client):
        data = client.get("/api/achievements").json()["data"]
        assert [a["id"] for a in data] == ["week-warrior", "quiz-master", "speed-learner"]


class TestDashboard:
    def test_dashboard(self, client):
        response = client.get(f"/api/users/{SAMPLE_USER_ID}/dashboard")
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["stats"] == {
            "completed_topics": "1/4",
            "quiz_average": "92%",
            "study_time": "2h 45m",
            "achievements": 3,
        }
        assert data["level_progress"]["next_level"] == 13
        assert [ua["achievement_id"] for ua in data["recent_achievements"]] == [
            "speed-learner", "quiz-master", "week-warrior",
        ]
        assert data["topics"][0]["is_completed"] is True
        assert data["topics"][1]["is_in_progress"] is True

    def test_dashboard_for_missing_user(self, client):
        assert client.get("/api/users/nobody/dashboard").status_code == 404

    def test_progress_overview(self, client):
        data = client.get(f"/api/users/{SAMPLE_USER_ID}/progress/overview").json()["data"]
        assert data["overall"]["completed_topics"] == 1
        assert data["overall"]["total_topics"] == 4
        quadratic = next(t for t in data["topic_progress"] if t["topic_id"] == "quadratic")
        assert quadratic["completed_lessons"] == 2
        assert quadratic["percentage"] == 33
        assert [a["lesson_id"] for a in data["recent_activity"]] == ["quadratic-2", "quadratic-1", None]

    def test_topics_with_progress(self, client):
        data = client.get(f"/api/users/{SAMPLE_USER_ID}/topics").json()["data"]
        assert [t["is_completed"] for t in data] == [True, False, False, False]

    def test_achievement_summary(self, client):
        data = client.get(f"/api/users/{SAMPLE_USER_ID}/achievements/summary").json()["data"]
        assert data["unlocked"] == 3
        assert data["total"] == 3
        assert data["percentage"] == 100
        assert data["points"] == 325

    def test_user_achievements(self, client):
        data = client.get(f"/api/users/{SAMPLE_USER_ID}/achievements").json()["data"]
        assert len(data) == 3
        assert data[0]["achievement"]["title"] == "Week Warrior"


class TestProgress:
    def test_list_progress(self, client):
        assert len(client.get(f"/api/users/{SAMPLE_USER_ID}/progress").json()["data"]) == 3
        topic = client.get(f"/api/users/{SAMPLE_USER_ID}/topics/quadratic/progress").json()["data"]
        assert {p["lesson_id"] for p in topic} == {"quadratic-1", "quadratic-2"}

    def test_create_progress(self, client):
        response = client.post("/api/progress", json={
            "user_id": SAMPLE_USER_ID,
            "topic_id": "logarithmic",
            "lesson_id": None,
            "is_completed": True,
            "score": 91,
        })
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["progress"]["topic_id"] == "logarithmic"
        assert data["unlocked_achievements"] == []

        stats = client.get(f"/api/users/{SAMPLE_USER_ID}/dashboard").json()["data"]["stats"]
        assert stats["completed_topics"] == "2/4"

    def test_create_progress_for_unknown_topic(self, client):
        response = client.post("/api/progress", json={
            "user_id": SAMPLE_USER_ID, "topic_id": "astronomy", "is_completed": True,
        })
        assert response.status_code == 404

    def test_create_progress_rejects_bad_score(self, client):
        response = client.post("/api/progress", json={
            "user_id": SAMPLE_USER_ID, "topic_id": "functions", "is_completed": True, "score": 150,
        })
        assert response.status_code == 422

    def test_update_progress(self, client):
        record = client.get(f"/api/users/{SAMPLE_USER_ID}/progress").json()["data"][0]
        response = client.put(f"/api/progress/{record['id']}", json={"score": 99})
        assert response.status_code == 200
        assert response.json()["data"]["score"] == 99
        assert response.json()["data"]["topic_id"] == record["topic_id"]
        assert client.put("/api/progress/missing", json={"score": 1}).status_code == 404


class TestQuizSubmission:
    def test_submit_quiz(self, client):
        response = client.post("/api/quizzes/quadratic-quiz-1/submit", json={
            "user_id": SAMPLE_USER_ID, "answers": [0, 1, 0, 1, 1], "time_spent": 240,
        })
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["score"] == 100
        assert data["points_awarded"] == 75
        assert data["progress"]["time_spent"] == 240
        assert client.get(f"/api/users/{SAMPLE_USER_ID}").json()["data"]["points"] == 1325

    def test_submit_quiz_out_of_range(self, client):
        response = client.post("/api/quizzes/quadratic-quiz-1/submit", json={
            "user_id": SAMPLE_USER_ID, "answers": [0, 1, 0, 1, 7],
        })
        assert response.status_code == 400

    def test_submit_unknown_quiz(self, client):
        response = client.post("/api/quizzes/missing/submit", json={"user_id": SAMPLE_USER_ID, "answers": []})
        assert response.status_code == 404

    def test_submit_for_unknown_user(self, client):
        response = client.post("/api/quizzes/quadratic-quiz-1/submit", json={"user_id": "nobody", "answers": [0]})
        assert response.status_code == 404


@pytest.fixture(params=["memory", "sql"])
def backend_client(request) -> TestClient:
    """分别基于内存存储和 SQLite 内存数据库的测试客户端"""
    storage = MemoryStorage() if request.param == "memory" else SQLStorage.from_url("sqlite://")
    asyncio.run(seed_sample_data(storage))
    app = create_app(Settings(SEED_SAMPLE_DATA=False), storage=storage)
    return TestClient(app)


class TestPartialUpdates:
    """部分更新：必填指标不能被显式置空，可选字段可以清除"""

    @pytest.mark.parametrize("field", ["points", "level", "streak", "study_time_minutes", "name"])
    def test_user_field_cannot_be_nulled(self, backend_client, field):
        response = backend_client.put(f"/api/users/{SAMPLE_USER_ID}", json={field: None})
        assert response.status_code == 422

        user = backend_client.get(f"/api/users/{SAMPLE_USER_ID}").json()["data"]
        assert user["points"] == 1250
        assert user["level"] == 12
        assert backend_client.get(f"/api/users/{SAMPLE_USER_ID}/dashboard").status_code == 200

    def test_completion_flag_cannot_be_nulled(self, backend_client):
        record = backend_client.get(f"/api/users/{SAMPLE_USER_ID}/progress").json()["data"][0]
        response = backend_client.put(f"/api/progress/{record['id']}", json={"is_completed": None})
        assert response.status_code == 422

        overview = backend_client.get(f"/api/users/{SAMPLE_USER_ID}/progress/overview")
        assert overview.status_code == 200
        assert overview.json()["data"]["overall"]["completed_topics"] == 1

    def test_optional_progress_fields_can_be_cleared(self, backend_client):
        record = backend_client.get(f"/api/users/{SAMPLE_USER_ID}/progress").json()["data"][0]
        response = backend_client.put(
            f"/api/progress/{record['id']}", json={"score": None, "time_spent": None}
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["score"] is None
        assert data["time_spent"] is None
        assert data["is_completed"] is True

        overview = backend_client.get(f"/api/users/{SAMPLE_USER_ID}/progress/overview")
        assert overview.status_code == 200
        assert overview.json()["data"]["overall"]["average_score"] == 90

    def test_omitted_fields_are_kept(self, backend_client):
        response = backend_client.put(f"/api/users/{SAMPLE_USER_ID}", json={"streak": 9})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["streak"] == 9
        assert data["points"] == 1250
        assert data["study_time_minutes"] == 165

"""
数据访问层测试

同一组用例分别在内存存储和 SQLite 内存数据库上运行，
验证两种实现遵守相同的契约。
"""
import asyncio
from datetime import datetime, timedelta, UTC

import pytest

from tutorx.core.exceptions import AchievementAlreadyUnlockedError
from tutorx.schemas.achievement import AchievementCreate, RequirementKind, UserAchievementCreate
from tutorx.schemas.quiz import QuizCreate, QuizQuestion
from tutorx.schemas.topic import Difficulty, LessonCreate, TopicCreate
from tutorx.schemas.user import UserCreate, UserUpdate
from tutorx.schemas.user_progress import UserProgressCreate, UserProgressUpdate
from tutorx.storage.memory import MemoryStorage
from tutorx.storage.seed import SAMPLE_USER_ID, seed_sample_data
from tutorx.storage.sql import SQLStorage


def run(coro):
    return asyncio.run(coro)


@pytest.fixture(params=["memory", "sql"])
def storage(request):
    if request.param == "memory":
        return MemoryStorage()
    return SQLStorage.from_url("sqlite://")


def new_user(storage, user_id="u1", **kwargs):
    data = dict(id=user_id, username=f"{user_id}-name", email=f"{user_id}@example.com", name="Learner")
    data.update(kwargs)
    return run(storage.create_user(UserCreate(**data)))


def new_topic(storage, topic_id, order):
    return run(storage.create_topic(TopicCreate(
        id=topic_id, title=topic_id, description="", difficulty=Difficulty.INTERMEDIATE,
        estimated_minutes=60, lessons_count=3, order=order,
    )))


def new_achievement(storage, achievement_id="week-warrior"):
    return run(storage.create_achievement(AchievementCreate(
        id=achievement_id, title="Week Warrior", description="", requirement=RequirementKind.STREAK_7_DAYS,
    )))


class TestUsers:
    def test_create_and_get(self, storage):
        created = new_user(storage, level=3, points=2100)
        fetched = run(storage.get_user("u1"))
        assert fetched == created
        assert fetched.level == 3
        assert fetched.created_at is not None
        assert fetched.created_at.tzinfo is not None

    def test_generated_id(self, storage):
        user = run(storage.create_user(UserCreate(username="anon", email="anon@example.com", name="Anon")))
        assert user.id
        assert run(storage.get_user_by_username("anon")).id == user.id

    def test_missing_user_is_none(self, storage):
        assert run(storage.get_user("nobody")) is None
        assert run(storage.update_user("nobody", UserUpdate(points=10))) is None

    def test_update_merges_fields(self, storage):
        new_user(storage, points=100, streak=2, study_time_minutes=30)
        updated = run(storage.update_user("u1", UserUpdate(points=250)))
        assert updated.points == 250
        assert updated.streak == 2
        assert updated.study_time_minutes == 30
        assert run(storage.get_user("u1")).points == 250


class TestTopicsAndLessons:
    def test_topics_sorted_by_order(self, storage):
        new_topic(storage, "third", 3)
        new_topic(storage, "first", 1)
        new_topic(storage, "second-a", 2)
        new_topic(storage, "second-b", 2)
        assert [t.id for t in run(storage.get_all_topics())] == ["first", "second-a", "second-b", "third"]

    def test_lessons_sorted_within_topic(self, storage):
        new_topic(storage, "quadratic", 1)
        new_topic(storage, "functions", 2)
        for lesson_id, topic_id, order in (("q2", "quadratic", 2), ("f1", "functions", 1), ("q1", "quadratic", 1)):
            run(storage.create_lesson(LessonCreate(
                id=lesson_id, topic_id=topic_id, title=lesson_id, description="", content="...", order=order,
            )))
        assert [lesson.id for lesson in run(storage.get_lessons_by_topic("quadratic"))] == ["q1", "q2"]
        assert run(storage.get_lesson("f1")).topic_id == "functions"
        assert run(storage.get_lesson("missing")) is None
        assert run(storage.get_lessons_by_topic("missing")) == []

    def test_quiz_filters(self, storage):
        questions = [QuizQuestion(id="q1", question="?", options=["a", "b"], correct_answer=1)]
        for quiz_id, lesson_id in (("quiz-a", "l1"), ("quiz-b", "l2"), ("quiz-c", None)):
            run(storage.create_quiz(QuizCreate(
                id=quiz_id, topic_id="quadratic", lesson_id=lesson_id, title=quiz_id, description="",
                questions=questions,
            )))
        assert [q.id for q in run(storage.get_quizzes_by_topic("quadratic"))] == ["quiz-a", "quiz-b", "quiz-c"]
        assert [q.id for q in run(storage.get_quizzes_by_lesson("l2"))] == ["quiz-b"]
        assert run(storage.get_quiz("quiz-a")).questions[0].correct_answer == 1


class TestProgress:
    def test_create_filter_and_update(self, storage):
        done_at = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)
        first = run(storage.create_user_progress(UserProgressCreate(
            user_id="u1", topic_id="quadratic", lesson_id="quadratic-1", is_completed=True, score=88,
            completed_at=done_at,
        )))
        run(storage.create_user_progress(UserProgressCreate(user_id="u1", topic_id="functions")))
        run(storage.create_user_progress(UserProgressCreate(user_id="u2", topic_id="quadratic")))

        assert len(run(storage.get_user_progress("u1"))) == 2
        assert [p.id for p in run(storage.get_user_topic_progress("u1", "quadratic"))] == [first.id]
        assert run(storage.get_user_progress("u1"))[0].completed_at == done_at

        updated = run(storage.update_user_progress(first.id, UserProgressUpdate(score=95)))
        assert updated.score == 95
        assert updated.lesson_id == "quadratic-1"
        assert updated.is_completed is True
        assert run(storage.update_user_progress("missing", UserProgressUpdate(score=1))) is None

    def test_naive_timestamps_are_treated_as_utc(self, storage):
        record = run(storage.create_user_progress(UserProgressCreate(
            user_id="u1", topic_id="t", is_completed=True, completed_at=datetime(2024, 3, 1, 9, 0),
        )))
        assert record.completed_at == datetime(2024, 3, 1, 9, 0, tzinfo=UTC)


class TestAchievements:
    def test_unlock_with_detail(self, storage):
        new_achievement(storage)
        when = datetime.now(UTC) - timedelta(minutes=5)
        run(storage.create_user_achievement(UserAchievementCreate(
            user_id="u1", achievement_id="week-warrior", unlocked_at=when,
        )))
        [unlocked] = run(storage.get_user_achievements("u1"))
        assert unlocked.achievement.title == "Week Warrior"
        assert unlocked.unlocked_at == when
        assert run(storage.get_user_achievements("u2")) == []

    def test_unlock_defaults_to_now(self, storage):
        new_achievement(storage)
        before = datetime.now(UTC)
        created = run(storage.create_user_achievement(UserAchievementCreate(user_id="u1", achievement_id="week-warrior")))
        assert created.unlocked_at >= before - timedelta(seconds=1)

    def test_duplicate_unlock_is_rejected(self, storage):
        new_achievement(storage)
        run(storage.create_user_achievement(UserAchievementCreate(user_id="u1", achievement_id="week-warrior")))
        with pytest.raises(AchievementAlreadyUnlockedError):
            run(storage.create_user_achievement(UserAchievementCreate(user_id="u1", achievement_id="week-warrior")))
        assert len(run(storage.get_user_achievements("u1"))) == 1


class TestTransaction:
    def test_commit(self, storage):
        async def work():
            async with storage.transaction():
                await storage.create_user(UserCreate(id="u1", username="a", email="a@example.com", name="A"))
                await storage.update_user("u1", UserUpdate(points=40))
        run(work())
        assert run(storage.get_user("u1")).points == 40

    def test_rollback_on_error(self, storage):
        new_user(storage, points=10)
        new_achievement(storage)

        async def work():
            async with storage.transaction():
                await storage.create_user_achievement(
                    UserAchievementCreate(user_id="u1", achievement_id="week-warrior")
                )
                await storage.update_user("u1", UserUpdate(points=110))
                raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            run(work())
        assert run(storage.get_user("u1")).points == 10
        assert run(storage.get_user_achievements("u1")) == []

    def test_nested_transaction_joins_outer(self, storage):
        new_user(storage)

        async def work():
            async with storage.transaction():
                async with storage.transaction():
                    await storage.update_user("u1", UserUpdate(streak=5))
                raise RuntimeError("outer failure")

        with pytest.raises(RuntimeError):
            run(work())
        assert run(storage.get_user("u1")).streak == 0


class TestConcurrentWrites:
    def test_outside_write_survives_rollback(self, storage):
        """事务进行中发生的事务外写入，既不提交该事务的修改，也不会被其回滚覆盖"""
        new_user(storage, points=10)

        async def failing_transaction():
            async with storage.transaction():
                await storage.update_user("u1", UserUpdate(points=500))
                await asyncio.sleep(0.05)
                raise RuntimeError("award failed")

        async def outside_write():
            await asyncio.sleep(0.01)
            await storage.create_user(UserCreate(id="u2", username="b", email="b@example.com", name="B"))

        async def scenario():
            return await asyncio.gather(failing_transaction(), outside_write(), return_exceptions=True)

        failure, _ = run(scenario())
        assert isinstance(failure, RuntimeError)
        assert run(storage.get_user("u1")).points == 10
        assert run(storage.get_user("u2")) is not None


class TestSeed:
    def test_seed_sample_data(self, storage):
        assert run(seed_sample_data(storage)) is True
        user = run(storage.get_user(SAMPLE_USER_ID))
        assert user.username == "ahmad"
        assert user.level == 12
        assert [t.id for t in run(storage.get_all_topics())] == ["functions", "quadratic", "logarithmic", "coordinate"]
        assert len(run(storage.get_lessons_by_topic("quadratic"))) == 6
        assert len(run(storage.get_user_progress(SAMPLE_USER_ID))) == 3
        assert len(run(storage.get_user_achievements(SAMPLE_USER_ID))) == 3

    def test_seed_is_idempotent(self, storage):
        run(seed_sample_data(storage))
        assert run(seed_sample_data(storage)) is False
        assert len(run(storage.get_all_topics())) == 4

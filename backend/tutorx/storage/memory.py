import asyncio
import functools
import logging
import uuid
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import datetime, UTC
from typing import AsyncIterator, Dict, List, Optional

from tutorx.core.exceptions import AchievementAlreadyUnlockedError
from tutorx.storage.base import Storage
from tutorx.schemas.user import User, UserCreate, UserUpdate
from tutorx.schemas.topic import Topic, TopicCreate, Lesson, LessonCreate
from tutorx.schemas.quiz import Quiz, QuizCreate
from tutorx.schemas.user_progress import UserProgress, UserProgressCreate, UserProgressUpdate
from tutorx.schemas.achievement import (
    Achievement,
    AchievementCreate,
    UserAchievement,
    UserAchievementCreate,
    UserAchievementWithDetail,
)

logger = logging.getLogger(__name__)

_TABLES = (
    "users", "topics", "lessons", "quizzes",
    "user_progress", "achievements", "user_achievements",
)


def _exclusive(method):
    """事务外的写操作等待进行中的事务结束，避免事务回滚时覆盖这些写入"""
    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        if self._in_tx.get():
            return await method(self, *args, **kwargs)
        async with self._tx_lock:
            return await method(self, *args, **kwargs)
    return wrapper


class MemoryStorage(Storage):
    """进程内存储实现

    以插入顺序保存的字典作为各实体表。实例在应用启动时创建一次，
    通过依赖注入传递给所有使用方。已保存的实体不做原地修改，
    更新时整体替换，因此事务快照只需复制各个字典。
    事务进行中时，事务外的写操作排队等待，回滚恢复快照不会丢失它们。
    """

    def __init__(self):
        self.users: Dict[str, User] = {}
        self.topics: Dict[str, Topic] = {}
        self.lessons: Dict[str, Lesson] = {}
        self.quizzes: Dict[str, Quiz] = {}
        self.user_progress: Dict[str, UserProgress] = {}
        self.achievements: Dict[str, Achievement] = {}
        self.user_achievements: Dict[str, UserAchievement] = {}
        self._tx_lock = asyncio.Lock()
        self._in_tx: ContextVar[bool] = ContextVar(f"memory_tx_{id(self)}", default=False)

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    # --- 用户 ---
    async def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    @_exclusive
    async def create_user(self, user_in: UserCreate) -> User:
        data = user_in.model_dump()
        data["id"] = data.get("id") or self._new_id()
        user = User(**data, created_at=datetime.now(UTC))
        self.users[user.id] = user
        return user

    @_exclusive
    async def update_user(self, user_id: str, updates: UserUpdate) -> Optional[User]:
        user = self.users.get(user_id)
        if user is None:
            return None
        updated = user.model_copy(update=updates.model_dump(exclude_unset=True))
        self.users[user_id] = updated
        return updated

    # --- 主题与课时 ---
    async def get_all_topics(self) -> List[Topic]:
        # sorted 是稳定排序，order 相同时保持插入顺序
        return sorted(self.topics.values(), key=lambda t: t.order)

    async def get_topic(self, topic_id: str) -> Optional[Topic]:
        return self.topics.get(topic_id)

    @_exclusive
    async def create_topic(self, topic_in: TopicCreate) -> Topic:
        topic = Topic(**topic_in.model_dump())
        self.topics[topic.id] = topic
        return topic

    async def get_lessons_by_topic(self, topic_id: str) -> List[Lesson]:
        lessons = [lesson for lesson in self.lessons.values() if lesson.topic_id == topic_id]
        return sorted(lessons, key=lambda lesson: lesson.order)

    async def get_lesson(self, lesson_id: str) -> Optional[Lesson]:
        return self.lessons.get(lesson_id)

    @_exclusive
    async def create_lesson(self, lesson_in: LessonCreate) -> Lesson:
        lesson = Lesson(**lesson_in.model_dump())
        self.lessons[lesson.id] = lesson
        return lesson

    # --- 测验 ---
    async def get_quizzes(
        self, *, topic_id: Optional[str] = None, lesson_id: Optional[str] = None
    ) -> List[Quiz]:
        return [
            quiz for quiz in self.quizzes.values()
            if (topic_id is None or quiz.topic_id == topic_id)
            and (lesson_id is None or quiz.lesson_id == lesson_id)
        ]

    async def get_quiz(self, quiz_id: str) -> Optional[Quiz]:
        return self.quizzes.get(quiz_id)

    @_exclusive
    async def create_quiz(self, quiz_in: QuizCreate) -> Quiz:
        quiz = Quiz(**quiz_in.model_dump())
        self.quizzes[quiz.id] = quiz
        return quiz

    # --- 学习进度 ---
    async def get_user_progress(self, user_id: str) -> List[UserProgress]:
        return [p for p in self.user_progress.values() if p.user_id == user_id]

    async def get_user_topic_progress(self, user_id: str, topic_id: str) -> List[UserProgress]:
        return [
            p for p in self.user_progress.values()
            if p.user_id == user_id and p.topic_id == topic_id
        ]

    @_exclusive
    async def create_user_progress(self, progress_in: UserProgressCreate) -> UserProgress:
        progress = UserProgress(id=self._new_id(), **progress_in.model_dump())
        self.user_progress[progress.id] = progress
        return progress

    @_exclusive
    async def update_user_progress(
        self, progress_id: str, updates: UserProgressUpdate
    ) -> Optional[UserProgress]:
        progress = self.user_progress.get(progress_id)
        if progress is None:
            return None
        updated = progress.model_copy(update=updates.model_dump(exclude_unset=True))
        self.user_progress[progress_id] = updated
        return updated

    # --- 成就 ---
    async def get_all_achievements(self) -> List[Achievement]:
        return list(self.achievements.values())

    @_exclusive
    async def create_achievement(self, achievement_in: AchievementCreate) -> Achievement:
        achievement = Achievement(**achievement_in.model_dump())
        self.achievements[achievement.id] = achievement
        return achievement

    async def get_user_achievements(self, user_id: str) -> List[UserAchievementWithDetail]:
        result = []
        for ua in self.user_achievements.values():
            if ua.user_id != user_id:
                continue
            achievement = self.achievements.get(ua.achievement_id)
            if achievement is None:
                # 成就定义缺失时跳过该记录
                logger.warning("UserAchievement %s references unknown achievement %s", ua.id, ua.achievement_id)
                continue
            result.append(UserAchievementWithDetail(**ua.model_dump(), achievement=achievement))
        return result

    @_exclusive
    async def create_user_achievement(self, user_achievement_in: UserAchievementCreate) -> UserAchievement:
        for ua in self.user_achievements.values():
            if (ua.user_id == user_achievement_in.user_id
                    and ua.achievement_id == user_achievement_in.achievement_id):
                raise AchievementAlreadyUnlockedError(ua.user_id, ua.achievement_id)
        user_achievement = UserAchievement(
            id=self._new_id(),
            user_id=user_achievement_in.user_id,
            achievement_id=user_achievement_in.achievement_id,
            unlocked_at=user_achievement_in.unlocked_at or datetime.now(UTC),
        )
        self.user_achievements[user_achievement.id] = user_achievement
        return user_achievement

    # --- 事务 ---
    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._in_tx.get():
            # 已处于事务中，并入外层事务
            yield
            return
        async with self._tx_lock:
            snapshot = {name: dict(getattr(self, name)) for name in _TABLES}
            token = self._in_tx.set(True)
            try:
                yield
            except BaseException:
                for name, table in snapshot.items():
                    setattr(self, name, table)
                logger.warning("MemoryStorage: transaction rolled back")
                raise
            finally:
                self._in_tx.reset(token)

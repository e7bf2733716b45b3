"""
数据访问端口

定义七类实体（用户、主题、课时、测验、进度、成就、用户成就）上的异步CRUD契约。
聚合引擎和成就评估器只依赖这里返回的实体集合，不关心具体的存储技术。

契约要点：
- 单实体查询找不到时返回 None，不抛异常
- 主题按 order 升序返回，order 相同时保持插入顺序
- 课时按主题内 order 升序返回
- 部分更新采用合并语义，未提供的字段保持原值；ID 不存在时返回 None
- 不得静默丢弃或重排记录
- transaction() 提供全有或全无的写入边界
"""
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import List, Optional

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


class Storage(ABC):

    # --- 用户 ---
    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    async def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    async def create_user(self, user_in: UserCreate) -> User: ...

    @abstractmethod
    async def update_user(self, user_id: str, updates: UserUpdate) -> Optional[User]: ...

    # --- 主题与课时 ---
    @abstractmethod
    async def get_all_topics(self) -> List[Topic]: ...

    @abstractmethod
    async def get_topic(self, topic_id: str) -> Optional[Topic]: ...

    @abstractmethod
    async def create_topic(self, topic_in: TopicCreate) -> Topic: ...

    @abstractmethod
    async def get_lessons_by_topic(self, topic_id: str) -> List[Lesson]: ...

    @abstractmethod
    async def get_lesson(self, lesson_id: str) -> Optional[Lesson]: ...

    @abstractmethod
    async def create_lesson(self, lesson_in: LessonCreate) -> Lesson: ...

    # --- 测验 ---
    @abstractmethod
    async def get_quizzes(
        self, *, topic_id: Optional[str] = None, lesson_id: Optional[str] = None
    ) -> List[Quiz]: ...

    @abstractmethod
    async def get_quiz(self, quiz_id: str) -> Optional[Quiz]: ...

    @abstractmethod
    async def create_quiz(self, quiz_in: QuizCreate) -> Quiz: ...

    async def get_quizzes_by_topic(self, topic_id: str) -> List[Quiz]:
        return await self.get_quizzes(topic_id=topic_id)

    async def get_quizzes_by_lesson(self, lesson_id: str) -> List[Quiz]:
        return await self.get_quizzes(lesson_id=lesson_id)

    # --- 学习进度 ---
    @abstractmethod
    async def get_user_progress(self, user_id: str) -> List[UserProgress]: ...

    @abstractmethod
    async def get_user_topic_progress(self, user_id: str, topic_id: str) -> List[UserProgress]: ...

    @abstractmethod
    async def create_user_progress(self, progress_in: UserProgressCreate) -> UserProgress: ...

    @abstractmethod
    async def update_user_progress(
        self, progress_id: str, updates: UserProgressUpdate
    ) -> Optional[UserProgress]: ...

    # --- 成就 ---
    @abstractmethod
    async def get_all_achievements(self) -> List[Achievement]: ...

    @abstractmethod
    async def create_achievement(self, achievement_in: AchievementCreate) -> Achievement: ...

    @abstractmethod
    async def get_user_achievements(self, user_id: str) -> List[UserAchievementWithDetail]: ...

    @abstractmethod
    async def create_user_achievement(self, user_achievement_in: UserAchievementCreate) -> UserAchievement:
        """创建用户成就并写入解锁时间

        Raises:
            AchievementAlreadyUnlockedError: 该用户已解锁此成就
        """

    # --- 事务 ---
    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        """全有或全无的写入边界，块内抛出异常时回滚块内全部写入"""

import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from contextvars import ContextVar
from datetime import datetime, UTC
from typing import Any, AsyncIterator, Callable, List, Optional, TypeVar

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tutorx import crud
from tutorx import models  # noqa: F401  注册所有表
from tutorx.core.exceptions import AchievementAlreadyUnlockedError, StorageError
from tutorx.db.base_class import Base
from tutorx.db.database import build_engine, build_session_factory
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

T = TypeVar("T")


class SQLStorage(Storage):
    """基于 SQLAlchemy 的存储实现

    同步的会话操作通过 run_in_threadpool 在线程池中执行。
    事务外的每个操作使用独立会话并立即提交；
    transaction() 内的操作共享同一个会话，在边界结束时统一提交或回滚。
    使用 StaticPool（SQLite 内存数据库）时，事务外的操作会等待进行中的事务结束。
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory
        self._tx_lock = asyncio.Lock()
        self._tx_session: ContextVar[Optional[Session]] = ContextVar(
            f"sql_tx_session_{id(self)}", default=None
        )
        bind = session_factory.kw.get("bind")
        # StaticPool 下所有会话共用一个连接，事务外的提交会连带提交进行中事务的写入
        self._shared_connection = bind is not None and isinstance(bind.pool, StaticPool)

    @classmethod
    def from_url(cls, database_url: str) -> "SQLStorage":
        """根据数据库URL创建存储实例，并确保所有表已创建"""
        engine = build_engine(database_url)
        Base.metadata.create_all(bind=engine)
        logger.info("SQLStorage: tables ready at %s", engine.url.render_as_string(hide_password=True))
        return cls(build_session_factory(engine))

    def _run_in_session(self, fn: Callable[[Session], T]) -> T:
        db = self._session_factory()
        try:
            result = fn(db)
            db.commit()
            return result
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(f"Database operation failed: {e}") from e
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @staticmethod
    def _run_in_transaction(fn: Callable[[Session], T], db: Session) -> T:
        try:
            return fn(db)
        except SQLAlchemyError as e:
            raise StorageError(f"Database operation failed: {e}") from e

    async def _run(self, fn: Callable[[Session], T]) -> T:
        db = self._tx_session.get()
        if db is not None:
            return await run_in_threadpool(self._run_in_transaction, fn, db)
        if self._shared_connection:
            async with self._tx_lock:
                return await run_in_threadpool(self._run_in_session, fn)
        return await run_in_threadpool(self._run_in_session, fn)

    @staticmethod
    def _new_id() -> str:
        return str(uuid.uuid4())

    # --- 用户 ---
    async def get_user(self, user_id: str) -> Optional[User]:
        def work(db: Session) -> Optional[User]:
            row = crud.user.get(db, user_id)
            return User.model_validate(row) if row else None
        return await self._run(work)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        def work(db: Session) -> Optional[User]:
            row = crud.user.get_by_username(db, username=username)
            return User.model_validate(row) if row else None
        return await self._run(work)

    async def create_user(self, user_in: UserCreate) -> User:
        data = user_in.model_dump()
        data["id"] = data.get("id") or self._new_id()
        data["created_at"] = datetime.now(UTC)
        return await self._run(lambda db: User.model_validate(crud.user.create(db, obj_in=data)))

    async def update_user(self, user_id: str, updates: UserUpdate) -> Optional[User]:
        def work(db: Session) -> Optional[User]:
            row = crud.user.get(db, user_id)
            if row is None:
                return None
            return User.model_validate(crud.user.update(db, db_obj=row, obj_in=updates))
        return await self._run(work)

    # --- 主题与课时 ---
    async def get_all_topics(self) -> List[Topic]:
        return await self._run(
            lambda db: [Topic.model_validate(row) for row in crud.topic.get_all_ordered(db)]
        )

    async def get_topic(self, topic_id: str) -> Optional[Topic]:
        def work(db: Session) -> Optional[Topic]:
            row = crud.topic.get(db, topic_id)
            return Topic.model_validate(row) if row else None
        return await self._run(work)

    async def create_topic(self, topic_in: TopicCreate) -> Topic:
        return await self._run(lambda db: Topic.model_validate(crud.topic.create(db, obj_in=topic_in)))

    async def get_lessons_by_topic(self, topic_id: str) -> List[Lesson]:
        return await self._run(
            lambda db: [Lesson.model_validate(row) for row in crud.lesson.get_by_topic(db, topic_id=topic_id)]
        )

    async def get_lesson(self, lesson_id: str) -> Optional[Lesson]:
        def work(db: Session) -> Optional[Lesson]:
            row = crud.lesson.get(db, lesson_id)
            return Lesson.model_validate(row) if row else None
        return await self._run(work)

    async def create_lesson(self, lesson_in: LessonCreate) -> Lesson:
        return await self._run(lambda db: Lesson.model_validate(crud.lesson.create(db, obj_in=lesson_in)))

    # --- 测验 ---
    async def get_quizzes(
        self, *, topic_id: Optional[str] = None, lesson_id: Optional[str] = None
    ) -> List[Quiz]:
        return await self._run(
            lambda db: [
                Quiz.model_validate(row)
                for row in crud.quiz.get_filtered(db, topic_id=topic_id, lesson_id=lesson_id)
            ]
        )

    async def get_quiz(self, quiz_id: str) -> Optional[Quiz]:
        def work(db: Session) -> Optional[Quiz]:
            row = crud.quiz.get(db, quiz_id)
            return Quiz.model_validate(row) if row else None
        return await self._run(work)

    async def create_quiz(self, quiz_in: QuizCreate) -> Quiz:
        return await self._run(lambda db: Quiz.model_validate(crud.quiz.create(db, obj_in=quiz_in)))

    # --- 学习进度 ---
    async def get_user_progress(self, user_id: str) -> List[UserProgress]:
        return await self._run(
            lambda db: [UserProgress.model_validate(row) for row in crud.progress.get_by_user(db, user_id=user_id)]
        )

    async def get_user_topic_progress(self, user_id: str, topic_id: str) -> List[UserProgress]:
        return await self._run(
            lambda db: [
                UserProgress.model_validate(row)
                for row in crud.progress.get_by_user_and_topic(db, user_id=user_id, topic_id=topic_id)
            ]
        )

    async def create_user_progress(self, progress_in: UserProgressCreate) -> UserProgress:
        data = progress_in.model_dump()
        data["id"] = self._new_id()
        return await self._run(lambda db: UserProgress.model_validate(crud.progress.create(db, obj_in=data)))

    async def update_user_progress(
        self, progress_id: str, updates: UserProgressUpdate
    ) -> Optional[UserProgress]:
        def work(db: Session) -> Optional[UserProgress]:
            row = crud.progress.get(db, progress_id)
            if row is None:
                return None
            return UserProgress.model_validate(crud.progress.update(db, db_obj=row, obj_in=updates))
        return await self._run(work)

    # --- 成就 ---
    async def get_all_achievements(self) -> List[Achievement]:
        return await self._run(
            lambda db: [Achievement.model_validate(row) for row in crud.achievement.get_multi(db)]
        )

    async def create_achievement(self, achievement_in: AchievementCreate) -> Achievement:
        return await self._run(
            lambda db: Achievement.model_validate(crud.achievement.create(db, obj_in=achievement_in))
        )

    async def get_user_achievements(self, user_id: str) -> List[UserAchievementWithDetail]:
        def work(db: Session) -> List[UserAchievementWithDetail]:
            return [
                UserAchievementWithDetail(
                    id=ua.id,
                    user_id=ua.user_id,
                    achievement_id=ua.achievement_id,
                    unlocked_at=ua.unlocked_at,
                    achievement=Achievement.model_validate(ach),
                )
                for ua, ach in crud.user_achievement.get_by_user_with_detail(db, user_id=user_id)
            ]
        return await self._run(work)

    async def create_user_achievement(self, user_achievement_in: UserAchievementCreate) -> UserAchievement:
        user_id = user_achievement_in.user_id
        achievement_id = user_achievement_in.achievement_id
        data: dict[str, Any] = {
            "id": self._new_id(),
            "user_id": user_id,
            "achievement_id": achievement_id,
            "unlocked_at": user_achievement_in.unlocked_at or datetime.now(UTC),
        }

        def work(db: Session) -> UserAchievement:
            if crud.user_achievement.exists(db, user_id=user_id, achievement_id=achievement_id):
                raise AchievementAlreadyUnlockedError(user_id, achievement_id)
            try:
                row = crud.user_achievement.create(db, obj_in=data)
            except IntegrityError as e:
                # 并发插入时由唯一约束兜底
                raise AchievementAlreadyUnlockedError(user_id, achievement_id) from e
            return UserAchievement.model_validate(row)
        return await self._run(work)

    # --- 事务 ---
    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._tx_session.get() is not None:
            # 已处于事务中，并入外层事务
            yield
            return
        async with self._tx_lock:
            db = self._session_factory()
            token = self._tx_session.set(db)
            try:
                yield
                await run_in_threadpool(db.commit)
            except SQLAlchemyError as e:
                await run_in_threadpool(db.rollback)
                logger.warning("SQLStorage: transaction rolled back: %s", e)
                raise StorageError(f"Transaction failed: {e}") from e
            except BaseException:
                await run_in_threadpool(db.rollback)
                logger.warning("SQLStorage: transaction rolled back")
                raise
            finally:
                self._tx_session.reset(token)
                db.close()

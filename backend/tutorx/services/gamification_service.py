import logging
from datetime import datetime, UTC
from typing import List, Optional

from tutorx.core.exceptions import (
    AchievementAlreadyUnlockedError,
    InvalidSubmissionError,
    QuizNotFoundError,
    TopicNotFoundError,
    UserNotFoundError,
)
from tutorx.storage.base import Storage
from tutorx.schemas.achievement import Achievement, UserAchievementCreate
from tutorx.schemas.quiz import QuizAttempt, QuizResult
from tutorx.schemas.user import User, UserUpdate
from tutorx.schemas.user_progress import ProgressSubmission, SubmissionResult, UserProgressCreate
from tutorx.services.achievement_evaluator import evaluate_unlocks
from tutorx.services.aggregation import level_for_points
from tutorx.services.quiz_grading import grade_quiz

# 配置日志
logger = logging.getLogger(__name__)

# 客户端未上报用时的测验按5分钟记录
DEFAULT_QUIZ_TIME_SPENT = 300


class GamificationService:
    """
    进度提交与成就发放

    评估器只给出新满足条件的成就；这里负责把"写入用户成就"和"增加经验值"
    放进同一个存储事务，两步要么都生效，要么都不生效。
    经验值变化后同步更新等级（只升不降）。
    """

    def __init__(self, storage: Storage):
        self.storage = storage

    async def _require_user(self, user_id: str) -> User:
        user = await self.storage.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    async def credit_points(self, user_id: str, points: int) -> User:
        """增加用户经验值并重新计算等级"""
        user = await self._require_user(user_id)
        new_points = user.points + points
        updated = await self.storage.update_user(
            user_id,
            UserUpdate(points=new_points, level=max(user.level, level_for_points(new_points))),
        )
        if updated is None:
            raise UserNotFoundError(user_id)
        return updated

    async def update_user(self, user_id: str, updates: UserUpdate) -> User:
        """合并更新用户指标；只改经验值时等级随之上调"""
        user = await self._require_user(user_id)
        if updates.points is not None and updates.level is None:
            updates = updates.model_copy(
                update={"level": max(user.level, level_for_points(updates.points))}
            )
        updated = await self.storage.update_user(user_id, updates)
        if updated is None:
            raise UserNotFoundError(user_id)
        return updated

    async def award_achievement(self, user_id: str, achievement: Achievement) -> None:
        """先写入用户成就，再发放经验值；任一步失败则整体回滚"""
        async with self.storage.transaction():
            await self.storage.create_user_achievement(
                UserAchievementCreate(user_id=user_id, achievement_id=achievement.id)
            )
            await self.credit_points(user_id, achievement.points_reward)
        logger.info(
            "GamificationService: 用户 %s 解锁成就 %s (+%d XP)",
            user_id, achievement.id, achievement.points_reward,
        )

    async def award_unlocks(self, user_id: str) -> List[Achievement]:
        """评估并发放用户新满足条件的成就，返回实际发放的成就列表"""
        user = await self._require_user(user_id)
        progress = await self.storage.get_user_progress(user_id)
        achievements = await self.storage.get_all_achievements()
        unlocked = await self.storage.get_user_achievements(user_id)

        awarded: List[Achievement] = []
        for achievement in evaluate_unlocks(user, progress, achievements, unlocked):
            try:
                await self.award_achievement(user_id, achievement)
            except AchievementAlreadyUnlockedError:
                # 并发提交时另一个请求已经发放
                logger.warning(
                    "GamificationService: 成就 %s 已被用户 %s 解锁，跳过", achievement.id, user_id
                )
                continue
            awarded.append(achievement)
        return awarded

    async def submit_progress(self, submission: ProgressSubmission) -> SubmissionResult:
        """记录一次学习完成事件，并检查成就解锁"""
        await self._require_user(submission.user_id)
        if await self.storage.get_topic(submission.topic_id) is None:
            raise TopicNotFoundError(submission.topic_id)

        progress = await self.storage.create_user_progress(
            UserProgressCreate(**submission.model_dump())
        )
        logger.info(
            "GamificationService: 用户 %s 提交进度 topic=%s lesson=%s completed=%s score=%s",
            submission.user_id, submission.topic_id, submission.lesson_id,
            submission.is_completed, submission.score,
        )
        unlocked = await self.award_unlocks(submission.user_id)
        return SubmissionResult(progress=progress, unlocked_achievements=unlocked)

    async def _resolve_quiz_topic(self, topic_id: Optional[str], lesson_id: Optional[str]) -> str:
        if topic_id is not None:
            return topic_id
        if lesson_id is not None:
            lesson = await self.storage.get_lesson(lesson_id)
            if lesson is not None:
                return lesson.topic_id
        raise InvalidSubmissionError("Quiz is not attached to any topic")

    async def submit_quiz(self, quiz_id: str, attempt: QuizAttempt) -> QuizResult:
        """评分、记录完成记录并发放测验经验值，然后检查成就解锁"""
        quiz = await self.storage.get_quiz(quiz_id)
        if quiz is None:
            raise QuizNotFoundError(quiz_id)
        await self._require_user(attempt.user_id)
        topic_id = await self._resolve_quiz_topic(quiz.topic_id, quiz.lesson_id)

        grade = grade_quiz(quiz, attempt.answers)
        time_spent = attempt.time_spent if attempt.time_spent is not None else DEFAULT_QUIZ_TIME_SPENT

        async with self.storage.transaction():
            progress = await self.storage.create_user_progress(UserProgressCreate(
                user_id=attempt.user_id,
                topic_id=topic_id,
                lesson_id=quiz.lesson_id,
                is_completed=True,
                score=grade.score,
                time_spent=time_spent,
                completed_at=datetime.now(UTC),
            ))
            await self.credit_points(attempt.user_id, quiz.points_reward)
        logger.info(
            "GamificationService: 用户 %s 完成测验 %s，得分 %d%%", attempt.user_id, quiz_id, grade.score
        )

        unlocked = await self.award_unlocks(attempt.user_id)
        return QuizResult(
            score=grade.score,
            correct_answers=grade.correct_answers,
            total_questions=grade.total_questions,
            points_awarded=quiz.points_reward,
            progress=progress,
            unlocked_achievements=unlocked,
        )

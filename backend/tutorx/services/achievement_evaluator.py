"""
成就评估器

根据用户的连续学习天数、历史进度记录判断哪些成就新满足了解锁条件。
每种解锁条件对应一个谓词函数，PREDICATES 必须覆盖 RequirementKind 的所有成员。
评估器不产生副作用，写入用户成就和发放经验值由调用方负责。
"""
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from tutorx.core.exceptions import UserNotFoundError
from tutorx.schemas.achievement import Achievement, RequirementKind, UserAchievement
from tutorx.schemas.user import User
from tutorx.schemas.user_progress import UserProgress

Predicate = Callable[[User, Sequence[UserProgress]], bool]

STREAK_DAYS_REQUIRED = 7
HIGH_SCORE_THRESHOLD = 90
HIGH_SCORES_REQUIRED = 5
FAST_COMPLETIONS_REQUIRED = 3
FAST_COMPLETION_WINDOW = timedelta(hours=1)


def completions_within_window(
    progress: Iterable[UserProgress], count: int, window: timedelta
) -> bool:
    """是否存在一个长度为 window 的滑动窗口（含端点），其中至少有 count 条完成记录"""
    times: List[datetime] = sorted(
        p.completed_at for p in progress if p.is_completed and p.completed_at is not None
    )
    start = 0
    for end, finished_at in enumerate(times):
        while finished_at - times[start] > window:
            start += 1
        if end - start + 1 >= count:
            return True
    return False


def _streak_7_days(user: User, progress: Sequence[UserProgress]) -> bool:
    return user.streak >= STREAK_DAYS_REQUIRED


def _quiz_90_percent_5_times(user: User, progress: Sequence[UserProgress]) -> bool:
    high_scores = sum(
        1 for p in progress if p.score is not None and p.score >= HIGH_SCORE_THRESHOLD
    )
    return high_scores >= HIGH_SCORES_REQUIRED


def _lessons_3_in_1_hour(user: User, progress: Sequence[UserProgress]) -> bool:
    return completions_within_window(progress, FAST_COMPLETIONS_REQUIRED, FAST_COMPLETION_WINDOW)


PREDICATES: Dict[RequirementKind, Predicate] = {
    RequirementKind.STREAK_7_DAYS: _streak_7_days,
    RequirementKind.QUIZ_90_PERCENT_5_TIMES: _quiz_90_percent_5_times,
    RequirementKind.LESSONS_3_IN_1_HOUR: _lessons_3_in_1_hour,
}

_missing = set(RequirementKind) - set(PREDICATES)
if _missing:
    raise RuntimeError(f"No predicate registered for requirements: {sorted(k.value for k in _missing)}")


def is_requirement_met(requirement: RequirementKind, user: User, progress: Sequence[UserProgress]) -> bool:
    return PREDICATES[requirement](user, progress)


def evaluate_unlocks(
    user: Optional[User],
    progress: Sequence[UserProgress],
    achievements: Sequence[Achievement],
    already_unlocked: Iterable[UserAchievement],
) -> List[Achievement]:
    """返回新满足解锁条件、且尚未解锁的成就

    Args:
        user: 用户
        progress: 用户的历史进度记录
        achievements: 全部成就定义
        already_unlocked: 用户已有的成就记录

    Raises:
        UserNotFoundError: 未提供用户
    """
    if user is None:
        raise UserNotFoundError()
    unlocked_ids = {ua.achievement_id for ua in already_unlocked}
    records = [p for p in progress if p.user_id == user.id]

    eligible: List[Achievement] = []
    for achievement in achievements:
        if achievement.id in unlocked_ids:
            continue
        if is_requirement_met(achievement.requirement, user, records):
            eligible.append(achievement)
            unlocked_ids.add(achievement.id)
    return eligible

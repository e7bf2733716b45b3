"""
进度与游戏化聚合引擎

把原始的进度记录、主题、用户成就等实体集合转换为仪表盘、学习进度页、
成就页使用的视图模型。所有函数都是纯函数：不做I/O，不修改输入，
相同输入总是得到相同输出。

规则要点：
- 主题"已完成"：存在该主题的主题级完成记录（is_completed 且 lesson_id 为空）
- 主题"进行中"：有记录但没有符合条件的完成记录
- 平均分只统计带分数的记录，没有分数时为 0
- 所有比例在分母为 0 时返回 0
- 取整统一采用四舍五入（.5 向上）
"""
import math
from typing import Dict, Iterable, List, Optional, Sequence

from tutorx.core.exceptions import UserNotFoundError
from tutorx.schemas.achievement import Achievement, RequirementKind, UserAchievementWithDetail
from tutorx.schemas.dashboard import (
    AchievementCategory,
    AchievementStatus,
    AchievementSummary,
    DashboardStats,
    DashboardViewModel,
    LevelProgress,
    OverallProgress,
    ProgressViewModel,
    RecentActivity,
    TopicProgress,
    TopicWithProgress,
)
from tutorx.schemas.topic import Topic
from tutorx.schemas.user import User
from tutorx.schemas.user_progress import UserProgress

XP_PER_LEVEL = 1000
RECENT_ACHIEVEMENTS_LIMIT = 3
RECENT_ACTIVITY_LIMIT = 5

CATEGORY_TITLES = {
    "study": "Study Mastery",
    "performance": "Academic Excellence",
    "engagement": "Learning Engagement",
    "special": "Special Rewards",
}

REQUIREMENT_CATEGORIES = {
    RequirementKind.STREAK_7_DAYS: "study",
    RequirementKind.QUIZ_90_PERCENT_5_TIMES: "performance",
    RequirementKind.LESSONS_3_IN_1_HOUR: "engagement",
}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def percentage(numerator: float, denominator: float) -> float:
    """numerator / denominator * 100，分母为 0 时返回 0"""
    if denominator == 0:
        return 0.0
    return numerator / denominator * 100


def average_score(progress: Iterable[UserProgress]) -> int:
    scores = [p.score for p in progress if p.score is not None]
    if not scores:
        return 0
    return round_half_up(sum(scores) / len(scores))


def format_study_time(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60}m"


def format_duration(minutes: int) -> str:
    """不足一小时时省略小时部分"""
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if hours > 0 else f"{mins}m"


def level_for_points(points: int) -> int:
    """按每级 XP_PER_LEVEL 经验值推算等级"""
    return max(0, points) // XP_PER_LEVEL + 1


def level_progress(user: User) -> LevelProgress:
    """当前等级内的经验进度

    只做展示用的投影，不会因经验值超过下一级门槛而修改用户等级。
    """
    level_floor = (user.level - 1) * XP_PER_LEVEL
    gained = user.points - level_floor
    return LevelProgress(
        current=max(0, gained),
        total=XP_PER_LEVEL,
        percentage=min(max(0.0, percentage(gained, XP_PER_LEVEL)), 100.0),
        next_level=user.level + 1,
    )


def _records_for_topic(topic_id: str, progress: Sequence[UserProgress]) -> List[UserProgress]:
    return [p for p in progress if p.topic_id == topic_id]


def is_topic_completed(topic_id: str, progress: Sequence[UserProgress]) -> bool:
    return any(
        p.topic_id == topic_id and p.is_completed and p.lesson_id is None
        for p in progress
    )


def topic_status(topic: Topic, progress: Sequence[UserProgress]) -> TopicWithProgress:
    records = _records_for_topic(topic.id, progress)
    completed = is_topic_completed(topic.id, records)
    return TopicWithProgress(
        **topic.model_dump(),
        is_completed=completed,
        is_in_progress=bool(records) and not completed,
        completed_lessons=sum(1 for p in records if p.is_completed),
    )


def _require_user(user: Optional[User]) -> User:
    if user is None:
        raise UserNotFoundError()
    return user


def _own_records(user: User, progress: Iterable[UserProgress]) -> List[UserProgress]:
    return [p for p in progress if p.user_id == user.id]


def compute_dashboard(
    user: Optional[User],
    topics: Sequence[Topic],
    progress: Sequence[UserProgress],
    user_achievements: Sequence[UserAchievementWithDetail],
) -> DashboardViewModel:
    """计算仪表盘视图模型

    Raises:
        UserNotFoundError: 未提供用户
    """
    user = _require_user(user)
    records = _own_records(user, progress)
    completed_topics = sum(1 for topic in topics if is_topic_completed(topic.id, records))

    recent = sorted(user_achievements, key=lambda ua: ua.unlocked_at, reverse=True)

    return DashboardViewModel(
        user=user,
        stats=DashboardStats(
            completed_topics=f"{completed_topics}/{len(topics)}",
            quiz_average=f"{average_score(records)}%",
            study_time=format_study_time(user.study_time_minutes),
            achievements=len(user_achievements),
        ),
        level_progress=level_progress(user),
        recent_achievements=recent[:RECENT_ACHIEVEMENTS_LIMIT],
        topics=[topic_status(topic, records) for topic in topics],
        current_progress=records,
    )


def topic_progress(topic: Topic, progress: Sequence[UserProgress]) -> TopicProgress:
    records = _records_for_topic(topic.id, progress)
    completed_lessons = sum(1 for p in records if p.is_completed)
    return TopicProgress(
        topic_id=topic.id,
        title=topic.title,
        completed_lessons=completed_lessons,
        total_lessons=topic.lessons_count,
        percentage=round_half_up(percentage(completed_lessons, topic.lessons_count)),
        is_completed=is_topic_completed(topic.id, records),
        average_score=average_score(records),
    )


def recent_activity(
    topics: Sequence[Topic],
    progress: Sequence[UserProgress],
    limit: int = RECENT_ACTIVITY_LIMIT,
) -> List[RecentActivity]:
    """最近完成的进度记录，附带主题名称

    没有完成时间的记录不参与排序；引用了未知主题的记录跳过。
    """
    topics_by_id: Dict[str, Topic] = {topic.id: topic for topic in topics}
    timed = sorted(
        (p for p in progress if p.completed_at is not None),
        key=lambda p: p.completed_at,
        reverse=True,
    )
    activity = []
    for record in timed:
        topic = topics_by_id.get(record.topic_id)
        if topic is None:
            continue
        activity.append(RecentActivity(
            **record.model_dump(),
            topic_title=topic.title,
            topic_color=topic.color_class,
        ))
        if len(activity) == limit:
            break
    return activity


def compute_progress(
    user: Optional[User],
    topics: Sequence[Topic],
    progress: Sequence[UserProgress],
) -> ProgressViewModel:
    """计算学习进度页视图模型"""
    user = _require_user(user)
    records = _own_records(user, progress)

    completed_topics = sum(1 for topic in topics if is_topic_completed(topic.id, records))
    completed_lessons = sum(1 for p in records if p.is_completed)
    total_lessons = sum(topic.lessons_count for topic in topics)

    return ProgressViewModel(
        overall=OverallProgress(
            completed_topics=completed_topics,
            total_topics=len(topics),
            topics_percentage=round_half_up(percentage(completed_topics, len(topics))),
            completed_lessons=completed_lessons,
            total_lessons=total_lessons,
            lessons_percentage=round_half_up(percentage(completed_lessons, total_lessons)),
            average_score=average_score(records),
            study_time=format_duration(user.study_time_minutes),
        ),
        level_progress=level_progress(user),
        topic_progress=[topic_progress(topic, records) for topic in topics],
        recent_activity=recent_activity(topics, records),
    )


def compute_achievement_summary(
    achievements: Sequence[Achievement],
    user_achievements: Sequence[UserAchievementWithDetail],
) -> AchievementSummary:
    """成就页汇总：解锁数量、获得的经验值以及按类别分组的成就"""
    unlocked_by_id = {ua.achievement_id: ua for ua in user_achievements}

    categories = {
        key: AchievementCategory(title=title, achievements=[])
        for key, title in CATEGORY_TITLES.items()
    }
    for achievement in achievements:
        unlocked = unlocked_by_id.get(achievement.id)
        category = REQUIREMENT_CATEGORIES.get(achievement.requirement, "special")
        categories[category].achievements.append(AchievementStatus(
            **achievement.model_dump(),
            is_unlocked=unlocked is not None,
            unlocked_at=unlocked.unlocked_at if unlocked else None,
        ))

    return AchievementSummary(
        unlocked=len(user_achievements),
        total=len(achievements),
        percentage=round_half_up(percentage(len(user_achievements), len(achievements))),
        points=sum(ua.achievement.points_reward for ua in user_achievements),
        categories=categories,
    )

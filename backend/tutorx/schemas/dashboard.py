# backend/tutorx/schemas/dashboard.py
"""
视图模型

由聚合引擎根据原始实体集合计算得出，供仪表盘、学习进度页和成就页展示使用。
"""
from pydantic import BaseModel
from typing import Dict, List, Optional
from tutorx.schemas.types import UTCDateTime

from tutorx.schemas.user import User
from tutorx.schemas.topic import Topic
from tutorx.schemas.user_progress import UserProgress
from tutorx.schemas.achievement import Achievement, UserAchievementWithDetail


class LevelProgress(BaseModel):
    """等级进度

    Attributes:
        current: 当前等级内已获得的经验值
        total: 每级所需经验值
        percentage: 当前等级进度百分比，范围[0, 100]
        next_level: 下一等级
    """
    current: int
    total: int
    percentage: float
    next_level: int


class DashboardStats(BaseModel):
    completed_topics: str
    quiz_average: str
    study_time: str
    achievements: int


class TopicWithProgress(Topic):
    """带学习状态的主题"""
    is_completed: bool
    is_in_progress: bool
    completed_lessons: int


class DashboardViewModel(BaseModel):
    user: User
    stats: DashboardStats
    level_progress: LevelProgress
    recent_achievements: List[UserAchievementWithDetail]
    topics: List[TopicWithProgress]
    current_progress: List[UserProgress]


class OverallProgress(BaseModel):
    completed_topics: int
    total_topics: int
    topics_percentage: int
    completed_lessons: int
    total_lessons: int
    lessons_percentage: int
    average_score: int
    study_time: str


class TopicProgress(BaseModel):
    """单个主题的进度

    percentage 不做上限截断：lessons_count 是独立维护的冗余字段，
    已完成记录数可能超过声明的课时数。
    """
    topic_id: str
    title: str
    completed_lessons: int
    total_lessons: int
    percentage: int
    is_completed: bool
    average_score: int


class RecentActivity(UserProgress):
    topic_title: str
    topic_color: str


class ProgressViewModel(BaseModel):
    overall: OverallProgress
    level_progress: LevelProgress
    topic_progress: List[TopicProgress]
    recent_activity: List[RecentActivity]


class AchievementStatus(Achievement):
    is_unlocked: bool
    unlocked_at: Optional[UTCDateTime] = None


class AchievementCategory(BaseModel):
    title: str
    achievements: List[AchievementStatus]


class AchievementSummary(BaseModel):
    unlocked: int
    total: int
    percentage: int
    points: int
    categories: Dict[str, AchievementCategory]

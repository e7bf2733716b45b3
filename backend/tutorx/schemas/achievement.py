# backend/tutorx/schemas/achievement.py
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from tutorx.schemas.types import UTCDateTime
from typing import Optional


class RequirementKind(str, Enum):
    """成就解锁条件类型（封闭枚举）"""
    STREAK_7_DAYS = "streak_7_days"
    QUIZ_90_PERCENT_5_TIMES = "quiz_90_percent_5_times"
    LESSONS_3_IN_1_HOUR = "lessons_3_in_1_hour"


class AchievementBase(BaseModel):
    """成就基础模型

    Attributes:
        id: 成就ID，例如 "week-warrior"
        title: 成就名称
        description: 成就描述
        icon_class: 图标样式
        color_class: 徽章配色
        requirement: 解锁条件类型
        points_reward: 解锁后奖励的经验值
    """
    id: str
    title: str
    description: str
    icon_class: str = ""
    color_class: str = ""
    requirement: RequirementKind
    points_reward: int = Field(100, ge=0)

class AchievementCreate(AchievementBase):
    pass

class Achievement(AchievementBase):
    model_config = ConfigDict(from_attributes=True)


class UserAchievementCreate(BaseModel):
    """用户成就创建模型，解锁时间由存储层写入"""
    user_id: str
    achievement_id: str
    unlocked_at: Optional[UTCDateTime] = None

class UserAchievement(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    achievement_id: str
    unlocked_at: UTCDateTime

class UserAchievementWithDetail(UserAchievement):
    """附带成就详情的用户成就记录"""
    achievement: Achievement

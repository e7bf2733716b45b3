# backend/tutorx/schemas/topic.py
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class Difficulty(str, Enum):
    """主题难度"""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class TopicBase(BaseModel):
    """课程主题基础模型

    Attributes:
        id: 主题标识，例如 "functions"
        title: 显示名称
        description: 主题简介
        difficulty: 难度等级
        estimated_minutes: 预计完成全部课时所需分钟数
        lessons_count: 声明的课时数量（独立维护的冗余字段）
        rating: 评分，以0.1星为单位（0-50）
        icon_class: 图标样式
        color_class: 主题配色
        order: 显示顺序
        is_locked: 是否锁定
    """
    id: str
    title: str
    description: str
    difficulty: Difficulty
    estimated_minutes: int = Field(..., ge=0)
    lessons_count: int = Field(..., ge=0)
    rating: int = Field(50, ge=0, le=50)
    icon_class: str = ""
    color_class: str = ""
    order: int
    is_locked: bool = False

class TopicCreate(TopicBase):
    pass

class Topic(TopicBase):
    model_config = ConfigDict(from_attributes=True)


class LessonBase(BaseModel):
    """课时基础模型

    Attributes:
        id: 课时标识，例如 "quadratic-1"
        topic_id: 所属主题
        title: 课时标题
        description: 课时简介
        video_url: 教学视频地址（可选）
        video_duration: 视频时长，单位秒（可选）
        content: 课时正文
        order: 主题内顺序
    """
    id: str
    topic_id: str
    title: str
    description: str
    video_url: Optional[str] = None
    video_duration: Optional[int] = Field(None, ge=0)
    content: str
    order: int

class LessonCreate(LessonBase):
    pass

class Lesson(LessonBase):
    model_config = ConfigDict(from_attributes=True)

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from tutorx.schemas.types import UTCDateTime, reject_null

from tutorx.schemas.achievement import Achievement

# 接口通用字段
class UserProgressBase(BaseModel):
    """用户学习进度基础模型

    一条记录代表一次完成事件。lesson_id 为空表示主题级完成记录。

    Attributes:
        user_id: 用户ID
        topic_id: 主题ID
        lesson_id: 课时ID（可选）
        is_completed: 是否完成
        score: 测验得分（0-100，可选）
        time_spent: 用时，单位秒（可选）
        completed_at: 完成时间（可选）
    """
    user_id: str
    topic_id: str
    lesson_id: Optional[str] = None
    is_completed: bool = False
    score: Optional[int] = Field(None, ge=0, le=100)
    time_spent: Optional[int] = Field(None, ge=0)
    completed_at: Optional[UTCDateTime] = None

# 用于创建接口的输入模型
class UserProgressCreate(UserProgressBase):
    """用户学习进度创建模型，未提供的字段使用默认值"""
    pass

class ProgressSubmission(UserProgressBase):
    """外部提交的进度载荷

    与创建模型的区别在于完成标志必须显式给出。
    """
    is_completed: bool

# 用于更新接口的输入模型
class UserProgressUpdate(BaseModel):
    """用户学习进度更新模型，只有显式提供的字段会被修改

    score、time_spent、completed_at 可以显式置空以清除原值；is_completed 不能置空。
    """
    is_completed: Optional[bool] = None
    score: Optional[int] = Field(None, ge=0, le=100)
    time_spent: Optional[int] = Field(None, ge=0)
    completed_at: Optional[UTCDateTime] = None

    @field_validator("is_completed")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class UserProgress(UserProgressBase):
    """数据库中的进度记录"""
    model_config = ConfigDict(from_attributes=True)

    id: str

class SubmissionResult(BaseModel):
    """进度提交结果，包含新解锁的成就"""
    progress: UserProgress
    unlocked_achievements: List[Achievement] = []

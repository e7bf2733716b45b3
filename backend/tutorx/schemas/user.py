# backend/tutorx/schemas/user.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from tutorx.schemas.types import UTCDateTime, reject_null

class UserBase(BaseModel):
    """用户基础模型

    Attributes:
        username: 登录用户名
        email: 邮箱地址
        name: 显示名称
        level: 当前等级（从1开始）
        points: 累计经验值（XP）
        streak: 连续学习天数
        study_time_minutes: 累计学习分钟数
    """
    username: str
    email: str
    name: str
    level: int = Field(1, ge=1)
    points: int = Field(0, ge=0)
    streak: int = Field(0, ge=0)
    study_time_minutes: int = Field(0, ge=0)

class UserCreate(UserBase):
    """创建用户请求模型，id 可选，缺省时由存储层生成"""
    id: Optional[str] = None

class UserUpdate(BaseModel):
    """更新用户请求模型，只有显式提供的字段会被修改"""
    name: Optional[str] = None
    email: Optional[str] = None
    level: Optional[int] = Field(None, ge=1)
    points: Optional[int] = Field(None, ge=0)
    streak: Optional[int] = Field(None, ge=0)
    study_time_minutes: Optional[int] = Field(None, ge=0)

    @field_validator("name", "email", "level", "points", "streak", "study_time_minutes")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

class User(UserBase):
    """用户响应模型"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: Optional[UTCDateTime] = None

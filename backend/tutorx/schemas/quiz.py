# backend/tutorx/schemas/quiz.py
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional

from tutorx.schemas.achievement import Achievement
from tutorx.schemas.user_progress import UserProgress


class QuizQuestion(BaseModel):
    """测验题目

    Attributes:
        id: 题目ID
        question: 题干
        options: 有序选项列表
        correct_answer: 正确选项下标
    """
    id: str
    question: str
    options: List[str]
    correct_answer: int = Field(..., ge=0)

    @model_validator(mode="after")
    def check_answer_index(self) -> "QuizQuestion":
        if self.correct_answer >= len(self.options):
            raise ValueError("correct_answer must index into options")
        return self


class QuizBase(BaseModel):
    """测验基础模型

    Attributes:
        id: 测验ID
        lesson_id: 关联课时（可选）
        topic_id: 关联主题（可选）
        title: 测验标题
        description: 测验说明
        questions: 有序题目列表
        points_reward: 完成后奖励的经验值
        time_limit: 时间限制，单位秒（可选）
    """
    id: str
    lesson_id: Optional[str] = None
    topic_id: Optional[str] = None
    title: str
    description: str
    questions: List[QuizQuestion]
    points_reward: int = Field(50, ge=0)
    time_limit: Optional[int] = Field(None, ge=0)

class QuizCreate(QuizBase):
    pass

class Quiz(QuizBase):
    model_config = ConfigDict(from_attributes=True)


class QuizAttempt(BaseModel):
    """测验作答请求

    Attributes:
        user_id: 作答用户
        answers: 按题目顺序给出的所选选项下标，未作答为 None
        time_spent: 实际用时（秒），缺省时按300秒记录
    """
    user_id: str = Field(..., description="用户ID")
    answers: List[Optional[int]] = Field(..., description="按题目顺序的作答")
    time_spent: Optional[int] = Field(None, ge=0, description="用时（秒）")


class QuizResult(BaseModel):
    """测验评分结果"""
    score: int
    correct_answers: int
    total_questions: int
    points_awarded: int
    progress: UserProgress
    unlocked_achievements: List[Achievement] = []

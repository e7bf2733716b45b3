"""
领域异常定义

- NotFoundError: 引用的ID无法通过数据访问层解析
- StorageError: 数据访问失败（与"暂无数据"严格区分）
- AchievementAlreadyUnlockedError: 同一用户重复解锁同一成就
- InvalidSubmissionError: 测验答案与测验内容不匹配
"""
from typing import Optional


class TutorXError(Exception):
    """所有领域异常的基类"""


class NotFoundError(TutorXError):
    entity = "Entity"

    def __init__(self, entity_id: Optional[str] = None):
        self.entity_id = entity_id
        if entity_id is None:
            super().__init__(f"{self.entity} not found")
        else:
            super().__init__(f"{self.entity} not found: {entity_id}")


class UserNotFoundError(NotFoundError):
    entity = "User"


class TopicNotFoundError(NotFoundError):
    entity = "Topic"


class QuizNotFoundError(NotFoundError):
    entity = "Quiz"


class StorageError(TutorXError):
    """数据访问失败"""


class AchievementAlreadyUnlockedError(TutorXError):
    def __init__(self, user_id: str, achievement_id: str):
        self.user_id = user_id
        self.achievement_id = achievement_id
        super().__init__(f"Achievement {achievement_id} already unlocked for user {user_id}")


class InvalidSubmissionError(TutorXError):
    """测验提交内容无效"""

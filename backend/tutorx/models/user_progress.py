from sqlalchemy import Boolean, Column, Integer, String
from tutorx.db.base_class import Base
from tutorx.db.types import UTCDateTime

class UserProgress(Base):
    """用户进度模型

    每条记录代表一次完成事件；lesson_id 为空表示主题级完成记录。

    Attributes:
        id: 记录ID
        user_id: 关联到 users.id
        topic_id: 主题ID
        lesson_id: 课时ID（可选）
        is_completed: 是否完成
        score: 得分（0-100）
        time_spent: 用时（秒）
        completed_at: 完成时间
    """
    __tablename__ = "user_progress"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    user_id = Column(String, index=True, nullable=False)
    topic_id = Column(String, index=True, nullable=False)
    lesson_id = Column(String, nullable=True)
    is_completed = Column(Boolean, nullable=False, default=False)
    score = Column(Integer, nullable=True)
    time_spent = Column(Integer, nullable=True)
    completed_at = Column(UTCDateTime, nullable=True)

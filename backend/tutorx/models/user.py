from sqlalchemy import Column, Integer, String
from tutorx.db.base_class import Base
from tutorx.db.types import UTCDateTime, utcnow

class User(Base):
    """用户模型

    存储学生账号以及游戏化指标。

    Attributes:
        pk: 自增主键，用于保持插入顺序
        id: 用户ID
        username: 登录用户名
        email: 邮箱
        name: 显示名称
        level: 等级
        points: 经验值
        streak: 连续学习天数
        study_time_minutes: 累计学习分钟数
        created_at: 创建时间
    """
    __tablename__ = "users"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    username = Column(String, unique=True, nullable=False)
    email = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    level = Column(Integer, nullable=False, default=1)
    points = Column(Integer, nullable=False, default=0)
    streak = Column(Integer, nullable=False, default=0)
    study_time_minutes = Column(Integer, nullable=False, default=0)
    created_at = Column(UTCDateTime, default=utcnow)

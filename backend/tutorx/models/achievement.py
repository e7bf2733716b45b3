from sqlalchemy import Column, Integer, String, Text, UniqueConstraint
from tutorx.db.base_class import Base
from tutorx.db.types import UTCDateTime, utcnow


class Achievement(Base):
    __tablename__ = "achievements"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    icon_class = Column(String, nullable=False, default="")
    color_class = Column(String, nullable=False, default="")
    requirement = Column(String, nullable=False)
    points_reward = Column(Integer, nullable=False, default=100)


class UserAchievement(Base):
    """用户已解锁的成就，(user_id, achievement_id) 唯一"""
    __tablename__ = "user_achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    user_id = Column(String, index=True, nullable=False)
    achievement_id = Column(String, index=True, nullable=False)
    unlocked_at = Column(UTCDateTime, nullable=False, default=utcnow)

from sqlalchemy import Column, Integer, String, Text, UniqueConstraint
from tutorx.db.base_class import Base

class Lesson(Base):
    """课时模型，order 在同一主题内唯一"""
    __tablename__ = "lessons"
    __table_args__ = (
        UniqueConstraint("topic_id", "order", name="uq_lesson_topic_order"),
    )

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    topic_id = Column(String, index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    video_url = Column(String, nullable=True)
    video_duration = Column(Integer, nullable=True)
    content = Column(Text, nullable=False)
    order = Column(Integer, nullable=False)

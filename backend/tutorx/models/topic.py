from sqlalchemy import Boolean, Column, Integer, String, Text
from tutorx.db.base_class import Base

class Topic(Base):
    """主题模型

    lessons_count 是声明的课时数，不随课时表自动变化。
    """
    __tablename__ = "topics"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    difficulty = Column(String, nullable=False)
    estimated_minutes = Column(Integer, nullable=False)
    lessons_count = Column(Integer, nullable=False)
    rating = Column(Integer, nullable=False, default=50)
    icon_class = Column(String, nullable=False, default="")
    color_class = Column(String, nullable=False, default="")
    order = Column(Integer, nullable=False, index=True)
    is_locked = Column(Boolean, nullable=False, default=False)

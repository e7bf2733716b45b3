from sqlalchemy import Column, Integer, JSON, String, Text
from tutorx.db.base_class import Base

class Quiz(Base):
    """测验模型

    questions 以JSON数组保存，每道题包含 id / question / options / correct_answer。
    """
    __tablename__ = "quizzes"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    lesson_id = Column(String, index=True, nullable=True)
    topic_id = Column(String, index=True, nullable=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    questions = Column(JSON, nullable=False)
    points_reward = Column(Integer, nullable=False, default=50)
    time_limit = Column(Integer, nullable=True)

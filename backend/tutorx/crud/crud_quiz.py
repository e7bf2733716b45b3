from typing import List, Optional
from sqlalchemy.orm import Session
from tutorx.crud.base import CRUDBase
from tutorx.models.quiz import Quiz
from tutorx.schemas.quiz import QuizCreate

class CRUDQuiz(CRUDBase[Quiz, QuizCreate, QuizCreate]):
    def get_filtered(
        self,
        db: Session,
        *,
        topic_id: Optional[str] = None,
        lesson_id: Optional[str] = None
    ) -> List[Quiz]:
        """按主题或课时精确筛选测验，未提供的条件不做约束"""
        conditions = {}
        if topic_id is not None:
            conditions["topic_id"] = topic_id
        if lesson_id is not None:
            conditions["lesson_id"] = lesson_id
        return self.get_multi(db, filter_conditions=conditions)

quiz = CRUDQuiz(Quiz)

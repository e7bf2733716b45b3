from typing import List
from sqlalchemy.orm import Session
from tutorx.crud.base import CRUDBase
from tutorx.models.lesson import Lesson
from tutorx.schemas.topic import LessonCreate

class CRUDLesson(CRUDBase[Lesson, LessonCreate, LessonCreate]):
    def get_by_topic(self, db: Session, *, topic_id: str) -> List[Lesson]:
        """获取主题下的全部课时，按主题内顺序排列"""
        return self.get_multi(
            db,
            filter_conditions={"topic_id": topic_id},
            order_by="order"
        )

lesson = CRUDLesson(Lesson)

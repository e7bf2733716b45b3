from typing import List
from sqlalchemy.orm import Session
from tutorx.crud.base import CRUDBase
from tutorx.models.topic import Topic
from tutorx.schemas.topic import TopicCreate

class CRUDTopic(CRUDBase[Topic, TopicCreate, TopicCreate]):
    def get_all_ordered(self, db: Session) -> List[Topic]:
        """按显示顺序升序返回全部主题，顺序相同时按插入顺序"""
        return self.get_multi(db, order_by="order")

topic = CRUDTopic(Topic)

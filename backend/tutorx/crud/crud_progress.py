from typing import List
from sqlalchemy.orm import Session
from tutorx.crud.base import CRUDBase
from tutorx.models.user_progress import UserProgress
from tutorx.schemas.user_progress import UserProgressCreate, UserProgressUpdate

class CRUDProgress(CRUDBase[UserProgress, UserProgressCreate, UserProgressUpdate]):
    def get_by_user(self, db: Session, *, user_id: str) -> List[UserProgress]:
        """
        查询指定用户的全部进度记录
        """
        return self.get_multi(db, filter_conditions={"user_id": user_id})

    def get_by_user_and_topic(self, db: Session, *, user_id: str, topic_id: str) -> List[UserProgress]:
        return self.get_multi(
            db,
            filter_conditions={"user_id": user_id, "topic_id": topic_id}
        )

# 实例化并暴露给存储层使用
progress = CRUDProgress(UserProgress)

from typing import List, Tuple
from sqlalchemy.orm import Session
from tutorx.crud.base import CRUDBase
from tutorx.models.achievement import Achievement, UserAchievement
from tutorx.schemas.achievement import AchievementCreate, UserAchievementCreate

class CRUDAchievement(CRUDBase[Achievement, AchievementCreate, AchievementCreate]):
    pass

class CRUDUserAchievement(CRUDBase[UserAchievement, UserAchievementCreate, UserAchievementCreate]):
    def get_by_user_with_detail(self, db: Session, *, user_id: str) -> List[Tuple[UserAchievement, Achievement]]:
        """获取用户已解锁的成就，并连接成就详情"""
        return (
            db.query(UserAchievement, Achievement)
            .join(Achievement, Achievement.id == UserAchievement.achievement_id)
            .filter(UserAchievement.user_id == user_id)
            .order_by(UserAchievement.pk)
            .all()
        )

    def exists(self, db: Session, *, user_id: str, achievement_id: str) -> bool:
        return self.get_count(
            db,
            filter_conditions={"user_id": user_id, "achievement_id": achievement_id}
        ) > 0

achievement = CRUDAchievement(Achievement)
user_achievement = CRUDUserAchievement(UserAchievement)

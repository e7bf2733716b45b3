from typing import Optional
from sqlalchemy.orm import Session
from tutorx.crud.base import CRUDBase
from tutorx.models.user import User
from tutorx.schemas.user import UserCreate, UserUpdate

class CRUDUser(CRUDBase[User, UserCreate, UserUpdate]):
    def get_by_username(self, db: Session, *, username: str) -> Optional[User]:
        """按用户名查询用户"""
        return db.query(User).filter(User.username == username).first()

user = CRUDUser(User)

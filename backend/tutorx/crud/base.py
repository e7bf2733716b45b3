from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union
from pydantic import BaseModel
from sqlalchemy.orm import Session
from sqlalchemy import asc

# 导入SQLAlchemy模型基类
from tutorx.db.base_class import Base

# 定义泛型类型变量
ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


def _column_value(value: Any) -> Any:
    # str 枚举按原始值入库
    if isinstance(value, Enum):
        return value.value
    return value


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        """
        具有默认创建、读取、更新操作的CRUD对象。

        写操作只执行 flush，提交与回滚由调用方（存储层的事务边界）负责。

        **参数**

        * `model`: SQLAlchemy模型类
        """
        self.model = model

    def _filtered(self, db: Session, filter_conditions: Optional[Dict[str, Any]]):
        query = db.query(self.model)
        # 简单相等筛选，忽略模型上不存在的字段
        for field, value in (filter_conditions or {}).items():
            if hasattr(self.model, field):
                query = query.filter(getattr(self.model, field) == value)
        return query

    def get(self, db: Session, obj_id: Any) -> Optional[ModelType]:
        """
        通过ID获取单个记录。

        Args:
            db: 数据库会话
            obj_id: 记录ID

        Returns:
            Optional[ModelType]: 找到的记录，如果不存在则返回None
        """
        if obj_id is None:
            return None
        return db.query(self.model).filter(self.model.id == obj_id).first()  # type: ignore

    def get_multi(
        self,
        db: Session,
        *,
        filter_conditions: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None
    ) -> List[ModelType]:
        """
        获取多个记录（支持筛选和升序排序）。

        排序字段相同的记录按插入顺序（自增主键）返回。

        Args:
            db: 数据库会话
            filter_conditions: 筛选条件字典，例如 {"user_id": "user-1"}
            order_by: 升序排序字段名（可选）

        Returns:
            List[ModelType]: 记录列表
        """
        query = self._filtered(db, filter_conditions)
        if order_by:
            query = query.order_by(asc(getattr(self.model, order_by)))
        return query.order_by(asc(self.model.pk)).all()  # type: ignore

    def get_count(
        self,
        db: Session,
        *,
        filter_conditions: Optional[Dict[str, Any]] = None
    ) -> int:
        """
        获取符合条件的记录总数。
        """
        return self._filtered(db, filter_conditions).count()

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        """
        创建一个新的记录。

        Args:
            db: 数据库会话
            obj_in: 创建记录的数据对象或字典

        Returns:
            ModelType: 创建的记录
        """
        if isinstance(obj_in, dict):
            obj_in_data = obj_in
        else:
            obj_in_data = obj_in.model_dump()
        db_obj = self.model(**{k: _column_value(v) for k, v in obj_in_data.items()})  # SQLAlchemy model
        db.add(db_obj)
        db.flush()
        db.refresh(db_obj)
        return db_obj

    @staticmethod
    def update(
        db: Session,
        *,
        db_obj: ModelType,
        obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        更新一个已存在的记录（合并语义，未提供的字段保持原值）。

        Args:
            db: 数据库会话
            db_obj: 要更新的数据库对象
            obj_in: 更新数据对象，可以是UpdateSchemaType或字典

        Returns:
            ModelType: 更新后的记录
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            # exclude_unset=True 表示只获取被显式设置了值的字段
            update_data = obj_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if field in ("pk", "id"):
                continue
            if hasattr(db_obj, field):
                setattr(db_obj, field, _column_value(value))

        db.add(db_obj)
        db.flush()
        db.refresh(db_obj)
        return db_obj

from datetime import datetime, UTC
from typing import Annotated

from pydantic import AfterValidator


def ensure_utc(value: datetime) -> datetime:
    """不带时区的时间按UTC处理，带时区的时间统一转换为UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


UTCDateTime = Annotated[datetime, AfterValidator(ensure_utc)]


def reject_null(value):
    """部分更新时字段可以省略，但不能显式置空"""
    if value is None:
        raise ValueError("field may be omitted but not set to null")
    return value

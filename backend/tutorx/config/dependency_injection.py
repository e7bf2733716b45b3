import logging

from fastapi import Depends, Request

from tutorx.core.config import Settings
from tutorx.storage.base import Storage
from tutorx.storage.memory import MemoryStorage
from tutorx.storage.sql import SQLStorage
from tutorx.services.gamification_service import GamificationService

logger = logging.getLogger(__name__)


def create_storage(app_settings: Settings) -> Storage:
    """根据配置创建存储实例，应用启动时调用一次"""
    if app_settings.STORAGE_BACKEND == "sql":
        logger.info("Using SQL storage backend")
        return SQLStorage.from_url(app_settings.DATABASE_URL)
    logger.info("Using in-memory storage backend")
    return MemoryStorage()


def get_storage(request: Request) -> Storage:
    """
    获取应用级存储实例
    """
    return request.app.state.storage


def get_gamification_service(storage: Storage = Depends(get_storage)) -> GamificationService:
    """
    获取进度提交与成就发放服务实例
    """
    return GamificationService(storage)

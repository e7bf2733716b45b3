import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from tutorx.config.dependency_injection import get_storage, get_gamification_service
from tutorx.core.exceptions import NotFoundError, StorageError
from tutorx.storage.base import Storage
from tutorx.schemas.response import StandardResponse
from tutorx.schemas.user import User, UserUpdate
from tutorx.schemas.user_progress import UserProgress
from tutorx.schemas.achievement import UserAchievementWithDetail
from tutorx.schemas.dashboard import (
    AchievementSummary,
    DashboardViewModel,
    ProgressViewModel,
    TopicWithProgress,
)
from tutorx.services import aggregation
from tutorx.services.gamification_service import GamificationService

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_user_or_404(storage: Storage, user_id: str) -> User:
    user = await storage.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/{user_id}", response_model=StandardResponse[User])
async def get_user(user_id: str, storage: Storage = Depends(get_storage)):
    """获取用户资料及游戏化指标"""
    try:
        user = await _get_user_or_404(storage, user_id)
        return StandardResponse(data=user)
    except StorageError as e:
        logger.exception("Failed to get user %s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to get user: {str(e)}")


@router.put("/{user_id}", response_model=StandardResponse[User])
async def update_user(
    user_id: str,
    updates: UserUpdate,
    service: GamificationService = Depends(get_gamification_service),
):
    """
    更新用户指标（经验值、等级、连续天数、学习时长）。

    只修改请求中出现的字段；经验值变化而未指定等级时，等级随经验值上调。
    """
    try:
        user = await service.update_user(user_id, updates)
        return StandardResponse(data=user)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError as e:
        logger.exception("Failed to update user %s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to update user: {str(e)}")


@router.get("/{user_id}/dashboard", response_model=StandardResponse[DashboardViewModel])
async def get_dashboard(user_id: str, storage: Storage = Depends(get_storage)):
    """仪表盘：完成主题数、测验平均分、学习时长、等级进度与最近成就"""
    try:
        user = await _get_user_or_404(storage, user_id)
        topics = await storage.get_all_topics()
        progress = await storage.get_user_progress(user_id)
        user_achievements = await storage.get_user_achievements(user_id)
        dashboard = aggregation.compute_dashboard(user, topics, progress, user_achievements)
        return StandardResponse(data=dashboard)
    except StorageError as e:
        logger.exception("Failed to get dashboard for %s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to get dashboard data: {str(e)}")


@router.get("/{user_id}/progress", response_model=StandardResponse[List[UserProgress]])
async def get_user_progress(user_id: str, storage: Storage = Depends(get_storage)):
    try:
        progress = await storage.get_user_progress(user_id)
        return StandardResponse(data=progress)
    except StorageError as e:
        logger.exception("Failed to get progress for %s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to get progress: {str(e)}")


@router.get("/{user_id}/progress/overview", response_model=StandardResponse[ProgressViewModel])
async def get_progress_overview(user_id: str, storage: Storage = Depends(get_storage)):
    """学习进度页：总体统计、各主题进度与最近学习记录"""
    try:
        user = await _get_user_or_404(storage, user_id)
        topics = await storage.get_all_topics()
        progress = await storage.get_user_progress(user_id)
        return StandardResponse(data=aggregation.compute_progress(user, topics, progress))
    except StorageError as e:
        logger.exception("Failed to get progress overview for %s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to get progress overview: {str(e)}")


@router.get("/{user_id}/topics", response_model=StandardResponse[List[TopicWithProgress]])
async def get_topics_with_progress(user_id: str, storage: Storage = Depends(get_storage)):
    """主题列表，附带该用户在每个主题上的学习状态"""
    try:
        await _get_user_or_404(storage, user_id)
        topics = await storage.get_all_topics()
        progress = await storage.get_user_progress(user_id)
        return StandardResponse(data=[aggregation.topic_status(topic, progress) for topic in topics])
    except StorageError as e:
        logger.exception("Failed to get topics for %s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to get topics: {str(e)}")


@router.get("/{user_id}/topics/{topic_id}/progress", response_model=StandardResponse[List[UserProgress]])
async def get_user_topic_progress(user_id: str, topic_id: str, storage: Storage = Depends(get_storage)):
    try:
        progress = await storage.get_user_topic_progress(user_id, topic_id)
        return StandardResponse(data=progress)
    except StorageError as e:
        logger.exception("Failed to get topic progress for %s/%s", user_id, topic_id)
        raise HTTPException(status_code=500, detail=f"Failed to get topic progress: {str(e)}")


@router.get("/{user_id}/achievements", response_model=StandardResponse[List[UserAchievementWithDetail]])
async def get_user_achievements(user_id: str, storage: Storage = Depends(get_storage)):
    try:
        user_achievements = await storage.get_user_achievements(user_id)
        return StandardResponse(data=user_achievements)
    except StorageError as e:
        logger.exception("Failed to get achievements for %s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to get user achievements: {str(e)}")


@router.get("/{user_id}/achievements/summary", response_model=StandardResponse[AchievementSummary])
async def get_achievement_summary(user_id: str, storage: Storage = Depends(get_storage)):
    """成就页：解锁进度、获得的经验值以及分类展示"""
    try:
        await _get_user_or_404(storage, user_id)
        achievements = await storage.get_all_achievements()
        user_achievements = await storage.get_user_achievements(user_id)
        summary = aggregation.compute_achievement_summary(achievements, user_achievements)
        return StandardResponse(data=summary)
    except StorageError as e:
        logger.exception("Failed to get achievement summary for %s", user_id)
        raise HTTPException(status_code=500, detail=f"Failed to get achievement summary: {str(e)}")

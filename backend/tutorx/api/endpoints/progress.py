import logging
from fastapi import APIRouter, Depends, HTTPException
from tutorx.config.dependency_injection import get_storage, get_gamification_service
from tutorx.core.exceptions import NotFoundError, StorageError
from tutorx.storage.base import Storage
from tutorx.schemas.response import StandardResponse
from tutorx.schemas.user_progress import (
    ProgressSubmission,
    SubmissionResult,
    UserProgress,
    UserProgressUpdate,
)
from tutorx.services.gamification_service import GamificationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=StandardResponse[SubmissionResult], status_code=201)
async def create_progress(
    submission: ProgressSubmission,
    service: GamificationService = Depends(get_gamification_service),
):
    """记录一次课时或主题完成事件，返回记录及新解锁的成就"""
    try:
        result = await service.submit_progress(submission)
        return StandardResponse(data=result)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError as e:
        logger.exception("Failed to record progress for %s", submission.user_id)
        raise HTTPException(status_code=500, detail=f"Failed to record progress: {str(e)}")


@router.put("/{progress_id}", response_model=StandardResponse[UserProgress])
async def update_progress(
    progress_id: str,
    updates: UserProgressUpdate,
    storage: Storage = Depends(get_storage),
):
    try:
        progress = await storage.update_user_progress(progress_id, updates)
    except StorageError as e:
        logger.exception("Failed to update progress %s", progress_id)
        raise HTTPException(status_code=500, detail=f"Failed to update progress: {str(e)}")
    if progress is None:
        raise HTTPException(status_code=404, detail="Progress not found")
    return StandardResponse(data=progress)

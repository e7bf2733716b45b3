import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from tutorx.config.dependency_injection import get_storage
from tutorx.core.exceptions import StorageError
from tutorx.storage.base import Storage
from tutorx.schemas.response import StandardResponse
from tutorx.schemas.topic import Lesson
from tutorx.schemas.quiz import Quiz

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{lesson_id}", response_model=StandardResponse[Lesson])
async def get_lesson(lesson_id: str, storage: Storage = Depends(get_storage)):
    """获取课时内容（视频地址、时长与正文）"""
    try:
        lesson = await storage.get_lesson(lesson_id)
    except StorageError as e:
        logger.exception("Failed to get lesson %s", lesson_id)
        raise HTTPException(status_code=500, detail=f"Failed to get lesson: {str(e)}")
    if lesson is None:
        raise HTTPException(status_code=404, detail="Lesson not found")
    return StandardResponse(data=lesson)


@router.get("/{lesson_id}/quizzes", response_model=StandardResponse[List[Quiz]])
async def get_lesson_quizzes(lesson_id: str, storage: Storage = Depends(get_storage)):
    try:
        return StandardResponse(data=await storage.get_quizzes_by_lesson(lesson_id))
    except StorageError as e:
        logger.exception("Failed to get quizzes for lesson %s", lesson_id)
        raise HTTPException(status_code=500, detail=f"Failed to get quizzes: {str(e)}")

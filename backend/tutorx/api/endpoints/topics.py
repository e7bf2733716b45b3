import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from tutorx.config.dependency_injection import get_storage
from tutorx.core.exceptions import StorageError
from tutorx.storage.base import Storage
from tutorx.schemas.response import StandardResponse
from tutorx.schemas.topic import Topic, Lesson
from tutorx.schemas.quiz import Quiz

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=StandardResponse[List[Topic]])
async def get_topics(storage: Storage = Depends(get_storage)):
    """按显示顺序返回全部主题"""
    try:
        return StandardResponse(data=await storage.get_all_topics())
    except StorageError as e:
        logger.exception("Failed to get topics")
        raise HTTPException(status_code=500, detail=f"Failed to get topics: {str(e)}")


@router.get("/{topic_id}", response_model=StandardResponse[Topic])
async def get_topic(topic_id: str, storage: Storage = Depends(get_storage)):
    try:
        topic = await storage.get_topic(topic_id)
    except StorageError as e:
        logger.exception("Failed to get topic %s", topic_id)
        raise HTTPException(status_code=500, detail=f"Failed to get topic: {str(e)}")
    if topic is None:
        raise HTTPException(status_code=404, detail="Topic not found")
    return StandardResponse(data=topic)


@router.get("/{topic_id}/lessons", response_model=StandardResponse[List[Lesson]])
async def get_topic_lessons(topic_id: str, storage: Storage = Depends(get_storage)):
    """主题下的课时，按主题内顺序排列"""
    try:
        return StandardResponse(data=await storage.get_lessons_by_topic(topic_id))
    except StorageError as e:
        logger.exception("Failed to get lessons for topic %s", topic_id)
        raise HTTPException(status_code=500, detail=f"Failed to get lessons: {str(e)}")


@router.get("/{topic_id}/quizzes", response_model=StandardResponse[List[Quiz]])
async def get_topic_quizzes(topic_id: str, storage: Storage = Depends(get_storage)):
    try:
        return StandardResponse(data=await storage.get_quizzes_by_topic(topic_id))
    except StorageError as e:
        logger.exception("Failed to get quizzes for topic %s", topic_id)
        raise HTTPException(status_code=500, detail=f"Failed to get quizzes: {str(e)}")

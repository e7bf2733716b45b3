import logging
from fastapi import APIRouter, Depends, HTTPException
from tutorx.config.dependency_injection import get_storage, get_gamification_service
from tutorx.core.exceptions import InvalidSubmissionError, NotFoundError, StorageError
from tutorx.storage.base import Storage
from tutorx.schemas.response import StandardResponse
from tutorx.schemas.quiz import Quiz, QuizAttempt, QuizResult
from tutorx.services.gamification_service import GamificationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{quiz_id}", response_model=StandardResponse[Quiz])
async def get_quiz(quiz_id: str, storage: Storage = Depends(get_storage)):
    try:
        quiz = await storage.get_quiz(quiz_id)
    except StorageError as e:
        logger.exception("Failed to get quiz %s", quiz_id)
        raise HTTPException(status_code=500, detail=f"Failed to get quiz: {str(e)}")
    if quiz is None:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return StandardResponse(data=quiz)


@router.post("/{quiz_id}/submit", response_model=StandardResponse[QuizResult], status_code=201)
async def submit_quiz(
    quiz_id: str,
    attempt: QuizAttempt,
    service: GamificationService = Depends(get_gamification_service),
):
    """
    提交测验作答：评分、记录完成记录、发放测验经验值，并返回新解锁的成就。
    """
    try:
        result = await service.submit_quiz(quiz_id, attempt)
        return StandardResponse(data=result)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidSubmissionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StorageError as e:
        logger.exception("Failed to submit quiz %s", quiz_id)
        raise HTTPException(status_code=500, detail=f"Failed to submit quiz: {str(e)}")

import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from tutorx.config.dependency_injection import get_storage
from tutorx.core.exceptions import StorageError
from tutorx.storage.base import Storage
from tutorx.schemas.response import StandardResponse
from tutorx.schemas.achievement import Achievement

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=StandardResponse[List[Achievement]])
async def get_achievements(storage: Storage = Depends(get_storage)):
    try:
        return StandardResponse(data=await storage.get_all_achievements())
    except StorageError as e:
        logger.exception("Failed to get achievements")
        raise HTTPException(status_code=500, detail=f"Failed to get achievements: {str(e)}")

from fastapi import APIRouter
from tutorx.api.endpoints import users, topics, lessons, quizzes, progress, achievements

api_router = APIRouter()
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(topics.router, prefix="/topics", tags=["topics"])
api_router.include_router(lessons.router, prefix="/lessons", tags=["lessons"])
api_router.include_router(quizzes.router, prefix="/quizzes", tags=["quizzes"])
api_router.include_router(progress.router, prefix="/progress", tags=["progress"])
api_router.include_router(achievements.router, prefix="/achievements", tags=["achievements"])

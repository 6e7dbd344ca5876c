from fastapi import APIRouter

from app.api.v1 import repositories, stories

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(stories.router)
api_router.include_router(repositories.router)

"""API router aggregator."""
from fastapi import APIRouter

from taskboard.api.routes import auth, tasks, users

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(tasks.router)

__all__ = ["api_router"]

from fastapi import APIRouter

from observation_tracker.core.config import settings

router = APIRouter()


@router.get("/")
def root():
    return {
        "name": "CRP Observation Tracker",
        "environment": settings.APP_ENV,
        "default_framework": settings.DEFAULT_FRAMEWORK_ID,
        "observation_goal": settings.OBSERVATION_GOAL,
        "links": {"docs": "/docs", "health": "/health", "me": "/me"},
    }

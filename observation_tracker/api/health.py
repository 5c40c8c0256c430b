import logging

from fastapi import APIRouter, Depends
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from observation_tracker.core.config import settings
from observation_tracker.core.errors import StoreFailure
from observation_tracker.db.session import get_db
from observation_tracker.models.framework import Framework

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health(db: Session = Depends(get_db)):
    """
    Database round trip plus a look at the framework catalog; observations
    cannot be scored against a missing default framework.
    """
    try:
        db.execute(text("SELECT 1"))
        frameworks = db.scalar(select(func.count()).select_from(Framework))
        default_present = db.get(Framework, settings.DEFAULT_FRAMEWORK_ID) is not None
    except SQLAlchemyError as exc:
        logger.exception("Health check failed")
        raise StoreFailure("Database unavailable") from exc

    return {
        "status": "ok",
        "database": "ok",
        "frameworks": frameworks,
        "default_framework_loaded": default_present,
    }

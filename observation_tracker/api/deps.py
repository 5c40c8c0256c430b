"""
Per-request wiring: one DocumentStore over the request's session, sharing
the process-wide change feed created at startup.
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from observation_tracker.core.config import settings
from observation_tracker.db.session import get_db
from observation_tracker.services.framework_repository import FrameworkRepository
from observation_tracker.services.observation_aggregator import ObservationAggregator
from observation_tracker.services.observation_recorder import ObservationRecorder
from observation_tracker.services.scheduler import Scheduler
from observation_tracker.services.teacher_directory import TeacherDirectory
from observation_tracker.store.change_feed import ChangeFeed
from observation_tracker.store.document_store import DocumentStore


def get_change_feed(request: Request) -> ChangeFeed | None:
    return getattr(request.app.state, "change_feed", None)


def get_store(
    db: Session = Depends(get_db),
    feed: ChangeFeed | None = Depends(get_change_feed),
) -> DocumentStore:
    return DocumentStore(db, feed)


def get_framework_repository(store: DocumentStore = Depends(get_store)) -> FrameworkRepository:
    return FrameworkRepository(store)


def get_observation_recorder(store: DocumentStore = Depends(get_store)) -> ObservationRecorder:
    return ObservationRecorder(store)


def get_observation_aggregator(store: DocumentStore = Depends(get_store)) -> ObservationAggregator:
    return ObservationAggregator(store, goal=settings.OBSERVATION_GOAL, query_limit=settings.QUERY_LIMIT)


def get_teacher_directory(store: DocumentStore = Depends(get_store)) -> TeacherDirectory:
    return TeacherDirectory(store)


def get_scheduler(store: DocumentStore = Depends(get_store)) -> Scheduler:
    return Scheduler(store)

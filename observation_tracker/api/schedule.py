import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from observation_tracker.api.deps import get_scheduler
from observation_tracker.core.audit import log_event
from observation_tracker.core.rbac import FULL_VIEW_ROLES, require_roles
from observation_tracker.db.session import get_db
from observation_tracker.models.user import User
from observation_tracker.schemas.schedule import (
    CompleteScheduledPayload,
    ScheduledObservation,
    ScheduledObservationCreate,
)
from observation_tracker.services.scheduler import Scheduler

router = APIRouter(prefix="/schedule", tags=["schedule"])

SCHEDULERS = ("admin", "coordinator", "observer")


def _get_own_or_404(scheduler: Scheduler, scheduled_id: str, user: User) -> ScheduledObservation:
    visit = scheduler.get(scheduled_id)
    if user.role not in FULL_VIEW_ROLES and visit.observer_id != user.id:
        raise HTTPException(status_code=404, detail="Scheduled observation not found")
    return visit


def _transition(
    db: Session,
    scheduler: Scheduler,
    user: User,
    scheduled_id: str,
    action: str,
    apply,
) -> ScheduledObservation:
    before = _get_own_or_404(scheduler, scheduled_id, user)
    visit = apply()

    log_event(
        db=db,
        actor=user,
        action=action,
        entity_type="scheduled_observation",
        entity_id=scheduled_id,
        metadata={"from_status": before.status, "to_status": visit.status},
    )

    scheduler.store.commit()
    return visit


@router.get("", response_model=list[ScheduledObservation])
def list_scheduled(
    observer_id: str | None = Query(default=None),
    date: dt.date | None = Query(default=None),
    scheduler: Scheduler = Depends(get_scheduler),
    current_user: User = Depends(require_roles(*SCHEDULERS)),
):
    """Observers only see their own visits"""
    if current_user.role not in FULL_VIEW_ROLES:
        observer_id = current_user.id
    return scheduler.list(observer_id=observer_id, on_date=date)


@router.post("", response_model=ScheduledObservation, status_code=status.HTTP_201_CREATED)
def create_scheduled(
    payload: ScheduledObservationCreate,
    db: Session = Depends(get_db),
    scheduler: Scheduler = Depends(get_scheduler),
    current_user: User = Depends(require_roles(*SCHEDULERS)),
):
    if current_user.role not in FULL_VIEW_ROLES:
        payload.observer_id = current_user.id

    visit = scheduler.schedule(payload, observer_id=current_user.id)

    log_event(
        db=db,
        actor=current_user,
        action="OBSERVATION_SCHEDULED",
        entity_type="scheduled_observation",
        entity_id=visit.id,
        metadata={"teacher_id": visit.teacher_id, "scheduled_date": visit.scheduled_date.isoformat()},
    )

    scheduler.store.commit()
    return visit


@router.post("/{scheduled_id}/confirm", response_model=ScheduledObservation)
def confirm_scheduled(
    scheduled_id: str,
    db: Session = Depends(get_db),
    scheduler: Scheduler = Depends(get_scheduler),
    current_user: User = Depends(require_roles(*SCHEDULERS)),
):
    return _transition(
        db, scheduler, current_user, scheduled_id,
        "SCHEDULED_OBSERVATION_CONFIRMED",
        lambda: scheduler.confirm(scheduled_id),
    )


@router.post("/{scheduled_id}/cancel", response_model=ScheduledObservation)
def cancel_scheduled(
    scheduled_id: str,
    db: Session = Depends(get_db),
    scheduler: Scheduler = Depends(get_scheduler),
    current_user: User = Depends(require_roles(*SCHEDULERS)),
):
    return _transition(
        db, scheduler, current_user, scheduled_id,
        "SCHEDULED_OBSERVATION_CANCELLED",
        lambda: scheduler.cancel(scheduled_id),
    )


@router.post("/{scheduled_id}/complete", response_model=ScheduledObservation)
def complete_scheduled(
    scheduled_id: str,
    payload: CompleteScheduledPayload | None = None,
    db: Session = Depends(get_db),
    scheduler: Scheduler = Depends(get_scheduler),
    current_user: User = Depends(require_roles(*SCHEDULERS)),
):
    observation_id = payload.observation_id if payload else None
    return _transition(
        db, scheduler, current_user, scheduled_id,
        "SCHEDULED_OBSERVATION_COMPLETED",
        lambda: scheduler.complete(scheduled_id, observation_id),
    )

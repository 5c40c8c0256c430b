import datetime as dt
from typing import Union

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from observation_tracker.api.deps import (
    get_observation_aggregator,
    get_observation_recorder,
    get_teacher_directory,
)
from observation_tracker.core.audit import log_event, updated_fields
from observation_tracker.core.rbac import FULL_VIEW_ROLES, require_roles
from observation_tracker.core.scoring import calculate_crp_evidence, count_look_fors, numeric_ratings
from observation_tracker.core.security import get_current_user
from observation_tracker.db.session import get_db
from observation_tracker.models.user import User
from observation_tracker.schemas.observation import (
    Observation,
    ObservationCreate,
    ObservationUpdate,
    ResponseUpsert,
    ScorePreviewOut,
    ScorePreviewRequest,
)
from observation_tracker.schemas.pagination import PaginatedResponse, paginate
from observation_tracker.services.observation_aggregator import ObservationAggregator
from observation_tracker.services.observation_recorder import ObservationRecorder
from observation_tracker.services.teacher_directory import TeacherDirectory

router = APIRouter(prefix="/observations", tags=["observations"])

RECORDERS = ("admin", "observer")


def _visible_to(user: User, observation: Observation, teachers: TeacherDirectory) -> bool:
    if user.role in FULL_VIEW_ROLES:
        return True
    if user.role == "observer":
        return observation.observer_id == user.id
    teacher = teachers.find_by_email(user.email)
    return teacher is not None and observation.teacher_id == teacher.id


def visible_observations(
    user: User,
    aggregator: ObservationAggregator,
    teachers: TeacherDirectory,
) -> list[Observation]:
    if user.role in FULL_VIEW_ROLES:
        return aggregator.all()
    if user.role == "observer":
        return aggregator.all({"observer_id": user.id})
    teacher = teachers.find_by_email(user.email)
    if teacher is None:
        return []
    return aggregator.all({"teacher_id": teacher.id})


def _get_visible_or_404(
    observation_id: str,
    user: User,
    recorder: ObservationRecorder,
    teachers: TeacherDirectory,
) -> Observation:
    observation = recorder.get(observation_id)
    if not _visible_to(user, observation, teachers):
        # hide existence from users who cannot see it
        raise HTTPException(status_code=404, detail="Observation not found")
    return observation


@router.get("", response_model=Union[list[Observation], PaginatedResponse[Observation]])
def list_observations(
    observer_id: str | None = Query(default=None),
    teacher_id: str | None = Query(default=None),
    status: list[str] | None = Query(default=None, description="Repeat to allow several statuses"),
    q: str | None = Query(default=None, description="Matches teacher, observer and overall comment"),
    start: dt.date | None = Query(default=None),
    end: dt.date | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    include_pagination: bool = Query(default=False, description="Include pagination metadata"),
    aggregator: ObservationAggregator = Depends(get_observation_aggregator),
    teachers: TeacherDirectory = Depends(get_teacher_directory),
    current_user: User = Depends(get_current_user),
):
    """
    Observations visible to the caller, newest first.

    Admins and coordinators see everything; observers see the ones they
    recorded; teachers see the ones about them.
    """
    rows = visible_observations(current_user, aggregator, teachers)

    if observer_id:
        rows = [o for o in rows if o.observer_id == observer_id]
    if teacher_id:
        rows = [o for o in rows if o.teacher_id == teacher_id]

    rows = aggregator.search_observations(q or "", status, observations=rows)
    rows = aggregator.filter_observations(None, start, end, observations=rows)

    total = len(rows)
    items = rows[offset:offset + limit]

    if include_pagination:
        return paginate(items, total, limit, offset)
    return items


@router.post("", response_model=Observation, status_code=status.HTTP_201_CREATED)
def create_observation(
    payload: ObservationCreate,
    db: Session = Depends(get_db),
    recorder: ObservationRecorder = Depends(get_observation_recorder),
    current_user: User = Depends(require_roles(*RECORDERS)),
):
    if current_user.role == "observer" or not payload.observer_id:
        payload.observer_id = current_user.id
        payload.observer_name = payload.observer_name or current_user.display_name

    observation = recorder.create(payload)

    log_event(
        db=db,
        actor=current_user,
        action="OBSERVATION_CREATED",
        entity_type="observation",
        entity_id=observation.id,
        metadata={
            "teacher_id": observation.teacher_id,
            "framework_id": observation.framework_id,
            "status": observation.status,
            "crp_evidence_count": observation.crp_evidence_count,
        },
    )

    recorder.store.commit()
    return observation


@router.post("/score", response_model=ScorePreviewOut)
def score_preview(
    payload: ScorePreviewRequest,
    _: User = Depends(get_current_user),
):
    """Score a set of responses without saving anything"""
    return ScorePreviewOut(
        crp_evidence_count=calculate_crp_evidence(payload.responses),
        total_look_fors=count_look_fors(payload.responses),
        valid_ratings=len(numeric_ratings(payload.responses)),
    )


@router.get("/{observation_id}", response_model=Observation)
def get_observation(
    observation_id: str,
    recorder: ObservationRecorder = Depends(get_observation_recorder),
    teachers: TeacherDirectory = Depends(get_teacher_directory),
    current_user: User = Depends(get_current_user),
):
    return _get_visible_or_404(observation_id, current_user, recorder, teachers)


@router.patch("/{observation_id}", response_model=Observation)
def update_observation(
    observation_id: str,
    payload: ObservationUpdate,
    db: Session = Depends(get_db),
    recorder: ObservationRecorder = Depends(get_observation_recorder),
    teachers: TeacherDirectory = Depends(get_teacher_directory),
    current_user: User = Depends(require_roles(*RECORDERS)),
):
    before = _get_visible_or_404(observation_id, current_user, recorder, teachers)
    observation = recorder.update(observation_id, payload)

    log_event(
        db=db,
        actor=current_user,
        action="OBSERVATION_UPDATED",
        entity_type="observation",
        entity_id=observation_id,
        metadata={
            "fields": updated_fields(payload),
            "from_status": before.status,
            "to_status": observation.status,
        },
    )

    recorder.store.commit()
    return observation


@router.put("/{observation_id}/responses/{question_id}", response_model=Observation)
def record_response(
    observation_id: str,
    question_id: str,
    payload: ResponseUpsert,
    db: Session = Depends(get_db),
    recorder: ObservationRecorder = Depends(get_observation_recorder),
    teachers: TeacherDirectory = Depends(get_teacher_directory),
    current_user: User = Depends(require_roles(*RECORDERS)),
):
    _get_visible_or_404(observation_id, current_user, recorder, teachers)
    observation = recorder.record_response(observation_id, question_id, payload.value, payload.comment)

    log_event(
        db=db,
        actor=current_user,
        action="OBSERVATION_RESPONSE_RECORDED",
        entity_type="observation",
        entity_id=observation_id,
        metadata={"question_id": question_id, "crp_evidence_count": observation.crp_evidence_count},
    )

    recorder.store.commit()
    return observation

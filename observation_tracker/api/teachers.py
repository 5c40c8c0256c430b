from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from observation_tracker.api.deps import get_teacher_directory
from observation_tracker.core.audit import log_event, updated_fields
from observation_tracker.core.rbac import require_roles
from observation_tracker.db.session import get_db
from observation_tracker.models.user import User
from observation_tracker.schemas.teacher import (
    Teacher,
    TeacherCreate,
    TeacherImportResult,
    TeacherUpdate,
)
from observation_tracker.services.teacher_directory import TeacherDirectory

router = APIRouter(prefix="/teachers", tags=["teachers"])

READERS = ("admin", "coordinator", "observer")
EDITORS = ("admin", "coordinator")


@router.get("", response_model=list[Teacher])
def list_teachers(
    directory: TeacherDirectory = Depends(get_teacher_directory),
    _: User = Depends(require_roles(*READERS)),
):
    return directory.list()


@router.get("/search", response_model=list[Teacher])
def search_teachers(
    q: str = Query(default="", description="Case-insensitive match on name or email"),
    directory: TeacherDirectory = Depends(get_teacher_directory),
    _: User = Depends(require_roles(*READERS)),
):
    return directory.search(q)


@router.post("", response_model=Teacher, status_code=status.HTTP_201_CREATED)
def create_teacher(
    payload: TeacherCreate,
    db: Session = Depends(get_db),
    directory: TeacherDirectory = Depends(get_teacher_directory),
    current_user: User = Depends(require_roles(*EDITORS)),
):
    teacher = directory.create(payload)

    log_event(
        db=db,
        actor=current_user,
        action="TEACHER_CREATED",
        entity_type="teacher",
        entity_id=teacher.id,
        metadata={"email": teacher.email},
    )

    directory.store.commit()
    return teacher


@router.post("/import", response_model=TeacherImportResult)
def import_teachers(
    payload: list[dict],
    db: Session = Depends(get_db),
    directory: TeacherDirectory = Depends(get_teacher_directory),
    current_user: User = Depends(require_roles("admin")),
):
    """Bulk create; rows that fail validation are returned in errors"""
    result = directory.bulk_import(payload)

    log_event(
        db=db,
        actor=current_user,
        action="TEACHERS_IMPORTED",
        entity_type="teacher",
        entity_id="bulk",
        metadata={"successful": result.successful, "errors": len(result.errors), "source": "json"},
    )

    directory.store.commit()
    return result


@router.get("/{teacher_id}", response_model=Teacher)
def get_teacher(
    teacher_id: str,
    directory: TeacherDirectory = Depends(get_teacher_directory),
    _: User = Depends(require_roles(*READERS)),
):
    return directory.get(teacher_id)


@router.patch("/{teacher_id}", response_model=Teacher)
def update_teacher(
    teacher_id: str,
    payload: TeacherUpdate,
    db: Session = Depends(get_db),
    directory: TeacherDirectory = Depends(get_teacher_directory),
    current_user: User = Depends(require_roles(*EDITORS)),
):
    teacher = directory.update(teacher_id, payload)

    log_event(
        db=db,
        actor=current_user,
        action="TEACHER_UPDATED",
        entity_type="teacher",
        entity_id=teacher_id,
        metadata={"fields": updated_fields(payload)},
    )

    directory.store.commit()
    return teacher

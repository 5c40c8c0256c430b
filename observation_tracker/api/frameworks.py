from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.orm import Session

from observation_tracker.api.deps import get_framework_repository
from observation_tracker.core.audit import log_event, updated_fields
from observation_tracker.core.config import settings
from observation_tracker.core.rbac import require_roles
from observation_tracker.core.security import get_current_user
from observation_tracker.core.validation import validate_framework
from observation_tracker.db.session import get_db
from observation_tracker.models.user import User
from observation_tracker.schemas.framework import (
    AlignmentOption,
    Framework,
    FrameworkCreate,
    FrameworkUpdate,
    MoveQuestionRequest,
    Question,
    QuestionsReplace,
    Section,
    SectionCreate,
)
from observation_tracker.schemas.validation import ValidationResult
from observation_tracker.services.framework_repository import FrameworkRepository

router = APIRouter(prefix="/frameworks", tags=["frameworks"])

EDITORS = ("admin", "coordinator")


@router.get("", response_model=list[Framework])
def list_frameworks(
    status: str | None = Query(default=None, description="active, inactive or draft"),
    repo: FrameworkRepository = Depends(get_framework_repository),
    _: User = Depends(get_current_user),
):
    return repo.list(status=status)


@router.get("/alignments", response_model=list[AlignmentOption])
def list_alignment_options(
    repo: FrameworkRepository = Depends(get_framework_repository),
    _: User = Depends(get_current_user),
):
    return repo.alignment_options()


@router.get("/observation-questions", response_model=list[Question])
def observation_questions(
    framework_id: str | None = Query(default=None),
    repo: FrameworkRepository = Depends(get_framework_repository),
    _: User = Depends(get_current_user),
):
    """Look-fors shown on the observation form (the integrated section)"""
    return repo.get_observation_questions(framework_id or settings.DEFAULT_FRAMEWORK_ID)


@router.post("/validate", response_model=ValidationResult)
def validate_framework_payload(
    payload: FrameworkCreate,
    _: User = Depends(get_current_user),
):
    """Full check, including the advisory section-weight total"""
    return validate_framework(payload)


@router.post("", response_model=Framework, status_code=status.HTTP_201_CREATED)
def create_framework(
    payload: FrameworkCreate,
    db: Session = Depends(get_db),
    repo: FrameworkRepository = Depends(get_framework_repository),
    current_user: User = Depends(require_roles(*EDITORS)),
):
    framework = repo.create(payload)

    log_event(
        db=db,
        actor=current_user,
        action="FRAMEWORK_CREATED",
        entity_type="framework",
        entity_id=framework.id,
        metadata={"name": framework.name, "sections": len(framework.sections)},
    )

    repo.store.commit()
    return framework


@router.get("/{framework_id}", response_model=Framework)
def get_framework(
    framework_id: str,
    repo: FrameworkRepository = Depends(get_framework_repository),
    _: User = Depends(get_current_user),
):
    return repo.get(framework_id)


@router.patch("/{framework_id}", response_model=Framework)
def update_framework(
    framework_id: str,
    payload: FrameworkUpdate,
    db: Session = Depends(get_db),
    repo: FrameworkRepository = Depends(get_framework_repository),
    current_user: User = Depends(require_roles(*EDITORS)),
):
    framework = repo.update(framework_id, payload)

    log_event(
        db=db,
        actor=current_user,
        action="FRAMEWORK_UPDATED",
        entity_type="framework",
        entity_id=framework.id,
        metadata={"fields": updated_fields(payload)},
    )

    repo.store.commit()
    return framework


@router.delete("/{framework_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_framework(
    framework_id: str,
    db: Session = Depends(get_db),
    repo: FrameworkRepository = Depends(get_framework_repository),
    current_user: User = Depends(require_roles(*EDITORS)),
):
    repo.delete(framework_id)

    log_event(
        db=db,
        actor=current_user,
        action="FRAMEWORK_DELETED",
        entity_type="framework",
        entity_id=framework_id,
    )

    repo.store.commit()


@router.get("/{framework_id}/sections", response_model=list[Section])
def list_sections(
    framework_id: str,
    repo: FrameworkRepository = Depends(get_framework_repository),
    _: User = Depends(get_current_user),
):
    return repo.get(framework_id).sections


@router.get("/{framework_id}/questions", response_model=list[Question])
def list_questions(
    framework_id: str,
    section_id: str | None = Query(default=None),
    repo: FrameworkRepository = Depends(get_framework_repository),
    _: User = Depends(get_current_user),
):
    """All questions in section order, or one section's when section_id is given"""
    return repo.get_questions(framework_id, section_id)


@router.put("/{framework_id}/sections/{section_id}/questions", response_model=Framework)
def replace_section_questions(
    framework_id: str,
    section_id: str,
    payload: QuestionsReplace,
    db: Session = Depends(get_db),
    repo: FrameworkRepository = Depends(get_framework_repository),
    current_user: User = Depends(require_roles(*EDITORS)),
):
    framework = repo.update_questions(framework_id, section_id, payload.questions)

    log_event(
        db=db,
        actor=current_user,
        action="FRAMEWORK_QUESTIONS_REPLACED",
        entity_type="framework",
        entity_id=framework_id,
        metadata={"section_id": section_id, "question_count": len(payload.questions)},
    )

    repo.store.commit()
    return framework


@router.post("/{framework_id}/sections/{section_id}/questions/{question_id}/move", response_model=Framework)
def move_question(
    framework_id: str,
    section_id: str,
    question_id: str,
    payload: MoveQuestionRequest,
    db: Session = Depends(get_db),
    repo: FrameworkRepository = Depends(get_framework_repository),
    current_user: User = Depends(require_roles(*EDITORS)),
):
    framework = repo.move_question(framework_id, section_id, question_id, payload.direction)

    log_event(
        db=db,
        actor=current_user,
        action="FRAMEWORK_QUESTION_MOVED",
        entity_type="framework",
        entity_id=framework_id,
        metadata={"section_id": section_id, "question_id": question_id, "direction": payload.direction},
    )

    repo.store.commit()
    return framework

@router.post("/{framework_id}/sections", response_model=Framework, status_code=status.HTTP_201_CREATED)
def add_section(
    framework_id: str,
    payload: SectionCreate,
    db: Session = Depends(get_db),
    repo: FrameworkRepository = Depends(get_framework_repository),
    current_user: User = Depends(require_roles(*EDITORS)),
):
    framework = repo.add_section(framework_id, payload.title, payload.description, payload.weight)

    log_event(
        db=db,
        actor=current_user,
        action="FRAMEWORK_SECTION_ADDED",
        entity_type="framework",
        entity_id=framework_id,
        metadata={"section_id": framework.sections[-1].id, "title": payload.title},
    )

    repo.store.commit()
    return framework


@router.delete("/{framework_id}/sections/{section_id}", response_model=Framework)
def remove_section(
    framework_id: str,
    section_id: str,
    db: Session = Depends(get_db),
    repo: FrameworkRepository = Depends(get_framework_repository),
    current_user: User = Depends(require_roles(*EDITORS)),
):
    framework = repo.remove_section(framework_id, section_id)

    log_event(
        db=db,
        actor=current_user,
        action="FRAMEWORK_SECTION_REMOVED",
        entity_type="framework",
        entity_id=framework_id,
        metadata={"section_id": section_id},
    )

    repo.store.commit()
    return framework


@router.post("/{framework_id}/sections/{section_id}/questions", response_model=Framework, status_code=status.HTTP_201_CREATED)
def add_question(
    framework_id: str,
    section_id: str,
    payload: Question | None = Body(default=None),
    db: Session = Depends(get_db),
    repo: FrameworkRepository = Depends(get_framework_repository),
    current_user: User = Depends(require_roles(*EDITORS)),
):
    """Append a question; with no body a blank rating look-for is added"""
    framework = repo.add_question(framework_id, section_id, payload)
    added = framework.find_section(section_id).questions[-1]

    log_event(
        db=db,
        actor=current_user,
        action="FRAMEWORK_QUESTION_ADDED",
        entity_type="framework",
        entity_id=framework_id,
        metadata={"section_id": section_id, "question_id": added.id},
    )

    repo.store.commit()
    return framework


@router.post(
    "/{framework_id}/sections/{section_id}/questions/{question_id}/duplicate",
    response_model=Framework,
    status_code=status.HTTP_201_CREATED,
)
def duplicate_question(
    framework_id: str,
    section_id: str,
    question_id: str,
    db: Session = Depends(get_db),
    repo: FrameworkRepository = Depends(get_framework_repository),
    current_user: User = Depends(require_roles(*EDITORS)),
):
    framework = repo.duplicate_question(framework_id, section_id, question_id)

    log_event(
        db=db,
        actor=current_user,
        action="FRAMEWORK_QUESTION_DUPLICATED",
        entity_type="framework",
        entity_id=framework_id,
        metadata={"section_id": section_id, "question_id": question_id},
    )

    repo.store.commit()
    return framework


@router.delete("/{framework_id}/sections/{section_id}/questions/{question_id}", response_model=Framework)
def remove_question(
    framework_id: str,
    section_id: str,
    question_id: str,
    db: Session = Depends(get_db),
    repo: FrameworkRepository = Depends(get_framework_repository),
    current_user: User = Depends(require_roles(*EDITORS)),
):
    framework = repo.remove_question(framework_id, section_id, question_id)

    log_event(
        db=db,
        actor=current_user,
        action="FRAMEWORK_QUESTION_REMOVED",
        entity_type="framework",
        entity_id=framework_id,
        metadata={"section_id": section_id, "question_id": question_id},
    )

    repo.store.commit()
    return framework



@router.get("/{framework_id}/validation", response_model=ValidationResult)
def framework_validation(
    framework_id: str,
    repo: FrameworkRepository = Depends(get_framework_repository),
    _: User = Depends(get_current_user),
):
    return validate_framework(repo.get(framework_id))

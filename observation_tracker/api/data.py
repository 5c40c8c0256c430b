"""
CSV export, import templates and teacher CSV import.
"""
from datetime import date

from fastapi import APIRouter, Depends, File, HTTPException, Response, UploadFile
from sqlalchemy.orm import Session

from observation_tracker.api.deps import (
    get_framework_repository,
    get_observation_aggregator,
    get_store,
    get_teacher_directory,
)
from observation_tracker.core import csv_io
from observation_tracker.core.audit import log_event
from observation_tracker.core.errors import ValidationFailure
from observation_tracker.core.rbac import require_roles
from observation_tracker.core.validation import validate_csv_headers
from observation_tracker.db.session import get_db
from observation_tracker.models.user import User
from observation_tracker.schemas.teacher import TeacherImportResult
from observation_tracker.schemas.user import UserOut
from observation_tracker.services.framework_repository import FrameworkRepository
from observation_tracker.services.observation_aggregator import ObservationAggregator
from observation_tracker.services.teacher_directory import TeacherDirectory
from observation_tracker.store.document_store import DocumentStore

router = APIRouter(prefix="/data", tags=["data"])

EXPORT_KINDS = ("observations", "observations-detailed", "teachers", "frameworks", "users", "analytics")
TEMPLATE_KINDS = ("teachers", "frameworks")


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export/{kind}")
def export_csv(
    kind: str,
    aggregator: ObservationAggregator = Depends(get_observation_aggregator),
    teachers: TeacherDirectory = Depends(get_teacher_directory),
    frameworks: FrameworkRepository = Depends(get_framework_repository),
    store: DocumentStore = Depends(get_store),
    _: User = Depends(require_roles("admin", "coordinator")),
):
    if kind == "observations":
        content = csv_io.export_observations_to_csv(aggregator.all())
    elif kind == "observations-detailed":
        content = csv_io.export_detailed_observations_to_csv(aggregator.all())
    elif kind == "teachers":
        content = csv_io.export_teachers_to_csv(teachers.list())
    elif kind == "frameworks":
        content = csv_io.export_frameworks_to_csv(frameworks.list())
    elif kind == "users":
        content = csv_io.export_users_to_csv(UserOut.model_validate(d) for d in store.list("users"))
    elif kind == "analytics":
        content = csv_io.export_analytics_to_csv(aggregator.teacher_analytics())
    else:
        raise HTTPException(status_code=404, detail=f"Unknown export: {kind}")

    return _csv_response(content, f"{kind}-{date.today().isoformat()}.csv")


@router.get("/templates/{kind}")
def download_template(
    kind: str,
    _: User = Depends(require_roles("admin", "coordinator")),
):
    if kind not in TEMPLATE_KINDS:
        raise HTTPException(status_code=404, detail=f"Unknown template: {kind}")
    return _csv_response(csv_io.generate_template_csv(kind), f"{kind}-template.csv")


@router.post("/import/teachers", response_model=TeacherImportResult)
def import_teachers_csv(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    teachers: TeacherDirectory = Depends(get_teacher_directory),
    current_user: User = Depends(require_roles("admin")),
):
    """
    Upload a CSV shaped like /data/templates/teachers. Missing required
    columns reject the whole file; bad rows are reported individually.
    """
    try:
        content = file.file.read().decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationFailure([{"field": "file", "message": "File must be UTF-8 encoded CSV"}], message="Invalid file")

    header_check = validate_csv_headers(csv_io.csv_headers(content), csv_io.REQUIRED_TEACHER_COLUMNS)
    if not header_check.is_valid:
        raise ValidationFailure(header_check.as_dicts(), message="Invalid CSV headers")

    result = teachers.bulk_import(csv_io.teachers_from_csv(content))

    log_event(
        db=db,
        actor=current_user,
        action="TEACHERS_IMPORTED",
        entity_type="teacher",
        entity_id="bulk",
        metadata={
            "successful": result.successful,
            "errors": len(result.errors),
            "source": "csv",
            "filename": file.filename,
        },
    )

    teachers.store.commit()
    return result

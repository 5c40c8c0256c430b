import datetime as dt

from pydantic import BaseModel, Field


class ClassInfo(BaseModel):
    """Snapshot of the class at observation time, not a live reference."""
    name: str = ""
    subject: str = ""
    room: str = ""
    period: str = ""
    grade: str = ""


class ObservationResponse(BaseModel):
    question_id: str
    value: str | list[str] | float | int
    timestamp: dt.datetime


class ObservationMetadata(BaseModel):
    location: str | None = None
    sync_status: str | None = None  # synced|pending|offline


class ObservationBase(BaseModel):
    teacher_id: str = ""
    teacher_name: str = ""
    observer_id: str = ""
    observer_name: str = ""
    framework_id: str = ""
    date: dt.date | None = None
    start_time: str = ""
    end_time: str | None = None
    duration: int = 0
    status: str = "draft"  # draft|in-progress|completed|submitted
    responses: dict[str, ObservationResponse] = Field(default_factory=dict)
    comments: dict[str, str] = Field(default_factory=dict)
    overall_comment: str = ""
    class_info: ClassInfo = Field(default_factory=ClassInfo)
    metadata: ObservationMetadata | None = None


class ObservationCreate(ObservationBase):
    pass


class ObservationUpdate(BaseModel):
    teacher_id: str | None = None
    teacher_name: str | None = None
    observer_id: str | None = None
    observer_name: str | None = None
    framework_id: str | None = None
    date: dt.date | None = None
    start_time: str | None = None
    end_time: str | None = None
    duration: int | None = None
    status: str | None = None
    responses: dict[str, ObservationResponse] | None = None
    comments: dict[str, str] | None = None
    overall_comment: str | None = None
    class_info: ClassInfo | None = None
    metadata: ObservationMetadata | None = None


class Observation(ObservationBase):
    id: str
    crp_evidence_count: int | None = None
    total_look_fors: int | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class ResponseUpsert(BaseModel):
    value: str | list[str] | float | int
    comment: str | None = None


class ScorePreviewRequest(BaseModel):
    # question id -> raw value ("4", 3, "not-observed", ...)
    responses: dict[str, str | list[str] | float | int | None]


class ScorePreviewOut(BaseModel):
    crp_evidence_count: int
    total_look_fors: int
    valid_ratings: int

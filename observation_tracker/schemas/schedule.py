import datetime as dt
from pydantic import BaseModel, Field


class ScheduledObservationCreate(BaseModel):
    teacher_id: str = Field(min_length=1)
    observer_id: str | None = None  # defaults to the caller
    framework_id: str = Field(min_length=1)
    scheduled_date: dt.date
    scheduled_time: str = Field(min_length=1, max_length=20)
    duration: int = Field(default=45, ge=5, le=180)
    notes: str | None = None


class ScheduledObservation(BaseModel):
    id: str
    teacher_id: str
    observer_id: str
    framework_id: str
    scheduled_date: dt.date
    scheduled_time: str
    duration: int
    status: str  # scheduled|confirmed|cancelled|completed
    notes: str | None = None
    reminders_sent: bool = False
    observation_id: str | None = None
    created_at: dt.datetime | None = None
    updated_at: dt.datetime | None = None


class CompleteScheduledPayload(BaseModel):
    observation_id: str | None = None

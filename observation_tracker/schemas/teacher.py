from datetime import datetime
from pydantic import BaseModel, Field

from observation_tracker.schemas.observation import ClassInfo


class TeacherCreate(BaseModel):
    name: str = ""
    email: str = ""
    department: str = ""
    grade: str | None = None
    subjects: list[str] = Field(default_factory=list)
    current_class: ClassInfo | None = None


class TeacherUpdate(BaseModel):
    name: str | None = None
    email: str | None = None
    department: str | None = None
    grade: str | None = None
    subjects: list[str] | None = None
    current_class: ClassInfo | None = None


class Teacher(TeacherCreate):
    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TeacherImportError(BaseModel):
    teacher: dict
    error: str


class TeacherImportResult(BaseModel):
    """Result of a bulk import: bad rows are reported, not fatal"""
    successful: int
    errors: list[TeacherImportError]

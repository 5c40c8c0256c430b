from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class Question(BaseModel):
    id: str = Field(min_length=1, max_length=120)
    text: str = ""
    type: str = "rating"  # rating|text|multiselect|single-select|yes-no
    required: bool = False
    scale: int | None = None  # rating only
    weight: float = 0
    tags: list[str] = Field(default_factory=list)
    help_text: str = ""
    options: list[str] | None = None  # select types only
    framework_alignments: list[str] = Field(default_factory=list)


class Section(BaseModel):
    id: str = Field(min_length=1, max_length=120)
    title: str = ""
    description: str = ""
    weight: float = 0
    questions: list[Question] = Field(default_factory=list)


class Framework(BaseModel):
    id: str
    name: str
    description: str = ""
    version: str = "1.0"
    status: str = "draft"  # active|inactive|draft
    last_modified: str  # ISO date
    tags: list[str] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def find_section(self, section_id: str) -> Section | None:
        return next((s for s in self.sections if s.id == section_id), None)


class FrameworkCreate(BaseModel):
    id: str | None = Field(default=None, min_length=1, max_length=120)
    name: str = ""
    description: str = ""
    version: str = "1.0"
    status: str = "draft"
    tags: list[str] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)


class FrameworkUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    version: str | None = None
    status: str | None = None
    tags: list[str] | None = None
    sections: list[Section] | None = None


class QuestionsReplace(BaseModel):
    questions: list[Question]


class MoveQuestionRequest(BaseModel):
    direction: Literal["up", "down"]


class SectionCreate(BaseModel):
    title: str = "New Section"
    description: str = "Describe what this section looks for"
    weight: float = 0


class AlignmentOption(BaseModel):
    id: str
    label: str
    category: str
    color: str  # green|pink|blue|yellow|purple|indigo

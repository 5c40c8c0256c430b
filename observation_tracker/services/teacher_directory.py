from __future__ import annotations

import logging

from pydantic import ValidationError as PydanticValidationError

from observation_tracker.core.errors import Conflict, NotFound, ValidationFailure
from observation_tracker.core.validation import validate_teacher
from observation_tracker.schemas.teacher import (
    Teacher,
    TeacherCreate,
    TeacherImportError,
    TeacherImportResult,
    TeacherUpdate,
)
from observation_tracker.store.document_store import DocumentStore

logger = logging.getLogger(__name__)

COLLECTION = "teachers"


class TeacherDirectory:
    def __init__(self, store: DocumentStore):
        self.store = store

    def list(self) -> list[Teacher]:
        return [Teacher.model_validate(d) for d in self.store.list(COLLECTION, order_by="name")]

    def get(self, teacher_id: str) -> Teacher:
        doc = self.store.get(COLLECTION, teacher_id)
        if doc is None:
            raise NotFound("teacher", teacher_id)
        return Teacher.model_validate(doc)

    def find_by_email(self, email: str) -> Teacher | None:
        needle = (email or "").strip().lower()
        return next((t for t in self.list() if t.email.lower() == needle), None)

    def search(self, term: str) -> list[Teacher]:
        needle = (term or "").strip().lower()
        if not needle:
            return self.list()
        return [t for t in self.list() if needle in t.name.lower() or needle in t.email.lower()]

    def create(self, payload: TeacherCreate) -> Teacher:
        result = validate_teacher(payload)
        if not result.is_valid:
            raise ValidationFailure(result.as_dicts(), message="Invalid teacher")
        if self.find_by_email(payload.email) is not None:
            raise Conflict(f"Teacher with email {payload.email} already exists")

        teacher_id = self.store.create(COLLECTION, payload.model_dump(mode="json"))
        return self.get(teacher_id)

    def update(self, teacher_id: str, payload: TeacherUpdate) -> Teacher:
        current = self.get(teacher_id)
        partial = {k: v for k, v in payload.model_dump(mode="json", exclude_unset=True).items() if v is not None}

        result = validate_teacher({**current.model_dump(mode="json"), **partial})
        if not result.is_valid:
            raise ValidationFailure(result.as_dicts(), message="Invalid teacher")

        if "email" in partial:
            owner = self.find_by_email(partial["email"])
            if owner is not None and owner.id != teacher_id:
                raise Conflict(f"Teacher with email {partial['email']} already exists")

        self.store.update(COLLECTION, teacher_id, partial)
        return self.get(teacher_id)

    def bulk_import(self, rows: list[dict]) -> TeacherImportResult:
        """
        Create each row on its own; a bad row is reported in errors and the
        rest of the batch continues.
        """
        successful = 0
        errors: list[TeacherImportError] = []

        for row in rows:
            try:
                self.create(TeacherCreate.model_validate(row))
                successful += 1
            except ValidationFailure as exc:
                errors.append(TeacherImportError(teacher=row, error="; ".join(e["message"] for e in exc.errors)))
            except Conflict as exc:
                errors.append(TeacherImportError(teacher=row, error=exc.message))
            except PydanticValidationError as exc:
                errors.append(TeacherImportError(teacher=row, error=str(exc.errors()[0]["msg"])))

        logger.info("Teacher import: %d created, %d rejected", successful, len(errors))
        return TeacherImportResult(successful=successful, errors=errors)

"""
Framework catalog backed by the "frameworks" collection.

A repository is built per request around a DocumentStore; writes are
flushed by the store and become visible to subscribers once the caller
commits.
"""
from __future__ import annotations

import logging
import re
import uuid
from datetime import date
from typing import Callable

from observation_tracker.core.errors import NotFound, ValidationFailure
from observation_tracker.core.validation import blocking_framework_errors, validate_framework
from observation_tracker.schemas.framework import (
    AlignmentOption,
    Framework,
    FrameworkCreate,
    FrameworkUpdate,
    Question,
    Section,
)
from observation_tracker.services import framework_editor
from observation_tracker.services.default_frameworks import (
    ALIGNMENT_OPTIONS,
    CRP_IN_ACTION_ID,
    DEFAULT_FRAMEWORKS,
    INTEGRATED_LOOKFORS_SECTION_ID,
)
from observation_tracker.store.document_store import DocumentStore

logger = logging.getLogger(__name__)

COLLECTION = "frameworks"

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    return _SLUG_RE.sub("-", (name or "").lower()).strip("-") or "framework"


def today_iso() -> str:
    return date.today().isoformat()


class FrameworkRepository:
    def __init__(self, store: DocumentStore):
        self.store = store

    # -- lookups ---------------------------------------------------------

    def find(self, framework_id: str) -> Framework | None:
        doc = self.store.get(COLLECTION, framework_id)
        return Framework.model_validate(doc) if doc is not None else None

    def get(self, framework_id: str) -> Framework:
        framework = self.find(framework_id)
        if framework is None:
            raise NotFound("framework", framework_id)
        return framework

    def list(self, status: str | None = None) -> list[Framework]:
        """All frameworks sorted by name, optionally narrowed to one status."""
        where = {"status": status} if status else None
        docs = self.store.list(COLLECTION, where=where, order_by="name")
        return [Framework.model_validate(d) for d in docs]

    def list_active(self) -> list[Framework]:
        return self.list(status="active")

    def get_sections(self, framework_id: str) -> list[Section]:
        framework = self.find(framework_id)
        return framework.sections if framework else []

    def get_questions(self, framework_id: str, section_id: str | None = None) -> list[Question]:
        """
        Questions of one section, or of every section in order when no
        section is given. Unknown framework or section gives [].
        """
        framework = self.find(framework_id)
        if framework is None:
            return []
        if section_id is None:
            return [q for s in framework.sections for q in s.questions]
        section = framework.find_section(section_id)
        return section.questions if section else []

    def get_observation_questions(self, framework_id: str = CRP_IN_ACTION_ID) -> list[Question]:
        return self.get_questions(framework_id, INTEGRATED_LOOKFORS_SECTION_ID)

    def alignment_options(self) -> list[AlignmentOption]:
        return [AlignmentOption(**o) for o in ALIGNMENT_OPTIONS]

    # -- mutations -------------------------------------------------------

    def _check(self, doc: dict) -> None:
        errors = blocking_framework_errors(validate_framework(doc))
        if errors:
            raise ValidationFailure(errors, message="Invalid framework")

    def create(self, payload: FrameworkCreate) -> Framework:
        doc = payload.model_dump(mode="json")
        doc["id"] = payload.id or f"{slugify(payload.name)}-{uuid.uuid4().hex[:6]}"
        doc["last_modified"] = today_iso()
        self._check(doc)

        # Conflict from the store when the id is taken
        self.store.create(COLLECTION, doc)
        logger.info("Framework %s created with %d section(s)", doc["id"], len(doc["sections"]))
        return self.get(doc["id"])

    def update(self, framework_id: str, payload: FrameworkUpdate) -> Framework:
        current = self.get(framework_id)
        partial = payload.model_dump(mode="json", exclude_unset=True)
        partial = {k: v for k, v in partial.items() if v is not None}

        merged = {**current.model_dump(mode="json"), **partial}
        self._check(merged)

        partial["last_modified"] = today_iso()
        self.store.update(COLLECTION, framework_id, partial)
        return self.get(framework_id)

    def _save_sections(self, framework: Framework, sections: list[Section]) -> Framework:
        dumped = [s.model_dump(mode="json") for s in sections]
        self._check({**framework.model_dump(mode="json"), "sections": dumped})

        self.store.update(COLLECTION, framework.id, {"sections": dumped, "last_modified": today_iso()})
        return self.get(framework.id)

    def update_questions(self, framework_id: str, section_id: str, questions: list[Question]) -> Framework:
        """Replace one section's question list; other sections are untouched."""
        framework = self.get(framework_id)
        if framework.find_section(section_id) is None:
            raise NotFound("section", section_id)

        sections = [
            s.model_copy(update={"questions": list(questions)}) if s.id == section_id else s
            for s in framework.sections
        ]
        return self._save_sections(framework, sections)

    def move_question(self, framework_id: str, section_id: str, question_id: str, direction: str) -> Framework:
        framework = self.get(framework_id)
        section = framework.find_section(section_id)
        if section is None:
            raise NotFound("section", section_id)

        reordered = framework_editor.move_question(section.questions, question_id, direction)
        if [q.id for q in reordered] == [q.id for q in section.questions]:
            return framework
        return self.update_questions(framework_id, section_id, reordered)

    def _section_questions(self, framework_id: str, section_id: str) -> list[Question]:
        framework = self.get(framework_id)
        section = framework.find_section(section_id)
        if section is None:
            raise NotFound("section", section_id)
        return section.questions

    def add_question(self, framework_id: str, section_id: str, question: Question | None = None) -> Framework:
        """Append a question; without one a blank 4-point rating look-for is added."""
        questions = self._section_questions(framework_id, section_id)
        return self.update_questions(framework_id, section_id, framework_editor.add_question(questions, question))

    def duplicate_question(self, framework_id: str, section_id: str, question_id: str) -> Framework:
        questions = self._section_questions(framework_id, section_id)
        if not any(q.id == question_id for q in questions):
            raise NotFound("question", question_id)
        return self.update_questions(framework_id, section_id, framework_editor.duplicate_question(questions, question_id))

    def remove_question(self, framework_id: str, section_id: str, question_id: str) -> Framework:
        questions = self._section_questions(framework_id, section_id)
        if not any(q.id == question_id for q in questions):
            raise NotFound("question", question_id)
        return self.update_questions(framework_id, section_id, framework_editor.remove_question(questions, question_id))

    def add_section(self, framework_id: str, title: str, description: str, weight: float = 0) -> Framework:
        framework = self.get(framework_id)
        sections = framework_editor.add_section(framework.sections, title=title, description=description, weight=weight)
        saved = self._save_sections(framework, sections)
        self._log_weight_total(saved)
        return saved

    def remove_section(self, framework_id: str, section_id: str) -> Framework:
        framework = self.get(framework_id)
        if framework.find_section(section_id) is None:
            raise NotFound("section", section_id)
        saved = self._save_sections(framework, framework_editor.remove_section(framework.sections, section_id))
        self._log_weight_total(saved)
        return saved

    def _log_weight_total(self, framework: Framework) -> None:
        total = framework_editor.total_section_weight(framework.sections)
        if abs(total - 100) > 0.01:
            logger.info("Framework %s section weights now total %g%%", framework.id, total)

    def delete(self, framework_id: str) -> None:
        self.store.delete(COLLECTION, framework_id)

    # -- change notification ---------------------------------------------

    def subscribe(self, callback: Callable[[list[Framework]], None]) -> Callable[[], bool]:
        """
        Call back with the name-sorted catalog now and after every committed
        change to it.
        """
        def _deliver(docs: list[dict]) -> None:
            frameworks = [Framework.model_validate(d) for d in docs]
            callback(sorted(frameworks, key=lambda f: f.name))

        return self.store.subscribe(COLLECTION, _deliver)

    # -- seeding ---------------------------------------------------------

    def seed_defaults(self) -> list[str]:
        """Insert the built-in frameworks that are missing; returns the ids added."""
        added = []
        for doc in DEFAULT_FRAMEWORKS:
            if self.store.get(COLLECTION, doc["id"]) is not None:
                continue
            self.store.create(COLLECTION, doc)
            added.append(doc["id"])
        if added:
            logger.info("Seeded default frameworks: %s", ", ".join(added))
        return added

"""
Pure list operations behind the framework editor.

All functions return new lists and never mutate their input, so a caller
can diff before/after or discard an edit.
"""
from __future__ import annotations

import uuid
from typing import Literal

from observation_tracker.schemas.framework import Question, Section

Direction = Literal["up", "down"]


def new_item_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def move_question(questions: list[Question], question_id: str, direction: Direction) -> list[Question]:
    """
    Swap a question with its neighbour. Moving the first question up, the
    last one down, or an unknown id leaves the order unchanged.
    """
    out = list(questions)
    idx = next((i for i, q in enumerate(out) if q.id == question_id), None)
    if idx is None:
        return out

    target = idx - 1 if direction == "up" else idx + 1
    if target < 0 or target >= len(out):
        return out

    out[idx], out[target] = out[target], out[idx]
    return out


def add_question(questions: list[Question], question: Question | None = None) -> list[Question]:
    if question is None:
        question = Question(
            id=new_item_id("question"),
            text="New look-for",
            type="rating",
            required=False,
            scale=4,
            weight=0,
        )
    return [*questions, question]


def duplicate_question(questions: list[Question], question_id: str) -> list[Question]:
    """Insert a copy (new id, "(Copy)" suffix) right after the original."""
    out: list[Question] = []
    for q in questions:
        out.append(q)
        if q.id == question_id:
            out.append(q.model_copy(update={"id": new_item_id("question"), "text": f"{q.text} (Copy)"}, deep=True))
    return out


def remove_question(questions: list[Question], question_id: str) -> list[Question]:
    return [q for q in questions if q.id != question_id]


def add_section(
    sections: list[Section],
    title: str = "New Section",
    description: str = "Describe what this section looks for",
    weight: float = 0,
) -> list[Section]:
    return [*sections, Section(id=new_item_id("section"), title=title, description=description, weight=weight)]


def remove_section(sections: list[Section], section_id: str) -> list[Section]:
    return [s for s in sections if s.id != section_id]


def total_section_weight(sections: list[Section]) -> float:
    return sum(s.weight for s in sections)

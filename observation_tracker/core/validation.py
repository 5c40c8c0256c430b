"""
Record validation.

Every validator collects all problems into a ValidationResult instead of
stopping at the first one, so a form can show every error at once. Nested
errors are prefixed with their position, e.g. ``sections[0].questions[2].text``.
"""
from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel

from observation_tracker.schemas.validation import ValidationError, ValidationResult

FRAMEWORK_STATUSES = ("active", "inactive", "draft")
QUESTION_TYPES = ("rating", "text", "multiselect", "single-select", "yes-no")
SELECT_TYPES = ("multiselect", "single-select")
OBSERVATION_STATUSES = ("draft", "in-progress", "completed", "submitted")
USER_ROLES = ("admin", "coordinator", "observer", "teacher")

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SCRIPT_TAG_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)


def _as_dict(obj: Any) -> dict:
    if isinstance(obj, BaseModel):
        return obj.model_dump()
    return dict(obj or {})


def _blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def _result(errors: list[dict]) -> ValidationResult:
    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=[ValidationError(**e) for e in errors],
    )


def _out_of_range(value: Any, lo: float, hi: float) -> bool:
    if value is None or isinstance(value, bool):
        return True
    try:
        x = float(value)
    except (TypeError, ValueError):
        return True
    return x < lo or x > hi


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def validate_question(question: Any) -> ValidationResult:
    q = _as_dict(question)
    errors: list[dict] = []

    text = q.get("text")
    if _blank(text):
        errors.append({"field": "text", "message": "Question text is required"})
    elif len(text) > 500:
        errors.append({"field": "text", "message": "Question text must be less than 500 characters"})

    qtype = q.get("type")
    if qtype not in QUESTION_TYPES:
        errors.append({"field": "type", "message": "Invalid question type"})

    if qtype == "rating":
        scale = q.get("scale")
        if not scale or _out_of_range(scale, 2, 10):
            errors.append({"field": "scale", "message": "Rating scale must be between 2 and 10"})

    if _out_of_range(q.get("weight"), 0, 100):
        errors.append({"field": "weight", "message": "Question weight must be between 0 and 100"})

    if qtype in SELECT_TYPES:
        options = q.get("options") or []
        if len(options) < 2:
            errors.append({"field": "options", "message": "Select questions must have at least 2 options"})

    return _result(errors)


def validate_section(section: Any) -> ValidationResult:
    s = _as_dict(section)
    errors: list[dict] = []

    title = s.get("title")
    if _blank(title):
        errors.append({"field": "title", "message": "Section title is required"})
    elif len(title) > 100:
        errors.append({"field": "title", "message": "Section title must be less than 100 characters"})

    if _blank(s.get("description")):
        errors.append({"field": "description", "message": "Section description is required"})

    if _out_of_range(s.get("weight"), 0, 100):
        errors.append({"field": "weight", "message": "Section weight must be between 0 and 100"})

    for idx, question in enumerate(s.get("questions") or []):
        for e in validate_question(question).errors:
            errors.append({"field": f"questions[{idx}].{e.field}", "message": e.message})

    return _result(errors)


def validate_framework(framework: Any) -> ValidationResult:
    """
    The section-weight rule produces an error on the "sections" field but
    callers treat it as advisory; saving is not blocked by it.
    """
    f = _as_dict(framework)
    errors: list[dict] = []

    name = f.get("name")
    if _blank(name):
        errors.append({"field": "name", "message": "Framework name is required"})
    elif len(name) > 100:
        errors.append({"field": "name", "message": "Framework name must be less than 100 characters"})

    description = f.get("description")
    if _blank(description):
        errors.append({"field": "description", "message": "Framework description is required"})
    elif len(description) > 500:
        errors.append({"field": "description", "message": "Framework description must be less than 500 characters"})

    if _blank(f.get("version")):
        errors.append({"field": "version", "message": "Framework version is required"})

    status = f.get("status")
    if status and status not in FRAMEWORK_STATUSES:
        errors.append({"field": "status", "message": "Invalid framework status"})

    sections = f.get("sections") or []
    if sections:
        total_weight = 0.0
        for idx, section in enumerate(sections):
            for e in validate_section(section).errors:
                errors.append({"field": f"sections[{idx}].{e.field}", "message": e.message})
            weight = _as_dict(section).get("weight")
            if isinstance(weight, (int, float)) and not isinstance(weight, bool):
                total_weight += weight

        if abs(total_weight - 100) > 0.01:
            errors.append({"field": "sections", "message": "Total section weights must equal 100%"})

    return _result(errors)


def blocking_framework_errors(result: ValidationResult) -> list[dict]:
    """Errors that stop a save; the section-weight total is advisory."""
    return [e.model_dump() for e in result.errors if e.field != "sections"]


def validate_observation(observation: Any) -> ValidationResult:
    o = _as_dict(observation)
    errors: list[dict] = []

    if _blank(o.get("teacher_id")):
        errors.append({"field": "teacher_id", "message": "Teacher selection is required"})
    if _blank(o.get("observer_id")):
        errors.append({"field": "observer_id", "message": "Observer ID is required"})
    if _blank(o.get("framework_id")):
        errors.append({"field": "framework_id", "message": "Framework selection is required"})
    if _blank(o.get("date")):
        errors.append({"field": "date", "message": "Observation date is required"})

    duration = o.get("duration")
    if duration is not None and _out_of_range(duration, 5, 180):
        errors.append({"field": "duration", "message": "Observation duration must be between 5 and 180 minutes"})

    status = o.get("status")
    if status and status not in OBSERVATION_STATUSES:
        errors.append({"field": "status", "message": "Invalid observation status"})

    if status in ("completed", "submitted") and not o.get("responses"):
        errors.append({"field": "responses", "message": "Completed observations must have responses"})

    return _result(errors)


def validate_teacher(teacher: Any) -> ValidationResult:
    t = _as_dict(teacher)
    errors: list[dict] = []

    name = t.get("name")
    if _blank(name):
        errors.append({"field": "name", "message": "Teacher name is required"})
    elif len(name) > 100:
        errors.append({"field": "name", "message": "Teacher name must be less than 100 characters"})

    email = t.get("email")
    if _blank(email):
        errors.append({"field": "email", "message": "Teacher email is required"})
    elif not is_valid_email(email):
        errors.append({"field": "email", "message": "Please enter a valid email address"})

    if _blank(t.get("department")):
        errors.append({"field": "department", "message": "Department is required"})

    if not t.get("subjects"):
        errors.append({"field": "subjects", "message": "At least one subject is required"})

    return _result(errors)


def validate_user(user: Any) -> ValidationResult:
    u = _as_dict(user)
    errors: list[dict] = []

    name = u.get("display_name")
    if _blank(name):
        errors.append({"field": "display_name", "message": "Name is required"})
    elif len(name) > 100:
        errors.append({"field": "display_name", "message": "Name must be less than 100 characters"})

    email = u.get("email")
    if _blank(email):
        errors.append({"field": "email", "message": "Email is required"})
    elif not is_valid_email(email):
        errors.append({"field": "email", "message": "Please enter a valid email address"})

    if u.get("role") not in USER_ROLES:
        errors.append({"field": "role", "message": "Valid role is required"})

    if _blank(u.get("department")):
        errors.append({"field": "department", "message": "Department is required"})

    return _result(errors)


def validate_csv_headers(headers: list[str], required_headers: list[str]) -> ValidationResult:
    normalized = {h.strip().lower() for h in headers}
    errors = [
        {"field": "headers", "message": f"Missing required column: {required}"}
        for required in required_headers
        if required.lower() not in normalized
    ]
    return _result(errors)


def sanitize_input(text: str) -> str:
    cleaned = SCRIPT_TAG_RE.sub("", text.strip())
    return cleaned.replace("<", "").replace(">", "")

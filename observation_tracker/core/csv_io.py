"""
CSV export/import.

Export format: every cell is wrapped in double quotes and embedded quotes
are doubled, so ``a "b" c`` is written as ``"a ""b"" c"``. Rows are separated
by ``\\n``. Generated templates and exports must stay readable by
``parse_csv`` so files can be round-tripped.
"""
from __future__ import annotations

import csv
import io
import json
from typing import Any, Iterable, Mapping, Sequence

from pydantic import BaseModel

LIST_SEPARATOR = "; "

OBSERVATION_HEADERS = [
    ("id", "Observation ID"),
    ("date", "Date"),
    ("teacher_name", "Teacher Name"),
    ("observer_name", "Observer Name"),
    ("duration", "Duration (minutes)"),
    ("status", "Status"),
    ("crp_evidence_count", "CRP Evidence Count"),
    ("total_look_fors", "Total Look-Fors"),
    ("overall_comment", "Overall Comments"),
]

DETAILED_OBSERVATION_HEADERS = [
    ("observation_id", "Observation ID"),
    ("date", "Date"),
    ("teacher_name", "Teacher Name"),
    ("observer_name", "Observer Name"),
    ("question_id", "Question ID"),
    ("question_response", "Response"),
    ("comments", "Comments"),
]

TEACHER_HEADERS = [
    ("id", "Teacher ID"),
    ("name", "Name"),
    ("email", "Email"),
    ("department", "Department"),
    ("grade", "Grade"),
    ("subjects", "Subjects"),
]

FRAMEWORK_HEADERS = [
    ("id", "Framework ID"),
    ("name", "Name"),
    ("description", "Description"),
    ("version", "Version"),
    ("status", "Status"),
    ("last_modified", "Last Modified"),
    ("tags", "Tags"),
]

USER_HEADERS = [
    ("id", "User ID"),
    ("display_name", "Name"),
    ("email", "Email"),
    ("role", "Role"),
    ("department", "Department"),
    ("permissions", "Permissions"),
    ("last_login", "Last Login"),
]

ANALYTICS_HEADERS = [
    ("teacher_id", "Teacher ID"),
    ("teacher_name", "Teacher Name"),
    ("total_observations", "Total Observations"),
    ("completed_observations", "Completed Observations"),
    ("average_crp_evidence", "Average CRP Evidence"),
    ("average_duration", "Average Duration (min)"),
]

TEACHER_TEMPLATE_HEADERS = [
    ("name", "Name"),
    ("email", "Email"),
    ("department", "Department"),
    ("grade", "Grade"),
    ("subjects", "Subjects (separated by semicolons)"),
]

TEACHER_TEMPLATE_SAMPLES = [
    {
        "name": "John Smith",
        "email": "john.smith@school.edu",
        "department": "Mathematics",
        "grade": "9-10",
        "subjects": "Algebra; Geometry; Statistics",
    },
    {
        "name": "Jane Doe",
        "email": "jane.doe@school.edu",
        "department": "English",
        "grade": "11-12",
        "subjects": "Literature; Writing; Speech",
    },
]

REQUIRED_TEACHER_COLUMNS = ["Name", "Email", "Department"]


def _row(item: Any) -> Mapping[str, Any]:
    if isinstance(item, BaseModel):
        return item.model_dump(mode="json")
    return item


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple, set)):
        return LIST_SEPARATOR.join(_cell(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def export_to_csv(rows: Sequence[Any], headers: Sequence[tuple[str, str]]) -> str:
    """Quoted CSV text with a header row of labels; "" when there are no rows."""
    if not rows:
        return ""

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([label for _, label in headers])
    for item in rows:
        data = _row(item)
        writer.writerow([_cell(data.get(key)) for key, _ in headers])

    out = buf.getvalue()
    return out[:-1] if out.endswith("\n") else out


def parse_csv(text: str) -> list[dict[str, str]]:
    """
    Parse CSV produced by export_to_csv (or a spreadsheet) into dicts keyed
    by the header row. Quoted fields may contain commas, doubled quotes and
    newlines.
    """
    content = text.lstrip("\ufeff").strip()
    if not content:
        return []

    reader = csv.reader(io.StringIO(content))
    rows = list(reader)
    if len(rows) < 2:
        return []

    headers = [h.strip() for h in rows[0]]
    out: list[dict[str, str]] = []
    for values in rows[1:]:
        if not any(v.strip() for v in values):
            continue
        out.append({h: (values[i] if i < len(values) else "") for i, h in enumerate(headers)})
    return out


def export_observations_to_csv(observations: Iterable[Any]) -> str:
    rows = []
    for obs in observations:
        data = dict(_row(obs))
        data["crp_evidence_count"] = data.get("crp_evidence_count") or 0
        data["total_look_fors"] = data.get("total_look_fors") or 0
        rows.append(data)
    return export_to_csv(rows, OBSERVATION_HEADERS)


def _response_text(value: Any) -> str:
    if isinstance(value, (list, dict)):
        return json.dumps(value)
    return _cell(value)


def export_detailed_observations_to_csv(observations: Iterable[Any]) -> str:
    """One row per question response; observations without responses get one blank row."""
    rows = []
    for obs in observations:
        data = _row(obs)
        base = {
            "observation_id": data.get("id"),
            "date": data.get("date"),
            "teacher_name": data.get("teacher_name"),
            "observer_name": data.get("observer_name"),
        }
        responses = data.get("responses") or {}
        comments = data.get("comments") or {}

        if not responses:
            rows.append({**base, "question_id": "", "question_response": "", "comments": data.get("overall_comment") or ""})
            continue

        for question_id, response in responses.items():
            value = response.get("value") if isinstance(response, Mapping) else response
            rows.append(
                {
                    **base,
                    "question_id": question_id,
                    "question_response": _response_text(value),
                    "comments": comments.get(question_id, ""),
                }
            )
    return export_to_csv(rows, DETAILED_OBSERVATION_HEADERS)


def export_teachers_to_csv(teachers: Iterable[Any]) -> str:
    return export_to_csv(list(teachers), TEACHER_HEADERS)


def export_frameworks_to_csv(frameworks: Iterable[Any]) -> str:
    return export_to_csv(list(frameworks), FRAMEWORK_HEADERS)


def export_users_to_csv(users: Iterable[Any]) -> str:
    rows = []
    for user in users:
        data = dict(_row(user))
        data["last_login"] = data.get("last_login") or "Never"
        rows.append(data)
    return export_to_csv(rows, USER_HEADERS)


def export_analytics_to_csv(analytics: Iterable[Any]) -> str:
    return export_to_csv(list(analytics), ANALYTICS_HEADERS)


def generate_template_csv(kind: str) -> str:
    if kind == "teachers":
        return export_to_csv(TEACHER_TEMPLATE_SAMPLES, TEACHER_TEMPLATE_HEADERS)
    # frameworks are edited in the app, there is no bulk template
    return ""


def csv_headers(text: str) -> list[str]:
    content = text.lstrip("\ufeff").strip()
    if not content:
        return []
    first = next(csv.reader(io.StringIO(content)), [])
    return [h.strip() for h in first]


def teachers_from_csv(text: str) -> list[dict]:
    """
    Map rows of the teachers template to TeacherCreate-shaped dicts.
    Header matching is case-insensitive; the subjects column is any header
    starting with "subjects".
    """
    out = []
    for row in parse_csv(text):
        lowered = {k.strip().lower(): (v or "").strip() for k, v in row.items()}
        subjects_raw = next((v for k, v in lowered.items() if k.startswith("subjects")), "")
        out.append(
            {
                "name": lowered.get("name", ""),
                "email": lowered.get("email", ""),
                "department": lowered.get("department", ""),
                "grade": lowered.get("grade") or None,
                "subjects": [s.strip() for s in subjects_raw.split(";") if s.strip()],
            }
        )
    return out

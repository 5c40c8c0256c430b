from observation_tracker.core.validation import (
    blocking_framework_errors,
    sanitize_input,
    validate_csv_headers,
    validate_framework,
    validate_observation,
    validate_question,
    validate_teacher,
    validate_user,
)
from observation_tracker.services.default_frameworks import CRP_IN_ACTION
from tests.helpers import make_question, make_section


def _framework(sections):
    return {
        "name": "Walkthrough",
        "description": "Short walkthrough tool",
        "version": "1.0",
        "status": "draft",
        "sections": sections,
    }


def _fields(result):
    return [e.field for e in result.errors]


def test_builtin_framework_is_valid():
    result = validate_framework(CRP_IN_ACTION)
    assert result.is_valid, result.errors


def test_section_weights_must_total_100():
    result = validate_framework(_framework([make_section("a", 50), make_section("b", 40)]))
    assert not result.is_valid
    weight_errors = [e for e in result.errors if e.field == "sections"]
    assert len(weight_errors) == 1
    assert "100%" in weight_errors[0].message


def test_section_weight_error_is_not_blocking():
    result = validate_framework(_framework([make_section("a", 90)]))
    assert not result.is_valid
    assert blocking_framework_errors(result) == []


def test_weights_within_tolerance_pass():
    result = validate_framework(_framework([make_section("a", 33.33), make_section("b", 66.67)]))
    assert result.is_valid


def test_no_sections_skips_weight_rule():
    assert validate_framework(_framework([])).is_valid


def test_nested_errors_are_prefixed():
    section = make_section("a", 100, questions=[make_question("q1"), make_question("q2", text="")])
    result = validate_framework(_framework([section]))
    assert "sections[0].questions[1].text" in _fields(result)


def test_framework_required_fields():
    result = validate_framework({"name": "", "description": "", "version": "", "status": "retired"})
    assert set(_fields(result)) == {"name", "description", "version", "status"}


def test_question_rules():
    assert "scale" in _fields(validate_question(make_question("q", scale=11)))
    assert "options" in _fields(validate_question(make_question("q", type="multiselect", options=["one"])))
    assert "type" in _fields(validate_question(make_question("q", type="slider")))
    assert validate_question(make_question("q", type="single-select", scale=None, options=["a", "b"])).is_valid


def test_observation_rules():
    result = validate_observation({"status": "completed", "duration": 200, "responses": {}})
    fields = _fields(result)
    for f in ("teacher_id", "observer_id", "framework_id", "date", "duration", "responses"):
        assert f in fields

    ok = validate_observation(
        {
            "teacher_id": "t1",
            "observer_id": "u1",
            "framework_id": "crp-in-action",
            "date": "2025-08-20",
            "duration": 45,
            "status": "draft",
        }
    )
    assert ok.is_valid


def test_teacher_and_user_rules():
    assert set(_fields(validate_teacher({"name": "A", "email": "bad", "department": "", "subjects": []}))) == {
        "email",
        "department",
        "subjects",
    }
    assert _fields(validate_user({"display_name": "A", "email": "a@b.co", "role": "principal", "department": "X"})) == [
        "role"
    ]


def test_csv_headers_case_insensitive():
    assert validate_csv_headers(["name", "EMAIL", "Department "], ["Name", "Email", "Department"]).is_valid
    result = validate_csv_headers(["Name"], ["Name", "Email"])
    assert result.errors[0].message == "Missing required column: Email"


def test_sanitize_input():
    assert sanitize_input("  hi <script>alert(1)</script><b>there</b> ") == "hi bthere/b"

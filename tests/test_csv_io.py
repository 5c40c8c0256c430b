from observation_tracker.core import csv_io
from observation_tracker.core.csv_io import export_to_csv, parse_csv


def test_export_quotes_every_field():
    out = export_to_csv([{"a": "x", "b": 3}], [("a", "A"), ("b", "B")])
    assert out == '"A","B"\n"x","3"'


def test_export_doubles_embedded_quotes():
    assert export_to_csv([{"v": 'a "b" c'}], [("v", "V")]) == '"V"\n"a ""b"" c"'
    assert "parse_csv" in csv_io.__doc__


def test_export_empty_rows_gives_empty_string():
    assert export_to_csv([], [("a", "A")]) == ""


def test_export_parse_round_trip_keeps_quotes_commas_and_newlines():
    rows = [
        {"name": 'He said "hi"', "note": "one, two", "multi": "line1\nline2"},
        {"name": "plain", "note": "", "multi": None},
    ]
    headers = [("name", "Name"), ("note", "Note"), ("multi", "Multi")]

    parsed = parse_csv(export_to_csv(rows, headers))

    assert parsed == [
        {"Name": 'He said "hi"', "Note": "one, two", "Multi": "line1\nline2"},
        {"Name": "plain", "Note": "", "Multi": ""},
    ]


def test_cells_for_lists_and_dicts():
    out = export_to_csv([{"tags": ["a", "b"], "meta": {"k": 1}, "flag": True}], [("tags", "T"), ("meta", "M"), ("flag", "F")])
    row = parse_csv(out)[0]
    assert row == {"T": "a; b", "M": '{"k": 1}', "F": "true"}


def test_parse_csv_skips_blank_rows_and_bom():
    text = "\ufeffName,Email\n\nAna,ana@school.edu\n , \n"
    assert parse_csv(text) == [{"Name": "Ana", "Email": "ana@school.edu"}]


def test_parse_csv_header_only():
    assert parse_csv('"Name","Email"') == []


def test_observation_export_defaults_missing_scores_to_zero():
    out = csv_io.export_observations_to_csv(
        [{"id": "o1", "date": "2025-08-20", "teacher_name": "Ana", "observer_name": "Sam", "duration": 45, "status": "draft"}]
    )
    row = parse_csv(out)[0]
    assert row["CRP Evidence Count"] == "0"
    assert row["Total Look-Fors"] == "0"
    assert row["Observation ID"] == "o1"


def test_detailed_export_has_one_row_per_response():
    obs = {
        "id": "o1",
        "date": "2025-08-20",
        "teacher_name": "Ana",
        "observer_name": "Sam",
        "responses": {
            "lookfor1": {"question_id": "lookfor1", "value": "4"},
            "lookfor2": {"question_id": "lookfor2", "value": ["a", "b"]},
        },
        "comments": {"lookfor1": "clear target"},
    }
    rows = parse_csv(csv_io.export_detailed_observations_to_csv([obs]))
    assert [r["Question ID"] for r in rows] == ["lookfor1", "lookfor2"]
    assert rows[0]["Comments"] == "clear target"
    assert rows[1]["Response"] == '["a", "b"]'


def test_users_export_never_logged_in():
    rows = parse_csv(csv_io.export_users_to_csv([{"id": "u1", "display_name": "Sam", "email": "s@x.io", "role": "observer"}]))
    assert rows[0]["Last Login"] == "Never"


def test_teacher_template_round_trips_through_import_mapping():
    template = csv_io.generate_template_csv("teachers")
    assert csv_io.csv_headers(template)[:3] == csv_io.REQUIRED_TEACHER_COLUMNS

    teachers = csv_io.teachers_from_csv(template)
    assert teachers[0] == {
        "name": "John Smith",
        "email": "john.smith@school.edu",
        "department": "Mathematics",
        "grade": "9-10",
        "subjects": ["Algebra", "Geometry", "Statistics"],
    }


def test_framework_template_is_empty():
    assert csv_io.generate_template_csv("frameworks") == ""

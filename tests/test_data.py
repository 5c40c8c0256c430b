from fastapi.testclient import TestClient

from observation_tracker.core.csv_io import parse_csv
from observation_tracker.main import app
from tests.helpers import auth, create_framework, create_observation, create_teacher, create_user

ADMIN = auth("admin@school.edu")


def test_export_requires_admin_or_coordinator(db_session):
    create_user(db_session, "sam@school.edu", role="observer")
    client = TestClient(app)
    r = client.get("/data/export/observations", headers=auth("sam@school.edu"))
    assert r.status_code == 403


def test_export_observations_csv(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    sam = create_user(db_session, "sam@school.edu", role="observer", display_name="Sam Lee")
    ana = create_teacher(db_session, name="Ana Ruiz", email="ana@school.edu")
    create_observation(db_session, teacher=ana, observer=sam, overall_comment='Said "great job", twice')

    client = TestClient(app)
    r = client.get("/data/export/observations", headers=ADMIN)
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/csv")
    assert "attachment" in r.headers["content-disposition"]

    rows = parse_csv(r.text)
    assert rows[0]["Teacher Name"] == "Ana Ruiz"
    assert rows[0]["Observer Name"] == "Sam Lee"
    assert rows[0]["CRP Evidence Count"] == "50"
    assert rows[0]["Overall Comments"] == 'Said "great job", twice'


def test_export_other_kinds(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    sam = create_user(db_session, "sam@school.edu", role="observer")
    ana = create_teacher(db_session, subjects=["Algebra", "Geometry"])
    create_framework(db_session, framework_id="f1", name="Walkthrough")
    create_observation(db_session, teacher=ana, observer=sam, responses={"lookfor1": "4", "lookfor2": "2", "lookfor3": "1"})

    client = TestClient(app)

    detailed = parse_csv(client.get("/data/export/observations-detailed", headers=ADMIN).text)
    assert [r["Question ID"] for r in detailed] == ["lookfor1", "lookfor2", "lookfor3"]

    teachers = parse_csv(client.get("/data/export/teachers", headers=ADMIN).text)
    assert teachers[0]["Subjects"] == "Algebra; Geometry"

    frameworks = parse_csv(client.get("/data/export/frameworks", headers=ADMIN).text)
    assert frameworks[0]["Framework ID"] == "f1"

    users = parse_csv(client.get("/data/export/users", headers=ADMIN).text)
    assert {u["Email"] for u in users} == {"admin@school.edu", "sam@school.edu"}

    analytics = parse_csv(client.get("/data/export/analytics", headers=ADMIN).text)
    assert analytics[0]["Average CRP Evidence"] == "33"

    assert client.get("/data/export/unknown", headers=ADMIN).status_code == 404


def test_export_with_no_rows_is_empty(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    client = TestClient(app)
    r = client.get("/data/export/teachers", headers=ADMIN)
    assert r.status_code == 200
    assert r.text == ""


def test_templates(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    client = TestClient(app)

    r = client.get("/data/templates/teachers", headers=ADMIN)
    assert r.status_code == 200
    assert r.text.startswith('"Name","Email","Department","Grade"')

    assert client.get("/data/templates/frameworks", headers=ADMIN).text == ""
    assert client.get("/data/templates/users", headers=ADMIN).status_code == 404


def test_import_teachers_csv(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    client = TestClient(app)

    content = (
        '"Name","Email","Department","Grade","Subjects (separated by semicolons)"\n'
        '"Ana Ruiz","ana@school.edu","Science","7","Biology; Chemistry"\n'
        '"","missing@school.edu","Science","7","Biology"\n'
    )
    r = client.post(
        "/data/import/teachers",
        files={"file": ("teachers.csv", content.encode("utf-8"), "text/csv")},
        headers=ADMIN,
    )
    assert r.status_code == 200
    body = r.json()
    assert body["successful"] == 1
    assert body["errors"][0]["teacher"]["email"] == "missing@school.edu"

    teachers = client.get("/teachers", headers=ADMIN).json()
    assert teachers[0]["subjects"] == ["Biology", "Chemistry"]


def test_import_rejects_missing_columns(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    client = TestClient(app)
    r = client.post(
        "/data/import/teachers",
        files={"file": ("teachers.csv", b'"Name","Grade"\n"Ana","7"\n', "text/csv")},
        headers=ADMIN,
    )
    assert r.status_code == 400
    messages = [e["message"] for e in r.json()["detail"]["errors"]]
    assert messages == ["Missing required column: Email", "Missing required column: Department"]

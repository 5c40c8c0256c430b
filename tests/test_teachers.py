from fastapi.testclient import TestClient

from observation_tracker.main import app
from tests.helpers import auth, create_teacher, create_user

ADMIN = auth("admin@school.edu")


def _teacher_json(**overrides):
    data = {
        "name": "Ana Ruiz",
        "email": "ana@school.edu",
        "department": "Science",
        "grade": "7",
        "subjects": ["Biology"],
        "current_class": {"name": "Bio 7", "subject": "Biology", "room": "12", "period": "3", "grade": "7"},
    }
    data.update(overrides)
    return data


def test_teacher_role_cannot_list_teachers(db_session):
    create_user(db_session, "ana@school.edu", role="teacher")
    client = TestClient(app)
    r = client.get("/teachers", headers=auth("ana@school.edu"))
    assert r.status_code == 403


def test_create_and_get_teacher(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    client = TestClient(app)

    r = client.post("/teachers", json=_teacher_json(), headers=ADMIN)
    assert r.status_code == 201
    teacher = r.json()
    assert teacher["current_class"]["room"] == "12"

    r = client.get(f"/teachers/{teacher['id']}", headers=ADMIN)
    assert r.status_code == 200
    assert r.json()["email"] == "ana@school.edu"


def test_create_teacher_validation(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    client = TestClient(app)
    r = client.post("/teachers", json=_teacher_json(email="not-an-email", subjects=[]), headers=ADMIN)
    assert r.status_code == 400
    assert {e["field"] for e in r.json()["detail"]["errors"]} == {"email", "subjects"}


def test_duplicate_teacher_email_conflicts(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    create_teacher(db_session, email="ana@school.edu")
    client = TestClient(app)
    r = client.post("/teachers", json=_teacher_json(email="ANA@school.edu"), headers=ADMIN)
    assert r.status_code == 409


def test_update_cannot_take_another_teachers_email(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    create_teacher(db_session, name="Ana Ruiz", email="a@school.edu")
    ben = create_teacher(db_session, name="Ben Cole", email="b@school.edu")
    client = TestClient(app)

    r = client.patch(f"/teachers/{ben.id}", json={"email": "A@school.edu"}, headers=ADMIN)
    assert r.status_code == 409
    assert client.get(f"/teachers/{ben.id}", headers=ADMIN).json()["email"] == "b@school.edu"

    # keeping your own address is not a conflict
    r = client.patch(f"/teachers/{ben.id}", json={"email": "b@school.edu", "grade": "8"}, headers=ADMIN)
    assert r.status_code == 200
    assert r.json()["grade"] == "8"

def test_list_search_and_update(db_session):
    create_user(db_session, "sam@school.edu", role="observer")
    create_user(db_session, "admin@school.edu", role="admin")
    create_teacher(db_session, name="Zoe Park", email="zoe@school.edu")
    ana = create_teacher(db_session, name="Ana Ruiz", email="ana@school.edu")
    client = TestClient(app)

    r = client.get("/teachers", headers=auth("sam@school.edu"))
    assert [t["name"] for t in r.json()] == ["Ana Ruiz", "Zoe Park"]

    r = client.get("/teachers/search?q=ZOE@", headers=auth("sam@school.edu"))
    assert [t["name"] for t in r.json()] == ["Zoe Park"]

    r = client.patch(f"/teachers/{ana.id}", json={"grade": "11-12"}, headers=ADMIN)
    assert r.status_code == 200
    assert r.json()["grade"] == "11-12"
    assert r.json()["subjects"] == ["Algebra"]


def test_bulk_import_reports_bad_rows(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    client = TestClient(app)
    rows = [
        _teacher_json(),
        _teacher_json(name="Ben Ode", email="ben@school.edu"),
        _teacher_json(name="", email="nobody@school.edu"),
        _teacher_json(name="Ana Again"),
    ]
    r = client.post("/teachers/import", json=rows, headers=ADMIN)
    assert r.status_code == 200
    body = r.json()
    assert body["successful"] == 2
    assert [e["teacher"]["email"] for e in body["errors"]] == ["nobody@school.edu", "ana@school.edu"]
    assert body["errors"][0]["error"] == "Teacher name is required"

    r = client.get("/teachers", headers=ADMIN)
    assert len(r.json()) == 2

from fastapi.testclient import TestClient

from observation_tracker.main import app
from tests.helpers import auth, create_user

ADMIN = auth("admin@school.edu")


def test_user_admin_requires_admin_role(db_session):
    create_user(db_session, "coach@school.edu", role="coordinator")
    client = TestClient(app)
    assert client.get("/users", headers=auth("coach@school.edu")).status_code == 403
    assert client.post("/users", json={}, headers=auth("coach@school.edu")).status_code == 403


def test_create_user_gets_role_permissions(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    client = TestClient(app)
    r = client.post(
        "/users",
        json={"email": "Sam@School.edu", "display_name": "Sam Lee", "role": "observer", "department": "ELA"},
        headers=ADMIN,
    )
    assert r.status_code == 201
    body = r.json()
    assert body["email"] == "sam@school.edu"
    assert body["permissions"] == ["frameworks.read", "observations.write", "observations.read.own", "teachers.read"]
    assert body["is_active"] is True
    assert body["last_login"] is None


def test_create_user_validation_and_conflict(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    client = TestClient(app)

    r = client.post(
        "/users",
        json={"email": "bad", "display_name": "", "role": "principal", "department": ""},
        headers=ADMIN,
    )
    assert r.status_code == 400
    assert {e["field"] for e in r.json()["detail"]["errors"]} == {"email", "display_name", "role", "department"}

    r = client.post(
        "/users",
        json={"email": "admin@school.edu", "display_name": "Dup", "role": "admin", "department": "Office"},
        headers=ADMIN,
    )
    assert r.status_code == 409


def test_role_change_resets_permissions(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    sam = create_user(db_session, "sam@school.edu", role="observer")
    client = TestClient(app)

    r = client.patch(f"/users/{sam.id}", json={"role": "teacher"}, headers=ADMIN)
    assert r.status_code == 200
    assert r.json()["permissions"] == ["observations.read.own"]

    r = client.patch(f"/users/{sam.id}", json={"permissions": ["custom.read"]}, headers=ADMIN)
    assert r.json()["permissions"] == ["custom.read"]
    assert r.json()["role"] == "teacher"


def test_deactivated_user_is_locked_out(db_session):
    create_user(db_session, "admin@school.edu", role="admin")
    sam = create_user(db_session, "sam@school.edu", role="observer")
    client = TestClient(app)

    r = client.patch(f"/users/{sam.id}", json={"is_active": False}, headers=ADMIN)
    assert r.status_code == 200
    assert client.get("/me", headers=auth("sam@school.edu")).status_code == 401


def test_delete_user(db_session):
    admin = create_user(db_session, "admin@school.edu", role="admin")
    sam = create_user(db_session, "sam@school.edu", role="observer")
    client = TestClient(app)

    assert client.delete(f"/users/{admin.id}", headers=ADMIN).status_code == 400
    assert client.delete(f"/users/{sam.id}", headers=ADMIN).status_code == 204
    assert client.delete(f"/users/{sam.id}", headers=ADMIN).status_code == 404
    assert [u["email"] for u in client.get("/users", headers=ADMIN).json()] == ["admin@school.edu"]

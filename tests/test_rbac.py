from fastapi.testclient import TestClient

from observation_tracker.core.rbac import DEFAULT_PERMISSIONS, permissions_for_role
from observation_tracker.main import app
from tests.helpers import auth, create_user


def test_teacher_role_forbidden_on_admin_routes(db_session):
    create_user(db_session, "teacher@local.test", role="teacher")

    client = TestClient(app)
    r = client.get("/users", headers=auth("teacher@local.test"))
    assert r.status_code == 403
    assert "admin" in r.json()["detail"]


def test_any_of_roles_accepted(db_session):
    create_user(db_session, "coord@local.test", role="coordinator")
    create_user(db_session, "obs@local.test", role="observer")
    create_user(db_session, "teacher@local.test", role="teacher")

    client = TestClient(app)
    assert client.get("/teachers", headers=auth("coord@local.test")).status_code == 200
    assert client.get("/teachers", headers=auth("obs@local.test")).status_code == 200
    assert client.get("/teachers", headers=auth("teacher@local.test")).status_code == 403


def test_header_email_is_case_insensitive(db_session):
    create_user(db_session, "admin@local.test", role="admin")

    client = TestClient(app)
    r = client.get("/users", headers=auth("  Admin@Local.Test "))
    assert r.status_code == 200


def test_permissions_for_role_returns_copy():
    perms = permissions_for_role("observer")
    perms.append("users.write")
    assert "users.write" not in DEFAULT_PERMISSIONS["observer"]


def test_permissions_for_unknown_role_is_empty():
    assert permissions_for_role("janitor") == []

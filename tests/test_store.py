import pytest

from observation_tracker.core.errors import Conflict, NotFound
from observation_tracker.store.change_feed import ChangeFeed
from observation_tracker.store.document_store import DocumentStore
from tests.helpers import create_framework


def test_change_feed_delivers_to_collection_handlers_only():
    feed = ChangeFeed()
    seen = []
    feed.on_change("frameworks", lambda snap: seen.append(("f", snap)))
    feed.on_change("teachers", lambda snap: seen.append(("t", snap)))

    assert feed.publish("frameworks", [{"id": "x"}]) == 1
    assert seen == [("f", [{"id": "x"}])]


def test_change_feed_unsubscribe():
    feed = ChangeFeed()
    token = feed.on_change("frameworks", lambda snap: None)
    assert feed.has_listeners("frameworks")
    assert feed.unsubscribe(token) is True
    assert feed.unsubscribe(token) is False
    assert not feed.has_listeners("frameworks")


def test_failing_handler_does_not_block_others():
    feed = ChangeFeed()
    seen = []

    def boom(snapshot):
        raise RuntimeError("listener bug")

    feed.on_change("frameworks", boom)
    feed.on_change("frameworks", seen.append)

    assert feed.publish("frameworks", []) == 1
    assert seen == [[]]


def test_unknown_collection_is_rejected(db_session):
    store = DocumentStore(db_session)
    with pytest.raises(ValueError):
        store.list("evaluations")


def test_create_get_update_delete(db_session):
    store = DocumentStore(db_session)
    teacher_id = store.create(
        "teachers",
        {"name": "Ana Ruiz", "email": "ana@school.edu", "department": "Science", "subjects": ["Biology"]},
    )
    store.commit()

    doc = store.get("teachers", teacher_id)
    assert doc["name"] == "Ana Ruiz"
    assert doc["created_at"] is not None

    updated = store.update("teachers", teacher_id, {"grade": "10", "id": "ignored"})
    assert updated["grade"] == "10"
    assert updated["id"] == teacher_id

    store.delete("teachers", teacher_id)
    store.commit()
    assert store.get("teachers", teacher_id) is None


def test_update_and_delete_missing_raise_not_found(db_session):
    store = DocumentStore(db_session)
    with pytest.raises(NotFound):
        store.update("teachers", "missing", {"name": "x"})
    with pytest.raises(NotFound):
        store.delete("teachers", "missing")


def test_duplicate_id_is_conflict(db_session):
    create_framework(db_session, framework_id="dup")
    store = DocumentStore(db_session)
    with pytest.raises(Conflict):
        store.create(
            "frameworks",
            {"id": "dup", "name": "Again", "description": "", "last_modified": "2025-01-01"},
        )


def test_list_where_order_and_paging(db_session):
    create_framework(db_session, framework_id="b", name="Beta", status="draft")
    create_framework(db_session, framework_id="a", name="Alpha")
    create_framework(db_session, framework_id="c", name="Gamma")
    store = DocumentStore(db_session)

    assert [d["name"] for d in store.list("frameworks")] == ["Alpha", "Beta", "Gamma"]
    assert [d["id"] for d in store.list("frameworks", where={"status": "active"})] == ["a", "c"]
    assert [d["id"] for d in store.list("frameworks", limit=1, offset=1)] == ["b"]
    assert store.count("frameworks", where={"status": "draft"}) == 1


def test_subscribe_delivers_now_and_after_commit(store):
    snapshots = []
    unsubscribe = store.subscribe("teachers", lambda docs: snapshots.append([d["name"] for d in docs]))
    assert snapshots == [[]]

    store.create("teachers", {"name": "Ana Ruiz", "email": "ana@school.edu", "department": "Science", "subjects": []})
    assert len(snapshots) == 1  # nothing before commit

    store.commit()
    assert snapshots[-1] == ["Ana Ruiz"]

    assert unsubscribe() is True
    store.create("teachers", {"name": "Ben Ode", "email": "ben@school.edu", "department": "Art", "subjects": []})
    store.commit()
    assert len(snapshots) == 2


def test_subscribe_with_filter(store):
    snapshots = []
    store.subscribe("teachers", snapshots.append, where={"department": "Art"})
    store.create("teachers", {"name": "Ana Ruiz", "email": "ana@school.edu", "department": "Science", "subjects": []})
    store.create("teachers", {"name": "Ben Ode", "email": "ben@school.edu", "department": "Art", "subjects": []})
    store.commit()
    assert [d["name"] for d in snapshots[-1]] == ["Ben Ode"]


def test_subscribe_without_feed_fails(db_session):
    with pytest.raises(RuntimeError):
        DocumentStore(db_session).subscribe("teachers", lambda docs: None)

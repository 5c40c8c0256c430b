import datetime as dt

import pytest

from observation_tracker.core.errors import NotFound, ValidationFailure
from observation_tracker.schemas.observation import ObservationCreate, ObservationUpdate
from observation_tracker.services.observation_recorder import ObservationRecorder


@pytest.fixture()
def recorder(store):
    return ObservationRecorder(store)


def _response(qid, value):
    return {"question_id": qid, "value": value, "timestamp": "2025-08-20T09:10:00"}


def _payload(**overrides):
    data = {
        "teacher_id": "t1",
        "teacher_name": "Ana Ruiz",
        "observer_id": "u1",
        "observer_name": "Sam Lee",
        "framework_id": "crp-in-action",
        "date": dt.date(2025, 8, 20),
        "start_time": "09:00",
        "duration": 45,
        "status": "in-progress",
        "responses": {
            "lookfor1": _response("lookfor1", "4"),
            "lookfor2": _response("lookfor2", "2"),
            "lookfor3": _response("lookfor3", "not-observed"),
            "lookfor4": _response("lookfor4", "3"),
        },
        "class_info": {"name": "Algebra I", "subject": "Math", "room": "204", "period": "2", "grade": "9"},
    }
    data.update(overrides)
    return ObservationCreate(**data)


def test_create_computes_scores(recorder):
    observation = recorder.create(_payload())
    assert observation.crp_evidence_count == 67
    assert observation.total_look_fors == 4
    assert observation.date == dt.date(2025, 8, 20)
    assert observation.class_info.room == "204"


def test_create_collects_all_errors(recorder):
    with pytest.raises(ValidationFailure) as exc:
        recorder.create(_payload(teacher_id="", framework_id="", duration=2))
    fields = {e["field"] for e in exc.value.errors}
    assert fields == {"teacher_id", "framework_id", "duration"}


def test_update_rescores_when_responses_change(recorder):
    observation = recorder.create(_payload())
    updated = recorder.update(
        observation.id,
        ObservationUpdate(responses={"lookfor1": _response("lookfor1", "1")}),
    )
    assert updated.crp_evidence_count == 0
    assert updated.total_look_fors == 1


def test_update_keeps_scores_for_other_fields(recorder):
    observation = recorder.create(_payload())
    updated = recorder.update(observation.id, ObservationUpdate(overall_comment="Strong closure", status="completed"))
    assert updated.overall_comment == "Strong closure"
    assert updated.status == "completed"
    assert updated.crp_evidence_count == 67


def test_update_missing_raises(recorder):
    with pytest.raises(NotFound):
        recorder.update("missing", ObservationUpdate(status="completed"))


def test_status_may_move_backwards(recorder):
    observation = recorder.create(_payload(status="completed"))
    assert recorder.update(observation.id, ObservationUpdate(status="draft")).status == "draft"


def test_record_response_upserts_and_rescores(recorder):
    observation = recorder.create(_payload())
    updated = recorder.record_response(observation.id, "lookfor2", "4", comment="Fixed on second look")
    assert updated.responses["lookfor2"].value == "4"
    assert updated.comments["lookfor2"] == "Fixed on second look"
    assert updated.crp_evidence_count == 100

    updated = recorder.record_response(observation.id, "lookfor5", "1")
    assert updated.total_look_fors == 5
    assert updated.crp_evidence_count == 75

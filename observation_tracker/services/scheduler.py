from __future__ import annotations

import logging
from datetime import date

from observation_tracker.core.errors import NotFound, ValidationFailure
from observation_tracker.schemas.schedule import ScheduledObservation, ScheduledObservationCreate
from observation_tracker.store.document_store import DocumentStore

logger = logging.getLogger(__name__)

COLLECTION = "scheduled_observations"

# status -> statuses it may move to
TRANSITIONS = {
    "scheduled": {"confirmed", "cancelled", "completed"},
    "confirmed": {"cancelled", "completed"},
    "cancelled": set(),
    "completed": set(),
}


class Scheduler:
    """
    Planned visits. They live in their own collection; completing a visit
    only records the observation id, it never touches the observation.
    """

    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self, scheduled_id: str) -> ScheduledObservation:
        doc = self.store.get(COLLECTION, scheduled_id)
        if doc is None:
            raise NotFound("scheduled observation", scheduled_id)
        return ScheduledObservation.model_validate(doc)

    def schedule(self, payload: ScheduledObservationCreate, observer_id: str) -> ScheduledObservation:
        doc = {
            "teacher_id": payload.teacher_id,
            "observer_id": payload.observer_id or observer_id,
            "framework_id": payload.framework_id,
            "scheduled_date": payload.scheduled_date,
            "scheduled_time": payload.scheduled_time,
            "duration": payload.duration,
            "notes": payload.notes,
            "status": "scheduled",
            "reminders_sent": False,
        }
        scheduled_id = self.store.create(COLLECTION, doc)
        return self.get(scheduled_id)

    def list(self, observer_id: str | None = None, on_date: date | None = None) -> list[ScheduledObservation]:
        where = {}
        if observer_id:
            where["observer_id"] = observer_id
        if on_date:
            where["scheduled_date"] = on_date
        docs = self.store.list(COLLECTION, where=where or None)
        return [ScheduledObservation.model_validate(d) for d in docs]

    def _move(self, scheduled_id: str, status: str, extra: dict | None = None) -> ScheduledObservation:
        current = self.get(scheduled_id)
        if status not in TRANSITIONS[current.status]:
            raise ValidationFailure(
                [{"field": "status", "message": f"Cannot change a {current.status} visit to {status}"}],
                message="Invalid schedule transition",
            )
        self.store.update(COLLECTION, scheduled_id, {"status": status, **(extra or {})})
        logger.info("Scheduled observation %s: %s -> %s", scheduled_id, current.status, status)
        return self.get(scheduled_id)

    def confirm(self, scheduled_id: str) -> ScheduledObservation:
        return self._move(scheduled_id, "confirmed")

    def cancel(self, scheduled_id: str) -> ScheduledObservation:
        return self._move(scheduled_id, "cancelled")

    def complete(self, scheduled_id: str, observation_id: str | None = None) -> ScheduledObservation:
        return self._move(scheduled_id, "completed", {"observation_id": observation_id})

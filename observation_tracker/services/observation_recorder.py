from __future__ import annotations

import logging
from datetime import datetime

from observation_tracker.core.errors import NotFound, ValidationFailure
from observation_tracker.core.scoring import calculate_crp_evidence, count_look_fors
from observation_tracker.core.validation import validate_observation
from observation_tracker.schemas.observation import (
    Observation,
    ObservationCreate,
    ObservationUpdate,
)
from observation_tracker.store.document_store import DocumentStore

logger = logging.getLogger(__name__)

COLLECTION = "observations"

# stored as native columns; everything else nested goes through JSON
_NATIVE_KEYS = {"date"}


def _to_document(payload: dict, source) -> dict:
    json_doc = source.model_dump(mode="json")
    return {k: (payload[k] if k in _NATIVE_KEYS else json_doc[k]) for k in payload}


def _with_scores(doc: dict) -> dict:
    responses = doc.get("responses") or {}
    doc["crp_evidence_count"] = calculate_crp_evidence(responses)
    doc["total_look_fors"] = count_look_fors(responses)
    return doc


class ObservationRecorder:
    """Writes observations, keeping the derived score fields in step with responses."""

    def __init__(self, store: DocumentStore):
        self.store = store

    def get(self, observation_id: str) -> Observation:
        doc = self.store.get(COLLECTION, observation_id)
        if doc is None:
            raise NotFound("observation", observation_id)
        return Observation.model_validate(doc)

    def create(self, payload: ObservationCreate) -> Observation:
        result = validate_observation(payload)
        if not result.is_valid:
            raise ValidationFailure(result.as_dicts(), message="Invalid observation")

        doc = _with_scores(_to_document(payload.model_dump(), payload))
        observation_id = self.store.create(COLLECTION, doc)
        logger.info(
            "Observation %s recorded for teacher %s (crp=%s, look-fors=%s)",
            observation_id,
            payload.teacher_id,
            doc["crp_evidence_count"],
            doc["total_look_fors"],
        )
        return self.get(observation_id)

    def update(self, observation_id: str, payload: ObservationUpdate) -> Observation:
        current = self.get(observation_id)
        changes = payload.model_dump(exclude_unset=True)
        changes = {k: v for k, v in changes.items() if v is not None}

        merged = {**current.model_dump(), **changes}
        result = validate_observation(merged)
        if not result.is_valid:
            raise ValidationFailure(result.as_dicts(), message="Invalid observation")

        partial = _to_document(changes, payload)
        if "responses" in partial:
            _with_scores(partial)
        self.store.update(COLLECTION, observation_id, partial)
        return self.get(observation_id)

    def record_response(
        self,
        observation_id: str,
        question_id: str,
        value: str | list[str] | float | int,
        comment: str | None = None,
    ) -> Observation:
        """Upsert one answer (and optionally its comment), then rescore."""
        current = self.get(observation_id)

        responses = current.model_dump(mode="json")["responses"]
        responses[question_id] = {
            "question_id": question_id,
            "value": value,
            "timestamp": datetime.utcnow().isoformat(),
        }
        partial = _with_scores({"responses": responses})

        if comment is not None:
            partial["comments"] = {**current.comments, question_id: comment}

        self.store.update(COLLECTION, observation_id, partial)
        return self.get(observation_id)

import logging
from typing import Any

from pydantic import BaseModel
from sqlalchemy.orm import Session

from observation_tracker.models.audit_event import AuditEvent
from observation_tracker.models.user import User

logger = logging.getLogger(__name__)


def updated_fields(payload: BaseModel) -> list[str]:
    """Names of the fields a PATCH body actually set."""
    return sorted(payload.model_dump(exclude_unset=True))


def log_event(
    *,
    db: Session,
    actor: User | None,
    action: str,
    entity_type: str,
    entity_id: str,
    metadata: dict[str, Any] | None = None,
) -> AuditEvent:
    """Stage an audit row; it is written with the caller's commit."""
    event = AuditEvent(
        actor_user_id=actor.id if actor else None,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id),
        event_metadata=metadata,
    )
    db.add(event)
    logger.debug("%s %s/%s by %s", action, entity_type, entity_id, actor.email if actor else "system")
    return event

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from observation_tracker.core.rbac import require_roles
from observation_tracker.db.session import get_db
from observation_tracker.models.audit_event import AuditEvent
from observation_tracker.schemas.audit import AuditEventOut

router = APIRouter(prefix="/audit", tags=["audit"])

FILTERS = ("entity_type", "entity_id", "action", "actor_user_id")


@router.get("", response_model=list[AuditEventOut])
def list_audit_events(
    entity_type: str | None = Query(default=None),
    entity_id: str | None = Query(default=None),
    action: str | None = Query(default=None),
    actor_user_id: str | None = Query(default=None),
    limit: int = Query(default=50, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: Session = Depends(get_db),
    _=Depends(require_roles("admin")),
):
    """Newest first. Every filter is an exact match."""
    values = dict(entity_type=entity_type, entity_id=entity_id, action=action, actor_user_id=actor_user_id)

    stmt = select(AuditEvent)
    for name in FILTERS:
        if values[name]:
            stmt = stmt.where(getattr(AuditEvent, name) == values[name])

    stmt = stmt.order_by(AuditEvent.created_at.desc(), AuditEvent.id).offset(offset).limit(limit)
    return [AuditEventOut.model_validate(row) for row in db.scalars(stmt)]

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from observation_tracker.api.deps import get_store
from observation_tracker.core.audit import log_event
from observation_tracker.core.errors import NotFound, ValidationFailure
from observation_tracker.core.rbac import permissions_for_role, require_roles
from observation_tracker.core.security import normalize_email
from observation_tracker.core.validation import validate_user
from observation_tracker.db.session import get_db
from observation_tracker.models.user import User
from observation_tracker.schemas.user import UserCreate, UserOut, UserUpdate
from observation_tracker.store.document_store import DocumentStore

router = APIRouter(prefix="/users", tags=["users"])

COLLECTION = "users"


def _get_user_or_404(store: DocumentStore, user_id: str) -> dict:
    doc = store.get(COLLECTION, user_id)
    if doc is None:
        raise NotFound("user", user_id)
    return doc


@router.get("", response_model=list[UserOut])
def list_users(
    store: DocumentStore = Depends(get_store),
    _: User = Depends(require_roles("admin")),
):
    return [UserOut.model_validate(d) for d in store.list(COLLECTION)]


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_store),
    current_user: User = Depends(require_roles("admin")),
):
    result = validate_user(payload)
    if not result.is_valid:
        raise ValidationFailure(result.as_dicts(), message="Invalid user")

    doc = payload.model_dump()
    doc["email"] = normalize_email(payload.email)
    if payload.permissions is None:
        doc["permissions"] = permissions_for_role(payload.role)
    doc["is_active"] = True

    # duplicate email -> Conflict from the unique index
    user_id = store.create(COLLECTION, doc)

    log_event(
        db=db,
        actor=current_user,
        action="USER_CREATED",
        entity_type="user",
        entity_id=user_id,
        metadata={"email": doc["email"], "role": payload.role},
    )

    store.commit()
    return UserOut.model_validate(store.get(COLLECTION, user_id))


@router.patch("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_store),
    current_user: User = Depends(require_roles("admin")),
):
    current = _get_user_or_404(store, user_id)
    partial = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}

    result = validate_user({**current, **partial})
    if not result.is_valid:
        raise ValidationFailure(result.as_dicts(), message="Invalid user")

    # a role change without explicit permissions resets them to the role's defaults
    if "role" in partial and "permissions" not in partial:
        partial["permissions"] = permissions_for_role(partial["role"])

    doc = store.update(COLLECTION, user_id, partial)

    log_event(
        db=db,
        actor=current_user,
        action="USER_UPDATED",
        entity_type="user",
        entity_id=user_id,
        metadata={"fields": sorted(partial)},
    )

    store.commit()
    return UserOut.model_validate(doc)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    store: DocumentStore = Depends(get_store),
    current_user: User = Depends(require_roles("admin")),
):
    if user_id == current_user.id:
        raise ValidationFailure([{"field": "id", "message": "You cannot delete your own account"}])

    store.delete(COLLECTION, user_id)

    log_event(
        db=db,
        actor=current_user,
        action="USER_DELETED",
        entity_type="user",
        entity_id=user_id,
    )

    store.commit()

import logging

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from observation_tracker.db.session import get_db
from observation_tracker.models.user import User

logger = logging.getLogger(__name__)

AUTH_HEADER = "X-User-Email"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.scalars(select(User).where(User.email == normalize_email(email))).one_or_none()


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def get_current_user(
    x_user_email: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> User:
    """
    DEV AUTH: the X-User-Email header names the signed-in user; role and
    permissions come from the matching users row.
    Example: X-User-Email: coordinator@school.edu
    """
    if not x_user_email or not x_user_email.strip():
        raise _unauthorized(f"Missing {AUTH_HEADER} header (dev auth)")

    user = find_user_by_email(db, x_user_email)
    if user is None:
        logger.info("Rejected unknown user %s", normalize_email(x_user_email))
        raise _unauthorized("Unknown user")
    if not user.is_active:
        raise _unauthorized("User is inactive")
    return user

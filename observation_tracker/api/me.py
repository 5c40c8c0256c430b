from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from observation_tracker.core.security import get_current_user
from observation_tracker.db.session import get_db
from observation_tracker.models.user import User

router = APIRouter(tags=["auth"])


@router.get("/me")
def me(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get the signed-in principal; also stamps last_login"""
    current_user.last_login = datetime.utcnow()
    db.commit()
    return {
        "id": str(current_user.id),
        "email": current_user.email,
        "display_name": current_user.display_name,
        "role": current_user.role,
        "department": current_user.department,
        "permissions": list(current_user.permissions or []),
        "last_login": current_user.last_login,
    }

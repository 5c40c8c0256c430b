from fastapi import Depends, HTTPException, status

from observation_tracker.core.security import get_current_user
from observation_tracker.models.user import User

ADMIN = "admin"
COORDINATOR = "coordinator"
OBSERVER = "observer"
TEACHER = "teacher"

# roles that see every observation; the others only see their own
FULL_VIEW_ROLES = {ADMIN, COORDINATOR}

DEFAULT_PERMISSIONS = {
    ADMIN: [
        "frameworks.read",
        "frameworks.write",
        "observations.read",
        "observations.write",
        "users.read",
        "users.write",
        "analytics.read",
        "data.import",
        "data.export",
    ],
    COORDINATOR: [
        "frameworks.read",
        "frameworks.write",
        "observations.read",
        "analytics.read",
        "data.export",
    ],
    OBSERVER: [
        "frameworks.read",
        "observations.write",
        "observations.read.own",
        "teachers.read",
    ],
    TEACHER: [
        "observations.read.own",
    ],
}


def permissions_for_role(role: str) -> list[str]:
    return list(DEFAULT_PERMISSIONS.get(role, []))


def require_roles(*required: str):
    """
    Usage:
      Depends(require_roles("admin"))
      Depends(require_roles("admin", "coordinator"))  # any-of
    """
    required_set = set(required)

    def _dep(user: User = Depends(get_current_user)) -> User:
        if user.role not in required_set:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Forbidden. Requires one of: {sorted(required_set)}",
            )
        return user

    return _dep

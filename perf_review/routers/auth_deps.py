"""
Identity and role dependencies.
Identity is supplied by the caller in the X-User-ID header; there is no authentication layer.
"""
import logging
from typing import Callable, List, Optional

from fastapi import Depends, Header, HTTPException, status

from perf_review.core.config import settings
from perf_review.core.exceptions import AccessDeniedError, AuthenticationError
from perf_review.database import get_stores
from perf_review.models.user import User, UserRole
from perf_review.store import ReviewStores

logger = logging.getLogger(__name__)


async def get_current_user(
    x_user_id: Optional[int] = Header(default=None, alias=settings.user_id_header),
    stores: ReviewStores = Depends(get_stores),
) -> User:
    if x_user_id is None:
        raise AuthenticationError(f"Missing {settings.user_id_header} header")
    user = await stores.users.find(x_user_id)
    if user is None:
        logger.warning(f"Identity check failed: user {x_user_id} not found")
        raise AuthenticationError("User not found")
    return user


def require_role(allowed_roles: List[UserRole]) -> Callable:
    """
    Dependency factory that checks if the user has one of the allowed roles.

    Usage:
        @router.get("/team")
        async def team(user: User = Depends(require_role([UserRole.MANAGER]))):
            ...
    """
    async def role_checker(current_user: User = Depends(get_current_user)):
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {[r.value for r in allowed_roles]}"
            )
        return current_user
    return role_checker


def require_manager():
    return require_role([UserRole.MANAGER, UserRole.ADMIN])


def require_admin():
    return require_role([UserRole.ADMIN])


def ensure_session_access(session, user: User) -> None:
    """Admins see every session; employees and managers only the ones they take part in."""
    if user.role == UserRole.ADMIN:
        return
    if user.is_employee and session.employee_id == user.id:
        return
    if user.is_manager and session.manager_id == user.id:
        return
    raise AccessDeniedError("You do not take part in this review session")

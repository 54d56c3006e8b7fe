"""
Permission engine wiring and FastAPI dependencies for route protection.
"""
from functools import lru_cache
from fastapi import Depends, HTTPException, status

from app.core import config
from app.features.permissions.engine import PermissionEngine
from app.features.permissions.grants import load_role_grants
from app.features.users.dependencies import get_current_session
from app.features.users.schemas import Session
from app.utils import get_logger


log = get_logger(__name__)


@lru_cache(maxsize=1)
def get_permission_engine() -> PermissionEngine:
    """
    Process-wide permission engine built from the configured grant table.

    Raises:
        GrantConfigurationError: ROLE_GRANTS_FILE is set but invalid
    """
    engine = PermissionEngine(load_role_grants(config.ROLE_GRANTS_FILE))
    log.info("Permission engine ready")
    return engine


def require_permission(permission: str):
    """
    FastAPI dependency to require a specific permission.

    Usage:
        @router.post("/deadlines/evaluate")
        async def evaluate(
            session: Session = Depends(require_permission("manage:projects"))
        ):
            # Session role holds manage:projects
            pass

    Returns:
        Dependency function that returns the current session if it has permission

    Raises:
        HTTPException: 403 if the session role doesn't have permission
    """
    async def permission_dependency(
        session: Session = Depends(get_current_session),
        engine: PermissionEngine = Depends(get_permission_engine),
    ) -> Session:
        if not engine.has_permission(session.role, permission):
            log.debug(f"User {session.user_id} ({session.role}) denied permission {permission}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Permission denied: {permission}"
            )
        return session

    return permission_dependency

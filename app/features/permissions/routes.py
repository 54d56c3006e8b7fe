"""
Permission API routes.

Read-only views over the static grant table plus an explicit check endpoint.
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status

from app.features.permissions.dependencies import get_permission_engine
from app.features.permissions.engine import PermissionEngine
from app.features.permissions.models import Role
from app.features.permissions.schemas import (
    RoleResponse,
    SessionPermissionsResponse,
    PermissionCheckRequest,
    PermissionCheckResponse,
)
from app.features.users.dependencies import get_current_session
from app.features.users.schemas import Session


router = APIRouter()


@router.get("/roles", response_model=List[RoleResponse])
async def list_roles(
    engine: PermissionEngine = Depends(get_permission_engine),
    session: Session = Depends(get_current_session)
):
    """List every role with its grants."""
    return [
        RoleResponse(role=role.value, display_name=role.display_name, permissions=list(engine.grants_for(role)))
        for role in Role
    ]


@router.get("/roles/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: str,
    engine: PermissionEngine = Depends(get_permission_engine),
    session: Session = Depends(get_current_session)
):
    """Get a single role by id."""
    role = Role.parse(role_id)
    if role is None:
        raise HTTPException(status_code=404, detail="Role not found")

    return RoleResponse(role=role.value, display_name=role.display_name, permissions=list(engine.grants_for(role)))


@router.get("/me", response_model=SessionPermissionsResponse)
async def get_my_permissions(
    engine: PermissionEngine = Depends(get_permission_engine),
    session: Session = Depends(get_current_session)
):
    """Get the session's role and its grants."""
    role = Role.parse(session.role)
    return SessionPermissionsResponse(
        user_id=session.user_id,
        role=session.role,
        display_name=role.display_name if role else None,
        permissions=list(engine.grants_for(session.role)),
    )


@router.post("/check", response_model=PermissionCheckResponse, status_code=status.HTTP_200_OK)
async def check_permission(
    check: PermissionCheckRequest,
    engine: PermissionEngine = Depends(get_permission_engine),
    session: Session = Depends(get_current_session)
):
    """Check a permission for the session role, or for an explicitly named role."""
    role = check.role or session.role
    matched = engine.resolve(role, check.permission)

    if matched is None:
        reason = f"Role {role} does not hold {check.permission}"
    elif matched == check.permission:
        reason = f"Granted directly by {matched}"
    else:
        reason = f"Granted by wildcard {matched}"

    return PermissionCheckResponse(
        role=role,
        permission=check.permission,
        has_permission=matched is not None,
        reason=reason,
    )

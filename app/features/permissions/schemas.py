"""
Pydantic schemas for permission checks and role listings.
"""
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class RoleResponse(BaseModel):
    """A role with its display name and ordered grants."""
    role: str
    display_name: str
    permissions: List[str] = []


class SessionPermissionsResponse(BaseModel):
    """The caller's active role and what it grants."""
    user_id: str
    role: str
    display_name: Optional[str] = None
    permissions: List[str] = []


class PermissionCheckRequest(BaseModel):
    """Schema for checking whether a role holds a permission."""
    permission: str = Field(..., min_length=1, max_length=200, description="Permission string, e.g. 'manage:projects'")
    role: Optional[str] = Field(None, description="Role to check (uses the session role if not provided)")

    @field_validator('permission')
    @classmethod
    def permission_stripped(cls, v: str) -> str:
        return v.strip()


class PermissionCheckResponse(BaseModel):
    """Schema for permission check response."""
    role: str
    permission: str
    has_permission: bool
    reason: Optional[str] = None

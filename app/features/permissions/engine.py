"""
Permission resolution against the static role grant table.

Resolution order, first match wins:
1. Exact grant (e.g. "manage:forms")
2. Action wildcard "<action>:all" for the permission's action prefix, so
   "view:all" covers "view:dashboards" and "view:reports:executive"
3. Deny

A permission without a ':' separator is only granted by an exact grant.
Unknown roles resolve to an empty grant set.
"""
from typing import Dict, FrozenSet, Optional, Tuple, Union

from app.features.permissions.grants import RoleGrants, load_role_grants
from app.features.permissions.models import Role
from app.utils import get_logger


log = get_logger(__name__)

WILDCARD_RESOURCE = "all"


class PermissionEngine:
    """Read-only role -> capability checker, safe for concurrent use."""

    def __init__(self, grants: Optional[RoleGrants] = None):
        grants = grants if grants is not None else load_role_grants()
        self._ordered: Dict[str, Tuple[str, ...]] = {self._key(role): tuple(perms) for role, perms in grants.items()}
        self._lookup: Dict[str, FrozenSet[str]] = {role: frozenset(perms) for role, perms in self._ordered.items()}

    @staticmethod
    def _key(role: Union[Role, str]) -> str:
        return role.value if isinstance(role, Role) else role

    def grants_for(self, role: Union[Role, str]) -> Tuple[str, ...]:
        """Ordered grant list for a role; empty for unknown roles."""
        return self._ordered.get(self._key(role), ())

    def resolve(self, role: Union[Role, str], permission: str) -> Optional[str]:
        """
        Return the grant that authorises `permission` for `role`, or None.

        Args:
            role: Role enum member or raw role id
            permission: Permission string such as "manage:projects"
        """
        granted = self._lookup.get(self._key(role))
        if granted is None:
            log.debug(f"Unknown role {role!r} - denied permission {permission}")
            return None

        if permission in granted:
            return permission

        action, sep, _resource = permission.partition(":")
        if sep:
            wildcard = f"{action}:{WILDCARD_RESOURCE}"
            if wildcard in granted:
                return wildcard

        return None

    def has_permission(self, role: Union[Role, str], permission: str) -> bool:
        return self.resolve(role, permission) is not None

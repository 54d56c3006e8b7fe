"""
Role grant table: the static role -> permission strings configuration.

The table is loaded once at startup, either from the built-in defaults or from
a JSON file named by ROLE_GRANTS_FILE, and is read-only afterwards.

File format:
    {
        "executive": ["view:all", "view:dashboards"],
        "bcba": ["view:clients", "manage:treatment-plans"]
    }
"""
import json
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from app.features.permissions.models import Role
from app.utils import get_logger


log = get_logger(__name__)

RoleGrants = Mapping[Role, Tuple[str, ...]]


class GrantConfigurationError(Exception):
    """Raised when a grant file cannot be turned into a valid grant table."""


DEFAULT_ROLE_GRANTS: Dict[Role, Tuple[str, ...]] = {
    Role.CLINICAL_DIRECTOR: (
        "view:all",
        "manage:programs",
        "manage:staff",
        "view:reports",
        "manage:authorizations",
        "manage:projects",
    ),
    Role.BCBA: (
        "view:clients",
        "manage:treatment-plans",
        "manage:authorizations",
        "view:reports:limited",
    ),
    Role.BILLING_SPECIALIST: (
        "view:authorizations",
        "manage:authorizations",
        "view:reports:billing",
        "manage:claims",
    ),
    Role.ADMINISTRATOR: (
        "manage:departments",
        "manage:forms",
        "manage:tickets",
        "manage:documentation",
        "view:reports:admin",
    ),
    Role.PROJECT_MANAGER: ("manage:projects", "manage:tasks", "view:reports:projects"),
    Role.IT_MANAGER: ("manage:integrations", "manage:feature-flags", "manage:system-settings"),
    Role.CLINICAL_STAFF: ("view:clients:assigned", "view:tasks:assigned", "manage:tasks:assigned"),
    Role.EXECUTIVE: ("view:all", "view:reports:executive", "view:dashboards"),
}


def build_role_grants(raw: Mapping[Any, Any]) -> RoleGrants:
    """
    Validate a {role-id: [permission, ...]} mapping and freeze it.

    Every enumerated role ends up with an entry; roles the mapping leaves out
    get an empty grant list.

    Raises:
        GrantConfigurationError: unknown role ids or non-string permissions
    """
    grants: Dict[Role, Tuple[str, ...]] = {}

    for key, permissions in raw.items():
        role = key if isinstance(key, Role) else Role.parse(str(key))
        if role is None:
            raise GrantConfigurationError(f"Unknown role in grant table: {key!r}")
        if isinstance(permissions, str) or not isinstance(permissions, (list, tuple)):
            raise GrantConfigurationError(f"Grants for {role.value} must be a list of strings")
        if not all(isinstance(permission, str) for permission in permissions):
            raise GrantConfigurationError(f"Grants for {role.value} must be a list of strings")
        grants[role] = tuple(permissions)

    for role in Role:
        if role not in grants:
            log.warning("Role %s has no grant entry, defaulting to no permissions", role.value)
            grants[role] = ()

    return MappingProxyType(grants)


def load_role_grants(path: Optional[str] = None) -> RoleGrants:
    """
    Load the grant table.

    Args:
        path: JSON grant file; the built-in defaults are used when None

    Raises:
        GrantConfigurationError: the file is missing, not JSON, or invalid
    """
    if path is None:
        return build_role_grants(DEFAULT_ROLE_GRANTS)

    log.info("Loading role grants from %s", path)
    try:
        with open(path, encoding="utf-8") as fh:
            raw = json.load(fh)
    except OSError as e:
        raise GrantConfigurationError(f"Cannot read grant file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise GrantConfigurationError(f"Grant file {path} is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise GrantConfigurationError(f"Grant file {path} must contain a JSON object")

    return build_role_grants(raw)

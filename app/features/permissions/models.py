"""
Role enumeration for role-based access control.

Roles are a closed set; a session holds exactly one of them for its lifetime.
"""
from enum import Enum
from typing import Dict


class Role(str, Enum):
    """Role identifiers as they appear in session tokens and grant files."""
    CLINICAL_DIRECTOR = "clinical-director"
    BCBA = "bcba"
    BILLING_SPECIALIST = "billing-specialist"
    ADMINISTRATOR = "administrator"
    PROJECT_MANAGER = "project-manager"
    IT_MANAGER = "it-manager"
    CLINICAL_STAFF = "clinical-staff"
    EXECUTIVE = "executive"

    @property
    def display_name(self) -> str:
        return ROLE_DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, value: str) -> "Role | None":
        """Return the matching role, or None for ids outside the enumeration."""
        try:
            return cls(value)
        except ValueError:
            return None


ROLE_DISPLAY_NAMES: Dict[Role, str] = {
    Role.CLINICAL_DIRECTOR: "Clinical Director",
    Role.BCBA: "BCBA",
    Role.BILLING_SPECIALIST: "Billing Specialist",
    Role.ADMINISTRATOR: "Administrator",
    Role.PROJECT_MANAGER: "Project Manager",
    Role.IT_MANAGER: "IT Manager",
    Role.CLINICAL_STAFF: "Clinical Staff",
    Role.EXECUTIVE: "Executive",
}

"""
Notification domain types.

TrackableEntity is supplied by the caller on every evaluation; NotificationEvent
is produced by the deadline engine and never mutated afterwards.
"""
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from ulid import ULID


def generate_ulid() -> str:
    """Generate a new ULID string."""
    return str(ULID())


class EntityStatus(str, Enum):
    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    ON_HOLD = "On Hold"


class Severity(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class EmailPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return {EmailPriority.LOW: 1, EmailPriority.MEDIUM: 2, EmailPriority.HIGH: 3}[self]

    @classmethod
    def for_severity(cls, severity: Severity) -> "EmailPriority":
        if severity == Severity.ERROR:
            return cls.HIGH
        if severity == Severity.WARNING:
            return cls.MEDIUM
        return cls.LOW


class NotificationCategory(str, Enum):
    """Routing hint handed to the sink alongside each event."""
    DEADLINE = "deadline"
    TICKET = "ticket"
    FORM = "form"
    AUTHORIZATION = "authorization"
    SYSTEM = "system"
    ADMIN = "admin"


def severity_for(days_remaining: int) -> Severity:
    """Alert severity for a number of days left before the due date."""
    if days_remaining <= 1:
        return Severity.ERROR
    if days_remaining <= 3:
        return Severity.WARNING
    return Severity.INFO


class TrackableEntity(BaseModel):
    """A project or task with a due date, as assembled by the caller."""
    id: str = Field(..., min_length=1)
    title: str
    due_date: Optional[str] = Field(None, description="ISO 'YYYY-MM-DD' or compact 'D-Mon' (e.g. '6-May')")
    status: EntityStatus = EntityStatus.NOT_STARTED
    assigned_to: Optional[str] = None


class NotificationEvent(BaseModel):
    """One deadline alert for one (entity, days remaining) pair."""
    event_id: str = Field(default_factory=generate_ulid)
    entity_id: str
    title: str
    due_date_raw: str
    days_remaining: int
    severity: Severity
    email_priority: EmailPriority
    message: str
    action_url: str
    assigned_to: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(frozen=True)

    @classmethod
    def for_entity(cls, entity: TrackableEntity, days_remaining: int, created_at: datetime) -> "NotificationEvent":
        severity = severity_for(days_remaining)
        day_word = "day" if days_remaining == 1 else "days"
        return cls(
            entity_id=entity.id,
            title=entity.title,
            due_date_raw=entity.due_date or "",
            days_remaining=days_remaining,
            severity=severity,
            email_priority=EmailPriority.for_severity(severity),
            message=(
                f'Project "{entity.title}" is due in {days_remaining} {day_word}. '
                f"Due date: {entity.due_date}"
            ),
            action_url=f"/project-management?project={entity.id}",
            assigned_to=entity.assigned_to,
            created_at=created_at,
        )


class SkippedEntity(BaseModel):
    """An entity left out of an evaluation pass, with the reason."""
    entity_id: str
    reason: str


class EvaluationReport(BaseModel):
    """Result of one evaluation pass."""
    events: List[NotificationEvent] = []
    skipped: List[SkippedEntity] = []


class EmailPreferences(BaseModel):
    """Per-user email opt-ins by notification category."""
    user_id: str
    email: str
    ticket_status_changes: bool = True
    form_submissions: bool = True
    authorization_alerts: bool = True
    deadline_alerts: bool = True
    system_notifications: bool = True
    admin_notifications: bool = False
    min_priority: EmailPriority = EmailPriority.LOW

    def allows(self, category: NotificationCategory) -> bool:
        return {
            NotificationCategory.TICKET: self.ticket_status_changes,
            NotificationCategory.FORM: self.form_submissions,
            NotificationCategory.AUTHORIZATION: self.authorization_alerts,
            NotificationCategory.DEADLINE: self.deadline_alerts,
            NotificationCategory.SYSTEM: self.system_notifications,
            NotificationCategory.ADMIN: self.admin_notifications,
        }.get(category, False)


class Notification(BaseModel):
    """An entry in the in-app notification feed."""
    id: str = Field(default_factory=generate_ulid)
    title: str
    message: str
    type: Severity = Severity.INFO
    source: NotificationCategory
    timestamp: datetime = Field(default_factory=datetime.now)
    read: bool = False
    action_url: Optional[str] = None
    action_label: Optional[str] = None
    metadata: Dict[str, Any] = {}

"""
Pydantic schemas for the notification API.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field

from app.features.notifications.models import EmailPriority, TrackableEntity


class EvaluateDeadlinesRequest(BaseModel):
    """Entities to check, optionally against a fixed evaluation time."""
    entities: List[TrackableEntity] = Field(default_factory=list)
    now: Optional[datetime] = Field(None, description="Evaluation time (server clock if not provided)")


class UnreadCountResponse(BaseModel):
    unread: int


class EmailPreferencesUpdate(BaseModel):
    """Schema for replacing the caller's email preferences."""
    email: EmailStr
    ticket_status_changes: bool = True
    form_submissions: bool = True
    authorization_alerts: bool = True
    deadline_alerts: bool = True
    system_notifications: bool = True
    admin_notifications: bool = False
    min_priority: EmailPriority = EmailPriority.LOW


class PresenceUpdate(BaseModel):
    offline: bool


class PresenceResponse(BaseModel):
    user_id: str
    offline: bool
    emailed: int = 0

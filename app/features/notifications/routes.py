"""
Notification API routes.

Deadline evaluation plus the in-app feed, email preferences and presence.
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status

from app.features.notifications.center import NotificationCenter
from app.features.notifications.dependencies import get_deadline_engine, get_notification_center
from app.features.notifications.engine import DeadlineNotificationEngine
from app.features.notifications.models import EmailPreferences, EvaluationReport, Notification
from app.features.notifications.schemas import (
    EvaluateDeadlinesRequest,
    UnreadCountResponse,
    EmailPreferencesUpdate,
    PresenceUpdate,
    PresenceResponse,
)
from app.features.permissions.dependencies import require_permission
from app.features.users.dependencies import get_current_session
from app.features.users.schemas import Session
from app.utils import get_logger


log = get_logger(__name__)
router = APIRouter()


# ============================================================================
# Deadline Evaluation
# ============================================================================

@router.post("/deadlines/evaluate", response_model=EvaluationReport)
def evaluate_deadlines(
    evaluation: EvaluateDeadlinesRequest,
    engine: DeadlineNotificationEngine = Depends(get_deadline_engine),
    session: Session = Depends(require_permission("manage:projects"))
):
    """Run one deadline evaluation pass over the supplied entities."""
    log.debug(f"User {session.user_id} evaluating {len(evaluation.entities)} entities")
    return engine.evaluate(evaluation.entities, evaluation.now)


# ============================================================================
# Feed
# ============================================================================

@router.get("", response_model=List[Notification])
async def list_notifications(
    center: NotificationCenter = Depends(get_notification_center),
    session: Session = Depends(get_current_session)
):
    """List notifications, newest first."""
    return center.list_notifications()


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    center: NotificationCenter = Depends(get_notification_center),
    session: Session = Depends(get_current_session)
):
    return UnreadCountResponse(unread=center.unread_count())


@router.post("/read-all", status_code=status.HTTP_204_NO_CONTENT)
async def mark_all_as_read(
    center: NotificationCenter = Depends(get_notification_center),
    session: Session = Depends(get_current_session)
):
    center.mark_all_as_read()
    return None


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_as_read(
    notification_id: str,
    center: NotificationCenter = Depends(get_notification_center),
    session: Session = Depends(get_current_session)
):
    if not center.mark_as_read(notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return None


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def clear_notification(
    notification_id: str,
    center: NotificationCenter = Depends(get_notification_center),
    session: Session = Depends(get_current_session)
):
    if not center.clear_notification(notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return None


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_all_notifications(
    center: NotificationCenter = Depends(get_notification_center),
    session: Session = Depends(get_current_session)
):
    center.clear_all()
    return None


# ============================================================================
# Email Preferences & Presence
# ============================================================================

@router.get("/preferences", response_model=EmailPreferences)
async def get_email_preferences(
    center: NotificationCenter = Depends(get_notification_center),
    session: Session = Depends(get_current_session)
):
    preferences = center.get_email_preferences(session.user_id)
    if preferences is None:
        raise HTTPException(status_code=404, detail="No email preferences set")
    return preferences


@router.put("/preferences", response_model=EmailPreferences)
async def update_email_preferences(
    update: EmailPreferencesUpdate,
    center: NotificationCenter = Depends(get_notification_center),
    session: Session = Depends(get_current_session)
):
    preferences = EmailPreferences(user_id=session.user_id, **update.model_dump())
    center.update_email_preferences(preferences)
    return preferences


@router.put("/presence", response_model=PresenceResponse)
async def update_presence(
    update: PresenceUpdate,
    center: NotificationCenter = Depends(get_notification_center),
    session: Session = Depends(get_current_session)
):
    """Mark the caller online or offline; going offline flushes queued email."""
    emailed = 0
    if update.offline:
        emailed = center.mark_user_offline(session.user_id)
    else:
        center.mark_user_online(session.user_id)
    return PresenceResponse(user_id=session.user_id, offline=update.offline, emailed=emailed)

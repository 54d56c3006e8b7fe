"""
In-app notification center.

Concrete NotificationSink for the service: keeps the newest-first notification
feed, fans new notifications out to listeners and routes email to recipients
according to their preferences and online state.

Email routing:
- recipients are the assignee when there is one, otherwise every user with
  stored email preferences
- only recipients whose preferences accept the notification are considered
- offline recipients are emailed straight away
- online recipients get the notification queued, newest max_notifications
  kept; the queue is sent as one batch email when the user goes offline
"""
import threading
from typing import Callable, Dict, List, Optional, Set

from app.features.notifications.models import (
    EmailPreferences,
    Notification,
    NotificationCategory,
    NotificationEvent,
    EmailPriority,
)
from app.features.notifications.sink import EmailTransport, LoggingEmailTransport
from app.utils import get_logger


log = get_logger(__name__)

NotificationListener = Callable[[Notification], None]

SOURCE_PREFIXES: Dict[NotificationCategory, str] = {
    NotificationCategory.TICKET: "Ticket Update",
    NotificationCategory.FORM: "Form Submission",
    NotificationCategory.AUTHORIZATION: "Authorization Alert",
    NotificationCategory.DEADLINE: "Deadline Alert",
    NotificationCategory.SYSTEM: "System Notification",
    NotificationCategory.ADMIN: "Admin Notification",
}


class NotificationCenter:
    """Thread-safe notification feed with email fan-out."""

    def __init__(self, max_notifications: int = 100, transport: Optional[EmailTransport] = None):
        self.max_notifications = max_notifications
        self.transport = transport or LoggingEmailTransport()
        self._notifications: List[Notification] = []
        self._listeners: List[NotificationListener] = []
        self._preferences: Dict[str, EmailPreferences] = {}
        self._offline: Set[str] = set()
        self._pending: Dict[str, List[Notification]] = {}
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # NotificationSink
    # ------------------------------------------------------------------

    def notify(self, event: NotificationEvent, category: NotificationCategory) -> None:
        notification = Notification(
            id=event.event_id,
            title="Deadline Approaching" if category == NotificationCategory.DEADLINE else SOURCE_PREFIXES[category],
            message=event.message,
            type=event.severity,
            source=category,
            timestamp=event.created_at,
            action_url=event.action_url,
            action_label="View Project",
            metadata={
                "projectId": event.entity_id,
                "dueDate": event.due_date_raw,
                "daysRemaining": event.days_remaining,
                "assignedTo": event.assigned_to,
                "emailPriority": event.email_priority.value,
            },
        )
        self.add_notification(notification, [event.assigned_to] if event.assigned_to else None)

    def get_email_preferences(self, user_id: str) -> Optional[EmailPreferences]:
        with self._lock:
            return self._preferences.get(user_id)

    def is_user_offline(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._offline

    # ------------------------------------------------------------------
    # Feed
    # ------------------------------------------------------------------

    def add_notification(self, notification: Notification, recipient_ids: Optional[List[str]] = None) -> None:
        """Publish a notification to the feed, listeners and email recipients."""
        with self._lock:
            self._notifications.insert(0, notification)
            del self._notifications[self.max_notifications:]
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(notification)
            except Exception:
                log.exception("Error in notification listener")

        self._route_email(notification, recipient_ids)

    def add_listener(self, listener: NotificationListener) -> Callable[[], None]:
        """Subscribe to new notifications; returns an unsubscribe callable."""
        with self._lock:
            self._listeners.append(listener)

        def remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return remove

    def list_notifications(self) -> List[Notification]:
        with self._lock:
            return list(self._notifications)

    def unread_count(self) -> int:
        with self._lock:
            return sum(1 for n in self._notifications if not n.read)

    def mark_as_read(self, notification_id: str) -> bool:
        with self._lock:
            for notification in self._notifications:
                if notification.id == notification_id:
                    notification.read = True
                    return True
            return False

    def mark_all_as_read(self) -> None:
        with self._lock:
            for notification in self._notifications:
                notification.read = True

    def clear_notification(self, notification_id: str) -> bool:
        with self._lock:
            before = len(self._notifications)
            self._notifications = [n for n in self._notifications if n.id != notification_id]
            return len(self._notifications) != before

    def clear_all(self) -> None:
        with self._lock:
            self._notifications = []

    # ------------------------------------------------------------------
    # Email preferences and presence
    # ------------------------------------------------------------------

    def update_email_preferences(self, preferences: EmailPreferences) -> None:
        with self._lock:
            self._preferences[preferences.user_id] = preferences

    def mark_user_online(self, user_id: str) -> None:
        with self._lock:
            self._offline.discard(user_id)

    def mark_user_offline(self, user_id: str) -> int:
        """
        Mark a user offline and send their queued notifications as one email.

        Returns:
            Number of notifications included in the batch email
        """
        with self._lock:
            self._offline.add(user_id)
            pending = self._pending.pop(user_id, [])
            preferences = self._preferences.get(user_id)

        if preferences is None:
            return 0

        batch = [n for n in pending if self.should_send_email(preferences, n)]
        if not batch:
            return 0

        lines = [f"- [{n.type.value}] {n.title}: {n.message}" for n in batch]
        self.transport.send(
            preferences.email,
            f"You have {len(batch)} new notification{'s' if len(batch) != 1 else ''}",
            "\n".join(lines),
        )
        log.info("Sent batch of %d notifications to offline user %s", len(batch), user_id)
        return len(batch)

    def pending_for(self, user_id: str) -> List[Notification]:
        with self._lock:
            return list(self._pending.get(user_id, []))

    @staticmethod
    def should_send_email(preferences: EmailPreferences, notification: Notification) -> bool:
        """Category opt-in plus minimum priority check."""
        priority = EmailPriority.for_severity(notification.type)
        if priority.rank < preferences.min_priority.rank:
            return False
        return preferences.allows(notification.source)

    def _route_email(self, notification: Notification, recipient_ids: Optional[List[str]]) -> None:
        with self._lock:
            recipients = list(recipient_ids) if recipient_ids else list(self._preferences)
            immediate = []
            for user_id in recipients:
                preferences = self._preferences.get(user_id)
                if preferences is None or not self.should_send_email(preferences, notification):
                    continue
                if user_id in self._offline:
                    immediate.append(preferences)
                else:
                    queue = self._pending.setdefault(user_id, [])
                    queue.append(notification)
                    del queue[:-self.max_notifications]

        for preferences in immediate:
            self.transport.send(
                preferences.email,
                f"{SOURCE_PREFIXES[notification.source]}: {notification.title}",
                notification.message,
            )

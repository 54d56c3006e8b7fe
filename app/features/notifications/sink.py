"""
Delivery-side contracts consumed by the deadline engine and notification center.
"""
from typing import Optional, Protocol

from app.features.notifications.models import EmailPreferences, NotificationCategory, NotificationEvent
from app.utils import get_logger


log = get_logger(__name__)


class NotificationSink(Protocol):
    """Accepts decided notifications and owns their delivery."""

    def notify(self, event: NotificationEvent, category: NotificationCategory) -> None:
        ...

    def get_email_preferences(self, user_id: str) -> Optional[EmailPreferences]:
        ...

    def is_user_offline(self, user_id: str) -> bool:
        ...


class EmailTransport(Protocol):
    """Outbound email delivery."""

    def send(self, address: str, subject: str, body: str) -> None:
        ...


class LoggingEmailTransport:
    """Transport that records outgoing mail in the log instead of sending it."""

    def send(self, address: str, subject: str, body: str) -> None:
        log.info("Email to %s: %s", address, subject)
        log.debug(body)

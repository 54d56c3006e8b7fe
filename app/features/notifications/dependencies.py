"""
Process-wide notification center and deadline engine.
"""
from functools import lru_cache

from app.core import config
from app.features.notifications.center import NotificationCenter
from app.features.notifications.engine import DeadlineNotificationEngine
from app.utils import get_logger


log = get_logger(__name__)


@lru_cache(maxsize=1)
def get_notification_center() -> NotificationCenter:
    return NotificationCenter(max_notifications=config.NOTIFICATION_FEED_LIMIT)


@lru_cache(maxsize=1)
def get_deadline_engine() -> DeadlineNotificationEngine:
    """The shared engine; its dedup ledger lives as long as the process."""
    log.info("Deadline thresholds: %s", ", ".join(str(t) for t in config.DEADLINE_THRESHOLDS))
    return DeadlineNotificationEngine(
        sink=get_notification_center(),
        thresholds=config.DEADLINE_THRESHOLDS,
    )

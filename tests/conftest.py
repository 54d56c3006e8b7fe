"""
Shared fixtures for the test suite.
"""

from datetime import datetime
from typing import List, Optional, Tuple

import jwt
import pytest

from app.features.notifications.models import (
    EmailPreferences,
    NotificationCategory,
    NotificationEvent,
    TrackableEntity,
)

TOKEN_KEY = "test-signing-key-for-session-tokens-0123456789"


class RecordingSink:
    """Sink that keeps every event it receives."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.received: List[Tuple[NotificationEvent, NotificationCategory]] = []

    def notify(self, event: NotificationEvent, category: NotificationCategory) -> None:
        self.received.append((event, category))
        if self.fail:
            raise RuntimeError("delivery failed")

    def get_email_preferences(self, user_id: str) -> Optional[EmailPreferences]:
        return None

    def is_user_offline(self, user_id: str) -> bool:
        return False


class RecordingTransport:
    """Email transport that keeps outgoing messages."""

    def __init__(self):
        self.sent: List[Tuple[str, str, str]] = []

    def send(self, address: str, subject: str, body: str) -> None:
        self.sent.append((address, subject, body))


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def april_29():
    """Evaluation time seven days before 6 May 2025."""
    return datetime(2025, 4, 29, 9, 30)


@pytest.fixture
def make_entity():
    def factory(**overrides) -> TrackableEntity:
        fields = {
            "id": "P-001",
            "title": "Authorization Matrix",
            "due_date": "6-May",
            "status": "In Progress",
            "assigned_to": "clinical-user",
        }
        fields.update(overrides)
        return TrackableEntity(**fields)

    return factory


@pytest.fixture
def make_token():
    def factory(role: str, sub: str = "user-1") -> str:
        return jwt.encode({"sub": sub, "role": role}, TOKEN_KEY, algorithm="HS256")

    return factory

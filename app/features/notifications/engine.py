"""
Deadline notification engine.

Each evaluation pass:
1. drops Completed / On Hold entities and entities without a due date
2. resolves the due date (malformed ones are reported, not raised)
3. computes whole days remaining from today's date
4. keeps only entities sitting exactly on a configured threshold
5. emits one event per (entity id, days remaining) over the engine's lifetime

The ledger key is committed whether or not the sink delivered the event;
retrying delivery belongs to the sink.
"""
import threading
from datetime import date, datetime
from typing import Callable, FrozenSet, Iterable, Optional, Set, Tuple, Union

from app.features.notifications.dates import MalformedDueDateError, as_date, days_until, parse_due_date
from app.features.notifications.models import (
    EntityStatus,
    EvaluationReport,
    NotificationCategory,
    NotificationEvent,
    SkippedEntity,
    TrackableEntity,
)
from app.features.notifications.sink import NotificationSink
from app.utils import get_logger


log = get_logger(__name__)

DEFAULT_THRESHOLDS: Tuple[int, ...] = (7, 3, 1)

EXCLUDED_STATUSES = frozenset({EntityStatus.COMPLETED, EntityStatus.ON_HOLD})

LedgerKey = Tuple[str, int]


class DeadlineLedger:
    """Append-only record of (entity id, days remaining) pairs already notified."""

    def __init__(self):
        self._keys: Set[LedgerKey] = set()

    def __contains__(self, key: LedgerKey) -> bool:
        return key in self._keys

    def __len__(self) -> int:
        return len(self._keys)

    def add(self, key: LedgerKey) -> None:
        self._keys.add(key)

    def keys(self) -> FrozenSet[LedgerKey]:
        return frozenset(self._keys)


class DeadlineNotificationEngine:
    """
    Emits deadline alerts at fixed days-remaining thresholds, at most once each.

    Args:
        sink: Receives every emitted event with the "deadline" category
        clock: Current-time source used when evaluate() gets no explicit `now`
        thresholds: Days-remaining values that qualify for an alert
    """

    def __init__(
        self,
        sink: NotificationSink,
        clock: Optional[Callable[[], datetime]] = None,
        thresholds: Iterable[int] = DEFAULT_THRESHOLDS,
    ):
        self.sink = sink
        self.clock = clock or datetime.now
        self.thresholds: FrozenSet[int] = frozenset(thresholds)
        self.ledger = DeadlineLedger()
        self._lock = threading.Lock()

    def evaluate(
        self,
        entities: Iterable[TrackableEntity],
        now: Optional[Union[date, datetime]] = None,
    ) -> EvaluationReport:
        """
        Run one evaluation pass over `entities`.

        Calls on the same engine are serialized so ledger reads and writes
        never interleave.

        Returns:
            Events emitted during this call and entities skipped for bad dates
        """
        with self._lock:
            if now is None:
                now = self.clock()
            today = as_date(now)
            created_at = now if isinstance(now, datetime) else datetime.combine(now, datetime.min.time())
            report = EvaluationReport()

            for entity in entities:
                if entity.status in EXCLUDED_STATUSES or not entity.due_date:
                    continue

                try:
                    due = parse_due_date(entity.due_date, today)
                except MalformedDueDateError as e:
                    log.warning(f"Skipping entity {entity.id}: {e}")
                    report.skipped.append(SkippedEntity(entity_id=entity.id, reason=str(e)))
                    continue

                days_remaining = days_until(due, today)
                if days_remaining not in self.thresholds:
                    continue

                key = (entity.id, days_remaining)
                if key in self.ledger:
                    continue

                event = NotificationEvent.for_entity(entity, days_remaining, created_at)
                self._dispatch(event)
                self.ledger.add(key)
                report.events.append(event)

            if report.events or report.skipped:
                log.info(
                    f"Deadline evaluation for {today}: {len(report.events)} emitted, "
                    f"{len(report.skipped)} skipped"
                )
            return report

    def _dispatch(self, event: NotificationEvent) -> None:
        try:
            self.sink.notify(event, NotificationCategory.DEADLINE)
        except Exception:
            log.exception(f"Sink failed to deliver deadline alert {event.event_id} for entity {event.entity_id}")

"""
Unit tests for the deadline notification engine.
"""

import threading
from datetime import datetime, timedelta

import pytest

from app.features.notifications.engine import DeadlineNotificationEngine
from app.features.notifications.models import NotificationCategory, Severity

from tests.conftest import RecordingSink


class TestDeadlineNotificationEngine:
    """Test cases for DeadlineNotificationEngine."""

    @pytest.fixture
    def engine(self, sink, april_29):
        return DeadlineNotificationEngine(sink=sink, clock=lambda: april_29)

    def test_compact_date_seven_days_out(self, engine, sink, make_entity, april_29):
        report = engine.evaluate([make_entity()], april_29)

        assert len(report.events) == 1
        event = report.events[0]
        assert event.entity_id == "P-001"
        assert event.days_remaining == 7
        assert event.severity == Severity.INFO
        assert event.due_date_raw == "6-May"
        assert event.assigned_to == "clinical-user"
        assert event.message == 'Project "Authorization Matrix" is due in 7 days. Due date: 6-May'
        assert sink.received == [(event, NotificationCategory.DEADLINE)]

    def test_uses_clock_when_now_omitted(self, engine, make_entity):
        report = engine.evaluate([make_entity()])

        assert [e.days_remaining for e in report.events] == [7]

    def test_repeated_evaluation_is_idempotent(self, engine, sink, make_entity, april_29):
        entities = [make_entity()]

        first = engine.evaluate(entities, april_29)
        second = engine.evaluate(entities, april_29)
        third = engine.evaluate(entities, april_29 + timedelta(hours=8))

        assert len(first.events) == 1
        assert second.events == []
        assert third.events == []
        assert len(sink.received) == 1

    def test_threshold_progression(self, engine, make_entity, april_29):
        entity = make_entity()
        severities = []

        for now in (april_29, datetime(2025, 5, 3, 8), datetime(2025, 5, 5, 17)):
            report = engine.evaluate([entity], now)
            severities.extend(e.severity for e in report.events)

        assert severities == [Severity.INFO, Severity.WARNING, Severity.ERROR]
        assert engine.ledger.keys() == {("P-001", 7), ("P-001", 3), ("P-001", 1)}

    def test_every_day_of_the_countdown(self, engine, make_entity):
        entity = make_entity(due_date="2025-05-06")
        emitted = []

        for offset in range(10, -3, -1):
            now = datetime(2025, 5, 6, 12) - timedelta(days=offset)
            for _ in range(3):
                emitted.extend(e.days_remaining for e in engine.evaluate([entity], now).events)

        assert emitted == [7, 3, 1]

    def test_other_fields_changing_does_not_refire(self, engine, make_entity, april_29):
        engine.evaluate([make_entity()], april_29)

        report = engine.evaluate([make_entity(title="Renamed", assigned_to="billing-user")], april_29)

        assert report.events == []

    @pytest.mark.parametrize("status", ["Completed", "On Hold"])
    def test_excluded_statuses(self, engine, sink, make_entity, april_29, status):
        report = engine.evaluate([make_entity(status=status)], april_29)

        assert report.events == []
        assert sink.received == []

    def test_entities_without_due_date(self, engine, make_entity, april_29):
        report = engine.evaluate([make_entity(due_date=None), make_entity(id="P-002", due_date="")], april_29)

        assert report.events == []
        assert report.skipped == []

    def test_malformed_date_does_not_abort_batch(self, engine, make_entity, april_29):
        entities = [
            make_entity(id="P-bad", due_date="not-a-date"),
            make_entity(id="P-good"),
        ]

        report = engine.evaluate(entities, april_29)

        assert [e.entity_id for e in report.events] == ["P-good"]
        assert len(report.skipped) == 1
        assert report.skipped[0].entity_id == "P-bad"
        assert "not-a-date" in report.skipped[0].reason

    @pytest.mark.parametrize("due_date", ["2025-05-05", "2025-05-04", "2025-05-01", "2025-04-29", "2025-04-20"])
    def test_days_outside_thresholds(self, engine, make_entity, april_29, due_date):
        assert engine.evaluate([make_entity(due_date=due_date)], april_29).events == []

    def test_past_compact_date_is_overdue_not_next_year(self, engine, make_entity):
        # Read as 2 Jan 2026 this would be three days out
        report = engine.evaluate([make_entity(due_date="2-Jan")], datetime(2025, 12, 30))

        assert report.events == []
        assert len(engine.ledger) == 0

    def test_sink_failure_still_commits_ledger(self, make_entity, april_29):
        failing = RecordingSink(fail=True)
        engine = DeadlineNotificationEngine(sink=failing)

        first = engine.evaluate([make_entity(), make_entity(id="P-002")], april_29)
        second = engine.evaluate([make_entity()], april_29)

        assert len(first.events) == 2
        assert len(failing.received) == 2
        assert ("P-001", 7) in engine.ledger
        assert second.events == []

    def test_custom_thresholds(self, sink, make_entity, april_29):
        engine = DeadlineNotificationEngine(sink=sink, thresholds=[14, 0])

        fourteen = engine.evaluate([make_entity(due_date="13-May")], april_29)
        seven = engine.evaluate([make_entity(due_date="6-May")], april_29)
        today = engine.evaluate([make_entity(due_date="29-Apr")], april_29)

        assert [e.days_remaining for e in fourteen.events] == [14]
        assert seven.events == []
        assert [(e.days_remaining, e.severity) for e in today.events] == [(0, Severity.ERROR)]

    def test_new_engine_starts_with_fresh_ledger(self, sink, make_entity, april_29):
        DeadlineNotificationEngine(sink=sink).evaluate([make_entity()], april_29)

        report = DeadlineNotificationEngine(sink=sink).evaluate([make_entity()], april_29)

        assert len(report.events) == 1

    def test_concurrent_evaluations_emit_once(self, engine, sink, make_entity, april_29):
        entities = [make_entity(id=f"P-{i}") for i in range(20)]
        barrier = threading.Barrier(6)

        def run():
            barrier.wait()
            engine.evaluate(entities, april_29)

        threads = [threading.Thread(target=run) for _ in range(6)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(sink.received) == 20
        assert len(engine.ledger) == 20

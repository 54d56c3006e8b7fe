"""
Unit tests for due-date normalization.
"""

from datetime import date, datetime

import pytest

from app.features.notifications.dates import MalformedDueDateError, days_until, parse_due_date


TODAY = date(2025, 4, 29)


class TestParseDueDate:

    def test_compact_date_uses_current_year(self):
        assert parse_due_date("6-May", TODAY) == date(2025, 5, 6)

    def test_compact_date_in_the_past_is_not_rolled_forward(self):
        assert parse_due_date("2-Jan", TODAY) == date(2025, 1, 2)

    def test_compact_date_tolerates_case_and_spaces(self):
        assert parse_due_date(" 15-jun ", TODAY) == date(2025, 6, 15)

    def test_iso_date(self):
        assert parse_due_date("2026-02-01", TODAY) == date(2026, 2, 1)

    @pytest.mark.parametrize("raw", ["not-a-date", "31-Feb", "6-Mayo", "x-May", "2025/05/06", "", "2025-13-01"])
    def test_malformed(self, raw):
        with pytest.raises(MalformedDueDateError) as exc_info:
            parse_due_date(raw, TODAY)
        assert exc_info.value.raw == raw


class TestDaysUntil:

    def test_time_of_day_is_ignored(self):
        due = date(2025, 5, 6)

        assert days_until(due, datetime(2025, 4, 29, 0, 0)) == 7
        assert days_until(due, datetime(2025, 4, 29, 23, 59)) == 7

    def test_overdue_is_negative(self):
        assert days_until(date(2025, 1, 2), TODAY) == -117

"""
Due-date normalization.

Two textual encodings are accepted:
- ISO "YYYY-MM-DD"
- compact "D-Mon" (e.g. "6-May"), always resolved against the evaluation year.
  A compact date earlier than today stays in the current year and comes out
  with negative days remaining; it is never rolled into next year.
"""
from datetime import date, datetime
from typing import Dict, Union

MONTH_ABBREVIATIONS: Dict[str, int] = {
    "Jan": 1, "Feb": 2, "Mar": 3, "Apr": 4, "May": 5, "Jun": 6,
    "Jul": 7, "Aug": 8, "Sep": 9, "Oct": 10, "Nov": 11, "Dec": 12,
}


class MalformedDueDateError(ValueError):
    """The due date matches neither recognized encoding."""

    def __init__(self, raw: str, detail: str):
        super().__init__(f"Unrecognized due date {raw!r}: {detail}")
        self.raw = raw


def as_date(value: Union[date, datetime]) -> date:
    """Calendar date of an instant, dropping the time of day."""
    if isinstance(value, datetime):
        return value.date()
    return value


def parse_due_date(raw: str, today: date) -> date:
    """
    Resolve a raw due date to a calendar date.

    Raises:
        MalformedDueDateError: neither "D-Mon" nor "YYYY-MM-DD"
    """
    value = raw.strip()

    if value.count("-") == 1:
        day_text, month_text = (part.strip() for part in value.split("-"))
        month = MONTH_ABBREVIATIONS.get(month_text.capitalize())
        if month is None:
            raise MalformedDueDateError(raw, f"unknown month {month_text!r}")
        if not day_text.isdigit():
            raise MalformedDueDateError(raw, f"day {day_text!r} is not a number")
        try:
            return date(today.year, month, int(day_text))
        except ValueError as e:
            raise MalformedDueDateError(raw, str(e)) from e

    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise MalformedDueDateError(raw, str(e)) from e


def days_until(due: date, now: Union[date, datetime]) -> int:
    """Whole calendar days from `now` to `due`, both taken at midnight."""
    return (due - as_date(now)).days

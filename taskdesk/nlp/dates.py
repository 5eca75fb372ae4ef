"""
Closed-grammar date resolution for quick-entry tokens.

Every expression is resolved against the calendar date of a caller-supplied
``now`` and returned as an absolute ``YYYY-MM-DD`` string:

- ``today``, ``tomorrow`` / ``tom``
- weekday names (``mon`` / ``monday`` ...), always the next occurrence after today
- month + day (``mar15``, ``mar 15``, ``march15``), rolling to next year once passed
- exact ``YYYY-MM-DD`` or ``YYYY/MM/DD``
- offsets ``3d`` / ``3days`` / ``2w`` / ``2weeks``; the count must be positive, so
  ``0d`` / ``0w`` resolve to ``None`` rather than to today

Anything else resolves to ``None``.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

WEEKDAYS = {
    "mon": 0, "monday": 0,
    "tue": 1, "tuesday": 1,
    "wed": 2, "wednesday": 2,
    "thu": 3, "thursday": 3,
    "fri": 4, "friday": 4,
    "sat": 5, "saturday": 5,
    "sun": 6, "sunday": 6,
}

MONTHS = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

MONTH_DAY_PAT = re.compile(r"^([a-z]+) ?(\d{1,2})$")
EXACT_DATE_PAT = re.compile(r"^(\d{4})([-/])(\d{2})\2(\d{2})$")
OFFSET_PAT = re.compile(r"^(\d+)(d|days?|w|weeks?)$")


def _today(now: datetime | date) -> date:
    return now.date() if isinstance(now, datetime) else now


def _safe_date(year: int, month: int, day: int) -> date | None:
    try:
        return date(year, month, day)
    except ValueError:
        return None


def _next_weekday(today: date, target: int) -> date:
    offset = (target - today.weekday()) % 7
    return today + timedelta(days=offset or 7)


def _month_day(today: date, month: int, day: int) -> date | None:
    candidate = _safe_date(today.year, month, day)
    if candidate is None:
        return None
    if candidate <= today:
        # Feb 29 rolling into a non-leap year is impossible, not clamped
        return _safe_date(today.year + 1, month, day)
    return candidate


def _offset(today: date, n: int, unit: str) -> date | None:
    """today + n days or weeks; None for n < 1 ("0d" is not "today") or past the calendar."""
    if n <= 0:
        return None
    days = n * 7 if unit.startswith("w") else n
    try:
        return today + timedelta(days=days)
    except OverflowError:
        return None


def _resolve(text: str, today: date) -> date | None:
    if text == "today":
        return today
    if text in ("tomorrow", "tom"):
        return today + timedelta(days=1)

    if text in WEEKDAYS:
        return _next_weekday(today, WEEKDAYS[text])

    m = MONTH_DAY_PAT.match(text)
    if m:
        month = MONTHS.get(m.group(1))
        if month is None:
            return None
        return _month_day(today, month, int(m.group(2)))

    m = EXACT_DATE_PAT.match(text)
    if m:
        return _safe_date(int(m.group(1)), int(m.group(3)), int(m.group(4)))

    m = OFFSET_PAT.match(text)
    if m:
        return _offset(today, int(m.group(1)), m.group(2))

    return None


def resolve_date(token: str, now: datetime | date) -> str | None:
    """
    Resolve a date token relative to ``now``.
    Returns an ISO date string, or None if the token is not recognised.
    """
    text = token.strip().lower()
    if not text:
        return None
    resolved = _resolve(text, _today(now))
    return resolved.isoformat() if resolved else None

"""Coarse "time ago" wording for inbox rows ("5 minutes", "about 2 hours")."""
from __future__ import annotations

from datetime import datetime

_MINUTE = 60
_HOUR = 60 * _MINUTE
_DAY = 24 * _HOUR
_MONTH = 30 * _DAY


def _plural(n: int, unit: str) -> str:
    return f"1 {unit}" if n == 1 else f"{n} {unit}s"


def format_distance(then: datetime, now: datetime) -> str:
    seconds = abs((now - then).total_seconds())
    minutes = round(seconds / _MINUTE)

    if seconds < 30:
        return "less than a minute"
    if minutes < 45:
        return _plural(max(minutes, 1), "minute")
    if minutes < 90:
        return "about 1 hour"
    if seconds < _DAY - 30:
        return f"about {round(seconds / _HOUR)} hours"
    if seconds < 42 * _HOUR - 30:
        return "1 day"
    if seconds < _MONTH - 30:
        return _plural(round(seconds / _DAY), "day")
    if seconds < 45 * _DAY:
        return "about 1 month"
    if seconds < 60 * _DAY:
        return "about 2 months"

    months = round(seconds / _MONTH)
    if months < 12:
        return _plural(months, "month")

    years, rest = divmod(months, 12)
    if rest < 3:
        return f"about {_plural(years, 'year')}"
    if rest < 9:
        return f"over {_plural(years, 'year')}"
    return f"almost {_plural(years + 1, 'year')}"

"""Validate and normalize recurrence patterns.

Accepted forms (case-insensitive)::

    daily | weekly | monthly | yearly
    every <N>d | every <N>w | every <N>m | every <N>y
    every <day>[,<day>...]      days by full name or 3-letter abbreviation
"""

from __future__ import annotations

import re

from task_commander.exceptions import RecurrencePatternError

KEYWORDS: dict[str, tuple[int, str]] = {
    "daily": (1, "d"),
    "weekly": (1, "w"),
    "monthly": (1, "m"),
    "yearly": (1, "y"),
}

EVERY_PREFIX = "every "

# Weekday spellings mapped to date.weekday() numbers (Monday is 0)
WEEKDAYS: dict[str, int] = {
    "monday": 0,
    "mon": 0,
    "tuesday": 1,
    "tue": 1,
    "wednesday": 2,
    "wed": 2,
    "thursday": 3,
    "thu": 3,
    "friday": 4,
    "fri": 4,
    "saturday": 5,
    "sat": 5,
    "sunday": 6,
    "sun": 6,
}

_INTERVAL = re.compile(r"(?P<count>[+-]?\d+)(?P<unit>[dwmy])")


def split_interval(spec: str) -> tuple[int, str] | None:
    """Split ``"<N><unit>"`` into ``(N, unit)``; None if *spec* has another shape.

    N may be zero or negative here, callers decide whether that is valid.
    """
    match = _INTERVAL.fullmatch(spec)
    if match is None:
        return None
    return int(match.group("count")), match.group("unit")


def split_weekdays(spec: str) -> list[str]:
    """Split a comma-separated weekday list into trimmed tokens."""
    return [part.strip() for part in spec.split(",")]


def parse_pattern(pattern: str) -> str:
    """Validate a recurrence pattern and return its canonical form.

    Args:
        pattern: User-supplied pattern such as ``"Every 2W"`` or
            ``"every mon, fri"``.

    Returns:
        The normalized pattern, e.g. ``"every 2w"`` or ``"every mon,fri"``.

    Raises:
        RecurrencePatternError: Naming the offending fragment.
    """
    normalized = pattern.strip().lower()
    if not normalized:
        raise RecurrencePatternError(pattern, "", "empty recurrence pattern")

    if normalized in KEYWORDS:
        return normalized

    if normalized == EVERY_PREFIX.rstrip():
        raise RecurrencePatternError(pattern, normalized, "missing interval after 'every'")

    if not normalized.startswith(EVERY_PREFIX):
        raise RecurrencePatternError(
            pattern,
            normalized,
            "unrecognized pattern (expected daily, weekly, monthly, yearly, or every ...)",
        )

    spec = normalized[len(EVERY_PREFIX) :].strip()
    if not spec:
        raise RecurrencePatternError(pattern, normalized, "missing interval after 'every'")

    interval = split_interval(spec)
    if interval is not None:
        count, unit = interval
        if count <= 0:
            raise RecurrencePatternError(
                pattern, spec, f"interval {count} must be a positive number"
            )
        return f"{EVERY_PREFIX}{count}{unit}"

    days = split_weekdays(spec)
    for day in days:
        if day not in WEEKDAYS:
            raise RecurrencePatternError(pattern, day, f"unknown day or interval: {day!r}")

    return EVERY_PREFIX + ",".join(days)

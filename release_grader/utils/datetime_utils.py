# The MIT License (MIT)
# Copyright © 2025 Entrius

"""
Timezone helpers for release timestamps and civil-date deadlines.

GitHub reports every timestamp in ISO 8601 UTC. Deadlines are civil dates in
the course's reference timezone, so both sides are normalized into that zone
before they are compared.
"""

from datetime import date, datetime, time
from typing import Union

import pytz

from release_grader.constants import (
    DEADLINE_CUTOFF_HOUR,
    DEADLINE_CUTOFF_MINUTE,
    DEADLINE_CUTOFF_SECOND,
    DEFAULT_REFERENCE_TIMEZONE,
    SECONDS_PER_DAY,
)

REFERENCE_TZ = pytz.timezone(DEFAULT_REFERENCE_TIMEZONE)

DEADLINE_CUTOFF = time(DEADLINE_CUTOFF_HOUR, DEADLINE_CUTOFF_MINUTE, DEADLINE_CUTOFF_SECOND)


def get_timezone(name: str) -> pytz.BaseTzInfo:
    """Resolve an IANA zone name. Raises pytz.UnknownTimeZoneError."""
    return pytz.timezone(name)


def parse_github_timestamp(value: Union[str, datetime], tz: pytz.BaseTzInfo = REFERENCE_TZ) -> datetime:
    """Parse an ISO 8601 timestamp and convert it into ``tz``.

    Naive values are taken to be UTC, matching what the GitHub API returns.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        dt = datetime.fromisoformat(text)

    if dt.tzinfo is None:
        dt = pytz.utc.localize(dt)
    return dt.astimezone(tz)


def deadline_cutoff(deadline: date, tz: pytz.BaseTzInfo = REFERENCE_TZ) -> datetime:
    """End-of-day instant (23:59:59 local) for a civil deadline date."""
    return tz.localize(datetime.combine(deadline, DEADLINE_CUTOFF))


def civil_days_between(start: datetime, end: datetime) -> float:
    """Fractional wall-clock days from ``start`` to ``end``.

    Both values must already be in the same zone. The offsets are dropped so a
    DST transition in between does not add or remove an hour.
    """
    delta = end.replace(tzinfo=None) - start.replace(tzinfo=None)
    return delta.total_seconds() / SECONDS_PER_DAY


def format_timestamp(dt: datetime) -> str:
    """Human-readable local timestamp, e.g. ``Sunday, March 10, 2024 at 03:00 AM PDT``."""
    return f'{dt:%A, %B} {dt.day}, {dt:%Y} at {dt:%I:%M %p %Z}'

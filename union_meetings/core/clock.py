"""Civil-time clock handed to everything that needs "now".

Meeting start times are stored as naive wall-clock values in a single fixed
offset, so the clock hands out naive datetimes in that same offset. Routes
receive the clock through ``get_clock`` and tests replace it with a fake.
"""
from datetime import datetime, timedelta, timezone
from typing import Protocol

from union_meetings.core.config import settings


class Clock(Protocol):
    """Anything that can tell the current civil time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock at a fixed UTC offset."""

    def __init__(self, utc_offset_minutes: int):
        self.tz = timezone(timedelta(minutes=utc_offset_minutes))

    def now(self) -> datetime:
        return datetime.now(self.tz).replace(tzinfo=None)


system_clock = SystemClock(settings.utc_offset_minutes)


def get_clock() -> Clock:
    """Dependency for getting the civil-time clock."""
    return system_clock

"""Meeting phase calculation.

A meeting's phase is a pure function of its scheduled start and the current
civil time. Windows are half-open (inclusive lower bound, exclusive upper
bound) so every instant belongs to exactly one phase:

    Scheduled         now < start - 10min
    CheckInOpen       start - 10min <= now < start + 15min
    LateAllowed       start + 15min <= now < start + 30min
    UnexcusedWindow   start + 30min <= now < start + 60min
    Closed            now >= start + 60min
"""
from datetime import datetime, timedelta
from enum import Enum


class Phase(str, Enum):
    SCHEDULED = "Scheduled"
    CHECK_IN_OPEN = "CheckInOpen"
    LATE_ALLOWED = "LateAllowed"
    UNEXCUSED_WINDOW = "UnexcusedWindow"
    CLOSED = "Closed"


CHECK_IN_OPENS = timedelta(minutes=-10)
LATE_FROM = timedelta(minutes=15)
UNEXCUSED_FROM = timedelta(minutes=30)
CLOSES_AT = timedelta(minutes=60)

# Phases in which not having checked in already counts as an absence
ABSENCE_PHASES = frozenset({Phase.LATE_ALLOWED, Phase.UNEXCUSED_WINDOW, Phase.CLOSED})


def phase_of(scheduled_start: datetime, now: datetime) -> Phase:
    """Return the phase of a meeting starting at ``scheduled_start``."""
    elapsed = now - scheduled_start
    if elapsed < CHECK_IN_OPENS:
        return Phase.SCHEDULED
    if elapsed < LATE_FROM:
        return Phase.CHECK_IN_OPEN
    if elapsed < UNEXCUSED_FROM:
        return Phase.LATE_ALLOWED
    if elapsed < CLOSES_AT:
        return Phase.UNEXCUSED_WINDOW
    return Phase.CLOSED


def absences_due(scheduled_start: datetime, now: datetime) -> bool:
    """Whether members without a record should be marked absent by now."""
    return phase_of(scheduled_start, now) in ABSENCE_PHASES

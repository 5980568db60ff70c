"""Meeting model for scheduled union meetings.

This module defines the Meeting model. A meeting's admission phase is never
stored; it is derived from ``scheduled_start`` and the current civil time on
every request (see ``union_meetings.attendance.phase``).
"""

from datetime import date, datetime, time
from typing import TYPE_CHECKING

from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from union_meetings.models.attendance import AttendanceRecord


class Meeting(SQLModel, table=True):
    """A scheduled meeting members check in to.

    Attributes:
        id: Unique identifier.
        title: Meeting title.
        scheduled_date: Civil date of the meeting start.
        scheduled_time: Civil time of the meeting start, in the configured
            fixed UTC offset.
        category: Free-form meeting type (e.g. "Ordinaria", "Extraordinaria").
        location: Where the meeting takes place.
        description: Optional free text.
        records: Attendance records; deleted together with the meeting.
    """
    id: int | None = Field(default=None, primary_key=True)
    title: str
    scheduled_date: date = Field(index=True)
    scheduled_time: time
    category: str
    location: str
    description: str | None = None

    # Relationship
    records: list["AttendanceRecord"] = Relationship(
        back_populates="meeting", cascade_delete=True
    )

    @property
    def scheduled_start(self) -> datetime:
        """Naive civil datetime at which the meeting starts."""
        return datetime.combine(self.scheduled_date, self.scheduled_time)

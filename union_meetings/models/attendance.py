"""Attendance record model and the status/score table.

One record exists per (meeting, user). The score column is always the image
of the status under ``STATUS_SCORES``; callers go through ``score_for``
rather than choosing a score themselves.
"""

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from union_meetings.models.meeting import Meeting


class AttendanceStatus(str, Enum):
    FULL_ATTENDANCE = "FullAttendance"
    LATE = "Late"
    UNEXCUSED_ABSENCE = "UnexcusedAbsence"
    EXCUSED_ABSENCE = "ExcusedAbsence"


STATUS_SCORES: dict[AttendanceStatus, int] = {
    AttendanceStatus.FULL_ATTENDANCE: 3,
    AttendanceStatus.LATE: 2,
    AttendanceStatus.EXCUSED_ABSENCE: 2,
    AttendanceStatus.UNEXCUSED_ABSENCE: 0,
}

# Statuses that count as having been present at the meeting
PRESENT_STATUSES = frozenset({AttendanceStatus.FULL_ATTENDANCE, AttendanceStatus.LATE})


def score_for(status: AttendanceStatus) -> int:
    return STATUS_SCORES[status]


class AttendanceRecord(SQLModel, table=True):
    """A member's attendance at one meeting.

    Attributes:
        id: Unique identifier.
        meeting_id: Foreign key to the Meeting.
        user_id: Member id from the external user directory.
        status: Attendance classification.
        score: Points derived from ``status`` (0-3).
        checked_in_at: Civil time of the member's last check-in. Null for
            absences filled in by backfill.
        meeting: Reference to the parent Meeting object.
    """
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("meeting_id", "user_id", name="uq_attendance_meeting_user"),
    )

    id: int | None = Field(default=None, primary_key=True)
    meeting_id: int = Field(foreign_key="meeting.id", ondelete="CASCADE", index=True)
    user_id: int = Field(index=True)
    status: AttendanceStatus
    score: int = Field(ge=0, le=3)
    # Naive civil time in the configured offset, stored as-is
    checked_in_at: datetime | None = Field(default=None, sa_type=DateTime(timezone=False))

    # Relationship
    meeting: Optional["Meeting"] = Relationship(back_populates="records")

from union_meetings.models.attendance import (
    PRESENT_STATUSES,
    STATUS_SCORES,
    AttendanceRecord,
    AttendanceStatus,
    score_for,
)
from union_meetings.models.meeting import Meeting
from union_meetings.models.member import Member

__all__ = [
    "Meeting",
    "AttendanceRecord",
    "AttendanceStatus",
    "Member",
    "STATUS_SCORES",
    "PRESENT_STATUSES",
    "score_for",
]

"""Attendance routes: member check-in, administrative override, meeting statistics."""
from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from union_meetings.attendance.backfill import backfill_absences
from union_meetings.attendance.phase import phase_of
from union_meetings.attendance.recorder import (
    get_meeting,
    override_attendance,
    register_attendance,
)
from union_meetings.attendance.roster import Roster, get_roster, member_names
from union_meetings.core.auth import get_current_user_id
from union_meetings.core.clock import Clock, get_clock
from union_meetings.core.database import get_session
from union_meetings.models import PRESENT_STATUSES, AttendanceRecord
from union_meetings.schemas import (
    AttendanceEntry,
    CheckInResponse,
    MeetingRead,
    MeetingStatistics,
    StatusOverride,
)

router = APIRouter(prefix="/meetings/{meeting_id}", tags=["attendance"])


@router.post("/attendance", response_model=CheckInResponse)
async def check_in(
    meeting_id: int,
    user_id: int = Depends(get_current_user_id),
    session: Session = Depends(get_session),
    roster: Roster = Depends(get_roster),
    clock: Clock = Depends(get_clock),
):
    """
    Check the acting member in to a meeting.

    The status is decided by the meeting's phase right now: on time up to 15
    minutes after the start, late up to 30 minutes, an absence up to 60
    minutes. Before the window opens or after it closes the check-in is
    refused and nothing is written.
    """
    result = register_attendance(session, roster, meeting_id, user_id, clock.now())
    return CheckInResponse(status=result.status, score=result.score, phase=result.phase)


@router.put("/attendance/{user_id}", response_model=AttendanceEntry)
async def set_attendance(
    meeting_id: int,
    user_id: int,
    body: StatusOverride,
    session: Session = Depends(get_session),
    roster: Roster = Depends(get_roster),
):
    """Overwrite a member's status for a meeting regardless of phase."""
    record = override_attendance(session, roster, meeting_id, user_id, body.status)
    return AttendanceEntry.build(record, member_names(roster))


@router.get("/statistics", response_model=MeetingStatistics)
async def meeting_statistics(
    meeting_id: int,
    session: Session = Depends(get_session),
    roster: Roster = Depends(get_roster),
    clock: Clock = Depends(get_clock),
):
    """
    Attendance breakdown for one meeting.

    Members who never checked in are backfilled as absent first, once the
    on-time window has passed.
    """
    now = clock.now()
    meeting = get_meeting(session, meeting_id)
    backfill_absences(session, roster, meeting, now)

    records = session.exec(
        select(AttendanceRecord)
        .where(AttendanceRecord.meeting_id == meeting_id)
        .order_by(AttendanceRecord.user_id)
    ).all()
    names = member_names(roster)
    entries = [AttendanceEntry.build(r, names) for r in records]

    return MeetingStatistics(
        meeting=MeetingRead.build(meeting, phase_of(meeting.scheduled_start, now)),
        attendees=[e for e in entries if e.status in PRESENT_STATUSES],
        absentees=[e for e in entries if e.status not in PRESENT_STATUSES],
        all=entries,
    )

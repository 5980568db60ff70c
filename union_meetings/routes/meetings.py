"""Meeting routes: scheduling, editing and listing meetings with their phase."""
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Response
from sqlmodel import Session, col, select

from union_meetings.attendance.backfill import backfill_recent_meetings
from union_meetings.attendance.phase import phase_of
from union_meetings.attendance.recorder import get_meeting
from union_meetings.attendance.roster import Roster, get_roster
from union_meetings.core.clock import Clock, get_clock
from union_meetings.core.config import settings
from union_meetings.core.database import get_session
from union_meetings.models import Meeting
from union_meetings.schemas import MeetingCreated, MeetingRead, MeetingWrite, SweepRead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/meetings", tags=["meetings"])


@router.post("", status_code=201, response_model=MeetingCreated)
async def create_meeting(
    body: MeetingWrite,
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    """Schedule a new meeting and return it with its current phase."""
    meeting = Meeting(**body.model_dump())
    session.add(meeting)
    session.commit()
    session.refresh(meeting)
    logger.info(f"Created meeting {meeting.id} '{meeting.title}' at {meeting.scheduled_start}")

    phase = phase_of(meeting.scheduled_start, clock.now())
    return MeetingCreated(meeting=MeetingRead.build(meeting, phase), phase=phase)


@router.get("", response_model=list[MeetingRead])
async def list_meetings(
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    """All meetings, newest first, each with its phase computed now."""
    meetings = session.exec(
        select(Meeting).order_by(
            col(Meeting.scheduled_date).desc(), col(Meeting.scheduled_time).desc()
        )
    ).all()
    now = clock.now()
    return [MeetingRead.build(m, phase_of(m.scheduled_start, now)) for m in meetings]


@router.post("/backfill", response_model=SweepRead)
async def run_backfill(
    session: Session = Depends(get_session),
    roster: Roster = Depends(get_roster),
    clock: Clock = Depends(get_clock),
):
    """
    Backfill absences for recently started meetings.

    Runs the same pass as the background sweep, over meetings that started
    within BACKFILL_SWEEP_LOOKBACK_HOURS.
    """
    results = backfill_recent_meetings(
        session,
        roster,
        clock.now(),
        timedelta(hours=settings.backfill_sweep_lookback_hours),
    )
    return SweepRead(
        meetings=len(results),
        inserted=sum(r.inserted for r in results),
        failed=sum(r.failed for r in results),
    )


@router.get("/{meeting_id}", response_model=MeetingRead)
async def meeting_detail(
    meeting_id: int,
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    meeting = get_meeting(session, meeting_id)
    return MeetingRead.build(meeting, phase_of(meeting.scheduled_start, clock.now()))


@router.put("/{meeting_id}", response_model=MeetingRead)
async def edit_meeting(
    meeting_id: int,
    body: MeetingWrite,
    session: Session = Depends(get_session),
    clock: Clock = Depends(get_clock),
):
    """
    Edit a meeting.

    Existing attendance records are kept as they are; the phase returned is
    recomputed against the new schedule.
    """
    meeting = get_meeting(session, meeting_id)
    for key, value in body.model_dump().items():
        setattr(meeting, key, value)
    session.add(meeting)
    session.commit()
    session.refresh(meeting)
    logger.info(f"Edited meeting {meeting_id}")

    return MeetingRead.build(meeting, phase_of(meeting.scheduled_start, clock.now()))


@router.delete("/{meeting_id}", status_code=204)
async def delete_meeting(meeting_id: int, session: Session = Depends(get_session)):
    """Delete a meeting together with its attendance records."""
    meeting = get_meeting(session, meeting_id)
    session.delete(meeting)
    session.commit()
    logger.info(f"Deleted meeting {meeting_id}")
    return Response(status_code=204)

"""Attendance check-in and administrative override.

Both write paths overwrite an existing (meeting, user) record through an
``INSERT ... ON CONFLICT DO UPDATE``. Calling ``register_attendance`` twice
therefore keeps only the classification of the second call, even when that
downgrades an earlier on-time check-in.
"""
import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from union_meetings.attendance.phase import Phase, phase_of
from union_meetings.attendance.roster import Roster
from union_meetings.core.database import dialect_insert
from union_meetings.core.errors import (
    InvalidStatusOverride,
    NotFound,
    StorageError,
    WindowClosed,
    WindowNotOpenYet,
)
from union_meetings.models import AttendanceRecord, AttendanceStatus, Meeting, score_for

logger = logging.getLogger(__name__)

STATUS_BY_PHASE = {
    Phase.CHECK_IN_OPEN: AttendanceStatus.FULL_ATTENDANCE,
    Phase.LATE_ALLOWED: AttendanceStatus.LATE,
    # Still recorded, but as an absence rather than an attendance
    Phase.UNEXCUSED_WINDOW: AttendanceStatus.UNEXCUSED_ABSENCE,
}


@dataclass(frozen=True)
class CheckInResult:
    status: AttendanceStatus
    score: int
    phase: Phase


def get_meeting(session: Session, meeting_id: int) -> Meeting:
    meeting = session.get(Meeting, meeting_id)
    if not meeting:
        raise NotFound("Meeting not found")
    return meeting


def _require_member(roster: Roster, user_id: int) -> None:
    if roster.get(user_id) is None:
        raise NotFound("Member not found")


def _upsert_record(session: Session, values: dict, update_columns: list[str]) -> None:
    """Insert a record or overwrite ``update_columns`` of the existing one."""
    try:
        insert = dialect_insert(session)
        stmt = insert(AttendanceRecord.__table__).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["meeting_id", "user_id"],
            set_={column: stmt.excluded[column] for column in update_columns},
        )
        session.exec(stmt)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(
            f"Failed to write attendance for meeting {values['meeting_id']}, "
            f"user {values['user_id']}"
        )
        raise StorageError() from e


def classify_check_in(phase: Phase) -> AttendanceStatus:
    """Map the phase at check-in time to a status, or refuse the check-in."""
    if phase == Phase.SCHEDULED:
        raise WindowNotOpenYet("Check-in for this meeting is not open yet")
    if phase == Phase.CLOSED:
        raise WindowClosed("Check-in for this meeting is closed")
    return STATUS_BY_PHASE[phase]


def register_attendance(
    session: Session,
    roster: Roster,
    meeting_id: int,
    user_id: int,
    now: datetime,
) -> CheckInResult:
    """Record a member's check-in, classified by the meeting's current phase."""
    meeting = get_meeting(session, meeting_id)
    _require_member(roster, user_id)

    phase = phase_of(meeting.scheduled_start, now)
    status = classify_check_in(phase)
    score = score_for(status)

    _upsert_record(
        session,
        {
            "meeting_id": meeting_id,
            "user_id": user_id,
            "status": status,
            "score": score,
            "checked_in_at": now,
        },
        update_columns=["status", "score", "checked_in_at"],
    )
    logger.info(
        f"User {user_id} checked in to meeting {meeting_id} during {phase.value}: "
        f"{status.value} ({score})"
    )
    return CheckInResult(status=status, score=score, phase=phase)


def override_attendance(
    session: Session,
    roster: Roster,
    meeting_id: int,
    user_id: int,
    status: str,
) -> AttendanceRecord:
    """Set a member's status for a meeting unconditionally.

    The score is recomputed from the status. An existing ``checked_in_at`` is
    kept; a record created by the override has none.
    """
    get_meeting(session, meeting_id)
    _require_member(roster, user_id)
    try:
        new_status = AttendanceStatus(status)
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise InvalidStatusOverride(f"Invalid status '{status}'. Expected one of: {allowed}") from None

    _upsert_record(
        session,
        {
            "meeting_id": meeting_id,
            "user_id": user_id,
            "status": new_status,
            "score": score_for(new_status),
            "checked_in_at": None,
        },
        update_columns=["status", "score"],
    )
    logger.info(f"Attendance of user {user_id} at meeting {meeting_id} set to {new_status.value}")

    return session.exec(
        select(AttendanceRecord)
        .where(AttendanceRecord.meeting_id == meeting_id)
        .where(AttendanceRecord.user_id == user_id)
    ).one()

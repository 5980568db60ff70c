"""Absentee backfill.

Once a meeting reaches ``LateAllowed``, every eligible roster member without
a record for it is marked ``UnexcusedAbsence`` with no check-in time.

Inserts use ``ON CONFLICT DO NOTHING`` so that a check-in or a concurrent
backfill that wrote the row first always wins: backfill only fills gaps and
never overwrites. Each insert is committed on its own, so one failing row
does not stop the rest of the batch.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from union_meetings.attendance.phase import absences_due
from union_meetings.attendance.roster import Roster, eligible_members
from union_meetings.core.database import dialect_insert
from union_meetings.models import AttendanceRecord, AttendanceStatus, Meeting, score_for

logger = logging.getLogger(__name__)


@dataclass
class BackfillResult:
    meeting_id: int
    inserted: int = 0
    failed: int = 0


def _insert_absence(session: Session, meeting_id: int, user_id: int) -> bool:
    """Insert an absence unless a record already exists. Returns True if inserted."""
    insert = dialect_insert(session)
    stmt = (
        insert(AttendanceRecord.__table__)
        .values(
            meeting_id=meeting_id,
            user_id=user_id,
            status=AttendanceStatus.UNEXCUSED_ABSENCE,
            score=score_for(AttendanceStatus.UNEXCUSED_ABSENCE),
            checked_in_at=None,
        )
        .on_conflict_do_nothing(index_elements=["meeting_id", "user_id"])
    )
    result = session.exec(stmt)
    session.commit()
    return result.rowcount == 1


def backfill_absences(
    session: Session, roster: Roster, meeting: Meeting, now: datetime
) -> BackfillResult:
    """Mark eligible members with no record for ``meeting`` as absent."""
    meeting_id = meeting.id
    result = BackfillResult(meeting_id=meeting_id)
    if not absences_due(meeting.scheduled_start, now):
        return result

    recorded = set(
        session.exec(
            select(AttendanceRecord.user_id).where(AttendanceRecord.meeting_id == meeting_id)
        ).all()
    )
    missing = [m for m in eligible_members(roster) if m.user_id not in recorded]

    for member in missing:
        try:
            if _insert_absence(session, meeting_id, member.user_id):
                result.inserted += 1
        except SQLAlchemyError:
            session.rollback()
            result.failed += 1
            logger.exception(
                f"Failed to backfill absence for user {member.user_id} at meeting {meeting_id}"
            )

    if result.inserted or result.failed:
        logger.info(
            f"Backfilled meeting {meeting_id}: {result.inserted} absences inserted, "
            f"{result.failed} failed"
        )
    return result


def backfill_recent_meetings(
    session: Session, roster: Roster, now: datetime, lookback: timedelta
) -> list[BackfillResult]:
    """Backfill every meeting that started within ``lookback`` of ``now``."""
    since = now - lookback
    candidates = session.exec(
        select(Meeting)
        .where(Meeting.scheduled_date >= since.date())
        .where(Meeting.scheduled_date <= now.date())
        .order_by(Meeting.scheduled_date, Meeting.scheduled_time)
    ).all()

    results = []
    for meeting in candidates:
        if meeting.scheduled_start < since or not absences_due(meeting.scheduled_start, now):
            continue
        results.append(backfill_absences(session, roster, meeting, now))
    return results

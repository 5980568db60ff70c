"""Annual statistics routes."""
from fastapi import APIRouter, Depends, Path, Query
from sqlmodel import Session

from union_meetings.attendance.annual import (
    annual_statistics,
    member_year,
    monthly_participation,
)
from union_meetings.attendance.roster import (
    Roster,
    eligible_members,
    get_roster,
    member_names,
)
from union_meetings.core.clock import Clock, get_clock
from union_meetings.core.database import get_session
from union_meetings.core.errors import NotFound
from union_meetings.schemas import (
    AnnualStatisticsRead,
    AnnualStatRead,
    AttendanceEntry,
    MemberYearRead,
    MonthlyParticipationRead,
)

router = APIRouter(tags=["statistics"])

# Calendar years representable as dates
MIN_YEAR = 1
MAX_YEAR = 9999


@router.get("/annual-statistics/{year}", response_model=AnnualStatisticsRead)
async def annual(
    year: int = Path(ge=MIN_YEAR, le=MAX_YEAR),
    session: Session = Depends(get_session),
    roster: Roster = Depends(get_roster),
    clock: Clock = Depends(get_clock),
):
    """
    Per-member performance for a year plus the cohort rollup.

    Covers every meeting scheduled in the year and every active,
    fully-registered member. Meetings whose on-time window has passed are
    backfilled before scoring.
    """
    report = annual_statistics(session, roster, year, clock.now())
    return AnnualStatisticsRead.build(report)


@router.get("/annual-statistics/{year}/monthly", response_model=MonthlyParticipationRead)
async def monthly(
    year: int = Path(ge=MIN_YEAR, le=MAX_YEAR),
    session: Session = Depends(get_session),
    roster: Roster = Depends(get_roster),
):
    """
    Month-by-month participation for a year.

    For each month: meetings held, distinct eligible members who attended
    (on time or late) at least once, and their share of all eligible members.
    """
    months = monthly_participation(session, roster, year)
    return MonthlyParticipationRead.build(year, len(eligible_members(roster)), months)


@router.get("/members/{user_id}/attendance", response_model=MemberYearRead)
async def member_attendance(
    user_id: int,
    year: int | None = Query(default=None, ge=MIN_YEAR, le=MAX_YEAR),
    session: Session = Depends(get_session),
    roster: Roster = Depends(get_roster),
    clock: Clock = Depends(get_clock),
):
    """One member's records and annual stat; defaults to the current year."""
    member = roster.get(user_id)
    if member is None:
        raise NotFound("Member not found")
    now = clock.now()
    if year is None:
        year = now.year

    stat, records = member_year(session, roster, member, year, now)
    names = member_names(roster)
    return MemberYearRead(
        year=year,
        stat=AnnualStatRead.build(stat),
        records=[AttendanceEntry.build(r, names) for r in records],
    )

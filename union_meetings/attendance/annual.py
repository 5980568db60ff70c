"""Annual attendance statistics.

Per-user numbers are computed over every meeting scheduled in the year, for
every eligible roster member. A member with no record for a meeting
contributes 0 to ``score_sum``; backfill makes that explicit for meetings
whose check-in window has passed.
"""
import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from sqlmodel import Session, col, select

from union_meetings.attendance.backfill import backfill_absences
from union_meetings.attendance.phase import absences_due
from union_meetings.attendance.roster import Roster, RosterEntry, eligible_members
from union_meetings.models import PRESENT_STATUSES, AttendanceRecord, Meeting

logger = logging.getLogger(__name__)


class Tier(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    REGULAR = "Regular"
    POOR = "Poor"


# Lower bounds, inclusive, checked in order
TIER_THRESHOLDS = [
    (2.5, Tier.EXCELLENT),
    (2.0, Tier.GOOD),
    (1.0, Tier.REGULAR),
]


def tier_for(average: float) -> Tier:
    for threshold, tier in TIER_THRESHOLDS:
        if average >= threshold:
            return tier
    return Tier.POOR


@dataclass
class AnnualStat:
    user_id: int
    name: str
    meetings_count: int
    score_sum: int
    attended_count: int
    average: float
    attendance_rate: float
    tier: Tier


@dataclass
class CohortStat:
    members: int
    meetings: int
    mean_average: float
    tiers: dict[Tier, int] = field(default_factory=lambda: {tier: 0 for tier in Tier})


@dataclass
class AnnualReport:
    year: int
    per_user: list[AnnualStat]
    cohort: CohortStat


def build_annual_stat(
    member: RosterEntry, meetings_count: int, records: list[AttendanceRecord]
) -> AnnualStat:
    """Aggregate one member's records over ``meetings_count`` meetings."""
    score_sum = sum(r.score for r in records)
    attended = sum(1 for r in records if r.status in PRESENT_STATUSES)
    if meetings_count:
        average = score_sum / meetings_count
        rate = attended / meetings_count
    else:
        # No meetings means no participation was expected
        average = 0.0
        rate = 0.0
    return AnnualStat(
        user_id=member.user_id,
        name=member.name,
        meetings_count=meetings_count,
        score_sum=score_sum,
        attended_count=attended,
        average=average,
        attendance_rate=rate,
        tier=tier_for(average),
    )


def summarize_cohort(per_user: list[AnnualStat], meetings_count: int) -> CohortStat:
    cohort = CohortStat(members=len(per_user), meetings=meetings_count, mean_average=0.0)
    for stat in per_user:
        cohort.tiers[stat.tier] += 1
    if per_user:
        cohort.mean_average = sum(s.average for s in per_user) / len(per_user)
    return cohort


def meetings_in_year(session: Session, year: int) -> list[Meeting]:
    return list(
        session.exec(
            select(Meeting)
            .where(Meeting.scheduled_date >= date(year, 1, 1))
            .where(Meeting.scheduled_date <= date(year, 12, 31))
            .order_by(Meeting.scheduled_date, Meeting.scheduled_time)
        ).all()
    )


MONTHS = range(1, 13)


@dataclass
class MonthlyParticipation:
    month: int
    meetings: int
    participants: int
    rate: float


def monthly_participation(
    session: Session, roster: Roster, year: int
) -> list[MonthlyParticipation]:
    """Share of eligible members present at least once in each month of ``year``.

    Only check-ins count (full attendance or late), so no backfill is needed.
    Months without meetings report zero.
    """
    eligible_ids = {m.user_id for m in eligible_members(roster)}
    meetings = meetings_in_year(session, year)
    month_of = {m.id: m.scheduled_date.month for m in meetings}
    meetings_per_month = Counter(month_of.values())

    present: dict[int, set[int]] = defaultdict(set)
    if month_of:
        records = session.exec(
            select(AttendanceRecord)
            .where(col(AttendanceRecord.meeting_id).in_(list(month_of)))
            .where(col(AttendanceRecord.status).in_(list(PRESENT_STATUSES)))
        ).all()
        for record in records:
            if record.user_id in eligible_ids:
                present[month_of[record.meeting_id]].add(record.user_id)

    total = len(eligible_ids)
    return [
        MonthlyParticipation(
            month=month,
            meetings=meetings_per_month[month],
            participants=len(present[month]),
            rate=len(present[month]) / total if total else 0.0,
        )
        for month in MONTHS
    ]


def _records_by_user(
    session: Session, meetings: list[Meeting]
) -> dict[int, list[AttendanceRecord]]:
    by_user: dict[int, list[AttendanceRecord]] = defaultdict(list)
    meeting_ids = [m.id for m in meetings]
    if not meeting_ids:
        return by_user
    records = session.exec(
        select(AttendanceRecord).where(col(AttendanceRecord.meeting_id).in_(meeting_ids))
    ).all()
    for record in records:
        by_user[record.user_id].append(record)
    return by_user


def _prepare_year(
    session: Session, roster: Roster, year: int, now: datetime
) -> list[Meeting]:
    """Load the year's meetings, backfilling those whose window has passed."""
    meetings = meetings_in_year(session, year)
    for meeting in meetings:
        if absences_due(meeting.scheduled_start, now):
            backfill_absences(session, roster, meeting, now)
    return meetings


def annual_statistics(
    session: Session, roster: Roster, year: int, now: datetime
) -> AnnualReport:
    """Compute per-member and cohort statistics for ``year``."""
    meetings = _prepare_year(session, roster, year, now)
    by_user = _records_by_user(session, meetings)

    per_user = [
        build_annual_stat(member, len(meetings), by_user.get(member.user_id, []))
        for member in eligible_members(roster)
    ]
    cohort = summarize_cohort(per_user, len(meetings))
    logger.info(
        f"Annual statistics for {year}: {cohort.members} members, {cohort.meetings} meetings"
    )
    return AnnualReport(year=year, per_user=per_user, cohort=cohort)


def member_year(
    session: Session, roster: Roster, member: RosterEntry, year: int, now: datetime
) -> tuple[AnnualStat, list[AttendanceRecord]]:
    """One member's annual stat together with their records for the year."""
    meetings = _prepare_year(session, roster, year, now)
    records = _records_by_user(session, meetings).get(member.user_id, [])
    records.sort(key=lambda r: (r.meeting.scheduled_date, r.meeting.scheduled_time))
    return build_annual_stat(member, len(meetings), records), records

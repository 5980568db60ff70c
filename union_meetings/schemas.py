"""Request and response bodies for the JSON API.

Field names are snake_case in Python and camelCase on the wire.
"""
from datetime import date, datetime, time

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from union_meetings.attendance.annual import (
    AnnualReport,
    AnnualStat,
    CohortStat,
    MonthlyParticipation,
    Tier,
)
from union_meetings.attendance.phase import Phase
from union_meetings.models import AttendanceRecord, AttendanceStatus, Meeting


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MeetingWrite(CamelModel):
    """Body for creating or editing a meeting."""
    title: str
    scheduled_date: date
    scheduled_time: time
    category: str
    location: str
    description: str | None = None


class MeetingRead(CamelModel):
    id: int
    title: str
    scheduled_date: date
    scheduled_time: time
    category: str
    location: str
    description: str | None
    phase: Phase

    @classmethod
    def build(cls, meeting: Meeting, phase: Phase) -> "MeetingRead":
        return cls(
            id=meeting.id,
            title=meeting.title,
            scheduled_date=meeting.scheduled_date,
            scheduled_time=meeting.scheduled_time,
            category=meeting.category,
            location=meeting.location,
            description=meeting.description,
            phase=phase,
        )


class MeetingCreated(CamelModel):
    meeting: MeetingRead
    phase: Phase


class CheckInResponse(CamelModel):
    status: AttendanceStatus
    score: int
    phase: Phase


class StatusOverride(CamelModel):
    # Validated against AttendanceStatus by the override service
    status: str


class AttendanceEntry(CamelModel):
    meeting_id: int
    user_id: int
    name: str | None = None
    status: AttendanceStatus
    score: int
    checked_in_at: datetime | None

    @classmethod
    def build(cls, record: AttendanceRecord, names: dict[int, str]) -> "AttendanceEntry":
        return cls(
            meeting_id=record.meeting_id,
            user_id=record.user_id,
            name=names.get(record.user_id),
            status=record.status,
            score=record.score,
            checked_in_at=record.checked_in_at,
        )


class MeetingStatistics(CamelModel):
    meeting: MeetingRead
    attendees: list[AttendanceEntry]
    absentees: list[AttendanceEntry]
    all: list[AttendanceEntry]


class AnnualStatRead(CamelModel):
    user_id: int
    name: str
    meetings_count: int
    score_sum: int
    attended_count: int
    average: float
    attendance_rate: float
    tier: Tier

    @classmethod
    def build(cls, stat: AnnualStat) -> "AnnualStatRead":
        return cls(**vars(stat))


class CohortRead(CamelModel):
    members: int
    meetings: int
    mean_average: float
    tiers: dict[Tier, int]

    @classmethod
    def build(cls, cohort: CohortStat) -> "CohortRead":
        return cls(
            members=cohort.members,
            meetings=cohort.meetings,
            mean_average=cohort.mean_average,
            tiers=dict(cohort.tiers),
        )


class AnnualStatisticsRead(CamelModel):
    year: int
    per_user: list[AnnualStatRead]
    cohort: CohortRead

    @classmethod
    def build(cls, report: AnnualReport) -> "AnnualStatisticsRead":
        return cls(
            year=report.year,
            per_user=[AnnualStatRead.build(s) for s in report.per_user],
            cohort=CohortRead.build(report.cohort),
        )


class MonthRead(CamelModel):
    month: int
    meetings: int
    participants: int
    rate: float


class MonthlyParticipationRead(CamelModel):
    year: int
    members: int
    months: list[MonthRead]

    @classmethod
    def build(
        cls, year: int, members: int, months: list[MonthlyParticipation]
    ) -> "MonthlyParticipationRead":
        return cls(year=year, members=members, months=[MonthRead(**vars(m)) for m in months])


class MemberYearRead(CamelModel):
    year: int
    stat: AnnualStatRead
    records: list[AttendanceEntry]


class SweepRead(CamelModel):
    meetings: int
    inserted: int
    failed: int

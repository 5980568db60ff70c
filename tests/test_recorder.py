"""Tests for check-in recording and administrative overrides."""

from datetime import datetime

import pytest
from sqlmodel import Session, select

from union_meetings.attendance.phase import Phase
from union_meetings.attendance.recorder import override_attendance, register_attendance
from union_meetings.attendance.roster import DatabaseRoster
from union_meetings.core.errors import (
    InvalidStatusOverride,
    NotFound,
    WindowClosed,
    WindowNotOpenYet,
)
from union_meetings.models import AttendanceRecord, AttendanceStatus, Meeting


def at(hour: int, minute: int) -> datetime:
    return datetime(2025, 1, 1, hour, minute)


def records(session: Session) -> list[AttendanceRecord]:
    session.expire_all()
    return list(session.exec(select(AttendanceRecord).order_by(AttendanceRecord.user_id)).all())


class TestRegisterAttendance:
    @pytest.mark.parametrize(
        "now, status, score, phase",
        [
            (at(9, 50), AttendanceStatus.FULL_ATTENDANCE, 3, Phase.CHECK_IN_OPEN),
            (at(10, 14), AttendanceStatus.FULL_ATTENDANCE, 3, Phase.CHECK_IN_OPEN),
            (at(10, 15), AttendanceStatus.LATE, 2, Phase.LATE_ALLOWED),
            (at(10, 30), AttendanceStatus.UNEXCUSED_ABSENCE, 0, Phase.UNEXCUSED_WINDOW),
            (at(10, 59), AttendanceStatus.UNEXCUSED_ABSENCE, 0, Phase.UNEXCUSED_WINDOW),
        ],
    )
    def test_classification_by_phase(
        self, session: Session, roster: DatabaseRoster, meeting: Meeting, now, status, score, phase
    ):
        result = register_attendance(session, roster, meeting.id, 1, now)

        assert (result.status, result.score, result.phase) == (status, score, phase)
        [record] = records(session)
        assert record.status == status
        assert record.score == score
        assert record.checked_in_at == now
        assert record.checked_in_at.tzinfo is None

    @pytest.mark.parametrize(
        "now, error",
        [(at(9, 49), WindowNotOpenYet), (at(11, 0), WindowClosed), (at(18, 0), WindowClosed)],
    )
    def test_refused_outside_window_writes_nothing(
        self, session: Session, roster: DatabaseRoster, meeting: Meeting, now, error
    ):
        with pytest.raises(error):
            register_attendance(session, roster, meeting.id, 1, now)
        assert records(session) == []

    def test_unknown_meeting(self, session: Session, roster: DatabaseRoster):
        with pytest.raises(NotFound):
            register_attendance(session, roster, 999, 1, at(10, 0))

    def test_unknown_member(self, session: Session, roster: DatabaseRoster, meeting: Meeting):
        with pytest.raises(NotFound):
            register_attendance(session, roster, meeting.id, 999, at(10, 0))

    def test_inactive_member_may_still_check_in(
        self, session: Session, roster: DatabaseRoster, meeting: Meeting
    ):
        result = register_attendance(session, roster, meeting.id, 5, at(10, 0))
        assert result.status == AttendanceStatus.FULL_ATTENDANCE

    def test_repeat_within_phase_is_idempotent(
        self, session: Session, roster: DatabaseRoster, meeting: Meeting
    ):
        first = register_attendance(session, roster, meeting.id, 1, at(10, 16))
        second = register_attendance(session, roster, meeting.id, 1, at(10, 20))

        assert (first.status, first.score) == (second.status, second.score)
        [record] = records(session)
        assert record.status == AttendanceStatus.LATE

    def test_repeat_in_later_phase_overwrites(
        self, session: Session, roster: DatabaseRoster, meeting: Meeting
    ):
        """A second check-in replaces the first, even when it downgrades it."""
        register_attendance(session, roster, meeting.id, 1, at(9, 55))
        result = register_attendance(session, roster, meeting.id, 1, at(10, 40))

        assert result.status == AttendanceStatus.UNEXCUSED_ABSENCE
        [record] = records(session)
        assert record.status == AttendanceStatus.UNEXCUSED_ABSENCE
        assert record.score == 0
        assert record.checked_in_at == at(10, 40)


class TestOverrideAttendance:
    def test_override_creates_record_without_check_in_time(
        self, session: Session, roster: DatabaseRoster, meeting: Meeting
    ):
        record = override_attendance(session, roster, meeting.id, 2, "ExcusedAbsence")

        assert record.status == AttendanceStatus.EXCUSED_ABSENCE
        assert record.score == 2
        assert record.checked_in_at is None

    def test_override_keeps_check_in_time(
        self, session: Session, roster: DatabaseRoster, meeting: Meeting
    ):
        register_attendance(session, roster, meeting.id, 2, at(10, 45))
        record = override_attendance(session, roster, meeting.id, 2, "Late")

        assert record.status == AttendanceStatus.LATE
        assert record.score == 2
        assert record.checked_in_at == at(10, 45)
        assert len(records(session)) == 1

    def test_invalid_status(self, session: Session, roster: DatabaseRoster, meeting: Meeting):
        with pytest.raises(InvalidStatusOverride):
            override_attendance(session, roster, meeting.id, 2, "Present")
        assert records(session) == []

    def test_unknown_member(self, session: Session, roster: DatabaseRoster, meeting: Meeting):
        with pytest.raises(NotFound):
            override_attendance(session, roster, meeting.id, 42, "Late")

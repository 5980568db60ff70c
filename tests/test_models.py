"""Tests for database models."""

from datetime import date, datetime, time

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from union_meetings.models import (
    STATUS_SCORES,
    AttendanceRecord,
    AttendanceStatus,
    Meeting,
    score_for,
)


class TestMeetingModel:
    """Tests for the Meeting model."""

    def test_create_meeting(self, session: Session):
        """Test creating a meeting and reading back its start."""
        meeting = Meeting(
            title="Asamblea",
            scheduled_date=date(2025, 3, 14),
            scheduled_time=time(18, 30),
            category="Extraordinaria",
            location="Sede",
        )
        session.add(meeting)
        session.commit()

        retrieved = session.get(Meeting, meeting.id)
        assert retrieved.title == "Asamblea"
        assert retrieved.description is None
        assert retrieved.scheduled_start.isoformat() == "2025-03-14T18:30:00"

    def test_delete_cascades_to_records(self, session: Session, meeting: Meeting):
        """Test deleting a meeting removes its attendance records."""
        session.add(
            AttendanceRecord(
                meeting_id=meeting.id,
                user_id=1,
                status=AttendanceStatus.FULL_ATTENDANCE,
                score=3,
            )
        )
        session.commit()

        session.delete(meeting)
        session.commit()

        assert session.exec(select(AttendanceRecord)).all() == []


class TestAttendanceRecordModel:
    """Tests for the AttendanceRecord model."""

    def test_one_record_per_meeting_and_user(self, session: Session, meeting: Meeting):
        """Test that (meeting_id, user_id) must be unique."""
        for status in (AttendanceStatus.FULL_ATTENDANCE, AttendanceStatus.LATE):
            session.add(
                AttendanceRecord(
                    meeting_id=meeting.id, user_id=7, status=status, score=score_for(status)
                )
            )

        with pytest.raises(IntegrityError):
            session.commit()

    def test_check_in_time_is_stored_as_naive_civil_time(self, session: Session, meeting: Meeting):
        """Test checked_in_at comes back exactly as written, without a timezone."""
        checked_in = datetime(2025, 1, 1, 9, 55, 30)
        record = AttendanceRecord(
            meeting_id=meeting.id,
            user_id=7,
            status=AttendanceStatus.FULL_ATTENDANCE,
            score=3,
            checked_in_at=checked_in,
        )
        session.add(record)
        session.commit()
        session.expire_all()

        retrieved = session.get(AttendanceRecord, record.id)
        assert retrieved.checked_in_at == checked_in
        assert retrieved.checked_in_at.tzinfo is None

    def test_status_round_trips(self, session: Session, meeting: Meeting):
        record = AttendanceRecord(
            meeting_id=meeting.id,
            user_id=7,
            status=AttendanceStatus.EXCUSED_ABSENCE,
            score=2,
        )
        session.add(record)
        session.commit()
        session.expire_all()

        retrieved = session.get(AttendanceRecord, record.id)
        assert retrieved.status is AttendanceStatus.EXCUSED_ABSENCE
        assert retrieved.checked_in_at is None
        assert retrieved.meeting.id == meeting.id


class TestScoreTable:
    def test_scores(self):
        assert score_for(AttendanceStatus.FULL_ATTENDANCE) == 3
        assert score_for(AttendanceStatus.LATE) == 2
        assert score_for(AttendanceStatus.EXCUSED_ABSENCE) == 2
        assert score_for(AttendanceStatus.UNEXCUSED_ABSENCE) == 0

    def test_every_status_has_a_score(self):
        assert set(STATUS_SCORES) == set(AttendanceStatus)

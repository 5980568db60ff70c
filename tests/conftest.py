"""Shared test fixtures."""

from datetime import date, datetime, time

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event as sa_event
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from union_meetings.attendance.roster import DatabaseRoster
from union_meetings.core.clock import get_clock
from union_meetings.core.database import get_session, set_sqlite_pragma
from union_meetings.main import app
from union_meetings.models import Meeting, Member


class FakeClock:
    """Clock that stays where the test puts it."""

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def set(self, hour: int, minute: int, day: date = date(2025, 1, 1)) -> None:
        self.current = datetime.combine(day, time(hour, minute))


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    sa_event.listen(engine, "connect", set_sqlite_pragma)
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="clock")
def clock_fixture() -> FakeClock:
    """Clock parked at 09:00 on the day of the sample meeting."""
    return FakeClock(datetime(2025, 1, 1, 9, 0))


@pytest.fixture(name="client")
def client_fixture(session: Session, clock: FakeClock):
    """Create a test client with the test database session and fake clock."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_clock] = lambda: clock
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="members")
def members_fixture(session: Session) -> list[Member]:
    """Four eligible members, one inactive and one not fully registered."""
    members = [
        Member(user_id=1, name="Ana"),
        Member(user_id=2, name="Bruno"),
        Member(user_id=3, name="Carla"),
        Member(user_id=4, name="Diego"),
        Member(user_id=5, name="Elena", active=False),
        Member(user_id=6, name="Fausto", fully_registered=False),
    ]
    for member in members:
        session.add(member)
    session.commit()
    return members


@pytest.fixture(name="roster")
def roster_fixture(session: Session, members: list[Member]) -> DatabaseRoster:
    return DatabaseRoster(session)


@pytest.fixture(name="meeting")
def meeting_fixture(session: Session) -> Meeting:
    """Meeting scheduled for 2025-01-01 10:00."""
    meeting = Meeting(
        title="Asamblea Ordinaria",
        scheduled_date=date(2025, 1, 1),
        scheduled_time=time(10, 0),
        category="Ordinaria",
        location="Auditorio",
        description="Informe anual",
    )
    session.add(meeting)
    session.commit()
    session.refresh(meeting)
    return meeting


@pytest.fixture(name="make_meeting")
def make_meeting_fixture(session: Session):
    """Factory for meetings on arbitrary dates."""

    def make_meeting(day: date, at: time = time(10, 0), title: str = "Reunión") -> Meeting:
        meeting = Meeting(
            title=title,
            scheduled_date=day,
            scheduled_time=at,
            category="Ordinaria",
            location="Sala 1",
        )
        session.add(meeting)
        session.commit()
        session.refresh(meeting)
        return meeting

    return make_meeting

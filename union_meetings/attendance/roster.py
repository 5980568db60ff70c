"""Member roster access.

The roster belongs to the external user directory. Everything in this
package talks to it through the ``Roster`` protocol; ``DatabaseRoster`` is
the implementation backed by the local ``member`` mirror table.
"""
from dataclasses import dataclass
from typing import Protocol

from fastapi import Depends
from sqlmodel import Session, select

from union_meetings.core.database import get_session
from union_meetings.models import Member


@dataclass(frozen=True)
class RosterEntry:
    user_id: int
    name: str
    active: bool
    fully_registered: bool

    @property
    def eligible(self) -> bool:
        """Active, fully-registered members are expected at every meeting."""
        return self.active and self.fully_registered


class Roster(Protocol):
    def members(self) -> list[RosterEntry]: ...

    def get(self, user_id: int) -> RosterEntry | None: ...


class DatabaseRoster:
    """Roster read from the ``member`` table."""

    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def _entry(member: Member) -> RosterEntry:
        return RosterEntry(
            user_id=member.user_id,
            name=member.name,
            active=member.active,
            fully_registered=member.fully_registered,
        )

    def members(self) -> list[RosterEntry]:
        rows = self.session.exec(select(Member).order_by(Member.user_id)).all()
        return [self._entry(m) for m in rows]

    def get(self, user_id: int) -> RosterEntry | None:
        member = self.session.get(Member, user_id)
        return self._entry(member) if member else None


def eligible_members(roster: Roster) -> list[RosterEntry]:
    return [entry for entry in roster.members() if entry.eligible]


def member_names(roster: Roster) -> dict[int, str]:
    """Display names keyed by user id, read in one pass over the roster."""
    return {entry.user_id: entry.name for entry in roster.members()}


def get_roster(session: Session = Depends(get_session)) -> Roster:
    """Dependency for getting the member roster."""
    return DatabaseRoster(session)

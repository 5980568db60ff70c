"""Local mirror of the external member directory.

The directory itself is owned elsewhere; this table only holds what the
attendance subsystem needs to know about each member. It is refreshed with
``scripts/import_roster.py``.
"""

from sqlmodel import Field, SQLModel


class Member(SQLModel, table=True):
    """A union member as seen by the roster.

    Attributes:
        user_id: Member id in the external user directory.
        name: Display name.
        active: Whether the membership is currently active.
        fully_registered: Whether the member completed registration.
    """
    user_id: int = Field(primary_key=True)
    name: str = ""
    active: bool = Field(default=True)
    fully_registered: bool = Field(default=True)

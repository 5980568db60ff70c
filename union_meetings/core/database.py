"""Database configuration and session management.

SQLite is the default store. PostgreSQL works too; the only dialect-specific
code is ``dialect_insert``, which hands back an ``insert()`` construct that
supports ``ON CONFLICT`` clauses.

SQLite Configuration Choices:
    - **WAL (Write-Ahead Logging)**: Allows concurrent readers while writing.
      Statistics reads trigger backfill inserts, so readers and writers
      overlap constantly.

    - **Foreign Keys**: Disabled by default in SQLite. Enabled so that
      deleting a Meeting cascades to its attendance records.

    - **check_same_thread=False**: FastAPI runs sync dependencies in a
      threadpool, so a connection may be used from more than one thread.
"""

from sqlalchemy import event as sa_event
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session, SQLModel, create_engine

from union_meetings.core.config import settings

connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,
    echo=settings.debug,  # Log SQL statements when DEBUG=true
)


def set_sqlite_pragma(dbapi_connection, connection_record):
    """Configure SQLite pragmas on each new connection.

    These settings are connection-level, not database-level, so they must
    be set each time a new connection is established from the pool.
    """
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


if engine.dialect.name == "sqlite":
    sa_event.listen(engine, "connect", set_sqlite_pragma)


def dialect_insert(session: Session):
    """Return the ``insert`` construct of the session's dialect.

    Both supported dialects expose ``on_conflict_do_update`` and
    ``on_conflict_do_nothing`` on the returned statement.
    """
    name = session.get_bind().dialect.name
    if name == "postgresql":
        return postgresql.insert
    if name == "sqlite":
        return sqlite.insert
    raise RuntimeError(f"Unsupported database dialect: {name}")


def create_db_and_tables():
    """Create all database tables."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """Dependency for getting database session."""
    with Session(engine) as session:
        yield session

"""Database engine and helpers.

The engine lives on an explicitly constructed `Database` object rather
than at module level, so the application and each test run can own an
isolated instance. The FastAPI app keeps its `Database` on `app.state`
and `get_session` hands out one session per request.
"""

from typing import Iterator

from fastapi import Request
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from .config import Settings
from . import models  # noqa: F401  registers the tables on SQLModel.metadata


class Database:
    """Owns the SQLAlchemy engine for one configured backend."""

    def __init__(self, settings: Settings):
        self.settings = settings
        kwargs = {"echo": settings.DB_ECHO}
        if settings.DB_DIALECT == "sqlite":
            kwargs["connect_args"] = {"check_same_thread": False}
            if settings.is_memory_db:
                # one shared connection, otherwise every checkout sees an empty database
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True
        self.engine = create_engine(settings.database_url(), **kwargs)

    def create_db_and_tables(self):
        """Create any missing tables for the declared models.

        Existing tables are left untouched; there is no migration step.
        """
        SQLModel.metadata.create_all(self.engine)

    def reset(self):
        """Drop and recreate every table. Used between test runs."""
        SQLModel.metadata.drop_all(self.engine)
        SQLModel.metadata.create_all(self.engine)

    def session(self) -> Session:
        return Session(self.engine)

    def dispose(self):
        self.engine.dispose()


def get_session(request: Request) -> Iterator[Session]:
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session bound to the app's `Database` and
    ensures it is closed when the request scope finishes.
    """
    database: Database = request.app.state.database
    with database.session() as session:
        yield session

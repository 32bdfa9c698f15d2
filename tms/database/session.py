"""
Database Session Management
============================

Handles database connections and session lifecycle.

There is no module-level engine: build a SessionProvider and hand it to
the repositories that need it.

Usage:
    provider = SessionProvider.from_url("sqlite:///./data/tms.db")
    create_all_tables(provider.engine)

    with provider.transaction() as session:
        session.add(company)
"""

import os
import threading
from contextlib import contextmanager, nullcontext
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from tms.config import settings


def create_db_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """
    Create and configure the database engine.

    Args:
        database_url: SQLAlchemy URL. Defaults to settings.database_url.
        echo: Log emitted SQL. Defaults to settings.app_debug.
    """
    database_url = database_url or settings.database_url
    echo = settings.app_debug if echo is None else echo

    if not database_url.startswith("sqlite"):
        return create_engine(database_url, echo=echo, pool_pre_ping=True)

    in_memory = ":memory:" in database_url or database_url.rstrip("/") == "sqlite:"

    # Ensure data directory exists
    if not in_memory and ":///" in database_url:
        db_dir = os.path.dirname(database_url.split(":///")[1])
        if db_dir and not os.path.exists(db_dir):
            os.makedirs(db_dir, exist_ok=True)

    # An in-memory database only lives as long as its single connection
    engine = create_engine(
        database_url,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool if in_memory else None,
        echo=echo
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if not in_memory:
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


class SessionProvider:
    """
    Supplies short-lived sessions bound to one engine.

    Safe for concurrent use: every call opens a fresh Session, and the
    engine's connection pool hands each one its own connection.

    Sessions are created with expire_on_commit=False so entities returned
    from a committed unit of work keep their loaded column values after the
    session closes. Relations that were not loaded stay lazy and raise
    DetachedInstanceError when touched outside a session.

    An in-memory SQLite engine has a single connection (StaticPool), so its
    sessions are serialized across threads: a unit of work on one thread
    waits until another thread's session closes, and never sees its
    uncommitted rows. Nesting on the same thread is allowed.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._guard = threading.RLock() if isinstance(engine.pool, StaticPool) else nullcontext()
        self._factory = sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_url(cls, database_url: Optional[str] = None, echo: Optional[bool] = None) -> "SessionProvider":
        """Build a provider with a freshly configured engine."""
        return cls(create_db_engine(database_url, echo))

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """
        Scoped read-only session. Nothing is committed.

        Usage:
            with provider.session() as session:
                session.get(Client, 1)
        """
        with self._guard:
            db = self._factory()
            try:
                yield db
            finally:
                db.close()

    @contextmanager
    def transaction(self) -> Generator[Session, None, None]:
        """
        Session wrapped in exactly one transaction.

        Commits when the block exits normally. On any exception the
        transaction is rolled back before the exception propagates.
        """
        with self._guard:
            db = self._factory()
            try:
                yield db
                db.commit()
            except BaseException:
                db.rollback()
                raise
            finally:
                db.close()

    def dispose(self) -> None:
        """Close all pooled connections."""
        self.engine.dispose()


def create_all_tables(engine: Engine) -> None:
    """Create all tables in the database."""
    from tms.models import Base

    Base.metadata.create_all(bind=engine)


def drop_all_tables(engine: Engine) -> None:
    """Drop all tables in the database."""
    from tms.models import Base

    Base.metadata.drop_all(bind=engine)

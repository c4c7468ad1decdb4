"""Engine/session helpers and the transaction boundary used by services."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache, wraps
from typing import Callable, Iterator, TypeVar

from sqlalchemy import create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from palette.core.config import get_settings

Base = declarative_base()

T = TypeVar("T")


@lru_cache
def get_engine():
    settings = get_settings()
    url = (settings.database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be configured to use the SQL backend.")
    engine = create_engine(url, future=True, pool_pre_ping=True)
    if url.startswith("sqlite"):
        # SQLite ships with FK enforcement disabled
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, _connection_record):
            # hand transaction control to the "begin" listener below
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON;")
            cursor.close()

        # SQLite ignores FOR UPDATE; take the write lock before the first read
        @event.listens_for(engine, "begin")
        def _begin_immediate(connection):
            connection.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


@lru_cache
def _get_sessionmaker():
    return sessionmaker(bind=get_engine(), autoflush=False, autocommit=False, expire_on_commit=False, future=True)


@contextmanager
def get_session() -> Iterator[Session]:
    session: Session = _get_sessionmaker()()
    try:
        yield session
    finally:
        session.close()


@contextmanager
def transaction() -> Iterator[Session]:
    """Yield a session that commits on success and rolls back on any exception."""
    with get_session() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise


def transactional(func: Callable[..., T]) -> Callable[..., T]:
    """Run ``func`` as one atomic unit, passing the session as ``session=``.

    A caller that already holds a session can pass it explicitly; the call then
    joins that transaction instead of opening a new one.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        if kwargs.get("session") is not None:
            return func(*args, **kwargs)
        with transaction() as session:
            kwargs["session"] = session
            return func(*args, **kwargs)

    return wrapper

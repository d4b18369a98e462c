"""Database session management for the private dining service."""

from contextlib import contextmanager
from typing import Generator

from sqlalchemy import create_engine as sa_create_engine
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from core.config import settings


class DatabaseConfig:
    """Database configuration settings."""

    POOL_SIZE: int = 5
    MAX_OVERFLOW: int = 10
    POOL_TIMEOUT: int = 30
    POOL_RECYCLE: int = 3600
    POOL_PRE_PING: bool = True


def _begin_immediate_transactions(sqlite_engine: Engine) -> None:
    """
    Take the SQLite write lock when a transaction begins.

    pysqlite defers BEGIN until the first write, so an occupancy read and
    the insert that depends on it would not be atomic. With the driver's
    own transaction handling switched off, every transaction opens with
    BEGIN IMMEDIATE and concurrent admissions queue on the database lock.
    """

    @event.listens_for(sqlite_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(sqlite_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_engine(url: str = settings.database_url, echo: bool = False) -> Engine:
    """
    Create SQLAlchemy engine.

    SQLite gets a thread-agnostic connection (and a single shared one for
    in-memory databases); server databases get a pooled engine. File-backed
    SQLite transactions start with BEGIN IMMEDIATE, see
    _begin_immediate_transactions.

    Args:
        url: Database URL
        echo: Whether to log all SQL statements

    Returns:
        SQLAlchemy engine
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool
            return sa_create_engine(url, echo=echo, **kwargs)

        sqlite_engine = sa_create_engine(url, echo=echo, **kwargs)
        _begin_immediate_transactions(sqlite_engine)
        return sqlite_engine

    return sa_create_engine(
        url,
        echo=echo,
        pool_size=DatabaseConfig.POOL_SIZE,
        max_overflow=DatabaseConfig.MAX_OVERFLOW,
        pool_timeout=DatabaseConfig.POOL_TIMEOUT,
        pool_recycle=DatabaseConfig.POOL_RECYCLE,
        pool_pre_ping=DatabaseConfig.POOL_PRE_PING,
    )


def create_session_factory(bind: Engine) -> sessionmaker:
    """Create a session factory bound to an engine."""
    return sessionmaker(
        bind=bind,
        class_=Session,
        expire_on_commit=False,
        autoflush=False,
    )


# Global engine instance
engine: Engine = create_engine(echo=settings.debug)

# Session factory
SessionLocal = create_session_factory(engine)


def get_session() -> Generator[Session, None, None]:
    """
    Dependency for getting a database session.

    Yields:
        Session instance
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def get_session_context() -> Generator[Session, None, None]:
    """
    Context manager for getting a database session.

    Example:
        with get_session_context() as session:
            # use session
            pass
    """
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(bind: Engine = None) -> None:
    """Initialize database by creating all tables."""
    from .base import Base
    from . import models_sqlalchemy  # noqa: F401  (registers the tables)

    Base.metadata.create_all(bind=bind or engine)


def close_db() -> None:
    """Close database engine and all connections."""
    engine.dispose()

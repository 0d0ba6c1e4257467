"""Database session management."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from jobrank.core.config import get_settings
from jobrank.core.errors import StorageUnavailable

SessionFactory = Callable[[], Session]


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite connections are shared across worker threads."""

    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, pool_pre_ping=True, future=True, connect_args=connect_args)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False, future=True)


_settings = get_settings()
_engine = build_engine(_settings.database_url)
_SessionLocal = build_session_factory(_engine)


def get_engine() -> Engine:
    """Return the configured SQLAlchemy engine."""

    return _engine


def get_session_factory() -> sessionmaker[Session]:
    return _SessionLocal


@contextmanager
def scoped(factory: SessionFactory) -> Generator[Session, None, None]:
    """Transactional scope over a session from ``factory``."""

    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Context manager wrapper around a database session."""

    with scoped(_SessionLocal) as session:
        yield session


@contextmanager
def storage_scope(factory: SessionFactory) -> Generator[Session, None, None]:
    """Like :func:`scoped`, but commit and connection failures surface as ``StorageUnavailable``."""

    try:
        with scoped(factory) as session:
            yield session
    except SQLAlchemyError as exc:
        raise StorageUnavailable("database transaction failed") from exc

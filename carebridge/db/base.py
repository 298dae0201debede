"""Database engine and session configuration."""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from carebridge.config import settings

_engine = None
_session_factory = None


def get_engine():
    """Create (once) the SQLAlchemy engine for settings.database_url."""
    global _engine
    if _engine is None:
        connect_args = {}
        if settings.database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        _engine = create_engine(
            settings.database_url,
            connect_args=connect_args,
            echo=settings.sql_echo,
            pool_pre_ping=True,
        )
    return _engine


def get_session_factory():
    """Return a session factory bound to the engine."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _session_factory


def get_db() -> Generator[Session, None, None]:
    """Dependency that yields a DB session (for FastAPI)."""
    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()


def init_db() -> None:
    """Create all tables if they do not exist yet."""
    from carebridge.db.models import Base

    Base.metadata.create_all(bind=get_engine())

"""Database layer: models, session, repository and keep-alive."""

from carebridge.db.base import get_db, get_engine, get_session_factory, init_db
from carebridge.db.keepalive import DatabaseKeepAlive
from carebridge.db.models import Base, Doctor, User
from carebridge.db.repository import UserRepository

__all__ = [
    "Base",
    "DatabaseKeepAlive",
    "Doctor",
    "User",
    "UserRepository",
    "get_db",
    "get_engine",
    "get_session_factory",
    "init_db",
]

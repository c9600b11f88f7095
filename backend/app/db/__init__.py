"""Database package for ORM, session management and the organization store."""

from .base import Base
from .organization_store import SqlOrganizationStore
from .session import get_engine, get_session, get_session_factory

__all__ = [
    "Base",
    "SqlOrganizationStore",
    "get_engine",
    "get_session",
    "get_session_factory",
]

"""Async database access with SQLAlchemy 2.0 and asyncpg.

Core components:
- **base**: Declarative base and common model fields
- **models**: ``PersonalInfo`` and ``Dependent`` tables
- **session**: Async engine, session management and the FastAPI dependency
- **repository**: Generic repository with CRUD operations
"""

from viron.infrastructure.database.base import Base, BaseModel
from viron.infrastructure.database.models import Dependent, PersonalInfo
from viron.infrastructure.database.repository import BaseRepository
from viron.infrastructure.database.session import (
    DatabaseSession,
    check_database_connection,
    close_database,
    get_async_session,
    get_db,
    get_engine,
)

__all__ = [
    "Base",
    "BaseModel",
    "BaseRepository",
    "DatabaseSession",
    "Dependent",
    "PersonalInfo",
    "check_database_connection",
    "close_database",
    "get_async_session",
    "get_db",
    "get_engine",
]

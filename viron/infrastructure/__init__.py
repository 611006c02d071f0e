"""Persistence for Viron: async SQLAlchemy on PostgreSQL (asyncpg).

- **database**: engine, sessions, declarative base, ORM models and the
  generic ``BaseRepository``
- **repositories**: entity-specific repositories built on ``BaseRepository``
"""

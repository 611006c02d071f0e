"""Viron - bookkeeping assistance backend.

Viron keeps the personal tax profile of each client and tells them which
government contributions (PhilHealth, SSS, Pag-IBIG) fall due next.

Architecture Overview:
- **API Layer**: FastAPI routes, middleware and response schemas
- **Core Layer**: Configuration, logging, tracing and the error model
- **Domain Layer**: The contribution due-date rules, free of I/O
- **Infrastructure Layer**: Async SQLAlchemy models and repositories

The domain layer never reaches for a clock or a database; the API layer
loads a profile snapshot, picks "today" and hands both to the engine.
"""

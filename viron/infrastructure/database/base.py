"""Declarative base shared by every table.

Python ``int`` columns map to BIGINT and ``datetime`` columns to timezone-aware
timestamps, so models only spell out a column type when it differs from that.
"""

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Names used by the initial migration; alembic autogenerate relies on them
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Metadata holder for the ``personal_info`` and ``dependents`` tables."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
    type_annotation_map = {
        int: BigInteger,
        datetime: DateTime(timezone=True),
    }


class BaseModel(Base):
    """Surrogate key plus creation and last-update timestamps set by the database."""

    __abstract__ = True

    id: Mapped[int] = mapped_column(primary_key=True)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self) -> str:
        """Return ``<ClassName #id>``."""
        return f"<{type(self).__name__} #{self.id}>"

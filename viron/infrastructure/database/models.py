"""ORM models for the personal tax profile of a client.

Users themselves live in the authentication service; ``user_id`` is the
identifier it hands out and is not a foreign key here.
"""

from datetime import date

from sqlalchemy import Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from viron.infrastructure.database.base import BaseModel

MEMBERSHIP_NUMBER_LENGTH = 20
DEFAULT_EMPLOYMENT_STATUS = "employed"


class PersonalInfo(BaseModel):
    """One row per user: identity details and government membership numbers."""

    __tablename__ = "personal_info"

    user_id: Mapped[int] = mapped_column(unique=True, index=True)
    full_name: Mapped[str | None] = mapped_column(String(255))
    tin: Mapped[str | None] = mapped_column(String(50))
    birth_date: Mapped[date | None] = mapped_column(Date)
    birth_place: Mapped[str | None] = mapped_column(String(255))
    citizenship: Mapped[str | None] = mapped_column(String(100))
    civil_status: Mapped[str | None] = mapped_column(String(50))
    gender: Mapped[str | None] = mapped_column(String(20))
    address: Mapped[str | None] = mapped_column(Text)
    phone: Mapped[str | None] = mapped_column(String(20))
    spouse_name: Mapped[str | None] = mapped_column(String(255))
    spouse_tin: Mapped[str | None] = mapped_column(String(50))
    employment_status: Mapped[str | None] = mapped_column(
        String(20),
        default=DEFAULT_EMPLOYMENT_STATUS,
        server_default=DEFAULT_EMPLOYMENT_STATUS,
    )
    philhealth_number: Mapped[str | None] = mapped_column(
        String(MEMBERSHIP_NUMBER_LENGTH)
    )
    sss_number: Mapped[str | None] = mapped_column(String(MEMBERSHIP_NUMBER_LENGTH))
    pagibig_number: Mapped[str | None] = mapped_column(
        String(MEMBERSHIP_NUMBER_LENGTH)
    )


class Dependent(BaseModel):
    """A dependent declared on a user's personal info."""

    __tablename__ = "dependents"

    user_id: Mapped[int] = mapped_column(index=True)
    dep_name: Mapped[str] = mapped_column(String(255), nullable=False)
    dep_birth_date: Mapped[date | None] = mapped_column(Date)
    dep_relationship: Mapped[str | None] = mapped_column(String(100))

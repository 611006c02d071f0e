"""Request and response bodies for the personal-info endpoints.

Clients send empty strings for fields left blank in the form; those are
stored as null, and a blank employment status falls back to ``employed``.
"""

from datetime import date, datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from viron.infrastructure.database.models import (
    DEFAULT_EMPLOYMENT_STATUS,
    MEMBERSHIP_NUMBER_LENGTH,
)

EmploymentStatusValue = Literal["employed", "self-employed"]


def _blank_to_none(data: Any) -> Any:  # noqa: ANN401 - raw input before validation
    if isinstance(data, dict):
        return {key: None if value == "" else value for key, value in data.items()}
    return data


class DependentRequest(BaseModel):
    """A dependent as submitted by the client."""

    dep_name: str = Field(..., min_length=1, max_length=255)
    dep_birth_date: date | None = None
    dep_relationship: str | None = Field(default=None, max_length=100)

    @model_validator(mode="before")
    @classmethod
    def blank_strings_to_none(cls, data: Any) -> Any:  # noqa: ANN401
        return _blank_to_none(data)


class PersonalInfoFields(BaseModel):
    """Free-form profile fields shared by requests and responses."""

    full_name: str | None = Field(default=None, max_length=255)
    tin: str | None = Field(default=None, max_length=50)
    birth_date: date | None = None
    birth_place: str | None = Field(default=None, max_length=255)
    citizenship: str | None = Field(default=None, max_length=100)
    civil_status: str | None = Field(default=None, max_length=50)
    gender: str | None = Field(default=None, max_length=20)
    address: str | None = None
    phone: str | None = Field(default=None, max_length=20)
    spouse_name: str | None = Field(default=None, max_length=255)
    spouse_tin: str | None = Field(default=None, max_length=50)
    philhealth_number: str | None = Field(
        default=None, max_length=MEMBERSHIP_NUMBER_LENGTH
    )
    sss_number: str | None = Field(default=None, max_length=MEMBERSHIP_NUMBER_LENGTH)
    pagibig_number: str | None = Field(
        default=None, max_length=MEMBERSHIP_NUMBER_LENGTH
    )


class PersonalInfoRequest(PersonalInfoFields):
    """Body of ``POST /api/personal-info``.

    ``user_id`` (or ``userId``) is only read when the id is neither in the
    path nor in the query string.
    """

    user_id: int | None = Field(
        default=None, validation_alias=AliasChoices("user_id", "userId")
    )
    employment_status: EmploymentStatusValue = DEFAULT_EMPLOYMENT_STATUS
    dependents: list[DependentRequest] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_blanks(cls, data: Any) -> Any:  # noqa: ANN401
        data = _blank_to_none(data)
        if isinstance(data, dict) and data.get("employment_status") is None:
            data["employment_status"] = DEFAULT_EMPLOYMENT_STATUS
        return data

    def profile_values(self) -> dict[str, Any]:
        """Column values to store on ``personal_info``."""
        return self.model_dump(exclude={"user_id", "dependents"})

    def dependent_values(self) -> list[dict[str, Any]]:
        """Column values for each dependent to store."""
        return [dependent.model_dump() for dependent in self.dependents]


class DependentResponse(BaseModel):
    """A stored dependent."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    dep_name: str
    dep_birth_date: date | None = None
    dep_relationship: str | None = None


class PersonalInfoResponse(PersonalInfoFields):
    """Stored personal info plus dependents.

    A user without a record gets one with only ``user_id`` set.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    user_id: int
    employment_status: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    dependents: list[DependentResponse] = Field(default_factory=list)

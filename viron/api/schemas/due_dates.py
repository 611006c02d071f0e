"""Response body of the due-date endpoint.

Keys are camelCase on the wire (``dueDate``, ``membershipNumber``) and the due
date is rendered as ``YYYY-MM-DD``.
"""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from viron.domain.contributions import DueDateEntry


class DueDateItem(BaseModel):
    """One upcoming contribution payment."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    agency: str = Field(..., examples=["PhilHealth", "SSS", "Pag-IBIG"])
    description: str = Field(
        ...,
        examples=["SSS contribution payment (Employed) - Form R-1, R-1A, R-3"],
    )
    due_date: date = Field(..., examples=["2025-02-28"])
    membership_number: str = Field(..., examples=["34-1234567-8"])

    @classmethod
    def from_entry(cls, entry: DueDateEntry) -> "DueDateItem":
        """Build the wire form of an engine entry."""
        return cls(
            agency=entry.agency.value,
            description=entry.description,
            due_date=entry.due_date,
            membership_number=entry.membership_number,
        )


class DueDatesResponse(BaseModel):
    """``{"dueDates": [...]}``; empty when the user has no memberships on file."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    due_dates: list[DueDateItem] = Field(default_factory=list)

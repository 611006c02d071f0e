"""Value objects consumed and produced by the due-date engine."""

from dataclasses import dataclass
from datetime import date
from enum import Enum


class EmploymentStatus(Enum):
    """Employment status as stored on a personal-info record."""

    EMPLOYED = "employed"
    SELF_EMPLOYED = "self-employed"

    @property
    def label(self) -> str:
        """Human-readable form used in due-date descriptions."""
        return "Employed" if self is EmploymentStatus.EMPLOYED else "Self-employed"

    @classmethod
    def parse(cls, value: str | None) -> "EmploymentStatus | None":
        """Map a stored value to a status, or None when absent or unknown.

        Args:
            value: Raw value, e.g. ``"employed"`` or ``"self-employed"``.

        Returns:
            EmploymentStatus | None: The matching status, if any.
        """
        if value is None:
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class Agency(Enum):
    """Government body collecting the contribution."""

    PHILHEALTH = "PhilHealth"
    SSS = "SSS"
    PAGIBIG = "Pag-IBIG"


@dataclass(frozen=True, slots=True)
class TaxProfile:
    """Snapshot of the profile fields the engine reads.

    A membership number counts as present only when it is a non-empty string.
    """

    employment_status: EmploymentStatus | None = None
    philhealth_number: str | None = None
    sss_number: str | None = None
    pagibig_number: str | None = None


@dataclass(frozen=True, slots=True)
class DueDateEntry:
    """One upcoming contribution payment."""

    agency: Agency
    description: str
    due_date: date
    membership_number: str

"""Government contribution due dates (PhilHealth, SSS, Pag-IBIG).

The engine is a pure function of a ``TaxProfile`` snapshot and a reference
date, so callers decide what "today" means and where the profile comes from.
"""

from viron.domain.contributions.engine import compute_due_dates
from viron.domain.contributions.models import (
    Agency,
    DueDateEntry,
    EmploymentStatus,
    TaxProfile,
)

__all__ = [
    "Agency",
    "DueDateEntry",
    "EmploymentStatus",
    "TaxProfile",
    "compute_due_dates",
]

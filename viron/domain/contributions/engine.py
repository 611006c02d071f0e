"""Statutory contribution due-date rules.

``compute_due_dates`` evaluates each agency independently and returns the
candidates in a fixed order (PhilHealth, SSS, Pag-IBIG, Pag-IBIG quarterly
option), minus any that fall before ``as_of``.

PhilHealth
    Employed: 15th of next month when the number ends in 1-5, otherwise the
    20th. Any other trailing character, digit or not, means the 20th.
    Self-employed: last day of the current month.
SSS
    Last day of next month, for every status.
Pag-IBIG
    Employed or self-employed: 10th of next month. Self-employed members also
    get a quarterly option due on the first day of the next quarter.
"""

from collections.abc import Iterable, Iterator
from datetime import date

from viron.domain.contributions.dates import (
    add_months,
    end_of_month,
    start_of_next_quarter,
)
from viron.domain.contributions.models import (
    Agency,
    DueDateEntry,
    EmploymentStatus,
    TaxProfile,
)

PHILHEALTH_EARLY_DIGITS = frozenset("12345")
PHILHEALTH_EARLY_DAY = 15
PHILHEALTH_LATE_DAY = 20
PAGIBIG_DUE_DAY = 10

PHILHEALTH_FORMS = {
    EmploymentStatus.EMPLOYED: "PMRF, ER2",
    EmploymentStatus.SELF_EMPLOYED: "PMRF, PPP5",
}
SSS_FORMS = {
    EmploymentStatus.EMPLOYED: "R-1, R-1A, R-3",
    EmploymentStatus.SELF_EMPLOYED: "RS-1, RS-5",
}
PAGIBIG_FORMS = {
    EmploymentStatus.EMPLOYED: "ER1, MDF, MRS",
    EmploymentStatus.SELF_EMPLOYED: "MDF, POF",
}
PAGIBIG_QUARTERLY_FORMS = "MDF, POF"


def _describe(agency: Agency, context: str, forms: str) -> str:
    return f"{agency.value} contribution payment ({context}) - Form {forms}"


def _first_of_next_month(as_of: date) -> date:
    return add_months(as_of.replace(day=1), 1)


def philhealth_due_day(membership_number: str) -> int:
    """Day of month an employed member's PhilHealth payment is due.

    Args:
        membership_number: PhilHealth number as stored; not validated.

    Returns:
        int: 15 when the last character is 1-5, otherwise 20.
    """
    if membership_number[-1:] in PHILHEALTH_EARLY_DIGITS:
        return PHILHEALTH_EARLY_DAY
    return PHILHEALTH_LATE_DAY


def _philhealth(profile: TaxProfile, as_of: date) -> Iterator[DueDateEntry]:
    number = profile.philhealth_number
    status = profile.employment_status
    if not number or status is None:
        return

    if status is EmploymentStatus.EMPLOYED:
        due_date = _first_of_next_month(as_of).replace(day=philhealth_due_day(number))
    else:
        due_date = end_of_month(as_of)

    yield DueDateEntry(
        agency=Agency.PHILHEALTH,
        description=_describe(
            Agency.PHILHEALTH, status.label, PHILHEALTH_FORMS[status]
        ),
        due_date=due_date,
        membership_number=number,
    )


def _sss(profile: TaxProfile, as_of: date) -> Iterator[DueDateEntry]:
    number = profile.sss_number
    if not number:
        return

    # Anything but EMPLOYED, including an unknown status, gets the self-employed forms
    status = (
        EmploymentStatus.EMPLOYED
        if profile.employment_status is EmploymentStatus.EMPLOYED
        else EmploymentStatus.SELF_EMPLOYED
    )

    yield DueDateEntry(
        agency=Agency.SSS,
        description=_describe(Agency.SSS, status.label, SSS_FORMS[status]),
        due_date=end_of_month(_first_of_next_month(as_of)),
        membership_number=number,
    )


def _pagibig(profile: TaxProfile, as_of: date) -> Iterator[DueDateEntry]:
    number = profile.pagibig_number
    status = profile.employment_status
    if not number or status is None:
        return

    yield DueDateEntry(
        agency=Agency.PAGIBIG,
        description=_describe(
            Agency.PAGIBIG, status.label, PAGIBIG_FORMS[status]
        ),
        due_date=_first_of_next_month(as_of).replace(day=PAGIBIG_DUE_DAY),
        membership_number=number,
    )

    if status is EmploymentStatus.SELF_EMPLOYED:
        yield DueDateEntry(
            agency=Agency.PAGIBIG,
            description=_describe(
                Agency.PAGIBIG, "Quarterly Option", PAGIBIG_QUARTERLY_FORMS
            ),
            due_date=start_of_next_quarter(as_of),
            membership_number=number,
        )


def compute_due_dates(profile: TaxProfile, as_of: date) -> list[DueDateEntry]:
    """Compute the upcoming contribution due dates for a profile.

    Args:
        profile: Snapshot of the member's employment status and numbers.
        as_of: Civil date treated as "today".

    Returns:
        list[DueDateEntry]: Entries due on or after ``as_of``, in agency order.
            Empty when no membership number is set.
    """
    candidates = [
        *_philhealth(profile, as_of),
        *_sss(profile, as_of),
        *_pagibig(profile, as_of),
    ]
    return due_on_or_after(candidates, as_of)


def due_on_or_after(
    entries: Iterable[DueDateEntry], as_of: date
) -> list[DueDateEntry]:
    """Keep the entries due on ``as_of`` or later, in their original order."""
    return [entry for entry in entries if entry.due_date >= as_of]

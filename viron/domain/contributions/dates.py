"""Calendar arithmetic used by the due-date rules.

All functions work on civil dates (``datetime.date``) and are pure. Quarters
are calendar quarters: Q1 = Jan-Mar, Q2 = Apr-Jun, Q3 = Jul-Sep, Q4 = Oct-Dec.
"""

import calendar
from datetime import date

MONTHS_PER_YEAR = 12
MONTHS_PER_QUARTER = 3
QUARTERS_PER_YEAR = 4


def last_day_of_month(year: int, month: int) -> int:
    """Number of days in ``month`` of ``year`` (Gregorian, leap years included).

    Raises:
        ValueError: If ``month`` is outside 1..12.
    """
    if not 1 <= month <= MONTHS_PER_YEAR:
        msg = f"month must be in 1..12, got {month}"
        raise ValueError(msg)
    return calendar.monthrange(year, month)[1]


def end_of_month(value: date) -> date:
    """Last calendar day of the month containing ``value``."""
    return value.replace(day=last_day_of_month(value.year, value.month))


def add_months(value: date, months: int) -> date:
    """Shift ``value`` by a whole number of months, rolling the year as needed.

    The day is clamped to the length of the target month, so
    ``add_months(date(2025, 1, 31), 1)`` is ``date(2025, 2, 28)``.

    Args:
        value: Starting date.
        months: Months to add; may be negative.

    Returns:
        date: The shifted date.
    """
    total = value.year * MONTHS_PER_YEAR + value.month - 1 + months
    year, month_index = divmod(total, MONTHS_PER_YEAR)
    month = month_index + 1
    day = min(value.day, last_day_of_month(year, month))
    return date(year, month, day)


def quarter_of(month: int) -> int:
    """Calendar quarter (1-4) that ``month`` belongs to.

    Raises:
        ValueError: If ``month`` is outside 1..12.
    """
    if not 1 <= month <= MONTHS_PER_YEAR:
        msg = f"month must be in 1..12, got {month}"
        raise ValueError(msg)
    return (month - 1) // MONTHS_PER_QUARTER + 1


def start_of_next_quarter(value: date) -> date:
    """First day of the quarter after the one containing ``value``.

    Q4 rolls over to 1 January of the following year.
    """
    quarter = quarter_of(value.month)
    if quarter == QUARTERS_PER_YEAR:
        return date(value.year + 1, 1, 1)
    return date(value.year, quarter * MONTHS_PER_QUARTER + 1, 1)

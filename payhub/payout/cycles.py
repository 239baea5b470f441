# ==============================================================================
# payhub/payout/cycles.py
# ------------------------------------------------------------------------------
# Billing cycle generation. A cycle runs from the 21st of the previous month
# through the 20th of the month it is named after, both days inclusive.
# ==============================================================================

import re
from dataclasses import dataclass

MONTH_NAMES = (
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
)

MONTH_ABBR = (
    'Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
    'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec',
)

CYCLE_START_DAY = 21
CYCLE_END_DAY = 20

ALL_MONTHS = tuple(range(12))
# August, July, June, May, April: most recent first for the cycle selector
RECENT_MONTHS = (7, 6, 5, 4, 3)

_CYCLE_ID_RE = re.compile(r'^(\d{4})-(\d{2})$')


@dataclass(frozen=True)
class BillingCycle:
    label: str
    start_date_iso: str
    end_date_iso: str
    month_index: int
    year: int

    @property
    def cycle_id(self):
        """'YYYY-MM' of the month the cycle is named after."""
        return f"{self.year:04d}-{self.month_index + 1:02d}"

    def contains(self, day):
        """True if the date falls inside the cycle (inclusive on both ends)."""
        return self.start_date_iso <= day.isoformat() <= self.end_date_iso

    def to_dict(self):
        return {
            'id': self.cycle_id,
            'label': self.label,
            'startDateISO': self.start_date_iso,
            'endDateISO': self.end_date_iso,
            'monthIndex': self.month_index,
        }


def _iso_date(year, month_index, day):
    return f"{year:04d}-{month_index + 1:02d}-{day:02d}"


def generate_billing_cycle(year, month_index):
    """
    Builds the billing cycle named after month_index (0 = January) of year.

    Example: generate_billing_cycle(2025, 0) spans 2024-12-21 .. 2025-01-20 and
    is labelled "January 2025 (21 Dec - 20 Jan)".
    """
    if month_index not in ALL_MONTHS:
        raise ValueError(f"month_index must be between 0 and 11, got {month_index!r}")

    prev_month_index = (month_index + 11) % 12
    prev_month_year = year - 1 if month_index == 0 else year

    label = (f"{MONTH_NAMES[month_index]} {year} "
             f"({CYCLE_START_DAY} {MONTH_ABBR[prev_month_index]} - {CYCLE_END_DAY} {MONTH_ABBR[month_index]})")

    return BillingCycle(
        label=label,
        start_date_iso=_iso_date(prev_month_year, prev_month_index, CYCLE_START_DAY),
        end_date_iso=_iso_date(year, month_index, CYCLE_END_DAY),
        month_index=month_index,
        year=year,
    )


def generate_billing_cycles(year, months=ALL_MONTHS, descending=False):
    """
    Builds the cycles for the given month indexes of a year.

    Cycles come out in ascending month order, or most recent first when
    descending is set.
    """
    ordered = sorted(set(months), reverse=descending)
    return [generate_billing_cycle(year, month_index) for month_index in ordered]


def all_months_in_year(year):
    """January through December, ascending."""
    return generate_billing_cycles(year, ALL_MONTHS, descending=False)


def recent_months_window(year):
    """August back to April, most recent first."""
    return generate_billing_cycles(year, RECENT_MONTHS, descending=True)


def billing_cycle_for_date(day):
    """The cycle a calendar date is settled in. From the 21st on, that is next month's cycle."""
    year, month_index = day.year, day.month - 1
    if day.day >= CYCLE_START_DAY:
        if month_index == 11:
            year, month_index = year + 1, 0
        else:
            month_index += 1
    return generate_billing_cycle(year, month_index)


def parse_cycle_id(cycle_id):
    """
    Returns the cycle for a 'YYYY-MM' id.

    Raises:
        ValueError: if the id is malformed or the month is out of range.
    """
    match = _CYCLE_ID_RE.match(str(cycle_id or '').strip())
    if not match:
        raise ValueError(f"Invalid billing cycle id '{cycle_id}', expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid billing cycle month in '{cycle_id}'")
    return generate_billing_cycle(year, month - 1)

"""Chronological ordering of tagged records.

The epoch computed here is only meant for ordering records: missing years
count as 1900, missing months and days as 0.
"""

from typing import List, Sequence

from .isi_record import day, month_number, year

BASE_YEAR = 1900
DAYS_PER_MONTH = 31
DAYS_PER_YEAR = 12 * DAYS_PER_MONTH


def _as_int(value: str, default: int) -> int:
    try:
        return int(value.strip())
    except ValueError:
        return default


def epoch(record: Sequence[str]) -> int:
    """Orderable integer for the (year, month, day) of a record."""
    pub_year = _as_int(year(record), BASE_YEAR)
    pub_day = _as_int(day(record), 0)
    return pub_day + DAYS_PER_MONTH * month_number(record) + DAYS_PER_YEAR * (pub_year - BASE_YEAR)


def chronological_order(records: Sequence[Sequence[str]]) -> List[int]:
    """
    Order records most recent first.

    Args:
        records: Records in insertion order

    Returns:
        0-based positions into `records`. Records with equal epochs keep
        their insertion order; undated records end up after dated ones.
    """
    ranks = [-epoch(record) for record in records]
    return sorted(range(len(records)), key=lambda position: ranks[position])

"""
Competency Arithmetic

A competency is the MM/YYYY accounting period a record belongs to.
It is compared by plain string equality everywhere else in the ledger,
so every competency string must come out of format_competency().
"""

import calendar
import re
from datetime import date
from typing import Optional

from household_ledger.models.ledger import COMPETENCY_PATTERN


_COMPETENCY_RE = re.compile(COMPETENCY_PATTERN)


def is_valid_competency(value: Optional[str]) -> bool:
    return bool(value) and _COMPETENCY_RE.match(value) is not None


def parse_competency(value: str) -> tuple[int, int]:
    """
    Split a competency into (month, year).

    Raises:
        ValueError: If the string is not exactly MM/YYYY
    """
    if not is_valid_competency(value):
        raise ValueError(f"Invalid competency '{value}', expected MM/YYYY")
    month, year = value.split("/")
    return int(month), int(year)


def format_competency(month: int, year: int) -> str:
    return f"{month:02d}/{year:04d}"


def competency_of(day: date) -> str:
    """Competency a calendar date falls in."""
    return format_competency(day.month, day.year)


def current_competency(today: Optional[date] = None) -> str:
    return competency_of(today or date.today())


def add_months(competency: str, months: int) -> str:
    """Move a competency forward (or back, for negative values) by whole months."""
    month, year = parse_competency(competency)
    month += months
    while month > 12:
        month -= 12
        year += 1
    while month < 1:
        month += 12
        year -= 1
    return format_competency(month, year)


def shift_date(day: date, months: int) -> date:
    """Same day N months later, clamped to the last day of the target month."""
    index = day.month - 1 + months
    year = day.year + index // 12
    month = index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def month_bounds(competency: str) -> tuple[date, date]:
    """First and last calendar day of a competency."""
    month, year = parse_competency(competency)
    return date(year, month, 1), date(year, month, calendar.monthrange(year, month)[1])


def last_competencies(count: int, today: Optional[date] = None) -> list[str]:
    """
    The last `count` competencies ending at today's, oldest first.

    Example: count=3 on 2025-02-10 -> ["12/2024", "01/2025", "02/2025"]
    """
    end = current_competency(today)
    return [add_months(end, -offset) for offset in range(count - 1, -1, -1)]


def competency_sort_key(competency: str) -> tuple[int, int]:
    """Chronological sort key (string order would put 02/2024 after 01/2025)."""
    month, year = parse_competency(competency)
    return year, month

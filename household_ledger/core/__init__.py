"""Ledger core: competency arithmetic, installments, closure, recurring entries."""

from household_ledger.core.closure import MonthClosureController, MonthState
from household_ledger.core.competency import (
    add_months,
    competency_of,
    competency_sort_key,
    current_competency,
    format_competency,
    is_valid_competency,
    last_competencies,
    month_bounds,
    parse_competency,
    shift_date,
)
from household_ledger.core.installments import expand_installments, split_value
from household_ledger.core.recurring import generate_for_month

__all__ = [
    "MonthClosureController",
    "MonthState",
    "add_months",
    "competency_of",
    "competency_sort_key",
    "current_competency",
    "expand_installments",
    "format_competency",
    "generate_for_month",
    "is_valid_competency",
    "last_competencies",
    "month_bounds",
    "parse_competency",
    "shift_date",
    "split_value",
]

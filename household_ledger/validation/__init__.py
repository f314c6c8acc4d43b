"""Input validation for ledger entities."""

from household_ledger.validation.validator import LedgerValidator, MIN_INSTALLMENT_VALUE

__all__ = [
    "LedgerValidator",
    "MIN_INSTALLMENT_VALUE",
]

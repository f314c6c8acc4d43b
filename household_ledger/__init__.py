"""
Household Ledger - Source Package

A ledger and budget analytics engine for a small household:
income and expense recording, monthly closing, budget health
and savings goal tracking.

DESIGN PRINCIPLES:
1. Entities are immutable values; edits are delete + recreate
2. Fail early, fail visibly
3. No silent corrections of monetary values
4. Every mutation is logged
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Household Ledger Team"

"""
Investment Portfolio

Totals over the household's investments and a compound-growth estimate
for positions that carry an annual rate.
"""

from collections import defaultdict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from household_ledger.models.analytics import InvestmentSummary
from household_ledger.models.ledger import Investment


ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")
DAYS_PER_YEAR = Decimal("365")


def summarize_investments(investments: Sequence[Investment]) -> InvestmentSummary:
    """
    Invested and current totals, profit, and invested amount by type and owner.

    profit_percentage is 0 for an empty portfolio.
    """
    by_type: dict = defaultdict(lambda: ZERO)
    by_owner: dict = defaultdict(lambda: ZERO)
    total_invested = ZERO
    total_current = ZERO

    for investment in investments:
        total_invested += investment.invested_amount
        total_current += investment.marked_value
        by_type[investment.type] += investment.invested_amount
        by_owner[investment.owner] += investment.invested_amount

    profit = total_current - total_invested
    profit_percentage = (
        (profit / total_invested * HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)
        if total_invested > ZERO
        else ZERO
    )
    return InvestmentSummary(
        total_invested=total_invested,
        total_current_value=total_current,
        profit=profit,
        profit_percentage=profit_percentage,
        by_type=dict(by_type),
        by_owner=dict(by_owner),
    )


def estimated_value(investment: Investment, today: Optional[date] = None) -> Decimal:
    """
    invested * (1 + rate/100) ** years since the investment date, in cents.

    Without a rate the estimate is the invested amount. Years are counted
    as days / 365 and never negative.
    """
    if not investment.annual_rate:
        return investment.invested_amount

    today = today or date.today()
    days = max((today - investment.investment_date).days, 0)
    years = Decimal(days) / DAYS_PER_YEAR
    growth = (1 + investment.annual_rate / HUNDRED) ** years
    return (investment.invested_amount * growth).quantize(CENT, rounding=ROUND_HALF_UP)

"""
Aggregation Engine

Filters transactions along the ledger's dimensions and reduces them into
sums, grouped totals and time series.

All functions are pure and synchronous over fully materialised
collections. Grouped expense totals (by category, person, payment method)
are exhaustive and disjoint partitions of the expense total.
"""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from household_ledger.core.competency import competency_sort_key, last_competencies
from household_ledger.models.analytics import (
    NO_CREDIT_CARD,
    BurndownPoint,
    CategoryTrendPoint,
    HistoryPoint,
    TransactionFilter,
    TypeTotals,
)
from household_ledger.models.ledger import (
    Budget,
    PaymentMethod,
    Person,
    Transaction,
    TransactionType,
)


ZERO = Decimal("0")


def matches(transaction: Transaction, filters: TransactionFilter) -> bool:
    if filters.competency is not None and transaction.competency != filters.competency:
        return False
    if filters.person is not None and transaction.person != filters.person:
        return False
    if filters.category is not None and transaction.category != filters.category:
        return False
    if filters.payment_method is not None and transaction.payment_method != filters.payment_method:
        return False
    if filters.credit_card_id == NO_CREDIT_CARD:
        return transaction.credit_card_id is None
    if filters.credit_card_id is not None and transaction.credit_card_id != filters.credit_card_id:
        return False
    return True


def filter_transactions(
    transactions: Iterable[Transaction],
    filters: Optional[TransactionFilter] = None,
) -> list[Transaction]:
    """Transactions matching every set dimension of the filter, in input order."""
    if filters is None:
        return list(transactions)
    return [t for t in transactions if matches(t, filters)]


def _expenses(transactions: Iterable[Transaction]) -> list[Transaction]:
    return [t for t in transactions if t.type == TransactionType.EXPENSE]


def totals_by_type(transactions: Iterable[Transaction]) -> TypeTotals:
    """Expense total, income total and balance (income - expenses)."""
    expenses = ZERO
    income = ZERO
    for t in transactions:
        if t.type == TransactionType.EXPENSE:
            expenses += t.value
        else:
            income += t.value
    return TypeTotals(expenses=expenses, income=income, balance=income - expenses)


def sum_by_category(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    """Expense total per category. Income is excluded."""
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for t in _expenses(transactions):
        totals[t.category] += t.value
    return dict(totals)


def sum_by_person(transactions: Iterable[Transaction]) -> dict[Person, Decimal]:
    """Expense total for every person, zero-filled. Income is excluded."""
    totals = {person: ZERO for person in Person}
    for t in _expenses(transactions):
        totals[t.person] += t.value
    return totals


def sum_by_payment_method(transactions: Iterable[Transaction]) -> dict[PaymentMethod, Decimal]:
    """Expense total for every payment method, zero-filled."""
    totals = {method: ZERO for method in PaymentMethod}
    for t in _expenses(transactions):
        totals[t.payment_method] += t.value
    return totals


def total_budget(
    budgets: Iterable[Budget],
    competency: str,
    person: Optional[Person] = None,
    category: Optional[str] = None,
) -> Decimal:
    """Sum of budget amounts allocated to a competency. Duplicates all count."""
    return sum(
        (
            b.amount
            for b in budgets
            if b.competency == competency
            and (person is None or b.person == person)
            and (category is None or b.category == category)
        ),
        ZERO,
    )


def historical_series(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    months_back: int,
    today: Optional[date] = None,
    filters: Optional[TransactionFilter] = None,
) -> list[HistoryPoint]:
    """
    One point per competency for the last `months_back` competencies
    ending at today's, oldest first.

    The window follows the calendar, not the filter: a competency set in
    `filters` is ignored, the other dimensions apply to every month.
    """
    base = filters or TransactionFilter()
    points = []
    for competency in last_competencies(months_back, today):
        month_filter = base.model_copy(update={"competency": competency})
        totals = totals_by_type(filter_transactions(transactions, month_filter))
        points.append(HistoryPoint(
            competency=competency,
            expenses=totals.expenses,
            income=totals.income,
            budget=total_budget(budgets, competency, base.person, base.category),
            balance=totals.balance,
        ))
    return points


def burndown(
    transactions: Sequence[Transaction],
    budgets: Sequence[Budget],
    competency: str,
) -> list[BurndownPoint]:
    """
    Cumulative spend through a competency, one point per expense.

    Returns an empty list when the competency has no expenses or no
    budget allocated.
    """
    expenses = sorted(
        (
            t for t in transactions
            if t.competency == competency and t.type == TransactionType.EXPENSE
        ),
        key=lambda t: t.date,
    )
    budget_total = total_budget(budgets, competency)
    if not expenses or budget_total <= ZERO:
        return []

    points = []
    cumulative = ZERO
    for t in expenses:
        cumulative += t.value
        points.append(BurndownPoint(
            day=t.date.day,
            cumulative_spent=cumulative,
            total_budget=budget_total,
            remaining=budget_total - cumulative,
        ))
    return points


def category_trend(
    transactions: Sequence[Transaction],
    months_back: int,
    categories: Sequence[str],
    today: Optional[date] = None,
) -> list[CategoryTrendPoint]:
    """Expense sum per requested category for each of the last `months_back` competencies."""
    points = []
    for competency in last_competencies(months_back, today):
        month_totals = sum_by_category(
            filter_transactions(transactions, TransactionFilter(competency=competency))
        )
        points.append(CategoryTrendPoint(
            competency=competency,
            values={category: month_totals.get(category, ZERO) for category in categories},
        ))
    return points


def available_competencies(transactions: Iterable[Transaction]) -> list[str]:
    """Distinct competencies present in the transactions, oldest first."""
    return sorted({t.competency for t in transactions}, key=competency_sort_key)

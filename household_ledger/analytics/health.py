"""
Budget Health Scoring

Compares a competency's budgets to the actual expenses recorded against
them and maps the mean utilisation to a health label.

Label thresholds (inclusive upper bounds, first match wins):
    <= 70   excellent
    <= 90   good
    <= 100  attention
    >  100  critical
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from household_ledger.models.analytics import BudgetHealth, BudgetStatus, HealthLabel
from household_ledger.models.ledger import Budget, Person, Transaction, TransactionType


ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")

HEALTH_THRESHOLDS = (
    (Decimal("70"), HealthLabel.EXCELLENT),
    (Decimal("90"), HealthLabel.GOOD),
    (Decimal("100"), HealthLabel.ATTENTION),
)


def health_label(avg_percentage: Optional[Decimal]) -> HealthLabel:
    """Label for a mean utilisation percentage; None means there is no data."""
    if avg_percentage is None:
        return HealthLabel.NO_DATA
    for upper_bound, label in HEALTH_THRESHOLDS:
        if avg_percentage <= upper_bound:
            return label
    return HealthLabel.CRITICAL


def spent_against(budget: Budget, transactions: Sequence[Transaction]) -> Decimal:
    """Expenses in the budget's competency with the same category and person."""
    return sum(
        (
            t.value
            for t in transactions
            if t.type == TransactionType.EXPENSE
            and t.competency == budget.competency
            and t.category == budget.category
            and t.person == budget.person
        ),
        ZERO,
    )


def evaluate_budget(budget: Budget, transactions: Sequence[Transaction]) -> BudgetStatus:
    spent = spent_against(budget, transactions)
    percentage = spent / budget.amount * HUNDRED if budget.amount else ZERO
    return BudgetStatus(
        budget_id=budget.id,
        competency=budget.competency,
        category=budget.category,
        person=budget.person,
        amount=budget.amount,
        spent=spent,
        difference=budget.amount - spent,
        percentage=percentage,
    )


def evaluate_budgets(
    budgets: Sequence[Budget],
    transactions: Sequence[Transaction],
) -> list[BudgetStatus]:
    return [evaluate_budget(budget, transactions) for budget in budgets]


def score_health(
    budgets: Sequence[Budget],
    transactions: Sequence[Transaction],
    competency: Optional[str] = None,
) -> BudgetHealth:
    """
    Health of the budgets of one competency.

    When `competency` is given only budgets of that competency are scored;
    otherwise every budget passed in is. No budgets -> NO_DATA.
    """
    if competency is not None:
        budgets = [b for b in budgets if b.competency == competency]

    statuses = evaluate_budgets(budgets, transactions)
    if not statuses:
        return BudgetHealth(competency=competency)

    avg_percentage = sum((s.percentage for s in statuses), ZERO) / len(statuses)
    return BudgetHealth(
        competency=competency,
        statuses=statuses,
        avg_percentage=avg_percentage,
        label=health_label(avg_percentage),
        total_budget=sum((s.amount for s in statuses), ZERO),
        total_spent=sum((s.spent for s in statuses), ZERO),
    )


def income_for(
    transactions: Sequence[Transaction],
    competency: str,
    person: Person,
) -> Decimal:
    """
    Income a person can budget from in a competency.

    BOTH budgets from all income. A single person budgets from their own
    income plus half of the shared (BOTH) income.
    """
    total = ZERO
    for t in transactions:
        if t.type != TransactionType.INCOME or t.competency != competency:
            continue
        if person == Person.BOTH:
            total += t.value
        elif t.person == person:
            total += t.value
        elif t.person == Person.BOTH:
            total += (t.value / 2).quantize(CENT, rounding=ROUND_HALF_UP)
    return total


def percentage_budget_amount(
    transactions: Sequence[Transaction],
    competency: str,
    person: Person,
    percentage: Decimal,
) -> Decimal:
    """Amount of a percentage budget: share of the person's income, in cents."""
    income = income_for(transactions, competency, person)
    return (income * percentage / HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)

"""
Derived View Models

Everything the analytics layer returns. These are read-only results
computed from the in-memory collections; none of them is persisted.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from household_ledger.models.ledger import InvestmentType, PaymentMethod, Person


# Card filter value selecting entries charged to no card at all
NO_CREDIT_CARD = "none"


class TransactionFilter(BaseModel):
    """
    Filter along the ledger's dimensions.

    Unset dimensions match everything. Competency matching is exact
    string equality on MM/YYYY. credit_card_id takes a card id, or
    NO_CREDIT_CARD for entries not charged to any card.
    """
    model_config = ConfigDict(frozen=True)

    competency: Optional[str] = None
    person: Optional[Person] = None
    category: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    credit_card_id: Optional[Union[UUID, Literal["none"]]] = None


class TypeTotals(BaseModel):
    """Expense and income sums over a set of transactions."""

    expenses: Decimal = Decimal("0")
    income: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")


class HistoryPoint(BaseModel):
    """One competency in a historical series."""

    competency: str
    expenses: Decimal
    income: Decimal
    budget: Decimal
    balance: Decimal


class BurndownPoint(BaseModel):
    """Cumulative spend after one expense within a competency."""

    day: int = Field(..., ge=1, le=31)
    cumulative_spent: Decimal
    total_budget: Decimal
    remaining: Decimal


class CategoryTrendPoint(BaseModel):
    """Expense sum per category for one competency."""

    competency: str
    values: dict[str, Decimal] = Field(default_factory=dict)


# =============================================================================
# BUDGET HEALTH
# =============================================================================

class HealthLabel(str, Enum):
    """Budget health label derived from the mean utilisation percentage."""
    EXCELLENT = "excellent"
    GOOD = "good"
    ATTENTION = "attention"
    CRITICAL = "critical"
    NO_DATA = "no_data"


class BudgetStatus(BaseModel):
    """Budget versus actual spend for one budget."""

    budget_id: UUID
    competency: str
    category: str
    person: Person
    amount: Decimal
    spent: Decimal
    difference: Decimal
    percentage: Decimal

    @property
    def over_budget(self) -> bool:
        return self.spent > self.amount


class BudgetHealth(BaseModel):
    """
    Health of every budget in one competency.

    avg_percentage is None (and label NO_DATA) when there are no budgets.
    """

    competency: Optional[str] = None
    statuses: list[BudgetStatus] = Field(default_factory=list)
    avg_percentage: Optional[Decimal] = None
    label: HealthLabel = HealthLabel.NO_DATA
    total_budget: Decimal = Decimal("0")
    total_spent: Decimal = Decimal("0")


# =============================================================================
# SAVINGS
# =============================================================================

class GoalStatus(str, Enum):
    """Projection outcome for a savings goal."""
    COMPLETED = "completed"
    NO_DEADLINE = "no_deadline"
    ON_TRACK = "on_track"
    BEHIND = "behind"


class MonthlySavings(BaseModel):
    """Sum of all deposits made in one calendar month."""

    competency: str
    total: Decimal


class GoalProjection(BaseModel):
    """
    Completion projection for one goal.

    months_to_finish is None for NO_DEADLINE and for a stalled BEHIND goal
    (no savings at all in the window, so it never finishes at this rate).
    """

    goal_id: UUID
    name: str
    status: GoalStatus
    target_amount: Decimal
    current_amount: Decimal
    remaining: Decimal
    progress_percentage: Decimal
    months_to_finish: Optional[int] = None
    months_to_deadline: Optional[int] = None
    needed_per_month: Optional[Decimal] = None
    avg_monthly_savings: Decimal = Decimal("0")
    stalled: bool = False


# =============================================================================
# CREDIT CARD INVOICES
# =============================================================================

class InvoiceSummary(BaseModel):
    """One card's bill for one competency."""

    credit_card_id: UUID
    card_name: str
    reference_month: str
    total: Decimal
    limit: Decimal
    available_limit: Decimal
    transaction_count: int = 0
    paid: bool = False


# =============================================================================
# INVESTMENTS
# =============================================================================

class InvestmentSummary(BaseModel):
    """
    Portfolio totals. Positions without a current value are marked at
    their invested amount; the per-type and per-owner splits use the
    invested amount.
    """

    total_invested: Decimal = Decimal("0")
    total_current_value: Decimal = Decimal("0")
    profit: Decimal = Decimal("0")
    profit_percentage: Decimal = Decimal("0")
    by_type: dict[InvestmentType, Decimal] = Field(default_factory=dict)
    by_owner: dict[Person, Decimal] = Field(default_factory=dict)


# =============================================================================
# NOTIFICATIONS
# =============================================================================

class NotificationKind(str, Enum):
    CARD_DUE = "card_due"
    RECURRING_DUE = "recurring_due"
    MONTH_OPEN = "month_open"


class NotificationLevel(str, Enum):
    """Urgency, most urgent first."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Notification(BaseModel):
    """Something due soon, or a past month still waiting to be closed."""

    kind: NotificationKind
    level: NotificationLevel
    title: str
    message: str
    entity_id: Optional[UUID] = None
    due_date: Optional[dt.date] = None
    days_until: Optional[int] = None
    competency: Optional[str] = None

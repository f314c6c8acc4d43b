"""Read-side analytics over the ledger collections."""

from household_ledger.analytics.aggregation import (
    available_competencies,
    burndown,
    category_trend,
    filter_transactions,
    historical_series,
    sum_by_category,
    sum_by_payment_method,
    sum_by_person,
    total_budget,
    totals_by_type,
)
from household_ledger.analytics.health import (
    evaluate_budgets,
    health_label,
    percentage_budget_amount,
    score_health,
)
from household_ledger.analytics.investments import estimated_value, summarize_investments
from household_ledger.analytics.invoices import invoices_for_month
from household_ledger.analytics.notifications import upcoming_notifications
from household_ledger.analytics.savings import (
    average_monthly_savings,
    monthly_deposit_totals,
    project_goal,
    project_goals,
)

__all__ = [
    "available_competencies",
    "average_monthly_savings",
    "burndown",
    "category_trend",
    "estimated_value",
    "evaluate_budgets",
    "filter_transactions",
    "health_label",
    "historical_series",
    "invoices_for_month",
    "monthly_deposit_totals",
    "upcoming_notifications",
    "percentage_budget_amount",
    "project_goal",
    "project_goals",
    "score_health",
    "sum_by_category",
    "sum_by_payment_method",
    "sum_by_person",
    "summarize_investments",
    "total_budget",
    "totals_by_type",
]

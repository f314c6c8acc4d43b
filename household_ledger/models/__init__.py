"""
Data Models Package

This package contains all Pydantic models used in the Household Ledger.
All data flowing through the ledger must conform to these schemas.
"""

from household_ledger.models.ledger import (
    COMPETENCY_PATTERN,
    Budget,
    BudgetDraft,
    BudgetType,
    CreditCard,
    CreditCardInvoice,
    Deposit,
    InstallmentRemainderPolicy,
    Investment,
    InvestmentType,
    PaymentMethod,
    Person,
    RecurringTransaction,
    SavingsGoal,
    Transaction,
    TransactionDraft,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)
from household_ledger.models.analytics import (
    NO_CREDIT_CARD,
    BudgetHealth,
    BudgetStatus,
    BurndownPoint,
    CategoryTrendPoint,
    GoalProjection,
    GoalStatus,
    HealthLabel,
    HistoryPoint,
    InvestmentSummary,
    InvoiceSummary,
    MonthlySavings,
    Notification,
    NotificationKind,
    NotificationLevel,
    TransactionFilter,
    TypeTotals,
)
from household_ledger.models.events import (
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
    LedgerSeverity,
)

__all__ = [
    # Ledger entities
    "COMPETENCY_PATTERN",
    "Budget",
    "BudgetDraft",
    "BudgetType",
    "CreditCard",
    "CreditCardInvoice",
    "Deposit",
    "InstallmentRemainderPolicy",
    "Investment",
    "InvestmentType",
    "PaymentMethod",
    "Person",
    "RecurringTransaction",
    "SavingsGoal",
    "Transaction",
    "TransactionDraft",
    "TransactionType",
    "ValidationIssue",
    "ValidationResult",
    # Derived views
    "NO_CREDIT_CARD",
    "BudgetHealth",
    "BudgetStatus",
    "BurndownPoint",
    "CategoryTrendPoint",
    "GoalProjection",
    "GoalStatus",
    "HealthLabel",
    "HistoryPoint",
    "InvestmentSummary",
    "InvoiceSummary",
    "MonthlySavings",
    "Notification",
    "NotificationKind",
    "NotificationLevel",
    "TransactionFilter",
    "TypeTotals",
    # Events
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
    "LedgerSeverity",
]

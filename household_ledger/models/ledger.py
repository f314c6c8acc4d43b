"""
Core Data Models for Household Ledger

These models define the strict schemas for every entity the ledger stores.
They are designed to:
1. Enforce type safety at runtime
2. Be immutable values (edits are delete + recreate)
3. Serialize to JSON for whole-collection persistence
4. Keep money exact (Decimal everywhere)

DESIGN DECISION: Entities are frozen Pydantic v2 models. Input drafts are
separate, permissive models so the validator can report exactly which
field is missing instead of failing on construction.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)


# Two-digit month, four-digit year. String equality on this format is the
# join key between transactions, budgets, invoices and closed months.
COMPETENCY_PATTERN = r"^(0[1-9]|1[0-2])/\d{4}$"

Money = Annotated[Decimal, Field(gt=0)]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a ledger entry."""
    EXPENSE = "expense"
    INCOME = "income"


class PaymentMethod(str, Enum):
    """How a transaction was paid."""
    CREDIT = "credit"
    DEBIT = "debit"
    CASH = "cash"
    INSTANT_TRANSFER = "instant_transfer"


class Person(str, Enum):
    """
    Household members a transaction or budget belongs to.

    BOTH is a shared bucket, not the union of the other two: a filter on
    PARTY_A does not match BOTH entries.
    """
    PARTY_A = "party_a"
    PARTY_B = "party_b"
    BOTH = "both"


class BudgetType(str, Enum):
    """Whether a budget amount is fixed or derived from monthly income."""
    VALUE = "value"
    PERCENTAGE = "percentage"


class InstallmentRemainderPolicy(str, Enum):
    """
    Rounding policy for splitting a purchase into installments.

    NONE reproduces plain uniform division (no rounding at all).
    LAST_INSTALLMENT rounds each installment to cents and lets the last
    one absorb the remainder so the group sums exactly to the purchase.
    """
    NONE = "none"
    LAST_INSTALLMENT = "last_installment"


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense record.

    Installment purchases produce one Transaction per installment, all
    sharing the same installment_group_id.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    date: dt.date = Field(
        ...,
        description="Calendar date of the event"
    )
    type: TransactionType
    payment_method: PaymentMethod
    person: Person
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category name (soft reference to the category set)"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
    )
    value: Money
    competency: str = Field(
        ...,
        pattern=COMPETENCY_PATTERN,
        description="Accounting period, MM/YYYY"
    )
    credit_card_id: Optional[UUID] = Field(
        default=None,
        description="Card charged; present iff payment_method is credit"
    )
    installment_number: int = Field(default=1, ge=1)
    total_installments: int = Field(default=1, ge=1)
    installment_group_id: Optional[UUID] = None
    recurring_id: Optional[UUID] = Field(
        default=None,
        description="Recurring template this entry was generated from"
    )

    @model_validator(mode='after')
    def validate_consistency(self) -> 'Transaction':
        """Validate installment and credit card relationships."""
        if self.installment_number > self.total_installments:
            raise ValueError("Installment number cannot exceed total installments")

        if self.payment_method == PaymentMethod.CREDIT and self.credit_card_id is None:
            raise ValueError("Credit transactions require a credit card")

        if self.payment_method != PaymentMethod.CREDIT and self.credit_card_id is not None:
            raise ValueError("Only credit transactions may reference a credit card")

        return self

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE

    @property
    def is_installment(self) -> bool:
        return self.installment_group_id is not None


class TransactionDraft(BaseModel):
    """
    Input for creating one purchase, possibly split into installments.

    Everything is optional here; LedgerValidator decides what is missing.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    date: Optional[dt.date] = None
    type: Optional[TransactionType] = None
    payment_method: Optional[PaymentMethod] = None
    person: Optional[Person] = None
    category: Optional[str] = None
    description: Optional[str] = None
    value: Optional[Decimal] = None
    competency: Optional[str] = Field(
        default=None,
        description="Competency of a single payment; defaults to the month of `date`. Ignored for splits."
    )
    credit_card_id: Optional[UUID] = None
    installments: int = Field(
        default=1,
        description="Number of installments (1 = single payment)"
    )


# =============================================================================
# BUDGETS, CARDS, GOALS
# =============================================================================

class Budget(BaseModel):
    """
    Spending ceiling for one (competency, category, person).

    Duplicates for the same key are allowed and all count toward
    the allocated total.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    competency: str = Field(..., pattern=COMPETENCY_PATTERN)
    category: str = Field(..., min_length=1, max_length=100)
    person: Person
    amount: Money
    budget_type: BudgetType = BudgetType.VALUE
    percentage: Optional[Decimal] = Field(
        default=None,
        gt=0,
        le=100,
        description="Share of monthly income for percentage budgets"
    )


class BudgetDraft(BaseModel):
    """Input for creating a budget. Amount is derived for percentage budgets."""
    model_config = ConfigDict(str_strip_whitespace=True)

    competency: Optional[str] = None
    category: Optional[str] = None
    person: Optional[Person] = None
    amount: Optional[Decimal] = None
    budget_type: BudgetType = BudgetType.VALUE
    percentage: Optional[Decimal] = None


class CreditCard(BaseModel):
    """A credit card transactions can be charged to."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=100)
    owner: Person
    closing_day: int = Field(..., ge=1, le=31)
    due_day: int = Field(..., ge=1, le=31)
    limit: Money


class Deposit(BaseModel):
    """One contribution to a savings goal."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    amount: Money
    date: dt.date
    person: Optional[Person] = None
    note: Optional[str] = Field(default=None, max_length=500)


class SavingsGoal(BaseModel):
    """
    A savings target with an append-only deposit history.

    current_amount always equals the sum of the deposits.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=200)
    target_amount: Money
    deadline: Optional[dt.date] = None
    owner: Person
    description: str = Field(default="", max_length=500)
    current_amount: Decimal = Field(default=Decimal("0"), ge=0)
    deposits: tuple[Deposit, ...] = ()
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)

    @model_validator(mode='after')
    def validate_current_amount(self) -> 'SavingsGoal':
        """current_amount must match the deposit history."""
        total = sum((d.amount for d in self.deposits), Decimal("0"))
        if self.current_amount != total:
            raise ValueError(
                f"Current amount {self.current_amount} does not match deposits total {total}"
            )
        return self

    def with_deposit(self, deposit: Deposit) -> 'SavingsGoal':
        """Return a copy of this goal with one more deposit appended."""
        return self.model_copy(update={
            "deposits": self.deposits + (deposit,),
            "current_amount": self.current_amount + deposit.amount,
        })


# =============================================================================
# RECURRING TEMPLATES AND INVOICES
# =============================================================================

class RecurringTransaction(BaseModel):
    """
    Template for a transaction that repeats every month
    (rent, salary, subscriptions).
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    description: str = Field(..., min_length=1, max_length=500)
    type: TransactionType
    payment_method: PaymentMethod
    person: Person
    category: str = Field(..., min_length=1, max_length=100)
    value: Money
    start_date: dt.date
    end_date: Optional[dt.date] = None
    day_of_month: int = Field(default=1, ge=1, le=31)
    credit_card_id: Optional[UUID] = None
    active: bool = True

    @model_validator(mode='after')
    def validate_window(self) -> 'RecurringTransaction':
        if self.end_date and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        if self.payment_method == PaymentMethod.CREDIT and self.credit_card_id is None:
            raise ValueError("Credit transactions require a credit card")
        return self


class CreditCardInvoice(BaseModel):
    """Paid status of one card's bill for one competency."""
    model_config = ConfigDict(frozen=True)

    credit_card_id: UUID
    reference_month: str = Field(..., pattern=COMPETENCY_PATTERN)
    paid: bool = False
    paid_at: Optional[dt.datetime] = None


# =============================================================================
# INVESTMENTS
# =============================================================================

class InvestmentType(str, Enum):
    """Kind of asset an investment is held in."""
    GOVERNMENT_BOND = "government_bond"
    BANK_CERTIFICATE = "bank_certificate"
    SAVINGS_ACCOUNT = "savings_account"
    REAL_ESTATE_NOTE = "real_estate_note"
    AGRIBUSINESS_NOTE = "agribusiness_note"
    INVESTMENT_FUND = "investment_fund"
    STOCK = "stock"
    REAL_ESTATE_FUND = "real_estate_fund"
    OTHER = "other"


class Investment(BaseModel):
    """
    A position the household holds outside the monthly ledger.

    current_value is an optional manual mark; when absent the position is
    valued at what was put in. annual_rate (percent per year) only feeds
    the compound-growth estimate.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=200)
    type: InvestmentType
    owner: Person
    invested_amount: Money
    investment_date: dt.date
    annual_rate: Optional[Decimal] = Field(default=None, ge=0, le=100)
    current_value: Optional[Decimal] = Field(default=None, ge=0)
    description: str = Field(default="", max_length=500)
    institution: Optional[str] = Field(default=None, max_length=100)
    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)
    updated_at: Optional[dt.datetime] = None

    @property
    def marked_value(self) -> Decimal:
        """Current value if marked, otherwise the invested amount."""
        return self.current_value if self.current_value is not None else self.invested_amount


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value', 'unknown_reference')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of validating one input.

    Stage 1: Schema validation (required fields, formats)
    Stage 2: Semantic validation (references, plausibility)
    """

    schema_valid: bool
    semantic_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.schema_valid and self.semantic_valid

    @property
    def errors(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "error"]

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]

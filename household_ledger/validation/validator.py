"""
Two-Stage Validation Pipeline

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Required field presence
- Format validation (competency MM/YYYY, positive amounts)
- Credit card / payment method pairing

STAGE 2 - SEMANTIC VALIDATION:
- Category exists in the category set
- Referenced credit card is known
- Date and competency are plausibly related

Stage 2 only runs when stage 1 passes. Validation never fixes input;
it reports issues, and ensure_valid() turns the first error into a
ValidationError naming the offending field. Nothing is written before
validation succeeds.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from household_ledger.core.competency import (
    add_months,
    competency_of,
    competency_sort_key,
    is_valid_competency,
)
from household_ledger.events import LedgerEventLogger, get_event_logger
from household_ledger.exceptions import ValidationError
from household_ledger.models.ledger import (
    BudgetDraft,
    BudgetType,
    CreditCard,
    PaymentMethod,
    TransactionDraft,
    ValidationIssue,
    ValidationResult,
)


ModelT = TypeVar("ModelT", bound=BaseModel)

# Smallest value a single installment may carry
MIN_INSTALLMENT_VALUE = Decimal("0.01")

# A date further than this from its competency is probably a typo
COMPETENCY_DRIFT_MONTHS = 12


def _missing(field: str, label: str) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type="missing",
        message=f"{label} is required",
        severity="error",
    )


def _invalid(field: str, message: str) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type="invalid_value",
        message=message,
        severity="error",
    )


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _to_decimal(value: Any) -> Optional[Decimal]:
    """Decimal for numeric input, None for anything unparseable or non-finite."""
    try:
        number = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def _result(schema_issues: list, semantic_issues: Optional[list] = None) -> ValidationResult:
    schema_valid = not any(i.severity == "error" for i in schema_issues)
    semantic_issues = semantic_issues or []
    semantic_valid = schema_valid and not any(i.severity == "error" for i in semantic_issues)
    return ValidationResult(
        schema_valid=schema_valid,
        semantic_valid=semantic_valid,
        issues=schema_issues + semantic_issues,
    )


class LedgerValidator:
    """
    Validates ledger inputs before they become entities.

    Category and card lookups are passed in by the caller, so the
    validator never touches storage.
    """

    def __init__(self, event_logger: Optional[LedgerEventLogger] = None):
        self._events = event_logger or get_event_logger()

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    def _validate_transaction_schema(self, draft: TransactionDraft) -> list[ValidationIssue]:
        """
        Stage 1: required fields, formats, credit card pairing.
        """
        issues = []

        if draft.value is None:
            issues.append(_missing("value", "Value"))
        elif draft.value <= 0:
            issues.append(_invalid("value", "Value must be greater than zero"))

        if _is_blank(draft.description):
            issues.append(_missing("description", "Description"))

        if draft.date is None:
            issues.append(_missing("date", "Date"))
        if draft.type is None:
            issues.append(_missing("type", "Transaction type"))
        if draft.payment_method is None:
            issues.append(_missing("payment_method", "Payment method"))
        if draft.person is None:
            issues.append(_missing("person", "Person"))
        if _is_blank(draft.category):
            issues.append(_missing("category", "Category"))

        if draft.competency is not None and not is_valid_competency(draft.competency):
            issues.append(_invalid(
                "competency",
                f"Competency '{draft.competency}' must be MM/YYYY",
            ))

        if draft.installments < 1:
            issues.append(_invalid("installments", "Installments must be at least 1"))
        elif (
            draft.value is not None
            and draft.value > 0
            and draft.value / draft.installments < MIN_INSTALLMENT_VALUE
        ):
            issues.append(_invalid(
                "installments",
                f"Each of {draft.installments} installments would be below {MIN_INSTALLMENT_VALUE}",
            ))

        if draft.payment_method == PaymentMethod.CREDIT and draft.credit_card_id is None:
            issues.append(_missing("credit_card_id", "Credit card"))
        if (
            draft.payment_method is not None
            and draft.payment_method != PaymentMethod.CREDIT
            and draft.credit_card_id is not None
        ):
            issues.append(_invalid(
                "credit_card_id",
                "Only credit transactions may reference a credit card",
            ))

        return issues

    def _validate_transaction_semantic(
        self,
        draft: TransactionDraft,
        categories: Sequence[str],
        credit_cards: Sequence[CreditCard],
    ) -> list[ValidationIssue]:
        """
        Stage 2: references and plausibility.
        """
        issues = []

        if draft.category not in categories:
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_reference",
                message=f"Category '{draft.category}' does not exist",
                severity="error",
            ))

        if draft.credit_card_id is not None and credit_cards is not None:
            if not any(card.id == draft.credit_card_id for card in credit_cards):
                issues.append(ValidationIssue(
                    field="credit_card_id",
                    issue_type="unknown_reference",
                    message=f"Credit card {draft.credit_card_id} is not registered",
                    severity="warning",
                ))

        if draft.competency is not None and draft.date is not None:
            own = competency_of(draft.date)
            lower = add_months(own, -COMPETENCY_DRIFT_MONTHS)
            upper = add_months(own, COMPETENCY_DRIFT_MONTHS)
            position = competency_sort_key(draft.competency)
            if not (competency_sort_key(lower) <= position <= competency_sort_key(upper)):
                issues.append(ValidationIssue(
                    field="competency",
                    issue_type="suspicious_value",
                    message=(
                        f"Competency {draft.competency} is more than "
                        f"{COMPETENCY_DRIFT_MONTHS} months away from {draft.date}"
                    ),
                    severity="warning",
                ))

        return issues

    def validate_transaction(
        self,
        draft: TransactionDraft,
        categories: Sequence[str],
        credit_cards: Sequence[CreditCard] = (),
    ) -> ValidationResult:
        """
        Run the full two-stage pipeline for a transaction draft.

        Args:
            draft: The purchase to validate
            categories: Current category set
            credit_cards: Registered cards, for the reference check

        Returns:
            ValidationResult with all issues found
        """
        schema_issues = self._validate_transaction_schema(draft)
        if any(i.severity == "error" for i in schema_issues):
            return _result(schema_issues)
        semantic_issues = self._validate_transaction_semantic(draft, categories, credit_cards)
        return _result(schema_issues, semantic_issues)

    # =========================================================================
    # OTHER ENTITIES
    # =========================================================================

    def validate_budget(self, draft: BudgetDraft, categories: Sequence[str]) -> ValidationResult:
        schema_issues = []

        if draft.budget_type == BudgetType.PERCENTAGE:
            if draft.percentage is None:
                schema_issues.append(_missing("percentage", "Percentage"))
            elif not (Decimal("0") < draft.percentage <= Decimal("100")):
                schema_issues.append(_invalid("percentage", "Percentage must be in (0, 100]"))
        elif draft.amount is None:
            schema_issues.append(_missing("amount", "Amount"))
        elif draft.amount <= 0:
            schema_issues.append(_invalid("amount", "Amount must be greater than zero"))

        if _is_blank(draft.competency):
            schema_issues.append(_missing("competency", "Competency"))
        elif not is_valid_competency(draft.competency):
            schema_issues.append(_invalid(
                "competency",
                f"Competency '{draft.competency}' must be MM/YYYY",
            ))
        if _is_blank(draft.category):
            schema_issues.append(_missing("category", "Category"))
        if draft.person is None:
            schema_issues.append(_missing("person", "Person"))

        if any(i.severity == "error" for i in schema_issues):
            return _result(schema_issues)

        semantic_issues = []
        if draft.category not in categories:
            semantic_issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_reference",
                message=f"Category '{draft.category}' does not exist",
                severity="error",
            ))
        return _result(schema_issues, semantic_issues)

    def validate_credit_card(
        self,
        name: Optional[str],
        limit: Optional[Decimal],
    ) -> ValidationResult:
        issues = []
        if _is_blank(name):
            issues.append(_missing("name", "Card name"))
        if limit is None:
            issues.append(_missing("limit", "Limit"))
        elif limit <= 0:
            issues.append(_invalid("limit", "Limit must be greater than zero"))
        return _result(issues)

    def validate_goal(
        self,
        name: Optional[str],
        target_amount: Optional[Decimal],
        deadline: Optional[date] = None,
        today: Optional[date] = None,
    ) -> ValidationResult:
        schema_issues = []
        if _is_blank(name):
            schema_issues.append(_missing("name", "Goal name"))
        if target_amount is None:
            schema_issues.append(_missing("target_amount", "Target amount"))
        elif target_amount <= 0:
            schema_issues.append(_invalid("target_amount", "Target amount must be greater than zero"))

        semantic_issues = []
        today = today or date.today()
        if deadline is not None and deadline < today:
            semantic_issues.append(ValidationIssue(
                field="deadline",
                issue_type="past_date",
                message=f"Deadline {deadline} is already past",
                severity="warning",
            ))
        return _result(schema_issues, semantic_issues)

    def validate_deposit(self, amount: Optional[Decimal]) -> ValidationResult:
        issues = []
        if amount is None:
            issues.append(_missing("amount", "Deposit amount"))
        elif amount <= 0:
            issues.append(_invalid("amount", "Deposit amount must be greater than zero"))
        return _result(issues)

    def validate_recurring(
        self,
        data: dict[str, Any],
        categories: Sequence[str],
    ) -> ValidationResult:
        """Recurring templates follow the same field rules as transactions."""
        schema_issues = []
        value = data.get("value")
        if value is None:
            schema_issues.append(_missing("value", "Value"))
        elif _to_decimal(value) is None:
            schema_issues.append(_invalid("value", f"Value '{value}' is not a number"))
        elif _to_decimal(value) <= 0:
            schema_issues.append(_invalid("value", "Value must be greater than zero"))
        if _is_blank(data.get("description")):
            schema_issues.append(_missing("description", "Description"))
        if data.get("start_date") is None:
            schema_issues.append(_missing("start_date", "Start date"))
        if data.get("payment_method") == PaymentMethod.CREDIT and data.get("credit_card_id") is None:
            schema_issues.append(_missing("credit_card_id", "Credit card"))

        if any(i.severity == "error" for i in schema_issues):
            return _result(schema_issues)

        semantic_issues = []
        if data.get("category") not in categories:
            semantic_issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_reference",
                message=f"Category '{data.get('category')}' does not exist",
                severity="error",
            ))
        return _result(schema_issues, semantic_issues)

    def validate_investment(
        self,
        name: Optional[str],
        invested_amount: Any,
        investment_date: Optional[date],
        annual_rate: Any = None,
        current_value: Any = None,
        today: Optional[date] = None,
    ) -> ValidationResult:
        """Name, a positive amount and a date no later than today are required."""
        issues = []
        if _is_blank(name):
            issues.append(_missing("name", "Investment name"))

        if invested_amount is None:
            issues.append(_missing("invested_amount", "Invested amount"))
        elif _to_decimal(invested_amount) is None:
            issues.append(_invalid("invested_amount", f"Invested amount '{invested_amount}' is not a number"))
        elif _to_decimal(invested_amount) <= 0:
            issues.append(_invalid("invested_amount", "Invested amount must be greater than zero"))

        today = today or date.today()
        if investment_date is None:
            issues.append(_missing("investment_date", "Investment date"))
        elif investment_date > today:
            issues.append(_invalid("investment_date", "Investment date cannot be in the future"))

        if annual_rate is not None:
            rate = _to_decimal(annual_rate)
            if rate is None or rate < 0 or rate > 100:
                issues.append(_invalid("annual_rate", "Annual rate must be between 0 and 100"))

        if current_value is not None:
            marked = _to_decimal(current_value)
            if marked is None or marked < 0:
                issues.append(_invalid("current_value", "Current value cannot be negative"))

        return _result(issues)

    # =========================================================================
    # RAISING HELPERS
    # =========================================================================

    def ensure_valid(self, result: ValidationResult, entity_type: str) -> ValidationResult:
        """
        Raise ValidationError for the first error in `result`.

        Warnings never block; the result is returned so callers can
        surface them.
        """
        errors = result.errors
        if errors:
            first = errors[0]
            self._events.log_validation_failed(entity_type, first.field, first.message)
            raise ValidationError(first.field, first.message)
        return result

    def build(self, model_cls: Type[ModelT], entity_type: str, **data: Any) -> ModelT:
        """
        Construct an entity, converting pydantic errors into ValidationError.

        The field named is the first location pydantic reports, or
        `__root__` for model-level checks.
        """
        try:
            return model_cls(**data)
        except PydanticValidationError as e:
            raise self.translate(e, entity_type) from e

    def translate(self, error: PydanticValidationError, entity_type: str) -> ValidationError:
        """Log a pydantic error and return the equivalent ValidationError."""
        first = error.errors()[0]
        loc = first.get("loc") or ("__root__",)
        field = str(loc[0])
        message = first.get("msg", str(error))
        self._events.log_validation_failed(entity_type, field, message)
        return ValidationError(field, message)

"""
Tests for Household Ledger models

Test strategy:
1. Unit tests for individual components (models, core, analytics, validator)
2. Integration tests for the ledger service over the in-memory store
3. No real API calls in tests (fake worksheet for the Sheets backend)
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from household_ledger.models.ledger import (
    CreditCardInvoice,
    Deposit,
    PaymentMethod,
    Person,
    RecurringTransaction,
    SavingsGoal,
    Transaction,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)
from household_ledger.models.events import (
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
    LedgerSeverity,
)

from tests.factories import make_transaction


class TestTransactionModel:
    """Tests for the Transaction model."""

    def test_transaction_creation(self):
        """Test a single-payment transaction with defaults."""
        t = make_transaction(value="42.50")
        assert t.value == Decimal("42.50")
        assert t.installment_number == 1
        assert t.total_installments == 1
        assert t.installment_group_id is None
        assert t.is_expense is True
        assert t.is_installment is False

    def test_transaction_strips_whitespace(self):
        """Test that whitespace is stripped from text fields."""
        t = make_transaction(description="  Market  ")
        assert t.description == "Market"

    def test_transaction_rejects_non_positive_value(self):
        """Test that zero and negative values are rejected."""
        with pytest.raises(ValueError):
            make_transaction(value="0")
        with pytest.raises(ValueError):
            make_transaction(value="-5")

    def test_transaction_rejects_bad_competency(self):
        """Test competency must be MM/YYYY."""
        with pytest.raises(ValueError):
            Transaction(
                date=date(2025, 3, 1),
                type=TransactionType.EXPENSE,
                payment_method=PaymentMethod.CASH,
                person=Person.BOTH,
                category="Food",
                description="Bread",
                value=Decimal("3"),
                competency="3/2025",
            )

    def test_credit_requires_card(self):
        """Test that credit transactions need a credit card."""
        with pytest.raises(ValueError, match="require a credit card"):
            make_transaction(payment_method=PaymentMethod.CREDIT)

    def test_non_credit_rejects_card(self):
        """Test that only credit transactions may reference a card."""
        with pytest.raises(ValueError, match="Only credit transactions"):
            make_transaction(payment_method=PaymentMethod.CASH, credit_card_id=uuid4())

    def test_installment_number_cannot_exceed_total(self):
        """Test installment number <= total installments."""
        with pytest.raises(ValueError, match="cannot exceed"):
            Transaction(
                date=date(2025, 3, 1),
                type=TransactionType.EXPENSE,
                payment_method=PaymentMethod.DEBIT,
                person=Person.PARTY_B,
                category="Food",
                description="Fridge",
                value=Decimal("100"),
                competency="03/2025",
                installment_number=4,
                total_installments=3,
            )

    def test_transaction_is_immutable(self):
        """Test that entities cannot be edited in place."""
        t = make_transaction()
        with pytest.raises(PydanticValidationError):
            t.value = Decimal("1")

    def test_transaction_json_round_trip_keeps_decimal(self):
        """Test that money survives JSON serialization exactly."""
        t = make_transaction(value="0.10")
        restored = Transaction.model_validate_json(t.model_dump_json())
        assert restored == t
        assert restored.value == Decimal("0.10")


class TestSavingsGoalModel:
    """Tests for SavingsGoal and its deposits."""

    def test_new_goal_starts_empty(self):
        goal = SavingsGoal(name="Trip", target_amount=Decimal("1000"), owner=Person.BOTH)
        assert goal.current_amount == Decimal("0")
        assert goal.deposits == ()

    def test_with_deposit_updates_current_amount(self):
        """Test that a deposit raises current amount by its value."""
        goal = SavingsGoal(name="Trip", target_amount=Decimal("1000"), owner=Person.BOTH)
        deposit = Deposit(amount=Decimal("150.25"), date=date(2025, 1, 5))
        updated = goal.with_deposit(deposit)

        assert updated.current_amount == Decimal("150.25")
        assert updated.deposits == (deposit,)
        assert goal.current_amount == Decimal("0")

    def test_current_amount_must_match_deposits(self):
        """Test that current_amount must equal the sum of deposits."""
        with pytest.raises(ValueError, match="does not match"):
            SavingsGoal(
                name="Car",
                target_amount=Decimal("5000"),
                owner=Person.PARTY_A,
                current_amount=Decimal("10"),
            )

    def test_deposit_rejects_non_positive_amount(self):
        with pytest.raises(ValueError):
            Deposit(amount=Decimal("0"), date=date(2025, 1, 1))


class TestOtherModels:
    """Tests for recurring templates and invoices."""

    def test_recurring_end_before_start_rejected(self):
        with pytest.raises(ValueError, match="End date cannot be before start date"):
            RecurringTransaction(
                description="Rent",
                type=TransactionType.EXPENSE,
                payment_method=PaymentMethod.INSTANT_TRANSFER,
                person=Person.BOTH,
                category="Housing",
                value=Decimal("1200"),
                start_date=date(2025, 5, 1),
                end_date=date(2025, 4, 1),
            )

    def test_invoice_defaults_unpaid(self):
        invoice = CreditCardInvoice(credit_card_id=uuid4(), reference_month="03/2025")
        assert invoice.paid is False
        assert invoice.paid_at is None


class TestLedgerEvents:
    """Tests for ledger event models."""

    def test_event_creation(self):
        """Test LedgerEvent model creation."""
        event = LedgerEvent(
            event_type=LedgerEventType.MONTH_CLOSED,
            description="Month closed",
        )
        assert event.event_type == LedgerEventType.MONTH_CLOSED
        assert event.severity == LedgerSeverity.INFO

    def test_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = LedgerEventBuilder.deposit_added(uuid4(), "100.00", "250.00")
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "deposit_added"
        assert log_dict["details"]["current_amount"] == "250.00"

    def test_builder_month_already_closed_is_warning(self):
        event = LedgerEventBuilder.month_already_closed("03/2025")
        assert event.severity == LedgerSeverity.WARNING
        assert event.entity_id == "03/2025"

    def test_builder_entity_updated_lists_fields(self):
        event = LedgerEventBuilder.entity_updated("investment", uuid4(), ["current_value", "name"])
        assert event.event_type == LedgerEventType.ENTITY_UPDATED
        assert event.details["fields"] == ["current_value", "name"]

    def test_builder_transactions_created_uses_group_id(self):
        """Test that an installment purchase is identified by its group."""
        group_id = uuid4()
        ids = [uuid4(), uuid4()]
        event = LedgerEventBuilder.transactions_created(
            ids, ["01/2025", "02/2025"], "300.00", group_id
        )
        assert event.entity_id == str(group_id)
        assert len(event.details["transaction_ids"]) == 2

    def test_builder_persistence_failed_is_error(self):
        event = LedgerEventBuilder.persistence_failed("budgets", "boom")
        assert event.severity == LedgerSeverity.ERROR
        assert event.error_message == "boom"


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test errors property."""
        result = ValidationResult(
            schema_valid=False,
            semantic_valid=False,
            issues=[
                ValidationIssue(
                    field="value",
                    issue_type="missing",
                    message="Value is required",
                    severity="error",
                ),
            ],
        )
        assert result.is_valid is False
        assert len(result.errors) == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            schema_valid=True,
            semantic_valid=True,
            issues=[
                ValidationIssue(
                    field="credit_card_id",
                    issue_type="unknown_reference",
                    message="Card not registered",
                    severity="warning",
                ),
            ],
        )
        assert result.is_valid is True
        assert result.errors == []
        assert result.warnings == ["Card not registered"]


class TestEnums:
    """Tests for the ledger enums."""

    def test_payment_methods(self):
        expected = ["credit", "debit", "cash", "instant_transfer"]
        for value in expected:
            assert PaymentMethod(value) is not None

    def test_person_values(self):
        assert Person.BOTH.value == "both"
        assert {p.value for p in Person} == {"party_a", "party_b", "both"}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

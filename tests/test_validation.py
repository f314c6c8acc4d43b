"""Tests for the two-stage ledger validator."""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from household_ledger.exceptions import ValidationError
from household_ledger.models.ledger import (
    BudgetDraft,
    BudgetType,
    CreditCard,
    PaymentMethod,
    Person,
)
from household_ledger.validation import LedgerValidator

from tests.factories import CATEGORIES, make_draft


@pytest.fixture
def validator():
    return LedgerValidator()


class TestTransactionValidation:
    """Tests for transaction draft validation."""

    def test_valid_draft(self, validator):
        result = validator.validate_transaction(make_draft(), CATEGORIES)
        assert result.is_valid
        assert result.issues == []

    @pytest.mark.parametrize("field", ["value", "description", "date", "type", "person", "category"])
    def test_missing_required_field(self, validator, field):
        result = validator.validate_transaction(make_draft(**{field: None}), CATEGORIES)
        assert not result.schema_valid
        assert field in [issue.field for issue in result.errors]

    def test_non_positive_value(self, validator):
        result = validator.validate_transaction(make_draft(value=Decimal("-1")), CATEGORIES)
        assert result.errors[0].field == "value"

    def test_credit_without_card(self, validator):
        draft = make_draft(payment_method=PaymentMethod.CREDIT)
        result = validator.validate_transaction(draft, CATEGORIES)
        assert [i.field for i in result.errors] == ["credit_card_id"]

    def test_debit_with_card(self, validator):
        draft = make_draft(payment_method=PaymentMethod.DEBIT, credit_card_id=uuid4())
        result = validator.validate_transaction(draft, CATEGORIES)
        assert [i.field for i in result.errors] == ["credit_card_id"]

    def test_bad_competency_format(self, validator):
        result = validator.validate_transaction(make_draft(competency="2025/03"), CATEGORIES)
        assert result.errors[0].field == "competency"

    def test_installments_below_one(self, validator):
        result = validator.validate_transaction(make_draft(installments=0), CATEGORIES)
        assert result.errors[0].field == "installments"

    def test_installment_below_a_cent(self, validator):
        """Test that a split leaving installments under 0.01 is refused."""
        draft = make_draft(value=Decimal("0.05"), installments=10)
        result = validator.validate_transaction(draft, CATEGORIES)
        assert result.errors[0].field == "installments"

    def test_unknown_category(self, validator):
        result = validator.validate_transaction(make_draft(category="Pets"), CATEGORIES)
        assert result.schema_valid
        assert not result.semantic_valid
        assert result.errors[0].issue_type == "unknown_reference"

    def test_unknown_card_is_only_a_warning(self, validator):
        draft = make_draft(payment_method=PaymentMethod.CREDIT, credit_card_id=uuid4())
        known = CreditCard(name="Blue", owner=Person.BOTH, closing_day=1, due_day=10, limit=Decimal("1"))
        result = validator.validate_transaction(draft, CATEGORIES, [known])
        assert result.is_valid
        assert len(result.warnings) == 1

    def test_distant_competency_warns(self, validator):
        draft = make_draft(date=date(2025, 3, 10), competency="03/2027")
        result = validator.validate_transaction(draft, CATEGORIES)
        assert result.is_valid
        assert result.warnings


class TestOtherValidation:
    """Tests for budgets, cards, goals and deposits."""

    def test_value_budget_requires_amount(self, validator):
        draft = BudgetDraft(competency="03/2025", category="Food", person=Person.PARTY_A)
        result = validator.validate_budget(draft, CATEGORIES)
        assert result.errors[0].field == "amount"

    def test_percentage_budget_requires_percentage(self, validator):
        draft = BudgetDraft(
            competency="03/2025",
            category="Food",
            person=Person.PARTY_A,
            budget_type=BudgetType.PERCENTAGE,
        )
        result = validator.validate_budget(draft, CATEGORIES)
        assert result.errors[0].field == "percentage"

    def test_percentage_above_hundred(self, validator):
        draft = BudgetDraft(
            competency="03/2025",
            category="Food",
            person=Person.PARTY_A,
            budget_type=BudgetType.PERCENTAGE,
            percentage=Decimal("120"),
        )
        assert validator.validate_budget(draft, CATEGORIES).errors[0].field == "percentage"

    def test_card_requires_name_and_limit(self, validator):
        result = validator.validate_credit_card(" ", None)
        assert [i.field for i in result.errors] == ["name", "limit"]

    def test_goal_requires_target(self, validator):
        result = validator.validate_goal("Trip", None)
        assert result.errors[0].field == "target_amount"

    def test_goal_past_deadline_warns(self, validator):
        result = validator.validate_goal("Trip", Decimal("10"), date(2020, 1, 1), today=date(2025, 1, 1))
        assert result.is_valid
        assert result.warnings

    def test_deposit_must_be_positive(self, validator):
        assert validator.validate_deposit(Decimal("0")).errors[0].field == "amount"

    @pytest.mark.parametrize("value", ["abc", "NaN", "12,5.0"])
    def test_recurring_non_numeric_value(self, validator, value):
        data = dict(
            description="Gym",
            value=value,
            start_date=date(2025, 1, 1),
            payment_method=PaymentMethod.DEBIT,
            category="Leisure",
        )
        result = validator.validate_recurring(data, CATEGORIES)
        assert not result.is_valid
        assert result.errors[0].field == "value"
        with pytest.raises(ValidationError) as exc_info:
            validator.ensure_valid(result, "recurring_transaction")
        assert exc_info.value.field == "value"


class TestRaisingHelpers:
    """Tests for ensure_valid and build."""

    def test_ensure_valid_names_first_field(self, validator):
        result = validator.validate_transaction(make_draft(value=None), CATEGORIES)
        with pytest.raises(ValidationError) as exc_info:
            validator.ensure_valid(result, "transaction")
        assert exc_info.value.field == "value"

    def test_ensure_valid_passes_warnings(self, validator):
        draft = make_draft(date=date(2025, 3, 10), competency="03/2027")
        result = validator.validate_transaction(draft, CATEGORIES)
        assert validator.ensure_valid(result, "transaction") is result

    def test_build_converts_pydantic_errors(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.build(
                CreditCard,
                "credit_card",
                name="Blue",
                owner=Person.BOTH,
                closing_day=40,
                due_day=10,
                limit=Decimal("100"),
            )
        assert exc_info.value.field == "closing_day"

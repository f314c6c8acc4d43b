"""Tests for competency arithmetic, installment expansion and month closure."""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from household_ledger.core.closure import MonthClosureController, MonthState
from household_ledger.core.competency import (
    add_months,
    competency_of,
    competency_sort_key,
    last_competencies,
    month_bounds,
    parse_competency,
    shift_date,
)
from household_ledger.core.installments import expand_installments, split_value
from household_ledger.exceptions import AlreadyClosedError, MonthClosedError
from household_ledger.models.ledger import InstallmentRemainderPolicy, PaymentMethod

from tests.factories import make_draft


class TestCompetency:
    """Tests for MM/YYYY competency arithmetic."""

    def test_add_months_rolls_year_forward(self):
        assert add_months("11/2025", 3) == "02/2026"
        assert add_months("12/2025", 1) == "01/2026"

    def test_add_months_backwards(self):
        assert add_months("01/2025", -1) == "12/2024"
        assert add_months("03/2025", -14) == "01/2024"

    def test_parse_rejects_malformed(self):
        """Test that only two-digit month and four-digit year are accepted."""
        for bad in ["1/2025", "13/2025", "00/2025", "2025-01", "", "01/25"]:
            with pytest.raises(ValueError):
                parse_competency(bad)

    def test_competency_of_date(self):
        assert competency_of(date(2025, 7, 31)) == "07/2025"

    def test_shift_date_clamps_to_month_end(self):
        """Test that Jan 31 plus one month lands on the last day of February."""
        assert shift_date(date(2025, 1, 31), 1) == date(2025, 2, 28)
        assert shift_date(date(2024, 1, 31), 1) == date(2024, 2, 29)
        assert shift_date(date(2025, 11, 15), 2) == date(2026, 1, 15)

    def test_month_bounds_leap_year(self):
        assert month_bounds("02/2024") == (date(2024, 2, 1), date(2024, 2, 29))

    def test_last_competencies_oldest_first(self):
        assert last_competencies(3, date(2025, 2, 10)) == ["12/2024", "01/2025", "02/2025"]

    def test_sort_key_is_chronological(self):
        """Test that ordering follows the calendar, not the string."""
        ordered = sorted(["01/2025", "02/2024", "12/2024"], key=competency_sort_key)
        assert ordered == ["02/2024", "12/2024", "01/2025"]


class TestSplitValue:
    """Tests for dividing a purchase into installment values."""

    def test_even_split(self):
        assert split_value(Decimal("300.00"), 3) == [Decimal("100.00")] * 3

    def test_last_installment_absorbs_remainder(self):
        values = split_value(Decimal("100.00"), 3)
        assert values == [Decimal("33.33"), Decimal("33.33"), Decimal("33.34")]
        assert sum(values) == Decimal("100.00")

    def test_seven_installments_sum_exactly(self):
        values = split_value(Decimal("100.00"), 7)
        assert sum(values) == Decimal("100.00")
        assert all(v > 0 for v in values)

    def test_no_rounding_policy_uses_plain_division(self):
        """Test the uniform split stays within a cent of the purchase."""
        values = split_value(Decimal("100.00"), 3, InstallmentRemainderPolicy.NONE)
        assert len(set(values)) == 1
        assert abs(sum(values) - Decimal("100.00")) <= Decimal("0.01")

    def test_zero_installments_rejected(self):
        with pytest.raises(ValueError):
            split_value(Decimal("10"), 0)


class TestInstallmentExpansion:
    """Tests for expanding a purchase draft into transactions."""

    def test_three_installments_from_january(self):
        """Test 300.00 in 3 installments starting 01/2025."""
        draft = make_draft(
            date=date(2025, 1, 15),
            value=Decimal("300.00"),
            installments=3,
        )
        records = expand_installments(draft)

        assert [r.value for r in records] == [Decimal("100.00")] * 3
        assert [r.competency for r in records] == ["01/2025", "02/2025", "03/2025"]
        assert [r.installment_number for r in records] == [1, 2, 3]
        assert all(r.total_installments == 3 for r in records)
        group_ids = {r.installment_group_id for r in records}
        assert len(group_ids) == 1
        assert None not in group_ids

    def test_single_payment_has_no_group(self):
        records = expand_installments(make_draft())
        assert len(records) == 1
        assert records[0].competency == "03/2025"
        assert records[0].installment_group_id is None
        assert records[0].installment_number == 1
        assert records[0].total_installments == 1

    def test_year_rollover(self):
        draft = make_draft(date=date(2025, 11, 5), value=Decimal("400"), installments=4)
        records = expand_installments(draft)
        assert [r.competency for r in records] == ["11/2025", "12/2025", "01/2026", "02/2026"]

    def test_split_follows_purchase_month_not_explicit_competency(self):
        """Test that installments start on the purchase month even when a competency is given."""
        draft = make_draft(
            date=date(2025, 1, 15),
            competency="03/2025",
            value=Decimal("300"),
            installments=3,
        )
        records = expand_installments(draft)
        assert [r.competency for r in records] == ["01/2025", "02/2025", "03/2025"]

    def test_explicit_competency_places_single_payment(self):
        draft = make_draft(date=date(2025, 1, 30), competency="02/2025")
        [record] = expand_installments(draft)
        assert record.competency == "02/2025"
        assert record.date == date(2025, 1, 30)

    def test_installment_dates_shift_monthly(self):
        draft = make_draft(date=date(2025, 1, 31), value=Decimal("90"), installments=3)
        records = expand_installments(draft)
        assert [r.date for r in records] == [
            date(2025, 1, 31),
            date(2025, 2, 28),
            date(2025, 3, 31),
        ]

    def test_group_sums_to_purchase_value(self):
        draft = make_draft(value=Decimal("1000.00"), installments=12)
        records = expand_installments(draft)
        assert sum(r.value for r in records) == Decimal("1000.00")

    def test_credit_card_carried_to_every_installment(self):
        card_id = uuid4()
        draft = make_draft(
            payment_method=PaymentMethod.CREDIT,
            credit_card_id=card_id,
            installments=2,
        )
        records = expand_installments(draft)
        assert all(r.credit_card_id == card_id for r in records)


class TestMonthClosure:
    """Tests for the month closure controller."""

    def test_unknown_competency_is_open(self):
        controller = MonthClosureController()
        assert controller.state("03/2025") == MonthState.OPEN

    def test_close_returns_new_controller(self):
        original = MonthClosureController()
        closed = original.close("03/2025")
        assert closed.is_closed("03/2025")
        assert not original.is_closed("03/2025")

    def test_closing_twice_raises(self):
        controller = MonthClosureController(["03/2025"])
        with pytest.raises(AlreadyClosedError):
            controller.close("03/2025")

    def test_reopen_never_closed_is_noop(self):
        controller = MonthClosureController(["01/2025"])
        assert controller.reopen("03/2025") is controller

    def test_reopen_closed_month(self):
        controller = MonthClosureController(["03/2025"]).reopen("03/2025")
        assert controller.state("03/2025") == MonthState.OPEN

    def test_close_rejects_malformed_competency(self):
        with pytest.raises(ValueError):
            MonthClosureController().close("3/2025")

    def test_ensure_open_names_closed_month(self):
        controller = MonthClosureController(["02/2025"])
        with pytest.raises(MonthClosedError) as exc_info:
            controller.ensure_open(["01/2025", "02/2025", "03/2025"])
        assert exc_info.value.competency == "02/2025"

    def test_closed_months_sorted_chronologically(self):
        controller = MonthClosureController(["01/2025", "11/2024", "03/2024"])
        assert controller.closed_months == ["03/2024", "11/2024", "01/2025"]

"""Tests for investment totals and the derived notification list."""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from household_ledger.analytics.investments import estimated_value, summarize_investments
from household_ledger.analytics.notifications import (
    card_notifications,
    closure_notifications,
    next_on_day,
    next_recurring_date,
    recurring_notifications,
    upcoming_notifications,
)
from household_ledger.models.analytics import NotificationKind, NotificationLevel
from household_ledger.models.ledger import (
    CreditCard,
    Investment,
    InvestmentType,
    PaymentMethod,
    Person,
    RecurringTransaction,
    TransactionType,
)


def _investment(amount="1000.00", **overrides):
    data = dict(
        name="Treasury 2030",
        type=InvestmentType.GOVERNMENT_BOND,
        owner=Person.PARTY_A,
        invested_amount=Decimal(amount),
        investment_date=date(2024, 1, 1),
    )
    data.update(overrides)
    return Investment(**data)


def _card(due_day, name="Blue"):
    return CreditCard(
        name=name,
        owner=Person.PARTY_A,
        closing_day=1,
        due_day=due_day,
        limit=Decimal("1000"),
    )


def _template(**overrides):
    data = dict(
        description="Internet",
        type=TransactionType.EXPENSE,
        payment_method=PaymentMethod.DEBIT,
        person=Person.BOTH,
        category="Housing",
        value=Decimal("99.90"),
        start_date=date(2025, 1, 1),
        day_of_month=20,
    )
    data.update(overrides)
    return RecurringTransaction(**data)


class TestInvestmentSummary:
    """Tests for portfolio totals."""

    def test_empty_portfolio(self):
        summary = summarize_investments([])
        assert summary.total_invested == Decimal("0")
        assert summary.profit_percentage == Decimal("0")
        assert summary.by_type == {}

    def test_totals_use_current_value_when_marked(self):
        marked = _investment("1000.00", current_value=Decimal("1100.00"))
        unmarked = _investment(
            "500.00", type=InvestmentType.STOCK, owner=Person.PARTY_B
        )
        summary = summarize_investments([marked, unmarked])

        assert summary.total_invested == Decimal("1500.00")
        assert summary.total_current_value == Decimal("1600.00")
        assert summary.profit == Decimal("100.00")
        assert summary.profit_percentage == Decimal("6.67")

    def test_breakdowns_sum_invested_amount(self):
        summary = summarize_investments([
            _investment("1000.00", current_value=Decimal("2000.00")),
            _investment("300.00"),
            _investment("200.00", type=InvestmentType.STOCK, owner=Person.BOTH),
        ])
        assert summary.by_type == {
            InvestmentType.GOVERNMENT_BOND: Decimal("1300.00"),
            InvestmentType.STOCK: Decimal("200.00"),
        }
        assert summary.by_owner[Person.PARTY_A] == Decimal("1300.00")
        assert summary.by_owner[Person.BOTH] == Decimal("200.00")

    def test_loss_is_negative_profit(self):
        summary = summarize_investments([_investment("1000.00", current_value=Decimal("750.00"))])
        assert summary.profit == Decimal("-250.00")
        assert summary.profit_percentage == Decimal("-25.00")


class TestEstimatedValue:
    """Tests for the compound-growth estimate."""

    def test_without_rate_is_invested_amount(self):
        assert estimated_value(_investment("1000.00"), date(2030, 1, 1)) == Decimal("1000.00")

    def test_one_year_of_growth(self):
        investment = _investment("1000.00", annual_rate=Decimal("10"), investment_date=date(2023, 1, 1))
        assert estimated_value(investment, date(2024, 1, 1)) == Decimal("1100.00")

    def test_before_investment_date_does_not_shrink(self):
        investment = _investment("1000.00", annual_rate=Decimal("10"), investment_date=date(2025, 6, 1))
        assert estimated_value(investment, date(2025, 1, 1)) == Decimal("1000.00")


class TestNextDates:
    """Tests for due-date arithmetic."""

    def test_same_day_counts(self):
        assert next_on_day(10, date(2025, 3, 10)) == date(2025, 3, 10)

    def test_rolls_to_next_month(self):
        assert next_on_day(5, date(2025, 3, 10)) == date(2025, 4, 5)

    def test_rolls_over_year_end(self):
        assert next_on_day(5, date(2025, 12, 10)) == date(2026, 1, 5)

    def test_clamped_to_short_month(self):
        assert next_on_day(31, date(2025, 2, 10)) == date(2025, 2, 28)

    def test_recurring_not_started_yet(self):
        template = _template(start_date=date(2025, 6, 1))
        assert next_recurring_date(template, date(2025, 3, 1)) == date(2025, 6, 20)

    def test_recurring_inactive_or_ended(self):
        assert next_recurring_date(_template(active=False), date(2025, 3, 1)) is None
        ended = _template(end_date=date(2025, 3, 15))
        assert next_recurring_date(ended, date(2025, 3, 16)) is None


class TestNotifications:
    """Tests for card, recurring and month closure reminders."""

    def test_card_within_window(self):
        [note] = card_notifications([_card(15)], date(2025, 3, 10), days_ahead=7)
        assert note.kind == NotificationKind.CARD_DUE
        assert note.level == NotificationLevel.WARNING
        assert note.days_until == 5
        assert note.due_date == date(2025, 3, 15)

    def test_card_due_soon_is_error(self):
        [note] = card_notifications([_card(12)], date(2025, 3, 10))
        assert note.level == NotificationLevel.ERROR

    def test_card_outside_window_skipped(self):
        assert card_notifications([_card(25)], date(2025, 3, 10), days_ahead=7) == []

    def test_recurring_within_window(self):
        template = _template()
        [note] = recurring_notifications([template], date(2025, 3, 18))
        assert note.entity_id == template.id
        assert note.days_until == 2
        assert note.level == NotificationLevel.ERROR

    def test_inactive_recurring_skipped(self):
        assert recurring_notifications([_template(active=False)], date(2025, 3, 18)) == []

    def test_open_months_newest_first(self):
        notes = closure_notifications(["02/2025"], date(2025, 3, 10), months=3)
        assert [n.competency for n in notes] == ["03/2025", "01/2025"]
        assert notes[0].level == NotificationLevel.WARNING
        assert notes[1].level == NotificationLevel.INFO

    def test_all_closed_means_no_reminder(self):
        closed = ["01/2025", "02/2025", "03/2025"]
        assert closure_notifications(closed, date(2025, 3, 10), months=3) == []

    def test_sorted_by_level_then_days(self):
        cards = [_card(16, "Far"), _card(11, "Near")]
        notes = upcoming_notifications(
            cards,
            [_template(day_of_month=12)],
            ["01/2025", "02/2025", "03/2025"],
            today=date(2025, 3, 10),
        )
        assert [n.level for n in notes] == [
            NotificationLevel.ERROR,
            NotificationLevel.ERROR,
            NotificationLevel.WARNING,
        ]
        assert [n.days_until for n in notes] == [1, 2, 6]

    def test_month_reminders_sort_after_dated_ones(self):
        notes = upcoming_notifications([_card(17)], [], [], today=date(2025, 3, 10), closure_months=1)
        assert [n.kind for n in notes] == [NotificationKind.CARD_DUE, NotificationKind.MONTH_OPEN]

    @pytest.mark.parametrize("days_ahead", [0, 1])
    def test_zero_window_only_today(self, days_ahead):
        notes = card_notifications([_card(10), _card(11)], date(2025, 3, 10), days_ahead)
        assert len(notes) == days_ahead + 1

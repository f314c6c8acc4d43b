"""
Main Orchestrator for Household Ledger

This module ties together all the components and defines the
operations callers use:
1. Recording (draft -> validate -> expand -> closure check -> persist)
2. Month closure (close / reopen competencies)
3. Planning (budgets, cards, savings goals, categories, recurring templates)
4. Analytics (aggregations, budget health, savings projections, invoices)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is written before validation succeeds
- Transactions in a closed competency are never created or deleted
- A failed write leaves the in-memory collections untouched
- Every mutation is logged as a structured event

Analytics are pure functions over the current collection snapshots;
only the mutations touch storage.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Sequence
from uuid import UUID

import structlog
from pydantic import ValidationError as PydanticValidationError

from household_ledger.analytics import (
    aggregation,
    average_monthly_savings,
    estimated_value,
    evaluate_budgets,
    invoices_for_month,
    monthly_deposit_totals,
    percentage_budget_amount,
    project_goals,
    score_health,
    summarize_investments,
    upcoming_notifications,
)
from household_ledger.config import LedgerSettings, get_settings
from household_ledger.core import (
    MonthClosureController,
    expand_installments,
    generate_for_month,
    is_valid_competency,
)
from household_ledger.events import LedgerEventLogger, configure_logging, get_event_logger
from household_ledger.exceptions import (
    AlreadyClosedError,
    LedgerError,
    MonthClosedError,
    NotFoundError,
    ValidationError,
)
from household_ledger.importers import ImportReport, export_transactions_csv, read_rows, row_to_draft
from household_ledger.models.analytics import (
    BudgetHealth,
    BudgetStatus,
    BurndownPoint,
    CategoryTrendPoint,
    GoalProjection,
    HistoryPoint,
    InvestmentSummary,
    InvoiceSummary,
    MonthlySavings,
    Notification,
    TransactionFilter,
    TypeTotals,
)
from household_ledger.models.events import LedgerEventBuilder
from household_ledger.models.ledger import (
    Budget,
    BudgetDraft,
    BudgetType,
    CreditCard,
    CreditCardInvoice,
    Deposit,
    Investment,
    InvestmentType,
    PaymentMethod,
    Person,
    RecurringTransaction,
    SavingsGoal,
    Transaction,
    TransactionDraft,
)
from household_ledger.services.collections import (
    BUDGETS,
    CATEGORIES,
    CLOSED_MONTHS,
    CREDIT_CARD_INVOICES,
    CREDIT_CARDS,
    INVESTMENTS,
    RECURRING_TRANSACTIONS,
    SAVINGS_GOALS,
    TRANSACTIONS,
    LedgerCollections,
)
from household_ledger.services.storage import (
    GoogleSheetsClient,
    GoogleSheetsKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStoreInterface,
)
from household_ledger.validation import LedgerValidator


logger = structlog.get_logger("household_ledger.orchestrator")

_UPDATABLE_INVESTMENT_FIELDS = frozenset({
    "name",
    "type",
    "owner",
    "invested_amount",
    "investment_date",
    "annual_rate",
    "current_value",
    "description",
    "institution",
})


def normalize_categories(names: Sequence[str]) -> list[str]:
    """
    Trim names, drop blanks and case-insensitive duplicates (first
    spelling wins), and sort case-insensitively.
    """
    seen: dict[str, str] = {}
    for name in names:
        cleaned = (name or "").strip()
        if cleaned and cleaned.lower() not in seen:
            seen[cleaned.lower()] = cleaned
    return sorted(seen.values(), key=str.lower)


def _find(items: Sequence[Any], entity_id: UUID, entity: str) -> Any:
    for item in items:
        if item.id == entity_id:
            return item
    raise NotFoundError(entity, entity_id)


def _without(items: Sequence[Any], entity_id: UUID) -> tuple:
    return tuple(item for item in items if item.id != entity_id)


class LedgerService:
    """
    Facade over the ledger collections.

    Call `await load()` (and `await ensure_initialized()` on first run)
    before anything else.
    """

    def __init__(
        self,
        store: Optional[KeyValueStoreInterface] = None,
        validator: Optional[LedgerValidator] = None,
        event_logger: Optional[LedgerEventLogger] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        self._events = event_logger or get_event_logger()
        self._settings = settings or get_settings().ledger
        self._store = store or InMemoryKeyValueStore()
        self._collections = LedgerCollections(self._store, self._events)
        self._validator = validator or LedgerValidator(self._events)

    @property
    def collections(self) -> LedgerCollections:
        return self._collections

    @property
    def settings(self) -> LedgerSettings:
        return self._settings

    # =========================================================================
    # LOADING
    # =========================================================================

    async def load(self) -> dict[str, int]:
        """Read every collection from the store."""
        counts = await self._collections.load()
        self._events.log(LedgerEventBuilder.collections_loaded(counts))
        return counts

    async def ensure_initialized(self, categories: Optional[Sequence[str]] = None) -> bool:
        """
        Seed the category list on first run.

        Returns:
            True if the store was initialized now, False if it already was
        """
        if await self._collections.is_initialized():
            return False

        seeded = self._collections.categories
        if not seeded:
            names = categories if categories is not None else self._settings.default_categories_list
            seeded = await self._collections.replace_all(CATEGORIES, normalize_categories(names))

        await self._collections.mark_initialized()
        self._events.log(LedgerEventBuilder.store_initialized(list(seeded)))
        return True

    # =========================================================================
    # MONTH CLOSURE
    # =========================================================================

    def _closure(self) -> MonthClosureController:
        return MonthClosureController(self._collections.closed_months)

    def _require_competency(self, competency: str) -> None:
        if not is_valid_competency(competency):
            self._events.log_validation_failed(
                "month", "competency", f"Competency '{competency}' must be MM/YYYY"
            )
            raise ValidationError("competency", f"Competency '{competency}' must be MM/YYYY")

    def _ensure_open(self, competencies: Sequence[str], operation: str) -> None:
        try:
            self._closure().ensure_open(competencies)
        except MonthClosedError as e:
            self._events.log_mutation_refused(e.competency, operation)
            raise

    def is_closed(self, competency: str) -> bool:
        return self._closure().is_closed(competency)

    def closed_months(self) -> list[str]:
        return self._closure().closed_months

    async def close_month(self, competency: str) -> list[str]:
        """
        Close a competency.

        Raises:
            ValidationError: If the competency is not MM/YYYY
            AlreadyClosedError: If it is already closed (logged as a warning)
        """
        self._require_competency(competency)
        try:
            closed = await self._collections.update(
                CLOSED_MONTHS,
                lambda current: MonthClosureController(current).close(competency).closed_months,
            )
        except AlreadyClosedError:
            self._events.log(LedgerEventBuilder.month_already_closed(competency))
            raise

        self._events.log(LedgerEventBuilder.month_closed(competency))
        return list(closed)

    async def reopen_month(self, competency: str) -> bool:
        """
        Reopen a competency. Reopening an open competency changes nothing.

        Returns:
            Whether the competency was closed before the call
        """
        self._require_competency(competency)
        was_closed = self.is_closed(competency)
        if was_closed:
            await self._collections.update(
                CLOSED_MONTHS,
                lambda current: MonthClosureController(current).reopen(competency).closed_months,
            )
        self._events.log(LedgerEventBuilder.month_reopened(competency, was_closed))
        return was_closed

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    async def create_transaction(self, draft: TransactionDraft) -> list[Transaction]:
        """
        Record a purchase, expanded into one record per installment.

        Returns:
            The created records, in installment order

        Raises:
            ValidationError: Missing or invalid field (nothing written)
            MonthClosedError: Any target competency is closed (nothing written)
            PersistenceError: The store write failed (nothing adopted)
        """
        result = self._validator.validate_transaction(
            draft,
            self._collections.categories,
            self._collections.credit_cards,
        )
        self._validator.ensure_valid(result, "transaction")
        for warning in result.warnings:
            logger.warning("transaction_warning", message=warning)

        try:
            records = expand_installments(draft, self._settings.installment_remainder_policy)
        except PydanticValidationError as e:
            raise self._validator.translate(e, "transaction") from e

        competencies = [r.competency for r in records]

        def append(current: tuple) -> tuple:
            self._ensure_open(competencies, "create_transaction")
            return current + tuple(records)

        await self._collections.update(TRANSACTIONS, append)

        self._events.log(LedgerEventBuilder.transactions_created(
            [r.id for r in records],
            competencies,
            str(sum((r.value for r in records), Decimal("0"))),
            records[0].installment_group_id,
        ))
        return records

    async def delete_transaction(self, transaction_id: UUID) -> Transaction:
        """
        Delete one transaction. Other installments of its group stay.

        Raises:
            NotFoundError: Unknown id
            MonthClosedError: Its competency is closed
        """
        def remove(current: tuple) -> tuple:
            target = _find(current, transaction_id, "Transaction")
            self._ensure_open([target.competency], "delete_transaction")
            return _without(current, transaction_id)

        target = _find(self._collections.transactions, transaction_id, "Transaction")
        await self._collections.update(TRANSACTIONS, remove)
        self._events.log(LedgerEventBuilder.transaction_deleted(target.id, target.competency))
        return target

    def installments_for_group(self, group_id: UUID) -> list[Transaction]:
        """Every installment of a purchase, in installment order."""
        return sorted(
            (t for t in self._collections.transactions if t.installment_group_id == group_id),
            key=lambda t: t.installment_number,
        )

    async def delete_installment_group(self, group_id: UUID) -> list[Transaction]:
        """
        Delete every installment of a purchase.

        Refused as a whole if any installment lies in a closed competency.
        """
        members = self.installments_for_group(group_id)
        if not members:
            raise NotFoundError("Installment group", group_id)

        def remove(current: tuple) -> tuple:
            self._ensure_open([t.competency for t in members], "delete_installment_group")
            return tuple(t for t in current if t.installment_group_id != group_id)

        await self._collections.update(TRANSACTIONS, remove)
        self._events.log(LedgerEventBuilder.installment_group_deleted(group_id, len(members)))
        return members

    def list_transactions(self, filters: Optional[TransactionFilter] = None) -> list[Transaction]:
        """Transactions matching the filter, most recent first."""
        matched = aggregation.filter_transactions(self._collections.transactions, filters)
        return sorted(matched, key=lambda t: (t.date, t.installment_number), reverse=True)

    async def import_transactions_csv(self, text: str) -> ImportReport:
        """
        Create transactions from CSV text, row by row.

        A failing row is reported and skipped; it never aborts the rest.

        Raises:
            ValidationError: If the header itself is unusable
        """
        try:
            rows = read_rows(text)
        except ValueError as e:
            self._events.log_validation_failed("import", "csv", str(e))
            raise ValidationError("csv", str(e)) from e

        report = ImportReport(total=len(rows))
        for row_number, row in rows:
            try:
                draft = row_to_draft(row, self._collections.credit_cards)
                await self.create_transaction(draft)
                report.succeeded += 1
            except (ValueError, LedgerError) as e:
                report.record_failure(row_number, str(e))

        self._events.log(LedgerEventBuilder.import_completed(
            report.total, report.succeeded, report.failed
        ))
        return report

    def export_transactions_csv(self, filters: Optional[TransactionFilter] = None) -> str:
        """CSV text of the filtered transactions, readable by import_transactions_csv."""
        return export_transactions_csv(self._filtered(filters), self._collections.credit_cards)

    # =========================================================================
    # BUDGETS
    # =========================================================================

    async def add_budget(self, draft: BudgetDraft) -> Budget:
        """
        Create a budget. Percentage budgets resolve their amount from the
        competency's income at creation time.
        """
        result = self._validator.validate_budget(draft, self._collections.categories)
        self._validator.ensure_valid(result, "budget")

        amount = draft.amount
        if draft.budget_type == BudgetType.PERCENTAGE:
            amount = percentage_budget_amount(
                self._collections.transactions,
                draft.competency,
                draft.person,
                draft.percentage,
            )
            if amount <= 0:
                message = f"No income recorded in {draft.competency} to derive the budget from"
                self._events.log_validation_failed("budget", "percentage", message)
                raise ValidationError("percentage", message)

        budget = self._validator.build(
            Budget,
            "budget",
            competency=draft.competency,
            category=draft.category,
            person=draft.person,
            amount=amount,
            budget_type=draft.budget_type,
            percentage=draft.percentage if draft.budget_type == BudgetType.PERCENTAGE else None,
        )
        await self._collections.update(BUDGETS, lambda current: current + (budget,))
        self._events.log_entity_created(
            "budget", budget.id, f"{budget.category} / {budget.person.value} in {budget.competency}"
        )
        return budget

    async def delete_budget(self, budget_id: UUID) -> None:
        _find(self._collections.budgets, budget_id, "Budget")
        await self._collections.update(BUDGETS, lambda current: _without(current, budget_id))
        self._events.log_entity_deleted("budget", budget_id)

    def budgets_for(self, competency: str) -> list[Budget]:
        return [b for b in self._collections.budgets if b.competency == competency]

    # =========================================================================
    # CREDIT CARDS AND INVOICES
    # =========================================================================

    async def add_credit_card(
        self,
        name: Optional[str],
        owner: Person,
        closing_day: int,
        due_day: int,
        limit: Optional[Decimal],
    ) -> CreditCard:
        result = self._validator.validate_credit_card(name, limit)
        self._validator.ensure_valid(result, "credit_card")
        card = self._validator.build(
            CreditCard,
            "credit_card",
            name=name,
            owner=owner,
            closing_day=closing_day,
            due_day=due_day,
            limit=limit,
        )
        await self._collections.update(CREDIT_CARDS, lambda current: current + (card,))
        self._events.log_entity_created("credit_card", card.id, card.name)
        return card

    async def delete_credit_card(self, card_id: UUID) -> None:
        """Existing transactions keep their reference to the card."""
        _find(self._collections.credit_cards, card_id, "Credit card")
        await self._collections.update(CREDIT_CARDS, lambda current: _without(current, card_id))
        self._events.log_entity_deleted("credit_card", card_id)

    def invoices_for_month(self, competency: str) -> list[InvoiceSummary]:
        return invoices_for_month(
            self._collections.credit_cards,
            competency,
            self._collections.transactions,
            self._collections.credit_card_invoices,
        )

    async def set_invoice_paid(self, card_id: UUID, competency: str, paid: bool = True) -> CreditCardInvoice:
        """Upsert the paid status of one card's invoice for a competency."""
        self._require_competency(competency)
        _find(self._collections.credit_cards, card_id, "Credit card")
        invoice = CreditCardInvoice(
            credit_card_id=card_id,
            reference_month=competency,
            paid=paid,
            paid_at=datetime.utcnow() if paid else None,
        )

        def upsert(current: tuple) -> tuple:
            kept = tuple(
                i for i in current
                if not (i.credit_card_id == card_id and i.reference_month == competency)
            )
            return kept + (invoice,)

        await self._collections.update(CREDIT_CARD_INVOICES, upsert)
        self._events.log(LedgerEventBuilder.invoice_status_updated(card_id, competency, paid))
        return invoice

    async def set_all_invoices_paid(self, competency: str, paid: bool = True) -> list[CreditCardInvoice]:
        """Set the paid status of every card's invoice for a competency at once."""
        self._require_competency(competency)
        paid_at = datetime.utcnow() if paid else None
        invoices = [
            CreditCardInvoice(
                credit_card_id=card.id,
                reference_month=competency,
                paid=paid,
                paid_at=paid_at,
            )
            for card in self._collections.credit_cards
        ]
        if not invoices:
            return []

        def upsert(current: tuple) -> tuple:
            kept = tuple(i for i in current if i.reference_month != competency)
            return kept + tuple(invoices)

        await self._collections.update(CREDIT_CARD_INVOICES, upsert)
        for invoice in invoices:
            self._events.log(LedgerEventBuilder.invoice_status_updated(
                invoice.credit_card_id, competency, paid
            ))
        return invoices

    # =========================================================================
    # SAVINGS GOALS
    # =========================================================================

    async def add_goal(
        self,
        name: Optional[str],
        target_amount: Optional[Decimal],
        owner: Person,
        deadline: Optional[date] = None,
        description: str = "",
    ) -> SavingsGoal:
        result = self._validator.validate_goal(name, target_amount, deadline)
        self._validator.ensure_valid(result, "savings_goal")
        goal = self._validator.build(
            SavingsGoal,
            "savings_goal",
            name=name,
            target_amount=target_amount,
            owner=owner,
            deadline=deadline,
            description=description,
        )
        await self._collections.update(SAVINGS_GOALS, lambda current: current + (goal,))
        self._events.log_entity_created("savings_goal", goal.id, goal.name)
        return goal

    async def delete_goal(self, goal_id: UUID) -> None:
        _find(self._collections.savings_goals, goal_id, "Savings goal")
        await self._collections.update(SAVINGS_GOALS, lambda current: _without(current, goal_id))
        self._events.log_entity_deleted("savings_goal", goal_id)

    async def add_deposit(
        self,
        goal_id: UUID,
        amount: Optional[Decimal],
        deposit_date: Optional[date] = None,
        person: Optional[Person] = None,
        note: Optional[str] = None,
    ) -> SavingsGoal:
        """
        Append a deposit to a goal and raise its current amount.

        Returns:
            The updated goal
        """
        result = self._validator.validate_deposit(amount)
        self._validator.ensure_valid(result, "deposit")
        _find(self._collections.savings_goals, goal_id, "Savings goal")

        deposit = self._validator.build(
            Deposit,
            "deposit",
            amount=amount,
            date=deposit_date or date.today(),
            person=person,
            note=note,
        )

        def append_deposit(current: tuple) -> tuple:
            goal = _find(current, goal_id, "Savings goal")
            return tuple(
                g.with_deposit(deposit) if g.id == goal.id else g
                for g in current
            )

        goals = await self._collections.update(SAVINGS_GOALS, append_deposit)
        updated = _find(goals, goal_id, "Savings goal")
        self._events.log(LedgerEventBuilder.deposit_added(
            goal_id, str(deposit.amount), str(updated.current_amount)
        ))
        return updated

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    def categories(self) -> list[str]:
        return list(self._collections.categories)

    async def replace_categories(self, names: Sequence[str]) -> list[str]:
        """
        Replace the whole category set. Existing transactions and
        budgets keep whatever category name they were created with.
        """
        cleaned = normalize_categories(names)
        await self._collections.replace_all(CATEGORIES, cleaned)
        self._events.log(LedgerEventBuilder.categories_replaced(cleaned))
        return cleaned

    async def add_category(self, name: str) -> list[str]:
        if not name or not name.strip():
            self._events.log_validation_failed("category", "name", "Category name is required")
            raise ValidationError("name", "Category name is required")
        return await self.replace_categories(list(self._collections.categories) + [name])

    async def remove_category(self, name: str) -> list[str]:
        wanted = name.strip().lower()
        remaining = [c for c in self._collections.categories if c.lower() != wanted]
        if len(remaining) == len(self._collections.categories):
            raise NotFoundError("Category", name)
        return await self.replace_categories(remaining)

    # =========================================================================
    # RECURRING TRANSACTIONS
    # =========================================================================

    async def add_recurring(self, **fields: Any) -> RecurringTransaction:
        """
        Register a monthly template.

        Accepts the RecurringTransaction fields as keyword arguments.
        """
        result = self._validator.validate_recurring(fields, self._collections.categories)
        self._validator.ensure_valid(result, "recurring_transaction")
        template = self._validator.build(RecurringTransaction, "recurring_transaction", **fields)
        await self._collections.update(
            RECURRING_TRANSACTIONS, lambda current: current + (template,)
        )
        self._events.log_entity_created("recurring_transaction", template.id, template.description)
        return template

    async def delete_recurring(self, template_id: UUID) -> None:
        """Transactions already generated from the template are kept."""
        _find(self._collections.recurring_transactions, template_id, "Recurring transaction")
        await self._collections.update(
            RECURRING_TRANSACTIONS, lambda current: _without(current, template_id)
        )
        self._events.log_entity_deleted("recurring_transaction", template_id)

    async def set_recurring_active(self, template_id: UUID, active: bool) -> RecurringTransaction:
        template = _find(self._collections.recurring_transactions, template_id, "Recurring transaction")
        updated = template.model_copy(update={"active": active})
        await self._collections.update(
            RECURRING_TRANSACTIONS,
            lambda current: tuple(updated if t.id == template_id else t for t in current),
        )
        return updated

    async def generate_recurring_for_month(self, competency: str) -> list[Transaction]:
        """
        Create this competency's entries for every applicable template.

        Safe to call repeatedly: templates already generated for the
        competency are skipped.

        Raises:
            MonthClosedError: If the competency is closed
        """
        self._require_competency(competency)
        self._ensure_open([competency], "generate_recurring")

        templates = self._collections.recurring_transactions
        generated: list[Transaction] = []

        def append(current: tuple) -> tuple:
            self._ensure_open([competency], "generate_recurring")
            generated.extend(generate_for_month(templates, competency, current))
            return current + tuple(generated)

        if generate_for_month(templates, competency, self._collections.transactions):
            await self._collections.update(TRANSACTIONS, append)
        self._events.log(LedgerEventBuilder.recurring_generated(competency, len(generated)))
        return generated

    # =========================================================================
    # INVESTMENTS
    # =========================================================================

    async def add_investment(
        self,
        name: Optional[str],
        type: InvestmentType,
        owner: Person,
        invested_amount: Optional[Decimal],
        investment_date: Optional[date],
        annual_rate: Optional[Decimal] = None,
        current_value: Optional[Decimal] = None,
        description: str = "",
        institution: Optional[str] = None,
    ) -> Investment:
        result = self._validator.validate_investment(
            name, invested_amount, investment_date, annual_rate, current_value
        )
        self._validator.ensure_valid(result, "investment")
        investment = self._validator.build(
            Investment,
            "investment",
            name=name,
            type=type,
            owner=owner,
            invested_amount=invested_amount,
            investment_date=investment_date,
            annual_rate=annual_rate,
            current_value=current_value,
            description=description,
            institution=institution,
        )
        await self._collections.update(INVESTMENTS, lambda current: current + (investment,))
        self._events.log_entity_created("investment", investment.id, investment.name)
        return investment

    async def update_investment(self, investment_id: UUID, **changes: Any) -> Investment:
        """
        Replace the given fields of an investment.

        The id and creation time are kept; updated_at is set to now.

        Raises:
            NotFoundError: If the investment does not exist
            ValidationError: For an unknown field or an invalid value
        """
        current = _find(self._collections.investments, investment_id, "Investment")
        for field in changes:
            if field not in _UPDATABLE_INVESTMENT_FIELDS:
                self._events.log_validation_failed("investment", field, "Field cannot be updated")
                raise ValidationError(field, f"Field '{field}' cannot be updated")

        merged = {**current.model_dump(), **changes}
        result = self._validator.validate_investment(
            merged["name"],
            merged["invested_amount"],
            merged["investment_date"],
            merged["annual_rate"],
            merged["current_value"],
        )
        self._validator.ensure_valid(result, "investment")
        merged["updated_at"] = datetime.utcnow()
        updated = self._validator.build(Investment, "investment", **merged)

        def replace(items: tuple) -> tuple:
            _find(items, investment_id, "Investment")
            return tuple(updated if i.id == investment_id else i for i in items)

        await self._collections.update(INVESTMENTS, replace)
        self._events.log_entity_updated("investment", investment_id, sorted(changes))
        return updated

    async def delete_investment(self, investment_id: UUID) -> None:
        _find(self._collections.investments, investment_id, "Investment")
        await self._collections.update(INVESTMENTS, lambda current: _without(current, investment_id))
        self._events.log_entity_deleted("investment", investment_id)

    def list_investments(self) -> list[Investment]:
        """Investments, most recent investment date first."""
        return sorted(
            self._collections.investments,
            key=lambda i: (i.investment_date, i.created_at),
            reverse=True,
        )

    # =========================================================================
    # ANALYTICS
    # =========================================================================

    def _filtered(self, filters: Optional[TransactionFilter]) -> list[Transaction]:
        return aggregation.filter_transactions(self._collections.transactions, filters)

    def totals(self, filters: Optional[TransactionFilter] = None) -> TypeTotals:
        return aggregation.totals_by_type(self._filtered(filters))

    def sum_by_category(self, filters: Optional[TransactionFilter] = None) -> dict[str, Decimal]:
        return aggregation.sum_by_category(self._filtered(filters))

    def sum_by_person(self, filters: Optional[TransactionFilter] = None) -> dict[Person, Decimal]:
        return aggregation.sum_by_person(self._filtered(filters))

    def sum_by_payment_method(
        self,
        filters: Optional[TransactionFilter] = None,
    ) -> dict[PaymentMethod, Decimal]:
        return aggregation.sum_by_payment_method(self._filtered(filters))

    def historical_series(
        self,
        months_back: Optional[int] = None,
        filters: Optional[TransactionFilter] = None,
        today: Optional[date] = None,
    ) -> list[HistoryPoint]:
        return aggregation.historical_series(
            self._collections.transactions,
            self._collections.budgets,
            months_back if months_back is not None else self._settings.history_months,
            today,
            filters,
        )

    def burndown(self, competency: str) -> list[BurndownPoint]:
        return aggregation.burndown(
            self._collections.transactions,
            self._collections.budgets,
            competency,
        )

    def category_trend(
        self,
        categories: Optional[Sequence[str]] = None,
        months_back: Optional[int] = None,
        today: Optional[date] = None,
    ) -> list[CategoryTrendPoint]:
        """Per-category expense trend; all known categories when none are given."""
        return aggregation.category_trend(
            self._collections.transactions,
            months_back if months_back is not None else self._settings.history_months,
            list(categories) if categories is not None else list(self._collections.categories),
            today,
        )

    def available_competencies(self) -> list[str]:
        return aggregation.available_competencies(self._collections.transactions)

    def budget_statuses(self, competency: str) -> list[BudgetStatus]:
        return evaluate_budgets(self.budgets_for(competency), self._collections.transactions)

    def budget_health(self, competency: str) -> BudgetHealth:
        return score_health(self._collections.budgets, self._collections.transactions, competency)

    def monthly_savings(self, today: Optional[date] = None) -> list[MonthlySavings]:
        return monthly_deposit_totals(
            self._collections.savings_goals,
            today,
            self._settings.savings_window_months,
        )

    def average_monthly_savings(self, today: Optional[date] = None) -> Decimal:
        return average_monthly_savings(
            self._collections.savings_goals,
            today,
            self._settings.savings_window_months,
        )

    def savings_projections(self, today: Optional[date] = None) -> list[GoalProjection]:
        return project_goals(
            self._collections.savings_goals,
            today,
            self._settings.savings_window_months,
        )

    def investment_summary(self) -> InvestmentSummary:
        return summarize_investments(self._collections.investments)

    def estimated_investment_values(self, today: Optional[date] = None) -> dict[UUID, Decimal]:
        """Compound-growth estimate per investment id."""
        return {i.id: estimated_value(i, today) for i in self._collections.investments}

    def notifications(
        self,
        today: Optional[date] = None,
        days_ahead: Optional[int] = None,
    ) -> list[Notification]:
        """Card due dates, upcoming recurring entries and open recent months."""
        return upcoming_notifications(
            self._collections.credit_cards,
            self._collections.recurring_transactions,
            self._collections.closed_months,
            today,
            days_ahead if days_ahead is not None else self._settings.notification_days_ahead,
            self._settings.closure_check_months,
        )


def create_app_components(
    use_storage: bool = True,
) -> tuple[LedgerService, Optional[GoogleSheetsClient]]:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to use the configured persistent backend.
                     Set to False for an in-memory ledger.

    Returns:
        (ledger_service, sheets_client)
    """
    settings = get_settings().ledger
    configure_logging(settings.log_level)
    event_logger = get_event_logger()

    sheets_client = None
    store: KeyValueStoreInterface = InMemoryKeyValueStore()

    if use_storage and settings.storage_backend == "google_sheets":
        try:
            sheets_client = GoogleSheetsClient()
            store = GoogleSheetsKeyValueStore(sheets_client)
        except Exception as e:
            # Storage not configured - continue in memory
            logger.warning("storage_not_configured", error=str(e))
            sheets_client = None
            store = InMemoryKeyValueStore()

    service = LedgerService(
        store=store,
        event_logger=event_logger,
        settings=settings,
    )
    return service, sheets_client

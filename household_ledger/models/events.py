"""
Ledger Event Models

Every mutation of the ledger emits one structured event. Events are
written to the local structured log only; they are not an audit trail
and are never read back.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class LedgerEventType(str, Enum):
    """Types of events the ledger logs."""
    # Loading
    COLLECTIONS_LOADED = "collections_loaded"
    STORE_INITIALIZED = "store_initialized"

    # Transactions
    TRANSACTIONS_CREATED = "transactions_created"
    TRANSACTION_DELETED = "transaction_deleted"
    INSTALLMENT_GROUP_DELETED = "installment_group_deleted"
    RECURRING_GENERATED = "recurring_generated"
    IMPORT_COMPLETED = "import_completed"

    # Month closure
    MONTH_CLOSED = "month_closed"
    MONTH_REOPENED = "month_reopened"
    MONTH_ALREADY_CLOSED = "month_already_closed"
    MUTATION_REFUSED = "mutation_refused"

    # Other entities
    ENTITY_CREATED = "entity_created"
    ENTITY_DELETED = "entity_deleted"
    ENTITY_UPDATED = "entity_updated"
    DEPOSIT_ADDED = "deposit_added"
    CATEGORIES_REPLACED = "categories_replaced"
    INVOICE_STATUS_UPDATED = "invoice_status_updated"

    # Failures
    VALIDATION_FAILED = "validation_failed"
    PERSISTENCE_FAILED = "persistence_failed"


class LedgerSeverity(str, Enum):
    """Severity level for ledger events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LedgerEvent(BaseModel):
    """A single ledger event."""

    event_id: UUID = Field(default_factory=uuid4)
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )
    event_type: LedgerEventType
    severity: LedgerSeverity = LedgerSeverity.INFO

    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'budget', 'month')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID (or competency) of the entity this event relates to"
    )
    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class LedgerEventBuilder:
    """
    Helper class to build ledger events with common patterns.

    Usage:
        event = LedgerEventBuilder.month_closed("03/2025")
        event = LedgerEventBuilder.transactions_created(records)
    """

    @staticmethod
    def collections_loaded(counts: dict[str, int]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.COLLECTIONS_LOADED,
            description="Ledger collections loaded",
            details=counts,
        )

    @staticmethod
    def store_initialized(categories: list[str]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.STORE_INITIALIZED,
            description=f"Store initialized with {len(categories)} categories",
            details={"categories": categories},
        )

    @staticmethod
    def transactions_created(
        transaction_ids: list[UUID],
        competencies: list[str],
        total: str,
        group_id: Optional[UUID] = None,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTIONS_CREATED,
            entity_type="transaction",
            entity_id=str(group_id or transaction_ids[0]),
            description=f"{len(transaction_ids)} transaction(s) created totalling {total}",
            details={
                "transaction_ids": [str(i) for i in transaction_ids],
                "competencies": competencies,
                "installment_group_id": str(group_id) if group_id else None,
            },
        )

    @staticmethod
    def transaction_deleted(transaction_id: UUID, competency: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=str(transaction_id),
            description=f"Transaction deleted from {competency}",
            details={"competency": competency},
        )

    @staticmethod
    def installment_group_deleted(group_id: UUID, count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.INSTALLMENT_GROUP_DELETED,
            entity_type="installment_group",
            entity_id=str(group_id),
            description=f"Installment group deleted ({count} installments)",
            details={"count": count},
        )

    @staticmethod
    def recurring_generated(competency: str, count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.RECURRING_GENERATED,
            entity_type="month",
            entity_id=competency,
            description=f"{count} recurring transaction(s) generated for {competency}",
            details={"count": count},
        )

    @staticmethod
    def import_completed(total: int, succeeded: int, failed: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.IMPORT_COMPLETED,
            severity=LedgerSeverity.WARNING if failed else LedgerSeverity.INFO,
            description=f"CSV import: {succeeded}/{total} rows imported",
            details={"total": total, "succeeded": succeeded, "failed": failed},
        )

    @staticmethod
    def month_closed(competency: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.MONTH_CLOSED,
            entity_type="month",
            entity_id=competency,
            description=f"Month {competency} closed",
        )

    @staticmethod
    def month_reopened(competency: str, was_closed: bool) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.MONTH_REOPENED,
            entity_type="month",
            entity_id=competency,
            description=(
                f"Month {competency} reopened"
                if was_closed
                else f"Month {competency} was already open"
            ),
            details={"was_closed": was_closed},
        )

    @staticmethod
    def month_already_closed(competency: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.MONTH_ALREADY_CLOSED,
            severity=LedgerSeverity.WARNING,
            entity_type="month",
            entity_id=competency,
            description=f"Month {competency} is already closed",
        )

    @staticmethod
    def mutation_refused(competency: str, operation: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.MUTATION_REFUSED,
            severity=LedgerSeverity.WARNING,
            entity_type="month",
            entity_id=competency,
            description=f"{operation} refused: month {competency} is closed",
            details={"operation": operation},
        )

    @staticmethod
    def entity_created(entity_type: str, entity_id: UUID, description: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.ENTITY_CREATED,
            entity_type=entity_type,
            entity_id=str(entity_id),
            description=description,
        )

    @staticmethod
    def entity_deleted(entity_type: str, entity_id: UUID) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.ENTITY_DELETED,
            entity_type=entity_type,
            entity_id=str(entity_id),
            description=f"{entity_type.replace('_', ' ').capitalize()} deleted",
        )

    @staticmethod
    def entity_updated(entity_type: str, entity_id: UUID, fields: list[str]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.ENTITY_UPDATED,
            entity_type=entity_type,
            entity_id=str(entity_id),
            description=f"Updated: {', '.join(fields)}",
            details={"fields": fields},
        )

    @staticmethod
    def deposit_added(goal_id: UUID, amount: str, current_amount: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.DEPOSIT_ADDED,
            entity_type="savings_goal",
            entity_id=str(goal_id),
            description=f"Deposit of {amount} added",
            details={"amount": amount, "current_amount": current_amount},
        )

    @staticmethod
    def categories_replaced(categories: list[str]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.CATEGORIES_REPLACED,
            entity_type="categories",
            description=f"Category set replaced ({len(categories)} categories)",
            details={"categories": categories},
        )

    @staticmethod
    def invoice_status_updated(card_id: UUID, competency: str, paid: bool) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.INVOICE_STATUS_UPDATED,
            entity_type="credit_card_invoice",
            entity_id=str(card_id),
            description=f"Invoice {competency} marked as {'paid' if paid else 'unpaid'}",
            details={"competency": competency, "paid": paid},
        )

    @staticmethod
    def validation_failed(entity_type: str, field: str, message: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.VALIDATION_FAILED,
            severity=LedgerSeverity.WARNING,
            entity_type=entity_type,
            description=f"Validation failed on {field}",
            details={"field": field},
            error_message=message,
        )

    @staticmethod
    def persistence_failed(key: str, error_message: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.PERSISTENCE_FAILED,
            severity=LedgerSeverity.ERROR,
            entity_type="collection",
            entity_id=key,
            description=f"Failed to persist collection '{key}'",
            error_message=error_message,
        )

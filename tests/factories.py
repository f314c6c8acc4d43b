"""Builders for test entities with sensible defaults."""

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from household_ledger.models.ledger import (
    Budget,
    PaymentMethod,
    Person,
    Transaction,
    TransactionDraft,
    TransactionType,
)


CATEGORIES = ["Food", "Housing", "Leisure", "Salary", "Transport"]


def make_transaction(
    value: str = "10.00",
    competency: str = "03/2025",
    category: str = "Food",
    person: Person = Person.PARTY_A,
    type: TransactionType = TransactionType.EXPENSE,
    payment_method: PaymentMethod = PaymentMethod.DEBIT,
    day: Optional[date] = None,
    credit_card_id: Optional[UUID] = None,
    description: str = "Groceries",
) -> Transaction:
    month, year = competency.split("/")
    return Transaction(
        date=day or date(int(year), int(month), 10),
        type=type,
        payment_method=payment_method,
        person=person,
        category=category,
        description=description,
        value=Decimal(value),
        competency=competency,
        credit_card_id=credit_card_id,
    )


def make_budget(
    amount: str = "500.00",
    competency: str = "03/2025",
    category: str = "Food",
    person: Person = Person.PARTY_A,
) -> Budget:
    return Budget(
        competency=competency,
        category=category,
        person=person,
        amount=Decimal(amount),
    )


def make_draft(**overrides) -> TransactionDraft:
    data = dict(
        date=date(2025, 3, 10),
        type=TransactionType.EXPENSE,
        payment_method=PaymentMethod.DEBIT,
        person=Person.PARTY_A,
        category="Food",
        description="Groceries",
        value=Decimal("100.00"),
    )
    data.update(overrides)
    return TransactionDraft(**data)

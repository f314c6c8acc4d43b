"""
Credit Card Invoices

A card's invoice for a competency is the sum of the credit expenses
charged to it in that competency, plus its paid flag.
"""

from decimal import Decimal
from typing import Sequence

from household_ledger.models.analytics import InvoiceSummary
from household_ledger.models.ledger import (
    CreditCard,
    CreditCardInvoice,
    PaymentMethod,
    Transaction,
    TransactionType,
)


def invoice_for(
    card: CreditCard,
    competency: str,
    transactions: Sequence[Transaction],
    invoices: Sequence[CreditCardInvoice] = (),
) -> InvoiceSummary:
    charges = [
        t for t in transactions
        if t.payment_method == PaymentMethod.CREDIT
        and t.type == TransactionType.EXPENSE
        and t.credit_card_id == card.id
        and t.competency == competency
    ]
    total = sum((t.value for t in charges), Decimal("0"))
    paid = any(
        i.paid
        for i in invoices
        if i.credit_card_id == card.id and i.reference_month == competency
    )
    return InvoiceSummary(
        credit_card_id=card.id,
        card_name=card.name,
        reference_month=competency,
        total=total,
        limit=card.limit,
        available_limit=card.limit - total,
        transaction_count=len(charges),
        paid=paid,
    )


def invoices_for_month(
    cards: Sequence[CreditCard],
    competency: str,
    transactions: Sequence[Transaction],
    invoices: Sequence[CreditCardInvoice] = (),
) -> list[InvoiceSummary]:
    """One invoice summary per card, cards sorted by name."""
    return [
        invoice_for(card, competency, transactions, invoices)
        for card in sorted(cards, key=lambda c: c.name.lower())
    ]

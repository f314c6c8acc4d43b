"""
CSV Transaction Export

Writes transactions in the same header layout csv_import reads, so an
export can be fed back through import_transactions_csv.

Each record is written as a single payment (installments=1) carrying its
own competency. Re-importing an installment purchase therefore recreates
the same records, but not the group that linked them.
"""

import csv
import io
from collections import Counter
from typing import Sequence

from household_ledger.models.ledger import CreditCard, Transaction


EXPORT_COLUMNS = (
    "date",
    "type",
    "payment_method",
    "person",
    "category",
    "description",
    "value",
    "installments",
    "credit_card",
    "competency",
)


def _card_labels(cards: Sequence[CreditCard]) -> dict:
    """Card name where it is unambiguous, the card id otherwise."""
    name_counts = Counter(card.name.lower() for card in cards)
    return {
        card.id: card.name if name_counts[card.name.lower()] == 1 else str(card.id)
        for card in cards
    }


def export_transactions_csv(
    transactions: Sequence[Transaction],
    cards: Sequence[CreditCard],
) -> str:
    """
    Render transactions as CSV text, oldest first.

    A card that no longer exists is written by id.
    """
    labels = _card_labels(cards)
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_COLUMNS)

    for t in sorted(transactions, key=lambda t: (t.date, t.installment_number)):
        card = ""
        if t.credit_card_id is not None:
            card = labels.get(t.credit_card_id, str(t.credit_card_id))
        writer.writerow([
            t.date.isoformat(),
            t.type.value,
            t.payment_method.value,
            t.person.value,
            t.category,
            t.description,
            str(t.value),
            1,
            card,
            t.competency,
        ])
    return buffer.getvalue()

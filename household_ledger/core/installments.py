"""
Installment Expansion

Turns one purchase draft into the Transaction records it produces.
A single payment yields one record; an N-installment purchase yields N
records on N consecutive competencies sharing one installment group id.

The draft is expected to have passed LedgerValidator already.
"""

from decimal import ROUND_HALF_UP, Decimal
from uuid import uuid4

from household_ledger.core.competency import add_months, competency_of, shift_date
from household_ledger.models.ledger import (
    InstallmentRemainderPolicy,
    PaymentMethod,
    Transaction,
    TransactionDraft,
)


CURRENCY_UNIT = Decimal("0.01")


def split_value(
    total: Decimal,
    count: int,
    policy: InstallmentRemainderPolicy = InstallmentRemainderPolicy.LAST_INSTALLMENT,
) -> list[Decimal]:
    """
    Divide a purchase value into `count` installment values.

    NONE: plain uniform Decimal division, no rounding, no correction.
    LAST_INSTALLMENT: each share rounded half-up to cents; the last share
    takes whatever remainder is left so the shares sum exactly to total.

    Example: 100.00 / 3 -> [33.33, 33.33, 33.34] under LAST_INSTALLMENT
    """
    if count < 1:
        raise ValueError("Installment count must be at least 1")

    per_installment = total / count
    if policy == InstallmentRemainderPolicy.NONE:
        return [per_installment] * count

    share = per_installment.quantize(CURRENCY_UNIT, rounding=ROUND_HALF_UP)
    last = total - share * (count - 1)
    return [share] * (count - 1) + [last]


def expand_installments(
    draft: TransactionDraft,
    policy: InstallmentRemainderPolicy = InstallmentRemainderPolicy.LAST_INSTALLMENT,
) -> list[Transaction]:
    """
    Expand a purchase draft into its Transaction records.

    Record i lands i months after the month of the purchase date and is
    dated i months after the purchase. An explicit competency on the draft
    only places a single payment; a split always follows the purchase date.
    """
    count = draft.installments
    if count == 1 and draft.competency:
        base_competency = draft.competency
    else:
        base_competency = competency_of(draft.date)
    values = split_value(draft.value, count, policy)
    group_id = uuid4() if count > 1 else None
    credit_card_id = (
        draft.credit_card_id if draft.payment_method == PaymentMethod.CREDIT else None
    )

    records = []
    for i in range(count):
        records.append(Transaction(
            date=shift_date(draft.date, i),
            type=draft.type,
            payment_method=draft.payment_method,
            person=draft.person,
            category=draft.category,
            description=draft.description,
            value=values[i],
            competency=add_months(base_competency, i),
            credit_card_id=credit_card_id,
            installment_number=i + 1,
            total_installments=count,
            installment_group_id=group_id,
        ))
    return records

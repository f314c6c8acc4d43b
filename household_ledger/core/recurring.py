"""
Recurring Transaction Generation

Materialises monthly templates (rent, salary, subscriptions) into real
transactions for one competency.
"""

import calendar
from datetime import date
from typing import Iterable

from household_ledger.core.competency import month_bounds, parse_competency
from household_ledger.models.ledger import (
    PaymentMethod,
    RecurringTransaction,
    Transaction,
)


def occurrence_date(template: RecurringTransaction, competency: str) -> date:
    """Day the template falls on in a month, clamped to the month's length."""
    month, year = parse_competency(competency)
    day = min(template.day_of_month, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def applies_to(template: RecurringTransaction, competency: str) -> bool:
    """Whether an active template produces an entry in this competency."""
    if not template.active:
        return False

    month_start, month_end = month_bounds(competency)
    if template.start_date > month_end:
        return False
    if template.end_date and template.end_date < month_start:
        return False

    when = occurrence_date(template, competency)
    if when < template.start_date:
        return False
    if template.end_date and when > template.end_date:
        return False
    return True


def generate_for_month(
    templates: Iterable[RecurringTransaction],
    competency: str,
    existing: Iterable[Transaction] = (),
) -> list[Transaction]:
    """
    Build the transactions the templates produce for `competency`.

    Templates that already have an entry in that competency (same
    recurring_id) are skipped, so generating twice does not duplicate.
    """
    already_generated = {
        t.recurring_id
        for t in existing
        if t.recurring_id is not None and t.competency == competency
    }

    generated = []
    for template in templates:
        if template.id in already_generated or not applies_to(template, competency):
            continue
        generated.append(Transaction(
            date=occurrence_date(template, competency),
            type=template.type,
            payment_method=template.payment_method,
            person=template.person,
            category=template.category,
            description=template.description,
            value=template.value,
            competency=competency,
            credit_card_id=(
                template.credit_card_id
                if template.payment_method == PaymentMethod.CREDIT
                else None
            ),
            recurring_id=template.id,
        ))
    return generated

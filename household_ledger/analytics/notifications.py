"""
Upcoming Notifications

Derived reminders for the household, recomputed from the collections on
every call and never stored:

- card_due: a card's next due day falls within the look-ahead window
- recurring_due: an active template's next occurrence falls within it
- month_open: one of the last few competencies is still not closed

Inside the window, anything due within URGENT_DAYS is an error and the
rest are warnings. An open current month is a warning, older open months
are info.
"""

import calendar
from datetime import date
from typing import Iterable, Optional, Sequence

from household_ledger.core.competency import last_competencies
from household_ledger.models.analytics import Notification, NotificationKind, NotificationLevel
from household_ledger.models.ledger import CreditCard, RecurringTransaction


DEFAULT_DAYS_AHEAD = 7
DEFAULT_CLOSURE_MONTHS = 3
URGENT_DAYS = 3

_LEVEL_ORDER = {
    NotificationLevel.ERROR: 0,
    NotificationLevel.WARNING: 1,
    NotificationLevel.INFO: 2,
}


def _on_day(year: int, month: int, day: int) -> date:
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


def next_on_day(day_of_month: int, start: date) -> date:
    """First date on or after `start` falling on `day_of_month`, clamped to short months."""
    candidate = _on_day(start.year, start.month, day_of_month)
    if candidate >= start:
        return candidate
    if start.month == 12:
        return _on_day(start.year + 1, 1, day_of_month)
    return _on_day(start.year, start.month + 1, day_of_month)


def next_recurring_date(template: RecurringTransaction, today: date) -> Optional[date]:
    """Next occurrence of an active template from today on, None once its window is over."""
    if not template.active:
        return None
    when = next_on_day(template.day_of_month, max(today, template.start_date))
    if template.end_date and when > template.end_date:
        return None
    return when


def _due_level(days: int) -> NotificationLevel:
    return NotificationLevel.ERROR if days <= URGENT_DAYS else NotificationLevel.WARNING


def card_notifications(
    cards: Iterable[CreditCard],
    today: date,
    days_ahead: int = DEFAULT_DAYS_AHEAD,
) -> list[Notification]:
    notifications = []
    for card in cards:
        due = next_on_day(card.due_day, today)
        days = (due - today).days
        if days > days_ahead:
            continue
        notifications.append(Notification(
            kind=NotificationKind.CARD_DUE,
            level=_due_level(days),
            title=f"{card.name} invoice due soon",
            message=f"Due on {due.isoformat()}",
            entity_id=card.id,
            due_date=due,
            days_until=days,
        ))
    return notifications


def recurring_notifications(
    templates: Iterable[RecurringTransaction],
    today: date,
    days_ahead: int = DEFAULT_DAYS_AHEAD,
) -> list[Notification]:
    notifications = []
    for template in templates:
        when = next_recurring_date(template, today)
        if when is None:
            continue
        days = (when - today).days
        if days > days_ahead:
            continue
        notifications.append(Notification(
            kind=NotificationKind.RECURRING_DUE,
            level=_due_level(days),
            title=f"{template.description}: recurring {template.type.value}",
            message=f"Due on {when.isoformat()} ({template.value})",
            entity_id=template.id,
            due_date=when,
            days_until=days,
        ))
    return notifications


def closure_notifications(
    closed_months: Iterable[str],
    today: date,
    months: int = DEFAULT_CLOSURE_MONTHS,
) -> list[Notification]:
    """Open competencies among the last `months`, newest first."""
    closed = set(closed_months)
    window = list(reversed(last_competencies(months, today)))
    return [
        Notification(
            kind=NotificationKind.MONTH_OPEN,
            level=NotificationLevel.WARNING if i == 0 else NotificationLevel.INFO,
            title=f"Month {competency} is not closed",
            message=f"Close {competency} once all of its entries are recorded",
            competency=competency,
        )
        for i, competency in enumerate(window)
        if competency not in closed
    ]


def upcoming_notifications(
    cards: Sequence[CreditCard],
    templates: Sequence[RecurringTransaction],
    closed_months: Sequence[str],
    today: Optional[date] = None,
    days_ahead: int = DEFAULT_DAYS_AHEAD,
    closure_months: int = DEFAULT_CLOSURE_MONTHS,
) -> list[Notification]:
    """Every notification, most urgent level first, then soonest first."""
    today = today or date.today()
    combined = (
        card_notifications(cards, today, days_ahead)
        + recurring_notifications(templates, today, days_ahead)
        + closure_notifications(closed_months, today, closure_months)
    )
    return sorted(
        combined,
        key=lambda n: (
            _LEVEL_ORDER[n.level],
            n.days_until if n.days_until is not None else days_ahead + 1,
        ),
    )

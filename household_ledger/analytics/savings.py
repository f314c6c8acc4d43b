"""
Savings Projection

Derives the household's monthly savings velocity from the deposit history
of every goal, then projects when each goal will be reached.

Deadline math uses a fixed 30-day month: months to deadline is
ceil(days_until_deadline / 30), not a calendar-exact month count.
"""

import math
from datetime import date
from decimal import ROUND_CEILING, Decimal
from typing import Optional, Sequence

from household_ledger.core.competency import competency_of, last_competencies
from household_ledger.models.analytics import GoalProjection, GoalStatus, MonthlySavings
from household_ledger.models.ledger import SavingsGoal


ZERO = Decimal("0")
HUNDRED = Decimal("100")
DAYS_PER_MONTH = 30
DEFAULT_WINDOW_MONTHS = 6


def _ceil(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_CEILING))


def monthly_deposit_totals(
    goals: Sequence[SavingsGoal],
    today: Optional[date] = None,
    months: int = DEFAULT_WINDOW_MONTHS,
) -> list[MonthlySavings]:
    """
    Total deposited across all goals in each of the trailing `months`
    calendar months (current month included), oldest first.
    Months without deposits are present with a zero total.
    """
    window = last_competencies(months, today)
    totals = {competency: ZERO for competency in window}
    for goal in goals:
        for deposit in goal.deposits:
            competency = competency_of(deposit.date)
            if competency in totals:
                totals[competency] += deposit.amount
    return [MonthlySavings(competency=c, total=totals[c]) for c in window]


def average_monthly_savings(
    goals: Sequence[SavingsGoal],
    today: Optional[date] = None,
    months: int = DEFAULT_WINDOW_MONTHS,
) -> Decimal:
    """Mean of the trailing monthly deposit totals; empty months count as zero."""
    monthly = monthly_deposit_totals(goals, today, months)
    return sum((m.total for m in monthly), ZERO) / len(monthly)


def months_until(deadline: date, today: date) -> int:
    """
    Months left before a deadline under the 30-day approximation.

    Floors at 1: a deadline today or already past leaves the whole
    remaining amount due within the current month.
    """
    days = (deadline - today).days
    return max(math.ceil(days / DAYS_PER_MONTH), 1)


def project_goal(
    goal: SavingsGoal,
    avg_monthly_savings: Decimal,
    today: Optional[date] = None,
) -> GoalProjection:
    """
    Project completion of one goal, evaluated in order:

    1. current >= target             -> completed, 0 months
    2. no deadline                   -> no_deadline, months unknown
    3. velocity covers needed rate   -> on_track, ceil(remaining / velocity)
    4. otherwise                     -> behind, months to the deadline
                                        (None and stalled=True when velocity is 0)
    """
    today = today or date.today()
    remaining = max(goal.target_amount - goal.current_amount, ZERO)
    projection = GoalProjection(
        goal_id=goal.id,
        name=goal.name,
        status=GoalStatus.COMPLETED,
        target_amount=goal.target_amount,
        current_amount=goal.current_amount,
        remaining=remaining,
        progress_percentage=goal.current_amount / goal.target_amount * HUNDRED,
        avg_monthly_savings=avg_monthly_savings,
    )

    if goal.current_amount >= goal.target_amount:
        return projection.model_copy(update={"months_to_finish": 0})

    if goal.deadline is None:
        return projection.model_copy(update={"status": GoalStatus.NO_DEADLINE})

    months_to_deadline = months_until(goal.deadline, today)
    needed_per_month = remaining / months_to_deadline
    projection = projection.model_copy(update={
        "months_to_deadline": months_to_deadline,
        "needed_per_month": needed_per_month,
    })

    if avg_monthly_savings > ZERO and avg_monthly_savings >= needed_per_month:
        return projection.model_copy(update={
            "status": GoalStatus.ON_TRACK,
            "months_to_finish": _ceil(remaining / avg_monthly_savings),
        })

    if avg_monthly_savings <= ZERO:
        return projection.model_copy(update={
            "status": GoalStatus.BEHIND,
            "months_to_finish": None,
            "stalled": True,
        })

    return projection.model_copy(update={
        "status": GoalStatus.BEHIND,
        "months_to_finish": months_to_deadline,
    })


def project_goals(
    goals: Sequence[SavingsGoal],
    today: Optional[date] = None,
    months: int = DEFAULT_WINDOW_MONTHS,
) -> list[GoalProjection]:
    """Project every goal against one shared savings velocity."""
    today = today or date.today()
    velocity = average_monthly_savings(goals, today, months)
    return [project_goal(goal, velocity, today) for goal in goals]

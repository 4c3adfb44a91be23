"""Month-by-month balance schedules for a single card balance."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .interest import monthly_interest
from .money import round_cents

DEFAULT_MAX_MONTHS = 360


@dataclass(frozen=True, slots=True)
class ScheduleRow:
    """Represents a single projected month for a balance."""

    month: int
    balance: float
    interest_charged: float
    principal_paid: float
    payment_amount: float


def project_balance_schedule(
    balance: float, apr: float, monthly_payment: float, months: int
) -> list[ScheduleRow]:
    """Project the balance for ``months`` rows, padding with zero rows once paid off.

    Each month interest is added before the payment, and the payment never
    exceeds what is owed. Values are rounded to cents per row while the
    running balance keeps full precision.
    """

    rows: list[ScheduleRow] = []
    current = balance
    for month in range(1, months + 1):
        if current <= 0:
            rows.append(ScheduleRow(month, 0.0, 0.0, 0.0, 0.0))
            continue

        interest = monthly_interest(current, apr)
        owed = current + interest
        payment = min(max(monthly_payment, 0.0), owed)
        current = max(0.0, owed - payment)

        rows.append(
            ScheduleRow(
                month=month,
                balance=round_cents(current),
                interest_charged=round_cents(interest),
                principal_paid=round_cents(payment - interest),
                payment_amount=round_cents(payment),
            )
        )
    return rows


def months_to_payoff(
    balance: float,
    apr: float,
    monthly_payment: float,
    max_months: int = DEFAULT_MAX_MONTHS,
) -> Optional[int]:
    """Return the months needed to clear ``balance``, or None if it never clears.

    Unlike ``project_payoff`` this rejects any payment that does not exceed the
    first month's interest up front. A balance still owing after
    ``max_months - 1`` months counts as never clearing, even when the payment in
    month ``max_months`` would finish it.
    """

    if balance <= 0:
        return 0
    if monthly_payment <= monthly_interest(balance, apr):
        return None

    current = balance
    months = 0
    while current > 0 and months < max_months:
        current = current + monthly_interest(current, apr) - monthly_payment
        months += 1

    return months if months < max_months else None


def total_interest_paid(balance: float, apr: float, monthly_payment: float) -> Optional[float]:
    """Total interest charged until payoff, or None if the balance never clears."""

    months = months_to_payoff(balance, apr, monthly_payment)
    if months is None:
        return None
    schedule = project_balance_schedule(balance, apr, monthly_payment, months)
    return round_cents(sum(row.interest_charged for row in schedule))


__all__ = [
    "ScheduleRow",
    "months_to_payoff",
    "project_balance_schedule",
    "total_interest_paid",
]

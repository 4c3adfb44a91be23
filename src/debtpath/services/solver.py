"""Closed-form payment calculations."""

from __future__ import annotations

from .interest import MONTHS_PER_YEAR, monthly_interest
from .money import ceil_cents, round_cents


def payment_for_term(balance: float, apr: float, target_months: int) -> float:
    """Return the fixed monthly payment that clears ``balance`` in ``target_months``.

    Uses the annuity formula ``P = r * PV / (1 - (1 + r) ** -n)``; a zero rate
    divides the balance evenly instead. The result is rounded up to the cent so
    the last payment never leaves residual debt.
    """

    if balance <= 0 or target_months <= 0:
        return 0.0

    if apr <= 0:
        return ceil_cents(balance / target_months)

    monthly_rate = apr / 100 / MONTHS_PER_YEAR
    denominator = 1 - (1 + monthly_rate) ** -target_months
    if denominator <= 0:
        # Rate too small to register in float arithmetic
        return ceil_cents(balance / target_months)
    return ceil_cents((monthly_rate * balance) / denominator)


def minimum_payment(
    balance: float,
    *,
    percentage_rate: float = 2.0,
    minimum_floor: float = 25.0,
    include_interest: bool = True,
    apr: float = 0.0,
) -> float:
    """Typical card minimum: a percentage of the balance or the floor, whichever is greater.

    When ``include_interest`` is set the minimum also covers the month's
    interest plus one dollar so the balance always shrinks. The result never
    exceeds the balance itself.
    """

    if balance <= 0:
        return 0.0

    payment = balance * (percentage_rate / 100)
    if include_interest and apr > 0:
        payment = max(payment, monthly_interest(balance, apr) + 1)

    payment = max(payment, minimum_floor)
    payment = min(payment, balance)
    return round_cents(payment)


__all__ = ["minimum_payment", "payment_for_term"]

"""Compare two payment amounts for the same balance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from .money import round_cents
from .projection import PayoffProjection, ProjectionType, project_payoff


@dataclass(frozen=True, slots=True)
class PayoffComparison:
    """Side-by-side projections with the savings of the alternative payment."""

    current: PayoffProjection
    alternative: PayoffProjection
    months_saved: int
    interest_saved: float
    additional_monthly_payment: float


def compare_payment_scenarios(
    balance: float,
    apr: float,
    current_payment: float,
    alternative_payment: float,
    *,
    today: date | None = None,
) -> PayoffComparison:
    """Project both payments and report what the alternative saves.

    Savings are reported as zero when either plan never pays off; subtracting
    from the 9999-month sentinel would produce meaningless figures.
    """

    current = project_payoff(balance, apr, current_payment, ProjectionType.CURRENT_PAYMENT, today=today)
    alternative = project_payoff(balance, apr, alternative_payment, ProjectionType.CUSTOM, today=today)

    months_saved = 0
    interest_saved = 0.0
    if current.pays_off and alternative.pays_off:
        months_saved = current.months_to_payoff - alternative.months_to_payoff
        interest_saved = current.total_interest_projected - alternative.total_interest_projected

    return PayoffComparison(
        current=current,
        alternative=alternative,
        months_saved=months_saved,
        interest_saved=round_cents(interest_saved),
        additional_monthly_payment=round_cents(alternative_payment - current_payment),
    )


def interest_savings(
    balance: float, apr: float, current_payment: float, new_payment: float
) -> tuple[int, float]:
    """Return ``(months_saved, interest_saved)`` for switching to ``new_payment``."""

    comparison = compare_payment_scenarios(balance, apr, current_payment, new_payment)
    return comparison.months_saved, comparison.interest_saved


__all__ = ["PayoffComparison", "compare_payment_scenarios", "interest_savings"]

"""Single-balance payoff projections.

``project_payoff`` walks a balance forward one month at a time under a fixed
payment. Two legacy conventions are exposed at this boundary:

* ``NEVER_PAYS_OFF_MONTHS`` (9999) marks a plan that cannot be projected,
  either because the payment is not positive or because interest caught up
  with the payment. Such projections carry no payoff date and zeroed totals.
* ``PROJECTION_HORIZON_MONTHS`` (600, i.e. 50 years) bounds the walk.

Callers that prefer not to compare against the sentinel can use
``PayoffProjection.outcome`` which returns ``Converged`` or ``NonConvergent``.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional, Union

from ..logging_config import get_logger
from .interest import monthly_interest
from .money import round_cents

logger = get_logger(__name__)

NEVER_PAYS_OFF_MONTHS = 9999
PROJECTION_HORIZON_MONTHS = 600


class ProjectionType(str, Enum):
    """Which payment the projection was run with."""

    MINIMUM_ONLY = "minimum_only"
    CURRENT_PAYMENT = "current_payment"
    CUSTOM = "custom"


@dataclass(frozen=True, slots=True)
class Converged:
    months: int
    total_interest: float


@dataclass(frozen=True, slots=True)
class NonConvergent:
    pass


PayoffOutcome = Union[Converged, NonConvergent]


@dataclass(frozen=True, slots=True)
class PayoffProjection:
    """Projected payoff of one balance under a fixed monthly payment."""

    starting_balance: float
    monthly_payment: float
    annual_rate: float
    projected_payoff_date: Optional[date]
    total_interest_projected: float
    total_payments_projected: float
    months_to_payoff: int
    calculated_at: datetime
    projection_type: ProjectionType = ProjectionType.CURRENT_PAYMENT

    @property
    def pays_off(self) -> bool:
        return self.months_to_payoff != NEVER_PAYS_OFF_MONTHS

    @property
    def outcome(self) -> PayoffOutcome:
        if not self.pays_off:
            return NonConvergent()
        return Converged(months=self.months_to_payoff, total_interest=self.total_interest_projected)


def add_months(value: date, months: int) -> date:
    """Shift ``value`` by whole calendar months, clamping to the month's last day."""

    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def _non_convergent(
    *,
    balance: float,
    apr: float,
    monthly_payment: float,
    projection_type: ProjectionType,
    calculated_at: datetime,
) -> PayoffProjection:
    return PayoffProjection(
        starting_balance=balance,
        monthly_payment=monthly_payment,
        annual_rate=apr,
        projected_payoff_date=None,
        total_interest_projected=0.0,
        total_payments_projected=0.0,
        months_to_payoff=NEVER_PAYS_OFF_MONTHS,
        calculated_at=calculated_at,
        projection_type=projection_type,
    )


def project_payoff(
    balance: float,
    apr: float,
    monthly_payment: float,
    projection_type: ProjectionType = ProjectionType.CURRENT_PAYMENT,
    *,
    today: date | None = None,
) -> PayoffProjection:
    """Project when ``balance`` reaches zero paying ``monthly_payment`` each month.

    Interest is compounded monthly on the running balance. From the second
    month onward a month whose interest meets or exceeds the payment aborts the
    projection as non-convergent; the first month is allowed to run negative.
    """

    calculated_at = datetime.now(timezone.utc)
    start_date = today or calculated_at.date()
    projection_type = ProjectionType(projection_type)

    if balance <= 0:
        return PayoffProjection(
            starting_balance=balance,
            monthly_payment=monthly_payment,
            annual_rate=apr,
            projected_payoff_date=start_date,
            total_interest_projected=0.0,
            total_payments_projected=0.0,
            months_to_payoff=0,
            calculated_at=calculated_at,
            projection_type=projection_type,
        )

    if monthly_payment <= 0:
        logger.debug(
            "Projection skipped: payment is not positive",
            extra={"balance": balance, "payment": monthly_payment},
        )
        return _non_convergent(
            balance=balance,
            apr=apr,
            monthly_payment=monthly_payment,
            projection_type=projection_type,
            calculated_at=calculated_at,
        )

    current_balance = balance
    total_interest = 0.0
    months = 0
    while current_balance > 0 and months < PROJECTION_HORIZON_MONTHS:
        interest = monthly_interest(current_balance, apr)
        total_interest += interest

        if months > 0 and interest >= monthly_payment:
            logger.debug(
                "Projection does not converge: interest covers the payment",
                extra={"balance": balance, "apr": apr, "payment": monthly_payment, "month": months},
            )
            return _non_convergent(
                balance=balance,
                apr=apr,
                monthly_payment=monthly_payment,
                projection_type=projection_type,
                calculated_at=calculated_at,
            )

        current_balance = current_balance + interest - monthly_payment
        months += 1

    # The final payment usually overshoots; nothing is owed past zero.
    current_balance = max(current_balance, 0.0)
    if current_balance > 0:
        logger.debug(
            "Projection reached the horizon with a balance outstanding",
            extra={"balance": balance, "remaining": current_balance, "months": months},
        )

    return PayoffProjection(
        starting_balance=balance,
        monthly_payment=monthly_payment,
        annual_rate=apr,
        projected_payoff_date=add_months(start_date, months),
        total_interest_projected=round_cents(total_interest),
        total_payments_projected=round_cents(balance + total_interest),
        months_to_payoff=months,
        calculated_at=calculated_at,
        projection_type=projection_type,
    )


def debt_free_date(
    balance: float,
    apr: float,
    monthly_payment: float,
    extra_payment: float = 0.0,
    *,
    today: date | None = None,
) -> date | None:
    """Return the payoff date when paying ``monthly_payment + extra_payment``."""

    projection = project_payoff(balance, apr, monthly_payment + extra_payment, today=today)
    return projection.projected_payoff_date


__all__ = [
    "Converged",
    "NEVER_PAYS_OFF_MONTHS",
    "NonConvergent",
    "PROJECTION_HORIZON_MONTHS",
    "PayoffOutcome",
    "PayoffProjection",
    "ProjectionType",
    "add_months",
    "debt_free_date",
    "project_payoff",
]

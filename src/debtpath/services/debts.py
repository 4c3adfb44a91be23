"""Multi-account debt payoff calculators (snowball and avalanche).

``distribute`` splits one month's budget across accounts: every account first
gets its minimum (capped by its balance and by what is left of the budget),
then the remainder is routed down the priority order. ``simulate_strategy``
repeats that month after month on private copies of the accounts.

The simulator signals non-convergence by stopping at ``SIMULATION_MONTH_CAP``
(600) months. It deliberately does not reuse the 9999 sentinel of
``projection.project_payoff``; check the cap for this API.

``plan_payments`` and ``recommend_payment_strategy`` work on a single month
of surplus instead: minimums are paid as configured and the surplus is
assigned to target accounts, with ``pay_off`` and ``minimum_only`` as the two
extremes.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from functools import cmp_to_key
from typing import Any, Iterable, Optional, Sequence

from ..logging_config import get_logger
from .amortization import months_to_payoff, total_interest_paid
from .interest import monthly_interest
from .money import round_cents

logger = get_logger(__name__)

SIMULATION_MONTH_CAP = 600
AVALANCHE_PREFERENCE_THRESHOLD = 50.0
# Rates closer than this (percentage points) are ordered by balance under HYBRID.
HYBRID_RATE_TOLERANCE = 1.5
UNSET_PRIORITY = 999

PaymentPlan = dict[str, float]


class PayoffStrategy(str, Enum):
    """Order in which surplus money is routed to accounts."""

    AVALANCHE = "avalanche"  # highest APR first
    SNOWBALL = "snowball"  # smallest balance first
    HYBRID = "hybrid"  # highest APR first, smallest balance among near-equal rates
    CUSTOM = "custom"  # lowest payoff_priority first


@dataclass(slots=True)
class AccountDebt:
    """Represents a liability input for payoff simulations."""

    account_id: str
    balance: float
    annual_rate: float
    minimum_payment: float
    payoff_priority: Optional[int] = None


@dataclass(frozen=True, slots=True)
class StrategyResult:
    total_interest: float
    months_to_payoff: int

    @property
    def converged(self) -> bool:
        """False when the simulation stopped at the month cap."""
        return self.months_to_payoff < SIMULATION_MONTH_CAP


@dataclass(frozen=True, slots=True)
class StrategyComparison:
    """Avalanche vs snowball outcome for the same accounts and budget."""

    avalanche: StrategyResult
    snowball: StrategyResult
    interest_difference: float  # snowball minus avalanche
    months_difference: int
    recommended: PayoffStrategy


def _coerce_strategy(strategy: PayoffStrategy | str) -> PayoffStrategy:
    try:
        return PayoffStrategy(strategy)
    except ValueError:
        raise ValueError(f"Invalid debt payoff strategy: {strategy!r}.") from None


def prioritize(accounts: Iterable[AccountDebt], strategy: PayoffStrategy | str) -> list[AccountDebt]:
    """Return accounts in payment priority order.

    ``sorted`` is stable, so accounts with equal keys keep their input order.
    Accounts without a ``payoff_priority`` go last under CUSTOM.
    """

    strategy = _coerce_strategy(strategy)
    if strategy is PayoffStrategy.AVALANCHE:
        return sorted(accounts, key=lambda a: a.annual_rate, reverse=True)
    if strategy is PayoffStrategy.SNOWBALL:
        return sorted(accounts, key=lambda a: a.balance)
    if strategy is PayoffStrategy.HYBRID:
        return sorted(accounts, key=cmp_to_key(_hybrid_order))
    return sorted(
        accounts,
        key=lambda a: UNSET_PRIORITY if a.payoff_priority is None else a.payoff_priority,
    )


def _hybrid_order(a: AccountDebt, b: AccountDebt) -> int:
    if abs(a.annual_rate - b.annual_rate) <= HYBRID_RATE_TOLERANCE:
        return (a.balance > b.balance) - (a.balance < b.balance)
    return (b.annual_rate > a.annual_rate) - (b.annual_rate < a.annual_rate)


def distribute(
    accounts: Iterable[AccountDebt],
    total_budget: float,
    strategy: PayoffStrategy | str,
) -> PaymentPlan:
    """Split ``total_budget`` across ``accounts`` for one month.

    Pass one covers minimums in priority order, so an underfunded budget leaves
    the lowest-priority accounts short of their minimum. Pass two routes what
    remains to the first accounts in priority order until it runs out.
    """

    ordered = prioritize(accounts, strategy)
    remaining = max(total_budget, 0.0)
    plan: PaymentPlan = {}

    for account in ordered:
        if account.balance <= 0:
            plan[account.account_id] = 0.0
            continue
        payment = max(min(account.minimum_payment, account.balance, remaining), 0.0)
        plan[account.account_id] = payment
        remaining -= payment

    for account in ordered:
        if remaining <= 0:
            break
        assigned = plan[account.account_id]
        headroom = account.balance - assigned
        if headroom > 0:
            additional = min(remaining, headroom)
            plan[account.account_id] = assigned + additional
            remaining -= additional

    return plan


def avalanche_payments(accounts: Iterable[AccountDebt], total_budget: float) -> PaymentPlan:
    """Return one month's payments prioritizing the highest APR."""
    return distribute(accounts, total_budget, PayoffStrategy.AVALANCHE)


def snowball_payments(accounts: Iterable[AccountDebt], total_budget: float) -> PaymentPlan:
    """Return one month's payments prioritizing the smallest balance."""
    return distribute(accounts, total_budget, PayoffStrategy.SNOWBALL)


def _simulate(
    *,
    accounts: Iterable[AccountDebt],
    total_budget: float,
    strategy: PayoffStrategy,
    settle_below: float = 0.0,
) -> tuple[list[dict[str, Any]], float]:
    """Run the month loop and return (schedule rows, unrounded total interest)."""

    sim_accounts = [replace(account) for account in accounts]
    schedule: list[dict[str, Any]] = []
    total_interest = 0.0
    month = 0

    while any(a.balance > 0 for a in sim_accounts) and month < SIMULATION_MONTH_CAP:
        plan = distribute(sim_accounts, total_budget, strategy)
        row: dict[str, Any] = {"month": month + 1, "payments": {}}

        for account in sim_accounts:
            if account.balance <= 0:
                continue

            interest = monthly_interest(account.balance, account.annual_rate)
            total_interest += interest
            account.balance += interest

            payment = plan.get(account.account_id, 0.0)
            account.balance = max(0.0, account.balance - payment)
            if account.balance < settle_below:
                account.balance = 0.0

            row["payments"][account.account_id] = {
                "payment_amount": round_cents(payment),
                "interest_paid": round_cents(interest),
                "remaining_balance": round_cents(account.balance),
            }

        schedule.append(row)
        month += 1

    if month >= SIMULATION_MONTH_CAP and any(a.balance > 0 for a in sim_accounts):
        logger.warning(
            "Payoff simulation hit the month cap",
            extra={
                "strategy": strategy.value,
                "budget": total_budget,
                "remaining": round_cents(sum(a.balance for a in sim_accounts if a.balance > 0)),
            },
        )

    return schedule, total_interest


def simulate_schedule(
    *,
    accounts: Iterable[AccountDebt],
    total_budget: float,
    strategy: PayoffStrategy | str,
    settle_below: float = 0.0,
) -> list[dict[str, Any]]:
    """Return the month-by-month payoff schedule for ``strategy``.

    Each row is ``{"month": n, "payments": {account_id: {...}}}`` listing the
    payment, interest and remaining balance of every account still owing that
    month. The caller's accounts are not modified. ``settle_below`` works as
    in ``simulate_strategy``.
    """

    schedule, _ = _simulate(
        accounts=accounts,
        total_budget=total_budget,
        strategy=_coerce_strategy(strategy),
        settle_below=settle_below,
    )
    return schedule


def simulate_strategy(
    accounts: Iterable[AccountDebt],
    total_budget: float,
    strategy: PayoffStrategy | str,
    *,
    settle_below: float = 0.0,
) -> StrategyResult:
    """Simulate paying every account down under ``strategy``.

    Minimum payments stay at their original values for the whole run. The
    month count is capped at ``SIMULATION_MONTH_CAP``.

    Payments are sized before the month's interest is added, so a paid-down
    account keeps a residual equal to that interest, which shrinks by the
    monthly rate each month and can add well over a hundred months before it
    reaches zero. Passing ``settle_below=0.01`` treats residuals under a cent
    as paid off; the default of 0 keeps the plain clamp at zero.
    """

    schedule, total_interest = _simulate(
        accounts=accounts,
        total_budget=total_budget,
        strategy=_coerce_strategy(strategy),
        settle_below=settle_below,
    )
    return StrategyResult(total_interest=round_cents(total_interest), months_to_payoff=len(schedule))


def schedule_summary(schedule: Sequence[dict[str, Any]]) -> tuple[float, int]:
    """Return (total_interest, months) for a schedule built by ``simulate_schedule``.

    Interest is summed from the per-row cent values, so it can differ from
    ``simulate_strategy`` by rounding.
    """

    total_interest = 0.0
    for entry in schedule:
        for payment in entry.get("payments", {}).values():
            total_interest += float(payment.get("interest_paid", 0.0) or 0.0)
    return round_cents(total_interest), len(schedule)


def compare_strategies(accounts: Sequence[AccountDebt], total_budget: float) -> StrategyComparison:
    """Simulate both strategies and recommend one.

    Avalanche is recommended only when it saves more than
    ``AVALANCHE_PREFERENCE_THRESHOLD`` in interest; otherwise the snowball,
    which is easier to stick with, wins.
    """

    avalanche = simulate_strategy(accounts, total_budget, PayoffStrategy.AVALANCHE)
    snowball = simulate_strategy(accounts, total_budget, PayoffStrategy.SNOWBALL)

    interest_difference = round_cents(snowball.total_interest - avalanche.total_interest)
    recommended = (
        PayoffStrategy.AVALANCHE
        if interest_difference > AVALANCHE_PREFERENCE_THRESHOLD
        else PayoffStrategy.SNOWBALL
    )
    logger.debug(
        "Compared payoff strategies",
        extra={"interest_difference": interest_difference, "recommended": recommended.value},
    )
    return StrategyComparison(
        avalanche=avalanche,
        snowball=snowball,
        interest_difference=interest_difference,
        months_difference=snowball.months_to_payoff - avalanche.months_to_payoff,
        recommended=recommended,
    )


# One-month surplus planning ------------------------------------------------

DEFAULT_MINIMUM_PERCENT = 2.0
DEFAULT_MINIMUM_FLOOR = 25.0
AVALANCHE_APR_SPREAD = 5.0
SMALL_AVERAGE_BALANCE = 2000.0
MINIMUM_ONLY_SURPLUS_SHARE = 0.10


class PaymentStrategy(str, Enum):
    """How a month's surplus is applied on top of the minimums."""

    PAY_OFF = "pay_off"
    MINIMUM_ONLY = "minimum_only"
    AVALANCHE = "avalanche"
    SNOWBALL = "snowball"
    HYBRID = "hybrid"
    CUSTOM = "custom"


STRATEGY_LABELS = {
    PaymentStrategy.PAY_OFF: "Pay Off Completely",
    PaymentStrategy.MINIMUM_ONLY: "Minimum Payments Only",
    PaymentStrategy.AVALANCHE: "Avalanche (Highest APR First)",
    PaymentStrategy.SNOWBALL: "Snowball (Lowest Balance First)",
    PaymentStrategy.HYBRID: "Hybrid (APR First, Balance Breaks Near-Ties)",
    PaymentStrategy.CUSTOM: "Custom Priority",
}


@dataclass(slots=True)
class PaymentAllocation:
    account_id: str
    minimum_payment: float
    extra_payment: float = 0.0
    total_payment: float = 0.0
    is_target: bool = False  # received part of the surplus


@dataclass(frozen=True, slots=True)
class PaymentStrategyPlan:
    """Allocations for one month plus a projection for the target account."""

    strategy: PaymentStrategy
    total_minimum_payment: float
    surplus_available: float
    surplus_allocated: float
    allocations: list[PaymentAllocation] = field(default_factory=list)
    projected_payoff_months: Optional[int] = None
    projected_total_interest: Optional[float] = None
    target_account_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class StrategyRecommendation:
    strategy: PaymentStrategy
    reason: str


def _coerce_payment_strategy(strategy: PaymentStrategy | str) -> PaymentStrategy:
    try:
        return PaymentStrategy(strategy)
    except ValueError:
        raise ValueError(f"Invalid debt payoff strategy: {strategy!r}.") from None


def account_minimum_payment(account: AccountDebt) -> float:
    """Configured minimum, or 2% of the balance with a $25 floor when unset."""

    if account.minimum_payment > 0:
        return account.minimum_payment
    if account.balance <= 0:
        return 0.0
    return max(account.balance * DEFAULT_MINIMUM_PERCENT / 100, DEFAULT_MINIMUM_FLOOR)


def total_minimum_payment(accounts: Iterable[AccountDebt]) -> float:
    return sum(account_minimum_payment(account) for account in accounts)


def allocate_surplus(
    accounts: Iterable[AccountDebt],
    strategy: PaymentStrategy | str,
    surplus: float,
) -> list[PaymentAllocation]:
    """Apply ``surplus`` on top of every account's minimum.

    ``pay_off`` pays each balance in full and ignores the surplus;
    ``minimum_only`` pays minimums alone. The ordering strategies hand the
    surplus to accounts in priority order, each up to its balance less its
    minimum. Allocations come back in input order.
    """

    accounts = list(accounts)
    strategy = _coerce_payment_strategy(strategy)

    if strategy is PaymentStrategy.PAY_OFF:
        return [
            PaymentAllocation(
                account_id=account.account_id,
                minimum_payment=0.0,
                extra_payment=account.balance,
                total_payment=account.balance,
            )
            for account in accounts
        ]

    allocations: dict[str, PaymentAllocation] = {}
    for account in accounts:
        minimum = account_minimum_payment(account)
        allocations[account.account_id] = PaymentAllocation(
            account_id=account.account_id, minimum_payment=minimum, total_payment=minimum
        )

    if strategy is PaymentStrategy.MINIMUM_ONLY:
        return list(allocations.values())

    remaining = surplus
    for account in prioritize(accounts, strategy.value):
        if remaining <= 0:
            break
        allocation = allocations[account.account_id]
        headroom = account.balance - allocation.minimum_payment
        extra = min(headroom, remaining)
        if extra <= 0:
            continue
        allocation.extra_payment = extra
        allocation.total_payment = allocation.minimum_payment + extra
        allocation.is_target = True
        remaining -= extra
        if extra < headroom:
            break

    return list(allocations.values())


def plan_payments(
    accounts: Iterable[AccountDebt],
    strategy: PaymentStrategy | str,
    surplus: float,
) -> PaymentStrategyPlan:
    """Allocate one month's surplus and project the first target account.

    The projection covers only the first account that received surplus and
    uses ``amortization.months_to_payoff``, so it is ``None`` when that
    account's total payment does not beat its interest. ``pay_off`` projects
    zero months and zero interest.
    """

    accounts = list(accounts)
    strategy = _coerce_payment_strategy(strategy)
    if not accounts:
        return PaymentStrategyPlan(
            strategy=strategy,
            total_minimum_payment=0.0,
            surplus_available=0.0,
            surplus_allocated=0.0,
            projected_payoff_months=0,
            projected_total_interest=0.0,
        )

    allocations = allocate_surplus(accounts, strategy, surplus)
    target = next((a for a in allocations if a.is_target), None)

    months: Optional[int] = None
    interest: Optional[float] = None
    if strategy is PaymentStrategy.PAY_OFF:
        months, interest = 0, 0.0
    elif target is not None:
        account = next(a for a in accounts if a.account_id == target.account_id)
        months = months_to_payoff(account.balance, account.annual_rate, target.total_payment)
        interest = total_interest_paid(account.balance, account.annual_rate, target.total_payment)

    logger.debug(
        "Planned surplus allocation",
        extra={
            "strategy": strategy.value,
            "surplus": surplus,
            "target": target.account_id if target else None,
        },
    )
    return PaymentStrategyPlan(
        strategy=strategy,
        total_minimum_payment=round_cents(total_minimum_payment(accounts)),
        surplus_available=surplus,
        surplus_allocated=round_cents(sum(a.extra_payment for a in allocations)),
        allocations=allocations,
        projected_payoff_months=months,
        projected_total_interest=interest,
        target_account_id=target.account_id if target else None,
    )


def compare_payment_strategies(
    accounts: Sequence[AccountDebt], surplus: float
) -> dict[PaymentStrategy, PaymentStrategyPlan]:
    """Plan the same surplus under every ``PaymentStrategy``."""

    return {strategy: plan_payments(accounts, strategy, surplus) for strategy in PaymentStrategy}


def surplus_for_debt_paydown(
    total_income: float, total_budgeted: float, total_minimum_payments: float
) -> float:
    """Money left for extra payments after budgeted spending and minimums."""

    return max(0.0, total_income - total_budgeted - total_minimum_payments)


def recommend_payment_strategy(
    accounts: Sequence[AccountDebt], surplus: float
) -> StrategyRecommendation:
    """Pick a strategy from the shape of the debts and the size of the surplus.

    Checked in order: a surplus that covers every balance means ``pay_off``;
    a surplus under 10% of the minimums means ``minimum_only``; an APR spread
    above 5 points means avalanche; an average balance under $2,000 means
    snowball. Anything else falls back to avalanche.
    """

    if not accounts:
        return StrategyRecommendation(PaymentStrategy.PAY_OFF, "No credit cards to manage")

    total_balance = sum(a.balance for a in accounts)
    if surplus >= total_balance:
        return StrategyRecommendation(
            PaymentStrategy.PAY_OFF,
            "The surplus covers every balance, so pay all cards off this month",
        )

    if surplus < total_minimum_payment(accounts) * MINIMUM_ONLY_SURPLUS_SHARE:
        return StrategyRecommendation(
            PaymentStrategy.MINIMUM_ONLY,
            "Build emergency savings before attacking debt aggressively",
        )

    rates = [a.annual_rate for a in accounts]
    if max(rates) - min(rates) > AVALANCHE_APR_SPREAD:
        return StrategyRecommendation(
            PaymentStrategy.AVALANCHE,
            "Rates differ widely, so the avalanche saves the most interest",
        )

    if total_balance / len(accounts) < SMALL_AVERAGE_BALANCE:
        return StrategyRecommendation(
            PaymentStrategy.SNOWBALL,
            "Balances are small, so the snowball shows progress quickly",
        )

    return StrategyRecommendation(
        PaymentStrategy.AVALANCHE, "The avalanche minimizes total interest paid"
    )


__all__ = [
    "AVALANCHE_PREFERENCE_THRESHOLD",
    "AccountDebt",
    "HYBRID_RATE_TOLERANCE",
    "PaymentAllocation",
    "PaymentPlan",
    "PaymentStrategy",
    "PaymentStrategyPlan",
    "PayoffStrategy",
    "SIMULATION_MONTH_CAP",
    "STRATEGY_LABELS",
    "StrategyComparison",
    "StrategyRecommendation",
    "StrategyResult",
    "account_minimum_payment",
    "allocate_surplus",
    "avalanche_payments",
    "compare_payment_strategies",
    "compare_strategies",
    "distribute",
    "plan_payments",
    "prioritize",
    "recommend_payment_strategy",
    "schedule_summary",
    "simulate_schedule",
    "simulate_strategy",
    "snowball_payments",
    "surplus_for_debt_paydown",
    "total_minimum_payment",
]

"""Interest primitives for revolving balances.

Rates are annual percentages (``18.99`` means 18.99% a year). Degenerate
inputs (non-positive balances or rates, empty balance lists) produce zero
interest rather than raising, which keeps the projection code free of guards.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional, Sequence

from .money import round_cents

MONTHS_PER_YEAR = 12
DAYS_PER_YEAR = 365
DEFAULT_DAYS_IN_PERIOD = 30


def monthly_interest(balance: float, apr: float) -> float:
    """Return one month of interest on ``balance`` at ``apr``."""

    if balance <= 0 or apr <= 0:
        return 0.0
    return balance * (apr / 100) / MONTHS_PER_YEAR


def daily_interest(balance: float, apr: float) -> float:
    """Return one day of interest on ``balance`` at ``apr``."""

    if balance <= 0 or apr <= 0:
        return 0.0
    return balance * (apr / 100) / DAYS_PER_YEAR


def daily_rate(apr: float) -> float:
    """Convert an APR percentage into a daily decimal rate."""

    return apr / 100 / DAYS_PER_YEAR


def average_daily_balance_interest(
    balances: Sequence[float], apr: float, days_in_period: int
) -> float:
    """Interest for a billing period using the average daily balance method."""

    if not balances or apr <= 0:
        return 0.0
    average_balance = sum(balances) / len(balances)
    return average_balance * daily_rate(apr) * days_in_period


@dataclass(slots=True)
class CreditCardAccount:
    """Card account as stored by the ledger; debt balances are negative."""

    id: str
    name: str
    current_balance: float
    apr: Optional[float] = None


@dataclass(frozen=True, slots=True)
class InterestCharge:
    """Result of charging one statement period of interest."""

    interest_amount: float
    daily_rate: float
    days_in_period: int
    average_daily_balance: float
    balance_before: float
    balance_after: float


def statement_interest(
    account: CreditCardAccount,
    average_daily_balance: float,
    days_in_period: int = DEFAULT_DAYS_IN_PERIOD,
) -> InterestCharge:
    """Charge a statement period of interest using the average daily balance.

    Interest = average daily balance x daily rate x days in period, rounded to
    cents. Accounts without an APR produce a zero charge.
    """

    balance_before = abs(account.current_balance)
    if not account.apr or account.apr <= 0:
        return InterestCharge(
            interest_amount=0.0,
            daily_rate=0.0,
            days_in_period=days_in_period,
            average_daily_balance=average_daily_balance,
            balance_before=balance_before,
            balance_after=balance_before,
        )

    rate = daily_rate(account.apr)
    interest = average_daily_balance * rate * days_in_period
    return InterestCharge(
        interest_amount=round_cents(interest),
        daily_rate=rate,
        days_in_period=days_in_period,
        average_daily_balance=average_daily_balance,
        balance_before=balance_before,
        balance_after=balance_before + interest,
    )


def simple_interest(
    account: CreditCardAccount, days_in_period: int = DEFAULT_DAYS_IN_PERIOD
) -> InterestCharge:
    """Quick estimate that uses the current balance as the average daily balance."""

    return statement_interest(account, abs(account.current_balance), days_in_period)


def interest_for_accounts(
    accounts: Iterable[CreditCardAccount], days_in_period: int = DEFAULT_DAYS_IN_PERIOD
) -> list[tuple[CreditCardAccount, InterestCharge]]:
    """Return simple interest charges for every account carrying an APR."""

    return [
        (account, simple_interest(account, days_in_period))
        for account in accounts
        if account.apr and account.apr > 0
    ]


def total_statement_interest(
    accounts: Iterable[CreditCardAccount], days_in_period: int = DEFAULT_DAYS_IN_PERIOD
) -> float:
    """Sum the simple interest charged across ``accounts``."""

    charges = interest_for_accounts(accounts, days_in_period)
    return round_cents(sum(charge.interest_amount for _, charge in charges))


def days_since_last_charge(last_charge: date | None, today: date | None = None) -> int:
    """Days elapsed since the last interest charge; 30 when never charged."""

    if last_charge is None:
        return DEFAULT_DAYS_IN_PERIOD
    current = today or date.today()
    return max(0, (current - last_charge).days)


def should_charge_interest(
    last_charge: date | None, statement_day: int = 1, today: date | None = None
) -> bool:
    """Return True once a statement day has passed since the last charge."""

    current = today or date.today()
    if last_charge is None:
        return current.day >= statement_day

    months_since = (current.year - last_charge.year) * 12 + (current.month - last_charge.month)
    return months_since >= 1 and current.day >= statement_day


__all__ = [
    "CreditCardAccount",
    "InterestCharge",
    "average_daily_balance_interest",
    "daily_interest",
    "daily_rate",
    "days_since_last_charge",
    "interest_for_accounts",
    "monthly_interest",
    "should_charge_interest",
    "simple_interest",
    "statement_interest",
    "total_statement_interest",
]

"""Tests for multi-account payoff simulations (snowball/avalanche).

These tests verify:
- Month-by-month simulation with fixed minimums
- Interest accumulation and rounding
- The 600-month cap used as this API's non-convergence signal
- Strategy comparison and recommendation threshold
- Avalanche never costing more interest than snowball
"""

from __future__ import annotations

import random

import pytest

from debtpath.services.debts import (
    AVALANCHE_PREFERENCE_THRESHOLD,
    SIMULATION_MONTH_CAP,
    AccountDebt,
    PayoffStrategy,
    StrategyResult,
    compare_strategies,
    schedule_summary,
    simulate_schedule,
    simulate_strategy,
)
from debtpath.services.interest import monthly_interest
from debtpath.services.projection import NEVER_PAYS_OFF_MONTHS
from tests.conftest import assert_float_equal


class TestSimulateStrategy:
    def test_empty_accounts(self):
        result = simulate_strategy([], 500.0, "avalanche")
        assert result == StrategyResult(total_interest=0.0, months_to_payoff=0)

    def test_zero_rate_single_account(self, account_factory):
        account = account_factory(balance=300.0, annual_rate=0.0, minimum_payment=10.0)

        result = simulate_strategy([account], 100.0, PayoffStrategy.SNOWBALL)

        assert result.months_to_payoff == 3
        assert result.total_interest == 0.0
        assert result.converged

    def test_freed_budget_rolls_to_next_account(self, account_factory):
        """Once the small card is gone the whole budget goes to the other one."""
        accounts = [
            account_factory(account_id="a", balance=100.0, annual_rate=0.0, minimum_payment=10.0),
            account_factory(account_id="b", balance=300.0, annual_rate=0.0, minimum_payment=10.0),
        ]

        schedule = simulate_schedule(accounts=accounts, total_budget=100.0, strategy="snowball")

        assert len(schedule) == 4
        assert schedule[0]["payments"]["a"]["payment_amount"] == 90.0
        assert schedule[0]["payments"]["b"]["payment_amount"] == 10.0
        assert schedule[2]["payments"] == {
            "b": {"payment_amount": 100.0, "interest_paid": 0.0, "remaining_balance": 100.0}
        }
        assert schedule[-1]["payments"]["b"]["remaining_balance"] == 0.0

    def test_interest_accumulates(self, account_factory):
        account = account_factory(balance=1000.0, annual_rate=12.0, minimum_payment=50.0)

        result = simulate_strategy([account], 100.0, "avalanche")

        # First month alone charges $10
        assert result.total_interest > monthly_interest(1000.0, 12.0)
        assert result.total_interest == pytest.approx(58.99, abs=0.01)

    def test_trailing_residual_keeps_the_account_open(self, account_factory):
        """Payments are sized before interest, so a residual of one month's interest remains.

        The residual shrinks by the monthly rate each month and only reaches zero
        once float arithmetic can no longer represent it.
        """
        account = account_factory(balance=1000.0, annual_rate=12.0, minimum_payment=50.0)

        schedule = simulate_schedule(accounts=[account], total_budget=100.0, strategy="avalanche")
        result = simulate_strategy([account], 100.0, "avalanche")

        assert schedule[10]["payments"]["card"]["remaining_balance"] == pytest.approx(0.58)
        assert schedule[11]["payments"]["card"]["remaining_balance"] == pytest.approx(0.01)
        assert len(schedule) == result.months_to_payoff == 173
        assert result.converged
        assert schedule[-1]["payments"]["card"]["remaining_balance"] == 0.0

    def test_settle_below_closes_sub_cent_residuals(self, account_factory):
        account = account_factory(balance=1000.0, annual_rate=12.0, minimum_payment=50.0)

        schedule = simulate_schedule(
            accounts=[account], total_budget=100.0, strategy="avalanche", settle_below=0.01
        )
        result = simulate_strategy([account], 100.0, "avalanche", settle_below=0.01)

        assert len(schedule) == result.months_to_payoff == 12
        assert result.total_interest == pytest.approx(58.99, abs=0.01)
        assert schedule[-1]["payments"]["card"]["remaining_balance"] == 0.0

    def test_astronomical_amounts_do_not_raise(self):
        account = AccountDebt(
            account_id="a", balance=1e27, annual_rate=18.99, minimum_payment=1e27
        )

        result = simulate_strategy([account], 1e27, "avalanche")

        assert result.total_interest > 0
        assert result.months_to_payoff > 0

    def test_zero_budget_hits_cap(self, disagreeing_accounts):
        result = simulate_strategy(disagreeing_accounts, 0.0, "avalanche")

        assert result.months_to_payoff == SIMULATION_MONTH_CAP
        assert result.months_to_payoff != NEVER_PAYS_OFF_MONTHS
        assert not result.converged

    def test_budget_below_interest_hits_cap(self, account_factory):
        account = account_factory(balance=10_000.0, annual_rate=24.0, minimum_payment=150.0)

        result = simulate_strategy([account], 150.0, "snowball")

        assert result.months_to_payoff == SIMULATION_MONTH_CAP

    def test_cap_is_logged(self, disagreeing_accounts, caplog):
        caplog.set_level("WARNING", logger="debtpath")

        simulate_strategy(disagreeing_accounts, 0.0, "snowball")

        assert any("month cap" in record.getMessage() for record in caplog.records)

    def test_caller_accounts_are_not_mutated(self, disagreeing_accounts):
        before = [(a.account_id, a.balance, a.minimum_payment) for a in disagreeing_accounts]

        simulate_strategy(disagreeing_accounts, 300.0, "avalanche")
        simulate_schedule(accounts=disagreeing_accounts, total_budget=300.0, strategy="snowball")

        assert [(a.account_id, a.balance, a.minimum_payment) for a in disagreeing_accounts] == before

    def test_repeat_runs_match(self, disagreeing_accounts):
        first = simulate_strategy(disagreeing_accounts, 300.0, "avalanche")
        second = simulate_strategy(disagreeing_accounts, 300.0, "avalanche")
        assert first == second

    def test_invalid_strategy(self, disagreeing_accounts):
        with pytest.raises(ValueError):
            simulate_strategy(disagreeing_accounts, 300.0, "random")


class TestScheduleSummary:
    def test_summary_matches_simulation(self, disagreeing_accounts):
        schedule = simulate_schedule(
            accounts=disagreeing_accounts, total_budget=300.0, strategy="avalanche"
        )
        result = simulate_strategy(disagreeing_accounts, 300.0, "avalanche")

        total_interest, months = schedule_summary(schedule)

        assert months == result.months_to_payoff
        # Rows are rounded to cents, so allow a few cents of drift
        assert_float_equal(total_interest, result.total_interest, tolerance=0.01 * months)

    def test_empty_schedule(self):
        assert schedule_summary([]) == (0.0, 0)


class TestCompareStrategies:
    def test_recommends_avalanche_when_savings_are_material(self, account_factory):
        accounts = [
            account_factory(account_id="small", balance=1000.0, annual_rate=5.0, minimum_payment=25.0),
            account_factory(account_id="big", balance=8000.0, annual_rate=29.0, minimum_payment=200.0),
        ]

        comparison = compare_strategies(accounts, 400.0)

        assert comparison.interest_difference > AVALANCHE_PREFERENCE_THRESHOLD
        assert comparison.recommended is PayoffStrategy.AVALANCHE
        assert comparison.avalanche.total_interest < comparison.snowball.total_interest

    def test_recommends_snowball_when_costs_are_close(self, account_factory):
        """Equal rates make the order irrelevant to interest; snowball wins ties."""
        accounts = [
            account_factory(account_id="a", balance=3000.0, annual_rate=10.0, minimum_payment=50.0),
            account_factory(account_id="b", balance=500.0, annual_rate=10.0, minimum_payment=25.0),
        ]

        comparison = compare_strategies(accounts, 300.0)

        assert abs(comparison.interest_difference) <= AVALANCHE_PREFERENCE_THRESHOLD
        assert comparison.recommended is PayoffStrategy.SNOWBALL

    def test_differences_are_snowball_minus_avalanche(self, disagreeing_accounts):
        comparison = compare_strategies(disagreeing_accounts, 300.0)

        assert_float_equal(
            comparison.interest_difference,
            comparison.snowball.total_interest - comparison.avalanche.total_interest,
        )
        assert comparison.months_difference == (
            comparison.snowball.months_to_payoff - comparison.avalanche.months_to_payoff
        )


def _random_accounts(rng: random.Random) -> tuple[list[AccountDebt], float]:
    """Accounts where the smallest balance carries the lowest rate.

    That pairing makes snowball target the opposite end of the avalanche order.
    Minimums always beat interest so both strategies clear the debt.
    """

    count = rng.randint(2, 4)
    balances = sorted(rng.uniform(300, 9000) for _ in range(count))
    rates = [rng.uniform(3, 8) + 6 * i for i in range(count)]
    accounts = []
    for index, (balance, rate) in enumerate(zip(balances, rates)):
        minimum = round(monthly_interest(balance, rate) + balance * 0.01 + 5, 2)
        accounts.append(
            AccountDebt(
                account_id=f"acct{index}",
                balance=round(balance, 2),
                annual_rate=round(rate, 2),
                minimum_payment=minimum,
            )
        )
    rng.shuffle(accounts)
    budget = sum(a.minimum_payment for a in accounts) + rng.uniform(50, 400)
    return accounts, budget


@pytest.mark.parametrize("seed", range(25))
def test_avalanche_never_costs_more_than_snowball(seed):
    accounts, budget = _random_accounts(random.Random(seed))

    avalanche = simulate_strategy(accounts, budget, "avalanche")
    snowball = simulate_strategy(accounts, budget, "snowball")

    assert avalanche.converged and snowball.converged
    assert avalanche.total_interest <= snowball.total_interest

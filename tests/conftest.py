"""Pytest configuration and shared fixtures for debtpath tests.

Provides account factories and helper utilities for exercising the payoff
calculators without any persistence.
"""

from __future__ import annotations

import logging

import pytest

from debtpath.services.debts import AccountDebt


@pytest.fixture
def account_factory():
    """Factory for creating test accounts.

    Returns:
        Callable: Function that builds AccountDebt instances
    """

    def _create_account(
        account_id: str = "card",
        balance: float = 1000.00,
        annual_rate: float = 18.0,
        minimum_payment: float = 25.00,
        payoff_priority: int | None = None,
    ) -> AccountDebt:
        return AccountDebt(
            account_id=account_id,
            balance=balance,
            annual_rate=annual_rate,
            minimum_payment=minimum_payment,
            payoff_priority=payoff_priority,
        )

    return _create_account


@pytest.fixture
def disagreeing_accounts(account_factory):
    """Small low-rate card next to a large high-rate card.

    Avalanche and snowball pick different targets for these.
    """

    return [
        account_factory(account_id="small", balance=500.00, annual_rate=10.0, minimum_payment=25.00),
        account_factory(account_id="big", balance=5000.00, annual_rate=22.0, minimum_payment=100.00),
    ]


@pytest.fixture
def clean_package_logger():
    """Detach handlers added by setup_logging once the test finishes."""

    yield
    package_logger = logging.getLogger("debtpath")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"

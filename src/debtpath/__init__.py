"""debtpath debt payoff projection and optimization engine."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .services.debts import (
    SIMULATION_MONTH_CAP,
    AccountDebt,
    PaymentStrategy,
    PayoffStrategy,
    compare_strategies,
    distribute,
    plan_payments,
    recommend_payment_strategy,
    simulate_strategy,
)
from .services.interest import average_daily_balance_interest, daily_interest, monthly_interest
from .services.projection import NEVER_PAYS_OFF_MONTHS, PayoffProjection, project_payoff
from .services.scenarios import compare_payment_scenarios
from .services.solver import payment_for_term

__all__ = [
    "AccountDebt",
    "BaseConfig",
    "DevConfig",
    "NEVER_PAYS_OFF_MONTHS",
    "PaymentStrategy",
    "PayoffProjection",
    "PayoffStrategy",
    "SIMULATION_MONTH_CAP",
    "average_daily_balance_interest",
    "compare_payment_scenarios",
    "compare_strategies",
    "daily_interest",
    "distribute",
    "monthly_interest",
    "payment_for_term",
    "plan_payments",
    "project_payoff",
    "recommend_payment_strategy",
    "simulate_strategy",
]

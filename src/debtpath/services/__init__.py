"""Service module exports."""

from . import amortization, debts, interest, money, projection, scenarios, solver

__all__ = [
    "amortization",
    "debts",
    "interest",
    "money",
    "projection",
    "scenarios",
    "solver",
]

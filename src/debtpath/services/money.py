"""Cent rounding helpers shared by the payoff calculators."""

from __future__ import annotations

import math
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal, localcontext

_CENT = Decimal("0.01")


def _quantize(amount: float, rounding: str) -> float:
    if not math.isfinite(amount):
        return float(amount)
    value = Decimal(str(amount))
    with localcontext() as ctx:
        # Integer digits plus two decimals must fit in the context precision
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return float(value.quantize(_CENT, rounding=rounding))


def round_cents(amount: float) -> float:
    """Round to cents, halves away from zero (``ROUND_HALF_UP`` in Decimal terms)."""

    return _quantize(amount, ROUND_HALF_UP)


def ceil_cents(amount: float) -> float:
    """Round up to the next whole cent.

    Used for payment amounts where paying a cent short would leave residual debt.
    """

    return _quantize(amount, ROUND_CEILING)


__all__ = ["round_cents", "ceil_cents"]

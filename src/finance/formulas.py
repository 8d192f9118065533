"""Margin, markup, price and cost conversions.

All functions are pure. Inputs are not validated: a zero denominator yields `inf`/`-inf` (or `nan`
for `0 / 0`) instead of raising, and callers render whatever comes back.
"""

from __future__ import annotations

import math


def safe_divide(numerator: float, denominator: float) -> float:
    """IEEE-754 style division: never raises `ZeroDivisionError`."""

    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def margin(cost: float, price: float) -> float:
    """Margin as a percentage of price."""

    return safe_divide(price - cost, price) * 100


def price_from_cost_margin(cost: float, margin_pct: float) -> float:
    """Selling price that yields `margin_pct` on `cost` (infinite at 100%)."""

    return safe_divide(cost, 1 - margin_pct / 100)


def cost_from_price_margin(price: float, margin_pct: float) -> float:
    return price * (1 - margin_pct / 100)


def markup_from_margin(margin_pct: float) -> float:
    """Markup on cost equivalent to a margin on price (infinite at 100%)."""

    return safe_divide(margin_pct, 100 - margin_pct) * 100


def margin_from_markup(markup_pct: float) -> float:
    return safe_divide(markup_pct, 100 + markup_pct) * 100

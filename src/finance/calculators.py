"""Form-style calculators built on the margin formulas.

`solve_margin` fills in the missing one of cost / margin / revenue. `price_tiers` turns a landed
cost into the two list prices (tier A and tier BCW) after a currency-dependent shipping allowance.
Both return `None` when the inputs cannot produce a meaningful answer, mirroring a form that simply
leaves the output blank.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from src.finance import formulas
from src.finance.exchange import DEFAULT_CAD_TO_USD

Currency = Literal["CAD", "USD"]

SHIPPING_RATES: dict[str, float] = {"CAD": 0.03, "USD": 0.04}
DEFAULT_TIER_A_MARGIN = 30.0
DEFAULT_TIER_BCW_MARGIN = 40.0


class CalculatorInputError(ValueError):
    """Raised when a calculator is called with the wrong set of inputs."""


class MarginSolution(BaseModel):
    """All three figures of a cost / margin / revenue triple, revenue also in USD."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    cost: float
    margin_pct: float
    revenue: float
    revenue_usd: float


class PricingQuote(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    currency: Currency
    cost: float
    shipping: float
    total_cost: float
    price_a: float
    price_bcw: float


def _valid_margin(margin_pct: float) -> bool:
    return 0 <= margin_pct < 100


def solve_margin(
        *,
        cost: float | None = None,
        margin_pct: float | None = None,
        revenue: float | None = None,
        cad_to_usd: float = DEFAULT_CAD_TO_USD,
) -> MarginSolution | None:
    """Solve for whichever of `cost`, `margin_pct`, `revenue` is missing.

    Exactly two must be given. Returns `None` when they are out of range:
    - cost + margin needs cost > 0 and 0 <= margin < 100;
    - cost + revenue needs cost > 0 and revenue > cost;
    - revenue + margin needs revenue > 0 and 0 <= margin < 100.
    """

    given = [name for name, v in (("cost", cost), ("margin_pct", margin_pct), ("revenue", revenue))
             if v is not None]
    if len(given) != 2:
        raise CalculatorInputError(
            f"exactly two of cost, margin_pct, revenue are required (got {', '.join(given) or 'none'})"
        )

    if revenue is None:
        if not (cost > 0 and _valid_margin(margin_pct)):
            return None
        revenue = formulas.price_from_cost_margin(cost, margin_pct)
    elif margin_pct is None:
        if not (cost > 0 and revenue > cost):
            return None
        margin_pct = formulas.margin(cost, revenue)
    else:
        if not (revenue > 0 and _valid_margin(margin_pct)):
            return None
        cost = formulas.cost_from_price_margin(revenue, margin_pct)

    return MarginSolution(
        cost=cost,
        margin_pct=margin_pct,
        revenue=revenue,
        revenue_usd=revenue * cad_to_usd,
    )


def price_tiers(
        cost: float | None,
        *,
        currency: Currency = "CAD",
        margin_a_pct: float = DEFAULT_TIER_A_MARGIN,
        margin_bcw_pct: float = DEFAULT_TIER_BCW_MARGIN,
) -> PricingQuote | None:
    """Tier A and tier BCW prices for `cost` plus shipping (3% for CAD, 4% for USD).

    Returns `None` for a missing or non-positive cost. A 100% tier margin gives an infinite price.
    """

    if currency not in SHIPPING_RATES:
        raise CalculatorInputError(f"unsupported currency: {currency!r}")
    if cost is None or cost <= 0:
        return None

    shipping = cost * SHIPPING_RATES[currency]
    total = cost + shipping
    return PricingQuote(
        currency=currency,
        cost=cost,
        shipping=shipping,
        total_cost=total,
        price_a=formulas.price_from_cost_margin(total, margin_a_pct),
        price_bcw=formulas.price_from_cost_margin(total, margin_bcw_pct),
    )

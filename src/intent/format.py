"""Answer rendering.

Every number is shown with two decimals and wrapped in `**...**` emphasis for the chat client.
Ties round half away from zero on the exact binary value, so `0.125` renders as `0.13` and
`1.005` (stored just below the tie) as `1.00`. Non-finite values render as `Infinity`,
`-Infinity` and `NaN`; nothing is clamped.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal


def _non_finite(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    return "Infinity" if value > 0 else "-Infinity"


def _fixed(value: float, digits: int = 2) -> str:
    if not math.isfinite(value):
        return _non_finite(value)
    quantum = Decimal(1).scaleb(-digits)
    # `+ 0.0` turns a negative zero into 0.0.
    rounded = Decimal(value + 0.0).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:.{digits}f}"


def _plain(value: float) -> str:
    return f"{value:g}" if math.isfinite(value) else _non_finite(value)


def number(value: float) -> str:
    return f"**{_fixed(value)}**"


def percent(value: float) -> str:
    return f"**{_fixed(value)}%**"


def money(value: float, currency: str | None = None) -> str:
    """Render a currency amount, optionally tagged with an ISO code (`$140.00 CAD`)."""

    suffix = f" {currency}" if currency else ""
    return f"**${_fixed(value)}{suffix}**"


def units(value: float) -> str:
    """Render a whole-unit count such as a break-even quantity."""

    if math.isfinite(value):
        return f"**{int(value)} units**"
    return f"**{_non_finite(value)} units**"


def rate_confirmation(usd_to_cad: float, cad_to_usd: float) -> str:
    return (
        "✅ **Exchange Rate Updated**\n\n"
        f"1 USD = ${_fixed(usd_to_cad, 4)} CAD\n"
        f"1 CAD = ${_fixed(cad_to_usd, 4)} USD\n\n"
        "This rate will be used for all conversions until the session ends."
    )


def conversion_note(cost_usd: float, rate: float, cost_cad: float, margin_pct: float) -> str:
    """Explain a USD cost converted to CAD before applying a margin."""

    return (
        "\n\n💱 **Currency Conversion:**\n"
        f"Cost: {_plain(cost_usd)} USD × {_fixed(rate, 4)} = ${_fixed(cost_cad)} CAD\n"
        f"Then applied {_plain(margin_pct)}% margin"
    )

"""Per-session USD/CAD exchange state.

One `ExchangeState` lives for the duration of a chat session. It starts from fallback constants,
may be refreshed from a market quote, and may be pinned by a manual override that wins over any
later refresh until the object is discarded.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from src.finance.formulas import safe_divide

DEFAULT_USD_TO_CAD = 1.39
DEFAULT_CAD_TO_USD = 0.72


class Direction(StrEnum):
    """Conversion direction."""

    cad_to_usd = "cad_to_usd"
    usd_to_cad = "usd_to_cad"


@dataclass
class ExchangeState:
    """Mutable CAD<->USD rates for a single session.

    `cad_to_usd` and `usd_to_cad` are kept reciprocal by every mutator. They are seeded separately
    (0.72 / 1.39 by default), so they are only approximately reciprocal until the first update.
    """

    cad_to_usd: float = DEFAULT_CAD_TO_USD
    usd_to_cad: float = DEFAULT_USD_TO_CAD
    manual_rate: float | None = None

    @property
    def has_override(self) -> bool:
        return self.manual_rate is not None

    def refresh_from_market(self, usd_to_cad: float) -> None:
        """Apply a fetched USD->CAD quote.

        The fetched fields are updated even when an override is active; conversions keep using
        the override regardless.
        """

        self.usd_to_cad = usd_to_cad
        self.cad_to_usd = 1 / usd_to_cad

    def set_manual_rate(self, usd_to_cad: float) -> None:
        """Pin the USD->CAD rate for the rest of the session.

        A zero rate is accepted; the derived CAD->USD side becomes infinite.
        """

        self.manual_rate = usd_to_cad
        self.usd_to_cad = usd_to_cad
        self.cad_to_usd = safe_divide(1, usd_to_cad)

    def rate(self, direction: Direction) -> float:
        """Effective rate for `direction`, honoring the manual override."""

        if self.manual_rate is not None:
            if direction == Direction.usd_to_cad:
                return self.manual_rate
            return safe_divide(1, self.manual_rate)

        if direction == Direction.usd_to_cad:
            return self.usd_to_cad
        return self.cad_to_usd

    def convert(self, amount: float, direction: Direction) -> float:
        return amount * self.rate(direction)

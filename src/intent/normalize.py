"""Query normalization and numeric operand extraction."""

from __future__ import annotations

import re

_NUMBER_RE = re.compile(r"\d+\.?\d*")


def normalize_query(text: str) -> str:
    """Normalize user text for keyword predicates.

    Only case is folded. Punctuation is kept because several predicates match symbols
    (`%`, `+`, `/`, `×`) and the exact query `?`.
    """

    return (text or "").lower()


def extract_numbers(text: str) -> list[float]:
    """Return every unsigned decimal literal in `text`, in left-to-right order.

    A literal is digits, an optional single decimal point and optional trailing digits. Signs,
    thousands separators and exponents are not recognized, so `-5` yields `5.0` and `1,200`
    yields `[1.0, 200.0]`. Duplicates are kept.
    """

    return [float(m) for m in _NUMBER_RE.findall(text or "")]

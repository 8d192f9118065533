"""Ordered keyword rules for calculator questions.

The table is deliberately flat and deterministic:
    - every rule is a substring/regex predicate over the lowercased query plus a minimum number of
      extracted operands,
    - rules are tried strictly in table order and the first one that fires wins,
    - a rule whose keywords match but whose operands are missing does not stop the walk; the next
      rule is tried instead.

Reordering the table changes answers. Rules are kept in a tuple, never keyed by name.
"""

from __future__ import annotations

import math
import operator
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import reduce

from src.finance import formulas
from src.finance.exchange import Direction, ExchangeState
from src.intent import format as fmt
from src.intent import replies

Compute = Callable[[Sequence[float], ExchangeState, str], str]

DEFAULT_MULTI_COST_MARGIN = 35.0


@dataclass(frozen=True)
class IntentRule:
    """One row of the rule table."""

    name: str
    predicate: Callable[[str], bool]
    min_operands: int
    compute: Compute
    mutates_state: bool = False

    def fires(self, query: str, numbers: Sequence[float]) -> bool:
        return len(numbers) >= self.min_operands and self.predicate(query)


@dataclass(frozen=True)
class RuleMatch:
    """Text produced by the first rule that fired."""

    rule: IntentRule
    text: str


_GREETING_RE = re.compile(r"hi|hello|hey|good morning|good afternoon|good evening")
_FAREWELL_RE = re.compile(r"bye|goodbye|see you|cya")
_PERCENT_OF_RE = re.compile(r"\d+%?\s*of\s*\d+")
_PERCENT_LITERAL_RE = re.compile(r"\d\s*%")
_FIRST_PERCENT_RE = re.compile(r"(\d+)%")
_COST_TERM_RE = re.compile(r"cost|freight|duties|overhead")

# Quantity -> keywords naming it in a margin question.
_QUANTITY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "margin": ("margin",),
    "cost": ("cost",),
    "price": ("price", "selling", "revenue"),
}


def _has_any(text: str, *needles: str) -> bool:
    return any(n in text for n in needles)


def _keyword_given(text: str, keyword: str) -> bool:
    """Whether `keyword` is directly followed by a number ("cost 50", "price is $10")."""

    pattern = rf"\b{re.escape(keyword)}\w*\s*(?:(?:is|of|was|at|=|:)\s*)?\$?\d"
    return re.search(pattern, text) is not None


def _quantity_given(text: str, quantity: str) -> bool:
    if quantity == "margin" and _PERCENT_LITERAL_RE.search(text):
        return True
    return any(_keyword_given(text, kw) for kw in _QUANTITY_KEYWORDS[quantity])


def asked_quantity(text: str) -> str | None:
    """Return the quantity a margin question asks for.

    It is the earliest-mentioned of margin/cost/price that has no number attached. `None` when
    every named quantity already has a value.
    """

    candidates: list[tuple[int, str]] = []
    for quantity, keywords in _QUANTITY_KEYWORDS.items():
        positions = [text.find(kw) for kw in keywords if kw in text]
        if positions and not _quantity_given(text, quantity):
            candidates.append((min(positions), quantity))

    if not candidates:
        return None
    return min(candidates)[1]


def _ceil(value: float) -> float:
    return math.ceil(value) if math.isfinite(value) else value


# --- predicates -----------------------------------------------------------------------------


def _is_percent_of(q: str) -> bool:
    return ("%" in q and "of" in q) or _PERCENT_OF_RE.search(q) is not None


def _is_cad_to_usd(q: str) -> bool:
    return "to usd" in q or ("convert" in q and "cad" in q and "to cad" not in q)


def _is_usd_to_cad(q: str) -> bool:
    return "to cad" in q or ("convert" in q and "usd" in q and "to usd" not in q)


def _is_price_composite(q: str) -> bool:
    keywords = (
        "cost" in q and "margin" in q and _has_any(q, "price", "selling", "what")
    ) or ("if cost" in q and "margin" in q)
    if not keywords:
        return False
    if not _has_any(q, "usd", "cad", "selling", "what", "if cost"):
        return False
    return asked_quantity(q) not in {"margin", "cost"}


def _is_margin_from_cost_price(q: str) -> bool:
    keywords = (
        "margin" in q and "cost" in q and _has_any(q, "price", "revenue", "selling")
    ) or ("what" in q and "margin" in q)
    return keywords and asked_quantity(q) == "margin"


def _is_cost_from_price_margin(q: str) -> bool:
    keywords = "cost" in q and _has_any(q, "price", "revenue") and "margin" in q
    return keywords and asked_quantity(q) == "cost"


def _is_markup_to_margin(q: str) -> bool:
    return ("markup" in q and "margin" in q) or "markup to margin" in q


# Same keyword test as markup_to_margin, which sits earlier in RULES and always wins.
def _is_margin_to_markup(q: str) -> bool:
    return ("margin" in q and "markup" in q) or "margin to markup" in q


def _is_multi_cost(q: str) -> bool:
    return _has_any(q, "freight", "duties", "overhead", "multiple cost") and _has_any(
        q, "margin", "price"
    )


# --- computations ---------------------------------------------------------------------------


def _percent_of(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    return fmt.number(n[0] / 100 * n[1])


def _percent_change(n: Sequence[float], _state: ExchangeState, q: str) -> str:
    amount, pct = n[0], n[1]
    change = amount * pct / 100
    return fmt.number(amount + change if "increase" in q else amount - change)


def _percentage_share(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    return fmt.percent(formulas.safe_divide(n[0], n[1]) * 100)


def _add(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    return fmt.number(sum(n))


def _subtract(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    return fmt.number(reduce(operator.sub, n))


def _multiply(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    return fmt.number(math.prod(n))


def _divide(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    return fmt.number(reduce(formulas.safe_divide, n))


def _profit(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    return fmt.money(n[0] - n[1])


def _discount(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    price, discount = n[0], n[1]
    return fmt.money(price - price * discount / 100)


def _add_percentage(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    amount, pct = n[0], n[1]
    return fmt.money(amount + amount * pct / 100)


def _break_even(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    fixed_costs = n[0]
    if len(n) >= 3:
        unit_price, unit_cost = n[1], n[2]
    else:
        # Two numbers: the first doubles as the unit price.
        unit_price, unit_cost = n[0], n[1]
    return fmt.units(_ceil(formulas.safe_divide(fixed_costs, unit_price - unit_cost)))


def _roi(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    gain, cost = n[0], n[1]
    return fmt.percent(formulas.safe_divide(gain - cost, cost) * 100)


def _simple_interest(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    principal, rate, years = n[0], n[1], n[2]
    return fmt.money(principal + principal * rate * years / 100)


def _average(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    return fmt.number(sum(n) / len(n))


def _set_rate(n: Sequence[float], state: ExchangeState, _q: str) -> str:
    state.set_manual_rate(n[0])
    return fmt.rate_confirmation(state.usd_to_cad, state.cad_to_usd)


def _cad_to_usd(n: Sequence[float], state: ExchangeState, _q: str) -> str:
    return fmt.money(state.convert(n[0], Direction.cad_to_usd), "USD")


def _usd_to_cad(n: Sequence[float], state: ExchangeState, _q: str) -> str:
    return fmt.money(state.convert(n[0], Direction.usd_to_cad), "CAD")


def _price_composite(n: Sequence[float], state: ExchangeState, q: str) -> str:
    cost, margin_pct = n[0], n[1]
    if q.find("margin") < q.find("cost"):
        cost, margin_pct = margin_pct, cost

    price = formulas.price_from_cost_margin(cost, margin_pct)
    currency = "CAD"
    note = ""

    if "usd" in q and "cad" in q:
        if "cost" in q and "usd" in q and "price" not in q:
            rate = state.rate(Direction.usd_to_cad)
            cost_cad = cost * rate
            price = formulas.price_from_cost_margin(cost_cad, margin_pct)
            note = fmt.conversion_note(cost, rate, cost_cad, margin_pct)
        # "price ... cad" keeps the unconverted price.
    elif "usd" in q:
        currency = "USD"

    return fmt.money(price, currency) + note


def _margin_from_cost_price(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    return fmt.percent(formulas.margin(cost=n[0], price=n[1]))


def _cost_from_price_margin(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    return fmt.money(formulas.cost_from_price_margin(n[0], n[1]))


def _markup_to_margin(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    return fmt.percent(formulas.margin_from_markup(n[0]))


def _margin_to_markup(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    return fmt.percent(formulas.markup_from_margin(n[0]))


def _multi_cost_price(n: Sequence[float], _state: ExchangeState, q: str) -> str:
    total_cost = sum(n)
    cost_terms = len(_COST_TERM_RE.findall(q))

    percent_match = _FIRST_PERCENT_RE.search(q) if "margin" in q else None
    if percent_match:
        margin_pct = float(percent_match.group(1))
    elif len(n) > cost_terms:
        margin_pct = n[-1]
    else:
        margin_pct = DEFAULT_MULTI_COST_MARGIN

    return fmt.money(formulas.price_from_cost_margin(total_cost, margin_pct))


def _price_from_cost_margin(n: Sequence[float], _state: ExchangeState, _q: str) -> str:
    return fmt.money(formulas.price_from_cost_margin(n[0], n[1]))


def _reply(text: str) -> Compute:
    return lambda _n, _state, _q: text


RULES: tuple[IntentRule, ...] = (
    IntentRule("greeting", lambda q: _GREETING_RE.fullmatch(q) is not None, 0, _reply(replies.GREETING)),
    IntentRule("how_are_you", lambda q: _has_any(q, "how are you", "how r u"), 0, _reply(replies.HOW_ARE_YOU)),
    IntentRule("thanks", lambda q: _has_any(q, "thank", "thx"), 0, _reply(replies.THANKS)),
    IntentRule("farewell", lambda q: _FAREWELL_RE.fullmatch(q) is not None, 0, _reply(replies.FAREWELL)),
    IntentRule("identity", lambda q: _has_any(q, "who are you", "what are you"), 0, _reply(replies.IDENTITY)),
    IntentRule("help", lambda q: "help" in q or q == "?", 0, _reply(replies.HELP)),
    IntentRule("percent_of", _is_percent_of, 2, _percent_of),
    IntentRule(
        "percent_change",
        lambda q: _has_any(q, "increase", "decrease") and "%" in q,
        2,
        _percent_change,
    ),
    IntentRule(
        "percentage_share",
        lambda q: "what" in q and "percentage" in q and "of" in q,
        2,
        _percentage_share,
    ),
    IntentRule("add", lambda q: _has_any(q, "+", "plus", "add"), 2, _add),
    IntentRule("subtract", lambda q: _has_any(q, "-", "minus", "subtract"), 2, _subtract),
    IntentRule("multiply", lambda q: _has_any(q, "×", "*", "multiply", "times"), 2, _multiply),
    IntentRule("divide", lambda q: _has_any(q, "/", "÷", "divide", "divided"), 2, _divide),
    IntentRule("profit", lambda q: "profit" in q, 2, _profit),
    IntentRule("discount", lambda q: "discount" in q, 2, _discount),
    IntentRule("tax", lambda q: "tax" in q, 2, _add_percentage),
    IntentRule("break_even", lambda q: _has_any(q, "break even", "breakeven"), 2, _break_even),
    IntentRule("roi", lambda q: _has_any(q, "roi", "return on investment"), 2, _roi),
    IntentRule("tip", lambda q: "tip" in q, 2, _add_percentage),
    IntentRule("interest", lambda q: "interest" in q, 3, _simple_interest),
    IntentRule("average", lambda q: _has_any(q, "average", "mean"), 2, _average),
    IntentRule("set_rate", lambda q: "set rate" in q, 1, _set_rate, mutates_state=True),
    IntentRule("cad_to_usd", _is_cad_to_usd, 1, _cad_to_usd),
    IntentRule("usd_to_cad", _is_usd_to_cad, 1, _usd_to_cad),
    IntentRule("price_composite", _is_price_composite, 2, _price_composite),
    IntentRule("margin_from_cost_price", _is_margin_from_cost_price, 2, _margin_from_cost_price),
    IntentRule("cost_from_price_margin", _is_cost_from_price_margin, 2, _cost_from_price_margin),
    IntentRule("markup_to_margin", _is_markup_to_margin, 1, _markup_to_margin),
    IntentRule("margin_to_markup", _is_margin_to_markup, 1, _margin_to_markup),
    IntentRule("multi_cost_price", _is_multi_cost, 2, _multi_cost_price),
    IntentRule(
        "price_from_cost_margin",
        lambda q: _has_any(q, "price", "selling") and "cost" in q and "margin" in q,
        2,
        _price_from_cost_margin,
    ),
)


def dispatch(
        query: str,
        numbers: Sequence[float],
        state: ExchangeState,
        *,
        rules: Sequence[IntentRule] = RULES,
) -> RuleMatch | None:
    """Run the first rule whose keywords match and whose operands are present.

    `query` must already be lowercased. Returns `None` when no rule fires.
    """

    for rule in rules:
        if rule.fires(query, numbers):
            return RuleMatch(rule=rule, text=rule.compute(numbers, state, query))
    return None

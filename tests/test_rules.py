"""Tests for the ordered keyword rule table and its dispatcher."""

from __future__ import annotations

import pytest

from src.finance.exchange import ExchangeState
from src.intent import replies
from src.intent.normalize import extract_numbers, normalize_query
from src.intent.rules import RULES, IntentRule, asked_quantity, dispatch


def _rule(name: str) -> IntentRule:
    return next(r for r in RULES if r.name == name)


def _answer(query: str, state: ExchangeState) -> tuple[str, str] | None:
    match = dispatch(normalize_query(query), extract_numbers(query), state)
    if match is None:
        return None
    return match.rule.name, match.text


def test_table_order_is_fixed() -> None:
    names = [r.name for r in RULES]
    assert len(names) == 31
    assert len(set(names)) == len(names)
    assert names[0] == "greeting"
    assert names[6] == "percent_of"
    assert names[21] == "set_rate"
    assert names[24] == "price_composite"
    assert names[-1] == "price_from_cost_margin"


def test_insufficient_operands_fall_through_to_next_rule(state: ExchangeState) -> None:
    rules = (
        IntentRule("needs_two", lambda q: True, 2, lambda n, s, q: "two"),
        IntentRule("needs_one", lambda q: True, 1, lambda n, s, q: "one"),
    )
    match = dispatch("anything", [5.0], state, rules=rules)
    assert match is not None
    assert match.rule.name == "needs_one"
    assert match.text == "one"


def test_first_firing_rule_wins(state: ExchangeState) -> None:
    rules = (
        IntentRule("first", lambda q: True, 0, lambda n, s, q: "first"),
        IntentRule("second", lambda q: True, 0, lambda n, s, q: "second"),
    )
    match = dispatch("anything", [], state, rules=rules)
    assert match is not None
    assert match.text == "first"


def test_margin_price_query_with_one_operand_is_unmatched(state: ExchangeState) -> None:
    query = "margin with cost and price 50"
    q = normalize_query(query)
    assert _rule("margin_from_cost_price").predicate(q)
    assert _rule("price_from_cost_margin").predicate(q)
    assert _answer(query, state) is None


@pytest.mark.parametrize(
    ("query", "rule", "text"),
    [
        ("hello", "greeting", replies.GREETING),
        ("Good Morning", "greeting", replies.GREETING),
        ("how are you today", "how_are_you", replies.HOW_ARE_YOU),
        ("thanks a lot", "thanks", replies.THANKS),
        ("bye", "farewell", replies.FAREWELL),
        ("who are you?", "identity", replies.IDENTITY),
        ("?", "help", replies.HELP),
        ("can you help me with 30% of 130", "help", replies.HELP),
    ],
)
def test_conversational_rules(state: ExchangeState, query: str, rule: str, text: str) -> None:
    assert _answer(query, state) == (rule, text)


def test_greeting_must_be_the_whole_query(state: ExchangeState) -> None:
    assert _answer("hello there", state) is None


@pytest.mark.parametrize(
    ("query", "rule", "text"),
    [
        ("30% of 130", "percent_of", "**39.00**"),
        ("increase 200 by 10%", "percent_change", "**220.00**"),
        ("decrease 200 by 10%", "percent_change", "**180.00**"),
        ("what percentage of the total is 25 out of 200", "percentage_share", "**12.50%**"),
        ("what is 25 + 75", "add", "**100.00**"),
        ("add 1 2 3", "add", "**6.00**"),
        ("150 - 30", "subtract", "**120.00**"),
        ("100 minus 30 minus 20", "subtract", "**50.00**"),
        ("12 × 8", "multiply", "**96.00**"),
        ("3 times 4 times 5", "multiply", "**60.00**"),
        ("100 / 4", "divide", "**25.00**"),
        ("100 divided by 4 divided by 5", "divide", "**5.00**"),
        ("10 / 0", "divide", "**Infinity**"),
        ("average of 10 20 30", "average", "**20.00**"),
        ("mean 1 2", "average", "**1.50**"),
    ],
)
def test_math_rules(state: ExchangeState, query: str, rule: str, text: str) -> None:
    assert _answer(query, state) == (rule, text)


@pytest.mark.parametrize(
    ("query", "rule", "text"),
    [
        ("profit from price 100, cost 60", "profit", "**$40.00**"),
        ("discount 150 by 20", "discount", "**$120.00**"),
        ("tax on 100 at 13", "tax", "**$113.00**"),
        ("break even for fixed costs 1000 price 50 unit cost 30", "break_even", "**50 units**"),
        ("breakeven 100 80", "break_even", "**5 units**"),
        ("roi gain 1200 cost 1000", "roi", "**20.00%**"),
        ("tip on bill 50 at 15", "tip", "**$57.50**"),
        ("interest on 1000 at 5 for 2 years", "interest", "**$1100.00**"),
    ],
)
def test_business_rules(state: ExchangeState, query: str, rule: str, text: str) -> None:
    assert _answer(query, state) == (rule, text)


def test_interest_needs_three_operands(state: ExchangeState) -> None:
    assert _answer("interest on 1000 at 5", state) is None


def test_break_even_with_equal_prices_is_infinite(state: ExchangeState) -> None:
    assert _answer("break even 500 20 20", state) == ("break_even", "**Infinity units**")


@pytest.mark.parametrize(
    ("query", "rule", "text"),
    [
        ("convert 100 cad", "cad_to_usd", "**$72.00 USD**"),
        ("100 cad to usd", "cad_to_usd", "**$72.00 USD**"),
        ("convert 100 usd", "usd_to_cad", "**$139.00 CAD**"),
        ("convert 100 usd to cad", "usd_to_cad", "**$139.00 CAD**"),
    ],
)
def test_currency_rules_use_fallback_rates(
        state: ExchangeState, query: str, rule: str, text: str
) -> None:
    assert _answer(query, state) == (rule, text)


def test_set_rate_mutates_state(state: ExchangeState) -> None:
    match = dispatch("set rate 1.40", [1.4], state)
    assert match is not None
    assert match.rule.name == "set_rate"
    assert match.rule.mutates_state
    assert state.manual_rate == 1.4
    assert "1.4000" in match.text
    assert "0.7143" in match.text


@pytest.mark.parametrize(
    ("query", "text"),
    [
        ("what price for cost 60 and margin 40%?", "**$100.00 CAD**"),
        ("what price for margin 40% and cost 60", "**$100.00 CAD**"),
        ("if cost is 13 usd what is 3% margin", "**$13.40 USD**"),
        ("cost 100 usd margin 40% selling price in cad", "**$166.67 CAD**"),
    ],
)
def test_price_composite(state: ExchangeState, query: str, text: str) -> None:
    assert _answer(query, state) == ("price_composite", text)


def test_price_composite_converts_usd_cost(state: ExchangeState) -> None:
    answer = _answer("if cost 100 usd and margin 40%, what in cad", state)
    assert answer is not None
    rule, text = answer
    assert rule == "price_composite"
    assert text.startswith("**$231.67 CAD**")
    assert "Cost: 100 USD × 1.3900 = $139.00 CAD" in text
    assert "Then applied 40% margin" in text


@pytest.mark.parametrize(
    ("query", "rule", "text"),
    [
        ("margin with cost 50 and price 100", "margin_from_cost_price", "**50.00%**"),
        ("what is my margin if cost is 30 and price is 40", "margin_from_cost_price", "**25.00%**"),
        ("cost for price 100 and margin 40%", "cost_from_price_margin", "**$60.00**"),
        ("convert 50% markup to margin", "markup_to_margin", "**33.33%**"),
        ("what margin is a 50% markup", "markup_to_margin", "**33.33%**"),
        ("convert 40% margin to markup", "markup_to_margin", "**28.57%**"),
        ("price for cost 60 and margin 40%", "price_from_cost_margin", "**$100.00**"),
    ],
)
def test_margin_rules(state: ExchangeState, query: str, rule: str, text: str) -> None:
    assert _answer(query, state) == (rule, text)


def test_margin_to_markup_is_shadowed_by_markup_to_margin(state: ExchangeState) -> None:
    query = "margin to markup 40"
    assert _rule("margin_to_markup").fires(query, [40.0])
    assert _rule("markup_to_margin").fires(query, [40.0])
    assert _answer(query, state) == ("markup_to_margin", "**28.57%**")


@pytest.mark.parametrize(
    ("query", "text"),
    [
        # Total cost includes every number, the margin percentage too.
        ("cost 10 freight 2 duties 1 margin 40%", "**$88.33**"),
        ("freight 20 duties 5 price margin 50", "**$150.00**"),
        ("freight 2 duties 1 overhead 3 price", "**$9.23**"),
    ],
)
def test_multi_cost_price(state: ExchangeState, query: str, text: str) -> None:
    assert _answer(query, state) == ("multi_cost_price", text)


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("margin with cost 50 and price 100", "margin"),
        ("price for cost 60 and margin 40%", "price"),
        ("cost for price 100 and margin 40%", "cost"),
        ("if cost is 13 usd what is 3% margin", None),
    ],
)
def test_asked_quantity(query: str, expected: str | None) -> None:
    assert asked_quantity(normalize_query(query)) == expected

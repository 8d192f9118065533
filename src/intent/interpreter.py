"""Interpreter entry point: free-text question -> formatted answer."""

from __future__ import annotations

import logging

from src.finance.exchange import ExchangeState
from src.intent.normalize import extract_numbers, normalize_query
from src.intent.rules import dispatch
from src.intent.schema import InterpretResult

logger = logging.getLogger(__name__)


def interpret(query: str, state: ExchangeState) -> InterpretResult | None:
    """Answer a calculator question.

    Numbers are taken from the raw text, keywords from its lowercased form. The only rule that
    mutates `state` is "set rate"; its result carries `state_changed=True`.

    Returns:
        The first matching rule's answer, or `None` when no rule fired. Numeric edge cases
        (division by zero, a 100% margin) come back as `inf`/`nan` text, never as exceptions.
    """

    normalized = normalize_query(query)
    numbers = extract_numbers(query)

    match = dispatch(normalized, numbers, state)
    if match is None:
        logger.debug("no rule matched numbers=%d", len(numbers))
        return None

    logger.debug("rule=%s numbers=%d", match.rule.name, len(numbers))
    return InterpretResult(
        text=match.text,
        rule=match.rule.name,
        state_changed=match.rule.mutates_state,
    )

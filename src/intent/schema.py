"""Interpreter result contract (Pydantic models).

The interpreter returns an `InterpretResult` when a rule fires and `None` when nothing matched.
The chat layer relies on `text` being display-ready.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class InterpretResult(BaseModel):
    """A formatted answer produced by exactly one intent rule."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str = Field(min_length=1)
    rule: str
    state_changed: bool = False

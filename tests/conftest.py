"""Pytest configuration.

The repository uses a flat `src/` import namespace. This conftest ensures tests can import from
`src.*` when running `pytest` from a checkout without installing the package.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure `import src...` works when running pytest without installing the package.
REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from src.finance.exchange import ExchangeState  # noqa: E402


@pytest.fixture
def state() -> ExchangeState:
    """A fresh session seeded with the fallback rates."""

    return ExchangeState()

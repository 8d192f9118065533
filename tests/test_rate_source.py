"""Tests for the live quote source and the fallback-preserving refresh."""

from __future__ import annotations

import httpx
import pytest

from src.finance.exchange import DEFAULT_USD_TO_CAD, ExchangeState
from src.rates.source import (
    RateUnavailableError,
    fetch_rate,
    quote_from_payload,
    refresh_exchange_state,
)

_URL = "https://rates.test/latest?base=USD&symbols=CAD"


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_quote_from_payload() -> None:
    quote = quote_from_payload({"base": "USD", "rates": {"CAD": 1.25}})
    assert quote.usd_to_cad == 1.25
    assert quote.cad_to_usd == pytest.approx(0.8)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"rates": {}},
        {"rates": {"CAD": "n/a"}},
        {"rates": {"CAD": 0}},
        ["not", "an", "object"],
    ],
)
def test_bad_payload_is_unavailable(payload: object) -> None:
    with pytest.raises(RateUnavailableError):
        quote_from_payload(payload)


@pytest.mark.asyncio
async def test_fetch_rate_success() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "rates.test"
        return httpx.Response(200, json={"rates": {"CAD": 1.36}})

    async with _client(handler) as client:
        quote = await fetch_rate(url=_URL, client=client)

    assert quote.usd_to_cad == 1.36


@pytest.mark.asyncio
async def test_fetch_rate_http_error() -> None:
    async with _client(lambda request: httpx.Response(503)) as client:
        with pytest.raises(RateUnavailableError, match="503"):
            await fetch_rate(url=_URL, client=client)


@pytest.mark.asyncio
async def test_fetch_rate_non_json() -> None:
    async with _client(lambda request: httpx.Response(200, text="<html>")) as client:
        with pytest.raises(RateUnavailableError):
            await fetch_rate(url=_URL, client=client)


@pytest.mark.asyncio
async def test_fetch_rate_connection_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("boom", request=request)

    async with _client(handler) as client:
        with pytest.raises(RateUnavailableError):
            await fetch_rate(url=_URL, client=client)


@pytest.mark.asyncio
async def test_refresh_updates_state() -> None:
    state = ExchangeState()

    async with _client(lambda request: httpx.Response(200, json={"rates": {"CAD": 1.25}})) as client:
        updated = await refresh_exchange_state(state, url=_URL, client=client)

    assert updated
    assert state.usd_to_cad == 1.25
    assert state.cad_to_usd == pytest.approx(0.8)


@pytest.mark.asyncio
async def test_refresh_keeps_fallback_when_unavailable() -> None:
    state = ExchangeState()

    async with _client(lambda request: httpx.Response(500)) as client:
        updated = await refresh_exchange_state(state, url=_URL, client=client)

    assert not updated
    assert state.usd_to_cad == DEFAULT_USD_TO_CAD

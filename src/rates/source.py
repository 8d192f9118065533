"""Live USD->CAD quote source.

The quote endpoint is optional infrastructure: any failure (network, HTTP status, unexpected
payload) is reported as `RateUnavailableError`, and `refresh_exchange_state` turns that into a
logged no-op so sessions keep their previous or fallback rates.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.finance.exchange import ExchangeState

logger = logging.getLogger(__name__)

DEFAULT_RATE_SOURCE_URL = "https://api.exchangerate.host/latest?base=USD&symbols=CAD"


class RateUnavailableError(RuntimeError):
    """Raised when no usable quote could be fetched."""


class RateQuote(BaseModel):
    """A validated USD->CAD quote."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    usd_to_cad: float = Field(gt=0)

    @property
    def cad_to_usd(self) -> float:
        return 1 / self.usd_to_cad


class _LatestRatesPayload(BaseModel):
    """Subset of the `/latest?base=USD` response we rely on."""

    model_config = ConfigDict(extra="ignore")

    rates: dict[str, float]


def quote_from_payload(payload: object) -> RateQuote:
    """Validate a decoded JSON body and extract the CAD quote."""

    try:
        parsed = _LatestRatesPayload.model_validate(payload)
        return RateQuote(usd_to_cad=parsed.rates["CAD"])
    except (ValidationError, KeyError) as exc:
        raise RateUnavailableError("unexpected rate payload") from exc


async def fetch_rate(
        *,
        url: str = DEFAULT_RATE_SOURCE_URL,
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
) -> RateQuote:
    """Fetch the current USD->CAD quote.

    Raises:
        RateUnavailableError: On transport errors, non-2xx responses or malformed payloads.
    """

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=timeout_s) as own_client:
                resp = await own_client.get(url)
        else:
            resp = await client.get(url, timeout=timeout_s)
        resp.raise_for_status()
        payload = resp.json()
    except httpx.HTTPStatusError as exc:
        raise RateUnavailableError(f"rate source HTTP error: {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise RateUnavailableError("rate source connection error") from exc
    except ValueError as exc:
        raise RateUnavailableError("rate source did not return JSON") from exc

    return quote_from_payload(payload)


async def refresh_exchange_state(
        state: ExchangeState,
        *,
        url: str = DEFAULT_RATE_SOURCE_URL,
        timeout_s: float = 10.0,
        client: httpx.AsyncClient | None = None,
) -> bool:
    """Refresh `state` from the market; keep prior rates if the source is unavailable.

    Returns:
        Whether the state was updated.
    """

    try:
        quote = await fetch_rate(url=url, timeout_s=timeout_s, client=client)
    except RateUnavailableError as exc:
        logger.warning("rate refresh skipped reason=%s", exc)
        return False

    state.refresh_from_market(quote.usd_to_cad)
    logger.info("rate refreshed usd_to_cad=%.4f", quote.usd_to_cad)
    return True

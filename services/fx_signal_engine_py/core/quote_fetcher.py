# core/quote_fetcher.py
"""Fetch intraday FX close prices from the Yahoo Finance chart API.

One request per call: a single trading day of bars at the requested
interval.  There is no retry, caching or rate limiting here, and the
timeout is whatever the ``FetcherConfig`` says (none by default).

The only part of the upstream payload we depend on is
``chart.result[0].indicators.quote[0].close``.
"""
from __future__ import annotations

import logging
import os
from typing import Any, Optional

import httpx
import pandas as pd

from .config import FetcherConfig
from .errors import DataUnavailableError, FetchError, UpstreamSchemaError

# ──────────────────────────────────────────────────────────────────────────────
# Logging
# ──────────────────────────────────────────────────────────────────────────────

logger = logging.getLogger("quote_fetcher")
if not logger.handlers:
    _h = logging.StreamHandler()
    _h.setFormatter(logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"))
    logger.addHandler(_h)
logger.setLevel(os.getenv("QUOTE_LOG_LEVEL", "INFO").upper())

PAIR_SEPARATOR = "."


def log_startup_config(config: FetcherConfig) -> None:
    """One INFO line describing the upstream, with the API key masked."""
    logger.info(
        "Chart base=%s suffix=%s range=%s timeout=%s header=%s key=%s",
        config.base_url,
        config.symbol_suffix,
        config.history_range,
        config.timeout,
        config.api_key_header,
        config.masked_api_key,
    )


# ──────────────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────────────

def to_provider_symbol(pair: str, suffix: str = "=X") -> str:
    """``eur.usd`` -> ``EURUSD=X``."""
    return pair.replace(PAIR_SEPARATOR, "", 1).upper() + suffix


def to_provider_interval(timeframe: str) -> str:
    # dashboard timeframes are already Yahoo interval codes
    return timeframe


def _upstream_error_description(payload: Any) -> Optional[str]:
    try:
        err = payload["chart"]["error"]
    except (KeyError, TypeError):
        return None
    if isinstance(err, dict):
        return err.get("description") or err.get("code")
    return None


def _response_error_message(resp: httpx.Response) -> str:
    try:
        msg = _upstream_error_description(resp.json())
    except ValueError:
        msg = None
    return msg or resp.reason_phrase or "request failed"


def extract_closes(payload: Any, symbol: str = "") -> pd.Series:
    """
    Pull the close array out of a chart payload and drop null bars,
    keeping chronological order.  Raises ``DataUnavailableError`` when the
    result set is empty and ``UpstreamSchemaError`` when the payload does
    not look like a chart response at all.
    """
    try:
        results = payload["chart"]["result"]
    except (KeyError, TypeError) as e:
        raise UpstreamSchemaError(f"Unexpected chart payload for {symbol}: missing {e}") from e

    if not results:
        desc = _upstream_error_description(payload)
        raise DataUnavailableError(
            f"No chart data returned for {symbol}" + (f": {desc}" if desc else "")
        )

    try:
        raw = results[0]["indicators"]["quote"][0]["close"]
    except (KeyError, IndexError, TypeError) as e:
        raise UpstreamSchemaError(
            f"Unexpected chart payload for {symbol}: no close prices ({e!r})"
        ) from e

    if raw is None:
        raise DataUnavailableError(f"No close prices returned for {symbol}")
    if not isinstance(raw, list):
        raise UpstreamSchemaError(
            f"Unexpected chart payload for {symbol}: close is {type(raw).__name__}, not a list"
        )

    kept = [v for v in raw if v is not None]
    if not kept:
        raise DataUnavailableError(f"No close prices returned for {symbol}")
    # bool is an int subclass; JSON true/false is not a price
    bad = [v for v in kept if isinstance(v, bool) or not isinstance(v, (int, float))]
    if bad:
        raise UpstreamSchemaError(f"Non-numeric close prices for {symbol}: {bad[:3]!r}")
    return pd.Series(kept, dtype=float, name="close")


# ──────────────────────────────────────────────────────────────────────────────
# Public entry
# ──────────────────────────────────────────────────────────────────────────────

async def _get_chart(
    client: httpx.AsyncClient,
    config: FetcherConfig,
    symbol: str,
    interval: str,
) -> Any:
    url = f"{config.base_url}/{symbol}"
    params = {"interval": interval, "range": config.history_range}
    logger.debug(
        "GET %s interval=%s range=%s key=%s",
        url, interval, config.history_range, config.masked_api_key,
    )
    try:
        resp = await client.get(url, params=params, headers=config.headers())
    except httpx.HTTPError as e:
        logger.warning("Chart request for %s failed: %s", symbol, e)
        raise FetchError(f"Failed to fetch chart data for {symbol}: {e}") from e

    if not resp.is_success:
        msg = _response_error_message(resp)
        logger.warning("Chart request for %s returned %s: %s", symbol, resp.status_code, msg)
        raise FetchError(
            f"Failed to fetch chart data for {symbol} ({resp.status_code}): {msg}",
            status_code=resp.status_code,
        )

    try:
        return resp.json()
    except ValueError as e:
        raise UpstreamSchemaError(f"Chart response for {symbol} is not JSON") from e


async def fetch_closes(
    pair: str,
    timeframe: str,
    config: FetcherConfig,
    client: Optional[httpx.AsyncClient] = None,
) -> pd.Series:
    """
    Return the normalized close series for ``pair`` at ``timeframe``.

    A caller-supplied ``client`` is used as-is and left open; otherwise a
    short-lived client is created with the configured timeout.
    """
    symbol = to_provider_symbol(pair, config.symbol_suffix)
    interval = to_provider_interval(timeframe)

    if client is not None:
        payload = await _get_chart(client, config, symbol, interval)
    else:
        async with httpx.AsyncClient(timeout=config.timeout) as own_client:
            payload = await _get_chart(own_client, config, symbol, interval)

    closes = extract_closes(payload, symbol)
    logger.debug("Fetched %d closes for %s@%s", len(closes), symbol, interval)
    return closes

"""
Request orchestration: fetch closes, compute the indicator snapshot and
derive the signal.  Fetch failures propagate untouched so that no
partial indicator values ever leave this module after an error.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
import pandas as pd

from .config import FetcherConfig
from .indicators import (
    BollingerBands,
    Closes,
    compute_bollinger,
    compute_macd,
    compute_rsi,
    compute_sma,
    compute_stochastic,
)
from .quote_fetcher import fetch_closes
from .rules import Signal, generate_signal

SMA_PERIOD = 20
RSI_PERIOD = 14
BOLLINGER_PERIOD = 20
STOCHASTIC_PERIOD = 14


@dataclass(frozen=True)
class IndicatorSet:
    last_price: Optional[float]
    sma: Optional[float]
    rsi: Optional[float]
    macd: Optional[float]
    boll: Optional[BollingerBands]
    stochastic: Optional[float]


@dataclass(frozen=True)
class SignalReport:
    pair: str
    indicators: IndicatorSet
    signal: Signal

    def to_dict(self) -> Dict[str, Any]:
        ind = self.indicators
        boll = None
        if ind.boll is not None:
            boll = {
                "upper": _json_float(ind.boll.upper),
                "lower": _json_float(ind.boll.lower),
                "sma": _json_float(ind.boll.sma),
            }
        return {
            "pair": self.pair,
            "lastPrice": _json_float(ind.last_price),
            "sma": _json_float(ind.sma),
            "rsi": _json_float(ind.rsi),
            "macd": _json_float(ind.macd),
            "boll": boll,
            "stochastic": _json_float(ind.stochastic),
            "signal": self.signal.to_dict(),
        }


def _json_float(value: Optional[float]) -> Optional[float]:
    # JSON has no NaN; a flat-window stochastic goes out as null
    if value is None or math.isnan(value):
        return None
    return value


def build_indicator_set(close: Closes) -> IndicatorSet:
    s = close if isinstance(close, pd.Series) else pd.Series(list(close), dtype=float)
    return IndicatorSet(
        last_price=float(s.iloc[-1]) if len(s) else None,
        sma=compute_sma(s, SMA_PERIOD),
        rsi=compute_rsi(s, RSI_PERIOD),
        macd=compute_macd(s),
        boll=compute_bollinger(s, BOLLINGER_PERIOD),
        stochastic=compute_stochastic(s, STOCHASTIC_PERIOD),
    )


def evaluate_closes(pair: str, close: Closes) -> SignalReport:
    """Pure part of the pipeline: closes in, report out."""
    indicators = build_indicator_set(close)
    signal = generate_signal(indicators.rsi, indicators.macd, indicators.stochastic)
    return SignalReport(pair=pair, indicators=indicators, signal=signal)


async def run_signal_pipeline(
    pair: str,
    timeframe: str,
    config: FetcherConfig,
    client: Optional[httpx.AsyncClient] = None,
) -> SignalReport:
    closes = await fetch_closes(pair, timeframe, config, client=client)
    return evaluate_closes(pair, closes)

"""Latest-value technical indicators using pure pandas.

Each function takes the chronological close series (oldest first) and
returns the indicator value for the most recent bar, or ``None`` when
the series is too short for the requested window.  No function mutates
its input and none depends on another's output, so the caller may
evaluate them in any order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd

# Floor for the loss sum in RSI so a loss-free window does not divide by zero.
RSI_LOSS_EPSILON = 1e-9

Closes = Union[pd.Series, Sequence[float]]


@dataclass(frozen=True)
class BollingerBands:
    upper: float
    lower: float
    sma: float


def _as_series(close: Closes) -> pd.Series:
    if isinstance(close, pd.Series):
        return close.reset_index(drop=True).astype(float)
    return pd.Series(list(close), dtype=float)


def compute_sma(close: Closes, period: int) -> Optional[float]:
    """Arithmetic mean of the last ``period`` closes."""
    s = _as_series(close)
    if len(s) < period:
        return None
    return float(s.iloc[-period:].mean())


def compute_ema(close: Closes, period: int) -> Optional[float]:
    """
    Exponential moving average with ``k = 2 / (period + 1)``, seeded with
    the first close and carried forward through the whole series.  There
    is no warm-up window: on a short series the seed dominates.
    """
    s = _as_series(close)
    if s.empty:
        return None
    # adjust=False gives ema[0] = close[0], ema[t] = k*close[t] + (1-k)*ema[t-1]
    return float(s.ewm(span=period, adjust=False).mean().iloc[-1])


def compute_rsi(close: Closes, period: int = 14) -> Optional[float]:
    """
    Relative Strength Index over the last ``period`` price changes, using
    plain sums of gains and losses (no Wilder smoothing).  A flat window
    returns exactly 50.
    """
    s = _as_series(close)
    if len(s) < period + 1:
        return None
    delta = s.iloc[-(period + 1):].diff().iloc[1:]
    gains = float(delta[delta > 0].sum())
    losses = float(-delta[delta < 0].sum())
    if gains + losses == 0:
        return 50.0
    rs = gains / (losses or RSI_LOSS_EPSILON)
    return 100 - 100 / (1 + rs)


def compute_macd(close: Closes, fast: int = 12, slow: int = 26) -> Optional[float]:
    """MACD line: EMA(fast) - EMA(slow) at the latest bar."""
    ema_fast = compute_ema(close, fast)
    ema_slow = compute_ema(close, slow)
    if ema_fast is None or ema_slow is None:
        return None
    return ema_fast - ema_slow


def compute_bollinger(
    close: Closes, period: int = 20, n_std: float = 2.0
) -> Optional[BollingerBands]:
    """
    Bollinger Bands over the last ``period`` closes: the mean as the mid
    band and ``n_std`` population standard deviations either side.
    """
    s = _as_series(close)
    if len(s) < period:
        return None
    window = s.iloc[-period:]
    mid = float(window.mean())
    std = float(window.std(ddof=0))
    return BollingerBands(upper=mid + n_std * std, lower=mid - n_std * std, sma=mid)


def compute_stochastic(close: Closes, period: int = 14) -> Optional[float]:
    """
    Stochastic %K from closes only: where the latest close sits inside the
    high/low range of the last ``period`` closes, scaled to 0..100.

    A flat window (high == low) is not guarded and yields NaN.
    """
    s = _as_series(close)
    if len(s) < period:
        return None
    window = s.iloc[-period:].to_numpy()
    high = window.max()
    low = window.min()
    last = window[-1]
    with np.errstate(divide="ignore", invalid="ignore"):
        k = (last - low) / (high - low) * 100
    return float(k)

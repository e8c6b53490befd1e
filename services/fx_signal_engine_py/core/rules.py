"""
Reduce the latest oscillator readings to a single trading signal.

The rule is a fixed priority list; the first matching branch wins.  Any
indicator that is absent (``None``) or NaN simply fails every comparison
it takes part in, which pushes the outcome towards ``Hold``.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional

RSI_OVERSOLD = 35.0
RSI_OVERBOUGHT = 65.0
STOCH_OVERSOLD = 20.0
STOCH_OVERBOUGHT = 80.0

STRONG_CONFIDENCE = 0.85
TREND_CONFIDENCE = 0.6
NEUTRAL_CONFIDENCE = 0.5


class SignalLabel(str, enum.Enum):
    BUY = "Buy"
    SELL = "Sell"
    HOLD = "Hold"


@dataclass(frozen=True)
class Signal:
    signal: SignalLabel
    confidence: float

    def to_dict(self) -> dict:
        return {"signal": self.signal.value, "confidence": self.confidence}


def _present(value: Optional[float]) -> bool:
    # NaN != NaN, so this also rejects an unguarded 0/0 stochastic
    return value is not None and value == value


def generate_signal(
    rsi: Optional[float],
    macd: Optional[float],
    stochastic: Optional[float],
) -> Signal:
    """
    Strong signals need all three oscillators to agree:

    * Buy (0.85): RSI < 35, MACD > 0 and Stochastic < 20
    * Sell (0.85): RSI > 65, MACD < 0 and Stochastic > 80

    Otherwise the MACD sign alone gives a weaker Buy/Sell (0.6), and with
    no usable MACD the result is Hold (0.5).
    """
    if _present(rsi) and _present(macd) and _present(stochastic):
        if rsi < RSI_OVERSOLD and macd > 0 and stochastic < STOCH_OVERSOLD:
            return Signal(SignalLabel.BUY, STRONG_CONFIDENCE)
        if rsi > RSI_OVERBOUGHT and macd < 0 and stochastic > STOCH_OVERBOUGHT:
            return Signal(SignalLabel.SELL, STRONG_CONFIDENCE)
    if _present(macd):
        if macd > 0:
            return Signal(SignalLabel.BUY, TREND_CONFIDENCE)
        if macd < 0:
            return Signal(SignalLabel.SELL, TREND_CONFIDENCE)
    return Signal(SignalLabel.HOLD, NEUTRAL_CONFIDENCE)

import math
import os
import sys

import pandas as pd

# add fx_signal_engine_py to sys.path for tests
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../../services/fx_signal_engine_py')))

from core.indicators import (
    BollingerBands,
    compute_bollinger,
    compute_ema,
    compute_macd,
    compute_rsi,
    compute_sma,
    compute_stochastic,
)


def test_compute_sma():
    series = pd.Series([1, 2, 3, 4, 5])
    # average of the trailing [3, 4, 5]
    assert compute_sma(series, 3) == 4.0


def test_compute_sma_insufficient_history():
    assert compute_sma([1, 2], 3) is None
    assert compute_sma([1, 2, 3], 3) == 2.0


def test_compute_ema_seeded_with_first_value():
    # k = 2 / (3 + 1) = 0.5: 1 -> 1.5 -> 2.25
    assert compute_ema([1, 2, 3], 3) == 2.25
    assert compute_ema([7.5], 12) == 7.5
    assert compute_ema([], 12) is None


def test_compute_rsi_flat_series_is_50():
    assert compute_rsi(pd.Series([1.1] * 20), 14) == 50.0


def test_compute_rsi_rising_series_approaches_100():
    rsi = compute_rsi(list(range(1, 21)), 14)
    assert 99.99 < rsi < 100


def test_compute_rsi_uses_only_last_period_changes():
    # an early crash outside the 14-change window must not matter
    values = [100.0, 1.0] + [float(x) for x in range(2, 17)]
    assert compute_rsi(values, 14) > 99.99


def test_compute_rsi_mixed():
    # changes: +1, -1, +2 -> gains 3, losses 1 -> RS 3 -> RSI 75
    assert math.isclose(compute_rsi([10, 11, 10, 12], 3), 75.0)


def test_compute_rsi_insufficient_history():
    assert compute_rsi(list(range(14)), 14) is None
    assert compute_rsi(list(range(15)), 14) is not None


def test_compute_macd_sign_follows_trend():
    up = [1.0 + 0.01 * i for i in range(60)]
    down = list(reversed(up))
    assert compute_macd(up) > 0
    assert compute_macd(down) < 0


def test_compute_macd_short_series_does_not_fail():
    assert compute_macd([1.2345]) == 0.0
    assert compute_macd([1.0, 2.0]) is not None
    assert compute_macd([]) is None


def test_compute_bollinger_population_std():
    values = [2, 4, 4, 4, 5, 5, 7, 9]
    bb = compute_bollinger(values, period=8)
    # population std of this classic sample is exactly 2 (sample std is not)
    assert bb == BollingerBands(upper=9.0, lower=1.0, sma=5.0)


def test_compute_bollinger_symmetric_around_sma():
    values = [1.1 + 0.001 * ((i * 7) % 11) for i in range(30)]
    bb = compute_bollinger(values)
    std = pd.Series(values[-20:]).std(ddof=0)
    assert math.isclose(bb.upper - bb.sma, 2 * std)
    assert math.isclose(bb.sma - bb.lower, 2 * std)


def test_compute_bollinger_insufficient_history():
    assert compute_bollinger(list(range(19))) is None


def test_compute_stochastic_close_at_high():
    assert compute_stochastic(list(range(1, 15)), 14) == 100.0


def test_compute_stochastic_close_at_low():
    assert compute_stochastic(list(range(14, 0, -1)), 14) == 0.0


def test_compute_stochastic_flat_window_is_nan():
    assert math.isnan(compute_stochastic([1.5] * 14, 14))


def test_compute_stochastic_insufficient_history():
    assert compute_stochastic(list(range(13)), 14) is None


def test_indicators_are_deterministic():
    values = pd.Series([1.08 + 0.0003 * ((i * 13) % 17) for i in range(120)])
    first = (compute_rsi(values), compute_macd(values), compute_bollinger(values), compute_stochastic(values))
    second = (compute_rsi(values), compute_macd(values), compute_bollinger(values), compute_stochastic(values))
    assert first == second

import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '../../services/fx_signal_engine_py')))

from core.rules import Signal, SignalLabel, generate_signal


def test_strong_buy():
    assert generate_signal(rsi=30, macd=1, stochastic=10) == Signal(SignalLabel.BUY, 0.85)


def test_strong_sell():
    assert generate_signal(rsi=70, macd=-1, stochastic=90) == Signal(SignalLabel.SELL, 0.85)


def test_macd_only_buy():
    assert generate_signal(rsi=None, macd=0.5, stochastic=None) == Signal(SignalLabel.BUY, 0.6)


def test_macd_only_sell():
    assert generate_signal(rsi=None, macd=-0.5, stochastic=None) == Signal(SignalLabel.SELL, 0.6)


def test_all_absent_is_hold():
    assert generate_signal(None, None, None) == Signal(SignalLabel.HOLD, 0.5)


def test_zero_macd_is_hold():
    assert generate_signal(rsi=50, macd=0.0, stochastic=50) == Signal(SignalLabel.HOLD, 0.5)


def test_bands_are_strict():
    # boundary values do not qualify for the strong signals
    assert generate_signal(rsi=35, macd=1, stochastic=10).confidence == 0.6
    assert generate_signal(rsi=30, macd=1, stochastic=20).confidence == 0.6
    assert generate_signal(rsi=65, macd=-1, stochastic=90).confidence == 0.6
    assert generate_signal(rsi=70, macd=-1, stochastic=80).confidence == 0.6


def test_oversold_with_negative_macd_is_weak_sell():
    assert generate_signal(rsi=20, macd=-0.1, stochastic=5) == Signal(SignalLabel.SELL, 0.6)


def test_nan_stochastic_never_matches():
    nan = float("nan")
    assert generate_signal(rsi=30, macd=1, stochastic=nan) == Signal(SignalLabel.BUY, 0.6)
    assert generate_signal(rsi=30, macd=nan, stochastic=10) == Signal(SignalLabel.HOLD, 0.5)


def test_to_dict():
    assert Signal(SignalLabel.HOLD, 0.5).to_dict() == {"signal": "Hold", "confidence": 0.5}

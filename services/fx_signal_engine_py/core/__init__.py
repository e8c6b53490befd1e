"""Core utilities for the FX signal engine.

This package provides helpers for fetching intraday FX closes from the
Yahoo Finance chart API, computing technical indicators, and reducing
them to a Buy/Sell/Hold signal.  Apart from the fetch itself, all
functions are side‑effect free and deterministic when given the same
inputs.
"""

from .errors import (
    SignalEngineError,
    ConfigError,
    FetchError,
    DataUnavailableError,
    UpstreamSchemaError,
)
from .config import (
    FetcherConfig,
    SUPPORTED_PAIRS,
    SUPPORTED_TIMEFRAMES,
    DEFAULT_PAIR,
    DEFAULT_TIMEFRAME,
)
from .quote_fetcher import (
    fetch_closes,
    extract_closes,
    log_startup_config,
    to_provider_symbol,
    to_provider_interval,
)
from .indicators import (
    BollingerBands,
    compute_sma,
    compute_ema,
    compute_rsi,
    compute_macd,
    compute_bollinger,
    compute_stochastic,
)
from .rules import Signal, SignalLabel, generate_signal
from .engine import (
    IndicatorSet,
    SignalReport,
    build_indicator_set,
    evaluate_closes,
    run_signal_pipeline,
)

__all__ = [
    "SignalEngineError",
    "ConfigError",
    "FetchError",
    "DataUnavailableError",
    "UpstreamSchemaError",
    "FetcherConfig",
    "SUPPORTED_PAIRS",
    "SUPPORTED_TIMEFRAMES",
    "DEFAULT_PAIR",
    "DEFAULT_TIMEFRAME",
    "fetch_closes",
    "extract_closes",
    "log_startup_config",
    "to_provider_symbol",
    "to_provider_interval",
    "BollingerBands",
    "compute_sma",
    "compute_ema",
    "compute_rsi",
    "compute_macd",
    "compute_bollinger",
    "compute_stochastic",
    "Signal",
    "SignalLabel",
    "generate_signal",
    "IndicatorSet",
    "SignalReport",
    "build_indicator_set",
    "evaluate_closes",
    "run_signal_pipeline",
]

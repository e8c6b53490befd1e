# core/config.py
"""Configuration for the chart-data fetcher.

Values come from the environment (see ``FetcherConfig.from_env``) but the
resulting object is passed explicitly into the fetcher and the pipeline;
nothing here is bound at import time.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from .errors import ConfigError

DEFAULT_BASE_URL = "https://query1.finance.yahoo.com/v8/finance/chart"
DEFAULT_SYMBOL_SUFFIX = "=X"
DEFAULT_HISTORY_RANGE = "1d"
DEFAULT_USER_AGENT = "Mozilla/5.0 (compatible; fx-signal-engine/0.1)"

# Pairs and timeframes offered by the dashboard.  Requests outside these
# sets are still forwarded; the upstream decides whether they are valid.
SUPPORTED_PAIRS = ("eur.usd", "eur.jpy", "usd.chf", "eur.cad", "aud.usd")
SUPPORTED_TIMEFRAMES = ("1m", "3m", "5m")
DEFAULT_PAIR = SUPPORTED_PAIRS[0]
DEFAULT_TIMEFRAME = SUPPORTED_TIMEFRAMES[0]


# ──────────────────────────────────────────────────────────────────────────────
# Env helpers (strip quotes/whitespace so .env "KEY=value " doesn't break things)
# ──────────────────────────────────────────────────────────────────────────────

def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    if v is None:
        return default
    v = v.strip()
    if (v.startswith('"') and v.endswith('"')) or (v.startswith("'") and v.endswith("'")):
        v = v[1:-1].strip()
    return v or default


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw.lower() in {"none", "off"}:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"FX_HTTP_TIMEOUT must be a number of seconds, got {raw!r}") from None


@dataclass(frozen=True)
class FetcherConfig:
    """Where and how to query the chart-data provider."""

    base_url: str = DEFAULT_BASE_URL
    symbol_suffix: str = DEFAULT_SYMBOL_SUFFIX
    history_range: str = DEFAULT_HISTORY_RANGE
    # None means no timeout is enforced on the upstream call.
    timeout: Optional[float] = None
    user_agent: str = DEFAULT_USER_AGENT
    api_key: Optional[str] = field(default=None, repr=False)
    api_key_header: Optional[str] = None

    def __post_init__(self) -> None:
        base = (self.base_url or "").strip()
        if not base.startswith(("http://", "https://")):
            raise ConfigError(f"base_url must be an http(s) URL, got {self.base_url!r}")
        object.__setattr__(self, "base_url", base.rstrip("/"))
        if not self.history_range:
            raise ConfigError("history_range must not be empty")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError(f"timeout must be positive or None, got {self.timeout!r}")
        if self.api_key_header and not self.api_key:
            raise ConfigError(
                f"api_key_header {self.api_key_header!r} is set but no api_key was provided"
            )

    @classmethod
    def from_env(cls) -> "FetcherConfig":
        return cls(
            base_url=_env("FX_CHART_BASE_URL", DEFAULT_BASE_URL),
            symbol_suffix=_env("FX_SYMBOL_SUFFIX", DEFAULT_SYMBOL_SUFFIX),
            history_range=_env("FX_HISTORY_RANGE", DEFAULT_HISTORY_RANGE),
            timeout=_parse_timeout(_env("FX_HTTP_TIMEOUT")),
            user_agent=_env("FX_USER_AGENT", DEFAULT_USER_AGENT),
            api_key=_env("FX_API_KEY"),
            api_key_header=_env("FX_API_KEY_HEADER"),
        )

    @property
    def masked_api_key(self) -> Optional[str]:
        if self.api_key and len(self.api_key) >= 4:
            return f"...{self.api_key[-4:]}"
        return None

    def headers(self) -> Dict[str, str]:
        headers = {"User-Agent": self.user_agent}
        if self.api_key and self.api_key_header:
            headers[self.api_key_header] = self.api_key
        return headers

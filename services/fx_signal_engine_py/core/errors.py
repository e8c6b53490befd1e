"""Error kinds raised by the signal engine.

Everything derives from ``RuntimeError`` so callers that only care about
"the upstream broke" can keep catching that, while the HTTP layer maps the
concrete subclasses to status codes.
"""
from __future__ import annotations

from typing import Optional


class SignalEngineError(RuntimeError):
    """Base class for all engine failures."""


class ConfigError(SignalEngineError):
    """Invalid or incomplete fetcher configuration."""


class FetchError(SignalEngineError):
    """The upstream chart request failed (non-2xx or transport error)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DataUnavailableError(SignalEngineError):
    """The upstream answered but returned no usable close prices."""


class UpstreamSchemaError(SignalEngineError):
    """The upstream payload does not have the expected chart shape."""

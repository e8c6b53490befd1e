"""
FastAPI application exposing the FX signal endpoint plus a couple of
read-only helpers for the dashboard.  The API is stateless: every
request fetches fresh closes and recomputes everything.

Failures never leak partial results; the body is always ``{"error": msg}``.
"""
from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, List, Optional

import httpx
from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from core import (
    DEFAULT_PAIR,
    DEFAULT_TIMEFRAME,
    SUPPORTED_PAIRS,
    SUPPORTED_TIMEFRAMES,
    ConfigError,
    DataUnavailableError,
    FetchError,
    FetcherConfig,
    SignalEngineError,
    UpstreamSchemaError,
    fetch_closes,
    log_startup_config,
    run_signal_pipeline,
    to_provider_interval,
    to_provider_symbol,
)

logger = logging.getLogger("signal_api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # config is re-read per request; this only reports what the env holds now
    try:
        log_startup_config(FetcherConfig.from_env())
    except ConfigError as e:
        logger.error("Invalid fetcher configuration: %s", e)
    yield


app = FastAPI(title="FX Signal API", lifespan=lifespan)


# ----------------------------------------------------------------------
# Models
# ----------------------------------------------------------------------
class SignalRequest(BaseModel):
    pair: str = Field(DEFAULT_PAIR, description="Currency pair, e.g. eur.usd")
    timeframe: str = Field(DEFAULT_TIMEFRAME, description="Bar interval: 1m, 3m, 5m")


class BollingerModel(BaseModel):
    upper: Optional[float]
    lower: Optional[float]
    sma: Optional[float]


class SignalModel(BaseModel):
    signal: str
    confidence: float


class SignalResponse(BaseModel):
    pair: str
    last_price: Optional[float] = Field(None, alias="lastPrice")
    sma: Optional[float] = None
    rsi: Optional[float] = None
    macd: Optional[float] = None
    boll: Optional[BollingerModel] = None
    stochastic: Optional[float] = None
    signal: SignalModel


class ClosesResponse(BaseModel):
    pair: str
    symbol: str
    interval: str
    closes: List[float]


class MetaResponse(BaseModel):
    pairs: List[str]
    timeframes: List[str]
    default_pair: str
    default_timeframe: str


class ErrorResponse(BaseModel):
    error: str


_ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    502: {"model": ErrorResponse},
}


# ----------------------------------------------------------------------
# Dependencies
# ----------------------------------------------------------------------
def get_config() -> FetcherConfig:
    """Fetcher configuration, read from the environment per request."""
    return FetcherConfig.from_env()


async def get_http_client(
    config: FetcherConfig = Depends(get_config),
) -> AsyncIterator[httpx.AsyncClient]:
    async with httpx.AsyncClient(timeout=config.timeout) as client:
        yield client


# ----------------------------------------------------------------------
# Error mapping
# ----------------------------------------------------------------------
def _status_for(exc: SignalEngineError) -> int:
    if isinstance(exc, DataUnavailableError):
        return 404
    if isinstance(exc, (FetchError, UpstreamSchemaError)):
        return 502
    # ConfigError and anything unexpected are server-side problems
    return 500


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(SignalEngineError)
async def _engine_error_handler(request: Request, exc: SignalEngineError) -> JSONResponse:
    status = _status_for(exc)
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, status, exc)
    return _error(status, str(exc))


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    msg = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'invalid')}"
        for err in exc.errors()
    ) or "Invalid request"
    logger.warning("%s %s -> 422: %s", request.method, request.url.path, msg)
    return _error(422, msg)


# ----------------------------------------------------------------------
# Endpoints
# ----------------------------------------------------------------------
async def _signal(
    pair: str,
    timeframe: str,
    config: FetcherConfig,
    client: httpx.AsyncClient,
):
    try:
        report = await run_signal_pipeline(pair, timeframe, config, client=client)
    except SignalEngineError:
        raise
    except Exception:
        logger.exception("Unhandled error in /signal")
        return _error(500, "Internal server error")
    return report.to_dict()


@app.get("/signal", response_model=SignalResponse, responses=_ERROR_RESPONSES)
async def get_signal(
    pair: str = Query(DEFAULT_PAIR, description="Currency pair, e.g. eur.usd"),
    timeframe: str = Query(DEFAULT_TIMEFRAME, description="Interval: 1m, 3m, 5m"),
    config: FetcherConfig = Depends(get_config),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Compute indicators and the trading signal for one pair/timeframe."""
    return await _signal(pair, timeframe, config, client)


@app.post("/signal", response_model=SignalResponse, responses=_ERROR_RESPONSES)
async def post_signal(
    req: Optional[SignalRequest] = None,
    config: FetcherConfig = Depends(get_config),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Same as ``GET /signal`` but takes ``{pair, timeframe}`` as a JSON body."""
    req = req or SignalRequest()
    return await _signal(req.pair, req.timeframe, config, client)


@app.get("/data/closes", response_model=ClosesResponse, responses=_ERROR_RESPONSES)
async def get_closes(
    pair: str = Query(DEFAULT_PAIR, description="Currency pair, e.g. eur.usd"),
    timeframe: str = Query(DEFAULT_TIMEFRAME, description="Interval: 1m, 3m, 5m"),
    config: FetcherConfig = Depends(get_config),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    """Return the normalized close series the signal is computed from."""
    try:
        closes = await fetch_closes(pair, timeframe, config, client=client)
    except SignalEngineError:
        raise
    except Exception:
        logger.exception("Unhandled error in /data/closes")
        return _error(500, "Internal server error")
    return ClosesResponse(
        pair=pair,
        symbol=to_provider_symbol(pair, config.symbol_suffix),
        interval=to_provider_interval(timeframe),
        closes=[float(x) for x in closes.tolist()],
    )


@app.get("/meta", response_model=MetaResponse)
async def get_meta() -> MetaResponse:
    """Pairs and timeframes offered by the dashboard."""
    return MetaResponse(
        pairs=list(SUPPORTED_PAIRS),
        timeframes=list(SUPPORTED_TIMEFRAMES),
        default_pair=DEFAULT_PAIR,
        default_timeframe=DEFAULT_TIMEFRAME,
    )

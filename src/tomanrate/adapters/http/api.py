"""
HTTP API - FastAPI Application for the Exchange Rate Service

Routes:
- GET /api/exchange-rate         current USD/Toman rate with freshness metadata
- GET /api/exchange-rate/status  cache and quota status (no upstream call)
- GET /health                    liveness

Error mapping:
- missing API key             -> 500 {"error": "API key not configured"}
- no cache and fetch failed   -> 503 {"error": "No exchange rate data available"}
- anything unexpected         -> 500 {"error": "Failed to fetch exchange rate"}

Files that USE this module:
- tomanrate.app (create_app served by uvicorn)
- tests.test_api (FastAPI TestClient)

Files that this module USES:
- tomanrate.application (ExchangeRateService, build_service, build_status)
- tomanrate.adapters.formatting.formatter (response body and Cache-Control)
- tomanrate.config (settings)
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from tomanrate import __version__
from tomanrate.adapters.formatting.formatter import cache_control_header, format_exchange_rate
from tomanrate.application.health import build_status
from tomanrate.application.rates_service import ExchangeRateService, build_service
from tomanrate.config import Settings, settings
from tomanrate.domain.errors import ConfigurationError, DomainError, RateUnavailableError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/exchange-rate", tags=["exchange-rate"])


def get_service(request: Request) -> ExchangeRateService:
    return request.app.state.service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("")
def get_exchange_rate(
    service: ExchangeRateService = Depends(get_service),
    config: Settings = Depends(get_settings),
):
    """Return the USD/Toman rate, preferring a stale rate over an error."""
    try:
        result = service.require_exchange_rate(config.navasan_key)
    except DomainError:
        raise
    except Exception as e:
        logger.exception("Exchange rate request failed: %s", e)
        return JSONResponse({"error": "Failed to fetch exchange rate"}, status_code=500)

    body = format_exchange_rate(result, service.monthly_limit, service.now())
    return JSONResponse(body, headers={"Cache-Control": cache_control_header(result.freshness)})


@router.get("/status")
def get_status(
    service: ExchangeRateService = Depends(get_service),
    config: Settings = Depends(get_settings),
):
    """Cache and quota status; never spends upstream quota."""
    report = build_status(service, api_key_configured=config.api_key_configured)
    return report.to_dict()


async def _configuration_error(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("No API key configured")
    return JSONResponse({"error": "API key not configured"}, status_code=500)


async def _rate_unavailable(request: Request, exc: RateUnavailableError) -> JSONResponse:
    return JSONResponse({"error": "No exchange rate data available"}, status_code=503)


def create_app(
    service: Optional[ExchangeRateService] = None,
    config: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        service: Exchange rate service (built from config when omitted)
        config: Settings (the global settings when omitted)

    Returns:
        Configured FastAPI app
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.service.close()
        logger.info("Exchange rate service stopped")

    app = FastAPI(
        title="TomanRate API",
        description="USD/Toman exchange rate with quota-aware caching",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = config
    app.state.service = service or build_service(config)

    app.add_exception_handler(ConfigurationError, _configuration_error)
    app.add_exception_handler(RateUnavailableError, _rate_unavailable)
    app.include_router(router, prefix="/api")

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app

# src/web/app.py

"""HTTP surface for the dashboard: market prices, weather, health."""

import logging
from typing import Any

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from src.models.price_snapshot import MarketSnapshot
from src.services.market_pipeline import MarketPipeline
from src.services.weather_service import WeatherService

logger = logging.getLogger("agri_feed.web")

_CORS_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]


class MarketRequest(BaseModel):
    """Optional body: the caller's previous snapshot for change tracking."""

    previous: dict[str, Any] | None = None


class WeatherRequest(BaseModel):
    """Body accepted by ``POST /weather``; ``city`` is the legacy name."""

    location: str | None = None
    city: str | None = None


def get_market_pipeline() -> MarketPipeline:
    return MarketPipeline()


def get_weather_service() -> WeatherService:
    return WeatherService()


def _parse_previous(raw: dict[str, Any] | None) -> MarketSnapshot | None:
    """Read the caller's snapshot; a malformed one is ignored, not fatal."""
    if not raw:
        return None
    try:
        return MarketSnapshot.from_dict(raw)
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Ignoring malformed previous snapshot: %s", exc)
        return None


def create_app() -> FastAPI:
    """Build the FastAPI application with permissive CORS."""
    app = FastAPI(title="agri_feed", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=_CORS_HEADERS,
    )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/market-prices")
    async def market_prices(
        pipeline: MarketPipeline = Depends(get_market_pipeline),
    ) -> dict[str, Any]:
        snapshot = await pipeline.run_async()
        return snapshot.to_dict()

    @app.post("/market-prices")
    async def market_prices_post(
        body: MarketRequest | None = None,
        pipeline: MarketPipeline = Depends(get_market_pipeline),
    ) -> dict[str, Any]:
        previous = _parse_previous(body.previous if body else None)
        snapshot = await pipeline.run_async(previous)
        return snapshot.to_dict()

    @app.get("/weather")
    async def weather(
        location: str | None = None,
        service: WeatherService = Depends(get_weather_service),
    ) -> dict[str, Any]:
        snapshot = await service.get_weather(location)
        return snapshot.to_dict()

    @app.post("/weather")
    async def weather_post(
        body: WeatherRequest | None = None,
        service: WeatherService = Depends(get_weather_service),
    ) -> dict[str, Any]:
        location = (body.location or body.city) if body else None
        snapshot = await service.get_weather(location)
        return snapshot.to_dict()

    return app


app = create_app()

# src/services/weather_service.py

"""Weather sub-pipeline: current conditions, forecast, farming advisory."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from src.config.settings import Settings
from src.errors import ConfigurationMissing
from src.filters.rounding import round_half_up
from src.filters.weather_advisory import farming_advisory
from src.models.weather_snapshot import WeatherSnapshot
from src.scrapers.http_fetcher import HttpFetcher
from src.services.resilience import degrade_async

logger = logging.getLogger("agri_feed.weather")

WEATHER_SOURCE_ID = "openweather"

_MS_TO_KMH = 3.6


def build_weather_snapshot(
    city: str,
    current: dict[str, Any],
    forecast: dict[str, Any],
    settings: Settings | None = None,
) -> WeatherSnapshot:
    """Turn the two raw API payloads into a :class:`WeatherSnapshot`.

    Raises ``KeyError``/``IndexError``/``TypeError``/``ValueError`` on
    payloads missing the core fields; the caller degrades on those.
    """
    s = settings or Settings()
    main = current["main"]
    conditions = current["weather"][0]
    temperature = float(main["temp"])
    humidity = float(main["humidity"])
    wind_ms = float((current.get("wind") or {}).get("speed", 0.0))
    condition = str(conditions["main"])

    return WeatherSnapshot(
        location=f"{current.get('name') or city}, {s.WEATHER_COUNTRY_NAME}",
        temperature=round_half_up(temperature),
        humidity=round_half_up(humidity),
        wind_speed=round_half_up(wind_ms * _MS_TO_KMH),
        condition=condition,
        description=str(conditions.get("description", "")),
        advisory=farming_advisory(
            temperature,
            humidity,
            condition,
            list(forecast.get("list") or []),
            s,
        ),
    )


def unavailable_snapshot(
    city: str, reason: BaseException | None = None,
) -> WeatherSnapshot:
    """Zero-valued snapshot returned whenever live weather is unavailable."""
    if isinstance(reason, ConfigurationMissing):
        advisory = "Weather service not configured - set OPENWEATHER_API_KEY"
    else:
        advisory = "Unable to fetch weather forecast"
    return WeatherSnapshot(
        location=f"{city}, {Settings.WEATHER_COUNTRY_NAME}",
        temperature=0,
        humidity=0,
        wind_speed=0,
        condition="Unknown",
        description="Weather data unavailable",
        advisory=advisory,
        error=str(reason) if reason else None,
    )


class WeatherService:
    """Fetch current weather and forecast concurrently; never raises."""

    def __init__(
        self,
        api_key: str | None = None,
        fetcher_factory: Callable[[], HttpFetcher] | None = None,
    ) -> None:
        self.settings = Settings()
        self.api_key = (
            api_key if api_key is not None else self.settings.WEATHER_API_KEY
        )
        self._fetcher_factory = fetcher_factory or (
            lambda: HttpFetcher(WEATHER_SOURCE_ID)
        )

    def _resolve_city(self, location: str | None) -> str:
        city = (location or "").strip()
        return city or self.settings.DEFAULT_LOCATION

    def _fetch_endpoint(self, endpoint: str, city: str) -> dict[str, Any]:
        """Blocking fetch of one OpenWeatherMap endpoint."""
        params = {
            "q": f"{city},{self.settings.WEATHER_COUNTRY_CODE}",
            "appid": str(self.api_key),
            "units": "metric",
        }
        url = f"{self.settings.WEATHER_BASE_URL}/{endpoint}"
        with self._fetcher_factory() as fetcher:
            payload = fetcher.fetch_json(url, params=params)
        if not isinstance(payload, dict):
            msg = f"Unexpected {endpoint} payload type: {type(payload).__name__}"
            raise TypeError(msg)
        return payload

    async def _build(self, city: str) -> WeatherSnapshot:
        if not self.api_key:
            raise ConfigurationMissing("OPENWEATHER_API_KEY")

        logger.info("Fetching weather for %s", city)
        current, forecast = await asyncio.gather(
            asyncio.to_thread(self._fetch_endpoint, "weather", city),
            asyncio.to_thread(self._fetch_endpoint, "forecast", city),
        )
        snapshot = build_weather_snapshot(city, current, forecast, self.settings)
        logger.info(
            "Weather for %s: %s, %d°C, advisory=%r",
            snapshot.location,
            snapshot.condition,
            snapshot.temperature,
            snapshot.advisory,
        )
        return snapshot

    async def get_weather(self, location: str | None = None) -> WeatherSnapshot:
        """Return the weather snapshot for *location* (default Kathmandu)."""
        city = self._resolve_city(location)
        return await degrade_async(
            lambda: self._build(city),
            lambda exc: unavailable_snapshot(city, exc),
            label="weather",
        )

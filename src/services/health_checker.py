# src/services/health_checker.py

"""Upstream connectivity health checker."""

import asyncio
import logging
import time
from dataclasses import dataclass

from src.config.settings import Settings
from src.errors import ConfigurationMissing
from src.scrapers.http_fetcher import HttpFetcher
from src.services.weather_service import WEATHER_SOURCE_ID

logger = logging.getLogger("agri_feed.health")

_HEALTH_TIMEOUT = 10  # seconds per source
_SLOW_MS = 5000


@dataclass
class HealthResult:
    """Result of a single source health check."""

    source_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def probe_params(source: dict[str, str]) -> dict[str, str] | None:
    """Query parameters a source needs to answer a probe with 200.

    The weather API rejects unauthenticated requests, so its probe asks
    for the default location with the configured key.

    Raises:
        ConfigurationMissing: if the weather API key is not set.
    """
    if source["id"] != WEATHER_SOURCE_ID:
        return None
    if not Settings.WEATHER_API_KEY:
        raise ConfigurationMissing("OPENWEATHER_API_KEY")
    return {
        "q": f"{Settings.DEFAULT_LOCATION},{Settings.WEATHER_COUNTRY_CODE}",
        "appid": Settings.WEATHER_API_KEY,
        "units": "metric",
    }


def probe_source(
    source: dict[str, str],
    params: dict[str, str] | None = None,
) -> HealthResult:
    """Issue one GET against a source and classify the outcome.

    Unlike :meth:`HttpFetcher.fetch` this never retries: the point is
    to report the upstream as it is right now.  Without explicit
    *params*, those from :func:`probe_params` are used.
    """
    source_id = source["id"]
    url = source["url"]

    if params is None:
        try:
            params = probe_params(source)
        except ConfigurationMissing as exc:
            return HealthResult(
                source_id=source_id,
                status="down",
                latency_ms=0.0,
                message=f"{exc.setting} not set",
            )

    start = time.monotonic()
    try:
        with HttpFetcher(source_id, timeout=_HEALTH_TIMEOUT) as fetcher:
            resp = fetcher.session.get(
                url,
                headers=fetcher.settings.DEFAULT_HEADERS,
                params=params,
                timeout=_HEALTH_TIMEOUT,
            )
        elapsed_ms = (time.monotonic() - start) * 1000

        if resp.status_code != 200:
            return HealthResult(
                source_id=source_id,
                status="down",
                latency_ms=elapsed_ms,
                message=f"HTTP {resp.status_code}",
            )

        if elapsed_ms > _SLOW_MS:
            return HealthResult(
                source_id=source_id,
                status="slow",
                latency_ms=elapsed_ms,
                message="High latency",
            )

        return HealthResult(
            source_id=source_id,
            status="ok",
            latency_ms=elapsed_ms,
            message="",
        )

    except Exception as exc:
        elapsed_ms = (time.monotonic() - start) * 1000
        return HealthResult(
            source_id=source_id,
            status="down",
            latency_ms=elapsed_ms,
            message=str(exc)[:80],
        )


class HealthChecker:
    """Runs concurrent health probes against all upstream sources."""

    def __init__(self, sources: list[dict[str, str]] | None = None) -> None:
        self.sources = sources or Settings.AVAILABLE_SOURCES

    async def check_all(self) -> list[HealthResult]:
        """Probe every registered source concurrently."""
        tasks = [
            asyncio.to_thread(probe_source, src)
            for src in self.sources
        ]
        results: list[HealthResult] = list(
            await asyncio.gather(*tasks)
        )
        for r in results:
            logger.info(
                "Health check %s: %s (%.0fms) %s",
                r.source_id,
                r.status,
                r.latency_ms,
                r.message,
            )
        return results

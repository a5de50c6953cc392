# src/services/alerts.py

"""Compose user notifications from pipeline output.

Delivery (browser notifications, sounds, vibration) belongs to the
dashboard; this module only decides *whether* to alert and *what* to say.
"""

import logging
from dataclasses import dataclass

from src.config.settings import Settings
from src.filters.rounding import round_half_up
from src.models.price_snapshot import MarketSnapshot
from src.models.weather_snapshot import WeatherSnapshot

logger = logging.getLogger("agri_feed.alerts")


@dataclass(frozen=True)
class Alert:
    """A notification ready to hand to the delivery layer."""

    title: str
    body: str
    require_interaction: bool = False


def market_price_alert(current: MarketSnapshot) -> Alert | None:
    """Alert on significant moves among the leading crops of *current*.

    The moves are the ones the pipeline flagged when it diffed *current*
    against the caller's previous snapshot.  Fallback snapshots hold
    estimates, not observed prices, and never alert.
    """
    if current.is_fallback:
        return None

    leading = {p.crop for p in current.prices[: Settings.ALERT_PRICE_WINDOW]}
    moves = [c for c in current.significant_changes if c.crop in leading]
    if not moves:
        return None

    lines = [
        f"{c.crop} {c.direction} by {round_half_up(abs(c.percent))}%"
        for c in moves
    ]
    named = lines[: Settings.ALERT_NAMED_CHANGES]
    body = f"Price changes: {', '.join(named)}"
    extra = len(lines) - len(named)
    if extra > 0:
        body += f" and {extra} more"

    logger.info("Market alert for %d crops", len(moves))
    return Alert(title="Market Price Update", body=body)


def weather_alert(weather: WeatherSnapshot, location: str) -> Alert | None:
    """Alert when the condition or description mentions severe weather."""
    text = f"{weather.condition} {weather.description}".lower()
    if not any(k in text for k in Settings.WEATHER_ALERT_KEYWORDS):
        return None
    return Alert(
        title=f"Weather Alert - {location}",
        body=(
            f"{weather.condition}: {weather.description}. "
            "Plan your farming activities accordingly."
        ),
        require_interaction=True,
    )

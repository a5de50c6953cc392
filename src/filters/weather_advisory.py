# src/filters/weather_advisory.py

"""Farming advisory derived from current conditions and the short forecast."""

from typing import Any

from src.config.settings import Settings

RAIN_EXPECTED = "Rain expected - postpone irrigation and field work"
RAINING_NOW = "Good for transplanting rice and watering crops"
STORM_NOW = "Stormy weather - secure crops and avoid field work"
CLEAR_NOW = "Clear skies - good for harvesting and drying produce"
CLOUDY_NOW = "Cloudy skies - suitable for transplanting and spraying"
HOT = "Hot weather - increase irrigation, work early morning"
COOL = "Cool weather - protect sensitive crops, reduce watering"
HUMID = "High humidity - watch for fungal diseases"
GOOD = "Good weather for most farming activities"

# First match wins, in this order
_CONDITION_RULES: list[tuple[tuple[str, ...], str]] = [
    (("rain", "drizzle"), RAINING_NOW),
    (("storm", "thunder"), STORM_NOW),
    (("clear",), CLEAR_NOW),
    (("cloud",), CLOUDY_NOW),
]


def _interval_condition(item: dict[str, Any]) -> str:
    weather = item.get("weather") or [{}]
    return str(weather[0].get("main", "")).lower()


def rain_expected(
    forecast_items: list[dict[str, Any]],
    lookahead: int = Settings.FORECAST_LOOKAHEAD_INTERVALS,
) -> bool:
    """True if any of the next *lookahead* 3-hour intervals forecasts rain."""
    return any(
        "rain" in _interval_condition(item)
        for item in forecast_items[:lookahead]
    )


def farming_advisory(
    temperature: float,
    humidity: float,
    condition: str,
    forecast_items: list[dict[str, Any]],
    settings: Settings | None = None,
) -> str:
    """Pick the single advisory line shown under the weather card.

    Priority: rain in the next 24h, then the current condition keyword,
    then temperature extremes, then humidity, then the default.
    """
    s = settings or Settings()
    if rain_expected(forecast_items, s.FORECAST_LOOKAHEAD_INTERVALS):
        return RAIN_EXPECTED

    lowered = condition.lower()
    for keywords, advice in _CONDITION_RULES:
        if any(k in lowered for k in keywords):
            return advice

    if temperature > s.HOT_TEMPERATURE_C:
        return HOT
    if temperature < s.COOL_TEMPERATURE_C:
        return COOL
    if humidity > s.HIGH_HUMIDITY_PCT:
        return HUMID
    return GOOD

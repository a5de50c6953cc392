# tests/test_alerts.py

"""Tests for market and weather alert composition."""

import unittest
from dataclasses import replace

from src.filters.change_estimator import TemporalChangeEstimator
from src.models.price_record import PriceRecord
from src.models.price_snapshot import MarketSnapshot
from src.models.weather_snapshot import WeatherSnapshot
from src.services.alerts import market_price_alert, weather_alert
from src.services.fallback import fallback_snapshot


def _snapshot(*pairs: tuple[str, int]) -> MarketSnapshot:
    return MarketSnapshot(
        prices=tuple(
            PriceRecord(crop, f"Rs. {amount}/kg", "kg") for crop, amount in pairs
        ),
        source="Kalimati Fruits and Vegetable Market",
    )


def _diffed(current: MarketSnapshot, previous: MarketSnapshot) -> MarketSnapshot:
    """Attach the movements the pipeline computes against *previous*."""
    changes = TemporalChangeEstimator(previous).changes(list(current.prices))
    return replace(current, changes=tuple(changes))


def _weather(condition: str, description: str) -> WeatherSnapshot:
    return WeatherSnapshot(
        location="Kathmandu, Nepal",
        temperature=20,
        humidity=70,
        wind_speed=5,
        condition=condition,
        description=description,
        advisory="",
    )


class TestMarketPriceAlert(unittest.TestCase):
    """Tests for market_price_alert."""

    def test_no_changes_no_alert(self) -> None:
        """A snapshot without history carries no movements."""
        self.assertIsNone(market_price_alert(_snapshot(("Tomato", 60))))

    def test_tomato_significant_move(self) -> None:
        """Tomato 50 -> 60 is a 20% increase and alerts."""
        alert = market_price_alert(
            _diffed(_snapshot(("Tomato", 60)), _snapshot(("Tomato", 50)))
        )
        self.assertIsNotNone(alert)
        self.assertEqual(alert.title, "Market Price Update")
        self.assertEqual(alert.body, "Price changes: Tomato increased by 20%")
        self.assertFalse(alert.require_interaction)

    def test_small_move_no_alert(self) -> None:
        """A 10% move is not above the threshold."""
        self.assertIsNone(
            market_price_alert(
                _diffed(_snapshot(("Tomato", 55)), _snapshot(("Tomato", 50)))
            )
        )

    def test_only_first_five_prices_considered(self) -> None:
        """Crops past the leading window never alert."""
        previous = _snapshot(*[(f"Crop {i}", 100) for i in range(7)])
        current = _snapshot(
            *[(f"Crop {i}", 100) for i in range(5)],
            ("Crop 5", 200),
            ("Crop 6", 200),
        )
        self.assertIsNone(market_price_alert(_diffed(current, previous)))

    def test_summary_names_two_then_counts(self) -> None:
        """Two crops are named and the rest summarised."""
        previous = _snapshot(
            ("Bean", 100), ("Carrot", 100), ("Garlic", 100), ("Onion", 100)
        )
        current = _snapshot(
            ("Bean", 150), ("Carrot", 80), ("Garlic", 130), ("Onion", 60)
        )
        alert = market_price_alert(_diffed(current, previous))
        self.assertEqual(
            alert.body,
            "Price changes: Bean increased by 50%, "
            "Carrot decreased by 20% and 2 more",
        )

    def test_fallback_snapshot_never_alerts(self) -> None:
        """Estimated prices are not compared against live history."""
        previous = _snapshot(("Potato", 20))
        self.assertIsNone(market_price_alert(fallback_snapshot()))
        self.assertIsNone(
            market_price_alert(_diffed(fallback_snapshot(), previous))
        )


class TestWeatherAlert(unittest.TestCase):
    """Tests for weather_alert."""

    def test_storm_alerts(self) -> None:
        """Severe keywords produce an interaction-required alert."""
        alert = weather_alert(
            _weather("Thunderstorm", "thunderstorm with heavy rain"),
            "Kathmandu",
        )
        self.assertEqual(alert.title, "Weather Alert - Kathmandu")
        self.assertTrue(alert.require_interaction)
        self.assertIn("Plan your farming activities", alert.body)

    def test_calm_weather_no_alert(self) -> None:
        """Clear skies do not alert."""
        self.assertIsNone(
            weather_alert(_weather("Clear", "clear sky"), "Kathmandu")
        )


if __name__ == "__main__":
    unittest.main()

# src/models/weather_snapshot.py

"""Current weather plus farming advisory."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class WeatherSnapshot:
    """Weather conditions for one location, derived once per fetch."""

    location: str
    temperature: int
    humidity: int
    wind_speed: int
    condition: str
    description: str
    advisory: str
    last_updated: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    error: str | None = None

    @property
    def is_available(self) -> bool:
        """False for the zero-valued snapshot returned on failure."""
        return self.condition != "Unknown"

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON envelope served to callers."""
        data: dict[str, Any] = {
            "location": self.location,
            "temperature": self.temperature,
            "humidity": self.humidity,
            "windSpeed": self.wind_speed,
            "condition": self.condition,
            "description": self.description,
            "forecast": self.advisory,
            "lastUpdated": self.last_updated.isoformat(),
        }
        if self.error:
            data["error"] = self.error
        return data

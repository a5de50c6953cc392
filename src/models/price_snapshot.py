# src/models/price_snapshot.py

"""Market snapshot model returned by one pipeline run."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from src.models.price_record import PriceChange, PriceRecord


@dataclass(frozen=True)
class MarketSnapshot:
    """An immutable, timestamped set of market prices."""

    prices: tuple[PriceRecord, ...]
    source: str
    last_updated: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    is_fallback: bool = False
    changes: tuple[PriceChange, ...] = ()

    @property
    def item_count(self) -> int:
        """Number of price records in the snapshot."""
        return len(self.prices)

    @property
    def significant_changes(self) -> list[PriceChange]:
        """Changes crossing the alerting threshold."""
        return [c for c in self.changes if c.significant]

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON envelope served to callers."""
        return {
            "prices": [p.to_dict() for p in self.prices],
            "lastUpdated": self.last_updated.isoformat(),
            "source": self.source,
            "itemCount": self.item_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MarketSnapshot":
        """Rebuild a snapshot previously produced by :meth:`to_dict`.

        Only the display fields survive the round trip; that is all the
        temporal change estimator needs.
        """
        prices = tuple(
            PriceRecord(
                crop=str(item["crop"]),
                price=str(item["price"]),
                unit=str(item.get("unit", "")),
                change_percent=str(item.get("change", "N/A")),
            )
            for item in data.get("prices", [])
        )
        raw_ts = data.get("lastUpdated")
        if isinstance(raw_ts, str) and raw_ts.endswith("Z"):
            # fromisoformat() only accepts the "Z" suffix from 3.11
            raw_ts = raw_ts[:-1] + "+00:00"
        last_updated = (
            datetime.fromisoformat(raw_ts)
            if raw_ts
            else datetime.now(timezone.utc)
        )
        return cls(
            prices=prices,
            source=str(data.get("source", "")),
            last_updated=last_updated,
        )

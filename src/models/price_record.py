# src/models/price_record.py

"""Validated market price models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PriceRecord:
    """A validated, display-ready market price for one crop."""

    crop: str
    price: str
    unit: str
    change_percent: str = "N/A"
    min_price: int | None = None
    max_price: int | None = None
    avg_price: int | None = None

    def to_dict(self) -> dict[str, str]:
        """Render the wire shape consumed by the dashboard."""
        return {
            "crop": self.crop,
            "price": self.price,
            "unit": self.unit,
            "change": self.change_percent,
        }


@dataclass(frozen=True)
class PriceChange:
    """Price movement of one crop between two snapshots."""

    crop: str
    previous_price: float
    current_price: float
    percent: float
    significant: bool

    @property
    def direction(self) -> str:
        """Return ``increased`` or ``decreased``."""
        return (
            "increased"
            if self.current_price > self.previous_price
            else "decreased"
        )

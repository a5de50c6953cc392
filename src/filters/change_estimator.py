# src/filters/change_estimator.py

"""Percentage-change indicators for validated price records."""

import logging
import re
from dataclasses import replace

from src.config.settings import Settings
from src.filters.rounding import round_half_up
from src.models.price_record import PriceChange, PriceRecord
from src.models.price_snapshot import MarketSnapshot

logger = logging.getLogger("agri_feed.filters")

NOT_AVAILABLE = "N/A"

_AMOUNT_RE = re.compile(r"\d+(?:\.\d+)?")


def format_change(percent: int) -> str:
    """Render ``+16%``, ``-3%`` or ``0%``."""
    if percent == 0:
        return "0%"
    return f"{percent:+d}%"


def parse_price_amount(price: str) -> float | None:
    """Parse the numeric value of a formatted price string.

    ``Rs. 55/kg`` gives 55; a range such as ``Rs. 40-60/kg`` gives its
    midpoint.  Anything after the unit slash is ignored.
    """
    amount_part = price.split("/", 1)[0].replace(",", "")
    amounts = [float(a) for a in _AMOUNT_RE.findall(amount_part)]
    if not amounts:
        return None
    if len(amounts) >= 2:
        return (amounts[0] + amounts[1]) / 2
    return amounts[0]


class SpreadChangeEstimator:
    """Single-snapshot heuristic: where the average sits in the min/max spread."""

    @staticmethod
    def change_for(record: PriceRecord) -> str:
        """Return the signed spread change for one record."""
        if (
            record.avg_price is None
            or record.min_price is None
            or record.max_price is None
        ):
            return NOT_AVAILABLE
        midpoint = (record.min_price + record.max_price) / 2
        if midpoint <= 0:
            return NOT_AVAILABLE
        diff = record.avg_price - midpoint
        if abs(diff) < 1:
            return "0%"
        return format_change(round_half_up(diff / midpoint * 100))

    def estimate(self, records: list[PriceRecord]) -> list[PriceRecord]:
        """Return copies of *records* with ``change_percent`` filled in."""
        return [
            replace(r, change_percent=self.change_for(r)) for r in records
        ]


class TemporalChangeEstimator:
    """History heuristic: diff each crop against a previous snapshot.

    The previous snapshot is owned by the caller and is never modified.
    """

    def __init__(
        self,
        previous: MarketSnapshot,
        threshold_pct: float = Settings.SIGNIFICANT_CHANGE_PCT,
    ) -> None:
        self.threshold_pct = threshold_pct
        self._previous: dict[str, float] = {}
        for record in previous.prices:
            amount = parse_price_amount(record.price)
            key = record.crop.casefold()
            if amount is not None and key not in self._previous:
                self._previous[key] = amount

    def change(self, record: PriceRecord) -> PriceChange | None:
        """Return the movement of *record*, or ``None`` if incomputable."""
        previous = self._previous.get(record.crop.casefold())
        current = parse_price_amount(record.price)
        if previous is None or current is None or previous <= 0:
            return None
        delta = current - previous
        return PriceChange(
            crop=record.crop,
            previous_price=previous,
            current_price=current,
            percent=delta / previous * 100,
            significant=abs(delta) > previous * self.threshold_pct / 100,
        )

    def changes(self, records: list[PriceRecord]) -> list[PriceChange]:
        """Every computable movement, significant or not."""
        found: list[PriceChange] = []
        for record in records:
            movement = self.change(record)
            if movement is not None:
                found.append(movement)
        significant = sum(1 for c in found if c.significant)
        if significant:
            logger.info(
                "%d of %d crops moved more than %.0f%%",
                significant,
                len(found),
                self.threshold_pct,
            )
        return found

    def estimate(self, records: list[PriceRecord]) -> list[PriceRecord]:
        """Return copies of *records* with the historical change filled in."""
        estimated: list[PriceRecord] = []
        for record in records:
            movement = self.change(record)
            text = (
                format_change(round_half_up(movement.percent))
                if movement is not None
                else NOT_AVAILABLE
            )
            estimated.append(replace(record, change_percent=text))
        return estimated

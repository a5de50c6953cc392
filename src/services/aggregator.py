# src/services/aggregator.py

"""Final assembly of validated records into a market snapshot."""

import logging

from src.config.settings import Settings
from src.filters.deduplicator import CropDeduplicator
from src.models.price_record import PriceChange, PriceRecord
from src.models.price_snapshot import MarketSnapshot

logger = logging.getLogger("agri_feed.aggregator")


class PriceAggregator:
    """Dedupe, sort and cap records, then wrap them as a snapshot."""

    def __init__(self, max_results: int = Settings.MAX_RESULTS) -> None:
        if max_results < 1:
            msg = f"max_results must be >= 1, got {max_results}"
            raise ValueError(msg)
        self.max_results = max_results

    def arrange(self, records: list[PriceRecord]) -> list[PriceRecord]:
        """Deduplicate, sort by crop name (stable) and apply the cap."""
        unique, _removed = CropDeduplicator.deduplicate(records)
        ordered = sorted(unique, key=lambda r: r.crop)
        if len(ordered) > self.max_results:
            logger.debug(
                "Capping %d records to %d",
                len(ordered),
                self.max_results,
            )
        return ordered[: self.max_results]

    def aggregate(
        self,
        records: list[PriceRecord],
        source: str,
        changes: list[PriceChange] | None = None,
    ) -> MarketSnapshot:
        """Build the snapshot; *changes* are trimmed to the kept crops."""
        kept = self.arrange(records)
        kept_crops = {r.crop for r in kept}
        return MarketSnapshot(
            prices=tuple(kept),
            source=source,
            changes=tuple(
                c for c in (changes or []) if c.crop in kept_crops
            ),
        )

# src/filters/deduplicator.py

"""Crop-level deduplication of validated price records."""

import logging

from src.models.price_record import PriceRecord

logger = logging.getLogger("agri_feed.filters")


class CropDeduplicator:
    """Remove repeated crops, keeping the first occurrence."""

    @staticmethod
    def _normalise_crop(crop: str) -> str:
        """Case-insensitive key with collapsed whitespace.

        Punctuation is kept: ``Onion (Red)`` and ``Onion (Dry)`` are
        different market lines.
        """
        return " ".join(crop.casefold().split())

    @staticmethod
    def deduplicate(
        records: list[PriceRecord],
    ) -> tuple[list[PriceRecord], int]:
        """Drop later records whose crop key was already seen.

        Returns the kept records (in input order) and the count removed.
        """
        seen: set[str] = set()
        kept: list[PriceRecord] = []
        removed = 0

        for record in records:
            key = CropDeduplicator._normalise_crop(record.crop)
            if key in seen:
                removed += 1
                continue
            seen.add(key)
            kept.append(record)

        if removed:
            logger.info(
                "Deduplication removed %d repeated crops", removed
            )

        return kept, removed

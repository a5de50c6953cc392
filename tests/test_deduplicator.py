# tests/test_deduplicator.py

"""Tests for CropDeduplicator."""

import unittest

from src.filters.deduplicator import CropDeduplicator
from src.models.price_record import PriceRecord


def _make(crop: str, price: str = "Rs. 10/kg") -> PriceRecord:
    """Create a minimal PriceRecord."""
    return PriceRecord(crop=crop, price=price, unit="kg")


class TestDeduplicate(unittest.TestCase):
    """CropDeduplicator.deduplicate behaviour."""

    def test_empty_list(self) -> None:
        """Empty input returns empty output."""
        kept, removed = CropDeduplicator.deduplicate([])
        self.assertEqual(kept, [])
        self.assertEqual(removed, 0)

    def test_no_duplicates(self) -> None:
        """Unique crops are all kept in order."""
        records = [_make("Tomato"), _make("Potato")]
        kept, removed = CropDeduplicator.deduplicate(records)
        self.assertEqual([r.crop for r in kept], ["Tomato", "Potato"])
        self.assertEqual(removed, 0)

    def test_first_occurrence_wins(self) -> None:
        """The earliest record for a crop is the one kept."""
        records = [
            _make("Tomato", "Rs. 55/kg"),
            _make("Tomato", "Rs. 70/kg"),
        ]
        kept, removed = CropDeduplicator.deduplicate(records)
        self.assertEqual(len(kept), 1)
        self.assertEqual(kept[0].price, "Rs. 55/kg")
        self.assertEqual(removed, 1)

    def test_case_insensitive_key(self) -> None:
        """Case and whitespace differences are the same crop."""
        records = [
            _make("Onion (Red)"),
            _make("onion  (red)"),
            _make("ONION (RED) "),
        ]
        kept, removed = CropDeduplicator.deduplicate(records)
        self.assertEqual(len(kept), 1)
        self.assertEqual(kept[0].crop, "Onion (Red)")
        self.assertEqual(removed, 2)

    def test_variants_are_distinct(self) -> None:
        """Different market lines of one crop are not merged."""
        records = [_make("Onion (Red)"), _make("Onion (Dry)")]
        kept, removed = CropDeduplicator.deduplicate(records)
        self.assertEqual(len(kept), 2)
        self.assertEqual(removed, 0)


if __name__ == "__main__":
    unittest.main()

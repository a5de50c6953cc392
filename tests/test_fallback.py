# tests/test_fallback.py

"""Tests for the static fallback price set."""

import unittest

from src.config.settings import Settings
from src.filters.price_validator import PriceValidator, ValidatorConfig
from src.models.candidate_record import CandidateRecord
from src.services.fallback import FALLBACK_SET, FALLBACK_VERSION, fallback_snapshot


class TestFallbackSet(unittest.TestCase):
    """The fallback set obeys the same rules as live output."""

    def test_sorted_and_bounded(self) -> None:
        """Crops are unique, sorted and within the result cap."""
        crops = [r.crop for r in FALLBACK_SET]
        self.assertEqual(crops, sorted(crops))
        self.assertEqual(len(set(crops)), len(crops))
        self.assertLessEqual(len(crops), Settings.MAX_RESULTS)

    def test_records_would_pass_validation(self) -> None:
        """Every fallback row is a valid price record."""
        validator = PriceValidator(ValidatorConfig.from_settings())
        for record in FALLBACK_SET:
            with self.subTest(crop=record.crop):
                candidate = CandidateRecord(
                    name=record.crop,
                    unit=record.unit,
                    min_price=float(record.min_price),
                    max_price=float(record.max_price),
                    avg_price=None,
                )
                result = validator.validate(candidate)
                self.assertTrue(result.accepted, result.reason)
                self.assertEqual(result.record.price, record.price)

    def test_snapshot_labelled_estimated(self) -> None:
        """The snapshot is flagged and labelled as an estimate."""
        snap = fallback_snapshot(RuntimeError("down"))
        self.assertTrue(snap.is_fallback)
        self.assertIn("Estimated", snap.source)
        self.assertEqual(snap.prices, FALLBACK_SET)
        self.assertTrue(FALLBACK_VERSION)


if __name__ == "__main__":
    unittest.main()

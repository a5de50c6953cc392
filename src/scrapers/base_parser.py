# src/scrapers/base_parser.py

"""Abstract base class for document-shape parsers."""

import logging
import re
from abc import ABC, abstractmethod

from src.config.settings import Settings
from src.models.candidate_record import CandidateRecord

# Devanagari digits appear on the Nepali-language market pages
_DEVANAGARI_DIGITS = str.maketrans("०१२३४५६७८९", "0123456789")
_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


class ShapeParser(ABC):
    """Turn one document shape into candidate records."""

    shape: str = "unknown"

    def __init__(self, header_labels: list[str] | None = None) -> None:
        self.logger = logging.getLogger(
            f"agri_feed.extractor.{self.shape}"
        )
        labels = (
            header_labels
            if header_labels is not None
            else Settings.HEADER_LABELS
        )
        self.header_labels: frozenset[str] = frozenset(
            label.casefold() for label in labels
        )

    @staticmethod
    def clean_text(text: str | None) -> str:
        """Collapse whitespace and decode stray ``&nbsp;`` entities."""
        if not text:
            return ""
        return " ".join(text.replace("&nbsp;", " ").split())

    @staticmethod
    def parse_amount(text: str | None) -> float | None:
        """Extract a number from a cell like ``'Rs. 1,250.00'``.

        Returns ``None`` when the cell holds no number at all.
        """
        if not text:
            return None
        cleaned = text.translate(_DEVANAGARI_DIGITS).replace(",", "")
        match = _NUMBER_RE.search(cleaned)
        return float(match.group()) if match else None

    def is_header(self, cells: list[str]) -> bool:
        """True when the row is a column header rather than data."""
        return any(
            cell.casefold() in self.header_labels for cell in cells[:2]
        )

    def to_candidate(self, cells: list[str]) -> CandidateRecord:
        """Map ``name, unit, min[, max[, avg]]`` cells to a candidate."""
        prices = [self.parse_amount(c) for c in cells[2:5]]
        prices += [None] * (3 - len(prices))
        return CandidateRecord(
            name=cells[0],
            unit=cells[1],
            min_price=prices[0],
            max_price=prices[1],
            avg_price=prices[2],
        )

    @abstractmethod
    def parse(self, text: str) -> list[CandidateRecord]:
        """Return every candidate row found in *text*."""
        ...

# src/models/candidate_record.py

"""Unvalidated row model produced by the extractor."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CandidateRecord:
    """A row pulled out of a document before domain rules are applied.

    Any field may be garbage; the validator decides what survives.
    """

    name: str
    unit: str
    min_price: float | None = None
    max_price: float | None = None
    avg_price: float | None = None

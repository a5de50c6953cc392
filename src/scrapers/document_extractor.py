# src/scrapers/document_extractor.py

"""Single entry point that picks a shape parser by probing the document."""

import logging
import re

from src.models.candidate_record import CandidateRecord
from src.models.raw_document import RawDocument
from src.scrapers.base_parser import ShapeParser
from src.scrapers.html_table_parser import HtmlTableParser
from src.scrapers.pipe_table_parser import PIPE_LINE_RE, PipeTableParser

logger = logging.getLogger("agri_feed.extractor")

_TABLE_TAG_RE = re.compile(r"<table\b", re.IGNORECASE)

UNKNOWN_SHAPE = "unknown"


def probe_shape(text: str) -> str:
    """Classify *text* as ``html_table``, ``pipe_table`` or ``unknown``."""
    if not text:
        return UNKNOWN_SHAPE
    if _TABLE_TAG_RE.search(text):
        return HtmlTableParser.shape
    if any(PIPE_LINE_RE.match(line) for line in text.splitlines()):
        return PipeTableParser.shape
    return UNKNOWN_SHAPE


class DocumentExtractor:
    """Turn a raw document into candidate records.

    The upstream page has changed layout over time, so parsing is
    delegated to a registry of shape parsers keyed by the result of
    :func:`probe_shape`.  :meth:`extract` never raises.
    """

    def __init__(self, header_labels: list[str] | None = None) -> None:
        self._parsers: dict[str, ShapeParser] = {}
        self.register(HtmlTableParser(header_labels))
        self.register(PipeTableParser(header_labels))

    @property
    def shapes(self) -> list[str]:
        """Registered shape names."""
        return list(self._parsers)

    def register(self, parser: ShapeParser) -> None:
        """Add or replace the parser for ``parser.shape``."""
        self._parsers[parser.shape] = parser

    def extract(self, doc: RawDocument) -> list[CandidateRecord]:
        """Return the candidate rows of *doc*; empty on any failure."""
        try:
            shape = probe_shape(doc.text)
            parser = self._parsers.get(shape)
            if parser is None:
                logger.warning(
                    "[%s] Unrecognised document shape (%d chars)",
                    doc.source,
                    len(doc.text),
                )
                return []
            candidates = parser.parse(doc.text)
        except Exception as exc:
            logger.error(
                "[%s] Extraction failed: %s",
                doc.source,
                exc,
                exc_info=True,
            )
            return []

        logger.info(
            "[%s] Extracted %d candidate rows (shape=%s)",
            doc.source,
            len(candidates),
            shape,
        )
        return candidates

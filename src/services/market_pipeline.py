# src/services/market_pipeline.py

"""Market price acquisition: fetch, extract, validate, estimate, aggregate."""

import asyncio
import logging

from src.config.settings import Settings
from src.errors import ExtractionEmpty, ValidationAllRejected
from src.filters.change_estimator import (
    SpreadChangeEstimator,
    TemporalChangeEstimator,
)
from src.filters.price_validator import PriceValidator, ValidatorConfig
from src.models.price_record import PriceChange
from src.models.price_snapshot import MarketSnapshot
from src.models.raw_document import RawDocument
from src.scrapers.document_extractor import DocumentExtractor, probe_shape
from src.scrapers.http_fetcher import HttpFetcher
from src.services.aggregator import PriceAggregator
from src.services.fallback import fallback_snapshot
from src.services.resilience import degrade

logger = logging.getLogger("agri_feed.pipeline")

MARKET_SOURCE_ID = "kalimati"


class MarketPipeline:
    """One stateless market-price run per :meth:`run` call.

    Stages execute strictly in order; any failure or empty stage result
    degrades to the fallback snapshot, so :meth:`run` never raises.
    """

    def __init__(
        self,
        url: str | None = None,
        fetcher: HttpFetcher | None = None,
        extractor: DocumentExtractor | None = None,
        validator_config: ValidatorConfig | None = None,
        max_results: int = Settings.MAX_RESULTS,
        source_label: str = Settings.MARKET_SOURCE_LABEL,
    ) -> None:
        self.url = url or Settings.MARKET_URL
        self._fetcher = fetcher
        self.extractor = extractor or DocumentExtractor()
        self.validator = PriceValidator(validator_config)
        self.aggregator = PriceAggregator(max_results)
        self.source_label = source_label

    def _fetch(self) -> RawDocument:
        if self._fetcher is not None:
            return self._fetcher.fetch(self.url)
        with HttpFetcher(
            MARKET_SOURCE_ID, challenge_fallback=True
        ) as fetcher:
            return fetcher.fetch(self.url)

    def _build(self, previous: MarketSnapshot | None) -> MarketSnapshot:
        doc = self._fetch()

        candidates = self.extractor.extract(doc)
        if not candidates:
            raise ExtractionEmpty(doc.source, probe_shape(doc.text))

        records, rejected = self.validator.validate_all(candidates)
        if not records:
            raise ValidationAllRejected(rejected)

        changes: list[PriceChange] = []
        if previous is not None:
            temporal = TemporalChangeEstimator(previous)
            records = temporal.estimate(records)
            changes = temporal.changes(records)
        else:
            records = SpreadChangeEstimator().estimate(records)

        snapshot = self.aggregator.aggregate(
            records, self.source_label, changes
        )
        logger.info(
            "Live market snapshot: %d prices (%d candidates, %d rejected)",
            snapshot.item_count,
            len(candidates),
            rejected,
        )
        return snapshot

    def run(self, previous: MarketSnapshot | None = None) -> MarketSnapshot:
        """Produce a snapshot; live when possible, fallback otherwise.

        Args:
            previous: Snapshot from an earlier run, owned by the caller.
                When given, changes are computed against it instead of
                from the min/max spread.
        """
        return degrade(
            lambda: self._build(previous),
            fallback_snapshot,
            is_empty=lambda snap: snap.item_count == 0,
            label="market",
        )

    async def run_async(
        self, previous: MarketSnapshot | None = None,
    ) -> MarketSnapshot:
        """Run the pipeline in a worker thread."""
        return await asyncio.to_thread(self.run, previous)

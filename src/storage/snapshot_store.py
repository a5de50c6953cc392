# src/storage/snapshot_store.py

"""Keeps the caller's previous market snapshot on disk between runs."""

import json
import logging
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings
from src.models.price_snapshot import MarketSnapshot

logger = logging.getLogger("agri_feed.storage")

_PREFIX = "market_"


class SnapshotStore:
    """Save market snapshots as timestamped JSON and read the latest back.

    Fallback snapshots are never stored: diffing live prices against
    estimates would produce meaningless change alerts.
    """

    def __init__(self, results_dir: Path | None = None) -> None:
        self.results_dir: Path = results_dir or Settings.RESULTS_DIR
        self.results_dir.mkdir(parents=True, exist_ok=True)
        logger.debug("SnapshotStore initialised, results_dir=%s", self.results_dir)

    def save(self, snapshot: MarketSnapshot) -> Path | None:
        """Write *snapshot* to a timestamped file; skip fallback data."""
        if snapshot.is_fallback:
            logger.info("Not storing fallback snapshot")
            return None

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        filepath = self.results_dir / f"{_PREFIX}{timestamp}.json"
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(snapshot.to_dict(), f, ensure_ascii=False, indent=2)

        logger.info(
            "Saved %d prices to %s", snapshot.item_count, filepath
        )
        return filepath

    def load_latest(self) -> MarketSnapshot | None:
        """Return the most recent stored snapshot, or ``None``.

        Unreadable files are skipped with a warning.
        """
        files = sorted(self.results_dir.glob(f"{_PREFIX}*.json"), reverse=True)
        for filepath in files:
            try:
                with open(filepath, encoding="utf-8") as f:
                    return MarketSnapshot.from_dict(json.load(f))
            except (OSError, ValueError, KeyError, TypeError) as exc:
                logger.warning(
                    "Skipping unreadable snapshot %s: %s", filepath, exc
                )
        return None

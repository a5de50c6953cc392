# src/models/raw_document.py

"""Raw upstream payload model."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass(frozen=True)
class RawDocument:
    """Opaque text retrieved from one upstream source."""

    text: str
    source: str
    fetched_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    status_code: int = 200

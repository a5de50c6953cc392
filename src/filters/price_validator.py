# src/filters/price_validator.py

"""Candidate validation: domain rules plus unit and price canonicalisation."""

import logging
import re
from dataclasses import dataclass, field

from src.config.settings import Settings
from src.filters.rounding import round_half_up
from src.models.candidate_record import CandidateRecord
from src.models.price_record import PriceRecord

logger = logging.getLogger("agri_feed.filters")

# Names made only of digits, punctuation and spaces
_NUMERIC_NAME_RE = re.compile(r"^[\W\d_]+$")


@dataclass(frozen=True)
class ValidatorConfig:
    """Explicit validation vocabulary, so tests never touch globals."""

    canonical_units: dict[str, str] = field(
        default_factory=lambda: dict(Settings.CANONICAL_UNITS)
    )
    excluded_terms: tuple[str, ...] = tuple(Settings.EXCLUDED_TERMS)
    known_crops: tuple[str, ...] = tuple(Settings.KNOWN_CROPS)
    require_known_crop: bool = Settings.REQUIRE_KNOWN_CROP
    price_floor: int = Settings.PRICE_FLOOR
    price_ceiling: int = Settings.PRICE_CEILING
    currency_symbol: str = Settings.CURRENCY_SYMBOL
    min_name_length: int = 2

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ValidatorConfig":
        """Build a config from a :class:`Settings` instance (or the class)."""
        s = settings or Settings()
        return cls(
            canonical_units=dict(s.CANONICAL_UNITS),
            excluded_terms=tuple(s.EXCLUDED_TERMS),
            known_crops=tuple(s.KNOWN_CROPS),
            require_known_crop=s.REQUIRE_KNOWN_CROP,
            price_floor=s.PRICE_FLOOR,
            price_ceiling=s.PRICE_CEILING,
            currency_symbol=s.CURRENCY_SYMBOL,
        )


@dataclass(frozen=True)
class ValidationResult:
    """Outcome for one candidate: a record, or the reason it was dropped."""

    record: PriceRecord | None
    reason: str = ""

    @property
    def accepted(self) -> bool:
        return self.record is not None


def format_price(
    min_price: int,
    max_price: int,
    avg_price: int | None,
    unit: str,
    currency_symbol: str = Settings.CURRENCY_SYMBOL,
) -> str:
    """Render ``Rs. 55/kg`` or, without an average, ``Rs. 40-60/kg``."""
    if avg_price is not None:
        return f"{currency_symbol}{avg_price}/{unit}"
    if min_price != max_price:
        return f"{currency_symbol}{min_price}-{max_price}/{unit}"
    return f"{currency_symbol}{min_price}/{unit}"


class PriceValidator:
    """Filter candidate records and fold them into :class:`PriceRecord`."""

    def __init__(self, config: ValidatorConfig | None = None) -> None:
        self.config = config or ValidatorConfig.from_settings()
        self._units: dict[str, str] = {
            k.casefold(): v for k, v in self.config.canonical_units.items()
        }
        self._excluded = tuple(t.casefold() for t in self.config.excluded_terms)
        self._known = tuple(c.casefold() for c in self.config.known_crops)

    def canonical_unit(self, unit: str) -> str | None:
        """Fold a raw unit label to the canonical vocabulary."""
        key = unit.strip().casefold()
        if not key:
            return None
        for variant in (
            key,
            key.rstrip("."),
            key.replace(".", "").replace(" ", ""),
        ):
            if variant in self._units:
                return self._units[variant]
        return None

    def _check_name(self, name: str) -> str:
        """Return a rejection reason for *name*, or ``""``."""
        if len(name) < self.config.min_name_length:
            return "name too short"
        if _NUMERIC_NAME_RE.match(name):
            return "name is numeric"
        lowered = name.casefold()
        for term in self._excluded:
            if term in lowered:
                return f"name matches excluded term '{term}'"
        if self.config.require_known_crop and not any(
            crop in lowered for crop in self._known
        ):
            return "name is not a known crop"
        return ""

    def _normalise_prices(
        self, candidate: CandidateRecord,
    ) -> tuple[int, int, int | None] | str:
        """Return ``(min, max, avg)`` or a rejection reason."""
        raw = (candidate.min_price, candidate.max_price, candidate.avg_price)
        present = [v for v in raw if v is not None]
        if not present:
            return "no price"

        rounded: list[int | None] = []
        for value in raw:
            if value is None:
                rounded.append(None)
                continue
            amount = round_half_up(value)
            if amount < self.config.price_floor:
                return f"price {value} is not positive"
            if amount > self.config.price_ceiling:
                return f"price {value} exceeds ceiling"
            rounded.append(amount)

        lo, hi, avg = rounded
        if len(present) == 1:
            only = next(v for v in rounded if v is not None)
            return only, only, only

        lo = lo if lo is not None else (avg if avg is not None else hi)
        hi = hi if hi is not None else (avg if avg is not None else lo)
        if lo is None or hi is None:
            return "no price"
        if lo > hi:
            return f"min {lo} > max {hi}"
        if avg is not None and not lo <= avg <= hi:
            return f"avg {avg} outside [{lo}, {hi}]"
        return lo, hi, avg

    def validate(self, candidate: CandidateRecord) -> ValidationResult:
        """Apply every rule to *candidate*; all must hold to accept."""
        name = " ".join(candidate.name.split())
        reason = self._check_name(name)
        if reason:
            return ValidationResult(None, reason)

        unit = self.canonical_unit(candidate.unit)
        if unit is None:
            return ValidationResult(
                None, f"unknown unit '{candidate.unit}'"
            )

        prices = self._normalise_prices(candidate)
        if isinstance(prices, str):
            return ValidationResult(None, prices)
        lo, hi, avg = prices

        return ValidationResult(
            PriceRecord(
                crop=name,
                price=format_price(
                    lo, hi, avg, unit, self.config.currency_symbol
                ),
                unit=unit,
                min_price=lo,
                max_price=hi,
                avg_price=avg,
            )
        )

    def validate_all(
        self, candidates: list[CandidateRecord],
    ) -> tuple[list[PriceRecord], int]:
        """Validate a batch; rejections never abort it.

        Returns the accepted records and the count of dropped candidates.
        """
        valid: list[PriceRecord] = []
        dropped = 0

        for candidate in candidates:
            result = self.validate(candidate)
            if result.record is None:
                logger.debug(
                    "Dropped candidate %r: %s",
                    candidate.name,
                    result.reason,
                )
                dropped += 1
                continue
            valid.append(result.record)

        if dropped:
            logger.info(
                "Validation dropped %d of %d candidates",
                dropped,
                len(candidates),
            )

        return valid, dropped

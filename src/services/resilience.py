# src/services/resilience.py

"""Retry and degrade combinators shared by every pipeline entry point."""

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TypeVar

from src.config.settings import Settings

T = TypeVar("T")

logger = logging.getLogger("agri_feed.resilience")


def retry_call(
    func: Callable[[], T],
    *,
    attempts: int = Settings.MAX_RETRIES,
    backoff: float = Settings.RETRY_BACKOFF_SECONDS,
    label: str = "call",
) -> T:
    """Run *func* up to *attempts* times with linear backoff.

    The wait before attempt ``n + 1`` is ``backoff * n`` seconds.
    The last exception is re-raised once every attempt has failed.
    """
    if attempts < 1:
        msg = f"attempts must be >= 1, got {attempts}"
        raise ValueError(msg)

    last_exc: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            return func()
        except Exception as exc:
            last_exc = exc
            logger.warning(
                "[%s] Attempt %d/%d failed: %s",
                label,
                attempt,
                attempts,
                exc,
            )
            if attempt < attempts:
                time.sleep(backoff * attempt)

    if last_exc is None:
        msg = f"[{label}] no attempt was made"
        raise RuntimeError(msg)
    raise last_exc


def degrade(
    func: Callable[[], T],
    fallback: Callable[[Exception | None], T],
    *,
    is_empty: Callable[[T], bool] | None = None,
    label: str = "pipeline",
) -> T:
    """Return ``func()``, or ``fallback(reason)`` on error or empty result.

    *reason* is the exception that triggered the fallback, or ``None``
    when *func* succeeded but *is_empty* judged its result unusable.
    """
    try:
        result = func()
    except Exception as exc:
        logger.error(
            "[%s] Degrading to fallback after error: %s",
            label,
            exc,
            exc_info=True,
        )
        return fallback(exc)

    if is_empty is not None and is_empty(result):
        logger.warning(
            "[%s] Empty result, degrading to fallback", label
        )
        return fallback(None)
    return result


async def degrade_async(
    func: Callable[[], Awaitable[T]],
    fallback: Callable[[Exception | None], T],
    *,
    label: str = "pipeline",
) -> T:
    """Async twin of :func:`degrade` for coroutine-based entry points."""
    try:
        return await func()
    except Exception as exc:
        logger.error(
            "[%s] Degrading to fallback after error: %s",
            label,
            exc,
            exc_info=True,
        )
        return fallback(exc)

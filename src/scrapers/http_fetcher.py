# src/scrapers/http_fetcher.py

"""Outbound retrieval of upstream documents with bounded retries."""

import json
import logging
from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from curl_cffi import requests as curl_requests

from src.config.settings import Settings
from src.errors import FetchFailure
from src.models.raw_document import RawDocument
from src.services.resilience import retry_call


class UpstreamStatusError(Exception):
    """The upstream answered with a non-2xx status."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        super().__init__(f"HTTP {status_code} from {url}")


class UpstreamBlockedError(Exception):
    """The upstream served a bot challenge instead of content."""


class HttpFetcher:
    """Fetch one upstream document per call, retrying transient failures.

    Holds no state between calls beyond the HTTP session itself; there
    is no caching and no circuit breaker.
    """

    # Cloudflare challenge page markers (checked before keyword scan)
    _CF_CHALLENGE_MARKERS: list[str] = [
        "challenges.cloudflare.com",
        "cdn-cgi/challenge-platform",
        "just a moment",
        "cf-turnstile",
        "cf_chl_opt",
    ]

    def __init__(
        self,
        source_name: str,
        *,
        challenge_fallback: bool = False,
        backoff: float | None = None,
        timeout: int | None = None,
    ) -> None:
        self.source_name = source_name
        self.logger = logging.getLogger(
            f"agri_feed.fetcher.{source_name}"
        )
        self.settings = Settings()
        self.challenge_fallback = challenge_fallback
        self.backoff: float = (
            backoff
            if backoff is not None
            else self.settings.RETRY_BACKOFF_SECONDS
        )
        self._request_timeout: int = (
            timeout or self.settings.REQUEST_TIMEOUT
        )
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    def __enter__(self) -> "HttpFetcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the underlying HTTP session."""
        try:
            self.session.close()
        except Exception as exc:
            self.logger.debug(
                "[%s] Session close failed: %s", self.source_name, exc
            )

    def _validate_response(
        self, resp: curl_requests.Response,
    ) -> bool:
        """Check for Cloudflare challenge pages and CAPTCHA indicators."""
        text = resp.text
        if text.lstrip().startswith(("{", "[")):
            return True
        lower = text.lower()

        for marker in self._CF_CHALLENGE_MARKERS:
            if marker in lower:
                self.logger.warning(
                    "[%s] Cloudflare challenge detected "
                    "(marker: '%s')",
                    self.source_name,
                    marker,
                )
                return False

        # Skip the keyword scan on pages with real content to
        # avoid false positives
        has_body_content = (
            "<body" in lower and len(text) > 5000
        )
        if not has_body_content:
            for keyword in self.settings.CAPTCHA_KEYWORDS:
                if keyword in lower:
                    self.logger.warning(
                        "[%s] CAPTCHA keyword '%s' detected",
                        self.source_name,
                        keyword,
                    )
                    return False
        return True

    def _request_once(
        self,
        url: str,
        params: dict[str, str] | None,
    ) -> curl_requests.Response:
        """Issue a single GET; raise on anything but usable content."""
        resp = self.session.get(
            url,
            headers=self.settings.DEFAULT_HEADERS,
            params=params,
            timeout=self._request_timeout,
        )
        if not 200 <= resp.status_code < 300:
            raise UpstreamStatusError(resp.status_code, url)
        if not self._validate_response(resp):
            msg = f"Bot challenge served by {url}"
            raise UpstreamBlockedError(msg)
        return resp

    def _fetch_with_cloudscraper(self, url: str) -> RawDocument | None:
        """Single last-chance attempt through cloudscraper's JS solver."""
        self.logger.info(
            "[%s] curl_cffi exhausted, falling back to cloudscraper",
            self.source_name,
        )
        try:
            _cs: Any = cloudscraper
            scraper: Any = _cs.create_scraper()
            resp: Any = scraper.get(
                url,
                headers=self.settings.DEFAULT_HEADERS,
                timeout=self._request_timeout,
            )
            if resp.status_code == 200:
                return RawDocument(
                    text=str(resp.text),
                    source=self.source_name,
                    status_code=200,
                )
            self.logger.warning(
                "[%s] cloudscraper got HTTP %d",
                self.source_name,
                resp.status_code,
            )
        except Exception as e:
            self.logger.error(
                "[%s] cloudscraper fallback also failed: %s",
                self.source_name,
                e,
                exc_info=True,
            )
        return None

    def fetch(
        self,
        url: str,
        max_attempts: int | None = None,
        params: dict[str, str] | None = None,
    ) -> RawDocument:
        """Retrieve *url* as a :class:`RawDocument`.

        Raises:
            FetchFailure: once every attempt (and the optional
                cloudscraper fallback) has failed.
            ValueError: if *max_attempts* is less than 1.
        """
        attempts = (
            self.settings.MAX_RETRIES if max_attempts is None else max_attempts
        )
        if attempts < 1:
            msg = f"max_attempts must be >= 1, got {attempts}"
            raise ValueError(msg)
        self.logger.info(
            "[%s] Fetching %s (max %d attempts)",
            self.source_name,
            url,
            attempts,
        )
        try:
            resp = retry_call(
                lambda: self._request_once(url, params),
                attempts=attempts,
                backoff=self.backoff,
                label=self.source_name,
            )
        except Exception as exc:
            if self.challenge_fallback:
                doc = self._fetch_with_cloudscraper(url)
                if doc is not None:
                    return doc
            raise FetchFailure(url, attempts, exc) from exc

        return RawDocument(
            text=resp.text,
            source=self.source_name,
            status_code=resp.status_code,
        )

    def fetch_json(
        self,
        url: str,
        params: dict[str, str] | None = None,
        max_attempts: int | None = None,
    ) -> Any:
        """Retrieve *url* and decode its JSON body."""
        doc = self.fetch(url, max_attempts=max_attempts, params=params)
        try:
            return json.loads(doc.text)
        except ValueError as exc:
            raise FetchFailure(url, 1, exc) from exc

# tests/test_http_fetcher.py

"""Tests for HttpFetcher retries, challenge detection and fallback."""

import unittest
from typing import Any
from unittest.mock import MagicMock, call, patch

from src.errors import FetchFailure
from src.models.raw_document import RawDocument
from src.scrapers.http_fetcher import (
    HttpFetcher,
    UpstreamBlockedError,
    UpstreamStatusError,
)

SESSION_PATH = "src.scrapers.http_fetcher.curl_requests.Session"
CLOUDSCRAPER_PATH = "src.scrapers.http_fetcher.cloudscraper"


def _resp(status: int = 200, text: str = "<table></table>") -> MagicMock:
    """Build a fake curl_cffi response."""
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    return resp


@patch(SESSION_PATH)
class TestFetch(unittest.TestCase):
    """HttpFetcher.fetch bounded retries."""

    def test_success_returns_raw_document(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """A 200 response becomes a RawDocument tagged with the source."""
        mock_session_cls.return_value.get.return_value = _resp(
            text="<table><tr><td>x</td></tr></table>"
        )
        fetcher = HttpFetcher("kalimati")
        doc = fetcher.fetch("https://example.com")
        self.assertIsInstance(doc, RawDocument)
        self.assertEqual(doc.source, "kalimati")
        self.assertIn("<table>", doc.text)
        self.assertEqual(doc.status_code, 200)

    def test_sends_user_agent(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Every request carries the configured User-Agent header."""
        session = mock_session_cls.return_value
        session.get.return_value = _resp()
        fetcher = HttpFetcher("kalimati")
        fetcher.fetch("https://example.com")
        headers = session.get.call_args.kwargs["headers"]
        self.assertIn("User-Agent", headers)
        self.assertEqual(
            headers["User-Agent"], fetcher.settings.USER_AGENT
        )

    def test_retries_on_server_error(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """A 500 followed by a 200 succeeds on the second attempt."""
        session = mock_session_cls.return_value
        session.get.side_effect = [_resp(500), _resp(200)]
        doc = HttpFetcher("kalimati").fetch("https://example.com")
        self.assertEqual(doc.status_code, 200)
        self.assertEqual(session.get.call_count, 2)

    def test_raises_fetch_failure_after_max_attempts(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Three failures raise FetchFailure carrying the last cause."""
        session = mock_session_cls.return_value
        session.get.return_value = _resp(503)
        fetcher = HttpFetcher("kalimati")
        with self.assertRaises(FetchFailure) as ctx:
            fetcher.fetch("https://example.com", max_attempts=3)
        self.assertEqual(session.get.call_count, 3)
        self.assertEqual(ctx.exception.attempts, 3)
        self.assertIsInstance(
            ctx.exception.last_error, UpstreamStatusError
        )
        self.assertIs(ctx.exception.__cause__, ctx.exception.last_error)

    def test_zero_attempts_rejected(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """max_attempts=0 is an error, not the default of three."""
        with self.assertRaises(ValueError):
            HttpFetcher("kalimati").fetch(
                "https://example.com", max_attempts=0
            )
        mock_session_cls.return_value.get.assert_not_called()

    def test_transport_error_is_retried(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Connection errors count as failed attempts."""
        session = mock_session_cls.return_value
        session.get.side_effect = ConnectionError("refused")
        with self.assertRaises(FetchFailure) as ctx:
            HttpFetcher("kalimati").fetch("https://example.com")
        self.assertEqual(session.get.call_count, 3)
        self.assertIsInstance(ctx.exception.last_error, ConnectionError)

    def test_backoff_grows_linearly(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Waits are backoff * 1, backoff * 2 between three attempts."""
        mock_session_cls.return_value.get.return_value = _resp(500)
        fetcher = HttpFetcher("kalimati", backoff=0.5)
        with patch("src.services.resilience.time.sleep") as sleep:
            with self.assertRaises(FetchFailure):
                fetcher.fetch("https://example.com")
        self.assertEqual(sleep.call_args_list, [call(0.5), call(1.0)])

    def test_challenge_page_counts_as_failure(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """A Cloudflare interstitial is not accepted as content."""
        mock_session_cls.return_value.get.return_value = _resp(
            text="<html>Just a moment...</html>"
        )
        with self.assertRaises(FetchFailure) as ctx:
            HttpFetcher("kalimati").fetch("https://example.com")
        self.assertIsInstance(
            ctx.exception.last_error, UpstreamBlockedError
        )


@patch(SESSION_PATH)
class TestValidateResponse(unittest.TestCase):
    """Challenge and CAPTCHA heuristics."""

    def test_json_always_valid(
        self, _mock_session_cls: MagicMock,
    ) -> None:
        """JSON bodies skip the challenge scan."""
        fetcher = HttpFetcher("openweather")
        self.assertTrue(
            fetcher._validate_response(_resp(text='{"captcha": 1}'))
        )

    def test_captcha_keyword_on_short_page(
        self, _mock_session_cls: MagicMock,
    ) -> None:
        """A short page mentioning a CAPTCHA is rejected."""
        fetcher = HttpFetcher("kalimati")
        self.assertFalse(
            fetcher._validate_response(
                _resp(text="<p>Please verify you are human</p>")
            )
        )

    def test_long_page_with_keyword_accepted(
        self, _mock_session_cls: MagicMock,
    ) -> None:
        """Real content pages are not flagged by a stray keyword."""
        body = "<body>" + ("<td>Tomato</td>" * 500) + "captcha</body>"
        fetcher = HttpFetcher("kalimati")
        self.assertTrue(fetcher._validate_response(_resp(text=body)))


@patch(CLOUDSCRAPER_PATH)
@patch(SESSION_PATH)
class TestCloudscraperFallback(unittest.TestCase):
    """Optional cloudscraper last-chance attempt."""

    def test_fallback_used_when_enabled(
        self,
        mock_session_cls: MagicMock,
        mock_cloudscraper: MagicMock,
    ) -> None:
        """cloudscraper rescues the fetch after curl_cffi gives up."""
        mock_session_cls.return_value.get.return_value = _resp(403)
        scraper: Any = mock_cloudscraper.create_scraper.return_value
        scraper.get.return_value = _resp(200, "<table>ok</table>")

        fetcher = HttpFetcher("kalimati", challenge_fallback=True)
        doc = fetcher.fetch("https://example.com")
        self.assertEqual(doc.text, "<table>ok</table>")

    def test_fallback_failure_raises(
        self,
        mock_session_cls: MagicMock,
        mock_cloudscraper: MagicMock,
    ) -> None:
        """If cloudscraper fails too, FetchFailure is raised."""
        mock_session_cls.return_value.get.return_value = _resp(403)
        mock_cloudscraper.create_scraper.return_value.get.side_effect = (
            ConnectionError("blocked")
        )
        fetcher = HttpFetcher("kalimati", challenge_fallback=True)
        with self.assertRaises(FetchFailure):
            fetcher.fetch("https://example.com")

    def test_fallback_skipped_when_disabled(
        self,
        mock_session_cls: MagicMock,
        mock_cloudscraper: MagicMock,
    ) -> None:
        """JSON API fetchers never touch cloudscraper."""
        mock_session_cls.return_value.get.return_value = _resp(500)
        with self.assertRaises(FetchFailure):
            HttpFetcher("openweather").fetch("https://example.com")
        mock_cloudscraper.create_scraper.assert_not_called()


@patch(SESSION_PATH)
class TestFetchJson(unittest.TestCase):
    """HttpFetcher.fetch_json decoding."""

    def test_decodes_json(self, mock_session_cls: MagicMock) -> None:
        """A JSON body is decoded and params are forwarded."""
        session = mock_session_cls.return_value
        session.get.return_value = _resp(text='{"name": "Kathmandu"}')
        payload = HttpFetcher("openweather").fetch_json(
            "https://api.example.com/weather", params={"q": "Kathmandu,NP"}
        )
        self.assertEqual(payload, {"name": "Kathmandu"})
        self.assertEqual(
            session.get.call_args.kwargs["params"], {"q": "Kathmandu,NP"}
        )

    def test_invalid_json_is_fetch_failure(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """An undecodable body raises FetchFailure."""
        mock_session_cls.return_value.get.return_value = _resp(
            text="<html>oops</html>"
        )
        with self.assertRaises(FetchFailure):
            HttpFetcher("openweather").fetch_json("https://api.example.com")

    def test_context_manager_closes_session(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """Leaving the with-block closes the HTTP session."""
        with HttpFetcher("openweather"):
            pass
        mock_session_cls.return_value.close.assert_called_once()


if __name__ == "__main__":
    unittest.main()

# src/config/settings.py

"""Central configuration for the agri_feed pipeline."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the agri_feed pipeline."""

    # --- Fetching ---
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    MAX_RETRIES: int = 3                # Attempts per upstream document
    RETRY_BACKOFF_SECONDS: float = 1.0  # Wait = backoff * attempt index
    CAPTCHA_KEYWORDS: list[str] = [
        "captcha",
        "verify you are human",
        "unusual traffic",
        "automated requests",
    ]

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/131.0.0.0 Safari/537.36"
    )
    DEFAULT_HEADERS: dict[str, str] = {
        "User-Agent": USER_AGENT,
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9,ne;q=0.8",
    }

    # --- Market source ---
    MARKET_URL: str = os.getenv(
        "AGRI_FEED_MARKET_URL", "https://kalimatimarket.gov.np/"
    )
    MARKET_SOURCE_LABEL: str = "Kalimati Fruits and Vegetable Market"
    FALLBACK_SOURCE_LABEL: str = "Kalimati Market (Estimated)"
    CURRENCY_SYMBOL: str = "Rs. "
    MAX_RESULTS: int = 15

    # --- Validation vocabulary ---
    PRICE_FLOOR: int = 1
    PRICE_CEILING: int = 100_000
    CANONICAL_UNITS: dict[str, str] = {
        "kg": "kg",
        "kgs": "kg",
        "kilo": "kg",
        "kilogram": "kg",
        "केजी": "kg",
        "के.जी.": "kg",
        "के.जी": "kg",
        "doz": "doz",
        "dozen": "doz",
        "दर्जन": "doz",
        "pc": "pc",
        "pcs": "pc",
        "piece": "pc",
        "गोटा": "pc",
        "प्रति गोटा": "pc",
        "ltr": "ltr",
        "lt": "ltr",
        "litre": "ltr",
        "liter": "ltr",
        "लिटर": "ltr",
        "bundle": "bundle",
        "मुठा": "bundle",
    }
    EXCLUDED_TERMS: list[str] = [
        "app store",
        "google play",
        "play store",
        "download",
        "copyright",
        "all rights reserved",
        "login",
        "contact us",
        "home",
        "notice",
        "kalimati",
        "total",
        "read more",
    ]
    HEADER_LABELS: list[str] = [
        "commodity",
        "कृषि उपज",
        "name",
        "crop",
        "item",
        "unit",
        "ईकाइ",
    ]
    KNOWN_CROPS: list[str] = [
        "rice", "wheat", "maize", "potato", "onion", "tomato",
        "lentil", "mustard", "cauliflower", "cabbage", "carrot",
        "beans", "peas", "garlic", "ginger", "chili",
    ]
    REQUIRE_KNOWN_CROP: bool = False

    # --- Change estimation / alerting ---
    SIGNIFICANT_CHANGE_PCT: float = 10.0
    ALERT_PRICE_WINDOW: int = 5         # Leading prices inspected for alerts
    ALERT_NAMED_CHANGES: int = 2        # Changes spelled out in the body
    WEATHER_ALERT_KEYWORDS: list[str] = ["rain", "storm", "thunder", "heavy"]

    # --- Weather ---
    WEATHER_API_KEY: str | None = os.getenv("OPENWEATHER_API_KEY")
    WEATHER_BASE_URL: str = "https://api.openweathermap.org/data/2.5"
    WEATHER_COUNTRY_CODE: str = "NP"
    WEATHER_COUNTRY_NAME: str = "Nepal"
    DEFAULT_LOCATION: str = "Kathmandu"
    FORECAST_LOOKAHEAD_INTERVALS: int = 8   # 8 x 3h = next 24 hours
    HOT_TEMPERATURE_C: float = 30.0
    COOL_TEMPERATURE_C: float = 15.0
    HIGH_HUMIDITY_PCT: float = 80.0

    # --- Scheduling (host application cadence) ---
    POLL_INTERVAL_MINUTES: int = 30

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("AGRI_FEED_LOG_LEVEL", "DEBUG")

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    RESULTS_DIR: Path = BASE_DIR / "results"
    LOGS_DIR: Path = BASE_DIR / "logs"

    # --- Sources (probed by the health checker) ---
    AVAILABLE_SOURCES: list[dict[str, str]] = [
        {
            "id": "kalimati",
            "label": "Kalimati Market",
            "url": MARKET_URL,
        },
        {
            "id": "openweather",
            "label": "OpenWeatherMap",
            "url": WEATHER_BASE_URL + "/weather",
        },
    ]

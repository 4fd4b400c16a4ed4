"""Rate-limited HTML fetcher for Google Flights"""

import time
from typing import Dict, Optional
from urllib.parse import urlencode

from curl_cffi import CurlError
from curl_cffi.requests import AsyncSession
from loguru import logger

from .config import (
    BLOCK_MARKERS,
    DEFAULT_HEADERS,
    DEFAULT_LOCALE,
    DEFAULT_REQUEST_TIMEOUT,
    FLIGHTS_URL,
    IMPERSONATE,
    TFU_PARAM,
)
from .exceptions import BlockedError, FetchError
from .rate_limiter import MinIntervalRateLimiter, get_shared_rate_limiter


def build_flights_url(token: str, currency: str) -> str:
    """Results page URL for an encoded search"""
    params = {
        "tfs": token,
        "hl": DEFAULT_LOCALE,
        "tfu": TFU_PARAM,
        "curr": currency,
    }
    return f"{FLIGHTS_URL}?{urlencode(params)}"


def build_query_url(query: str) -> str:
    """Free-text search page URL"""
    return f"{FLIGHTS_URL}?{urlencode({'q': query, 'hl': DEFAULT_LOCALE})}"


def detect_block_page(html: str) -> bool:
    """True if Google served its anti-automation page"""
    return any(marker in html for marker in BLOCK_MARKERS)


class RateLimitedFetcher:
    """
    GETs pages with browser-like headers, spaced by a rate limiter.
    A fresh curl_cffi session is opened per request.
    """

    def __init__(
        self,
        rate_limiter: Optional[MinIntervalRateLimiter] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        impersonate: str = IMPERSONATE,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize fetcher.

        Args:
            rate_limiter: Limiter to acquire before each request (process-wide one by default)
            timeout: Request timeout in seconds
            impersonate: curl_cffi browser fingerprint
            headers: Header override, mostly for tests
        """
        self.rate_limiter = rate_limiter or get_shared_rate_limiter()
        self.timeout = timeout
        self.impersonate = impersonate
        self.headers = dict(headers or DEFAULT_HEADERS)

    async def fetch(self, url: str) -> str:
        """
        Fetch a page body.

        Raises:
            FetchError: On a non-2xx response
        """
        await self.rate_limiter.acquire()

        logger.debug(f"→ GET {url}")
        async with AsyncSession(impersonate=self.impersonate) as session:
            start_time = time.time()
            try:
                response = await session.get(url, headers=self.headers, timeout=self.timeout)
            except CurlError as e:
                logger.error(f"❌ Request failed: {e}")
                raise
            request_duration = time.time() - start_time

        logger.debug(f"← Response {response.status_code} ({request_duration:.2f}s)")

        if not 200 <= response.status_code < 300:
            logger.error(f"❌ HTTP {response.status_code} from Google Flights")
            raise FetchError(response.status_code)

        return response.text

    async def fetch_checked(self, url: str) -> str:
        """
        Fetch a page and reject anti-automation pages.

        Raises:
            FetchError: On a non-2xx response
            BlockedError: If the body is a bot-block page
        """
        html = await self.fetch(url)
        if detect_block_page(html):
            logger.error("🚫 Blocked by Google (unusual traffic page)")
            raise BlockedError()
        return html

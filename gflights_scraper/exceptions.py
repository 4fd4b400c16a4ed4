"""Custom exception classes for the Google Flights scraper"""

from .config import BLOCK_RECOMMENDED_WAIT_MINUTES


class FlightsScraperError(Exception):
    """Base exception for scraper errors"""

    pass


class FetchError(FlightsScraperError):
    """Raised when Google Flights answers with a non-2xx status"""

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(message or f"Google Flights returned HTTP {status_code}")


class BlockedError(FlightsScraperError):
    """Raised when an anti-automation page is served instead of results

    Google throttles by IP. The block usually clears after a few minutes;
    retrying immediately tends to extend it.
    """

    def __init__(
        self,
        message: str = (
            "Google is rate-limiting requests. "
            "Please wait a few minutes before trying again."
        ),
    ):
        self.recommended_wait_minutes = BLOCK_RECOMMENDED_WAIT_MINUTES
        super().__init__(message)


class ParseError(FlightsScraperError):
    """Raised when the embedded data blob is missing or unparseable"""

    def __init__(
        self,
        message: str = (
            "Failed to parse Google Flights response. "
            "The page structure may have changed."
        ),
    ):
        super().__init__(message)


class InvalidSearchError(FlightsScraperError, ValueError):
    """Raised when search options are rejected before any request is made"""

    pass

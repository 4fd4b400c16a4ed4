"""Google Flights Scraper
Async scraper for flight search, date-price grids and airport lookup
"""

__version__ = "0.1.0"

from .airports import AirportResolver
from .api_client import (
    GoogleFlightsClient,
    find_airport_code,
    get_date_grid,
    search_flights,
)
from .encoder import build_search_token, decode_search_token
from .exceptions import (
    BlockedError,
    FetchError,
    FlightsScraperError,
    InvalidSearchError,
    ParseError,
)
from .extractor import extract_embedded_data
from .fetcher import RateLimitedFetcher
from .models import (
    AirportResult,
    DateGridEntry,
    DateGridOptions,
    FlightOffer,
    FlightSegment,
    SearchCriteria,
    SearchOptions,
    SeatClass,
    SortKey,
    TripType,
)
from .parser import DateGridParser, FlightDataParser
from .rate_limiter import MinIntervalRateLimiter, get_shared_rate_limiter
from .results import filter_by_stops, paginate, sort_offers

__all__ = [
    "__version__",
    "AirportResolver",
    "GoogleFlightsClient",
    "RateLimitedFetcher",
    "MinIntervalRateLimiter",
    "get_shared_rate_limiter",
    "FlightDataParser",
    "DateGridParser",
    "build_search_token",
    "decode_search_token",
    "extract_embedded_data",
    "search_flights",
    "get_date_grid",
    "find_airport_code",
    "filter_by_stops",
    "sort_offers",
    "paginate",
    "FlightsScraperError",
    "FetchError",
    "BlockedError",
    "ParseError",
    "InvalidSearchError",
    "AirportResult",
    "DateGridEntry",
    "DateGridOptions",
    "FlightOffer",
    "FlightSegment",
    "SearchCriteria",
    "SearchOptions",
    "SeatClass",
    "SortKey",
    "TripType",
]

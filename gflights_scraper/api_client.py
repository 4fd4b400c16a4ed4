"""Client for Google Flights search, date grid and airport lookup"""

from typing import Any, Dict, List, Mapping, Optional, Union

from loguru import logger

from .airports import AirportResolver
from .config import DEFAULT_ANCHOR_DAYS_AHEAD, DEFAULT_REQUEST_TIMEOUT
from .date_utils import default_anchor_date
from .encoder import build_search_token
from .exceptions import ParseError
from .extractor import extract_embedded_data
from .fetcher import RateLimitedFetcher, build_flights_url
from .models import AirportResult, DateGridOptions, SearchCriteria, SearchOptions
from .parser import DateGridParser, FlightDataParser
from .rate_limiter import MinIntervalRateLimiter
from .results import filter_by_stops, paginate, sort_offers


class GoogleFlightsClient:
    """
    Google Flights scraping client with:
    - protobuf-encoded search tokens, as the web front end builds them
    - a process-wide minimum spacing between requests
    - bot-block page detection
    - tolerant parsing of the positional ds:1 payload
    """

    def __init__(
        self,
        fetcher: Optional[RateLimitedFetcher] = None,
        rate_limiter: Optional[MinIntervalRateLimiter] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        """
        Initialize client.

        Args:
            fetcher: Page fetcher; built from rate_limiter/timeout when omitted
            rate_limiter: Limiter for the default fetcher (process-wide one by default)
            timeout: Request timeout in seconds for the default fetcher
        """
        self.fetcher = fetcher or RateLimitedFetcher(rate_limiter=rate_limiter, timeout=timeout)
        self.airport_resolver = AirportResolver(self.fetcher)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass

    @staticmethod
    def build_search_token(criteria: SearchCriteria) -> str:
        return build_search_token(criteria)

    async def _fetch_payload(self, criteria: SearchCriteria, currency: str) -> Any:
        """Fetch the results page for `criteria` and return its ds:1 payload"""
        url = build_flights_url(build_search_token(criteria), currency)
        html = await self.fetcher.fetch_checked(url)

        ds1 = extract_embedded_data(html)
        if ds1 is None:
            logger.error(f"❌ No parseable ds:1 payload in page ({len(html)} chars)")
            raise ParseError()
        return ds1

    async def search_flights(self, options: Union[SearchOptions, Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Search flights, then filter, sort and paginate client-side.

        Returns:
            Dict with query, total_results, showing, has_more, next_offset, flights

        Raises:
            InvalidSearchError: If the options are rejected
            FetchError, BlockedError, ParseError: If the page cannot be used
        """
        if not isinstance(options, SearchOptions):
            options = SearchOptions(**options)
        options.validate()

        request_id = f"{options.origin}-{options.destination}-{options.departure_date}"
        logger.info(f"🔍 [{request_id}] Searching {options.trip_type.value} {options.seat_class.value} flights")

        ds1 = await self._fetch_payload(options.to_criteria(), options.currency)
        offers = FlightDataParser.parse_flight_offers(ds1, options.currency)

        offers = filter_by_stops(offers, options.max_stops)
        offers = sort_offers(offers, options.sort_by)
        page = paginate(offers, options.offset, options.max_results)

        logger.success(
            f"✅ [{request_id}] {page.total_results} flights, "
            f"showing {page.count} from offset {page.offset}"
        )
        return {"query": options.query_summary(), **page.to_dict()}

    async def get_date_grid(self, options: Union[DateGridOptions, Mapping[str, Any]]) -> Dict[str, Any]:
        """
        Lowest price per departure date around an anchor date.

        Returns:
            Dict with date_grid, cheapest and currency
        """
        if not isinstance(options, DateGridOptions):
            options = DateGridOptions(**options)
        options.validate()

        anchor_date = options.departure_date or default_anchor_date(DEFAULT_ANCHOR_DAYS_AHEAD)
        criteria = SearchCriteria(
            origin=options.origin,
            destination=options.destination,
            departure_date=anchor_date,
            trip_type=options.trip_type,
            seat_class=options.seat_class,
            adults=options.adults,
        )

        request_id = f"{options.origin}-{options.destination}-{anchor_date}"
        logger.info(f"📅 [{request_id}] Fetching date grid")

        ds1 = await self._fetch_payload(criteria, options.currency)
        entries = DateGridParser.parse_date_grid(ds1)
        cheapest = DateGridParser.find_cheapest(entries)

        if entries:
            logger.success(f"✅ [{request_id}] {len(entries)} dates, cheapest {cheapest.date} at {cheapest.price}")
        else:
            logger.warning(f"[{request_id}] No date grid data in response")

        return {
            "date_grid": [entry.to_dict() for entry in entries],
            "cheapest": cheapest.to_dict() if cheapest else None,
            "currency": options.currency,
        }

    async def find_airport_code(self, query: str) -> List[AirportResult]:
        """Resolve a city, airport name or partial code to airports"""
        logger.info(f"🔎 Looking up airports for '{query}'")
        return await self.airport_resolver.resolve(query)


_DEFAULT_CLIENT: Optional[GoogleFlightsClient] = None


def get_default_client() -> GoogleFlightsClient:
    """Get or create the client behind the module-level helpers"""
    global _DEFAULT_CLIENT
    if _DEFAULT_CLIENT is None:
        _DEFAULT_CLIENT = GoogleFlightsClient()
    return _DEFAULT_CLIENT


async def search_flights(options: Union[SearchOptions, Mapping[str, Any]]) -> Dict[str, Any]:
    return await get_default_client().search_flights(options)


async def get_date_grid(options: Union[DateGridOptions, Mapping[str, Any]]) -> Dict[str, Any]:
    return await get_default_client().get_date_grid(options)


async def find_airport_code(query: str) -> List[AirportResult]:
    return await get_default_client().find_airport_code(query)

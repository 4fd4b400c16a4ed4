"""Airport code lookup without a lookup endpoint

Google Flights has no public autocomplete API, so airports are scraped from
whatever pages mention them. Each strategy below takes a page and returns
candidates; the resolver tries them in order and stops at the first one
that finds anything.
"""

import re
from typing import Awaitable, Callable, Dict, List, Tuple

from loguru import logger

from .config import (
    AIRPORT_CONTEXT_AFTER,
    AIRPORT_CONTEXT_BEFORE,
    DATA_CODE_CONTEXT_AFTER,
    DATA_CODE_CONTEXT_BEFORE,
    DEFAULT_CURRENCY,
    FALLBACK_DAYS_AHEAD,
    FALLBACK_DESTINATION,
    FALLBACK_ORIGIN,
    SCORE_CITY_SUBSTRING,
    SCORE_CODE_SUBSTRING,
    SCORE_COUNTRY_SUBSTRING,
    SCORE_EXACT_CODE,
    SCORE_NAME_SUBSTRING,
)
from .date_utils import default_anchor_date
from .encoder import build_search_token
from .fetcher import RateLimitedFetcher, build_flights_url, build_query_url
from .models import AirportResult, SearchCriteria, SeatClass, TripType

# ["SFO",0],"San Francisco International Airport"
CALLBACK_AIRPORT_PATTERN = re.compile(
    r'\["([A-Z]{3})",\d+\],"([^"]+(?:Airport|Aeropuerto|Aéroport|Flughafen)[^"]*)"'
)
DATA_CODE_PATTERN = re.compile(r'data-code="([A-Z]{3})"')
ARIA_LABEL_PATTERN = re.compile(r'aria-label="([^"]*Airport[^"]*)"')
SCRIPT_AIRPORT_PATTERN = re.compile(
    r'\["([A-Z]{3})","([^"]*(?:International|Airport|Regional|Municipal)[^"]*)"'
)
SEARCH_PAGE_AIRPORT_PATTERN = re.compile(
    r'\["([A-Z]{3})",\d+\],"([^"]*(?:Airport|Aeropuerto|Aéroport|Flughafen|International|Regional)[^"]*)"'
)
COUNTRY_PATTERN = re.compile(r'"([A-Z]{2})"')


def _window(text: str, start: int, end: int, before: int, after: int) -> str:
    return text[max(0, start - before):min(len(text), end + after)]


def _city_near(context: str, code: str) -> str:
    # "SFO", ..., "/m/0d6lp", ..., "San Francisco"
    pattern = re.compile(rf'"{code}"[^\]]*?"(/m/[^"]+)"[^\]]*?"([^"]+)"')
    match = pattern.search(context)
    return match.group(2) if match else ""


def _country_near(context: str) -> str:
    match = COUNTRY_PATTERN.search(context)
    return match.group(1) if match else ""


def _extract_with_context(html: str, pattern: re.Pattern) -> List[AirportResult]:
    results = []
    seen = set()
    for match in pattern.finditer(html):
        code, name = match.group(1), match.group(2)
        if code in seen:
            continue
        seen.add(code)

        context = _window(
            html, match.start(), match.end(), AIRPORT_CONTEXT_BEFORE, AIRPORT_CONTEXT_AFTER
        )
        results.append(
            AirportResult(
                code=code,
                name=name,
                city=_city_near(context, code),
                country=_country_near(context),
            )
        )
    return results


def extract_callback_airports(html: str) -> List[AirportResult]:
    """Airports listed in the page's AF_initDataCallback data"""
    return _extract_with_context(html, CALLBACK_AIRPORT_PATTERN)


def extract_data_code_airports(html: str) -> List[AirportResult]:
    """Airports marked up with data-code attributes and aria labels"""
    results = []
    seen = set()
    for match in DATA_CODE_PATTERN.finditer(html):
        code = match.group(1)
        if code in seen:
            continue
        seen.add(code)

        context = _window(
            html, match.start(), match.start(), DATA_CODE_CONTEXT_BEFORE, DATA_CODE_CONTEXT_AFTER
        )
        label = ARIA_LABEL_PATTERN.search(context)
        results.append(AirportResult(code=code, name=label.group(1) if label else code))
    return results


def extract_script_airports(html: str) -> List[AirportResult]:
    """Loose ["XXX","... Airport"] pairs in script data"""
    results = []
    seen = set()
    for match in SCRIPT_AIRPORT_PATTERN.finditer(html):
        code = match.group(1)
        if code in seen:
            continue
        seen.add(code)
        results.append(AirportResult(code=code, name=match.group(2)))
    return results


def extract_search_page_airports(html: str) -> List[AirportResult]:
    """Airports referenced anywhere on a flight results page"""
    return _extract_with_context(html, SEARCH_PAGE_AIRPORT_PATTERN)


def score_airport(airport: AirportResult, query: str) -> int:
    query_lower = query.lower()
    score = 0
    if airport.code.lower() == query_lower:
        score += SCORE_EXACT_CODE
    if query_lower in airport.code.lower():
        score += SCORE_CODE_SUBSTRING
    if query_lower in airport.name.lower():
        score += SCORE_NAME_SUBSTRING
    if query_lower in airport.city.lower():
        score += SCORE_CITY_SUBSTRING
    if query_lower in airport.country.lower():
        score += SCORE_COUNTRY_SUBSTRING
    return score


def rank_airports(airports: List[AirportResult], query: str) -> List[AirportResult]:
    """
    Order airports by relevance to the query.

    Zero-score airports are dropped unless nothing scored at all, in which
    case every candidate is returned in discovery order.
    """
    scored = [(airport, score_airport(airport, query)) for airport in airports]
    relevant = [pair for pair in scored if pair[1] > 0]
    if relevant:
        scored = relevant
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return [airport for airport, _ in scored]


QUERY_PAGE = "query"
SEARCH_PAGE = "search"

Strategy = Tuple[str, str, Callable[[str], List[AirportResult]]]

STRATEGIES: Tuple[Strategy, ...] = (
    ("callback data", QUERY_PAGE, extract_callback_airports),
    ("data-code attributes", QUERY_PAGE, extract_data_code_airports),
    ("script data", QUERY_PAGE, extract_script_airports),
    ("flight search results", SEARCH_PAGE, extract_search_page_airports),
)


def fallback_search_criteria(query: str) -> SearchCriteria:
    """One-way search used when no page mentions the airport directly"""
    origin = query.upper() if len(query) == 3 else FALLBACK_ORIGIN
    return SearchCriteria(
        origin=origin,
        destination=FALLBACK_DESTINATION,
        departure_date=default_anchor_date(FALLBACK_DAYS_AHEAD),
        trip_type=TripType.ONE_WAY,
        seat_class=SeatClass.ECONOMY,
    )


class AirportResolver:
    """Resolve free text to airport codes through a cascade of scrapers"""

    def __init__(
        self,
        fetcher: RateLimitedFetcher,
        strategies: Tuple[Strategy, ...] = STRATEGIES,
    ):
        self.fetcher = fetcher
        self.strategies = strategies

    def _page_loaders(self, query: str) -> Dict[str, Callable[[], Awaitable[str]]]:
        async def load_query_page() -> str:
            return await self.fetcher.fetch_checked(build_query_url(query))

        async def load_search_page() -> str:
            token = build_search_token(fallback_search_criteria(query))
            return await self.fetcher.fetch_checked(build_flights_url(token, DEFAULT_CURRENCY))

        return {QUERY_PAGE: load_query_page, SEARCH_PAGE: load_search_page}

    async def resolve(self, query: str) -> List[AirportResult]:
        """
        Find airports matching `query`.

        Pages are fetched lazily, so the flight search fallback only costs a
        request when every earlier strategy came up empty.
        """
        query = query.strip()
        loaders = self._page_loaders(query)
        pages: Dict[str, str] = {}

        candidates: List[AirportResult] = []
        for name, page, extract in self.strategies:
            if page not in pages:
                pages[page] = await loaders[page]()
            candidates = extract(pages[page])
            if candidates:
                logger.debug(f"Airport lookup '{query}': {len(candidates)} candidates via {name}")
                break
        else:
            logger.info(f"Airport lookup '{query}': no airports found")
            return []

        return rank_airports(candidates, query)

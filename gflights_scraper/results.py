"""Stop filtering, sorting and pagination of parsed offers"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from .models import FlightOffer, SortKey


def parse_stop_limit(max_stops: str) -> Optional[int]:
    """
    Translate a stop filter into a maximum stop count.

    Args:
        max_stops: "any", "nonstop" or a number such as "1"

    Returns:
        Maximum stops allowed, None for no limit

    Raises:
        ValueError: For any other value
    """
    if max_stops == "any":
        return None
    if max_stops == "nonstop":
        return 0
    if isinstance(max_stops, str) and max_stops.isdigit():
        return int(max_stops)
    raise ValueError(f"Invalid stop filter '{max_stops}'")


def filter_by_stops(offers: List[FlightOffer], max_stops: str) -> List[FlightOffer]:
    limit = parse_stop_limit(max_stops)
    if limit is None:
        return list(offers)
    return [offer for offer in offers if offer.stops <= limit]


def sort_offers(offers: List[FlightOffer], sort_by: Union[SortKey, str] = SortKey.BEST) -> List[FlightOffer]:
    """Stable sort; unknown keys fall back to best"""
    try:
        key = SortKey(sort_by)
    except ValueError:
        key = SortKey.BEST

    if key == SortKey.PRICE:
        return sorted(offers, key=lambda o: o.price)
    if key == SortKey.DURATION:
        return sorted(offers, key=lambda o: o.duration_minutes)
    if key == SortKey.DEPARTURE:
        return sorted(offers, key=lambda o: o.departure)
    if key == SortKey.ARRIVAL:
        return sorted(offers, key=lambda o: o.arrival)
    # Google's ordering: best flights first, then the rest, cheapest first
    return sorted(offers, key=lambda o: (not o.is_best, o.price))


@dataclass
class Page:
    """One page of offers plus the bookkeeping needed to fetch the next"""

    offers: List[FlightOffer] = field(default_factory=list)
    total_results: int = 0
    offset: int = 0

    @property
    def count(self) -> int:
        return len(self.offers)

    @property
    def has_more(self) -> bool:
        return self.offset + self.count < self.total_results

    @property
    def next_offset(self) -> Optional[int]:
        return self.offset + self.count if self.has_more else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_results": self.total_results,
            "showing": {"offset": self.offset, "count": self.count},
            "has_more": self.has_more,
            "next_offset": self.next_offset,
            "flights": [offer.to_dict() for offer in self.offers],
        }


def paginate(offers: List[FlightOffer], offset: int, max_results: int) -> Page:
    return Page(
        offers=offers[offset:offset + max_results],
        total_results=len(offers),
        offset=offset,
    )

"""Data models and enums for the Google Flights scraper"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from .config import (
    DEFAULT_CURRENCY,
    DEFAULT_MAX_RESULTS,
    MAX_PASSENGERS_PER_TYPE,
    MAX_RESULTS_PER_PAGE,
    MIN_RESULTS_PER_PAGE,
)
from .date_utils import validate_iso_date
from .exceptions import InvalidSearchError


class SeatClass(str, Enum):
    """Cabin classes offered by the search form"""

    ECONOMY = "economy"
    PREMIUM_ECONOMY = "premium_economy"
    BUSINESS = "business"
    FIRST = "first"


class TripType(str, Enum):
    """Trip types supported by the encoder"""

    ROUND_TRIP = "round_trip"
    ONE_WAY = "one_way"


class SortKey(str, Enum):
    """Sort orders for search results"""

    BEST = "best"  # Google's ranking: best flights first, then by price
    PRICE = "price"
    DURATION = "duration"
    DEPARTURE = "departure"
    ARRIVAL = "arrival"


def _coerce_enum(enum_cls, value, name: str):
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise InvalidSearchError(f"Invalid {name} '{value}' (expected one of: {choices})")


def _check_count(name: str, value: int, minimum: int) -> None:
    if not minimum <= value <= MAX_PASSENGERS_PER_TYPE:
        raise InvalidSearchError(
            f"{name} must be between {minimum} and {MAX_PASSENGERS_PER_TYPE}, got {value}"
        )


@dataclass
class SearchCriteria:
    """Everything the encoder needs to build a search token"""

    origin: str
    destination: str
    departure_date: str
    return_date: Optional[str] = None
    trip_type: TripType = TripType.ONE_WAY
    seat_class: SeatClass = SeatClass.ECONOMY
    adults: int = 1
    children: int = 0
    infants_in_seat: int = 0
    infants_on_lap: int = 0
    max_stops: Optional[int] = None

    def __post_init__(self):
        self.trip_type = _coerce_enum(TripType, self.trip_type, "trip_type")
        self.seat_class = _coerce_enum(SeatClass, self.seat_class, "seat_class")


@dataclass
class SearchOptions:
    """Options accepted by search_flights"""

    origin: str
    destination: str
    departure_date: str
    return_date: Optional[str] = None
    trip_type: TripType = TripType.ONE_WAY
    seat_class: SeatClass = SeatClass.ECONOMY
    adults: int = 1
    children: int = 0
    infants_in_seat: int = 0
    infants_on_lap: int = 0
    max_stops: str = "any"
    sort_by: SortKey = SortKey.BEST
    max_results: int = DEFAULT_MAX_RESULTS
    offset: int = 0
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        self.trip_type = _coerce_enum(TripType, self.trip_type, "trip_type")
        self.seat_class = _coerce_enum(SeatClass, self.seat_class, "seat_class")
        self.sort_by = _coerce_enum(SortKey, self.sort_by, "sort_by")
        self.max_stops = str(self.max_stops)

    def validate(self) -> None:
        """
        Reject options Google would not accept.

        Raises:
            InvalidSearchError: On the first problem found
        """
        validate_iso_date(self.departure_date, "departure_date")
        if self.return_date is not None:
            validate_iso_date(self.return_date, "return_date")
        if self.trip_type == TripType.ROUND_TRIP and not self.return_date:
            raise InvalidSearchError("return_date is required when trip_type is 'round_trip'")

        _check_count("adults", self.adults, 1)
        _check_count("children", self.children, 0)
        _check_count("infants_in_seat", self.infants_in_seat, 0)
        _check_count("infants_on_lap", self.infants_on_lap, 0)

        if self.max_stops not in ("any", "nonstop") and not self.max_stops.isdigit():
            raise InvalidSearchError(
                f"Invalid max_stops '{self.max_stops}' (expected 'any', 'nonstop' or a number)"
            )
        if not MIN_RESULTS_PER_PAGE <= self.max_results <= MAX_RESULTS_PER_PAGE:
            raise InvalidSearchError(
                f"max_results must be between {MIN_RESULTS_PER_PAGE} and "
                f"{MAX_RESULTS_PER_PAGE}, got {self.max_results}"
            )
        if self.offset < 0:
            raise InvalidSearchError(f"offset must be >= 0, got {self.offset}")

    def to_criteria(self) -> SearchCriteria:
        # max_stops stays out of the token: sending it makes Google return
        # empty result sets for some routes. Stops are filtered after parsing.
        return SearchCriteria(
            origin=self.origin,
            destination=self.destination,
            departure_date=self.departure_date,
            return_date=self.return_date,
            trip_type=self.trip_type,
            seat_class=self.seat_class,
            adults=self.adults,
            children=self.children,
            infants_in_seat=self.infants_in_seat,
            infants_on_lap=self.infants_on_lap,
        )

    def query_summary(self) -> Dict[str, Any]:
        return {
            "origin": self.origin,
            "destination": self.destination,
            "departure_date": self.departure_date,
            "return_date": self.return_date,
            "trip_type": self.trip_type.value,
            "seat_class": self.seat_class.value,
            "passengers": {
                "adults": self.adults,
                "children": self.children,
                "infants_in_seat": self.infants_in_seat,
                "infants_on_lap": self.infants_on_lap,
            },
        }


@dataclass
class DateGridOptions:
    """Options accepted by get_date_grid"""

    origin: str
    destination: str
    departure_date: Optional[str] = None  # Anchor date, defaults to a week out
    trip_type: TripType = TripType.ONE_WAY
    seat_class: SeatClass = SeatClass.ECONOMY
    adults: int = 1
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        self.trip_type = _coerce_enum(TripType, self.trip_type, "trip_type")
        self.seat_class = _coerce_enum(SeatClass, self.seat_class, "seat_class")

    def validate(self) -> None:
        if self.departure_date is not None:
            validate_iso_date(self.departure_date, "departure_date")
        _check_count("adults", self.adults, 1)


@dataclass
class FlightSegment:
    """A single flown leg of an offer"""

    flight_number: str
    airline: str
    airline_code: str
    operated_by: Optional[str]
    aircraft: Optional[str]
    origin: str
    origin_name: str
    destination: str
    destination_name: str
    departure: str  # HH:MM
    arrival: str
    departure_date: str  # YYYY-MM-DD
    arrival_date: str
    duration_minutes: int
    legroom: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FlightOffer:
    """A priced itinerary as listed on the results page"""

    price: float
    currency: str
    airline: str
    airline_code: str
    is_best: bool
    departure: str
    arrival: str
    departure_date: str
    arrival_date: str
    duration_minutes: int
    stops: int
    segments: List[FlightSegment] = field(default_factory=list)
    booking_token: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DateGridEntry:
    """Lowest price for one departure date"""

    date: str
    price: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AirportResult:
    """An airport matched by free-text lookup"""

    code: str
    name: str
    city: str = ""
    country: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

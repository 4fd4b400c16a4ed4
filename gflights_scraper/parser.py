"""Parsers turning the `ds:1` payload into flight offers and date grids"""

from typing import Any, List, Optional

from loguru import logger

from .date_utils import timestamp_ms_to_date
from .layout import (
    BEST_FLAG_VALUE,
    DATE_GRID_PATH,
    LEGROOM_SLOTS,
    OFFERS_PATH,
    PRICE_AMOUNT,
    RANK_BEST_FLAG,
    DetailsIndex,
    FlightInfoIndex,
    LegIndex,
    OfferIndex,
    PriceIndex,
    first_present,
    get_at,
)
from .models import DateGridEntry, FlightOffer, FlightSegment


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def format_time(time_parts: Optional[List[Optional[int]]]) -> str:
    """Convert [hour, minute?] to HH:MM. Google leaves out zero parts."""
    if not isinstance(time_parts, list) or not time_parts:
        return ""
    hour = time_parts[0] or 0
    minute = (time_parts[1] if len(time_parts) > 1 else 0) or 0
    return f"{int(hour):02d}:{int(minute):02d}"


def format_date(date_parts: Optional[List[int]]) -> str:
    """Convert [year, month, day] to YYYY-MM-DD"""
    if not isinstance(date_parts, list) or len(date_parts) < 3:
        return ""
    year, month, day = date_parts[:3]
    return f"{year}-{int(month):02d}-{int(day):02d}"


class FlightDataParser:
    """Parse the results payload into structured offers"""

    @staticmethod
    def parse_segment(leg: Any) -> Optional[FlightSegment]:
        """Map one positional leg to a segment, None if it is not a leg"""
        if not isinstance(leg, list) or not leg:
            return None

        flight_info = get_at(leg, LegIndex.FLIGHT_INFO)
        if isinstance(flight_info, list):
            carrier_code = get_at(flight_info, FlightInfoIndex.CARRIER_CODE) or ""
            number = get_at(flight_info, FlightInfoIndex.NUMBER) or ""
            flight_number = f"{carrier_code}{number}"
            airline = get_at(flight_info, FlightInfoIndex.AIRLINE_NAME) or ""
        else:
            carrier_code = flight_number = airline = ""

        return FlightSegment(
            flight_number=flight_number,
            airline=airline,
            airline_code=carrier_code,
            operated_by=get_at(leg, LegIndex.OPERATED_BY) or None,
            aircraft=get_at(leg, LegIndex.AIRCRAFT) or None,
            origin=get_at(leg, LegIndex.ORIGIN) or "",
            origin_name=get_at(leg, LegIndex.ORIGIN_NAME) or "",
            destination=get_at(leg, LegIndex.DESTINATION) or "",
            destination_name=get_at(leg, LegIndex.DESTINATION_NAME) or "",
            departure=format_time(get_at(leg, LegIndex.DEPARTURE_TIME)),
            arrival=format_time(get_at(leg, LegIndex.ARRIVAL_TIME)),
            departure_date=format_date(get_at(leg, LegIndex.DEPARTURE_DATE)),
            arrival_date=format_date(get_at(leg, LegIndex.ARRIVAL_DATE)),
            duration_minutes=get_at(leg, LegIndex.DURATION) or 0,
            legroom=first_present(leg, LEGROOM_SLOTS),
        )

    @staticmethod
    def parse_segments(details: List[Any]) -> List[FlightSegment]:
        segments = []
        legs = get_at(details, DetailsIndex.LEGS)
        if not isinstance(legs, list):
            return segments

        for position, leg in enumerate(legs):
            try:
                segment = FlightDataParser.parse_segment(leg)
            except (TypeError, ValueError) as e:
                logger.debug(f"Skipping malformed segment #{position}: {e}")
                continue
            if segment:
                segments.append(segment)
        return segments

    @staticmethod
    def parse_offer(raw: Any, currency: str) -> Optional[FlightOffer]:
        """Map one positional offer, None if it has no details or price"""
        details = get_at(raw, OfferIndex.DETAILS)
        price_block = get_at(raw, OfferIndex.PRICE_BLOCK)
        if not isinstance(details, list) or not isinstance(price_block, list):
            return None

        price = get_at(price_block, PriceIndex.PRICE_PAIR, PRICE_AMOUNT)
        if not is_number(price):
            return None

        segments = FlightDataParser.parse_segments(details)

        return FlightOffer(
            price=price,
            currency=currency,
            airline=get_at(details, DetailsIndex.AIRLINE_NAMES, 0) or "",
            airline_code=get_at(details, DetailsIndex.AIRLINE_CODE) or "",
            is_best=get_at(raw, OfferIndex.RANK, RANK_BEST_FLAG) == BEST_FLAG_VALUE,
            departure=format_time(get_at(details, DetailsIndex.DEPARTURE_TIME)),
            arrival=format_time(get_at(details, DetailsIndex.ARRIVAL_TIME)),
            departure_date=format_date(get_at(details, DetailsIndex.DEPARTURE_DATE)),
            arrival_date=format_date(get_at(details, DetailsIndex.ARRIVAL_DATE)),
            duration_minutes=get_at(details, DetailsIndex.DURATION) or 0,
            stops=max(len(segments) - 1, 0),
            segments=segments,
            booking_token=get_at(price_block, PriceIndex.BOOKING_TOKEN) or "",
        )

    @staticmethod
    def parse_flight_offers(ds1: Any, currency: str) -> List[FlightOffer]:
        """
        Parse every offer in the payload.

        Malformed offers are logged and skipped; they never fail the batch.

        Args:
            ds1: Decoded ds:1 payload
            currency: Currency the prices were requested in

        Returns:
            Offers in payload order
        """
        raw_offers = get_at(ds1, *OFFERS_PATH)
        if not isinstance(raw_offers, list):
            logger.debug("No offer list in payload")
            return []

        offers = []
        for position, raw in enumerate(raw_offers):
            try:
                offer = FlightDataParser.parse_offer(raw, currency)
            except (TypeError, ValueError) as e:
                logger.debug(f"Skipping malformed offer #{position}: {e}")
                continue
            if offer is None:
                logger.debug(f"Skipping offer #{position}: missing details or price")
                continue
            offers.append(offer)

        skipped = len(raw_offers) - len(offers)
        if skipped:
            logger.info(f"Parsed {len(offers)} offers ({skipped} skipped)")
        return offers


class DateGridParser:
    """Parse the date/price calendar from the same payload"""

    @staticmethod
    def parse_date_grid(ds1: Any) -> List[DateGridEntry]:
        calendar = get_at(ds1, *DATE_GRID_PATH)
        if not isinstance(calendar, list):
            return []

        entries = []
        for item in calendar:
            if not isinstance(item, list) or len(item) < 2:
                continue
            timestamp, price = item[0], item[1]
            if not (is_number(timestamp) and is_number(price)):
                continue
            try:
                date = timestamp_ms_to_date(timestamp)
            except (OverflowError, OSError, ValueError):
                logger.debug(f"Skipping date grid entry with bad timestamp {timestamp}")
                continue
            entries.append(DateGridEntry(date=date, price=price))
        return entries

    @staticmethod
    def find_cheapest(entries: List[DateGridEntry]) -> Optional[DateGridEntry]:
        """Lowest-priced entry, the earliest one on ties"""
        cheapest = None
        for entry in entries:
            if cheapest is None or entry.price < cheapest.price:
                cheapest = entry
        return cheapest

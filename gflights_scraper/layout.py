"""Positional layout of the `ds:1` payload

Google ships results as nested arrays without field names. Every index the
parsers rely on lives here; when Google reshuffles the payload this is the
only module that should need editing.
"""

from enum import IntEnum
from typing import Any, Optional, Sequence

# Paths from the ds:1 root
OFFERS_PATH = (3, 0)  # List of raw offers
DATE_GRID_PATH = (5, 10, 0)  # List of [timestamp_ms, price]


class OfferIndex(IntEnum):
    """Top-level slots of one raw offer"""

    DETAILS = 0
    PRICE_BLOCK = 1
    RANK = 5  # [is_best (1/0), ...]


class PriceIndex(IntEnum):
    """Slots of the price block"""

    PRICE_PAIR = 0  # [?, amount]
    BOOKING_TOKEN = 1


PRICE_AMOUNT = 1  # Slot of the amount inside PRICE_PAIR
RANK_BEST_FLAG = 0  # Slot of the best flag inside RANK
BEST_FLAG_VALUE = 1


class DetailsIndex(IntEnum):
    """Slots of an offer's details block"""

    AIRLINE_CODE = 0
    AIRLINE_NAMES = 1  # [name, ...]
    LEGS = 2
    DEPARTURE_DATE = 4  # [year, month, day]
    DEPARTURE_TIME = 5  # [hour, minute?]
    ARRIVAL_DATE = 7
    ARRIVAL_TIME = 8
    DURATION = 9  # Minutes


class LegIndex(IntEnum):
    """Slots of one leg (segment) inside the details block"""

    OPERATED_BY = 2
    ORIGIN = 3
    ORIGIN_NAME = 4
    DESTINATION_NAME = 5
    DESTINATION = 6
    DEPARTURE_TIME = 8
    ARRIVAL_TIME = 10
    DURATION = 11
    LEGROOM_ALT = 14
    AIRCRAFT = 17
    DEPARTURE_DATE = 20
    ARRIVAL_DATE = 21
    FLIGHT_INFO = 22  # [carrier_code, flight_number, ?, airline_name]
    LEGROOM = 30


class FlightInfoIndex(IntEnum):
    """Slots of a leg's flight info block"""

    CARRIER_CODE = 0
    NUMBER = 1
    AIRLINE_NAME = 3


# Legroom shows up in one of two slots depending on the fare
LEGROOM_SLOTS = (LegIndex.LEGROOM, LegIndex.LEGROOM_ALT)


def get_at(data: Any, *path: int) -> Optional[Any]:
    """
    Follow `path` into nested lists.

    Returns None as soon as a level is not a list or is too short.
    """
    current = data
    for index in path:
        if not isinstance(current, list) or not 0 <= index < len(current):
            return None
        current = current[index]
    return current


def first_present(data: Sequence[Any], slots: Sequence[int]) -> Optional[Any]:
    """First non-null value among `slots`"""
    for slot in slots:
        value = get_at(data, slot)
        if value is not None:
            return value
    return None

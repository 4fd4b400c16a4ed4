"""Search token encoder for the Google Flights `tfs` query parameter

The web front end serializes its search form as a protobuf message and
passes it base64url-encoded. The schema below is reverse-engineered and
built at runtime from descriptor protos, so no .proto file or generated
module ships with the package.
"""

import base64
from typing import List, Optional

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.message import Message
from loguru import logger

from .models import SearchCriteria, SeatClass, TripType

_PACKAGE = "gflights"
_FIELD = descriptor_pb2.FieldDescriptorProto

SEAT_WIRE = {
    SeatClass.ECONOMY: 1,
    SeatClass.PREMIUM_ECONOMY: 2,
    SeatClass.BUSINESS: 3,
    SeatClass.FIRST: 4,
}

TRIP_WIRE = {
    TripType.ROUND_TRIP: 1,
    TripType.ONE_WAY: 2,
}

PASSENGER_ADULT = 1
PASSENGER_CHILD = 2
PASSENGER_INFANT_IN_SEAT = 3
PASSENGER_INFANT_ON_LAP = 4

_ENUMS = (
    ("Seat", (("UNKNOWN_SEAT", 0), ("ECONOMY", 1), ("PREMIUM_ECONOMY", 2), ("BUSINESS", 3), ("FIRST", 4))),
    ("Trip", (("UNKNOWN_TRIP", 0), ("ROUND_TRIP", 1), ("ONE_WAY", 2), ("MULTI_CITY", 3))),
    (
        "Passenger",
        (
            ("UNKNOWN_PASSENGER", 0),
            ("ADULT", PASSENGER_ADULT),
            ("CHILD", PASSENGER_CHILD),
            ("INFANT_IN_SEAT", PASSENGER_INFANT_IN_SEAT),
            ("INFANT_ON_LAP", PASSENGER_INFANT_ON_LAP),
        ),
    ),
)

_info_class = None


def _add_field(
    message: descriptor_pb2.DescriptorProto,
    name: str,
    number: int,
    field_type: int,
    type_name: Optional[str] = None,
    repeated: bool = False,
) -> None:
    field = message.field.add()
    field.name = name
    field.number = number
    field.type = field_type
    field.label = _FIELD.LABEL_REPEATED if repeated else _FIELD.LABEL_OPTIONAL
    if type_name:
        field.type_name = f".{_PACKAGE}.{type_name}"
    if repeated and field_type == _FIELD.TYPE_ENUM:
        field.options.packed = True


def _build_file_proto() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto()
    file_proto.name = "gflights_scraper/search_token.proto"
    file_proto.package = _PACKAGE
    file_proto.syntax = "proto2"

    for enum_name, values in _ENUMS:
        enum = file_proto.enum_type.add()
        enum.name = enum_name
        for value_name, number in values:
            value = enum.value.add()
            value.name = value_name
            value.number = number

    airport = file_proto.message_type.add()
    airport.name = "Airport"
    _add_field(airport, "airport", 2, _FIELD.TYPE_STRING)

    flight_data = file_proto.message_type.add()
    flight_data.name = "FlightData"
    _add_field(flight_data, "date", 2, _FIELD.TYPE_STRING)
    _add_field(flight_data, "max_stops", 9, _FIELD.TYPE_INT32)
    _add_field(flight_data, "from_flight", 13, _FIELD.TYPE_MESSAGE, "Airport")
    _add_field(flight_data, "to_flight", 14, _FIELD.TYPE_MESSAGE, "Airport")

    info = file_proto.message_type.add()
    info.name = "Info"
    _add_field(info, "seat", 1, _FIELD.TYPE_ENUM, "Seat")
    _add_field(info, "data", 3, _FIELD.TYPE_MESSAGE, "FlightData", repeated=True)
    _add_field(info, "passengers", 6, _FIELD.TYPE_ENUM, "Passenger", repeated=True)
    _add_field(info, "trip", 19, _FIELD.TYPE_ENUM, "Trip")

    return file_proto


def get_info_class():
    """Get or build the message class for the search form"""
    global _info_class
    if _info_class is None:
        pool = descriptor_pool.DescriptorPool()
        pool.AddSerializedFile(_build_file_proto().SerializeToString())
        descriptor = pool.FindMessageTypeByName(f"{_PACKAGE}.Info")
        _info_class = message_factory.GetMessageClass(descriptor)
        logger.debug("Search token schema built")
    return _info_class


def build_passenger_list(
    adults: int, children: int, infants_in_seat: int, infants_on_lap: int
) -> List[int]:
    """Flat passenger tag list in the order the web front end emits it"""
    return (
        [PASSENGER_ADULT] * adults
        + [PASSENGER_CHILD] * children
        + [PASSENGER_INFANT_IN_SEAT] * infants_in_seat
        + [PASSENGER_INFANT_ON_LAP] * infants_on_lap
    )


def _add_leg(info: Message, date: str, origin: str, destination: str, max_stops: Optional[int]) -> None:
    leg = info.data.add()
    leg.date = date
    if max_stops is not None:
        leg.max_stops = max_stops
    leg.from_flight.airport = origin
    leg.to_flight.airport = destination


def build_search_message(criteria: SearchCriteria) -> Message:
    """Build the search form message for the given criteria"""
    info = get_info_class()()
    info.seat = SEAT_WIRE[criteria.seat_class]
    info.trip = TRIP_WIRE[criteria.trip_type]

    _add_leg(info, criteria.departure_date, criteria.origin, criteria.destination, criteria.max_stops)
    if criteria.trip_type == TripType.ROUND_TRIP and criteria.return_date:
        _add_leg(info, criteria.return_date, criteria.destination, criteria.origin, criteria.max_stops)

    info.passengers.extend(
        build_passenger_list(
            criteria.adults,
            criteria.children,
            criteria.infants_in_seat,
            criteria.infants_on_lap,
        )
    )
    return info


def build_search_token(criteria: SearchCriteria) -> str:
    """
    Encode search criteria as the `tfs` token.

    Airport codes are passed through untouched; Google rejects bad ones by
    returning an empty or blocked page.

    Returns:
        Unpadded base64url string
    """
    payload = build_search_message(criteria).SerializeToString()
    token = base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")
    logger.debug(
        f"Built search token for {criteria.origin} → {criteria.destination} "
        f"({len(payload)} bytes)"
    )
    return token


def decode_search_token(token: str) -> Message:
    """Decode a `tfs` token back into the search form message"""
    padding = "=" * (-len(token) % 4)
    return get_info_class().FromString(base64.urlsafe_b64decode(token + padding))

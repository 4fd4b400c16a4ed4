import base64
import re

import pytest

from gflights_scraper.encoder import (
    build_passenger_list,
    build_search_token,
    decode_search_token,
)
from gflights_scraper.models import SearchCriteria, SearchOptions, SeatClass, TripType


def _raw_bytes(token: str) -> bytes:
    return base64.urlsafe_b64decode(token + "=" * (-len(token) % 4))


def test_one_way_token_matches_front_end_bytes():
    token = build_search_token(
        SearchCriteria(origin="SFO", destination="LAX", departure_date="2026-11-03")
    )
    expected = (
        b"\x08\x01"  # seat = ECONOMY
        b"\x1a\x1a"  # data, 26 bytes
        b"\x12\x0a2026-11-03"
        b"\x6a\x05\x12\x03SFO"
        b"\x72\x05\x12\x03LAX"
        b"\x32\x01\x01"  # passengers, packed: [ADULT]
        b"\x98\x01\x02"  # trip = ONE_WAY
    )
    assert _raw_bytes(token) == expected


def test_token_is_unpadded_base64url():
    for adults in range(1, 10):
        token = build_search_token(
            SearchCriteria(
                origin="JFK",
                destination="NRT",
                departure_date="2026-12-24",
                return_date="2027-01-06",
                trip_type=TripType.ROUND_TRIP,
                seat_class=SeatClass.BUSINESS,
                adults=adults,
                children=2,
            )
        )
        assert re.fullmatch(r"[A-Za-z0-9_-]+", token), token


def test_round_trip_decodes_to_two_swapped_legs():
    criteria = SearchCriteria(
        origin="SFO",
        destination="LHR",
        departure_date="2026-11-03",
        return_date="2026-11-17",
        trip_type="round_trip",
        seat_class="premium_economy",
        adults=2,
        children=1,
    )
    info = decode_search_token(build_search_token(criteria))

    assert info.seat == 2
    assert info.trip == 1
    assert len(info.data) == 2
    outbound, inbound = info.data
    assert (outbound.date, outbound.from_flight.airport, outbound.to_flight.airport) == (
        "2026-11-03",
        "SFO",
        "LHR",
    )
    assert (inbound.date, inbound.from_flight.airport, inbound.to_flight.airport) == (
        "2026-11-17",
        "LHR",
        "SFO",
    )
    assert list(info.passengers) == [1, 1, 2]


def test_round_trip_without_return_date_has_single_leg():
    criteria = SearchCriteria(
        origin="SFO", destination="LAX", departure_date="2026-11-03", trip_type=TripType.ROUND_TRIP
    )
    info = decode_search_token(build_search_token(criteria))
    assert len(info.data) == 1
    assert info.trip == 1


@pytest.mark.parametrize(
    "seat_class,wire",
    [
        (SeatClass.ECONOMY, 1),
        (SeatClass.PREMIUM_ECONOMY, 2),
        (SeatClass.BUSINESS, 3),
        (SeatClass.FIRST, 4),
    ],
)
def test_seat_class_wire_values(seat_class, wire):
    criteria = SearchCriteria(
        origin="SFO", destination="LAX", departure_date="2026-11-03", seat_class=seat_class
    )
    assert decode_search_token(build_search_token(criteria)).seat == wire


def test_passengers_are_flattened_in_front_end_order():
    assert build_passenger_list(2, 1, 1, 2) == [1, 1, 2, 3, 4, 4]

    criteria = SearchCriteria(
        origin="SFO",
        destination="LAX",
        departure_date="2026-11-03",
        adults=1,
        children=2,
        infants_in_seat=1,
        infants_on_lap=1,
    )
    info = decode_search_token(build_search_token(criteria))
    assert list(info.passengers) == [1, 2, 2, 3, 4]


def test_max_stops_is_encoded_only_when_given():
    with_stops = decode_search_token(
        build_search_token(
            SearchCriteria(origin="SFO", destination="LAX", departure_date="2026-11-03", max_stops=1)
        )
    )
    assert with_stops.data[0].HasField("max_stops")
    assert with_stops.data[0].max_stops == 1

    without = decode_search_token(
        build_search_token(SearchCriteria(origin="SFO", destination="LAX", departure_date="2026-11-03"))
    )
    assert not without.data[0].HasField("max_stops")


def test_search_options_keep_stop_filter_out_of_token():
    options = SearchOptions(
        origin="SFO", destination="LAX", departure_date="2026-11-03", max_stops="nonstop"
    )
    info = decode_search_token(build_search_token(options.to_criteria()))
    assert not info.data[0].HasField("max_stops")


def test_airport_codes_are_passed_through_unvalidated():
    criteria = SearchCriteria(origin="not-an-airport", destination="x", departure_date="2026-11-03")
    info = decode_search_token(build_search_token(criteria))
    assert info.data[0].from_flight.airport == "not-an-airport"
    assert info.data[0].to_flight.airport == "x"


def test_same_criteria_give_same_token():
    criteria = SearchCriteria(origin="CDG", destination="FCO", departure_date="2026-11-03", adults=3)
    assert build_search_token(criteria) == build_search_token(criteria)

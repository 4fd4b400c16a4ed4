from urllib.parse import parse_qs, urlparse

import pytest
from conftest import FakeFetcher

from gflights_scraper.airports import (
    AirportResolver,
    extract_callback_airports,
    extract_data_code_airports,
    extract_script_airports,
    extract_search_page_airports,
    fallback_search_criteria,
    rank_airports,
    score_airport,
)
from gflights_scraper.encoder import decode_search_token
from gflights_scraper.models import AirportResult

CALLBACK_PAGE = (
    "<script>AF_initDataCallback({key: 'ds:0', data:[[[\"SFO\",0],\"San Francisco International Airport\","
    "[\"SFO\",\"/m/0d6lp\",\"San Francisco\"],\"US\"]]});</script>"
)

DATA_CODE_PAGE = (
    '<li role="option" aria-label="Heathrow Airport, London">'
    '<div class="ibnC6b" data-code="LHR">LHR</div></li>'
    + "<!-- " + "-" * 250 + " -->"
    '<li><div data-code="LGW"></div><span aria-label="Gatwick Airport">Gatwick</span></li>'
)

SCRIPT_PAGE = '<script>var a=[["ORD","O\'Hare International"],["MDW","Chicago Midway"]];</script>'

EMPTY_PAGE = "<html><body>No airports here</body></html>"

RESULTS_PAGE = (
    "AF_initDataCallback({key: 'ds:1', data:[[[\"NRT\",1],\"Narita International\"],"
    "[[\"HND\",1],\"Haneda Airport\"],[[\"NRT\",1],\"Narita International\"]]});"
)


def test_callback_strategy_finds_name_city_and_country():
    results = extract_callback_airports(CALLBACK_PAGE)
    assert results == [
        AirportResult(
            code="SFO",
            name="San Francisco International Airport",
            city="San Francisco",
            country="US",
        )
    ]


def test_callback_strategy_dedups_by_code():
    html = '["JFK",0],"John F. Kennedy International Airport" ["JFK",2],"JFK Airport Terminal 4"'
    results = extract_callback_airports(html)
    assert [r.name for r in results] == ["John F. Kennedy International Airport"]


def test_data_code_strategy_uses_nearby_aria_label():
    results = extract_data_code_airports(DATA_CODE_PAGE)
    assert [(r.code, r.name) for r in results] == [
        ("LHR", "Heathrow Airport, London"),
        ("LGW", "Gatwick Airport"),
    ]


def test_data_code_strategy_defaults_name_to_code():
    assert extract_data_code_airports('<div data-code="BER"></div>') == [AirportResult(code="BER", name="BER")]


def test_script_strategy():
    results = extract_script_airports(SCRIPT_PAGE)
    assert results == [AirportResult(code="ORD", name="O'Hare International")]


def test_search_page_strategy_accepts_broader_keywords():
    results = extract_search_page_airports(RESULTS_PAGE)
    assert [r.code for r in results] == ["NRT", "HND"]
    assert extract_callback_airports(RESULTS_PAGE)[0].code == "HND"


def test_scoring():
    sfo = AirportResult(code="SFO", name="San Francisco International Airport", city="San Francisco", country="US")
    assert score_airport(sfo, "SFO") == 150
    assert score_airport(sfo, "sf") == 50
    assert score_airport(sfo, "francisco") == 70
    assert score_airport(sfo, "us") == 10
    assert score_airport(sfo, "tokyo") == 0


def test_rank_drops_irrelevant_results():
    airports = [
        AirportResult(code="OAK", name="Oakland International Airport"),
        AirportResult(code="SFO", name="San Francisco International Airport"),
        AirportResult(code="SJC", name="San Jose Airport", city="San Francisco Bay Area"),
    ]
    ranked = rank_airports(airports, "san francisco")
    assert [a.code for a in ranked] == ["SJC", "SFO"]


def test_rank_keeps_everything_when_nothing_matches():
    airports = [AirportResult(code="OAK", name="Oakland"), AirportResult(code="SJC", name="San Jose")]
    assert rank_airports(airports, "zzz") == airports


def test_fallback_criteria():
    criteria = fallback_search_criteria("jfk")
    assert (criteria.origin, criteria.destination) == ("JFK", "LAX")
    assert fallback_search_criteria("tokyo").origin == "SFO"


@pytest.mark.asyncio
async def test_resolver_scenario_exact_code_ranks_first():
    fetcher = FakeFetcher(CALLBACK_PAGE)
    results = await AirportResolver(fetcher).resolve("SFO")

    assert len(results) == 1
    assert results[0].code == "SFO"
    assert score_airport(results[0], "SFO") >= 100
    assert not hasattr(results[0], "score")
    assert len(fetcher.urls) == 1
    assert parse_qs(urlparse(fetcher.urls[0]).query)["q"] == ["SFO"]


@pytest.mark.asyncio
async def test_resolver_stops_at_first_productive_strategy():
    fetcher = FakeFetcher(DATA_CODE_PAGE + SCRIPT_PAGE)
    results = await AirportResolver(fetcher).resolve("heathrow")
    assert [r.code for r in results] == ["LHR"]
    assert len(fetcher.urls) == 1


@pytest.mark.asyncio
async def test_resolver_falls_back_to_flight_search():
    fetcher = FakeFetcher(EMPTY_PAGE, RESULTS_PAGE)
    results = await AirportResolver(fetcher).resolve("nrt")

    assert [r.code for r in results] == ["NRT"]
    assert len(fetcher.urls) == 2
    params = parse_qs(urlparse(fetcher.urls[1]).query)
    info = decode_search_token(params["tfs"][0])
    assert info.data[0].from_flight.airport == "NRT"
    assert info.data[0].to_flight.airport == "LAX"
    assert params["curr"] == ["USD"]


@pytest.mark.asyncio
async def test_resolver_returns_empty_when_every_strategy_fails():
    fetcher = FakeFetcher(EMPTY_PAGE, EMPTY_PAGE)
    assert await AirportResolver(fetcher).resolve("atlantis") == []
    assert len(fetcher.urls) == 2

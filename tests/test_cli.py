import json
from pathlib import Path

import pytest
from curl_cffi.requests.errors import RequestsError

import gflights_scraper.cli as cli
from gflights_scraper.exceptions import BlockedError, ParseError
from gflights_scraper.models import AirportResult


@pytest.fixture
def no_logging(monkeypatch):
    # Avoid touching real log sinks during tests
    monkeypatch.setattr(cli, "setup_logging", lambda *a, **k: None)


@pytest.fixture
def fake_client(monkeypatch):
    """Replace GoogleFlightsClient and record what the CLI asks for"""
    calls = {}

    class FakeClient:
        error = None

        def __init__(self, *args, **kwargs):
            pass

        async def __aenter__(self):
            return self

        async def __aexit__(self, exc_type, exc, tb):
            return False

        async def search_flights(self, options):
            options.validate()
            if FakeClient.error:
                raise FakeClient.error
            calls["search"] = options
            return {"query": options.query_summary(), "total_results": 0, "flights": []}

        async def get_date_grid(self, options):
            calls["dates"] = options
            return {"date_grid": [], "cheapest": None, "currency": options.currency}

        async def find_airport_code(self, query):
            calls["airports"] = query
            return [AirportResult(code="SFO", name="San Francisco International Airport")]

    monkeypatch.setattr(cli, "GoogleFlightsClient", FakeClient)
    calls["client_class"] = FakeClient
    return calls


def test_search_command_builds_options(no_logging, fake_client, capsys):
    cli.main([
        "search",
        "--origin", "sfo",
        "--destination", "jfk",
        "--date", "2026-11-03",
        "--return-date", "2026-11-10",
        "--trip-type", "round_trip",
        "--seat", "business",
        "--adults", "2",
        "--children", "1",
        "--max-stops", "nonstop",
        "--sort-by", "price",
        "--max-results", "5",
        "--offset", "5",
        "--currency", "eur",
    ])

    options = fake_client["search"]
    assert (options.origin, options.destination) == ("SFO", "JFK")
    assert options.return_date == "2026-11-10"
    assert options.seat_class.value == "business"
    assert (options.adults, options.children) == (2, 1)
    assert options.max_stops == "nonstop"
    assert options.sort_by.value == "price"
    assert (options.max_results, options.offset, options.currency) == (5, 5, "EUR")

    printed = json.loads(capsys.readouterr().out)
    assert printed["query"]["origin"] == "SFO"


def test_dates_command_defaults(no_logging, fake_client, capsys):
    cli.main(["dates", "--origin", "SFO", "--destination", "LAX"])
    options = fake_client["dates"]
    assert options.departure_date is None
    assert options.currency == "USD"
    assert json.loads(capsys.readouterr().out) == {"date_grid": [], "cheapest": None, "currency": "USD"}


def test_airports_command_writes_output_file(no_logging, fake_client, capsys, tmp_path: Path):
    out = tmp_path / "nested" / "airports.json"
    cli.main(["airports", "San Francisco", "--output", str(out)])

    assert fake_client["airports"] == "San Francisco"
    expected = [{"code": "SFO", "name": "San Francisco International Airport", "city": "", "country": ""}]
    assert json.loads(capsys.readouterr().out) == expected
    assert json.loads(out.read_text()) == expected


@pytest.mark.parametrize("error", [BlockedError(), ParseError()])
def test_scraper_errors_exit_non_zero(no_logging, fake_client, error):
    fake_client["client_class"].error = error
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["search", "--origin", "SFO", "--destination", "LAX", "--date", "2026-11-03"])
    assert excinfo.value.code == 1


def test_invalid_options_exit_non_zero(no_logging, fake_client):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["search", "--origin", "SFO", "--destination", "LAX", "--date", "2026-11-03", "--trip-type", "round_trip"])
    assert excinfo.value.code == 1


def test_missing_subcommand_is_a_usage_error(no_logging):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 2


def test_transport_errors_exit_non_zero(no_logging, fake_client):
    fake_client["client_class"].error = RequestsError("Operation timed out")
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["search", "--origin", "SFO", "--destination", "LAX", "--date", "2026-11-03"])
    assert excinfo.value.code == 1

"""Command-line interface for the Google Flights scraper"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any, List, Optional

from loguru import logger

from . import __version__
from .api_client import GoogleFlightsClient
from .config import DEFAULT_CURRENCY, DEFAULT_MAX_RESULTS
from .exceptions import BlockedError, FlightsScraperError
from .logging_config import setup_logging
from .models import DateGridOptions, SearchOptions, SeatClass, SortKey, TripType
from .storage import dump_json, save_json

SEAT_CHOICES = [seat.value for seat in SeatClass]
TRIP_CHOICES = [trip.value for trip in TripType]
SORT_CHOICES = [key.value for key in SortKey]


def _add_route_arguments(parser: argparse.ArgumentParser) -> None:
    route_group = parser.add_argument_group("Route")
    route_group.add_argument("--origin", type=str, required=True, help="Origin airport code")
    route_group.add_argument("--destination", type=str, required=True, help="Destination airport code")
    route_group.add_argument(
        "--trip-type", type=str, default=TripType.ONE_WAY.value, choices=TRIP_CHOICES, help="Trip type"
    )
    route_group.add_argument(
        "--seat", type=str, default=SeatClass.ECONOMY.value, choices=SEAT_CHOICES, help="Cabin class"
    )
    route_group.add_argument("--adults", type=int, default=1, help="Number of adult passengers")
    route_group.add_argument(
        "--currency", type=str, default=DEFAULT_CURRENCY, help="Currency code for prices"
    )


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    output_group = common.add_argument_group("Output")
    output_group.add_argument("--output", type=str, help="Also write JSON results to this file")
    output_group.add_argument("--verbose", action="store_true", help="Debug logging")
    output_group.add_argument("--log-file", type=str, help="Log file path")

    parser = argparse.ArgumentParser(
        prog="gflights",
        description="Google Flights scraper - flight search, date grids and airport lookup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", parents=[common], help="Search flights")
    _add_route_arguments(search)
    search.add_argument("--date", type=str, required=True, help="Departure date (YYYY-MM-DD)")
    search.add_argument("--return-date", type=str, help="Return date for round trips (YYYY-MM-DD)")
    passenger_group = search.add_argument_group("Passengers")
    passenger_group.add_argument("--children", type=int, default=0, help="Number of children")
    passenger_group.add_argument(
        "--infants-in-seat", type=int, default=0, help="Number of infants with their own seat"
    )
    passenger_group.add_argument("--infants-on-lap", type=int, default=0, help="Number of lap infants")
    results_group = search.add_argument_group("Results")
    results_group.add_argument(
        "--max-stops", type=str, default="any", help="'any', 'nonstop' or a maximum number of stops"
    )
    results_group.add_argument(
        "--sort-by", type=str, default=SortKey.BEST.value, choices=SORT_CHOICES, help="Sort order"
    )
    results_group.add_argument(
        "--max-results", type=int, default=DEFAULT_MAX_RESULTS, help="Results per page (1-50)"
    )
    results_group.add_argument("--offset", type=int, default=0, help="Pagination offset")

    dates = subparsers.add_parser("dates", parents=[common], help="Cheapest price per departure date")
    _add_route_arguments(dates)
    dates.add_argument("--date", type=str, help="Anchor date (YYYY-MM-DD), defaults to a week out")

    airports = subparsers.add_parser("airports", parents=[common], help="Look up airport codes")
    airports.add_argument("query", type=str, help="City, airport name or code")

    return parser


async def execute(args: argparse.Namespace, client: GoogleFlightsClient) -> Any:
    """Run the selected command and return JSON-ready results"""
    if args.command == "search":
        options = SearchOptions(
            origin=args.origin.upper(),
            destination=args.destination.upper(),
            departure_date=args.date,
            return_date=args.return_date,
            trip_type=args.trip_type,
            seat_class=args.seat,
            adults=args.adults,
            children=args.children,
            infants_in_seat=args.infants_in_seat,
            infants_on_lap=args.infants_on_lap,
            max_stops=args.max_stops,
            sort_by=args.sort_by,
            max_results=args.max_results,
            offset=args.offset,
            currency=args.currency.upper(),
        )
        return await client.search_flights(options)

    if args.command == "dates":
        options = DateGridOptions(
            origin=args.origin.upper(),
            destination=args.destination.upper(),
            departure_date=args.date,
            trip_type=args.trip_type,
            seat_class=args.seat,
            adults=args.adults,
            currency=args.currency.upper(),
        )
        return await client.get_date_grid(options)

    airports = await client.find_airport_code(args.query)
    return [airport.to_dict() for airport in airports]


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, log_file=Path(args.log_file) if args.log_file else None)

    async def run():
        async with GoogleFlightsClient() as client:
            results = await execute(args, client)
        sys.stdout.write(dump_json(results).decode("utf-8") + "\n")
        if args.output:
            await save_json(results, Path(args.output))

    try:
        asyncio.run(run())
    except BlockedError as e:
        logger.error(f"🚫 {e} (suggested wait: {e.recommended_wait_minutes} min)")
        sys.exit(1)
    except FlightsScraperError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

"""
Command-line entry point for the booking engine.

Answers the two inbound requests locally, printing the JSON response.

Usage:
    Open slots:        python main.py slots
    Slots (fixtures):  python main.py slots --stub-data fixtures.json
    Booking request:   python main.py book request.json
    Booking (stubbed): python main.py book request.json --stub --ics-out booking.ics
"""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Mapping, Optional

from booking_engine.artifacts.calendar import decode_attachment
from booking_engine.config import configure_logging, load_config
from booking_engine.errors import BookingEngineError, ConfigurationError, UpstreamError, ValidationError
from booking_engine.service import handle_availability_query, handle_booking_request
from booking_engine.store.memory import InMemoryRecordStore

logger = logging.getLogger(__name__)


def _read_json(path: str) -> Mapping[str, Any]:
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    data = json.loads(file_path.read_text(encoding="utf-8"))
    if not isinstance(data, Mapping):
        raise ValidationError(f"Expected a JSON object in {file_path}")
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Check provider availability and decide booking requests."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging output.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    slots = commands.add_parser("slots", help="List bookable slots for the next horizon.")
    slots.add_argument(
        "--stub-data",
        type=str,
        default=None,
        help="JSON fixture with availability/bookings to use instead of Airtable.",
    )

    book = commands.add_parser("book", help="Decide a booking request read from a JSON file.")
    book.add_argument("request", type=str, help="Path to the booking request JSON body.")
    book.add_argument(
        "--stub",
        action="store_true",
        help="Use the request's stub* fields instead of Airtable.",
    )
    book.add_argument(
        "--ics-out",
        type=str,
        default=None,
        help="Write the calendar invite here when the booking is accepted.",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = load_config()
    except ConfigurationError as exc:
        sys.stderr.write(f"Configuration error: {exc}\n")
        return 1
    if args.verbose:
        config = replace(config, log_level="DEBUG")
    configure_logging(config)

    try:
        if args.command == "slots":
            store = None
            if args.stub_data:
                store = InMemoryRecordStore.from_fixture(_read_json(args.stub_data))
            output = handle_availability_query(config, store=store)
        else:
            if args.stub:
                config = replace(config, store=replace(config.store, use_stub=True))
            response = handle_booking_request(_read_json(args.request), config)
            output = response.body
            if args.ics_out and response.attachment is not None:
                Path(args.ics_out).write_text(decode_attachment(response.attachment), encoding="utf-8")
                logger.info("Calendar invite written to %s", args.ics_out)
    except (ConfigurationError, UpstreamError) as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1
    except (FileNotFoundError, json.JSONDecodeError, BookingEngineError) as exc:
        logger.error("Could not process request: %s", exc)
        return 1

    sys.stdout.write(json.dumps(output, indent=2) + "\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())

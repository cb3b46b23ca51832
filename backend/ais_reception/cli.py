#!/usr/bin/env python3
"""
AIS reception statistics from receiver logs.

Usage:
    ais-reception <file.json | file.json.xz | directory> [options]

Examples:
    ais-reception data.json --display --apikey YOUR_KEY
    ais-reception data.json --display --apikey YOUR_KEY --min-distance 5
    ais-reception logs/ --exclude 2320752,235054667
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from ais_reception.api.map_page import DEFAULT_PORT
from ais_reception.services.analysis import run_analysis
from ais_reception.services.ingest import IngestOptions, default_station
from ais_reception.services.record_parser import IngestError
from ais_reception.services.report import render_report


logger = logging.getLogger(__name__)


API_KEY_ENV = "AIS_MAP_API_KEY"


def parse_mmsi_list(value: str) -> frozenset[int]:
    """Comma-separated MMSIs -> set of ints."""
    mmsis = set()
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            mmsis.add(int(part))
        except ValueError:
            raise argparse.ArgumentTypeError(f"invalid MMSI: {part!r}")
    return frozenset(mmsis)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ais-reception",
        description="Reception statistics and beam width analysis for AIS receiver logs",
    )
    parser.add_argument(
        "input_path",
        nargs="?",
        help="Log file (*.json, *.json.xz) or directory searched recursively",
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Show debug information, including records beyond the distance ceiling",
    )
    parser.add_argument(
        "--display",
        nargs="?",
        type=int,
        const=DEFAULT_PORT,
        default=None,
        metavar="PORT",
        help=f"Start map server (default port: {DEFAULT_PORT})",
    )
    parser.add_argument(
        "--apikey",
        default=None,
        help=f"Google Maps API key (required for --display; default: ${API_KEY_ENV})",
    )
    parser.add_argument(
        "--server",
        choices=["fastapi", "flask"],
        default="fastapi",
        help="Web framework for the map server (default: fastapi)",
    )
    parser.add_argument(
        "--min-distance",
        type=float,
        default=0.0,
        metavar="NM",
        help="Only analyze signals at or beyond this distance",
    )
    parser.add_argument(
        "--max-distance",
        type=float,
        default=0.0,
        metavar="NM",
        help="Only analyze signals at or within this distance",
    )
    parser.add_argument(
        "--exclude",
        type=parse_mmsi_list,
        default=frozenset(),
        metavar="MMSI,MMSI,...",
        help="Exclude specific MMSIs",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.input_path:
        parser.print_help()
        return 1

    api_key = args.apikey or os.getenv(API_KEY_ENV)
    if args.display is not None and not api_key:
        print("Error: --apikey is required when using --display", file=sys.stderr)
        return 1

    input_path = Path(args.input_path)
    if not input_path.exists():
        print(f"Error: input path does not exist: {input_path}", file=sys.stderr)
        parser.print_usage()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.exclude:
        logger.info(f"Excluding MMSIs: {', '.join(str(m) for m in sorted(args.exclude))}")

    options = IngestOptions(
        station=default_station(),
        exclude=args.exclude,
        debug=args.debug,
    )

    try:
        result = run_analysis(
            input_path,
            options,
            min_distance=args.min_distance,
            max_distance=args.max_distance,
        )
    except (IngestError, ValueError) as e:
        logger.error(str(e))
        return 1

    print(render_report(result, debug=args.debug, max_reasonable_distance=options.max_reasonable_distance))

    if args.display is not None:
        if args.server == "flask":
            from ais_reception.flask_app import serve_map
        else:
            from ais_reception.main import serve_map
        serve_map(result, api_key, port=args.display)

    return 0


if __name__ == "__main__":
    sys.exit(main())

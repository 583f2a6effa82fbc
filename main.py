from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

try:
    from .api_client import StationAPIClient, StationRepository  # type: ignore[attr-defined]
    from .config import API_BASE_URL, REQUEST_TIMEOUT_SECONDS  # type: ignore[attr-defined]
    from .ranking import Coordinate, StationRanker, stations_to_frame  # type: ignore[attr-defined]
except ImportError:
    from api_client import StationAPIClient, StationRepository  # type: ignore
    from config import API_BASE_URL, REQUEST_TIMEOUT_SECONDS  # type: ignore
    from ranking import Coordinate, StationRanker, stations_to_frame  # type: ignore

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="List air-quality monitoring stations, nearest first"
    )
    parser.add_argument("--lat", type=float, help="Observer latitude (degrees)")
    parser.add_argument("--lon", type=float, help="Observer longitude (degrees)")
    parser.add_argument(
        "--url",
        default=API_BASE_URL,
        help=f"Station endpoint (default: {API_BASE_URL})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=REQUEST_TIMEOUT_SECONDS,
        help="Request timeout in seconds",
    )
    parser.add_argument("--limit", type=int, default=None, help="Show only the first N stations")
    parser.add_argument("--json", action="store_true", help="Print JSON records instead of a table")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    observer = Coordinate(latitude=args.lat, longitude=args.lon) if args.lat is not None else None

    client = StationAPIClient(args.url, timeout=args.timeout)
    try:
        result = StationRepository(client).fetch()
    finally:
        client.close()

    if not result.ok:
        print(f"Error: {result.error}", file=sys.stderr)
        return 1

    ranked = StationRanker().rank(result.stations, observer)
    if args.limit is not None:
        ranked = ranked[: max(args.limit, 0)]

    frame = stations_to_frame(ranked, observer)
    if args.json:
        print(json.dumps(frame.to_dict(orient="records"), ensure_ascii=False, indent=2))
    elif frame.empty:
        print("No stations returned.")
    else:
        print(frame.to_string(index=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
locc CLI entrypoint.

Subcommands:
- `loc`:  place name -> `lon,lat`
- `rev`:  `lon,lat` -> place display name
- `dis`:  great-circle distance between two locations, in metres
- `rnd`:  random point within a radius (km) of a place or location
- `bbox`: `sw=lon,lat&ne=lon,lat` box with the given edge length (km)
- `dst`:  point reached from a place or location along a bearing (degrees) and distance (km)

Results go to stdout; errors go to stderr with a non-zero exit status. The geodesic math
lives in `locc.core.geo` and knows nothing about argument parsing or HTTP.
"""

from __future__ import annotations

import argparse
import logging
import math
import random
import sys
from typing import Any

import yaml

from locc import __version__
from locc.config.settings import get_settings
from locc.core.geo import Point, bbox, destination, distance, normalize_bearing, random_point
from locc.core.logging import configure_logging
from locc.formatting import format_bbox, format_distance_m, format_point
from locc.geocoding.nominatim import (
    LocationFound,
    NominatimClient,
    NotFound,
    PlaceFound,
)

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """A user-facing failure; the message is printed to stderr and the CLI exits 1."""


def _parse_location(value: str) -> Point:
    """Parse `LON,LAT` into a `Point` (argparse `type=` callable)."""
    parts = value.split(",")
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"expected LON,LAT, got {value!r}")
    try:
        lon, lat = float(parts[0]), float(parts[1])
    except ValueError:
        raise argparse.ArgumentTypeError(f"could not parse {value!r} as LON,LAT floats") from None
    if not (math.isfinite(lon) and math.isfinite(lat)):
        raise argparse.ArgumentTypeError(f"coordinates must be finite, got {value!r}")
    if not -90 <= lat <= 90:
        raise argparse.ArgumentTypeError(f"latitude must be within [-90, 90], got {lat}")
    return Point(lon=lon, lat=lat)


def _finite_float(value: str) -> float:
    """Parse a finite float (argparse `type=` callable)."""
    try:
        out = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"could not parse {value!r} as a number") from None
    if not math.isfinite(out):
        raise argparse.ArgumentTypeError(f"must be finite, got {value!r}")
    return out


def _non_negative_km(value: str) -> float:
    """Parse a finite, non-negative kilometre value (argparse `type=` callable)."""
    try:
        km = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"could not parse {value!r} as a number") from None
    if not math.isfinite(km) or km < 0:
        raise argparse.ArgumentTypeError(f"must be a finite, non-negative number, got {value!r}")
    return km


def _search_point(client: NominatimClient, place: str) -> Point:
    result = client.search(place)
    if isinstance(result, LocationFound):
        return result.point
    if isinstance(result, NotFound):
        raise CommandError(f"No result found for {result.query!r}")
    raise CommandError(result.message)


def _resolve_center(args: argparse.Namespace) -> Point:
    """Return the `-L` location, or geocode `-P` when a place name was given."""
    if args.location is not None:
        return args.location
    return _search_point(NominatimClient(get_settings()), args.place)


def _cmd_loc(args: argparse.Namespace) -> str:
    point = _search_point(NominatimClient(get_settings()), args.place)
    return format_point(point, wrap=False)


def _cmd_rev(args: argparse.Namespace) -> str:
    result = NominatimClient(get_settings()).reverse(args.location)
    if isinstance(result, PlaceFound):
        return result.display_name
    if isinstance(result, NotFound):
        raise CommandError(f"No place found at {result.query}")
    raise CommandError(result.message)


def _cmd_dis(args: argparse.Namespace) -> str:
    if len(args.location) != 2:
        raise CommandError(f"dis needs exactly two -L/--location values, got {len(args.location)}")
    a, b = args.location
    return format_distance_m(distance(a, b))


def _cmd_rnd(args: argparse.Namespace) -> str:
    center = _resolve_center(args)
    rng = random.Random(args.seed)
    point = random_point(center, args.radius, rng)
    logger.debug("rnd center=%s radius_km=%s -> %s", center, args.radius, point)
    return format_point(point)


def _cmd_bbox(args: argparse.Namespace) -> str:
    center = _resolve_center(args)
    sw, ne = bbox(center, args.length)
    return format_bbox(sw, ne)


def _cmd_dst(args: argparse.Namespace) -> str:
    center = _resolve_center(args)
    logger.debug(
        "dst center=%s bearing=%.6f distance_km=%s", center, normalize_bearing(args.bearing), args.distance
    )
    return format_point(destination(center, args.bearing, args.distance))


_LOCATION_HELP = "Coordinates in degrees; write --location=LON,LAT when the longitude is negative"


def _add_center_args(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("-P", "--place", type=str, help="Place name to geocode")
    group.add_argument(
        "-L",
        "--location",
        type=_parse_location,
        metavar="LON,LAT",
        help=_LOCATION_HELP,
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the locc CLI."""
    parser = argparse.ArgumentParser(prog="locc", description="Geolocation utilities on top of Nominatim.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="Override the configured log level (e.g. DEBUG)")
    sub = parser.add_subparsers(dest="command", required=True)

    loc = sub.add_parser("loc", help="Get the coordinates of a place.")
    loc.add_argument("-P", "--place", required=True, type=str)
    loc.set_defaults(func=_cmd_loc)

    rev = sub.add_parser("rev", help="Get the name of the place at a location.")
    rev.add_argument(
        "-L", "--location", required=True, type=_parse_location, metavar="LON,LAT", help=_LOCATION_HELP
    )
    rev.set_defaults(func=_cmd_rev)

    dis = sub.add_parser("dis", help="Great-circle distance between two locations, in metres.")
    dis.add_argument(
        "-L",
        "--location",
        required=True,
        action="append",
        type=_parse_location,
        metavar="LON,LAT",
        help="Give exactly twice. " + _LOCATION_HELP,
    )
    dis.set_defaults(func=_cmd_dis)

    rnd = sub.add_parser("rnd", help="Random point within a radius of a place or location.")
    _add_center_args(rnd)
    rnd.add_argument("-R", "--radius", required=True, type=_non_negative_km, help="Radius in km")
    rnd.add_argument("--seed", type=int, default=None, help="Seed for reproducible output")
    rnd.set_defaults(func=_cmd_rnd)

    box = sub.add_parser("bbox", help="Bounding box around a place or location.")
    _add_center_args(box)
    box.add_argument("--length", required=True, type=_non_negative_km, help="Edge length in km")
    box.set_defaults(func=_cmd_bbox)

    dst = sub.add_parser("dst", help="Point reached from a place or location along a bearing.")
    _add_center_args(dst)
    dst.add_argument("-B", "--bearing", required=True, type=_finite_float, help="Degrees clockwise from north")
    dst.add_argument("-D", "--distance", required=True, type=_non_negative_km, help="Distance in km")
    dst.set_defaults(func=_cmd_dst)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m locc.cli` and the `locc` script."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(args.log_level)
    except (ValueError, OSError, yaml.YAMLError) as exc:
        print(f"locc: invalid configuration: {exc}", file=sys.stderr)
        return 1
    func: Any = getattr(args, "func")
    try:
        output = func(args)
    except (CommandError, ValueError) as exc:
        print(f"locc {args.command}: {exc}", file=sys.stderr)
        return 1
    print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

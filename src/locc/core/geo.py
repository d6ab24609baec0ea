from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

"""
Spherical geodesy helpers.

Everything here is pure math on a spherical earth of radius `EARTH_RADIUS_KM`:
- `destination`: the direct problem (start, bearing, distance -> end point)
- `distance`: haversine great-circle distance
- `bbox`: SW/NE corners of a square around a center
- `random_point`: area-uniform sample inside a disc around a center

Units are degrees for angles and kilometres for lengths. Nothing in this module
wraps longitudes; callers that print coordinates wrap them at the boundary
(`wrap_longitude`), so chained projections never accumulate wrap-around error.
"""

EARTH_RADIUS_KM = 6373.0


@dataclass(frozen=True)
class Point:
    """A longitude/latitude pair in decimal degrees."""

    lon: float
    lat: float


class RandomSource(Protocol):
    """Source of uniform floats, e.g. `random.Random`.

    Implementations shared between threads must serialize access themselves.
    """

    def random(self) -> float: ...

    def uniform(self, a: float, b: float) -> float: ...


def normalize_bearing(bearing_deg: float) -> float:
    """Reduce a bearing to [0, 360). In-range bearings are returned unchanged."""
    if 0.0 <= bearing_deg < 360.0:
        return bearing_deg
    out = math.fmod(bearing_deg, 360.0)
    if out < 0:
        out += 360.0
    # fmod of a tiny negative value can round up to exactly 360.
    return 0.0 if out >= 360.0 else out


def wrap_longitude(lon_deg: float) -> float:
    """Wrap a longitude into [-180, 180). In-range longitudes are returned unchanged."""
    if -180.0 <= lon_deg < 180.0:
        return lon_deg
    out = math.fmod(lon_deg + 180.0, 360.0)
    if out < 0:
        out += 360.0
    return (0.0 if out >= 360.0 else out) - 180.0


def _check_point(point: Point) -> None:
    if not (math.isfinite(point.lon) and math.isfinite(point.lat)):
        raise ValueError(f"point must have finite coordinates, got {point!r}")


def _check_length(name: str, value: float) -> None:
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"{name} must be a finite, non-negative number of kilometres, got {value!r}")


def _clamp_unit(x: float) -> float:
    return max(-1.0, min(1.0, x))


def destination(point: Point, bearing_deg: float, distance_km: float) -> Point:
    """Project `point` along `bearing_deg` (clockwise from north) for `distance_km`.

    The bearing may be any finite real; sin/cos make it periodic. The result's
    longitude is not wrapped into [-180, 180).

    Raises:
        ValueError: For non-finite coordinates/bearing or a negative/non-finite distance.
    """
    _check_point(point)
    _check_length("distance_km", distance_km)
    if not math.isfinite(bearing_deg):
        raise ValueError(f"bearing_deg must be finite, got {bearing_deg!r}")

    lat1 = math.radians(point.lat)
    lon1 = math.radians(point.lon)
    theta = math.radians(bearing_deg)
    delta = distance_km / EARTH_RADIUS_KM

    lat2 = math.asin(
        _clamp_unit(math.sin(lat1) * math.cos(delta) + math.cos(lat1) * math.sin(delta) * math.cos(theta))
    )
    lon2 = lon1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(lat1),
        math.cos(delta) - math.sin(lat1) * math.sin(lat2),
    )
    return Point(lon=math.degrees(lon2), lat=math.degrees(lat2))


def distance(a: Point, b: Point) -> float:
    """Great-circle distance in kilometres between two points (haversine)."""
    _check_point(a)
    _check_point(b)

    lat1 = math.radians(a.lat)
    lon1 = math.radians(a.lon)
    lat2 = math.radians(b.lat)
    lon2 = math.radians(b.lon)

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def bbox(center: Point, edge_length_km: float) -> tuple[Point, Point]:
    """Return `(sw, ne)` corners of a square with the given edge length around `center`.

    The corners are projected along the 225° and 45° diagonals, so the box is square in
    bearing space only. Near the poles, or when the box crosses the ±180° meridian, the
    corners no longer bracket the center (sw may end up east of ne).
    """
    _check_length("edge_length_km", edge_length_km)
    half_diagonal = edge_length_km * math.sqrt(2) / 2
    sw = destination(center, 225.0, half_diagonal)
    ne = destination(center, 45.0, half_diagonal)
    return sw, ne


def random_point(center: Point, radius_km: float, rng: RandomSource) -> Point:
    """Sample a point uniformly by area from the disc of `radius_km` around `center`.

    The radius is drawn as `radius_km * sqrt(u)`: the area element grows with r, so a
    uniform r would crowd samples towards the center.
    """
    _check_length("radius_km", radius_km)
    r = radius_km * math.sqrt(rng.random())
    bearing = rng.uniform(0.0, 360.0)
    return destination(center, bearing, r)

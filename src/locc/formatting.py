"""
Output formatting helpers.

Used by the CLI to render core results as single lines on stdout. This is the only
place longitudes are wrapped into [-180, 180).
"""

from __future__ import annotations

from locc.core.geo import Point, wrap_longitude


def format_point(point: Point, *, wrap: bool = True) -> str:
    """Render `lon,lat`."""
    lon = wrap_longitude(point.lon) if wrap else point.lon
    return f"{lon},{point.lat}"


def format_distance_m(distance_km: float) -> str:
    """Render a kilometre distance as whole metres."""
    return f"{distance_km * 1000:.0f}"


def format_bbox(sw: Point, ne: Point) -> str:
    """Render `sw=lon,lat&ne=lon,lat` (ready to paste into a query string)."""
    return f"sw={format_point(sw)}&ne={format_point(ne)}"

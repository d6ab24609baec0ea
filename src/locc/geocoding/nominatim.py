"""
Geocoding client (OpenStreetMap Nominatim).

Two lookups are supported:
- `search`: place name -> coordinates (first hit only)
- `reverse`: coordinates -> display name

Outcomes are returned as small tagged result values instead of raised exceptions, so
the CLI can map each case to a message and exit status without try/except ladders:
`LocationFound | NotFound | TransportError` and `PlaceFound | NotFound | TransportError`.

Nominatim asks clients to identify themselves; every request carries the configured
`User-Agent`. There is no caching or retrying here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Union

import httpx
from pydantic import ValidationError

from locc.config.settings import Settings
from locc.core.geo import Point
from locc.core.http import get_json
from locc.domain.models import NominatimLocation, NominatimPlace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocationFound:
    point: Point
    display_name: str | None = None


@dataclass(frozen=True)
class PlaceFound:
    display_name: str


@dataclass(frozen=True)
class NotFound:
    query: str


@dataclass(frozen=True)
class TransportError:
    message: str


SearchResult = Union[LocationFound, NotFound, TransportError]
ReverseResult = Union[PlaceFound, NotFound, TransportError]


class NominatimClient:
    """Thin wrapper around the Nominatim `/search` and `/reverse` endpoints."""

    def __init__(self, settings: Settings):
        self._settings = settings

    def _get(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self._settings.nominatim.base_url.rstrip('/')}/{path}"
        return get_json(
            url,
            params=params,
            timeout_seconds=self._settings.app.http_timeout_seconds,
            headers={"User-Agent": self._settings.app.user_agent},
        )

    def search(self, place_name: str) -> SearchResult:
        """Resolve `place_name` to the coordinates of Nominatim's best match."""
        params = {
            "format": self._settings.nominatim.search_format,
            "q": place_name,
            "limit": self._settings.nominatim.search_limit,
        }
        logger.info("Searching Nominatim for %r", place_name)
        try:
            payload = self._get("search", params)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Nominatim search for %r failed: %s", place_name, exc)
            return TransportError(f"Search request failed: {exc}")

        if not isinstance(payload, list):
            return TransportError(f"Unexpected search response of type {type(payload).__name__}")
        if not payload:
            return NotFound(place_name)

        try:
            first = NominatimLocation.model_validate(payload[0])
        except ValidationError as exc:
            logger.warning("Malformed Nominatim search result for %r: %s", place_name, exc)
            return TransportError(f"Malformed search result: {exc.error_count()} validation error(s)")
        return LocationFound(point=first.to_point(), display_name=first.display_name)

    def reverse(self, point: Point) -> ReverseResult:
        """Resolve `point` to the display name of the closest Nominatim object."""
        params = {
            "format": self._settings.nominatim.reverse_format,
            "lon": point.lon,
            "lat": point.lat,
        }
        query = f"{point.lon},{point.lat}"
        logger.info("Reverse geocoding %s", query)
        try:
            payload = self._get("reverse", params)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Nominatim reverse lookup for %s failed: %s", query, exc)
            return TransportError(f"Reverse request failed: {exc}")

        if not isinstance(payload, dict):
            return TransportError(f"Unexpected reverse response of type {type(payload).__name__}")
        # e.g. {"error": "Unable to geocode"} for points in the open ocean.
        if "error" in payload:
            return NotFound(query)

        try:
            place = NominatimPlace.model_validate(payload)
        except ValidationError as exc:
            logger.warning("Malformed Nominatim reverse result for %s: %s", query, exc)
            return TransportError(f"Malformed reverse result: {exc.error_count()} validation error(s)")
        return PlaceFound(display_name=place.display_name)

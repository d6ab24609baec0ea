"""
Domain models (Pydantic).

These types describe the JSON payloads returned by the Nominatim geocoding service.
Validating them here means the geocoding client never has to poke at loosely-typed
dicts: a payload either parses into one of these models or is reported as malformed.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from locc.core.geo import Point


class NominatimLocation(BaseModel):
    """One entry of a `/search` response. Nominatim serializes coordinates as strings."""

    model_config = ConfigDict(extra="ignore")

    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)
    display_name: str | None = None

    def to_point(self) -> Point:
        return Point(lon=self.lon, lat=self.lat)


class NominatimPlace(BaseModel):
    """A `/reverse` response."""

    model_config = ConfigDict(extra="ignore")

    display_name: str

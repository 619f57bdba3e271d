"""Free-text place search resolved to a single coordinate.

Resolution order:
1. Coordinates typed directly into the query ("13.75, 100.50"), no network
2. ArcGIS World Geocoding: robust for addresses and specific places
3. Photon (Komoot): fuzzy search, tolerant of typos, OSM based
4. Nominatim (OpenStreetMap): strict canonical search

Providers run one after another; the first with a usable result wins and
the rest are skipped. A provider that errors is logged and skipped.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Optional

import httpx
from pydantic import ValidationError

from app.config import Settings, get_settings
from app.models import Location, NotFound

logger = logging.getLogger(__name__)

# "13.75, 100.50", "13.75 100.50", "Lat: 13.75 Lng: 100.50"
COORDINATE_PATTERN = re.compile(
    r"(?<![\d.])([-+]?\d{1,2}\.\d+)(?:\s*,\s*|\s+)(?:[A-Za-z]+\s*:\s*)?([-+]?\d{1,3}\.\d+)(?![\d.])"
)


def parse_coordinates(query: str) -> Optional[Location]:
    """Extract a ``lat, lng`` pair from the query if one is present and in range."""
    match = COORDINATE_PATTERN.search(query.strip())
    if not match:
        return None
    try:
        return Location(lat=float(match.group(1)), lng=float(match.group(2)))
    except ValidationError:
        return None


class GeocodingProvider(ABC):
    """One external place-search service."""

    name: str

    @abstractmethod
    async def lookup(self, client: httpx.AsyncClient, query: str) -> Optional[Location]:
        """Return the top-ranked match or None when the service has nothing."""
        pass


class ArcGISProvider(GeocodingProvider):
    name = "ArcGIS"

    def __init__(self, url: str) -> None:
        self._url = url

    async def lookup(self, client: httpx.AsyncClient, query: str) -> Optional[Location]:
        response = await client.get(
            self._url,
            params={"f": "json", "singleLine": query, "maxLocations": 1},
        )
        response.raise_for_status()
        candidates = response.json().get("candidates") or []
        if not candidates:
            return None
        location = candidates[0]["location"]
        return Location(lat=float(location["y"]), lng=float(location["x"]))


class PhotonProvider(GeocodingProvider):
    name = "Photon"

    def __init__(self, url: str) -> None:
        self._url = url

    async def lookup(self, client: httpx.AsyncClient, query: str) -> Optional[Location]:
        response = await client.get(self._url, params={"q": query, "limit": 1})
        response.raise_for_status()
        features = response.json().get("features") or []
        if not features:
            return None
        # GeoJSON order is [lng, lat]
        lng, lat = features[0]["geometry"]["coordinates"][:2]
        return Location(lat=float(lat), lng=float(lng))


class NominatimProvider(GeocodingProvider):
    name = "Nominatim"

    def __init__(self, url: str) -> None:
        self._url = url

    async def lookup(self, client: httpx.AsyncClient, query: str) -> Optional[Location]:
        response = await client.get(
            self._url, params={"q": query, "format": "json", "limit": 1}
        )
        response.raise_for_status()
        results = response.json()
        if not results:
            return None
        return Location(lat=float(results[0]["lat"]), lng=float(results[0]["lon"]))


class GeocodingService:
    """Resolve a query via direct parsing, then a fixed-priority provider chain."""

    def __init__(
        self,
        providers: list[GeocodingProvider] | None = None,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._providers = providers if providers is not None else [
            ArcGISProvider(self._settings.arcgis_url),
            PhotonProvider(self._settings.photon_url),
            NominatimProvider(self._settings.nominatim_url),
        ]
        self._transport = transport

    @property
    def providers(self) -> list[GeocodingProvider]:
        return list(self._providers)

    async def resolve(self, query: str) -> Location:
        """Resolve ``query`` to a coordinate or raise ``NotFound``."""
        trimmed = query.strip()
        if not trimmed:
            raise NotFound()

        direct = parse_coordinates(trimmed)
        if direct is not None:
            logger.info(f"[GEOCODE] Parsed coordinates from query: ({direct.lat}, {direct.lng})")
            return direct

        async with httpx.AsyncClient(
            timeout=self._settings.http_timeout,
            headers={"User-Agent": self._settings.user_agent},
            transport=self._transport,
        ) as client:
            for provider in self._providers:
                try:
                    location = await provider.lookup(client, trimmed)
                except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
                    # ValidationError is a ValueError: out-of-range coordinates count as a miss
                    logger.warning(f"[GEOCODE] {provider.name} search failed, falling back: {e}")
                    continue
                if location is not None:
                    logger.info(f"[GEOCODE] {provider.name} resolved '{trimmed}' to ({location.lat:.5f}, {location.lng:.5f})")
                    return location
                logger.info(f"[GEOCODE] {provider.name} had no results for '{trimmed}'")

        logger.info(f"[GEOCODE] No provider could resolve '{trimmed}'")
        raise NotFound()

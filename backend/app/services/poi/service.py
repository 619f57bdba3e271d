"""Nearby-place analysis around a center point.

Two interchangeable backends produce the same ``AnalysisResult``:
- OverpassPOIAnalyzer:   real OpenStreetMap features, classified by tags,
                         default popularity, static area name/summary
- GenerativePOIAnalyzer: places estimated by the AI provider, with
                         popularity/rating/reviews and a written summary

Both bucket places into seven categories. A place lands in exactly one
bucket, buckets keep discovery order and are capped at 10 items.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

import httpx

from app.config import Settings, get_settings
from app.models import (
    CATEGORY_KEYS,
    AnalysisFailed,
    AnalysisResult,
    Location,
    PlaceItem,
)
from app.services.ai_reasoning import AIReasoningService
from app.utils.geo import format_distance, haversine_distance
from app.utils.locale import SECONDARY_NAME_TAG, text

logger = logging.getLogger(__name__)

OSM_SOURCE = "osm"

# Overpass filters requested around the center point
OVERPASS_FILTERS = [
    '["amenity"]',
    '["shop"]',
    '["leisure"]',
    '["public_transport"]',
    '["railway"="station"]',
    '["highway"="bus_stop"]',
    '["office"="government"]',
    '["building"="apartments"]',
    '["landuse"="residential"]',
]

CONVENIENCE_CHAINS = [
    "7-eleven",
    "7-11",
    "เซเว่น",
    "lotus's go fresh",
    "โลตัส โก เฟรช",
    "mini big c",
    "มินิ บิ๊กซี",
    "cj express",
    "cj more",
    "familymart",
    "แฟมิลี่มาร์ท",
    "tops daily",
    "lawson",
]


def _is_residential(tags: dict) -> bool:
    return (
        tags.get("landuse") == "residential"
        or tags.get("building") in ("apartments", "residential", "dormitory")
        or tags.get("residential") is not None
    )


def _is_convenience(tags: dict) -> bool:
    if tags.get("shop") == "convenience":
        return True
    names = " ".join(
        value for key, value in tags.items() if key == "name" or key.startswith("name:") or key == "brand"
    ).lower()
    return any(chain in names for chain in CONVENIENCE_CHAINS)


def _is_shopping(tags: dict) -> bool:
    return (
        tags.get("shop") in ("supermarket", "mall", "department_store")
        or tags.get("amenity") == "marketplace"
    )


def _is_food(tags: dict) -> bool:
    return tags.get("amenity") in ("restaurant", "cafe", "fast_food", "food_court")


def _is_transport(tags: dict) -> bool:
    return (
        tags.get("public_transport") is not None
        or tags.get("railway") == "station"
        or tags.get("highway") == "bus_stop"
        or tags.get("amenity") == "bus_station"
    )


def _is_recreation(tags: dict) -> bool:
    return tags.get("leisure") in (
        "park",
        "fitness_centre",
        "sports_centre",
        "stadium",
        "pitch",
        "playground",
    )


def _is_public_service(tags: dict) -> bool:
    return (
        tags.get("amenity") in ("post_office", "police", "hospital", "clinic", "townhall")
        or tags.get("office") == "government"
    )


# Evaluated top to bottom, first match wins
CATEGORY_RULES: list[tuple[str, Callable[[dict], bool]]] = [
    ("residential", _is_residential),
    ("convenience", _is_convenience),
    ("shopping", _is_shopping),
    ("food", _is_food),
    ("transport", _is_transport),
    ("recreation", _is_recreation),
    ("public_service", _is_public_service),
]


def classify(tags: dict) -> Optional[str]:
    """Return the single category for a feature's tags, or None to drop it."""
    for category, predicate in CATEGORY_RULES:
        if predicate(tags):
            return category
    return None


def display_name(tags: dict, locale: str = "th") -> str:
    """Localized name, then generic name, then the other language, then a fallback."""
    for key in (f"name:{locale}", "name", SECONDARY_NAME_TAG.get(locale, "name:en")):
        value = (tags.get(key) or "").strip()
        if value:
            return value
    return text(locale, "unnamed_place")


def _empty_buckets() -> dict[str, list[PlaceItem]]:
    return {key: [] for key in CATEGORY_KEYS}


class POIAnalyzer(ABC):
    """Given a center and radius, produce an ``AnalysisResult``."""

    @abstractmethod
    async def analyze(self, center: Location, radius_m: float) -> AnalysisResult:
        pass


class OverpassPOIAnalyzer(POIAnalyzer):
    """OpenStreetMap Overpass implementation.

    Issues one Overpass query per call. Any transport or parse problem
    surfaces as ``AnalysisFailed``.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport

    def build_query(self, center: Location, radius_m: float) -> str:
        """Build Overpass QL for all tag filters within the radius."""
        around = f"(around:{radius_m:.0f},{center.lat},{center.lng})"
        lines = []
        for tag_filter in OVERPASS_FILTERS:
            lines.append(f"  node{tag_filter}{around};")
            lines.append(f"  way{tag_filter}{around};")
        return f"""
[out:json][timeout:25];
(
{chr(10).join(lines)}
);
out center;
"""

    async def _fetch_elements(self, center: Location, radius_m: float) -> list[dict]:
        query = self.build_query(center, radius_m)
        async with httpx.AsyncClient(
            timeout=self._settings.http_timeout,
            headers={"User-Agent": self._settings.user_agent},
            transport=self._transport,
        ) as client:
            response = await client.post(
                self._settings.overpass_url,
                data={"data": query},
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
            response.raise_for_status()
            data = response.json()
        elements = data.get("elements")
        if not isinstance(elements, list):
            raise ValueError("Overpass response has no element list")
        return elements

    @staticmethod
    def _element_position(element: dict) -> Optional[tuple[float, float]]:
        if element.get("type", "node") == "node" and "lat" in element:
            return float(element["lat"]), float(element["lon"])
        if "center" in element:
            return float(element["center"]["lat"]), float(element["center"]["lon"])
        return None

    async def analyze(self, center: Location, radius_m: float) -> AnalysisResult:
        locale = self._settings.locale
        limit = self._settings.max_category_items
        logger.info(f"[POI] Overpass analysis at ({center.lat:.4f}, {center.lng:.4f}), r={radius_m:.0f}m")

        try:
            elements = await self._fetch_elements(center, radius_m)
            buckets = _empty_buckets()
            for element in elements:
                tags = element.get("tags") or {}
                category = classify(tags)
                if category is None or len(buckets[category]) >= limit:
                    continue
                position = self._element_position(element)
                if position is None:
                    continue
                lat, lng = position
                distance_km = haversine_distance(center, Location(lat=lat, lng=lng))
                buckets[category].append(PlaceItem(
                    name=display_name(tags, locale),
                    distance=format_distance(distance_km * 1000, locale),
                    lat=lat,
                    lng=lng,
                    popularity=self._settings.default_popularity,
                    source=OSM_SOURCE,
                ))
        except (httpx.HTTPError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"[POI] Overpass analysis error: {e}")
            raise AnalysisFailed() from e

        total = sum(len(items) for items in buckets.values())
        logger.info(f"[POI] Classified {total} of {len(elements)} features")
        return AnalysisResult(
            locationName=text(locale, "area_name"),
            summary=text(
                locale,
                "area_summary",
                count=total,
                radius=format_distance(radius_m, locale),
            ),
            **buckets,
        )


class GenerativePOIAnalyzer(POIAnalyzer):
    """AI-backed implementation.

    The model supplies names, coordinates, popularity, rating, review
    counts, the area name and the summary. Values are clamped into their
    valid ranges and distances are recomputed from coordinates.
    """

    def __init__(
        self,
        ai_service: AIReasoningService,
        settings: Settings | None = None,
    ) -> None:
        self._ai = ai_service
        self._settings = settings or get_settings()

    @staticmethod
    def _clamp(value: Any, low: float, high: float) -> Optional[float]:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if number != number:  # NaN
            return None
        return min(high, max(low, number))

    def _normalize_item(self, center: Location, raw: Any) -> Optional[PlaceItem]:
        if not isinstance(raw, dict):
            return None
        locale = self._settings.locale
        name = str(raw.get("name") or "").strip()
        if not name:
            return None

        lat = lng = None
        try:
            position = Location(lat=float(raw["lat"]), lng=float(raw["lng"]))
            lat, lng = position.lat, position.lng
            distance = format_distance(haversine_distance(center, position) * 1000, locale)
        except (KeyError, TypeError, ValueError):
            distance = str(raw.get("distance") or "").strip()
            if not distance:
                return None

        reviews = raw.get("reviews")
        try:
            reviews = max(0, int(reviews)) if reviews is not None else None
        except (TypeError, ValueError):
            reviews = None

        popularity = self._clamp(raw.get("popularity"), 0.0, 1.0)
        return PlaceItem(
            name=name,
            distance=distance,
            lat=lat,
            lng=lng,
            popularity=self._settings.default_popularity if popularity is None else popularity,
            rating=self._clamp(raw.get("rating"), 1.0, 5.0),
            reviews=reviews,
            source=self._ai.provenance,
        )

    async def analyze(self, center: Location, radius_m: float) -> AnalysisResult:
        locale = self._settings.locale
        limit = self._settings.max_category_items
        try:
            data = await self._ai.describe_area(center, radius_m, locale)
            buckets = _empty_buckets()
            seen: set[str] = set()
            for category in CATEGORY_KEYS:
                raw_items = data.get(category) or []
                if not isinstance(raw_items, list):
                    continue
                for raw in raw_items:
                    if len(buckets[category]) >= limit:
                        break
                    item = self._normalize_item(center, raw)
                    if item is None or item.name.lower() in seen:
                        continue
                    buckets[category].append(item)
                    seen.add(item.name.lower())

            location_name = str(data.get("locationName") or "").strip() or text(locale, "area_name")
            summary = str(data.get("summary") or "").strip()
            if not summary:
                summary = text(
                    locale,
                    "area_summary",
                    count=len(seen),
                    radius=format_distance(radius_m, locale),
                )
            result = AnalysisResult(locationName=location_name, summary=summary, **buckets)
        except Exception as e:
            # Provider SDK errors and timeouts included
            logger.error(f"[POI] {self._ai.provider_name} analysis error: {e}")
            raise AnalysisFailed() from e

        logger.info(f"[POI] {self._ai.provider_name} produced {result.total_places()} places")
        return result


def create_poi_analyzer(
    settings: Settings | None = None,
    ai_factory: Callable[[], AIReasoningService] | None = None,
) -> POIAnalyzer:
    """Pick the analysis backend named in configuration."""
    settings = settings or get_settings()
    if settings.analysis_backend == "ai":
        from app.services.ai_reasoning import create_ai_service

        return GenerativePOIAnalyzer(ai_factory() if ai_factory else create_ai_service(settings), settings)
    return OverpassPOIAnalyzer(settings)

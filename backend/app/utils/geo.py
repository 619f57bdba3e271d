"""Spherical-earth geometry shared by analysis, routing and the map layer.

Everything uses the mean Earth radius. Distances in meters unless a
function says otherwise; bearings in degrees clockwise from true north.
"""

import math

import numpy as np

from app.models import Location
from app.utils.locale import text

EARTH_RADIUS_M = 6_371_000.0
DEFAULT_RING_SEGMENTS = 120
RANGE_RING_STEP_M = 5000.0


def _normalize_lng_rad(lng):
    # Wrap into [-pi, pi) for scalars and numpy arrays alike
    return (lng + 3 * math.pi) % (2 * math.pi) - math.pi


def destination_point(origin: Location, distance_m: float, bearing_deg: float) -> Location:
    """Point reached by travelling ``distance_m`` from ``origin`` along ``bearing_deg``.

    NaN inputs produce NaN coordinates instead of raising.
    """
    lat1 = math.radians(origin.lat)
    lng1 = math.radians(origin.lng)
    angular = distance_m / EARTH_RADIUS_M
    bearing = math.radians(bearing_deg)

    lat2 = math.asin(
        math.sin(lat1) * math.cos(angular)
        + math.cos(lat1) * math.sin(angular) * math.cos(bearing)
    )
    lng2 = lng1 + math.atan2(
        math.sin(bearing) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * math.sin(lat2),
    )
    # Output of the formula is always in range; skip validation so NaN propagates
    return Location.model_construct(
        lat=math.degrees(lat2), lng=math.degrees(_normalize_lng_rad(lng2))
    )


def ring(
    center: Location, radius_m: float, segments: int = DEFAULT_RING_SEGMENTS
) -> list[Location]:
    """Closed polygon of ``segments + 1`` points at ``radius_m`` around ``center``.

    Bearings are evenly spaced from 0 to 360 degrees inclusive, so the last
    point repeats the first.
    """
    if segments < 1:
        raise ValueError("segments must be at least 1")

    lat1 = math.radians(center.lat)
    lng1 = math.radians(center.lng)
    angular = radius_m / EARTH_RADIUS_M
    bearings = np.radians(np.linspace(0.0, 360.0, segments + 1))

    lat2 = np.arcsin(
        math.sin(lat1) * math.cos(angular)
        + math.cos(lat1) * math.sin(angular) * np.cos(bearings)
    )
    lng2 = lng1 + np.arctan2(
        np.sin(bearings) * math.sin(angular) * math.cos(lat1),
        math.cos(angular) - math.sin(lat1) * np.sin(lat2),
    )
    lats = np.degrees(lat2)
    lngs = np.degrees(_normalize_lng_rad(lng2))
    return [
        Location.model_construct(lat=float(lat), lng=float(lng))
        for lat, lng in zip(lats, lngs)
    ]


def cardinal_points(center: Location, radius_m: float) -> dict[str, Location]:
    """North/east/south/west points on the radius, used for distance labels."""
    north, east, south, west = ring(center, radius_m, 4)[:4]
    return {"north": north, "east": east, "south": south, "west": west}


def range_rings(radius_m: float, step_m: float = RANGE_RING_STEP_M) -> list[float]:
    """Radii of the intermediate rings drawn inside large search circles."""
    radii = []
    if radius_m > step_m:
        r = step_m
        while r < radius_m:
            radii.append(r)
            r += step_m
    return radii


def haversine_distance(a: Location, b: Location) -> float:
    """Great-circle distance between two points in kilometers."""
    lat1 = math.radians(a.lat)
    lat2 = math.radians(b.lat)
    dlat = lat2 - lat1
    dlng = math.radians(b.lng - a.lng)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h))) / 1000


def format_distance(meters: float, locale: str = "th") -> str:
    """Whole meters below 1 km, kilometers with one decimal from 1 km up."""
    if meters < 1000:
        # The unit switch is on the raw value, so 999.6 reads "1000 m"
        return text(locale, "meters", value=f"{meters:.0f}")
    return text(locale, "kilometers", value=f"{meters / 1000:.1f}")


def format_minutes(seconds: float, locale: str = "th") -> str:
    """Duration rounded up to the next whole minute."""
    return text(locale, "minutes", value=math.ceil(seconds / 60))

"""Geocoding service module.

Resolves free-text place queries to coordinates through direct parsing
and an ArcGIS → Photon → Nominatim fallback chain.
"""

from .service import (
    ArcGISProvider,
    GeocodingProvider,
    GeocodingService,
    NominatimProvider,
    PhotonProvider,
    parse_coordinates,
)

__all__ = [
    "ArcGISProvider",
    "GeocodingProvider",
    "GeocodingService",
    "NominatimProvider",
    "PhotonProvider",
    "parse_coordinates",
]

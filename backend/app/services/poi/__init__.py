"""Nearby-place analysis - OpenStreetMap Overpass + AI-estimated variant."""

from .service import (
    CATEGORY_RULES,
    GenerativePOIAnalyzer,
    OverpassPOIAnalyzer,
    POIAnalyzer,
    classify,
    create_poi_analyzer,
    display_name,
)

__all__ = [
    "CATEGORY_RULES",
    "GenerativePOIAnalyzer",
    "OverpassPOIAnalyzer",
    "POIAnalyzer",
    "classify",
    "create_poi_analyzer",
    "display_name",
]

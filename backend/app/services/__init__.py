"""Area Scout Services.

Service layer components:
- Geocoding: direct coordinate parsing + ArcGIS → Photon → Nominatim chain
- POI: OpenStreetMap Overpass analysis (AI-estimated variant available)
- Routing: OSRM turn-by-turn translation (AI multi-modal variant available)
- AI Reasoning: Groq (primary) + Gemini (fallback) for the rich variants
"""

from .ai_reasoning import (
    AIReasoningService,
    GeminiReasoningService,
    GroqReasoningService,
    create_ai_service,
)
from .geocoding import (
    GeocodingProvider,
    GeocodingService,
    parse_coordinates,
)
from .poi import (
    GenerativePOIAnalyzer,
    OverpassPOIAnalyzer,
    POIAnalyzer,
    create_poi_analyzer,
)
from .routing import (
    FareModel,
    GenerativeRoutePlanner,
    OSRMRoutePlanner,
    RoutePlannerService,
    create_route_planner,
)

__all__ = [
    # AI reasoning
    "AIReasoningService",
    "GeminiReasoningService",
    "GroqReasoningService",
    "create_ai_service",
    # Geocoding
    "GeocodingProvider",
    "GeocodingService",
    "parse_coordinates",
    # POI analysis
    "GenerativePOIAnalyzer",
    "OverpassPOIAnalyzer",
    "POIAnalyzer",
    "create_poi_analyzer",
    # Routing
    "FareModel",
    "GenerativeRoutePlanner",
    "OSRMRoutePlanner",
    "RoutePlannerService",
    "create_route_planner",
]

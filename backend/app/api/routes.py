"""API routes for Area Scout.

Thin wiring between HTTP requests and the pipeline services:
- Geocoding: free text or typed coordinates → one location
- Analysis: nearby places in seven categories + heatmap points
- Routes: turn-by-turn options between two locations
- Geometry: radius ring, cardinal label points and intermediate rings

Pipeline errors propagate to the handlers registered in ``app.main``.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from app.config import get_settings
from app.models import AnalysisResult, AppError, Location, RouteOption
from app.services import (
    GeocodingService,
    POIAnalyzer,
    RoutePlannerService,
    create_poi_analyzer,
    create_route_planner,
)
from app.utils.geo import cardinal_points, format_distance, range_rings, ring

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_RADIUS_M = 50_000


# ─── Request / response models ───

class AnalyzeRequest(BaseModel):
    """Request model for area analysis."""
    center: Location
    radius_m: float = Field(1000, gt=0, le=MAX_RADIUS_M, description="Search radius in meters")


class RouteRequest(BaseModel):
    """Request model for route planning."""
    origin: Location
    destination: Location


class GeocodeResponse(BaseModel):
    success: bool
    location: Optional[Location] = None
    error: Optional[AppError] = None


class AnalyzeResponse(BaseModel):
    success: bool
    analysis: Optional[AnalysisResult] = None
    heat_points: list[tuple[float, float, float]] = Field(default_factory=list)
    error: Optional[AppError] = None


class RouteResponse(BaseModel):
    success: bool
    routes: list[RouteOption] = Field(default_factory=list)
    error: Optional[AppError] = None


class RingResponse(BaseModel):
    """Geometry for drawing the search radius on the map."""
    points: list[Location]
    labels: dict[str, Location]
    label_text: str
    range_rings: list[float]


# ─── Service instances ───

_geocoding_service: GeocodingService | None = None
_poi_analyzer: POIAnalyzer | None = None
_route_planner: RoutePlannerService | None = None


def get_geocoding_service() -> GeocodingService:
    global _geocoding_service
    if _geocoding_service is None:
        _geocoding_service = GeocodingService()
    return _geocoding_service


def get_poi_analyzer() -> POIAnalyzer:
    global _poi_analyzer
    if _poi_analyzer is None:
        _poi_analyzer = create_poi_analyzer()
    return _poi_analyzer


def get_route_planner() -> RoutePlannerService:
    global _route_planner
    if _route_planner is None:
        _route_planner = create_route_planner()
    return _route_planner


# ─── Endpoints ───

@router.get("/geocode", response_model=GeocodeResponse)
async def geocode(q: str = Query(..., min_length=1, max_length=200)) -> GeocodeResponse:
    """Resolve a place name or typed coordinates to a location."""
    location = await get_geocoding_service().resolve(q)
    return GeocodeResponse(success=True, location=location)


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_area(request: AnalyzeRequest) -> AnalyzeResponse:
    """Analyze places within the radius around the selected center."""
    analysis = await get_poi_analyzer().analyze(request.center, request.radius_m)
    logger.info(f"[API] Analysis returned {analysis.total_places()} places")
    heat = analysis.heat_points(default_popularity=get_settings().default_popularity)
    return AnalyzeResponse(success=True, analysis=analysis, heat_points=heat)


@router.post("/routes", response_model=RouteResponse)
async def plan_routes(request: RouteRequest) -> RouteResponse:
    """Plan route options from origin to destination."""
    routes = await get_route_planner().plan(request.origin, request.destination)
    return RouteResponse(success=True, routes=routes)


@router.get("/geometry/ring", response_model=RingResponse)
async def radius_ring(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius: float = Query(..., gt=0, le=MAX_RADIUS_M),
    segments: int = Query(120, ge=4, le=720),
) -> RingResponse:
    """Polygon and label positions for the radius circle."""
    center = Location(lat=lat, lng=lng)
    return RingResponse(
        points=ring(center, radius, segments),
        labels=cardinal_points(center, radius),
        label_text=format_distance(radius, get_settings().locale),
        range_rings=range_rings(radius),
    )

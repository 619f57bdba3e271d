"""Core data models for Area Scout.

Pydantic models for coordinates, nearby places grouped by category, and
turn-by-turn route options. All of them are plain request/response data:
created per call, handed to the rendering layer, never persisted.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


CATEGORY_KEYS = (
    "residential",
    "convenience",
    "shopping",
    "food",
    "transport",
    "recreation",
    "public_service",
)


class TravelMode(str, Enum):
    """Transport mode of a single route step."""

    WALK = "walk"
    BUS = "bus"
    TRAIN = "train"
    CAR = "car"
    MOTORCYCLE = "motorcycle"


class Location(BaseModel):
    """Geographic coordinates with validation.

    Latitude must be between -90 and 90 degrees.
    Longitude must be between -180 and 180 degrees.
    """

    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    lng: float = Field(..., ge=-180, le=180, description="Longitude in degrees")


class PlaceItem(BaseModel):
    """A nearby place as shown in the analysis sidebar and on the map."""

    name: str = Field(..., min_length=1, description="Display name")
    distance: str = Field(..., description="Formatted distance from the center")
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    popularity: Optional[float] = Field(
        None, ge=0, le=1, description="Density/traffic score (0-1)"
    )
    rating: Optional[float] = Field(None, ge=1, le=5, description="Star rating (1-5)")
    reviews: Optional[int] = Field(None, ge=0, description="Review count")
    source: str = Field(..., description="Provenance tag: osm, gemini, groq")


class AnalysisResult(BaseModel):
    """Places around a center point, bucketed into seven fixed categories.

    Each bucket keeps discovery order and holds at most 10 items.
    """

    locationName: str
    summary: str
    residential: list[PlaceItem] = Field(default_factory=list)
    convenience: list[PlaceItem] = Field(default_factory=list)
    shopping: list[PlaceItem] = Field(default_factory=list)
    food: list[PlaceItem] = Field(default_factory=list)
    transport: list[PlaceItem] = Field(default_factory=list)
    recreation: list[PlaceItem] = Field(default_factory=list)
    public_service: list[PlaceItem] = Field(default_factory=list)

    def categories(self) -> dict[str, list[PlaceItem]]:
        return {key: getattr(self, key) for key in CATEGORY_KEYS}

    def total_places(self) -> int:
        return sum(len(items) for items in self.categories().values())

    def heat_points(
        self,
        default_popularity: float = 0.5,
        boost_threshold: float = 4.5,
        boost: float = 0.2,
    ) -> list[tuple[float, float, float]]:
        """Return (lat, lng, intensity) for every item that has coordinates.

        Intensity starts at the item's popularity (or the default), gets a
        boost for highly rated places, and never exceeds 1.0.
        """
        points = []
        for items in self.categories().values():
            for item in items:
                if item.lat is None or item.lng is None:
                    continue
                intensity = item.popularity or default_popularity
                if item.rating and item.rating > boost_threshold:
                    intensity += boost
                points.append((item.lat, item.lng, min(intensity, 1.0)))
        return points


class RouteStep(BaseModel):
    """One localized turn-by-turn instruction."""

    instruction: str
    distance: Optional[str] = None
    duration: Optional[str] = None
    mode: TravelMode = TravelMode.CAR


class RouteOption(BaseModel):
    """A complete way of getting from origin to destination."""

    id: str
    title: str
    totalDuration: str
    totalDistance: str
    totalCost: str
    steps: list[RouteStep] = Field(default_factory=list)
    recommended: bool = False
    coordinates: Optional[list[tuple[float, float]]] = Field(
        None, description="Path as (lat, lng) pairs"
    )

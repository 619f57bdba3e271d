"""Data models for Area Scout."""

from .core import (
    CATEGORY_KEYS,
    AnalysisResult,
    Location,
    PlaceItem,
    RouteOption,
    RouteStep,
    TravelMode,
)
from .errors import (
    AnalysisFailed,
    AppError,
    ErrorCode,
    NetworkFailure,
    NotFound,
    ParseFailure,
    PipelineError,
    RoutingFailed,
)

__all__ = [
    "CATEGORY_KEYS",
    "AnalysisResult",
    "Location",
    "PlaceItem",
    "RouteOption",
    "RouteStep",
    "TravelMode",
    "AnalysisFailed",
    "AppError",
    "ErrorCode",
    "NetworkFailure",
    "NotFound",
    "ParseFailure",
    "PipelineError",
    "RoutingFailed",
]

"""Route planning - OSRM (default) + AI multi-modal planner."""

from .instructions import translate_direction, translate_instruction
from .service import (
    FareModel,
    GenerativeRoutePlanner,
    OSRMRoutePlanner,
    RoutePlannerService,
    create_route_planner,
    to_lat_lng,
)

__all__ = [
    "FareModel",
    "GenerativeRoutePlanner",
    "OSRMRoutePlanner",
    "RoutePlannerService",
    "create_route_planner",
    "to_lat_lng",
    "translate_direction",
    "translate_instruction",
]

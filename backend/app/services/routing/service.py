"""Route planning from origin to destination.

Two interchangeable planners produce ``RouteOption`` lists:
- OSRMRoutePlanner:       one driving route from OSRM, translated into
                          localized turn-by-turn steps with a taxi fare
                          estimate and the (lat, lng) path geometry
- GenerativeRoutePlanner: 2-3 multi-modal options proposed by the AI
                          provider, transit first, taxi as fallback

Any failure surfaces as ``RoutingFailed``. No retries.
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

from app.config import Settings, get_settings
from app.models import (
    Location,
    RouteOption,
    RouteStep,
    RoutingFailed,
    TravelMode,
)
from app.services.ai_reasoning import AIReasoningService
from app.utils.geo import format_distance, format_minutes, haversine_distance
from app.utils.locale import text

from .instructions import translate_instruction

logger = logging.getLogger(__name__)

MAX_ROUTE_OPTIONS = 3


@dataclass
class FareModel:
    """Linear taxi fare: ceil(base_fare + per_km_rate * km)."""
    base_fare: float = 35.0
    per_km_rate: float = 6.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "FareModel":
        return cls(base_fare=settings.fare_base, per_km_rate=settings.fare_per_km)

    def estimate(self, distance_km: float) -> int:
        return math.ceil(self.base_fare + self.per_km_rate * distance_km)


def to_lat_lng(coordinates: list) -> list[tuple[float, float]]:
    """Re-project GeoJSON (lng, lat) pairs into (lat, lng) pairs."""
    return [(float(pair[1]), float(pair[0])) for pair in coordinates]


class RoutePlannerService(ABC):
    """Abstract base class for route planning."""

    @abstractmethod
    async def plan(self, origin: Location, destination: Location) -> list[RouteOption]:
        pass


class OSRMRoutePlanner(RoutePlannerService):
    """OSRM-based planner returning a single recommended route."""

    def __init__(
        self,
        settings: Settings | None = None,
        fare_model: FareModel | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._fare = fare_model or FareModel.from_settings(self._settings)
        self._transport = transport

    async def _fetch_route(self, origin: Location, destination: Location) -> dict:
        profile = self._settings.osrm_profile
        coords = f"{origin.lng},{origin.lat};{destination.lng},{destination.lat}"
        url = f"{self._settings.osrm_url}/route/v1/{profile}/{coords}"
        logger.info(f"[ROUTE] OSRM request: profile={profile}")

        async with httpx.AsyncClient(
            timeout=self._settings.http_timeout,
            headers={"User-Agent": self._settings.user_agent},
            transport=self._transport,
        ) as client:
            response = await client.get(url, params={
                "overview": "full",
                "geometries": "geojson",
                "steps": "true",
            })
            response.raise_for_status()
            data = response.json()

        if data.get("code") != "Ok" or not data.get("routes"):
            logger.info(f"[ROUTE] OSRM returned no route: {data.get('code')}")
            raise ValueError("No route found")
        return data["routes"][0]

    def _translate_steps(self, route_data: dict) -> list[RouteStep]:
        locale = self._settings.locale
        steps = []
        for leg in route_data.get("legs", []):
            for step in leg.get("steps", []):
                maneuver = step.get("maneuver", {})
                steps.append(RouteStep(
                    instruction=translate_instruction(
                        maneuver.get("type", ""),
                        maneuver.get("modifier"),
                        step.get("name"),
                        locale,
                    ),
                    distance=format_distance(float(step.get("distance", 0)), locale),
                    duration=format_minutes(float(step.get("duration", 0)), locale),
                    mode=TravelMode.CAR,
                ))
        return steps

    async def plan(self, origin: Location, destination: Location) -> list[RouteOption]:
        locale = self._settings.locale
        try:
            route_data = await self._fetch_route(origin, destination)
            total_distance = float(route_data["distance"])
            total_duration = float(route_data["duration"])
            steps = self._translate_steps(route_data)
            coordinates = to_lat_lng(route_data["geometry"]["coordinates"])
        except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            logger.error(f"[ROUTE] Routing error: {e}")
            raise RoutingFailed() from e

        cost = self._fare.estimate(total_distance / 1000)
        logger.info(f"[ROUTE] OSRM success: distance={total_distance:.0f}m, steps={len(steps)}, cost={cost}")

        return [RouteOption(
            id=f"osrm-{self._settings.osrm_profile}",
            title=text(locale, "car_route_title"),
            totalDuration=format_minutes(total_duration, locale),
            totalDistance=format_distance(total_distance, locale),
            totalCost=text(locale, "cost", value=cost),
            steps=steps,
            recommended=True,
            coordinates=coordinates,
        )]


class GenerativeRoutePlanner(RoutePlannerService):
    """AI-backed multi-modal planner.

    The model's options are normalized: at most three are kept, exactly one
    is recommended, and unknown step modes become ``car``.
    """

    def __init__(
        self,
        ai_service: AIReasoningService,
        settings: Settings | None = None,
    ) -> None:
        self._ai = ai_service
        self._settings = settings or get_settings()

    @staticmethod
    def _mode(value: Any) -> TravelMode:
        try:
            return TravelMode(str(value).strip().lower())
        except ValueError:
            return TravelMode.CAR

    @staticmethod
    def _optional_text(value: Any) -> Optional[str]:
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    def _normalize_option(
        self, index: int, raw: Any, straight_line: str
    ) -> Optional[RouteOption]:
        if not isinstance(raw, dict):
            return None
        title = self._optional_text(raw.get("title"))
        if not title:
            return None

        raw_steps = raw.get("steps")
        if not isinstance(raw_steps, list):
            raw_steps = []

        steps = []
        for raw_step in raw_steps:
            if not isinstance(raw_step, dict):
                continue
            instruction = self._optional_text(raw_step.get("instruction"))
            if not instruction:
                continue
            steps.append(RouteStep(
                instruction=instruction,
                distance=self._optional_text(raw_step.get("distance")),
                duration=self._optional_text(raw_step.get("duration")),
                mode=self._mode(raw_step.get("mode")),
            ))

        return RouteOption(
            id=self._optional_text(raw.get("id")) or f"option-{index + 1}",
            title=title,
            totalDuration=self._optional_text(raw.get("totalDuration")) or "-",
            totalDistance=self._optional_text(raw.get("totalDistance")) or straight_line,
            totalCost=self._optional_text(raw.get("totalCost")) or "-",
            steps=steps,
            recommended=raw.get("recommended") is True,
            coordinates=None,
        )

    async def plan(self, origin: Location, destination: Location) -> list[RouteOption]:
        locale = self._settings.locale
        straight_line = format_distance(haversine_distance(origin, destination) * 1000, locale)
        try:
            raw_options = await self._ai.suggest_routes(origin, destination, locale)
        except Exception as e:
            # Provider SDK errors and timeouts included
            logger.error(f"[ROUTE] {self._ai.provider_name} routing error: {e}")
            raise RoutingFailed() from e

        options = []
        for index, raw in enumerate(raw_options):
            option = self._normalize_option(index, raw, straight_line)
            if option is not None:
                options.append(option)
            if len(options) == MAX_ROUTE_OPTIONS:
                break

        if not options:
            logger.info(f"[ROUTE] {self._ai.provider_name} returned no usable options")
            raise RoutingFailed()

        recommended = next((i for i, o in enumerate(options) if o.recommended), 0)
        for i, option in enumerate(options):
            option.recommended = i == recommended

        logger.info(f"[ROUTE] {self._ai.provider_name} produced {len(options)} options")
        return options


def create_route_planner(
    settings: Settings | None = None,
    ai_factory: Callable[[], AIReasoningService] | None = None,
) -> RoutePlannerService:
    """Pick the routing backend named in configuration."""
    settings = settings or get_settings()
    if settings.routing_backend == "ai":
        from app.services.ai_reasoning import create_ai_service

        return GenerativeRoutePlanner(ai_factory() if ai_factory else create_ai_service(settings), settings)
    return OSRMRoutePlanner(settings)

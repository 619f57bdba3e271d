"""Runtime configuration loaded from the environment (and ``.env``)."""

import os
from functools import lru_cache
from typing import Any, Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

try:
    load_dotenv()
except Exception:
    pass  # Python 3.14+ compat


class Settings(BaseModel):
    locale: Literal["th", "en"] = Field(default="th")

    # HTTP
    http_timeout: float = Field(default=15.0, gt=0)
    user_agent: str = Field(default="AreaScout/1.0 (contact@areascout.app)")

    # Upstream services
    arcgis_url: str = Field(
        default="https://geocode.arcgis.com/arcgis/rest/services/World/GeocodeServer/findAddressCandidates"
    )
    photon_url: str = Field(default="https://photon.komoot.io/api/")
    nominatim_url: str = Field(default="https://nominatim.openstreetmap.org/search")
    overpass_url: str = Field(default="https://overpass-api.de/api/interpreter")
    osrm_url: str = Field(default="https://router.project-osrm.org")
    osrm_profile: str = Field(default="driving")

    # Taxi fare estimate (reference pricing, THB)
    fare_base: float = Field(default=35.0, ge=0)
    fare_per_km: float = Field(default=6.0, ge=0)

    # Analysis
    default_popularity: float = Field(default=0.5, ge=0, le=1)
    max_category_items: int = Field(default=10, gt=0)

    # Backends
    analysis_backend: Literal["osm", "ai"] = Field(default="osm")
    routing_backend: Literal["osrm", "ai"] = Field(default="osrm")
    ai_timeout: float = Field(default=45.0, gt=0)

    @classmethod
    def from_env(cls, overrides: Optional[dict[str, Any]] = None) -> "Settings":
        env_map = {
            "locale": os.getenv("APP_LOCALE"),
            "http_timeout": os.getenv("HTTP_TIMEOUT"),
            "user_agent": os.getenv("HTTP_USER_AGENT"),
            "arcgis_url": os.getenv("ARCGIS_URL"),
            "photon_url": os.getenv("PHOTON_URL"),
            "nominatim_url": os.getenv("NOMINATIM_URL"),
            "overpass_url": os.getenv("OVERPASS_URL"),
            "osrm_url": os.getenv("OSRM_URL"),
            "osrm_profile": os.getenv("OSRM_PROFILE"),
            "fare_base": os.getenv("FARE_BASE"),
            "fare_per_km": os.getenv("FARE_PER_KM"),
            "default_popularity": os.getenv("DEFAULT_POPULARITY"),
            "max_category_items": os.getenv("MAX_CATEGORY_ITEMS"),
            "analysis_backend": os.getenv("ANALYSIS_BACKEND"),
            "routing_backend": os.getenv("ROUTING_BACKEND"),
            "ai_timeout": os.getenv("AI_TIMEOUT"),
        }
        raw = {key: value for key, value in env_map.items() if value not in (None, "")}
        if overrides:
            raw.update(overrides)
        return cls(**raw)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()

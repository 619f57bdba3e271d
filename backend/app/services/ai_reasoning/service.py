"""AI Reasoning service - Groq (primary) + Gemini (fallback).

Provider-agnostic base class with two concrete implementations:
- GroqReasoningService:   Groq LPU, llama-3.1-8b-instant
- GeminiReasoningService: Google Gemini

The model backs the "rich" variants of area analysis and route planning:
it estimates popularity, ratings and review counts, writes the area
summary, and proposes multi-modal transit options. Callers normalize and
validate everything it returns.
"""

import asyncio
import json
import logging
import os
from abc import ABC, abstractmethod

from app.config import Settings, get_settings
from app.models import Location, ParseFailure

logger = logging.getLogger(__name__)

LANGUAGE_NAMES = {"th": "Thai (ภาษาไทย)", "en": "English"}

SYSTEM_PROMPT = (
    "You are a local-area analyst and navigation assistant for Thailand. "
    "You know neighborhoods, condominiums, convenience stores, markets, transit "
    "lines (BTS, MRT, ARL, buses, boats) and public services in detail. "
    "Only mention real places that exist. "
    "Respond ONLY with valid JSON. No explanations, no markdown, no extra text."
)


class AIReasoningService(ABC):
    """Base class for AI reasoning services.

    All prompt construction and JSON parsing lives here.
    Subclasses only implement ``_generate()`` for their specific API client.
    """

    _timeout: float

    @abstractmethod
    async def _generate(self, prompt: str, timeout: float | None = None) -> str:
        """Send prompt to the AI provider and return raw text."""
        ...

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Human-readable provider name for logging."""
        ...

    @property
    def provenance(self) -> str:
        """Tag stored on items this provider produced."""
        return self.provider_name.lower()

    # ── Utilities ─────────────────────────────────────────────────────

    @staticmethod
    def _extract_json(text: str) -> str:
        if "```json" in text:
            return text.split("```json")[1].split("```")[0].strip()
        if "```" in text:
            return text.split("```")[1].split("```")[0].strip()
        return text

    async def _generate_json(self, prompt: str, timeout: float | None = None):
        text = await self._generate(prompt, timeout=timeout)
        try:
            return json.loads(self._extract_json(text))
        except json.JSONDecodeError as e:
            logger.info(f"[{self.provider_name}] Invalid JSON response: {e}")
            raise ParseFailure() from e

    # ── Shared implementations ────────────────────────────────────────

    async def describe_area(
        self, center: Location, radius_m: float, locale: str = "th"
    ) -> dict:
        """Ask the model for places around ``center`` grouped by category."""
        language = LANGUAGE_NAMES.get(locale, LANGUAGE_NAMES["th"])
        prompt = (
            f"Analyze the geographic area centered at Latitude: {center.lat}, "
            f"Longitude: {center.lng} with a radius of {radius_m:.0f} meters.\n\n"
            f"List specific real-world places strictly within or very close to this radius, "
            f"grouped into these categories:\n"
            f"- residential: villages, condos, apartments\n"
            f"- convenience: convenience stores (7-Eleven, Lotus's Go Fresh, CJ, etc.)\n"
            f"- shopping: malls, supermarkets, fresh markets\n"
            f"- food: restaurants, cafes, street food areas\n"
            f"- transport: BTS/MRT stations, bus stops, piers, train stations\n"
            f"- recreation: parks, sports complexes, gyms\n"
            f"- public_service: post offices, police stations, government offices, hospitals/clinics\n\n"
            f"Return ONLY a JSON object:\n"
            f'{{"locationName": "area or district name", '
            f'"summary": "brief livability summary", '
            f'"residential": [{{"name": "Place Name", "lat": 13.75, "lng": 100.5, '
            f'"popularity": 0.7, "rating": 4.2, "reviews": 350}}], '
            f'"convenience": [], "shopping": [], "food": [], "transport": [], '
            f'"recreation": [], "public_service": []}}\n\n'
            f"Rules:\n- popularity is 0.1-1.0 (1.0 = very crowded/popular)\n"
            f"- rating is 1.0-5.0, reviews is an integer review count\n"
            f"- At most 10 places per category\n"
            f"- Write names, locationName and summary in {language}"
        )
        logger.info(f"[{self.provider_name}] Describing area at ({center.lat:.4f}, {center.lng:.4f}), r={radius_m:.0f}m")
        data = await self._generate_json(prompt)
        if not isinstance(data, dict):
            raise ParseFailure()
        return data

    async def suggest_routes(
        self, origin: Location, destination: Location, locale: str = "th"
    ) -> list[dict]:
        """Ask the model for 2-3 ranked trip options, public transit first."""
        language = LANGUAGE_NAMES.get(locale, LANGUAGE_NAMES["th"])
        prompt = (
            f"Plan a trip from Origin [Lat: {origin.lat}, Lng: {origin.lng}] "
            f"to Destination [Lat: {destination.lat}, Lng: {destination.lng}].\n\n"
            f"Provide 2-3 distinct route options prioritizing public transportation "
            f"(BTS, MRT, ARL, bus, boat). If public transport is poor, include a "
            f"taxi/ride-hailing option.\n\n"
            f"Return ONLY a JSON array:\n"
            f'[{{"id": "option-1", "title": "BTS Green Line + Walk", '
            f'"totalDuration": "45 min", "totalDistance": "12.3 km", '
            f'"totalCost": "60-100 THB", "recommended": true, '
            f'"steps": [{{"instruction": "Walk to BTS Siam", "distance": "500 m", '
            f'"duration": "6 min", "mode": "walk|bus|train|car|motorcycle"}}]}}]\n\n'
            f"Rules:\n- Mark only the best option as recommended\n"
            f"- Write titles and instructions in {language}"
        )
        logger.info(f"[{self.provider_name}] Suggesting routes")
        data = await self._generate_json(prompt)
        if not isinstance(data, list):
            raise ParseFailure()
        return data


# ═══════════════════════════════════════════════════════════════════════
# Provider: Groq  (primary, fast LPU inference)
# ═══════════════════════════════════════════════════════════════════════

class GroqReasoningService(AIReasoningService):
    """Groq LPU with Llama 3.1 8B Instant."""

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        timeout_seconds: float = 15.0,
    ) -> None:
        from groq import AsyncGroq

        self._api_key = api_key or os.getenv("GROQ_API_KEY")
        if not self._api_key:
            raise ValueError("GROQ_API_KEY not provided")
        self._client = AsyncGroq(api_key=self._api_key)
        self._model_name = model_name or os.getenv("GROQ_MODEL", "llama-3.1-8b-instant")
        self._timeout = timeout_seconds
        logger.info(f"[AI] Groq ready: {self._model_name}")

    @property
    def provider_name(self) -> str:
        return "Groq"

    async def _generate(self, prompt: str, timeout: float | None = None) -> str:
        t = timeout or self._timeout
        try:
            resp = await asyncio.wait_for(
                self._client.chat.completions.create(
                    model=self._model_name,
                    messages=[
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": prompt},
                    ],
                    temperature=0.3,
                    max_tokens=4096,
                ),
                timeout=t,
            )
            return (resp.choices[0].message.content or "").strip()
        except asyncio.TimeoutError:
            logger.warning(f"[Groq] Timeout after {t}s")
            raise
        except Exception as e:
            logger.warning(f"[Groq] Error: {e}")
            raise


# ═══════════════════════════════════════════════════════════════════════
# Provider: Gemini  (fallback)
# ═══════════════════════════════════════════════════════════════════════

class GeminiReasoningService(AIReasoningService):
    """Google Gemini."""

    def __init__(
        self,
        api_key: str | None = None,
        model_name: str | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        from google import genai

        self._api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not self._api_key:
            raise ValueError("GEMINI_API_KEY not provided")
        self._client = genai.Client(api_key=self._api_key)
        self._model_name = model_name or os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        self._timeout = timeout_seconds
        logger.info(f"[AI] Gemini ready: {self._model_name}")

    @property
    def provider_name(self) -> str:
        return "Gemini"

    async def _generate(self, prompt: str, timeout: float | None = None) -> str:
        t = timeout or self._timeout
        try:
            full_prompt = f"{SYSTEM_PROMPT}\n\n{prompt}"
            resp = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=self._model_name,
                    contents=full_prompt,
                    config={"response_mime_type": "application/json"},
                ),
                timeout=t,
            )
            return (resp.text or "").strip()
        except asyncio.TimeoutError:
            logger.warning(f"[Gemini] Timeout after {t}s")
            raise
        except Exception as e:
            logger.warning(f"[Gemini] Error: {e}")
            raise


# ═══════════════════════════════════════════════════════════════════════
# Factory: Groq → Gemini
# ═══════════════════════════════════════════════════════════════════════

def create_ai_service(settings: Settings | None = None) -> AIReasoningService:
    """Create the best available AI service.  Groq first, Gemini fallback."""
    settings = settings or get_settings()
    if os.getenv("GROQ_API_KEY"):
        try:
            return GroqReasoningService(timeout_seconds=settings.ai_timeout)
        except Exception as e:
            logger.info(f"[AI] Groq init failed: {e}")

    if os.getenv("GEMINI_API_KEY"):
        try:
            return GeminiReasoningService(timeout_seconds=settings.ai_timeout)
        except Exception as e:
            logger.info(f"[AI] Gemini init failed: {e}")

    raise ValueError("No AI provider available. Set GROQ_API_KEY or GEMINI_API_KEY in .env")

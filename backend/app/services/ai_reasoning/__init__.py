"""AI Reasoning - Groq (primary) + Gemini (fallback)."""

from .service import (
    AIReasoningService,
    GeminiReasoningService,
    GroqReasoningService,
    create_ai_service,
)

__all__ = [
    "AIReasoningService",
    "GeminiReasoningService",
    "GroqReasoningService",
    "create_ai_service",
]

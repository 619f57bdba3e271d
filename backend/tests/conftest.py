"""Shared fixtures."""

import json

import pytest

from app.services.ai_reasoning import AIReasoningService


class FakeAIService(AIReasoningService):
    """AI provider that replays a canned reply and records prompts."""

    def __init__(self, reply=None, error: Exception | None = None, name: str = "Gemini") -> None:
        self._reply = reply
        self._error = error
        self._name = name
        self._timeout = 1.0
        self.prompts: list[str] = []
        self.timeouts: list[float | None] = []

    @property
    def provider_name(self) -> str:
        return self._name

    async def _generate(self, prompt: str, timeout: float | None = None) -> str:
        self.prompts.append(prompt)
        self.timeouts.append(timeout)
        if self._error is not None:
            raise self._error
        if isinstance(self._reply, str):
            return self._reply
        return f"```json\n{json.dumps(self._reply, ensure_ascii=False)}\n```"


@pytest.fixture
def fake_ai():
    """Factory for ``FakeAIService`` instances."""
    return FakeAIService

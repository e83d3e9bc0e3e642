"""Shared test fixtures and mock implementations."""

from typing import AsyncIterator

import pytest

from leetcode_assistant.ai.llm_base import LLMError, LLMProvider, LLMUsage
from leetcode_assistant.services.rate_limiter import rate_limiter


class MockLLMProvider(LLMProvider):
    """Mock LLM provider that yields predetermined tokens.

    Records the messages of every call and sets last_usage after streaming.
    """

    def __init__(
        self,
        tokens: list[str] | None = None,
        input_tokens: int = 10,
        output_tokens: int = 5,
    ) -> None:
        super().__init__()
        self.provider_id = "mock"
        self.model_id = "mock-model"
        self.tokens = tokens if tokens is not None else ["Hello", " ", "world"]
        self._input_tokens = input_tokens
        self._output_tokens = output_tokens
        self.calls: list[dict] = []

    async def generate_stream(
        self,
        system_prompt: str | None,
        messages: list[dict],
        max_tokens: int = 2048,
    ) -> AsyncIterator[str]:
        self.calls.append({"system_prompt": system_prompt, "messages": list(messages)})
        self.last_usage = LLMUsage()
        for token in self.tokens:
            yield token
        self.last_usage.input_tokens = self._input_tokens
        self.last_usage.output_tokens = self._output_tokens


class FailingLLMProvider(LLMProvider):
    """Provider whose every call fails the way a quota rejection would."""

    def __init__(self, message: str = "Gemini API error 429: quota exceeded") -> None:
        super().__init__()
        self.message = message

    async def generate_stream(
        self,
        system_prompt: str | None,
        messages: list[dict],
        max_tokens: int = 2048,
    ) -> AsyncIterator[str]:
        raise LLMError(self.message)
        yield ""


@pytest.fixture
def mock_llm() -> MockLLMProvider:
    return MockLLMProvider()


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    rate_limiter.reset()
    yield
    rate_limiter.reset()

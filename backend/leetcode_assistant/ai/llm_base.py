"""LLM provider interface, shared types and the SSE transport used by providers."""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import AsyncIterator

import httpx

logger = logging.getLogger(__name__)

LLMMessage = dict[str, str]


class LLMError(Exception):
    """Raised when an LLM provider fails unrecoverably."""
    pass


@dataclass
class LLMUsage:
    """Token usage reported by the LLM API after a call completes."""
    input_tokens: int = 0
    output_tokens: int = 0
    usage_details: dict = field(default_factory=dict)


async def stream_sse_events(
    url: str,
    payload: dict,
    headers: dict[str, str],
    *,
    label: str,
    timeout: float = 60.0,
) -> AsyncIterator[dict]:
    """POST ``payload`` and yield each decoded ``data:`` event of the SSE reply.

    One attempt only. Any transport problem or non-200 status is raised as
    ``LLMError`` so callers see a single failure type.
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            async with client.stream("POST", url, json=payload, headers=headers) as response:
                if response.status_code != 200:
                    body = await response.aread()
                    raise LLMError(
                        f"{label} API error {response.status_code}: {body.decode(errors='replace')}"
                    )

                async for line in response.aiter_lines():
                    if not line.startswith("data: "):
                        continue
                    data_str = line[6:]
                    if data_str.strip() == "[DONE]":
                        return
                    try:
                        event = json.loads(data_str)
                    except json.JSONDecodeError:
                        logger.debug("Skipping undecodable %s SSE line: %r", label, data_str)
                        continue
                    if isinstance(event, dict):
                        yield event
    except httpx.TimeoutException:
        raise LLMError(f"{label} API timeout")
    except LLMError:
        raise
    except Exception as exc:
        raise LLMError(f"{label} API unexpected error: {exc}")


class LLMProvider(ABC):
    """Base class for LLM providers.

    After each generate_stream() call completes, ``last_usage`` contains
    the token counts reported by the API.
    """

    def __init__(self) -> None:
        self.last_usage: LLMUsage = LLMUsage()
        self.provider_id: str = "unknown"
        self.model_id: str = "unknown"

    @abstractmethod
    async def generate_stream(
        self,
        system_prompt: str | None,
        messages: list[LLMMessage],
        max_tokens: int = 8192,
    ) -> AsyncIterator[str]:
        """Yield response text chunks in order.

        ``messages`` are ``{"role": "user" | "assistant", "content": str}``.
        A ``system_prompt`` of None sends no separate system instruction.
        The chat pipeline always passes None because its instructions travel
        as the first seeded turn; the parameter serves direct provider callers.
        """
        ...

    async def generate(
        self,
        system_prompt: str | None,
        messages: list[LLMMessage],
        max_tokens: int = 8192,
    ) -> str:
        """Non-streaming generation. Collects output from generate_stream."""
        parts: list[str] = []
        async for chunk in self.generate_stream(system_prompt, messages, max_tokens):
            parts.append(chunk)
        return "".join(parts)

    def count_tokens(self, text: str) -> int:
        """Return an approximate token count for budgeting before a call."""
        return max(1, len(text) // 4)

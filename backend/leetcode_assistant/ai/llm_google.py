"""Google Gemini provider (Gemini API / Google AI Studio, API key auth)."""

import logging
from typing import AsyncIterator

from leetcode_assistant.ai.llm_base import (
    LLMMessage,
    LLMProvider,
    LLMUsage,
    stream_sse_events,
)

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


class GoogleGeminiProvider(LLMProvider):
    """Gemini via ``streamGenerateContent`` with server-sent events."""

    def __init__(self, api_key: str, model_id: str, timeout: float = 60.0) -> None:
        super().__init__()
        self.provider_id = "google"
        self.model_id = model_id
        self._api_key = api_key
        self._timeout = timeout

    def _build_stream_url(self) -> str:
        return f"{GEMINI_API_BASE}/models/{self.model_id}:streamGenerateContent?alt=sse"

    def _build_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-goog-api-key": self._api_key,
        }

    @staticmethod
    def _to_gemini_contents(messages: list[LLMMessage]) -> list[dict]:
        return [
            {
                "role": "model" if msg["role"] == "assistant" else "user",
                "parts": [{"text": msg["content"]}],
            }
            for msg in messages
        ]

    async def generate_stream(
        self,
        system_prompt: str | None,
        messages: list[LLMMessage],
        max_tokens: int = 8192,
    ) -> AsyncIterator[str]:
        """Stream text from Gemini and capture usage metadata.

        ``system_prompt``, when given, goes out as ``system_instruction``.
        """
        self.last_usage = LLMUsage()

        payload: dict = {
            "contents": self._to_gemini_contents(messages),
            "generationConfig": {"maxOutputTokens": max_tokens},
        }
        if system_prompt:
            payload["system_instruction"] = {"parts": [{"text": system_prompt}]}

        async for event in stream_sse_events(
            self._build_stream_url(),
            payload,
            self._build_headers(),
            label="Gemini",
            timeout=self._timeout,
        ):
            usage_meta = event.get("usageMetadata")
            if isinstance(usage_meta, dict):
                self.last_usage.input_tokens = usage_meta.get(
                    "promptTokenCount", self.last_usage.input_tokens
                )
                self.last_usage.output_tokens = usage_meta.get(
                    "candidatesTokenCount", self.last_usage.output_tokens
                )
                self.last_usage.usage_details = {"usageMetadata": usage_meta}

            candidates = event.get("candidates", [])
            if not candidates:
                continue
            finish_reason = candidates[0].get("finishReason")
            if finish_reason and finish_reason not in {"STOP", "MAX_TOKENS"}:
                logger.warning("Gemini finished with reason %s", finish_reason)
            for part in candidates[0].get("content", {}).get("parts", []):
                text = part.get("text", "")
                if text:
                    yield text

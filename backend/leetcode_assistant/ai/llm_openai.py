"""OpenAI chat completions provider with streaming and token usage."""

from typing import AsyncIterator

from leetcode_assistant.ai.llm_base import (
    LLMMessage,
    LLMProvider,
    LLMUsage,
    stream_sse_events,
)

OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"


class OpenAIProvider(LLMProvider):
    def __init__(self, api_key: str, model_id: str, timeout: float = 60.0):
        super().__init__()
        self.provider_id = "openai"
        self.model_id = model_id
        self.api_key = api_key
        self._timeout = timeout

    async def generate_stream(
        self,
        system_prompt: str | None,
        messages: list[LLMMessage],
        max_tokens: int = 8192,
    ) -> AsyncIterator[str]:
        """Stream text from the Chat Completions API.

        ``stream_options.include_usage`` makes the final chunk carry usage.
        ``system_prompt``, when given, is sent as a leading ``system`` message.
        """
        self.last_usage = LLMUsage()
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        api_messages: list[dict] = []
        if system_prompt:
            api_messages.append({"role": "system", "content": system_prompt})
        api_messages.extend(
            {"role": msg["role"], "content": msg["content"]} for msg in messages
        )

        payload = {
            "model": self.model_id,
            "max_completion_tokens": max_tokens,
            "messages": api_messages,
            "stream": True,
            "stream_options": {"include_usage": True},
        }

        async for event in stream_sse_events(
            OPENAI_API_URL, payload, headers, label="OpenAI", timeout=self._timeout
        ):
            usage = event.get("usage")
            if isinstance(usage, dict):
                self.last_usage.input_tokens = usage.get("prompt_tokens", 0)
                self.last_usage.output_tokens = usage.get("completion_tokens", 0)
                self.last_usage.usage_details = {"usage": usage}

            choices = event.get("choices") or []
            if choices:
                text = choices[0].get("delta", {}).get("content") or ""
                if text:
                    yield text

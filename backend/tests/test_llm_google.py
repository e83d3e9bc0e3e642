"""Gemini provider tests."""

from __future__ import annotations

import json

import pytest

from leetcode_assistant.ai.llm_base import LLMError
from leetcode_assistant.ai.llm_google import GoogleGeminiProvider


class _FakeStreamResponse:
    def __init__(self, *, status_code: int, lines: list[str], body: str = "") -> None:
        self.status_code = status_code
        self._lines = lines
        self._body = body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def aiter_lines(self):
        for line in self._lines:
            yield line

    async def aread(self) -> bytes:
        return self._body.encode()


class _FakeAsyncClient:
    last_call: dict | None = None
    response = _FakeStreamResponse(
        status_code=200,
        lines=[
            'data: {"candidates":[{"content":{"parts":[{"text":"Use a "}]}}]}',
            "",
            "data: not-json",
            (
                "data: "
                + json.dumps(
                    {
                        "candidates": [
                            {
                                "content": {"parts": [{"text": "hash map."}]},
                                "finishReason": "STOP",
                            }
                        ],
                        "usageMetadata": {
                            "promptTokenCount": 42,
                            "candidatesTokenCount": 6,
                        },
                    }
                )
            ),
        ],
    )

    def __init__(self, *args, **kwargs) -> None:
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    def stream(self, method, url, json=None, headers=None):
        _FakeAsyncClient.last_call = {
            "method": method,
            "url": url,
            "json": json,
            "headers": headers,
        }
        return self.response


@pytest.mark.asyncio
async def test_gemini_stream_parses_text_and_usage(monkeypatch) -> None:
    monkeypatch.setattr("leetcode_assistant.ai.llm_base.httpx.AsyncClient", _FakeAsyncClient)
    provider = GoogleGeminiProvider(api_key="AIza-test-key", model_id="gemini-2.5-flash")

    text = await provider.generate(
        None,
        [
            {"role": "user", "content": "instructions"},
            {"role": "assistant", "content": "understood"},
            {"role": "user", "content": "two sum?"},
        ],
        max_tokens=64,
    )

    assert text == "Use a hash map."
    assert provider.last_usage.input_tokens == 42
    assert provider.last_usage.output_tokens == 6

    call = _FakeAsyncClient.last_call or {}
    assert call["method"] == "POST"
    assert call["url"] == (
        "https://generativelanguage.googleapis.com/v1beta/"
        "models/gemini-2.5-flash:streamGenerateContent?alt=sse"
    )
    assert call["headers"]["x-goog-api-key"] == "AIza-test-key"
    payload = call["json"]
    assert payload["generationConfig"]["maxOutputTokens"] == 64
    assert "system_instruction" not in payload
    assert [content["role"] for content in payload["contents"]] == ["user", "model", "user"]
    assert payload["contents"][2]["parts"] == [{"text": "two sum?"}]


@pytest.mark.asyncio
async def test_gemini_system_prompt_is_sent_when_given(monkeypatch) -> None:
    monkeypatch.setattr("leetcode_assistant.ai.llm_base.httpx.AsyncClient", _FakeAsyncClient)
    provider = GoogleGeminiProvider(api_key="k", model_id="gemini-2.5-flash")

    await provider.generate("Be brief.", [{"role": "user", "content": "hi"}])

    payload = (_FakeAsyncClient.last_call or {})["json"]
    assert payload["system_instruction"] == {"parts": [{"text": "Be brief."}]}


@pytest.mark.asyncio
async def test_gemini_error_status_raises_without_retry(monkeypatch) -> None:
    calls = []

    class _RejectingClient(_FakeAsyncClient):
        def stream(self, method, url, json=None, headers=None):
            calls.append(url)
            return _FakeStreamResponse(status_code=429, lines=[], body="quota exceeded")

    monkeypatch.setattr("leetcode_assistant.ai.llm_base.httpx.AsyncClient", _RejectingClient)
    provider = GoogleGeminiProvider(api_key="k", model_id="gemini-2.5-flash")

    with pytest.raises(LLMError, match="Gemini API error 429: quota exceeded"):
        await provider.generate(None, [{"role": "user", "content": "hi"}])
    assert len(calls) == 1

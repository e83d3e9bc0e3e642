"""Select and build the LLM provider, falling back to any other configured one."""

from __future__ import annotations

import logging

from leetcode_assistant.ai.llm_base import LLMError, LLMProvider
from leetcode_assistant.ai.llm_google import GoogleGeminiProvider
from leetcode_assistant.ai.llm_openai import OpenAIProvider
from leetcode_assistant.config import normalise_llm_provider

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS: tuple[str, ...] = ("google", "openai")


def _timeout(settings) -> float:
    return float(getattr(settings, "llm_request_timeout_seconds", 60.0) or 60.0)


def _build_google_provider(settings) -> GoogleGeminiProvider:
    api_key = str(getattr(settings, "google_api_key", "") or "")
    if not api_key:
        raise LLMError("GOOGLE_API_KEY (or GEMINI_API_KEY) is empty")
    model_id = str(getattr(settings, "llm_model_google", "") or "").strip()
    if not model_id:
        raise LLMError("LLM_MODEL_GOOGLE is empty")
    return GoogleGeminiProvider(api_key, model_id=model_id, timeout=_timeout(settings))


def _build_openai_provider(settings) -> OpenAIProvider:
    api_key = str(getattr(settings, "openai_api_key", "") or "")
    if not api_key:
        raise LLMError("OPENAI_API_KEY is empty")
    model_id = str(getattr(settings, "llm_model_openai", "") or "").strip()
    if not model_id:
        raise LLMError("LLM_MODEL_OPENAI is empty")
    return OpenAIProvider(api_key, model_id=model_id, timeout=_timeout(settings))


def build_llm_provider(settings, provider: str) -> LLMProvider:
    """Build one named provider or raise LLMError."""
    canonical = normalise_llm_provider(provider)
    if canonical == "google":
        return _build_google_provider(settings)
    if canonical == "openai":
        return _build_openai_provider(settings)
    raise LLMError(f"Unsupported LLM provider '{provider}'")


def provider_candidates(settings) -> list[str]:
    """Configured provider first, then the remaining supported ones."""
    configured = normalise_llm_provider(str(getattr(settings, "llm_provider", "") or ""))
    if configured not in SUPPORTED_PROVIDERS:
        logger.warning("Unknown LLM_PROVIDER '%s', defaulting to google", configured)
        configured = "google"
    return [configured] + [p for p in SUPPORTED_PROVIDERS if p != configured]


def get_llm_provider(settings) -> LLMProvider:
    """Return the configured provider and fall back to available alternatives."""
    for idx, provider in enumerate(provider_candidates(settings)):
        try:
            return build_llm_provider(settings, provider)
        except LLMError as exc:
            if idx == 0:
                logger.warning("Primary provider unavailable (%s): %s", provider, exc)
            else:
                logger.warning("Fallback unavailable (%s): %s", provider, exc)

    raise LLMError(
        "No LLM provider is available. "
        "Set GOOGLE_API_KEY (or GEMINI_API_KEY) or OPENAI_API_KEY in .env"
    )

"""FastAPI dependency injection for the model capability."""

from leetcode_assistant.ai.llm_base import LLMProvider
from leetcode_assistant.ai.llm_factory import get_llm_provider
from leetcode_assistant.config import settings

_llm_provider: LLMProvider | None = None


def get_llm() -> LLMProvider:
    """Return the shared provider, building it on first use.

    Raises LLMError when no provider has credentials configured.
    """
    global _llm_provider
    if _llm_provider is None:
        _llm_provider = get_llm_provider(settings)
    return _llm_provider


def reset_llm() -> None:
    """Forget the cached provider so the next request rebuilds it."""
    global _llm_provider
    _llm_provider = None

"""Run one chat exchange: compose, send, normalise."""

import logging
from typing import Sequence

from leetcode_assistant.ai.exchange import ExchangeSession, UpstreamError
from leetcode_assistant.ai.llm_base import LLMProvider
from leetcode_assistant.ai.prompt_composer import compose_prompt
from leetcode_assistant.config import settings
from leetcode_assistant.models.conversation import (
    ExchangeRequest,
    ExchangeResult,
    Speaker,
    Turn,
)
from leetcode_assistant.services.response_normalizer import normalize_response

logger = logging.getLogger(__name__)


def select_history_turns(
    prior_turns: Sequence[Turn],
    llm: LLMProvider,
    max_tokens: int,
) -> list[Turn]:
    """Keep the most recent forwardable turns that fit within ``max_tokens``.

    Failed exchanges and system turns are never forwarded. Older turns are
    dropped first.
    """
    candidates = [
        turn
        for turn in prior_turns
        if turn.speaker is not Speaker.SYSTEM and not turn.error and turn.text.strip()
    ]
    kept: list[Turn] = []
    used = 0
    for turn in reversed(candidates):
        cost = llm.count_tokens(turn.text)
        if used + cost > max_tokens:
            break
        kept.append(turn)
        used += cost
    kept.reverse()
    return kept


async def run_exchange(
    request: ExchangeRequest,
    llm: LLMProvider,
    *,
    forward_history: bool | None = None,
    max_context_tokens: int | None = None,
    timeout_seconds: float | None = None,
) -> ExchangeResult:
    """Compose the prompt, call the model and normalise its answer.

    Capability failures come back as an unsuccessful ``ExchangeResult``
    rather than an exception.
    """
    if forward_history is None:
        forward_history = settings.chat_forward_history
    if max_context_tokens is None:
        max_context_tokens = settings.llm_max_context_tokens
    if timeout_seconds is None:
        timeout_seconds = settings.llm_request_timeout_seconds

    composed = compose_prompt(request.raw_user_text, request.reference)

    prior: list[Turn] = []
    if forward_history and request.prior_turns:
        budget = max_context_tokens - llm.count_tokens(composed.final_prompt)
        for turn in composed.system_turns:
            budget -= llm.count_tokens(turn.text)
        if budget > 0:
            prior = select_history_turns(request.prior_turns, llm, budget)

    session = ExchangeSession(
        llm,
        timeout_seconds=timeout_seconds,
        max_tokens=settings.llm_max_output_tokens,
    )
    try:
        raw_text = await session.send(composed.final_prompt, composed.system_turns, prior)
    except UpstreamError as exc:
        logger.warning("Exchange failed: %s", exc.detail)
        return ExchangeResult.failure(exc.detail)

    return ExchangeResult(
        display_text=normalize_response(raw_text),
        raw_text=raw_text,
    )


class LocalChatBackend:
    """Exchange backend that runs the pipeline in-process instead of over HTTP."""

    def __init__(self, llm: LLMProvider, **options) -> None:
        self.llm = llm
        self.options = options

    async def exchange(self, request: ExchangeRequest) -> ExchangeResult:
        return await run_exchange(request, self.llm, **self.options)

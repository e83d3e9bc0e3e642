"""One request/response cycle with the model capability."""

import asyncio
import logging
from typing import Iterable

from leetcode_assistant.ai.llm_base import LLMError, LLMMessage, LLMProvider
from leetcode_assistant.models.conversation import Speaker, Turn

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """The model capability rejected the request, failed, or returned nothing."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


def _seed_message(turn: Turn) -> LLMMessage:
    # The capability only knows user/assistant roles; the instruction block
    # travels as a user turn followed by the assistant's acknowledgement.
    role = "assistant" if turn.speaker is Speaker.ASSISTANT else "user"
    return {"role": role, "content": turn.text}


class ExchangeSession:
    """Send a composed prompt on top of the fixed seed turns.

    Each ``send`` builds a fresh history. Nothing from a previous call is
    carried over unless the caller passes ``prior_turns`` explicitly.
    """

    def __init__(
        self,
        llm: LLMProvider,
        *,
        timeout_seconds: float | None = 60.0,
        max_tokens: int = 8192,
    ) -> None:
        self.llm = llm
        self.timeout_seconds = timeout_seconds
        self.max_tokens = max_tokens
        self.history: list[LLMMessage] = []

    def _build_history(
        self,
        final_prompt: str,
        system_turns: Iterable[Turn],
        prior_turns: Iterable[Turn],
    ) -> list[LLMMessage]:
        history = [_seed_message(turn) for turn in system_turns]
        for turn in prior_turns:
            if turn.speaker is Speaker.SYSTEM:
                continue
            history.append({"role": turn.speaker.value, "content": turn.text})
        history.append({"role": "user", "content": final_prompt})
        return history

    async def send(
        self,
        final_prompt: str,
        system_turns: Iterable[Turn],
        prior_turns: Iterable[Turn] = (),
    ) -> str:
        """Return the completion text verbatim or raise ``UpstreamError``."""
        self.history = self._build_history(final_prompt, system_turns, prior_turns)
        call = self.llm.generate(None, list(self.history), max_tokens=self.max_tokens)

        try:
            if self.timeout_seconds:
                text = await asyncio.wait_for(call, timeout=self.timeout_seconds)
            else:
                text = await call
        except asyncio.TimeoutError:
            raise UpstreamError(
                f"Model did not respond within {self.timeout_seconds:g} seconds"
            )
        except LLMError as exc:
            raise UpstreamError(str(exc)) from exc
        except Exception as exc:
            logger.exception("Unexpected model capability failure")
            raise UpstreamError(f"Unexpected model error: {exc}") from exc

        if not text or not text.strip():
            raise UpstreamError("Model returned an empty response")

        logger.info(
            "Exchange completed (%s/%s): in=%d out=%d",
            self.llm.provider_id,
            self.llm.model_id,
            self.llm.last_usage.input_tokens,
            self.llm.last_usage.output_tokens,
        )
        return text

"""Client-side conversation state: turns, pinned problem, single-flight sending."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Protocol

from leetcode_assistant.ai.problem_ref import detect_reference, extract_problem_reference
from leetcode_assistant.ai.prompts import REFERENCE_ANNOUNCEMENT_TEMPLATE
from leetcode_assistant.models.conversation import (
    ExchangeRequest,
    ExchangeResult,
    ProblemReference,
    Speaker,
    Turn,
)

logger = logging.getLogger(__name__)

ERROR_APOLOGY = "Sorry, I encountered an error. Please try again."


class ConversationStatus(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    # Transient: entered when an exchange fails, left as soon as the error turn is recorded.
    ERROR = "error"


class ExchangeBackend(Protocol):
    async def exchange(self, request: ExchangeRequest) -> ExchangeResult: ...


StatusListener = Callable[[ConversationStatus], None]


@dataclass
class ConversationState:
    """Everything one conversation owns. Turns are only ever appended."""

    turns: list[Turn] = field(default_factory=list)
    pinned_reference: Optional[ProblemReference] = None
    status: ConversationStatus = ConversationStatus.IDLE


class Conversation:
    """Drive exchanges for one conversation, one at a time."""

    def __init__(self, backend: ExchangeBackend, state: ConversationState | None = None) -> None:
        self.backend = backend
        self.state = state or ConversationState()
        self._listeners: list[StatusListener] = []

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self.state.turns)

    @property
    def pinned_reference(self) -> ProblemReference | None:
        return self.state.pinned_reference

    @property
    def status(self) -> ConversationStatus:
        return self.state.status

    def subscribe(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def _set_status(self, status: ConversationStatus) -> None:
        self.state.status = status
        for listener in self._listeners:
            listener(status)

    def pin_reference(self, url: str) -> ProblemReference | None:
        """Pin the problem at ``url``; unrecognised URLs leave the pin unchanged."""
        reference = extract_problem_reference(url)
        if reference is None:
            logger.info("Not a problem URL, pin unchanged: %s", url)
            return None
        self.state.pinned_reference = reference
        return reference

    def last_assistant_turn(self) -> Turn | None:
        for turn in reversed(self.state.turns):
            if turn.speaker is Speaker.ASSISTANT:
                return turn
        return None

    async def submit(self, text: str, additional_context: str = "") -> Turn | None:
        """Send ``text`` and return the assistant turn it produced.

        Returns None without touching the history when there is nothing to
        send or another exchange is still in flight.
        """
        if not text.strip() and not additional_context:
            return None
        if self.state.status is ConversationStatus.SENDING:
            logger.warning("Exchange already in flight, submission rejected")
            return None

        detected_url = detect_reference(text)
        if detected_url:
            self.pin_reference(detected_url)
        reference = self.state.pinned_reference

        message_to_send = f"{additional_context} {text}" if additional_context else text
        prior_turns = tuple(self.state.turns)
        self.state.turns.append(
            Turn(
                speaker=Speaker.USER,
                text=text if text.strip() else message_to_send.strip(),
                attached_reference=reference,
            )
        )
        self._set_status(ConversationStatus.SENDING)

        try:
            try:
                result = await self.backend.exchange(
                    ExchangeRequest(
                        raw_user_text=message_to_send,
                        reference=reference,
                        prior_turns=prior_turns,
                    )
                )
            except Exception as exc:
                logger.exception("Exchange backend raised")
                result = ExchangeResult.failure(str(exc) or type(exc).__name__)

            if result.succeeded:
                reply = Turn(
                    speaker=Speaker.ASSISTANT,
                    text=result.display_text,
                    attached_reference=reference,
                    raw_text=result.raw_text,
                )
            else:
                self._set_status(ConversationStatus.ERROR)
                reply = Turn(
                    speaker=Speaker.ASSISTANT,
                    text=ERROR_APOLOGY,
                    attached_reference=reference,
                    error=True,
                    error_detail=result.error_detail,
                )
            self.state.turns.append(reply)
        finally:
            self._set_status(ConversationStatus.IDLE)
        return reply

    async def announce_reference(self) -> Turn | None:
        """Tell the assistant which problem is pinned, with no extra question."""
        reference = self.state.pinned_reference
        if reference is None:
            return None
        return await self.submit(
            "",
            additional_context=REFERENCE_ANNOUNCEMENT_TEMPLATE.format(url=reference.source_url),
        )

    async def quick_action(self, prompt: str, *, announce: bool = False) -> Turn | None:
        """Submit a canned prompt, optionally announcing the pinned problem first."""
        reference = self.state.pinned_reference
        if announce and reference is not None:
            return await self.submit(
                prompt,
                additional_context=REFERENCE_ANNOUNCEMENT_TEMPLATE.format(
                    url=reference.source_url
                ),
            )
        return await self.submit(prompt)

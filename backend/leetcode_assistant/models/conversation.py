"""Conversation domain values shared by the backend pipeline and the client."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Speaker(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


@dataclass(frozen=True)
class ProblemReference:
    """A LeetCode problem identified from a URL.

    ``identifier`` is the catalog slug and is always derived from
    ``source_url``; ``display_title`` is the humanised slug.
    """

    identifier: str
    display_title: str
    source_url: str


@dataclass(frozen=True)
class Turn:
    """One message in a conversation. Turns are immutable once created."""

    speaker: Speaker
    text: str
    attached_reference: Optional[ProblemReference] = None
    created_at: datetime = field(default_factory=_utc_now)
    # Unnormalised model output, kept for diagnostic display.
    raw_text: Optional[str] = field(default=None, repr=False)
    error: bool = False
    error_detail: Optional[str] = None


@dataclass(frozen=True)
class ExchangeRequest:
    raw_user_text: str
    reference: Optional[ProblemReference] = None
    prior_turns: tuple[Turn, ...] = ()


@dataclass(frozen=True)
class ExchangeResult:
    display_text: str
    raw_text: str
    succeeded: bool = True
    error_detail: Optional[str] = None

    @classmethod
    def failure(cls, detail: str) -> "ExchangeResult":
        return cls(display_text="", raw_text="", succeeded=False, error_detail=detail)

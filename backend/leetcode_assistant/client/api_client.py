"""HTTP client for the backend's POST /api/chat endpoint."""

import logging

import httpx

from leetcode_assistant.models.conversation import ExchangeRequest, ExchangeResult, Speaker
from leetcode_assistant.schemas.chat import MAX_HISTORY_MESSAGES

logger = logging.getLogger(__name__)

CHAT_CONTEXT_TAG = "leetcode"


def build_chat_payload(request: ExchangeRequest, history_limit: int = MAX_HISTORY_MESSAGES) -> dict:
    """Translate an exchange request into the endpoint's JSON body.

    Only the most recent ``history_limit`` forwardable turns are included.
    """
    history = [
        {"role": turn.speaker.value, "content": turn.text}
        for turn in request.prior_turns
        if turn.speaker is not Speaker.SYSTEM and not turn.error
    ]
    return {
        "userMessage": request.raw_user_text,
        "leetcodeUrl": request.reference.source_url if request.reference else None,
        "context": CHAT_CONTEXT_TAG,
        "history": history[-history_limit:] if history_limit > 0 else [],
    }


class ChatApiClient:
    """Exchange backend that talks to a running server over HTTP.

    Transport failures and non-200 replies are returned as unsuccessful
    results; ``exchange`` does not raise for them.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 90.0,
        transport: httpx.AsyncBaseTransport | None = None,
        history_limit: int = MAX_HISTORY_MESSAGES,
    ) -> None:
        self.history_limit = history_limit
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ChatApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def exchange(self, request: ExchangeRequest) -> ExchangeResult:
        try:
            response = await self._client.post(
                "/api/chat",
                json=build_chat_payload(request, self.history_limit),
            )
        except httpx.HTTPError as exc:
            logger.error("Error sending message: %s", exc)
            return ExchangeResult.failure(f"Could not reach the assistant backend: {exc}")

        if response.status_code != 200:
            detail = _error_detail(response)
            logger.error("Backend returned %d: %s", response.status_code, detail)
            return ExchangeResult.failure(detail)

        try:
            data = response.json()
            return ExchangeResult(display_text=data["response"], raw_text=data["aiResponse"])
        except (ValueError, KeyError, TypeError) as exc:
            logger.error("Malformed backend reply: %s", exc)
            return ExchangeResult.failure(f"Malformed backend reply: {exc}")


def _error_detail(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return f"HTTP {response.status_code}: {response.text}"
    if isinstance(data, dict):
        details = data.get("details") or data.get("detail") or data.get("error")
        if details:
            return f"HTTP {response.status_code}: {details}"
    return f"HTTP {response.status_code}"

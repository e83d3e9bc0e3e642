"""Chat router: the single POST endpoint used by the client."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from leetcode_assistant.ai.llm_base import LLMProvider
from leetcode_assistant.ai.problem_ref import extract_problem_reference
from leetcode_assistant.dependencies import get_llm
from leetcode_assistant.models.conversation import ExchangeRequest, Speaker, Turn
from leetcode_assistant.schemas.chat import ChatRequest, ChatResponse, ErrorResponse
from leetcode_assistant.services.chat_service import run_exchange
from leetcode_assistant.services.rate_limiter import rate_limiter

logger = logging.getLogger(__name__)

router = APIRouter(tags=["chat"])

CHAT_ERROR_MESSAGE = "An error occurred while processing your request."
RATE_LIMIT_MESSAGE = "Too many requests. Please wait a moment and try again."


def _error_response(status_code: int, error: str, details: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, details=details).model_dump(),
    )


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "anonymous"


@router.post(
    "/api/chat",
    response_model=ChatResponse,
    responses={429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def chat(
    payload: ChatRequest,
    request: Request,
    llm: Annotated[LLMProvider, Depends(get_llm)],
):
    """Answer one user message, enriched with the referenced problem if any."""
    client_key = _client_key(request)
    decision = rate_limiter.admit(client_key)
    if not decision.allowed:
        logger.warning("Rate limit (%s) hit for client %s", decision.scope, client_key)
        details = (
            "Per-client request limit reached."
            if decision.scope == "client"
            else "Service request limit reached."
        )
        response = _error_response(status.HTTP_429_TOO_MANY_REQUESTS, RATE_LIMIT_MESSAGE, details)
        response.headers["Retry-After"] = str(decision.retry_after)
        return response

    reference = extract_problem_reference(payload.leetcode_url)
    if payload.leetcode_url and reference is None:
        logger.info("Ignoring unrecognised problem URL: %s", payload.leetcode_url)
    if payload.context and payload.context != "leetcode":
        logger.debug("Unexpected chat context tag: %s", payload.context)

    exchange_request = ExchangeRequest(
        raw_user_text=payload.user_message,
        reference=reference,
        prior_turns=tuple(
            Turn(speaker=Speaker(message.role), text=message.content)
            for message in payload.history
        ),
    )
    result = await run_exchange(exchange_request, llm)
    if not result.succeeded:
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            CHAT_ERROR_MESSAGE,
            result.error_detail or "Unknown error",
        )

    return ChatResponse(response=result.display_text, ai_response=result.raw_text)

from leetcode_assistant.schemas.chat import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    MAX_HISTORY_MESSAGES,
    HistoryMessageIn,
)

__all__ = [
    "MAX_HISTORY_MESSAGES",
    "ChatRequest",
    "ChatResponse",
    "ErrorResponse",
    "HistoryMessageIn",
]

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Upper bound on forwarded turns in one request body.
MAX_HISTORY_MESSAGES = 40


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HistoryMessageIn(_CamelModel):
    # System turns are injected server-side only.
    role: Literal["user", "assistant"]
    content: str = Field(default="", max_length=64000)


class ChatRequest(_CamelModel):
    user_message: str = Field(max_length=16000)
    leetcode_url: str | None = Field(default=None, max_length=2048)
    context: str = ""
    history: list[HistoryMessageIn] = Field(default_factory=list, max_length=MAX_HISTORY_MESSAGES)

    @field_validator("user_message")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("userMessage must not be blank")
        return value


class ChatResponse(_CamelModel):
    response: str
    ai_response: str


class ErrorResponse(BaseModel):
    error: str
    details: str

from leetcode_assistant.models.conversation import (
    ExchangeRequest,
    ExchangeResult,
    ProblemReference,
    Speaker,
    Turn,
)

__all__ = [
    "ExchangeRequest",
    "ExchangeResult",
    "ProblemReference",
    "Speaker",
    "Turn",
]

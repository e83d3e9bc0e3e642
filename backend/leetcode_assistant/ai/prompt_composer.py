"""Build the outgoing prompt and the fixed seed turns for one exchange."""

from dataclasses import dataclass

from leetcode_assistant.ai.prompts import (
    PROBLEM_CONTEXT_TEMPLATE,
    RESPONSE_FORMAT_DIRECTIVES,
    SYSTEM_ACKNOWLEDGEMENT,
    SYSTEM_INSTRUCTIONS,
)
from leetcode_assistant.models.conversation import ProblemReference, Speaker, Turn

# Injected at the start of every exchange, never shown in the visible history.
SYSTEM_TURNS: tuple[Turn, Turn] = (
    Turn(speaker=Speaker.SYSTEM, text=SYSTEM_INSTRUCTIONS),
    Turn(speaker=Speaker.ASSISTANT, text=SYSTEM_ACKNOWLEDGEMENT),
)


@dataclass(frozen=True)
class ComposedPrompt:
    system_turns: tuple[Turn, Turn]
    final_prompt: str


def _format_directives() -> str:
    return "\n".join(
        f"{index}. {directive}"
        for index, directive in enumerate(RESPONSE_FORMAT_DIRECTIVES, start=1)
    )


def build_problem_prompt(user_text: str, reference: ProblemReference) -> str:
    """Wrap the user's question with the problem title, URL and format directive."""
    return PROBLEM_CONTEXT_TEMPLATE.format(
        title=reference.display_title,
        url=reference.source_url,
        question=user_text,
        directives=_format_directives(),
    )


def compose_prompt(user_text: str, reference: ProblemReference | None) -> ComposedPrompt:
    """Return the seed turns and the final prompt for ``user_text``.

    Without a reference the user's text is sent unchanged.
    """
    if reference is None:
        final_prompt = user_text
    else:
        final_prompt = build_problem_prompt(user_text, reference)
    return ComposedPrompt(system_turns=SYSTEM_TURNS, final_prompt=final_prompt)

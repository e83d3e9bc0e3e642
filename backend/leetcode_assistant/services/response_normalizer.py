"""Post-process model output for display and split it into typed segments."""

from __future__ import annotations

import re
from dataclasses import dataclass

_ESCAPED_NEWLINE = "\\n"
# Opening fence with a language tag followed by stray whitespace up to the line end.
_FENCE_OPENING = re.compile(r"```(\w+)\s*\n")
# Fences delimit blocks only at the start of a line.
_FENCED_BLOCK = re.compile(
    r"^```[ \t]*([^\s`]*)[^\n]*\n(.*?)(?:\n```|^```|\Z)",
    re.DOTALL | re.MULTILINE,
)


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class CodeBlock:
    language: str | None
    code: str


Segment = PlainText | CodeBlock


def normalize_response(raw_text: str) -> str:
    """Return display text for a raw completion.

    Literal ``\\n`` sequences become real line breaks, and the opening line
    of each fenced block is reduced to the fence and its language tag.
    Applying this twice gives the same result as applying it once.
    """
    # Escapes first: replacing them can only add newlines, which the fence
    # rule below then absorbs in the same pass.
    text = raw_text.replace(_ESCAPED_NEWLINE, "\n")
    return _FENCE_OPENING.sub(r"```\1\n", text)


def split_segments(text: str) -> list[Segment]:
    """Split markdown text into plain runs and fenced code blocks.

    An unterminated fence runs to the end of the text.
    """
    segments: list[Segment] = []
    cursor = 0
    for match in _FENCED_BLOCK.finditer(text):
        if match.start() > cursor:
            segments.append(PlainText(text[cursor:match.start()]))
        language = match.group(1) or None
        segments.append(CodeBlock(language=language, code=match.group(2)))
        cursor = match.end()
    if cursor < len(text):
        segments.append(PlainText(text[cursor:]))
    return segments

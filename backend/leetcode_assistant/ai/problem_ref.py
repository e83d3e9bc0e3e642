"""Identify LeetCode problems from URLs and free text.

Everything here is a pure string transform. No request is made to the
catalog, so nothing is known about a problem beyond its slug.
"""

import logging
import re
from typing import Literal
from urllib.parse import urlsplit

from leetcode_assistant.models.conversation import ProblemReference

logger = logging.getLogger(__name__)

CATALOG_DOMAIN = "leetcode.com"
PROBLEMS_SEGMENT = "problems"

_REFERENCE_PATTERN = re.compile(r"https?://(?:www\.)?leetcode\.com/problems/\S+")

Difficulty = Literal["Easy", "Medium", "Hard"]

# Title keywords only. This is a display hint, not catalog data.
_HARD_KEYWORDS = (
    "median of two",
    "regular expression",
    "wildcard",
    "trapping rain",
    "n-queens",
    "n queens",
    "minimum window",
    "merge k",
    "sliding window maximum",
    "largest rectangle",
    "word ladder",
    "edit distance",
    "serialize",
    "alien dictionary",
    "burst balloons",
    "longest valid parentheses",
)
_EASY_KEYWORDS = (
    "two sum",
    "valid",
    "palindrome",
    "reverse",
    "merge two",
    "maximum depth",
    "climbing stairs",
    "best time to buy and sell stock",
    "contains duplicate",
    "roman",
    "majority element",
    "single number",
    "missing number",
    "fizz buzz",
    "same tree",
    "symmetric tree",
)


def humanize_slug(slug: str) -> str:
    """Turn ``two-sum`` into ``Two Sum``."""
    words = [word for word in slug.split("-") if word]
    return " ".join(word[:1].upper() + word[1:] for word in words)


def extract_problem_reference(url: str | None) -> ProblemReference | None:
    """Return the problem a URL points at, or None when it is not a problem URL.

    Never raises: malformed input degrades to "no context".
    """
    if not url:
        return None

    url = url.strip()
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError as exc:
        logger.debug("Ignoring unparsable problem URL %r: %s", url, exc)
        return None

    if not parts.scheme or not hostname:
        return None
    if CATALOG_DOMAIN not in hostname:
        return None

    segments = [segment for segment in parts.path.split("/") if segment]
    if len(segments) < 2 or segments[0] != PROBLEMS_SEGMENT:
        return None

    slug = segments[1]
    return ProblemReference(
        identifier=slug,
        display_title=humanize_slug(slug),
        source_url=url,
    )


def detect_reference(text: str) -> str | None:
    """Return the first problem URL embedded in ``text``, if any."""
    if not text:
        return None
    match = _REFERENCE_PATTERN.search(text)
    return match.group(0) if match else None


def guess_difficulty(title: str) -> Difficulty:
    """Guess a difficulty label from the problem title.

    Purely a keyword heuristic for display. It is frequently wrong and must
    not be presented as the catalog's rating.
    """
    lowered = title.lower()
    if any(keyword in lowered for keyword in _HARD_KEYWORDS):
        return "Hard"
    if any(keyword in lowered for keyword in _EASY_KEYWORDS):
        return "Easy"
    return "Medium"

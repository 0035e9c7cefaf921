"""Excerpt truncation for search result previews.

Cuts text to a maximum length, preferring a sentence end and falling back
to the last word boundary so words are never split.
"""

from __future__ import annotations

import re


SENTENCE_END_PATTERN = re.compile(r"[.!?](?=\s|$)")
WORD_BOUNDARY_PATTERN = re.compile(r"\s+")
ELLIPSIS = "..."


def find_cut_position(text: str, max_chars: int) -> int:
    """Return the index to cut ``text`` at so the result fits in ``max_chars``.

    A sentence end in the last quarter of the window wins; otherwise the last
    whitespace inside the window; otherwise a hard cut.
    """
    if len(text) <= max_chars:
        return len(text)

    window = text[:max_chars]
    sentence_ends = [match.end() for match in SENTENCE_END_PATTERN.finditer(window)]
    if sentence_ends and sentence_ends[-1] >= (max_chars * 3) // 4:
        return sentence_ends[-1]

    boundaries = [match.start() for match in WORD_BOUNDARY_PATTERN.finditer(window)]
    if boundaries and boundaries[-1] > 0:
        return boundaries[-1]

    return max_chars


def truncate_excerpt(text: str, max_chars: int | None) -> str:
    """Shorten ``text`` to at most ``max_chars`` characters plus an ellipsis.

    ``None`` returns the text unchanged.
    """
    if max_chars is None or not text:
        return text
    if max_chars <= 0:
        return ""
    stripped = text.strip()
    if len(stripped) <= max_chars:
        return stripped

    cut = find_cut_position(stripped, max_chars)
    snippet = stripped[:cut].rstrip()
    if snippet.endswith((".", "!", "?")):
        return snippet
    return snippet.rstrip(",;:") + ELLIPSIS

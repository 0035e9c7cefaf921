"""Proximity bonus for multi-word queries.

A document whose query words sit next to each other in one free-text field
gets its score multiplied by up to ``MAX_PHRASE_BONUS``.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping, Sequence


MAX_PHRASE_BONUS = 1.5
# Spans wider than this multiple of the term count earn nothing.
_MAX_SCATTER_RATIO = 3.0


def get_min_span(term_positions: Mapping[str, Sequence[int]]) -> float:
    """Width of the narrowest window holding one position of every key.

    Width counts positions inclusively, so adjacent terms give a width equal
    to the number of keys. A position listed under more than one key cannot
    stand in for both, so such shared positions are ignored. Returns ``inf``
    when some key is left without positions.
    """
    if not term_positions:
        return float("inf")
    if len(term_positions) == 1:
        return 1.0 if all(term_positions.values()) else float("inf")

    owners = Counter(pos for positions in term_positions.values() for pos in set(positions))
    usable = {key: [pos for pos in positions if owners[pos] == 1] for key, positions in term_positions.items()}
    if not all(usable.values()):
        return float("inf")

    events = sorted((pos, key) for key, positions in usable.items() for pos in positions)
    wanted = len(term_positions)
    window: Counter[str] = Counter()
    best = float("inf")
    left = 0
    for pos, key in events:
        window[key] += 1
        while len(window) == wanted:
            left_pos, left_key = events[left]
            best = min(best, pos - left_pos + 1)
            window[left_key] -= 1
            if not window[left_key]:
                del window[left_key]
            left += 1
    return best


def proximity_multiplier(span: float, term_count: int) -> float:
    """Score multiplier for a window of width ``span`` over ``term_count`` terms."""

    if term_count < 2 or span == float("inf"):
        return 1.0
    ratio = span / term_count
    if ratio <= 1.0:
        return MAX_PHRASE_BONUS
    if ratio >= _MAX_SCATTER_RATIO:
        return 1.0
    # linear falloff from the full bonus at ratio 1 to none at the cap
    return MAX_PHRASE_BONUS - (MAX_PHRASE_BONUS - 1.0) * (ratio - 1.0) / (_MAX_SCATTER_RATIO - 1.0)

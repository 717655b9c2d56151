"""
jinjalens.hover - Filter Documentation on Hover
===============================================

Shows a one-line description when the pointer rests on a known filter
name inside a template block.
"""

from __future__ import annotations

import re

from jinjalens.config import LensConfig
from jinjalens.context import clamp_offset, resolve_context
from jinjalens.models import ContextKind, HoverResult
from jinjalens.tables import FILTER_DOCS


WORD = re.compile(r"\b\w+\b")


def token_near(text: str, pos: int, window: int) -> str | None:
    """
    The word closest to ``pos`` within ``window`` characters on each side.

    A word touching the cursor wins; otherwise the one with the smallest
    gap, preferring the earlier word on ties.
    """
    offset = max(0, pos - window)
    best: tuple[int, str] | None = None
    for match in WORD.finditer(text[offset:pos + window]):
        start, end = match.start() + offset, match.end() + offset
        gap = 0 if start <= pos <= end else min(abs(start - pos), abs(end - pos))
        if best is None or gap < best[0]:
            best = (gap, match.group(0))
    return best[1] if best else None


def hover(
    text: str,
    pos: int,
    config: LensConfig | None = None,
) -> HoverResult | None:
    """
    Documentation for the filter under the cursor.

    Returns ``None`` outside template blocks, when no word is near the
    cursor, or when the word is not a documented filter.

    Examples
    --------
    >>> hover("{{ name | upper }}", 12).text
    'Converts a string to uppercase'
    """
    config = config or LensConfig()
    pos = clamp_offset(text, pos)
    if resolve_context(text, pos, config).kind is ContextKind.NONE:
        return None

    word = token_near(text, pos, config.hover_window)
    if word is None or word not in FILTER_DOCS:
        return None
    return HoverResult(position=pos, text=FILTER_DOCS[word])

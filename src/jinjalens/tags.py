"""
jinjalens.tags - Tag Balance Checking
=====================================

Matches opening block tags (``if``, ``for``, ...) with their end tags
using a stack, and catches common keyword typos.

Check order per statement block:

1. Typo lookup on the first word (``esle`` -> "Did you mean 'else'?").
2. Opening tag: push onto the stack.
3. End tag: compare with the stack top. A mismatch is reported and the
   stack is left as it is, so the open tag is still reported as unclosed
   at the end.
4. Any other word starting with ``end``: invalid end tag.

Diagnostics come out in document order, followed by one "Unclosed" report
per tag left on the stack (outermost first).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from jinjalens.config import LensConfig
from jinjalens.models import Block, BlockKind, Diagnostic, DiagnosticBuilder, StackEntry
from jinjalens.tables import CLOSING_TAGS, OPENING_TAGS, TYPOS


logger = logging.getLogger(__name__)

# First word of a statement; whitespace-control markers on either side are not part of it.
FIRST_WORD = re.compile(r"[-+]?\s*(\w+)")


def is_inline_set(content: str) -> bool:
    """Whether a ``set`` statement assigns inline (``set x = y``) and needs no ``endset``."""
    return "=" in content


def check_tag_balance(
    blocks: Iterable[Block],
    config: LensConfig | None = None,
) -> list[Diagnostic]:
    """
    Check that block tags are opened and closed in a balanced way.

    Parameters
    ----------
    blocks : Iterable[Block]
        Blocks in document order; only statement blocks are inspected.

    config : LensConfig | None
        ``inline_set_closes`` decides whether ``{% set x = y %}`` opens a
        block.

    Returns
    -------
    list[Diagnostic]
        Typos, unexpected/mismatched/invalid end tags in document order,
        then unclosed tags.
    """
    config = config or LensConfig()
    builder = DiagnosticBuilder()
    stack: list[StackEntry] = []

    for block in blocks:
        if block.kind is not BlockKind.STATEMENT:
            continue
        match = FIRST_WORD.match(block.content)
        if match is None:
            continue

        word = match.group(1)
        word_start = block.content_offset + match.start(1)
        word_end = word_start + len(word)

        if word in TYPOS:
            builder.error(word_start, word_end, f"Did you mean '{TYPOS[word]}'?")

        if word in OPENING_TAGS:
            if word == "set" and config.inline_set_closes and is_inline_set(block.content):
                continue
            stack.append(StackEntry(
                tag_name=word,
                position=block.start,
                end=block.end,
                raw_content=block.content,
            ))
        elif word in CLOSING_TAGS:
            if not stack:
                builder.error(
                    block.start, block.end,
                    f"Unexpected '{word}' - no matching opening tag",
                )
            elif stack[-1].tag_name != CLOSING_TAGS[word]:
                builder.error(
                    block.start, block.end,
                    f"Expected 'end{stack[-1].tag_name}' but found '{word}'",
                )
            else:
                stack.pop()
        elif word.startswith("end"):
            builder.error(word_start, word_end, f"Invalid end tag '{word}'")

    for entry in stack:
        builder.error(
            entry.position, entry.end,
            f"Unclosed '{entry.tag_name}' tag - missing 'end{entry.tag_name}'",
        )

    logger.debug("Tag check left %d unclosed tag(s)", len(stack))
    return builder.build()

"""
jinjalens.scanner - Block Parser
================================

Splits a whole document into delimited blocks in a single pass.

The scanner is an explicit state machine rather than a regular
expression so multi-line blocks and quoted closers behave predictably:

    OUTSIDE ──{{──> IN_EXPRESSION ──}}──> OUTSIDE
            ──{%──> IN_STATEMENT  ──%}──> OUTSIDE
            ──{#──> IN_COMMENT    ──#}──> OUTSIDE

    IN_EXPRESSION / IN_STATEMENT ──quote──> IN_STRING ──quote──> (back)

Inside a block any of the three closers ends it; a closer that does not
belong to the opener is reported as a mismatch. Inside a string literal
closers are ignored, so ``{{ "}}" }}`` is one block. A string that is not
terminated before the end of its line is not a string after all: the
scanner rewinds and treats the quote as an ordinary character, leaving
the unmatched quote for the structural check to report.

Usage
-----
>>> from jinjalens.scanner import parse_blocks
>>> result = parse_blocks("{{ a }} {% if b %")
>>> [b.content for b in result.blocks]
['a']
>>> [d.message for d in result.diagnostics]
['Unclosed block']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from jinjalens.models import Block, BlockKind, Diagnostic, DiagnosticBuilder
from jinjalens.tables import CLOSERS, DELIMITERS, QUOTES


logger = logging.getLogger(__name__)


class ScanState(str, Enum):
    """States of the block scanner."""

    OUTSIDE = "outside"
    IN_EXPRESSION = "in-expression"
    IN_STATEMENT = "in-statement"
    IN_COMMENT = "in-comment"
    IN_STRING = "in-string"


_STATE_BY_KIND = {
    BlockKind.EXPRESSION: ScanState.IN_EXPRESSION,
    BlockKind.STATEMENT: ScanState.IN_STATEMENT,
    BlockKind.COMMENT: ScanState.IN_COMMENT,
}


@dataclass
class ScanResult:
    """Blocks that parsed cleanly plus diagnostics for those that did not."""

    blocks: list[Block] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)


def _make_block(text: str, opener: str, start: int, close_at: int) -> Block:
    closer, kind = DELIMITERS[opener]
    inner_start = start + len(opener)
    raw = text[inner_start:close_at]
    content = raw.strip()
    leading = len(raw) - len(raw.lstrip())
    return Block(
        kind=kind,
        start=start,
        end=close_at + len(closer),
        content=content,
        opener=opener,
        closer=closer,
        content_offset=inner_start + leading,
    )


def parse_blocks(text: str) -> ScanResult:
    """
    Scan ``text`` for ``{{ }}``, ``{% %}`` and ``{# #}`` blocks.

    Parameters
    ----------
    text : str
        Full document text.

    Returns
    -------
    ScanResult
        ``blocks`` in document order, and diagnostics for blocks that run
        to the end of input ("Unclosed block", spanning the whole rest of
        the text) or end with the wrong closer (reported on the closer).
        Neither kind of broken block appears in ``blocks``.
    """
    builder = DiagnosticBuilder()
    blocks: list[Block] = []
    length = len(text)

    state = ScanState.OUTSIDE
    opener = ""
    start = 0
    # Return state and opening offset of the current string literal.
    string_from = ScanState.OUTSIDE
    quote = ""
    quote_at = 0
    # Quotes before this offset were proven unterminated on their line.
    literal_before = {q: -1 for q in QUOTES}

    i = 0
    while True:
        if i >= length:
            if state is not ScanState.IN_STRING:
                break
            literal_before[quote] = length
            state = string_from
            i = quote_at + 1
            continue

        ch = text[i]

        if state is ScanState.OUTSIDE:
            pair = text[i:i + 2]
            if pair in DELIMITERS:
                opener = pair
                start = i
                state = _STATE_BY_KIND[DELIMITERS[pair][1]]
                i += 2
            else:
                i += 1
            continue

        if state is ScanState.IN_STRING:
            if ch == "\\":
                i += 2
            elif ch == quote:
                state = string_from
                i += 1
            elif ch == "\n":
                literal_before[quote] = i
                state = string_from
                i = quote_at + 1
            else:
                i += 1
            continue

        pair = text[i:i + 2]
        if pair in CLOSERS:
            expected = DELIMITERS[opener][0]
            if pair == expected:
                blocks.append(_make_block(text, opener, start, i))
            else:
                builder.error(
                    i, i + 2,
                    f"Mismatched delimiter: expected '{expected}' but found '{pair}'",
                )
            state = ScanState.OUTSIDE
            i += 2
            continue

        if state is not ScanState.IN_COMMENT and ch in QUOTES and i >= literal_before[ch]:
            string_from = state
            state = ScanState.IN_STRING
            quote = ch
            quote_at = i
        i += 1

    if state is not ScanState.OUTSIDE:
        builder.error(start, length, "Unclosed block")

    logger.debug("Scanned %d block(s), %d diagnostic(s)", len(blocks), len(builder))
    return ScanResult(blocks=blocks, diagnostics=builder.build())

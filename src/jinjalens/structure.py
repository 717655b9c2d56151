"""
jinjalens.structure - Quote and Bracket Balance
===============================================

Surface checks on the content of each block. Quotes are counted per
quote character; brackets are tracked with one depth counter per pair.
Neither check understands nesting across kinds, so ``"it's"`` reports an
unmatched single quote.
"""

from __future__ import annotations

from collections.abc import Iterable

from jinjalens.models import Block, BlockKind, Diagnostic, DiagnosticBuilder
from jinjalens.tables import BRACKET_PAIRS, QUOTES


def _check_quotes(block: Block, builder: DiagnosticBuilder) -> None:
    for quote in QUOTES:
        count = block.content.count(quote)
        if count % 2:
            at = block.content_offset + block.content.rindex(quote)
            builder.error(at, at + 1, f"Unmatched {quote} quote")


def _check_brackets(block: Block, builder: DiagnosticBuilder) -> None:
    content = block.content
    base = block.content_offset
    for open_char, close_char, name in BRACKET_PAIRS:
        depth = 0
        first_open = -1
        for i, ch in enumerate(content):
            if ch == open_char:
                if depth == 0:
                    first_open = i
                depth += 1
            elif ch == close_char:
                if depth == 0:
                    builder.error(base + i, base + i + 1, f"Unexpected closing {name}")
                else:
                    depth -= 1
        if depth > 0:
            builder.error(
                base + first_open, base + first_open + 1,
                f"Unmatched opening {name}",
            )


def check_structure(blocks: Iterable[Block]) -> list[Diagnostic]:
    """
    Check quote and bracket balance inside expression and statement blocks.

    Comments hold free prose and are skipped.

    Returns
    -------
    list[Diagnostic]
        Per block in document order: quote problems, then bracket
        problems for ``()``, ``[]`` and ``{}``.
    """
    builder = DiagnosticBuilder()
    for block in blocks:
        if block.kind is BlockKind.COMMENT:
            continue
        _check_quotes(block, builder)
        _check_brackets(block, builder)
    return builder.build()

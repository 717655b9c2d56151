"""
jinjalens.delimiters - Mixed Delimiter Detection
================================================

Flags known cross-delimiter contamination such as ``{{%`` or ``%}}``.
Runs on the raw text independently of block parsing, so a construct the
block parser also rejects is reported by both passes unless
``LensConfig.dedupe_mixed_delimiters`` is set (see ``linter.lint``).
"""

from __future__ import annotations

from jinjalens.models import Diagnostic, DiagnosticBuilder
from jinjalens.tables import MIXED_DELIMITER_PATTERNS


MIXED_DELIMITER_MESSAGE = "Mixed delimiter syntax"


def check_mixed_delimiters(text: str) -> list[Diagnostic]:
    """
    Report every mixed-delimiter match at its exact span.

    Matches from all patterns are returned sorted by offset.

    Examples
    --------
    >>> [(d.start, d.end) for d in check_mixed_delimiters("a {{% b")]
    [(2, 5)]
    """
    spans = sorted(
        match.span()
        for pattern in MIXED_DELIMITER_PATTERNS
        for match in pattern.finditer(text)
    )
    builder = DiagnosticBuilder()
    for start, end in spans:
        builder.error(start, end, MIXED_DELIMITER_MESSAGE)
    return builder.build()

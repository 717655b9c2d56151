"""
jinjalens.linter - Whole Document Linting
=========================================

Runs every lint pass over a document and merges the results.

Pipeline
--------
    1. Mixed delimiters      (delimiters.check_mixed_delimiters)
    2. Block parsing         (scanner.parse_blocks)
    3. Tag balance           (tags.check_tag_balance)
    4. Quote/bracket balance (structure.check_structure)
    5. Undefined variables   (variables.check_undefined_variables)

Diagnostics keep that pass order, and document order within each pass,
so the output for a given text is always identical.

Usage
-----
>>> from jinjalens.linter import lint
>>> [d.message for d in lint("{% if x %}")]
["Unclosed 'if' tag - missing 'endif'"]
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from jinjalens.config import LensConfig
from jinjalens.delimiters import check_mixed_delimiters
from jinjalens.models import Diagnostic, DiagnosticBuilder
from jinjalens.scanner import parse_blocks
from jinjalens.structure import check_structure
from jinjalens.tags import check_tag_balance
from jinjalens.variables import VariableTree, as_tree, check_undefined_variables


logger = logging.getLogger(__name__)


def lint(
    text: str,
    variables: VariableTree | Mapping[str, Any] | None = None,
    config: LensConfig | None = None,
) -> list[Diagnostic]:
    """
    Lint a template document.

    Parameters
    ----------
    text : str
        Full document text.

    variables : VariableTree | Mapping | None
        Known variables. The undefined-variable check only runs when a
        non-empty tree is supplied.

    config : LensConfig | None
        Analysis settings.

    Returns
    -------
    list[Diagnostic]
        All findings; never raises on malformed templates.
    """
    config = config or LensConfig()
    tree = as_tree(variables)
    builder = DiagnosticBuilder()

    mixed = check_mixed_delimiters(text)
    builder.extend(mixed)

    scan = parse_blocks(text)
    if config.dedupe_mixed_delimiters:
        builder.extend([
            d for d in scan.diagnostics
            if not any(d.overlaps(m) for m in mixed)
        ])
    else:
        builder.extend(scan.diagnostics)

    builder.extend(check_tag_balance(scan.blocks, config))
    builder.extend(check_structure(scan.blocks))
    if config.check_undefined_variables:
        builder.extend(check_undefined_variables(scan.blocks, tree))

    logger.debug(
        "Linted %d character(s): %d block(s), %d diagnostic(s)",
        len(text), len(scan.blocks), len(builder),
    )
    return builder.build()

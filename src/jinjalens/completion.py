"""
jinjalens.completion - Context Ranked Completions
=================================================

Turns a cursor position into a short list of completions.

Candidate Pools
---------------
The pool depends on the resolved context kind:

    none / partial   block starters ({{, {%, {#)
    statement        keywords, end tags, operators, built-ins,
                     variables, tests
    expression       variables, built-ins, filters, operators
    property_access  children of the dotted object path
    comment          nothing (no completion at all)

When a ``.`` was just typed outside a recognised property access (for
example inside an expression whose ``{{`` sits on an earlier line), the
object path is re-derived from a bounded window before the cursor.

Candidates are kept when their label starts with the typed prefix
(case-insensitive) and the list is cut at ``LensConfig.max_candidates``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from jinjalens.config import LensConfig
from jinjalens.context import clamp_offset, line_prefix, resolve_context, trailing_word
from jinjalens.models import (
    CompletionCandidate,
    CompletionKind,
    CompletionResult,
    Context,
    ContextKind,
)
from jinjalens.tables import (
    BLOCK_STARTERS,
    BUILTIN_VARIABLES,
    CLOSING_TAGS,
    END_TAG_DETAILS,
    FILTERS,
    OPERATORS,
    STATEMENT_KEYWORDS,
    TESTS,
    StatementKeyword,
)
from jinjalens.variables import VariableTree, as_tree, flatten_variables, property_candidates


logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\$(\d+)")
OPEN_EXPRESSION_PATH = re.compile(r"\{\{[^}]*?(\w+(?:\.\w+)*)$")


# =============================================================================
# Static Pools
# =============================================================================

def _candidate(label: str, kind: CompletionKind, apply_text: str, detail: str) -> CompletionCandidate:
    return CompletionCandidate(
        label=label,
        kind=kind,
        apply_text=apply_text,
        detail=detail,
        is_snippet=PLACEHOLDER.search(apply_text) is not None,
    )


def block_starter_candidates() -> list[CompletionCandidate]:
    """``{{``, ``{%`` and ``{#`` with the caret placed after the opener and a space."""
    return [
        CompletionCandidate(
            label=opener,
            kind=CompletionKind.KEYWORD,
            apply_text=insert,
            detail=detail,
            cursor_offset=len(opener) + 1,
        )
        for opener, (detail, insert) in BLOCK_STARTERS.items()
    ]


def keyword_apply_text(keyword: StatementKeyword, has_closing: bool) -> str:
    """
    Insertion text for a statement keyword.

    When the closer is already present only the keyword snippet is
    inserted. Otherwise keywords that open a block also get the closer, an
    indented body placeholder and the end tag.

    Examples
    --------
    >>> kw = StatementKeyword("if", "if $0", "Conditional statement", "endif")
    >>> keyword_apply_text(kw, True)
    'if $0'
    >>> keyword_apply_text(kw, False)
    'if $0 %}\\n  $1\\n{% endif %}'
    """
    if has_closing or keyword.end_tag is None:
        return keyword.snippet
    used = [int(n) for n in PLACEHOLDER.findall(keyword.snippet)]
    body = max(used) + 1 if used else 0
    return f"{keyword.snippet} %}}\n  ${body}\n{{% {keyword.end_tag} %}}"


def statement_keyword_candidates(has_closing: bool) -> list[CompletionCandidate]:
    keywords = [
        _candidate(kw.label, CompletionKind.KEYWORD, keyword_apply_text(kw, has_closing), kw.detail)
        for kw in STATEMENT_KEYWORDS
    ]
    end_tags = [
        _candidate(tag, CompletionKind.KEYWORD, tag, END_TAG_DETAILS[tag])
        for tag in CLOSING_TAGS
    ]
    return keywords + end_tags


def operator_candidates() -> list[CompletionCandidate]:
    return [
        _candidate(label, kind, apply_text, detail)
        for label, (kind, apply_text, detail) in OPERATORS.items()
    ]


def builtin_candidates() -> list[CompletionCandidate]:
    return [
        _candidate(label, kind, apply_text, detail)
        for label, (kind, apply_text, detail) in BUILTIN_VARIABLES.items()
    ]


def filter_candidates() -> list[CompletionCandidate]:
    return [
        _candidate(label, CompletionKind.FUNCTION, apply_text, detail)
        for label, (apply_text, detail) in FILTERS.items()
    ]


def jinja_test_candidates() -> list[CompletionCandidate]:
    return [
        _candidate(label, CompletionKind.FUNCTION, label, detail)
        for label, detail in TESTS.items()
    ]


# =============================================================================
# Completion
# =============================================================================

def _pool(context: Context, tree: VariableTree) -> list[CompletionCandidate]:
    kind = context.kind
    if kind in (ContextKind.NONE, ContextKind.PARTIAL):
        return block_starter_candidates()
    if kind is ContextKind.STATEMENT:
        return (
            statement_keyword_candidates(bool(context.has_closing))
            + operator_candidates()
            + builtin_candidates()
            + flatten_variables(tree)
            + jinja_test_candidates()
        )
    if kind is ContextKind.EXPRESSION:
        return (
            flatten_variables(tree)
            + builtin_candidates()
            + filter_candidates()
            + operator_candidates()
        )
    if kind is ContextKind.PROPERTY_ACCESS and context.object_path:
        return property_candidates(tree, context.object_path)
    return []


def object_path_before(text: str, pos: int, lookback: int) -> str | None:
    """
    Dotted path immediately before a ``.`` typed at ``pos - 1``.

    Searches at most ``lookback`` characters back for an ``{{`` that is
    still open, so expressions spanning lines are found too.
    """
    window = text[max(0, pos - lookback):pos - 1]
    match = OPEN_EXPRESSION_PATH.search(window)
    return match.group(1) if match else None


def _replace_span(text: str, pos: int, context: Context, prefix: str, exact_prefix: bool) -> tuple[int, int]:
    if context.kind is ContextKind.PARTIAL and context.replace_start is not None:
        return context.replace_start, context.replace_end if context.replace_end is not None else pos
    if exact_prefix:
        return pos - len(prefix), pos
    if context.kind is ContextKind.NONE:
        return pos, pos
    _, line = line_prefix(text, pos)
    return pos - len(trailing_word(line)), pos


def complete(
    text: str,
    pos: int,
    variables: VariableTree | Mapping[str, Any] | None = None,
    config: LensConfig | None = None,
) -> CompletionResult | None:
    """
    Completions at ``pos``.

    Parameters
    ----------
    text : str
        Full document text.

    pos : int
        Cursor offset. Out-of-range values are clamped.

    variables : VariableTree | Mapping | None
        Known variables.

    config : LensConfig | None
        Windows and candidate limit.

    Returns
    -------
    CompletionResult | None
        ``None`` inside comments, and when nothing matches unless a dot was
        just typed (then an empty result keeps the popup anchored).

    Examples
    --------
    >>> result = complete("{{ news.", 8, {"news": {"headline": "h", "source": "s"}})
    >>> [c.label for c in result.candidates]
    ['headline', 'source']
    """
    config = config or LensConfig()
    tree = as_tree(variables)
    pos = clamp_offset(text, pos)

    context = resolve_context(text, pos, config)
    if context.kind is ContextKind.COMMENT:
        return None

    dot_trigger = pos > 0 and text[pos - 1] == "."
    pool = _pool(context, tree)
    prefix = context.prefix
    exact_prefix = context.kind is ContextKind.PROPERTY_ACCESS

    if dot_trigger and context.kind is not ContextKind.PROPERTY_ACCESS:
        path = object_path_before(text, pos, config.dot_lookback)
        if path:
            pool = property_candidates(tree, path)
            prefix = ""
            exact_prefix = True

    query = prefix.lower()
    matches = [c for c in pool if c.label.lower().startswith(query)]
    logger.debug(
        "Completion at %d (%s): %d of %d candidate(s) match %r",
        pos, context.kind.value, len(matches), len(pool), prefix,
    )
    if not matches and not dot_trigger:
        return None

    replace_from, replace_to = _replace_span(text, pos, context, prefix, exact_prefix)
    return CompletionResult(
        replace_from=replace_from,
        replace_to=replace_to,
        candidates=matches[:config.max_candidates],
    )

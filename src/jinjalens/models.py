"""
jinjalens.models - Value Objects
================================

This module defines the value objects exchanged between the jinjalens
components and handed back to the host editor. Every object is created
fresh per call and never mutated once returned.

Architecture Notes
------------------
The models are plain frozen dataclasses grouped by the pass that produces
them:

    Context             (context.resolve_context)
    Block               (scanner.parse_blocks)
    StackEntry          (tags.check_tag_balance, internal)
    Diagnostic          (every lint pass)
    CompletionCandidate (completion.complete)
    CompletionResult    (completion.complete)
    HoverResult         (hover.hover)

All offsets are absolute character offsets into the text that was passed
in, never line/column pairs.

Usage Example
-------------
>>> from jinjalens.models import Diagnostic
>>> Diagnostic(start=0, end=3, message="Mixed delimiter syntax")
Diagnostic(start=0, end=3, message='Mixed delimiter syntax', severity=<Severity.ERROR: 'error'>)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


# =============================================================================
# Enumerations
# =============================================================================

class ContextKind(str, Enum):
    """
    What kind of template construct the cursor sits inside.

    Attributes
    ----------
    NONE : str
        Plain text, no open delimiter on the current line.

    PARTIAL : str
        A lone ``{`` (optionally followed by a word) that is not yet a
        delimiter.

    STATEMENT : str
        Inside ``{% ... %}``.

    EXPRESSION : str
        Inside ``{{ ... }}``.

    COMMENT : str
        Inside ``{# ... #}``.

    PROPERTY_ACCESS : str
        Inside ``{{ ... }}`` right after ``name.`` or ``name.part``.
    """

    NONE = "none"
    PARTIAL = "partial"
    STATEMENT = "statement"
    EXPRESSION = "expression"
    COMMENT = "comment"
    PROPERTY_ACCESS = "property_access"


class BlockKind(str, Enum):
    """Kind of a delimited block, derived from its opener."""

    EXPRESSION = "expression"
    STATEMENT = "statement"
    COMMENT = "comment"


class Severity(str, Enum):
    """
    Severity levels for diagnostics.

    The lint passes only emit ``ERROR``; the other levels exist so hosts
    can merge jinjalens output with diagnostics from other sources.
    """

    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class CompletionKind(str, Enum):
    """Display tag of a completion candidate."""

    KEYWORD = "keyword"
    VARIABLE = "variable"
    PROPERTY = "property"
    FUNCTION = "function"
    CONSTANT = "constant"


# =============================================================================
# Parse Results
# =============================================================================

@dataclass(frozen=True)
class Context:
    """
    Classification of the cursor position.

    Attributes
    ----------
    kind : ContextKind
        Exactly one kind per resolution.

    prefix : str
        Text typed so far that candidates are filtered against. Always
        defined, possibly empty.

    has_closing : bool | None
        Whether the matching closer was seen within the lookahead window.
        Only set for block kinds.

    object_path : str | None
        Dotted path before the last dot, for ``PROPERTY_ACCESS``.

    replace_start, replace_end : int | None
        Exact replacement span, for ``PARTIAL``.
    """

    kind: ContextKind
    prefix: str = ""
    has_closing: bool | None = None
    object_path: str | None = None
    replace_start: int | None = None
    replace_end: int | None = None


@dataclass(frozen=True)
class Block:
    """
    One correctly delimited template block.

    ``start``/``end`` span the whole block including delimiters (end is
    exclusive). ``content`` is the trimmed text between the delimiters and
    ``content_offset`` is the absolute offset of its first character.
    """

    kind: BlockKind
    start: int
    end: int
    content: str
    opener: str
    closer: str
    content_offset: int


@dataclass(frozen=True)
class StackEntry:
    """An opening block tag still waiting for its end tag."""

    tag_name: str
    position: int
    end: int
    raw_content: str


@dataclass(frozen=True)
class Diagnostic:
    """A single lint finding, ready to render as an inline marker."""

    start: int
    end: int
    message: str
    severity: Severity = Severity.ERROR

    def overlaps(self, other: Diagnostic) -> bool:
        """Whether the two spans share at least one character."""
        return self.start < other.end and other.start < self.end


class DiagnosticBuilder:
    """
    Append-only accumulator for diagnostics.

    Each lint pass owns one builder and returns ``build()`` at the end;
    nothing is ever removed once added.
    """

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def error(self, start: int, end: int, message: str) -> None:
        self._items.append(Diagnostic(start=start, end=end, message=message))

    def extend(self, diagnostics: list[Diagnostic]) -> None:
        self._items.extend(diagnostics)

    def __len__(self) -> int:
        return len(self._items)

    def build(self) -> list[Diagnostic]:
        return list(self._items)


# =============================================================================
# Editor Payloads
# =============================================================================

@dataclass(frozen=True)
class CompletionCandidate:
    """
    A single completion suggestion.

    Attributes
    ----------
    label : str
        Text shown in the popup and matched against the prefix.

    kind : CompletionKind
        Display tag.

    apply_text : str
        Text inserted over the replacement span.

    detail : str
        Short description shown next to the label.

    is_snippet : bool
        True when ``apply_text`` contains ``$n`` placeholders.

    cursor_offset : int | None
        Caret position inside ``apply_text`` after insertion, when the
        host should not place it at the end.
    """

    label: str
    kind: CompletionKind
    apply_text: str
    detail: str = ""
    is_snippet: bool = False
    cursor_offset: int | None = None


@dataclass(frozen=True)
class CompletionResult:
    """Candidates plus the span they replace."""

    replace_from: int
    replace_to: int
    candidates: list[CompletionCandidate] = field(default_factory=list)


@dataclass(frozen=True)
class HoverResult:
    """Documentation to show at ``position``."""

    position: int
    text: str

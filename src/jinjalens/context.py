"""
jinjalens.context - Cursor Context Resolution
=============================================

Answers "what is the user typing right now?" for a single cursor offset.

Only the current line up to the cursor and a fixed lookahead window after
it are inspected, so resolution cost is bounded by line length and never
grows with the document. Templates being typed are usually incomplete, so
every pattern here is tolerant: anything unrecognised degrades to
``ContextKind.NONE``.

Resolution Order
----------------
1. A lone ``{`` not yet followed by ``{``, ``%`` or ``#`` (``PARTIAL``).
2. The first opener on the line with no closing character after it. For ``{{``
   followed by ``name.`` or ``name.part`` this is ``PROPERTY_ACCESS``,
   otherwise the kind follows the opener.
3. ``NONE``.
"""

from __future__ import annotations

from jinjalens.config import LensConfig
from jinjalens.models import BlockKind, Context, ContextKind
from jinjalens.tables import DELIMITERS, EXPRESSION_OPEN


# No opener is open once one of these follows it.
BLOCKING_CHARS = "}%#"


_KIND_BY_BLOCK = {
    BlockKind.STATEMENT: ContextKind.STATEMENT,
    BlockKind.EXPRESSION: ContextKind.EXPRESSION,
    BlockKind.COMMENT: ContextKind.COMMENT,
}


def clamp_offset(text: str, pos: int) -> int:
    """Clamp a cursor offset into ``[0, len(text)]``."""
    return max(0, min(pos, len(text)))


def line_prefix(text: str, pos: int) -> tuple[int, str]:
    """Return the start offset of the cursor's line and the text up to the cursor."""
    start = text.rfind("\n", 0, pos) + 1
    return start, text[start:pos]


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def trailing_word(text: str) -> str:
    """The run of word characters at the very end of ``text``."""
    i = len(text)
    while i > 0 and _is_word_char(text[i - 1]):
        i -= 1
    return text[i:]


def dotted_access(content: str) -> tuple[str, str] | None:
    """
    Split a trailing ``a.b.`` or ``a.b.par`` into object path and partial word.

    Trailing whitespace is allowed only directly after the dot. Scans
    backwards once, so cost is linear in the trailing run.

    Examples
    --------
    >>> dotted_access("x | default(news.hea")
    ('news', 'hea')
    >>> dotted_access("rollups.btc. ")
    ('rollups.btc', '')
    >>> dotted_access("news.hea ") is None
    True
    """
    stripped = content.rstrip()
    trailing_space = len(stripped) != len(content)
    i = len(stripped)
    while i > 0 and (_is_word_char(stripped[i - 1]) or stripped[i - 1] == "."):
        i -= 1
    path, dot, partial = stripped[i:].rpartition(".")
    if not dot or (partial and trailing_space):
        return None

    # Keep the longest run of non-empty segments ending at the last dot.
    segments: list[str] = []
    for segment in reversed(path.split(".")):
        if not segment:
            break
        segments.append(segment)
    if not segments:
        return None
    return ".".join(reversed(segments)), partial


def incomplete_opener(line: str) -> tuple[int, str] | None:
    """
    A lone ``{`` followed only by word characters at the end of ``line``.

    Returns the offset of the brace and the typed word, or ``None`` when
    the brace run is longer than one or carries ``%``/``#``.

    Examples
    --------
    >>> incomplete_opener("abc {ra")
    (4, 'ra')
    >>> incomplete_opener("abc {{") is None
    True
    """
    word = trailing_word(line)
    i = len(line) - len(word)
    if i > 0 and line[i - 1] in "%#":
        return None
    run = 0
    while i - run > 0 and line[i - run - 1] == "{":
        run += 1
    if run != 1:
        return None
    return i - 1, word


def open_block(line: str) -> tuple[str, str] | None:
    """
    The leftmost opener in ``line`` that nothing after it closes.

    Returns the opener and the text after it (leading whitespace removed).

    Examples
    --------
    >>> open_block("{{ a }} {% if b")
    ('{%', 'if b')
    >>> open_block("{{ a }}") is None
    True
    """
    last_blocking = max(line.rfind(ch) for ch in BLOCKING_CHARS)
    low = max(0, last_blocking - 1)
    found = [at for at in (line.find(opener, low) for opener in DELIMITERS) if at >= 0]
    if not found:
        return None
    at = min(found)
    return line[at:at + 2], line[at + 2:].lstrip()


def resolve_context(
    text: str,
    pos: int,
    config: LensConfig | None = None,
) -> Context:
    """
    Classify the template construct at ``pos``.

    Parameters
    ----------
    text : str
        Full document text.

    pos : int
        Cursor offset. Out-of-range values are clamped.

    config : LensConfig | None
        Supplies the closer lookahead window.

    Returns
    -------
    Context
        Exactly one kind; ``prefix`` is always a string.

    Examples
    --------
    >>> resolve_context("abc {", 5)
    Context(kind=<ContextKind.PARTIAL: 'partial'>, prefix='', has_closing=None, object_path=None, replace_start=4, replace_end=5)
    >>> resolve_context("{{ news.", 8).object_path
    'news'
    """
    config = config or LensConfig()
    pos = clamp_offset(text, pos)
    line_start, line = line_prefix(text, pos)

    incomplete = incomplete_opener(line)
    if incomplete:
        brace_at, word = incomplete
        return Context(
            kind=ContextKind.PARTIAL,
            prefix=word,
            replace_start=line_start + brace_at,
            replace_end=pos,
        )

    block = open_block(line)
    if block is None:
        return Context(kind=ContextKind.NONE)

    opener, content = block
    closer, block_kind = DELIMITERS[opener]
    after = text[pos:pos + config.closing_lookahead]
    has_closing = closer in after

    if opener == EXPRESSION_OPEN:
        dotted = dotted_access(content)
        if dotted:
            object_path, partial = dotted
            return Context(
                kind=ContextKind.PROPERTY_ACCESS,
                prefix=partial,
                has_closing=has_closing,
                object_path=object_path,
            )

    return Context(
        kind=_KIND_BY_BLOCK[block_kind],
        prefix=content.strip(),
        has_closing=has_closing,
    )

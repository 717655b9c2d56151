"""
jinjalens.tables - Static Language Tables
=========================================

Fixed data describing the templating language: delimiters, block tags,
common typos, keyword/filter/test/operator completions and filter
documentation. Behaviour lives in the other modules; this module only
holds data so each table can be extended or tested in isolation.

Delimiters are taken from Jinja2's defaults so the tables follow the
engine the templates are eventually rendered with.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from jinja2 import defaults

from jinjalens.models import BlockKind, CompletionKind


# =============================================================================
# Delimiters
# =============================================================================

EXPRESSION_OPEN = defaults.VARIABLE_START_STRING
EXPRESSION_CLOSE = defaults.VARIABLE_END_STRING
STATEMENT_OPEN = defaults.BLOCK_START_STRING
STATEMENT_CLOSE = defaults.BLOCK_END_STRING
COMMENT_OPEN = defaults.COMMENT_START_STRING
COMMENT_CLOSE = defaults.COMMENT_END_STRING

# opener -> (expected closer, block kind)
DELIMITERS: dict[str, tuple[str, BlockKind]] = {
    EXPRESSION_OPEN: (EXPRESSION_CLOSE, BlockKind.EXPRESSION),
    STATEMENT_OPEN: (STATEMENT_CLOSE, BlockKind.STATEMENT),
    COMMENT_OPEN: (COMMENT_CLOSE, BlockKind.COMMENT),
}

CLOSERS: frozenset[str] = frozenset(closer for closer, _ in DELIMITERS.values())

# Cross-delimiter contamination, each reported verbatim.
MIXED_DELIMITER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\{\{\s*%"),
    re.compile(r"%\s*\}\}"),
    re.compile(r"\{#%|%#\}"),
    re.compile(r"\{%#|#%\}"),
)


# =============================================================================
# Block Tags
# =============================================================================

OPENING_TAGS: tuple[str, ...] = (
    "if", "for", "block", "macro", "raw", "with",
    "filter", "call", "set", "trans", "autoescape",
)

# end tag -> opening tag it closes
CLOSING_TAGS: dict[str, str] = {f"end{tag}": tag for tag in OPENING_TAGS}

TYPOS: dict[str, str] = {
    "esle": "else",
    "esli": "elif",
    "fro": "for",
    "ofr": "for",
    "fi": "if",
    "endfi": "endif",
    "enffor": "endfor",
    "endofr": "endfor",
}


# =============================================================================
# Structural Checks
# =============================================================================

QUOTES: tuple[str, ...] = ('"', "'")

# (open, close, name)
BRACKET_PAIRS: tuple[tuple[str, str, str], ...] = (
    ("(", ")", "parenthesis"),
    ("[", "]", "bracket"),
    ("{", "}", "brace"),
)

BUILTIN_NAMES: frozenset[str] = frozenset({"loop", "super"})

LITERAL_PATTERN = re.compile(r"^(\d+(\.\d+)?|true|false|none)$", re.IGNORECASE)


# =============================================================================
# Completion Tables
# =============================================================================

@dataclass(frozen=True)
class StatementKeyword:
    """
    A ``{% ... %}`` keyword completion.

    ``snippet`` is inserted when the closer is already present. Keywords
    with an ``end_tag`` get a full block body when it is not.
    """

    label: str
    snippet: str
    detail: str
    end_tag: str | None = None


STATEMENT_KEYWORDS: tuple[StatementKeyword, ...] = (
    StatementKeyword("if", "if $0", "Conditional statement", "endif"),
    StatementKeyword("for", "for $0 in $1", "Loop statement", "endfor"),
    StatementKeyword("set", "set $0 = $1", "Variable assignment"),
    StatementKeyword("block", "block $0", "Template block", "endblock"),
    StatementKeyword("extends", "extends '$0'", "Template inheritance"),
    StatementKeyword("include", "include '$0'", "Include template"),
    StatementKeyword("macro", "macro $0()", "Macro definition", "endmacro"),
    StatementKeyword("raw", "raw", "Raw content block", "endraw"),
    StatementKeyword("with", "with $0", "Context block", "endwith"),
    StatementKeyword("filter", "filter $0", "Filter section", "endfilter"),
    StatementKeyword("call", "call $0()", "Call block", "endcall"),
    StatementKeyword("autoescape", "autoescape $0", "Autoescape section", "endautoescape"),
)

END_TAG_DETAILS: dict[str, str] = {tag: f"End {CLOSING_TAGS[tag]}" for tag in CLOSING_TAGS}

# label -> (apply text, detail)
FILTERS: dict[str, tuple[str, str]] = {
    "default": ("default($0)", "Default value if undefined"),
    "length": ("length", "Get length of sequence"),
    "upper": ("upper", "Convert to uppercase"),
    "lower": ("lower", "Convert to lowercase"),
    "title": ("title", "Convert to title case"),
    "capitalize": ("capitalize", "Capitalize first letter"),
    "trim": ("trim", "Remove whitespace"),
    "escape": ("escape", "HTML escape"),
    "safe": ("safe", "Mark as safe HTML"),
    "int": ("int", "Convert to integer"),
    "float": ("float", "Convert to float"),
    "string": ("string", "Convert to string"),
    "list": ("list", "Convert to list"),
    "abs": ("abs", "Absolute value"),
    "round": ("round", "Round number"),
    "max": ("max", "Maximum value"),
    "min": ("min", "Minimum value"),
    "sum": ("sum", "Sum values"),
    "sort": ("sort", "Sort sequence"),
    "reverse": ("reverse", "Reverse sequence"),
    "join": ("join('$0')", "Join with separator"),
    "split": ("split('$0')", "Split string"),
    "replace": ("replace('$0', '$1')", "Replace substring"),
    "truncate": ("truncate($0)", "Truncate text"),
    "first": ("first", "First item"),
    "last": ("last", "Last item"),
    "unique": ("unique", "Remove duplicates"),
    "reject": ("reject($0)", "Filter out items"),
    "select": ("select($0)", "Filter items"),
    "map": ("map($0)", "Apply function to items"),
}

TESTS: dict[str, str] = {
    "defined": "Check if variable is defined",
    "undefined": "Check if variable is undefined",
    "none": "Check if value is None",
    "even": "Check if number is even",
    "odd": "Check if number is odd",
    "string": "Check if value is string",
    "number": "Check if value is number",
    "sequence": "Check if value is sequence",
    "mapping": "Check if value is mapping",
    "iterable": "Check if value is iterable",
}

# label -> (kind, apply text, detail)
OPERATORS: dict[str, tuple[CompletionKind, str, str]] = {
    "and": (CompletionKind.KEYWORD, "and", "Logical AND"),
    "or": (CompletionKind.KEYWORD, "or", "Logical OR"),
    "not": (CompletionKind.KEYWORD, "not", "Logical NOT"),
    "in": (CompletionKind.KEYWORD, "in", "Membership test"),
    "is": (CompletionKind.KEYWORD, "is", "Identity test"),
    "else": (CompletionKind.KEYWORD, "else", "Else clause"),
    "elif": (CompletionKind.KEYWORD, "elif $0", "Else if clause"),
    "true": (CompletionKind.CONSTANT, "true", "Boolean true"),
    "false": (CompletionKind.CONSTANT, "false", "Boolean false"),
    "none": (CompletionKind.CONSTANT, "none", "Null value"),
}

BUILTIN_VARIABLES: dict[str, tuple[CompletionKind, str, str]] = {
    "loop": (CompletionKind.VARIABLE, "loop", "Loop info (index, first, last)"),
    "super": (CompletionKind.FUNCTION, "super()", "Parent block"),
}

# label -> (detail, insert)
BLOCK_STARTERS: dict[str, tuple[str, str]] = {
    EXPRESSION_OPEN: ("Expression", f"{EXPRESSION_OPEN} {EXPRESSION_CLOSE}"),
    STATEMENT_OPEN: ("Statement", f"{STATEMENT_OPEN} {STATEMENT_CLOSE}"),
    COMMENT_OPEN: ("Comment", f"{COMMENT_OPEN} {COMMENT_CLOSE}"),
}


# =============================================================================
# Hover Documentation
# =============================================================================

FILTER_DOCS: dict[str, str] = {
    "default": "Returns a default value if the variable is undefined",
    "length": "Returns the length of a sequence or mapping",
    "upper": "Converts a string to uppercase",
    "lower": "Converts a string to lowercase",
    "title": "Converts a string to title case",
    "join": "Joins a sequence with a separator",
    "replace": "Replaces occurrences of a substring",
    "truncate": "Truncates a string to a given length",
}

"""
jinjalens - Editing Intelligence for Jinja Templates
====================================================

Linting, cursor context, completion and hover for Jinja-style templates
embedded in free-form text (prompt files, emails, reports). Designed to be
called from an editor on every keystroke: each call is a pure function of
the document text, a cursor offset and a variable tree.

Features
--------
- **Linting**: mixed delimiters, unclosed or mismatched blocks, unbalanced
  tags, keyword typos, unmatched quotes and brackets, undefined variables
- **Context**: what construct the cursor is in, tolerant of half-typed syntax
- **Completion**: keywords, filters, tests and variables ranked by context,
  including ``news.`` property access
- **Hover**: filter documentation
- **Snippets**: ready-made loops, conditionals and lookups

Quick Start
-----------
```bash
pip install jinjalens

jinjalens lint prompt.txt --variables vars.json
jinjalens complete prompt.txt --offset 42
```

Example
-------
>>> from jinjalens import lint
>>> [d.message for d in lint("{% if x %}{% endfor %}")]
["Expected 'endif' but found 'endfor'", "Unclosed 'if' tag - missing 'endif'"]

Architecture
------------
- ``context``: cursor context resolution
- ``scanner``: block parser state machine
- ``delimiters``: mixed delimiter detection
- ``tags``: tag balance and typo checks
- ``structure``: quote and bracket balance
- ``variables``: variable tree, undefined variables, property lookup
- ``linter``: lint pipeline
- ``completion``: completion engine
- ``hover``: hover documentation
- ``snippets``: snippet builder
- ``config``: Pydantic settings
- ``cli``: Typer-based command line interface
"""

# =============================================================================
# Package Metadata
# =============================================================================
__version__ = "0.1.0"
__license__ = "MIT"

# =============================================================================
# Public API Exports
# =============================================================================

from jinjalens.completion import complete
from jinjalens.config import LensConfig, load_config
from jinjalens.context import resolve_context
from jinjalens.hover import hover
from jinjalens.linter import lint
from jinjalens.models import (
    Block,
    CompletionCandidate,
    CompletionResult,
    Context,
    ContextKind,
    Diagnostic,
    HoverResult,
    Severity,
)
from jinjalens.scanner import parse_blocks
from jinjalens.snippets import SnippetFields, SnippetKind, render_snippet
from jinjalens.variables import DEFAULT_VARIABLES, VariableTree, load_variables


__all__ = [
    "DEFAULT_VARIABLES",
    "Block",
    "CompletionCandidate",
    "CompletionResult",
    "Context",
    "ContextKind",
    "Diagnostic",
    "HoverResult",
    "LensConfig",
    "Severity",
    "SnippetFields",
    "SnippetKind",
    "VariableTree",
    "__version__",
    "complete",
    "hover",
    "lint",
    "load_config",
    "load_variables",
    "parse_blocks",
    "render_snippet",
    "resolve_context",
]

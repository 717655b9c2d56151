"""
jinjalens.snippets - Snippet Builder
====================================

Generates ready-to-insert template code for the editor's command palette
(rollup lookups, loops, conditionals, variable and filter references,
similar-headline queries).

Snippets are rendered with Jinja2 using angle-bracket delimiters, so the
snippet sources can contain literal ``{{``/``{%`` without escaping.

Usage
-----
>>> from jinjalens.snippets import SnippetFields, SnippetKind, render_snippet
>>> render_snippet(SnippetKind.VARIABLE, SnippetFields(path="news.headline"))
'{{ news.headline }}'
"""

from __future__ import annotations

from datetime import date
from enum import Enum

from jinja2 import DictLoader, Environment, StrictUndefined
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Snippet Kinds
# =============================================================================

class SnippetKind(str, Enum):
    """
    Snippets offered by the command palette.

    Examples
    --------
    >>> SnippetKind("for").label
    'For Loop'
    """

    ROLLUP = "rollup"
    FOR = "for"
    IF = "if"
    VARIABLE = "variable"
    FILTER = "filter"
    SIMILAR_HEADLINES = "similar_headlines"

    @property
    def label(self) -> str:
        labels = {
            SnippetKind.ROLLUP: "Rollup",
            SnippetKind.FOR: "For Loop",
            SnippetKind.IF: "If Statement",
            SnippetKind.VARIABLE: "Variable",
            SnippetKind.FILTER: "Filter",
            SnippetKind.SIMILAR_HEADLINES: "Similar Headlines",
        }
        return labels[self]

    @property
    def description(self) -> str:
        descriptions = {
            SnippetKind.ROLLUP: "Insert a cryptocurrency rollup data block",
            SnippetKind.FOR: "Create a for loop to iterate over collections",
            SnippetKind.IF: "Add conditional logic to your template",
            SnippetKind.VARIABLE: "Insert a template variable reference",
            SnippetKind.FILTER: "Apply a filter to transform data",
            SnippetKind.SIMILAR_HEADLINES: "Query for similar news headlines",
        }
        return descriptions[self]


class SnippetFields(BaseModel):
    """
    Form values for a snippet; every field has a usable default.

    Attributes
    ----------
    content : str | None
        Body of ``for``/``if`` snippets. Defaults to ``{{ <item> }}`` for
        loops and ``true content`` for conditionals.

    start_date, end_date : date | None
        Date range for ``similar_headlines``; converted to a number of
        lookback days (inclusive).
    """

    model_config = ConfigDict(extra="forbid")

    symbol: str = Field(default="btc", description="Rollup symbol")
    field: str = Field(default="full", description="Rollup field")
    item: str = Field(default="item", description="Loop variable")
    collection: str = Field(default="items", description="Loop collection")
    content: str | None = Field(default=None, description="Block body")
    condition: str = Field(default="condition", description="If condition")
    path: str = Field(default="variable", description="Variable path")
    variable: str = Field(default="value", description="Filtered variable")
    filter: str = Field(default="upper", description="Filter name")
    similarity_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    limit: int = Field(default=5, ge=1)
    start_date: date | None = None
    end_date: date | None = None

    @field_validator("symbol", "field", "item", "collection", "condition", "path", "variable", "filter")
    @classmethod
    def strip_value(cls, v: str) -> str:
        """Trim surrounding whitespace from form inputs."""
        return v.strip()


# =============================================================================
# Rendering
# =============================================================================

DEFAULT_LOOKBACK_DAYS = 7

SNIPPET_SOURCES: dict[str, str] = {
    "rollup": '{{ rollups["<< f.symbol >>"].<< f.field >> }}',
    "for": (
        "{% for << f.item >> in << f.collection >> %}\n"
        "  << f.content if f.content else '{{ ' ~ f.item ~ ' }}' >>\n"
        "{% endfor %}"
    ),
    "if": (
        "{% if << f.condition >> %}\n"
        "  << f.content if f.content else 'true content' >>\n"
        "{% endif %}"
    ),
    "variable": "{{ << f.path >> }}",
    "filter": "{{ << f.variable >> | << f.filter >> }}",
    "similar_headlines": (
        "{{ similar_headlines(\n"
        "  lookback_days=<< lookback_days >>,\n"
        "  similarity_threshold=<< f.similarity_threshold >>,\n"
        "  limit=<< f.limit >>\n"
        ") }}"
    ),
}


def create_snippet_env() -> Environment:
    """
    Create the Jinja2 environment used for snippets.

    Variable and block delimiters are ``<< >>`` and ``<% %>`` so the
    template syntax being generated passes through untouched.
    """
    return Environment(
        loader=DictLoader(SNIPPET_SOURCES),
        variable_start_string="<<",
        variable_end_string=">>",
        block_start_string="<%",
        block_end_string="%>",
        comment_start_string="<#",
        comment_end_string="#>",
        autoescape=False,
        keep_trailing_newline=False,
        undefined=StrictUndefined,
    )


def lookback_days(fields: SnippetFields, today: date | None = None) -> int:
    """
    Days covered by the date range, both ends included.

    Only a start date counts up to ``today``; anything else uses the
    default of 7 days.
    """
    if fields.start_date and fields.end_date:
        return (fields.end_date - fields.start_date).days + 1
    if fields.start_date:
        return ((today or date.today()) - fields.start_date).days + 1
    return DEFAULT_LOOKBACK_DAYS


def render_snippet(
    kind: SnippetKind | str,
    fields: SnippetFields | None = None,
    today: date | None = None,
) -> str:
    """
    Render the template code for a snippet.

    Raises
    ------
    ValueError
        If ``kind`` is not a known snippet kind.
    """
    kind = SnippetKind(kind)
    fields = fields or SnippetFields()
    template = create_snippet_env().get_template(kind.value)
    return template.render(f=fields, lookback_days=lookback_days(fields, today))

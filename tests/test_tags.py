"""Tests for jinjalens.tags module."""

from jinjalens.config import LensConfig
from jinjalens.scanner import parse_blocks
from jinjalens.tags import check_tag_balance, is_inline_set


def tag_messages(text: str, config: LensConfig | None = None) -> list[str]:
    """Run the tag checker over a document and return the messages."""
    return [d.message for d in check_tag_balance(parse_blocks(text).blocks, config)]


# =============================================================================
# Balance
# =============================================================================

class TestTagBalance:
    """Opening and closing tag matching."""

    def test_balanced(self) -> None:
        text = "{% if a %}{% for x in y %}{% endfor %}{% else %}{% endif %}"
        assert tag_messages(text) == []

    def test_unclosed_if(self) -> None:
        text = "intro {% if a %} body"
        diagnostics = check_tag_balance(parse_blocks(text).blocks)
        assert len(diagnostics) == 1
        assert diagnostics[0].message == "Unclosed 'if' tag - missing 'endif'"
        assert (diagnostics[0].start, diagnostics[0].end) == (6, 16)

    def test_mismatch_leaves_tag_open(self) -> None:
        """A wrong end tag is reported and the open tag stays on the stack."""
        assert tag_messages("{% if x %}{% endfor %}") == [
            "Expected 'endif' but found 'endfor'",
            "Unclosed 'if' tag - missing 'endif'",
        ]

    def test_mismatch_span_is_whole_block(self) -> None:
        text = "{% if x %}{% endfor %}"
        diagnostics = check_tag_balance(parse_blocks(text).blocks)
        assert (diagnostics[0].start, diagnostics[0].end) == (10, 22)

    def test_unexpected_end_tag(self) -> None:
        assert tag_messages("{% endif %}") == [
            "Unexpected 'endif' - no matching opening tag",
        ]

    def test_invalid_end_tag(self) -> None:
        text = "{% endfoo %}"
        diagnostics = check_tag_balance(parse_blocks(text).blocks)
        assert diagnostics[0].message == "Invalid end tag 'endfoo'"
        assert (diagnostics[0].start, diagnostics[0].end) == (3, 9)

    def test_unclosed_reported_in_stack_order(self) -> None:
        assert tag_messages("{% for a in b %}{% if c %}") == [
            "Unclosed 'for' tag - missing 'endfor'",
            "Unclosed 'if' tag - missing 'endif'",
        ]

    def test_expressions_and_comments_ignored(self) -> None:
        assert tag_messages("{{ if }}{# endfor #}") == []

    def test_whitespace_control(self) -> None:
        assert tag_messages("{%- if a -%}x{%- endif %}") == []

    def test_trailing_whitespace_control(self) -> None:
        assert tag_messages("{% if x -%}a{%- endif-%}") == []
        assert tag_messages("{%+ for x in y+%}{%+ endfor+%}") == []

    def test_trailing_marker_on_typo(self) -> None:
        assert tag_messages("{% esle-%}") == ["Did you mean 'else'?"]

    def test_empty_statement(self) -> None:
        assert tag_messages("{% %}") == []


# =============================================================================
# Typos
# =============================================================================

class TestTypos:
    """Common keyword misspellings."""

    def test_esle(self) -> None:
        text = "{% esle %}"
        diagnostics = check_tag_balance(parse_blocks(text).blocks)
        assert len(diagnostics) == 1
        assert diagnostics[0].message == "Did you mean 'else'?"
        assert (diagnostics[0].start, diagnostics[0].end) == (3, 7)

    def test_typo_span_skips_leading_whitespace(self) -> None:
        text = "{%    fro x in y %}"
        diagnostics = check_tag_balance(parse_blocks(text).blocks)
        assert text[diagnostics[0].start:diagnostics[0].end] == "fro"

    def test_end_typo_is_also_invalid_end_tag(self) -> None:
        """``endfi`` is a typo and still fails the end tag tables."""
        assert tag_messages("{% if a %}{% endfi %}") == [
            "Did you mean 'endif'?",
            "Invalid end tag 'endfi'",
            "Unclosed 'if' tag - missing 'endif'",
        ]


# =============================================================================
# Set
# =============================================================================

class TestSet:
    """``set`` needs ``endset`` only in its block form."""

    def test_inline_set_needs_no_end(self) -> None:
        assert tag_messages("{% set x = 1 %}") == []

    def test_block_set_needs_end(self) -> None:
        assert tag_messages("{% set x %}") == ["Unclosed 'set' tag - missing 'endset'"]
        assert tag_messages("{% set x %}body{% endset %}") == []

    def test_strict_set(self) -> None:
        strict = LensConfig(inline_set_closes=False)
        assert tag_messages("{% set x = 1 %}", strict) == [
            "Unclosed 'set' tag - missing 'endset'",
        ]

    def test_is_inline_set(self) -> None:
        assert is_inline_set("set x = 1")
        assert not is_inline_set("set x")

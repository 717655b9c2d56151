"""Tests for jinjalens.linter module."""

import pytest

from jinjalens.config import LensConfig
from jinjalens.linter import lint
from jinjalens.models import Severity
from jinjalens.variables import DEFAULT_VARIABLES, VariableTree


def spans(text: str, **kwargs) -> list[tuple[int, int, str]]:
    """(start, end, message) for every diagnostic in a document."""
    return [(d.start, d.end, d.message) for d in lint(text, **kwargs)]


# =============================================================================
# Clean Documents
# =============================================================================

class TestCleanDocuments:
    """Tests for documents that produce no diagnostics."""

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "Plain prose with no template syntax at all.",
            "{{ name }}",
            "{% if a %}yes{% elif b %}maybe{% else %}no{% endif %}",
            "{% for x in xs %}{{ x }}{% endfor %}",
            "{# a comment with 'odd quotes #}",
            "{% set total = 3 %}{{ total }}",
            "{% macro greet(name) %}Hi {{ name }}{% endmacro %}",
            "{% if x -%}a{%- endif-%}",
        ],
    )
    def test_clean(self, text: str) -> None:
        assert lint(text) == []

    def test_sample_template(self, sample_template: str) -> None:
        assert lint(sample_template, DEFAULT_VARIABLES) == []

    def test_sample_template_without_variables(self, sample_template: str) -> None:
        assert lint(sample_template) == []


# =============================================================================
# Findings
# =============================================================================

class TestFindings:
    """Tests for documents with problems."""

    def test_single_unclosed_if(self) -> None:
        assert spans("{% if x %}") == [
            (0, 10, "Unclosed 'if' tag - missing 'endif'"),
        ]

    def test_mixed_delimiter_offset(self) -> None:
        diagnostics = lint("Hello {{% name }}")
        assert (diagnostics[0].start, diagnostics[0].end) == (6, 9)
        assert diagnostics[0].message == "Mixed delimiter syntax"

    def test_mismatched_end_tag(self) -> None:
        assert spans("{% if x %}{% endfor %}") == [
            (10, 22, "Expected 'endif' but found 'endfor'"),
            (0, 10, "Unclosed 'if' tag - missing 'endif'"),
        ]

    def test_typo(self) -> None:
        assert spans("{% esle %}") == [(3, 7, "Did you mean 'else'?")]

    def test_unclosed_block(self) -> None:
        assert spans("Hi {{ name") == [(3, 10, "Unclosed block")]

    def test_pass_order(self) -> None:
        assert spans("{{% x }} {% if a %}") == [
            (0, 3, "Mixed delimiter syntax"),
            (9, 19, "Unclosed 'if' tag - missing 'endif'"),
        ]

    def test_structure_reported(self) -> None:
        assert spans("{{ f(x }}") == [(4, 5, "Unmatched opening parenthesis")]

    def test_all_errors(self) -> None:
        diagnostics = lint("{% if %}{% endfor %}{{% a }}")
        assert diagnostics
        assert all(d.severity is Severity.ERROR for d in diagnostics)

    def test_idempotent(self, sample_template: str) -> None:
        text = sample_template + "{% for x in y %}{{ nope.x }} {% esle %}"
        assert lint(text, DEFAULT_VARIABLES) == lint(text, DEFAULT_VARIABLES)


# =============================================================================
# Variables and Configuration
# =============================================================================

class TestVariables:
    """Tests for the undefined-variable pass inside lint."""

    def test_undefined_reported(self, news_tree: VariableTree) -> None:
        assert spans("{{ user }}", variables=news_tree) == [
            (3, 7, "Undefined variable 'user'"),
        ]

    def test_accepts_plain_mapping(self, news_variables: dict) -> None:
        assert spans("{{ user }}", variables=news_variables) == [
            (3, 7, "Undefined variable 'user'"),
        ]

    def test_empty_tree(self) -> None:
        assert lint("{{ anything.at.all }}", VariableTree()) == []

    def test_check_disabled(self, news_tree: VariableTree) -> None:
        config = LensConfig(check_undefined_variables=False)
        assert lint("{{ user }}", news_tree, config) == []


class TestDedupe:
    """Tests for the dedupe_mixed_delimiters setting."""

    TEXT = "{{ a %}}"

    def test_both_reported_by_default(self) -> None:
        assert spans(self.TEXT) == [
            (5, 8, "Mixed delimiter syntax"),
            (5, 7, "Mismatched delimiter: expected '}}' but found '%}'"),
        ]

    def test_dedupe(self) -> None:
        config = LensConfig(dedupe_mixed_delimiters=True)
        assert spans(self.TEXT, config=config) == [(5, 8, "Mixed delimiter syntax")]

    def test_dedupe_keeps_unrelated(self) -> None:
        config = LensConfig(dedupe_mixed_delimiters=True)
        assert spans("{{ a %}} {{ b", config=config) == [
            (5, 8, "Mixed delimiter syntax"),
            (9, 13, "Unclosed block"),
        ]


# =============================================================================
# Edge Cases
# =============================================================================

class TestEdgeCases:
    """Tests for degenerate documents."""

    def test_delimiters_only(self) -> None:
        messages = [d.message for d in lint("{{}}{%%}{##}")]
        assert messages == []

    @pytest.mark.slow
    def test_very_long_line(self) -> None:
        text = "{{ name }} text " * 20000 + "{% if x %}"
        diagnostics = lint(text, {"name": "Name"})
        assert [d.message for d in diagnostics] == ["Unclosed 'if' tag - missing 'endif'"]

    @pytest.mark.slow
    def test_long_unterminated_string(self) -> None:
        text = "{{ '" + "x" * 100000
        assert [d.message for d in lint(text)] == ["Unclosed block"]

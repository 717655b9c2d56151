"""Tests for jinjalens.structure module."""

from jinjalens.scanner import parse_blocks
from jinjalens.structure import check_structure


def structure_of(text: str) -> list[tuple[int, str]]:
    """(offset, message) pairs for a document."""
    return [(d.start, d.message) for d in check_structure(parse_blocks(text).blocks)]


class TestQuotes:
    """Quote counting per quote character."""

    def test_balanced(self) -> None:
        assert structure_of("{{ x | default('a') }}") == []

    def test_unmatched_double_quote(self) -> None:
        # '{{ "abc }}' -> content '"abc' starting at offset 3
        assert structure_of('{{ "abc }}') == [(3, 'Unmatched " quote')]

    def test_reports_last_occurrence(self) -> None:
        text = "{{ 'a' ~ 'b }}"
        assert structure_of(text) == [(text.rindex("'"), "Unmatched ' quote")]

    def test_each_quote_independent(self) -> None:
        text = "{{ \"it's\" }}"
        assert structure_of(text) == [(text.index("'"), "Unmatched ' quote")]


class TestBrackets:
    """Bracket depth tracking per pair."""

    def test_balanced(self) -> None:
        assert structure_of("{{ f(a[0], {'k': (1)}) }}") == []

    def test_unexpected_closing(self) -> None:
        text = "{{ a) }}"
        assert structure_of(text) == [(4, "Unexpected closing parenthesis")]

    def test_unmatched_opening_reports_first(self) -> None:
        text = "{{ x[[0] }}"
        assert structure_of(text) == [(4, "Unmatched opening bracket")]

    def test_scan_continues_after_unexpected_closer(self) -> None:
        text = "{% if a) and (b %}"
        assert structure_of(text) == [
            (7, "Unexpected closing parenthesis"),
            (13, "Unmatched opening parenthesis"),
        ]

    def test_brace(self) -> None:
        assert structure_of("{{ {'a': 1 }}") == [(3, "Unmatched opening brace")]

    def test_comments_skipped(self) -> None:
        assert structure_of("{# don't (forget #}") == []

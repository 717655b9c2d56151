"""Tests for jinjalens.scanner module."""

from jinjalens.models import BlockKind
from jinjalens.scanner import parse_blocks


class TestValidBlocks:
    """Well-formed blocks."""

    def test_three_kinds(self) -> None:
        result = parse_blocks("{{ a }} {% if b %} {# c #}")
        assert [b.kind for b in result.blocks] == [
            BlockKind.EXPRESSION,
            BlockKind.STATEMENT,
            BlockKind.COMMENT,
        ]
        assert [b.content for b in result.blocks] == ["a", "if b", "c"]
        assert result.diagnostics == []

    def test_block_offsets(self) -> None:
        """Spans include delimiters; content_offset points at the content."""
        text = "xy{{  name }}"
        block = parse_blocks(text).blocks[0]
        assert (block.start, block.end) == (2, 13)
        assert block.content_offset == 6
        assert text[block.content_offset:block.content_offset + 4] == "name"
        assert (block.opener, block.closer) == ("{{", "}}")

    def test_multiline_block(self) -> None:
        text = "{% if a\n   and b %}"
        result = parse_blocks(text)
        assert result.blocks[0].content == "if a\n   and b"
        assert result.blocks[0].end == len(text)

    def test_empty_block(self) -> None:
        block = parse_blocks("{{}}").blocks[0]
        assert block.content == ""
        assert block.start < block.end

    def test_closer_inside_string(self) -> None:
        """A quoted closer does not end the block."""
        result = parse_blocks('{{ "}}" }}')
        assert len(result.blocks) == 1
        assert result.blocks[0].content == '"}}"'

    def test_apostrophe_outside_blocks(self) -> None:
        result = parse_blocks("It's {{ name }} and that's it")
        assert [b.content for b in result.blocks] == ["name"]

    def test_comment_ignores_quotes(self) -> None:
        result = parse_blocks("{# don't #}{{ x }}")
        assert [b.content for b in result.blocks] == ["don't", "x"]


class TestBrokenBlocks:
    """Unclosed and mismatched blocks."""

    def test_unclosed_block(self) -> None:
        text = "ok {{ a }} {% if b"
        result = parse_blocks(text)
        assert [b.content for b in result.blocks] == ["a"]
        assert len(result.diagnostics) == 1
        diag = result.diagnostics[0]
        assert diag.message == "Unclosed block"
        assert (diag.start, diag.end) == (11, len(text))

    def test_mismatched_closer(self) -> None:
        text = "{% if a }}"
        result = parse_blocks(text)
        assert result.blocks == []
        diag = result.diagnostics[0]
        assert diag.message == "Mismatched delimiter: expected '%}' but found '}}'"
        assert (diag.start, diag.end) == (8, 10)

    def test_scanning_resumes_after_mismatch(self) -> None:
        result = parse_blocks("{# a %} {{ b }}")
        assert [b.content for b in result.blocks] == ["b"]
        assert len(result.diagnostics) == 1

    def test_unterminated_string_is_literal(self) -> None:
        """An unterminated quote does not swallow the closer."""
        result = parse_blocks('{{ "abc }}\n{{ d }}')
        assert [b.content for b in result.blocks] == ['"abc', "d"]
        assert result.diagnostics == []

    def test_unterminated_string_at_end_of_input(self) -> None:
        result = parse_blocks("{{ 'abc }}")
        assert [b.content for b in result.blocks] == ["'abc"]


class TestEdgeCases:
    """Inputs that must never raise."""

    def test_empty_document(self) -> None:
        result = parse_blocks("")
        assert result.blocks == []
        assert result.diagnostics == []

    def test_delimiters_only(self) -> None:
        result = parse_blocks("{{%}}#}{#{%%}")
        assert all(d.start < d.end for d in result.diagnostics)

    def test_trailing_backslash_in_string(self) -> None:
        parse_blocks('{{ "abc\\')

    def test_very_long_line(self) -> None:
        text = "{{ " + "x" * 200_000 + " }}" + " '" * 1000
        result = parse_blocks(text)
        assert len(result.blocks) == 1

    def test_idempotent(self) -> None:
        text = "{% if a %}{{ b }}{% endfor"
        assert parse_blocks(text) == parse_blocks(text)

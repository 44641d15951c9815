"""Tests for the partial types language server helper functions."""

import pytest
from lsprotocol import types

from partial_types.config import GeneratorOptions
from partial_types.errors import MissingFieldName, ParseFailure, UnresolvedImport
from partial_types.lsp.server import (
    _word_at_position,
    diagnostics_for,
    error_range,
    hover_text,
    lexpos_to_position,
)
from partial_types.parsing import GoParser

USER_SOURCE = """\
package models

import "time"

type User struct {
\tName    string    `particle:"name"`
\tCreated time.Time
\tTags    []string  `particle:"tags,omitempty"`
}

type ID int
"""


# ---------------------------------------------------------------------------
# lexpos_to_position
# ---------------------------------------------------------------------------


class TestLexposToPosition:
    def test_start_of_single_line(self):
        pos = lexpos_to_position("hello", 0)
        assert pos == types.Position(line=0, character=0)

    def test_middle_of_second_line(self):
        pos = lexpos_to_position("abc\ndef", 6)
        assert pos == types.Position(line=1, character=2)

    def test_third_line(self):
        source = "line0\nline1\nline2"
        # 'l' of line2 is at offset 12
        pos = lexpos_to_position(source, 12)
        assert pos == types.Position(line=2, character=0)

    def test_empty_source_offset_zero(self):
        pos = lexpos_to_position("", 0)
        assert pos == types.Position(line=0, character=0)

    def test_newline_character_itself(self):
        pos = lexpos_to_position("ab\ncd", 2)
        assert pos == types.Position(line=0, character=2)


# ---------------------------------------------------------------------------
# error_range
# ---------------------------------------------------------------------------


class TestErrorRange:
    def test_parse_failure_points_at_token(self):
        source = "package m\n\ntype A struct {\n\tX @\n}\n"
        exc = ParseFailure("Illegal character '@'", line=4, position=30)
        assert error_range(source, exc) == types.Range(
            start=types.Position(line=3, character=3),
            end=types.Position(line=3, character=4),
        )

    def test_line_error_covers_line_without_indent(self):
        source = "package m\n\ntype A struct {\n\tBase\n}\n"
        exc = MissingFieldName("Field must have a name", line=4)
        assert error_range(source, exc) == types.Range(
            start=types.Position(line=3, character=1),
            end=types.Position(line=3, character=5),
        )

    def test_line_past_end_is_clamped(self):
        source = "package m\nx"
        exc = MissingFieldName("boom", line=40)
        assert error_range(source, exc).start.line == 1

    def test_no_location(self):
        source = "package m\n"
        exc = ParseFailure("Syntax error at end of input")
        assert error_range(source, exc) == types.Range(
            start=types.Position(line=1, character=0),
            end=types.Position(line=1, character=0),
        )


# ---------------------------------------------------------------------------
# diagnostics_for
# ---------------------------------------------------------------------------


class TestDiagnostics:
    @pytest.fixture
    def options(self):
        return GeneratorOptions()

    def test_clean_source(self, options):
        assert diagnostics_for(USER_SOURCE, options) == []

    def test_illegal_character(self, options):
        source = "package m\n\ntype A struct {\n\tX @\n}\n"
        [diag] = diagnostics_for(source, options)
        assert diag.code == ParseFailure.kind
        assert diag.severity == types.DiagnosticSeverity.Error
        assert diag.source == "partial-types"
        assert diag.range.start == types.Position(line=3, character=3)

    def test_unresolved_import(self, options):
        source = "package m\n\ntype E struct {\n\tAt time.Time\n}\n"
        [diag] = diagnostics_for(source, options)
        assert diag.code == UnresolvedImport.kind
        assert "time" in diag.message
        assert diag.range.start == types.Position(line=3, character=1)
        assert diag.range.end == types.Position(line=3, character=13)

    def test_embedded_field(self, options):
        source = "package m\n\ntype A struct {\n\tBase\n}\n"
        [diag] = diagnostics_for(source, options, GoParser())
        assert diag.code == MissingFieldName.kind
        assert diag.range.start.line == 3


# ---------------------------------------------------------------------------
# hover_text
# ---------------------------------------------------------------------------


class TestHoverText:
    @pytest.fixture
    def unit(self):
        return GoParser().parse(USER_SOURCE)

    def test_struct_name(self, unit):
        text = hover_text(unit, 5, "User", GeneratorOptions(type_prefix="Partial"))
        assert text == "**User** — partial type `PartialUser`"

    def test_tagged_field(self, unit):
        text = hover_text(unit, 6, "Name", GeneratorOptions())
        assert "key `name`" in text
        assert "func (p User) Name() string" in text
        assert "func (p User) WithName(v string) User" in text

    def test_qualified_field(self, unit):
        text = hover_text(unit, 7, "Created", GeneratorOptions())
        assert "func (p User) Created() time.Time" in text

    def test_truncated_tag(self, unit):
        text = hover_text(unit, 8, "Tags", GeneratorOptions())
        assert "key `tags`" in text

    def test_field_error_is_shown(self):
        unit = GoParser().parse("package m\n\ntype E struct {\n\tAt time.Time\n}\n")
        text = hover_text(unit, 4, "At", GeneratorOptions())
        assert "UnresolvedImport" in text

    def test_non_struct_declaration(self, unit):
        assert hover_text(unit, 11, "ID", GeneratorOptions()) is None

    def test_wrong_line(self, unit):
        assert hover_text(unit, 7, "Name", GeneratorOptions()) is None


# ---------------------------------------------------------------------------
# _word_at_position
# ---------------------------------------------------------------------------


class TestWordAtPosition:
    def test_middle_of_word(self):
        assert _word_at_position("\tName string", 2) == "Name"

    def test_start_of_word(self):
        assert _word_at_position("type User struct", 5) == "User"

    def test_underscore(self):
        assert _word_at_position("\tuser_id int", 4) == "user_id"

    def test_on_whitespace(self):
        assert _word_at_position("type User", 4) == ""

    def test_out_of_range(self):
        assert _word_at_position("abc", 10) == ""
        assert _word_at_position("abc", -1) == ""

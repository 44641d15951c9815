"""Parsing of Go source files into the declaration model."""

from partial_types.parsing.go_lexer import GoLexer, unquote_go_string
from partial_types.parsing.go_parser import GoParser
from partial_types.parsing.struct_tag import parse_struct_tag

__all__ = [
    "GoLexer",
    "GoParser",
    "parse_struct_tag",
    "unquote_go_string",
]

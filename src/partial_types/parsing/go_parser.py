"""Parser for the declarations of a Go source file.

Only the package clause, imports and type declarations are modelled.
Function, variable and constant declarations are consumed as balanced token
runs and dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import ply.yacc as yacc

from partial_types.errors import ParseFailure
from partial_types.log import get_logger
from partial_types.model import (
    Declaration,
    Field,
    ImportSpec,
    Mapping,
    Named,
    OpaqueType,
    OtherShape,
    Pointer,
    Qualified,
    RecordShape,
    Sequence,
    SourceUnit,
    TypeExpr,
    render_type_expr,
)
from partial_types.parsing.go_lexer import GoLexer
from partial_types.parsing.struct_tag import parse_struct_tag

logger = get_logger(__name__)


@dataclass
class StructLiteral:
    """A ``struct { ... }`` type before it is placed in a declaration."""

    fields: list[Field]


def _as_type(expr: TypeExpr | StructLiteral) -> TypeExpr:
    """Return *expr* as a type expression; struct literals become opaque."""
    if isinstance(expr, StructLiteral):
        return OpaqueType(kind="struct", text="struct{...}")
    return expr


def _shape_kind(expr: TypeExpr) -> str:
    if isinstance(expr, (Named, Qualified)):
        return "named"
    if isinstance(expr, Pointer):
        return "pointer"
    if isinstance(expr, Sequence):
        return "slice"
    if isinstance(expr, Mapping):
        return "map"
    return expr.kind


def _declaration(
    name: str, expr: TypeExpr | StructLiteral, line: int, generic: bool = False
) -> Declaration:
    if isinstance(expr, StructLiteral):
        shape = RecordShape(fields=tuple(expr.fields))
    else:
        shape = OtherShape(kind=_shape_kind(expr))
    return Declaration(name=name, shape=shape, line=line, generic=generic)


class GoParser:
    """Parser turning Go source text into a SourceUnit."""

    tokens = GoLexer.parser_tokens
    start = "source_file"

    def __init__(self) -> None:
        self.lexer = GoLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore

    # --- File structure ---

    def p_source_file(self, p: yacc.YaccProduction) -> None:
        """source_file : PACKAGE IDENT SEMI top_level"""
        imports = [d for d in p[4] if isinstance(d, ImportSpec)]
        decls = [d for d in p[4] if isinstance(d, Declaration)]
        p[0] = (p[2], imports, decls)

    def p_top_level_empty(self, p: yacc.YaccProduction) -> None:
        """top_level : empty"""
        p[0] = []

    def p_top_level_decl(self, p: yacc.YaccProduction) -> None:
        """top_level : top_level top_decl SEMI"""
        p[0] = p[1] + p[2]

    def p_top_level_semi(self, p: yacc.YaccProduction) -> None:
        """top_level : top_level SEMI"""
        p[0] = p[1]

    def p_top_decl(self, p: yacc.YaccProduction) -> None:
        """top_decl : import_decl
                    | type_decl
                    | other_decl"""
        p[0] = p[1]

    def p_empty(self, p: yacc.YaccProduction) -> None:
        """empty :"""
        p[0] = None

    # --- Imports ---

    def p_import_decl_single(self, p: yacc.YaccProduction) -> None:
        """import_decl : IMPORT import_spec"""
        p[0] = [p[2]]

    def p_import_decl_group(self, p: yacc.YaccProduction) -> None:
        """import_decl : IMPORT LPAREN import_group RPAREN"""
        p[0] = p[3]

    def p_import_group(self, p: yacc.YaccProduction) -> None:
        """import_group : empty
                        | import_seq
                        | import_seq SEMI"""
        p[0] = p[1] or []

    def p_import_seq_single(self, p: yacc.YaccProduction) -> None:
        """import_seq : import_spec"""
        p[0] = [p[1]]

    def p_import_seq_multiple(self, p: yacc.YaccProduction) -> None:
        """import_seq : import_seq SEMI import_spec"""
        p[0] = p[1] + [p[3]]

    def p_import_spec_plain(self, p: yacc.YaccProduction) -> None:
        """import_spec : STRING"""
        p[0] = self._import_spec(p[1], None, p.lineno(1), p.lexpos(1))

    def p_import_spec_alias(self, p: yacc.YaccProduction) -> None:
        """import_spec : IDENT STRING
                       | DOT STRING"""
        p[0] = self._import_spec(p[2], p[1], p.lineno(1), p.lexpos(1))

    def _import_spec(self, path: str, alias: str | None, line: int, pos: int) -> ImportSpec:
        if not path:
            raise ParseFailure(
                f"Empty import path (line {line}, position {pos})",
                line=line,
                position=pos,
            )
        return ImportSpec(path=path, alias=alias, line=line)

    # --- Type declarations ---

    def p_type_decl_single(self, p: yacc.YaccProduction) -> None:
        """type_decl : TYPE type_spec"""
        p[0] = [p[2]]

    def p_type_decl_group(self, p: yacc.YaccProduction) -> None:
        """type_decl : TYPE LPAREN type_group RPAREN"""
        p[0] = p[3]

    def p_type_group(self, p: yacc.YaccProduction) -> None:
        """type_group : empty
                      | type_seq
                      | type_seq SEMI"""
        p[0] = p[1] or []

    def p_type_seq_single(self, p: yacc.YaccProduction) -> None:
        """type_seq : type_spec"""
        p[0] = [p[1]]

    def p_type_seq_multiple(self, p: yacc.YaccProduction) -> None:
        """type_seq : type_seq SEMI type_spec"""
        p[0] = p[1] + [p[3]]

    def p_type_spec(self, p: yacc.YaccProduction) -> None:
        """type_spec : IDENT type_expr
                     | IDENT ASSIGN type_expr"""
        p[0] = _declaration(p[1], p[len(p) - 1], p.lineno(1))

    def p_type_spec_generic(self, p: yacc.YaccProduction) -> None:
        """type_spec : IDENT LBRACKET type_params RBRACKET type_expr
                     | IDENT LBRACKET type_params RBRACKET ASSIGN type_expr"""
        p[0] = _declaration(p[1], p[len(p) - 1], p.lineno(1), generic=True)

    def p_type_params(self, p: yacc.YaccProduction) -> None:
        """type_params : IDENT IDENT inner
                       | IDENT COMMA inner
                       | IDENT OP inner
                       | IDENT STAR inner
                       | IDENT INTERFACE inner
                       | IDENT MAP inner
                       | IDENT FUNC inner
                       | IDENT CHAN inner
                       | IDENT LBRACKET inner RBRACKET inner"""
        p[0] = None

    # --- Type expressions ---

    def p_type_expr_base(self, p: yacc.YaccProduction) -> None:
        """type_expr : base_type"""
        p[0] = p[1]

    def p_type_expr_recv_chan(self, p: yacc.YaccProduction) -> None:
        """type_expr : ARROW CHAN type_expr"""
        p[0] = OpaqueType(kind="chan", text="<-chan " + render_type_expr(_as_type(p[3])))

    def p_base_type_named(self, p: yacc.YaccProduction) -> None:
        """base_type : IDENT"""
        p[0] = Named(name=p[1])

    def p_base_type_qualified(self, p: yacc.YaccProduction) -> None:
        """base_type : IDENT DOT IDENT"""
        p[0] = Qualified(alias=p[1], name=p[3])

    def p_base_type_instantiated(self, p: yacc.YaccProduction) -> None:
        """base_type : IDENT LBRACKET inner RBRACKET
                     | IDENT DOT IDENT LBRACKET inner RBRACKET"""
        name = p[1] if len(p) == 5 else f"{p[1]}.{p[3]}"
        p[0] = OpaqueType(kind="generic", text=f"{name}[...]")

    def p_base_type_pointer(self, p: yacc.YaccProduction) -> None:
        """base_type : STAR type_expr"""
        p[0] = Pointer(elem=_as_type(p[2]))

    def p_base_type_slice(self, p: yacc.YaccProduction) -> None:
        """base_type : LBRACKET RBRACKET type_expr"""
        p[0] = Sequence(elem=_as_type(p[3]))

    def p_base_type_array(self, p: yacc.YaccProduction) -> None:
        """base_type : LBRACKET array_len RBRACKET type_expr"""
        elem = render_type_expr(_as_type(p[4]))
        p[0] = OpaqueType(kind="array", text=f"[{p[2]}]{elem}")

    def p_array_len(self, p: yacc.YaccProduction) -> None:
        """array_len : LITERAL
                     | IDENT
                     | ELLIPSIS"""
        p[0] = p[1]

    def p_array_len_qualified(self, p: yacc.YaccProduction) -> None:
        """array_len : IDENT DOT IDENT"""
        p[0] = f"{p[1]}.{p[3]}"

    def p_base_type_map(self, p: yacc.YaccProduction) -> None:
        """base_type : MAP LBRACKET type_expr RBRACKET type_expr"""
        p[0] = Mapping(key=_as_type(p[3]), value=_as_type(p[5]))

    def p_base_type_struct(self, p: yacc.YaccProduction) -> None:
        """base_type : STRUCT LBRACE field_group RBRACE"""
        p[0] = StructLiteral(fields=p[3])

    def p_base_type_interface(self, p: yacc.YaccProduction) -> None:
        """base_type : INTERFACE LBRACE inner RBRACE"""
        p[0] = OpaqueType(kind="interface", text="interface{...}")

    def p_base_type_func(self, p: yacc.YaccProduction) -> None:
        """base_type : FUNC LPAREN inner RPAREN
                     | FUNC LPAREN inner RPAREN func_result"""
        p[0] = OpaqueType(kind="func", text="func(...)")

    def p_func_result(self, p: yacc.YaccProduction) -> None:
        """func_result : type_expr
                       | LPAREN inner RPAREN"""
        p[0] = None

    def p_base_type_chan(self, p: yacc.YaccProduction) -> None:
        """base_type : CHAN base_type"""
        p[0] = OpaqueType(kind="chan", text="chan " + render_type_expr(_as_type(p[2])))

    def p_base_type_send_chan(self, p: yacc.YaccProduction) -> None:
        """base_type : CHAN ARROW type_expr"""
        p[0] = OpaqueType(kind="chan", text="chan<- " + render_type_expr(_as_type(p[3])))

    # --- Struct fields ---

    def p_field_group(self, p: yacc.YaccProduction) -> None:
        """field_group : empty
                       | field_seq
                       | field_seq SEMI"""
        p[0] = p[1] or []

    def p_field_seq_single(self, p: yacc.YaccProduction) -> None:
        """field_seq : field_decl"""
        p[0] = p[1]

    def p_field_seq_multiple(self, p: yacc.YaccProduction) -> None:
        """field_seq : field_seq SEMI field_decl"""
        p[0] = p[1] + p[3]

    def p_field_decl_named(self, p: yacc.YaccProduction) -> None:
        """field_decl : ident_list type_expr tag_opt"""
        field_type = _as_type(p[2])
        tags = parse_struct_tag(p[3]) if p[3] is not None else {}
        p[0] = [
            Field(name=name, type=field_type, tags=tags, line=line)
            for name, line in p[1]
        ]

    def p_field_decl_embedded(self, p: yacc.YaccProduction) -> None:
        """field_decl : embedded tag_opt"""
        embedded_type, line = p[1]
        tags = parse_struct_tag(p[2]) if p[2] is not None else {}
        p[0] = [Field(name="", type=embedded_type, tags=tags, line=line)]

    def p_ident_list_single(self, p: yacc.YaccProduction) -> None:
        """ident_list : IDENT"""
        p[0] = [(p[1], p.lineno(1))]

    def p_ident_list_multiple(self, p: yacc.YaccProduction) -> None:
        """ident_list : ident_list COMMA IDENT"""
        p[0] = p[1] + [(p[3], p.lineno(3))]

    def p_embedded_named(self, p: yacc.YaccProduction) -> None:
        """embedded : IDENT"""
        p[0] = (Named(name=p[1]), p.lineno(1))

    def p_embedded_qualified(self, p: yacc.YaccProduction) -> None:
        """embedded : IDENT DOT IDENT"""
        p[0] = (Qualified(alias=p[1], name=p[3]), p.lineno(1))

    def p_embedded_pointer(self, p: yacc.YaccProduction) -> None:
        """embedded : STAR IDENT"""
        p[0] = (Pointer(elem=Named(name=p[2])), p.lineno(1))

    def p_embedded_pointer_qualified(self, p: yacc.YaccProduction) -> None:
        """embedded : STAR IDENT DOT IDENT"""
        p[0] = (Pointer(elem=Qualified(alias=p[2], name=p[4])), p.lineno(1))

    def p_tag_opt(self, p: yacc.YaccProduction) -> None:
        """tag_opt : empty
                   | STRING"""
        p[0] = p[1]

    # --- Skipped declarations ---

    def p_other_decl(self, p: yacc.YaccProduction) -> None:
        """other_decl : FUNC chunks
                      | VAR chunks
                      | CONST chunks"""
        p[0] = []

    def p_chunks(self, p: yacc.YaccProduction) -> None:
        """chunks : chunk
                  | chunks chunk"""
        p[0] = None

    def p_chunk(self, p: yacc.YaccProduction) -> None:
        """chunk : atom
                 | LPAREN inner RPAREN
                 | LBRACE inner RBRACE
                 | LBRACKET inner RBRACKET"""
        p[0] = None

    def p_inner(self, p: yacc.YaccProduction) -> None:
        """inner : empty
                 | inner chunk
                 | inner SEMI"""
        p[0] = None

    def p_atom(self, p: yacc.YaccProduction) -> None:
        """atom : IDENT
                | LITERAL
                | STRING
                | STAR
                | DOT
                | ELLIPSIS
                | COMMA
                | ASSIGN
                | ARROW
                | OP
                | TYPE
                | STRUCT
                | MAP
                | INTERFACE
                | FUNC
                | CHAN
                | VAR
                | CONST"""
        p[0] = None

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            value = "newline" if p.type == "SEMI" and p.value == "\n" else p.value
            raise ParseFailure(
                f"Syntax error at '{value}' (line {p.lineno}, position {p.lexpos})",
                line=p.lineno,
                position=p.lexpos,
            )
        else:
            raise ParseFailure("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, **kwargs)

    def parse(self, data: str, path: str | None = None) -> SourceUnit:
        """Parse Go source text and return its SourceUnit.

        Raises:
            ParseFailure: If the text is not valid for the supported Go subset.
        """
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        result = self.parser.parse(data, lexer=self.lexer)
        if result is None:
            raise ParseFailure("Syntax error at end of input")

        package, imports, decls = result
        logger.debug(
            "Parsed %s: package %s, %d imports, %d type declarations",
            path or "<source>", package, len(imports), len(decls),
        )
        return SourceUnit(
            package=package,
            imports=tuple(imports),
            declarations=tuple(decls),
            path=path,
        )

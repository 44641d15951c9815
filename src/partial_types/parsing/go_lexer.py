"""Lexer for Go source files, with automatic semicolon insertion."""

from __future__ import annotations

import re

import ply.lex as lex

from partial_types.errors import ParseFailure

_SIMPLE_ESCAPES = {
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
    "\\": "\\",
    "'": "'",
    '"': '"',
}

_ESCAPE_RE = re.compile(
    r"\\(?:([abfnrtv\\'\"])|x([0-9a-fA-F]{2})|([0-7]{3})|u([0-9a-fA-F]{4})|U([0-9a-fA-F]{8}))"
)


def unquote_go_string(literal: str) -> str:
    """Return the value of a Go string literal (raw or interpreted)."""
    if len(literal) < 2 or literal[0] != literal[-1] or literal[0] not in "`\"":
        raise ValueError(f"Not a Go string literal: {literal!r}")
    body = literal[1:-1]
    if literal[0] == "`":
        return body.replace("\r", "")

    out = bytearray()
    pos = 0
    for m in _ESCAPE_RE.finditer(body):
        out += body[pos:m.start()].encode("utf-8")
        simple, hex_byte, octal, short_uni, long_uni = m.groups()
        if simple:
            out += _SIMPLE_ESCAPES[simple].encode("utf-8")
        elif hex_byte:
            out.append(int(hex_byte, 16))
        elif octal:
            value = int(octal, 8)
            if value > 0xFF:
                raise ValueError(f"Octal escape out of range: \\{octal}")
            out.append(value)
        else:
            out += chr(int(short_uni or long_uni, 16)).encode("utf-8", "surrogatepass")
        pos = m.end()
    rest = body[pos:]
    if "\\" in rest:
        raise ValueError(f"Invalid escape in {literal!r}")
    out += rest.encode("utf-8")
    return out.decode("utf-8", errors="replace")


class GoLexer:
    """Lexer for tokenizing Go source.

    Only the tokens the declaration parser needs are distinguished; every
    other operator is an ``OP`` token and every non-string literal a
    ``LITERAL`` token.
    """

    # Reserved keywords the parser cares about; other keywords lex as IDENT
    reserved = {
        "package": "PACKAGE",
        "import": "IMPORT",
        "type": "TYPE",
        "struct": "STRUCT",
        "map": "MAP",
        "interface": "INTERFACE",
        "func": "FUNC",
        "chan": "CHAN",
        "var": "VAR",
        "const": "CONST",
    }

    tokens = [
        "IDENT",
        "LITERAL",
        "STRING",
        "LBRACE",
        "RBRACE",
        "LBRACKET",
        "RBRACKET",
        "LPAREN",
        "RPAREN",
        "STAR",
        "DOT",
        "ELLIPSIS",
        "COMMA",
        "SEMI",
        "ASSIGN",
        "ARROW",
        "OP",
        "NEWLINE",
    ] + list(reserved.values())

    # NEWLINE never reaches the parser: token() drops it or turns it into SEMI
    parser_tokens = [t for t in tokens if t != "NEWLINE"]

    # Token types after which a newline ends the statement
    SEMICOLON_AFTER = frozenset({"IDENT", "LITERAL", "STRING", "RPAREN", "RBRACKET", "RBRACE"})
    SEMICOLON_AFTER_OPS = frozenset({"++", "--"})

    t_ignore = " \t\r\f"

    def __init__(self) -> None:
        self.lexer: lex.Lexer = None  # type: ignore
        self._last: lex.LexToken | None = None
        self._eof = False

    # Function rules are matched in definition order, before string rules

    def t_LINE_COMMENT(self, t: lex.LexToken) -> None:
        r"//[^\n]*"

    def t_BLOCK_COMMENT(self, t: lex.LexToken) -> lex.LexToken | None:
        r"/\*(.|\n)*?\*/"
        newlines = t.value.count("\n")
        if newlines:
            t.lexer.lineno += newlines
            t.type = "NEWLINE"
            return t
        return None

    def t_NEWLINE(self, t: lex.LexToken) -> lex.LexToken:
        r"\n+"
        t.lexer.lineno += len(t.value)
        return t

    def t_STRING(self, t: lex.LexToken) -> lex.LexToken:
        r'"(\\.|[^"\\\n])*"|`[^`]*`'
        t.lexer.lineno += t.value.count("\n")
        t.raw = t.value
        try:
            t.value = unquote_go_string(t.value)
        except ValueError as exc:
            raise ParseFailure(
                f"{exc} (line {t.lineno}, position {t.lexpos})",
                line=t.lineno,
                position=t.lexpos,
            ) from None
        return t

    def t_LITERAL(self, t: lex.LexToken) -> lex.LexToken:
        r"0[xXbBoO][0-9a-fA-F_]+i?|(\d[\d_]*(\.[\d_]*)?|\.\d[\d_]*)([eE][+-]?\d+)?i?|'(\\.|[^'\\\n])+'"
        return t

    def t_ELLIPSIS(self, t: lex.LexToken) -> lex.LexToken:
        r"\.\.\."
        return t

    def t_ARROW(self, t: lex.LexToken) -> lex.LexToken:
        r"<-"
        return t

    def t_OP(self, t: lex.LexToken) -> lex.LexToken:
        r"<<=|>>=|&\^=|&&|\|\||\+\+|--|==|!=|<=|>=|:=|<<|>>|&\^|[-+*/%&|^]=|[-+/%&|^<>!~:?]"
        return t

    def t_IDENT(self, t: lex.LexToken) -> lex.LexToken:
        r"[a-zA-Z_\u0080-\uffff][a-zA-Z0-9_\u0080-\uffff]*"
        t.type = self.reserved.get(t.value, "IDENT")
        return t

    t_LBRACE = r"\{"
    t_RBRACE = r"\}"
    t_LBRACKET = r"\["
    t_RBRACKET = r"\]"
    t_LPAREN = r"\("
    t_RPAREN = r"\)"
    t_STAR = r"\*"
    t_DOT = r"\."
    t_COMMA = r","
    t_SEMI = r";"
    t_ASSIGN = r"="

    def t_error(self, t: lex.LexToken) -> None:
        raise ParseFailure(
            f"Illegal character '{t.value[0]}' (line {t.lineno}, position {t.lexpos})",
            line=t.lineno,
            position=t.lexpos,
        )

    def build(self, **kwargs) -> None:  # type: ignore
        """Build the lexer."""
        self.lexer = lex.lex(module=self, **kwargs)

    def input(self, data: str) -> None:
        """Set the input string to tokenize."""
        self.lexer.input(data)
        self.lexer.lineno = 1
        self._last = None
        self._eof = False

    def _needs_semicolon(self) -> bool:
        last = self._last
        if last is None:
            return False
        if last.type in self.SEMICOLON_AFTER:
            return True
        return last.type == "OP" and last.value in self.SEMICOLON_AFTER_OPS

    def _semicolon(self, lineno: int, lexpos: int) -> lex.LexToken:
        tok = lex.LexToken()
        tok.type = "SEMI"
        tok.value = "\n"
        tok.lineno = lineno
        tok.lexpos = lexpos
        return tok

    def token(self) -> lex.LexToken | None:
        """Return the next token, turning significant newlines into SEMI."""
        while True:
            tok = self.lexer.token()
            if tok is None:
                if self._eof:
                    return None
                self._eof = True
                if self._needs_semicolon():
                    semi = self._semicolon(self.lexer.lineno, self.lexer.lexpos)
                    self._last = semi
                    return semi
                return None
            if tok.type == "NEWLINE":
                if self._needs_semicolon():
                    semi = self._semicolon(tok.lineno, tok.lexpos)
                    self._last = semi
                    return semi
                continue
            self._last = tok
            return tok

    def tokenize(self, data: str) -> list[lex.LexToken]:
        """Tokenize the input and return all tokens."""
        self.input(data)
        tokens = []
        while True:
            tok = self.token()
            if tok is None:
                break
            tokens.append(tok)
        return tokens

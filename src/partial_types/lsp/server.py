"""Partial types language server — diagnostics and hover for Go files via pygls."""

from __future__ import annotations

from lsprotocol import types
from pygls.lsp.server import LanguageServer

from partial_types.config import GeneratorOptions
from partial_types.errors import GenerationError, ParseFailure
from partial_types.generator import Generator, walk_records
from partial_types.imports import ImportTable
from partial_types.model import SourceUnit
from partial_types.parsing import GoParser

# ---------------------------------------------------------------------------
# Helpers (module-level so they are easy to unit-test)
# ---------------------------------------------------------------------------


def lexpos_to_position(source: str, lexpos: int) -> types.Position:
    """Convert a character offset into an LSP ``Position(line, character)``."""
    line = source.count("\n", 0, lexpos)
    last_nl = source.rfind("\n", 0, lexpos)
    character = lexpos if last_nl == -1 else lexpos - last_nl - 1
    return types.Position(line=line, character=character)


def error_range(source: str, exc: GenerationError) -> types.Range:
    """Return the range a diagnostic for *exc* is attached to.

    Parse failures point at the offending token; generation errors cover the
    whole line of the declaration or field; errors without a location fall
    back to the last line of the document.
    """
    lines = source.split("\n")
    if isinstance(exc, ParseFailure) and exc.position is not None:
        start = lexpos_to_position(source, exc.position)
        end = types.Position(line=start.line, character=start.character + 1)
        return types.Range(start=start, end=end)
    if exc.line:
        line = min(exc.line - 1, len(lines) - 1)
        text = lines[line]
        indent = len(text) - len(text.lstrip())
        return types.Range(
            start=types.Position(line=line, character=indent),
            end=types.Position(line=line, character=len(text)),
        )
    last = max(len(lines) - 1, 0)
    return types.Range(
        start=types.Position(line=last, character=0),
        end=types.Position(line=last, character=0),
    )


def diagnostics_for(
    source: str, options: GeneratorOptions, parser: GoParser | None = None
) -> list[types.Diagnostic]:
    """Parse and generate *source*, returning a diagnostic for the failure, if any."""
    parser = parser or GoParser()
    try:
        unit = parser.parse(source)
        Generator(options).generate(unit)
    except GenerationError as exc:
        return [
            types.Diagnostic(
                range=error_range(source, exc),
                severity=types.DiagnosticSeverity.Error,
                source="partial-types",
                code=exc.kind,
                message=str(exc),
            )
        ]
    return []


def hover_text(
    unit: SourceUnit, line: int, word: str, options: GeneratorOptions
) -> str | None:
    """Describe the generated member for *word* on 1-based *line*, or None."""
    generator = Generator(options)
    imports = ImportTable.from_specs(unit.imports)
    for decl, shape in walk_records(unit):
        if decl.line == line and decl.name == word:
            return f"**{decl.name}** — partial type `{generator.type_name(decl)}`"
        for field in shape.fields:
            if field.line != line or field.name != word:
                continue
            try:
                accessor, mutator = generator.field_members(decl, field, imports)
            except GenerationError as exc:
                return f"**{field.name}** — {exc}"
            return (
                f"**{field.name}** — key `{accessor.key}`\n\n"
                "```go\n"
                f"{accessor.signature()}\n"
                f"{mutator.signature()}\n"
                "```"
            )
    return None


def _word_at_position(line_text: str, character: int) -> str:
    """Return the contiguous identifier-like word surrounding *character*."""
    if character < 0 or character >= len(line_text):
        return ""
    ch = line_text[character]
    if not (ch.isalnum() or ch == "_"):
        return ""
    left = character
    while left > 0 and (line_text[left - 1].isalnum() or line_text[left - 1] == "_"):
        left -= 1
    right = character
    while right < len(line_text) and (line_text[right].isalnum() or line_text[right] == "_"):
        right += 1
    return line_text[left:right]


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------

server = LanguageServer("partial-types-language-server", "0.1.0")
_parser = GoParser()
_options = GeneratorOptions()


@server.feature(types.TEXT_DOCUMENT_DID_OPEN)
def did_open(params: types.DidOpenTextDocumentParams) -> None:
    _validate_document(params.text_document.uri)


@server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
def did_change(params: types.DidChangeTextDocumentParams) -> None:
    _validate_document(params.text_document.uri)


def _validate_document(uri: str) -> None:
    doc = server.workspace.get_text_document(uri)
    diagnostics = diagnostics_for(doc.source, _options, _parser)
    server.text_document_publish_diagnostics(
        types.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(types.TEXT_DOCUMENT_HOVER)
def hover(params: types.HoverParams) -> types.Hover | None:
    doc = server.workspace.get_text_document(params.text_document.uri)
    if params.position.line >= len(doc.lines):
        return None
    word = _word_at_position(doc.lines[params.position.line], params.position.character)
    if not word:
        return None

    try:
        unit = _parser.parse(doc.source)
    except ParseFailure:
        return None

    content = hover_text(unit, params.position.line + 1, word, _options)
    if content is None:
        return None
    return types.Hover(
        contents=types.MarkupContent(
            kind=types.MarkupKind.Markdown,
            value=content,
        )
    )


def main() -> None:
    server.start_io()


if __name__ == "__main__":
    main()

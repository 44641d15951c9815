"""Translation of declared field types into output Go types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Union

from partial_types.errors import UnsupportedTypeShape
from partial_types.imports import ImportTable
from partial_types.model import (
    Mapping,
    Named,
    OpaqueType,
    Pointer,
    Qualified,
    Sequence,
    TypeExpr,
    render_type_expr,
)


@dataclass(frozen=True)
class GoIdent:
    """Unqualified type identifier."""

    name: str

    def render(self) -> str:
        return self.name


@dataclass(frozen=True)
class GoQualified:
    """Type identifier qualified by the package at ``path``.

    ``qualifier`` is the name the generated file refers to the package by.
    """

    path: str
    name: str
    qualifier: str

    def render(self) -> str:
        return f"{self.qualifier}.{self.name}"


@dataclass(frozen=True)
class GoPointer:
    elem: GoType

    def render(self) -> str:
        return "*" + self.elem.render()


@dataclass(frozen=True)
class GoSlice:
    elem: GoType

    def render(self) -> str:
        return "[]" + self.elem.render()


@dataclass(frozen=True)
class GoMap:
    key: GoType
    value: GoType

    def render(self) -> str:
        return f"map[{self.key.render()}]{self.value.render()}"


GoType = Union[GoIdent, GoQualified, GoPointer, GoSlice, GoMap]


def translate_type(expr: TypeExpr, imports: ImportTable) -> GoType:
    """Re-express a declared type as an output type, preserving its shape.

    Qualified names are resolved through *imports*.

    Raises:
        UnresolvedImport: If a qualified type's alias is not imported.
        UnsupportedTypeShape: If the expression is not a named, qualified,
            pointer, slice or map type.
    """
    if isinstance(expr, Named):
        return GoIdent(expr.name)
    if isinstance(expr, Qualified):
        path = imports.lookup(expr.alias)
        return GoQualified(path=path, name=expr.name, qualifier=expr.alias)
    if isinstance(expr, Pointer):
        return GoPointer(translate_type(expr.elem, imports))
    if isinstance(expr, Sequence):
        return GoSlice(translate_type(expr.elem, imports))
    if isinstance(expr, Mapping):
        return GoMap(
            translate_type(expr.key, imports),
            translate_type(expr.value, imports),
        )
    if isinstance(expr, OpaqueType):
        raise UnsupportedTypeShape(
            f"Unsupported {expr.kind} type '{render_type_expr(expr)}'"
        )
    raise UnsupportedTypeShape(f"Unsupported type expression {type(expr).__name__}")


def qualified_types(go_type: GoType) -> Iterator[GoQualified]:
    """Yield every qualified type inside *go_type*."""
    if isinstance(go_type, GoQualified):
        yield go_type
    elif isinstance(go_type, (GoPointer, GoSlice)):
        yield from qualified_types(go_type.elem)
    elif isinstance(go_type, GoMap):
        yield from qualified_types(go_type.key)
        yield from qualified_types(go_type.value)
